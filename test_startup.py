# test_startup.py
import json

import pytest

from config import Config
from startup import init_startup


def _config(tmp_path, data=None):
    path = tmp_path / "cfg.json"
    if data is not None:
        path.write_text(json.dumps(data), encoding="utf-8")
    return Config(str(path))


def test_encode_uses_config_defaults(tmp_path):
    ctx = init_startup(["encode", "30.4", "-97.6"], config=_config(tmp_path))
    assert ctx.command == "encode"
    assert ctx.lat == 30.4
    assert ctx.lon == -97.6
    assert ctx.precision == 4
    assert ctx.log_level == "WARNING"
    assert ctx.should_exit is False
    assert ctx.exit_reason == ""


def test_command_line_overrides_config(tmp_path):
    cfg = _config(tmp_path, {"encode": {"precision": 2}})
    assert init_startup(["encode", "1", "2"], config=cfg).precision == 2
    assert init_startup(["encode", "1", "2", "-p", "5"], config=cfg).precision == 5


def test_decode_collects_locators_and_output(tmp_path):
    ctx = init_startup(["decode", "IO93", "EM10ek00", "--output", "box", "--digits", "3"],
                       config=_config(tmp_path))
    assert ctx.command == "decode"
    assert ctx.locators == ("IO93", "EM10ek00")
    assert ctx.output == "box"
    assert ctx.digits == 3


def test_invalid_precision_is_rejected(tmp_path):
    ctx = init_startup(["encode", "1", "2", "--precision", "7"], config=_config(tmp_path))
    assert ctx.should_exit is True
    assert "precision" in ctx.exit_reason


def test_invalid_config_value_is_rejected(tmp_path):
    cfg = _config(tmp_path, {"decode": {"output": "xml"}})
    ctx = init_startup(["decode", "IO93"], config=cfg)
    assert ctx.should_exit is True
    assert "output" in ctx.exit_reason


def test_debug_flag_sets_debug_level(tmp_path):
    ctx = init_startup(["--debug", "validate", "AA"], config=_config(tmp_path))
    assert ctx.log_level == "DEBUG"


def test_unknown_log_level_falls_back(tmp_path):
    cfg = _config(tmp_path, {"logging": {"level": "loud"}})
    ctx = init_startup(["validate", "AA"], config=cfg)
    assert ctx.log_level == "WARNING"


def test_missing_command_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as e:
        init_startup([], config=_config(tmp_path))
    assert e.value.code == 2


def test_config_path_option_is_used(tmp_path):
    path = tmp_path / "other.json"
    path.write_text(json.dumps({"decode": {"digits": 2}}), encoding="utf-8")
    ctx = init_startup(["--config", str(path), "decode", "JJ"])
    assert ctx.digits == 2
