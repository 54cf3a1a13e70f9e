# test_main.py
import json

from main import main


def _run(tmp_path, *args):
    return main(["--config", str(tmp_path / "cfg.json"), *args])


def test_encode_prints_locator(tmp_path, capsys):
    assert _run(tmp_path, "encode", "30.416941", "-97.663873") == 0
    assert capsys.readouterr().out == "EM10ek00\n"


def test_encode_with_precision(tmp_path, capsys):
    assert _run(tmp_path, "encode", "53.593923", "-1.022569", "-p", "3") == 0
    assert capsys.readouterr().out.strip() == "IO93lo"


def test_encode_out_of_range_fails(tmp_path, capsys):
    assert _run(tmp_path, "encode", "90", "0") == 1
    assert capsys.readouterr().out == ""


def test_decode_center(tmp_path, capsys):
    assert _run(tmp_path, "decode", "IO93") == 0
    assert capsys.readouterr().out.strip() == "53.500000 -1.000000"


def test_decode_box(tmp_path, capsys):
    assert _run(tmp_path, "decode", "JJ00", "--output", "box", "--digits", "2") == 0
    assert capsys.readouterr().out.strip() == "0.00 0.00 1.00 2.00"


def test_decode_json(tmp_path, capsys):
    assert _run(tmp_path, "decode", "io 93", "--output", "json") == 0
    data = json.loads(capsys.readouterr().out)
    assert data == {
        "locator": "IO93",
        "precision": 2,
        "x": -2.0,
        "y": 53.0,
        "width": 2.0,
        "height": 1.0,
        "cx": -1.0,
        "cy": 53.5,
    }


def test_decode_reports_bad_locator_but_continues(tmp_path, capsys):
    assert _run(tmp_path, "decode", "ZZ00", "JJ") == 1
    assert capsys.readouterr().out.strip() == "5.000000 10.000000"


def test_validate(tmp_path, capsys):
    assert _run(tmp_path, "validate", "RR99xx") == 0
    assert _run(tmp_path, "validate", "RR99xx", "AA0") == 1
    out = capsys.readouterr().out.splitlines()
    assert out == ["RR99xx: valid", "RR99xx: valid", "AA0: invalid"]


def test_rejected_startup_returns_2(tmp_path, capsys):
    assert _run(tmp_path, "encode", "1", "2", "-p", "0") == 2
    assert capsys.readouterr().out == ""
