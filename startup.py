# startup.py
# =============================================================================
# 引数解析と実行コンテキストの決定
#
# - サブコマンド: encode / decode / validate
# - 値の優先順位: コマンドライン > 設定ファイル(JSON) > 既定値
# - 解析結果は StartupContext（不変）として main へ渡す
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional
import argparse
import logging

import grid_locator
from config import Config, OUTPUT_STYLES

logger = logging.getLogger(__name__)

Command = Literal["encode", "decode", "validate"]


@dataclass(frozen=True)
class StartupContext:
    """
    startup.py の出力（main へ渡す“実行内容”）

    command:
      - "encode":   緯度経度 -> ロケーター
      - "decode":   ロケーター -> 緯度経度
      - "validate": ロケーターの厳密チェック

    should_exit / exit_reason:
      - 引数や設定値が不正なとき True。main はコマンドを実行せず終了する。
    """
    command: Command
    lat: Optional[float]
    lon: Optional[float]
    locators: tuple
    precision: int
    output: str
    digits: int
    log_level: str
    should_exit: bool
    exit_reason: str


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="maidenhead",
        description="Convert between Maidenhead grid locators and latitude/longitude.",
    )
    p.add_argument("--config", default="locator_config.json",
                   help="JSON settings file (default: %(default)s)")
    p.add_argument("--debug", action="store_true", help="enable debug logging")

    sub = p.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="latitude/longitude -> locator")
    enc.add_argument("lat", type=float, help="latitude in decimal degrees (e.g. 30.416941)")
    enc.add_argument("lon", type=float, help="longitude in decimal degrees (e.g. -97.663873)")
    enc.add_argument("-p", "--precision", type=int, default=None,
                     help="number of character pairs, %d-%d" % (
                         grid_locator.MIN_PRECISION, grid_locator.MAX_PRECISION))

    dec = sub.add_parser("decode", help="locator -> latitude/longitude")
    dec.add_argument("locators", nargs="+", metavar="LOCATOR")
    dec.add_argument("--output", choices=OUTPUT_STYLES, default=None)
    dec.add_argument("--digits", type=int, default=None)

    val = sub.add_parser("validate", help="strict locator check")
    val.add_argument("locators", nargs="+", metavar="LOCATOR")
    return p


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def _reject(ns: argparse.Namespace, reason: str, **values) -> StartupContext:
    return StartupContext(
        command=ns.command,
        lat=getattr(ns, "lat", None),
        lon=getattr(ns, "lon", None),
        locators=tuple(getattr(ns, "locators", ()) or ()),
        precision=values.get("precision", grid_locator.DEFAULT_PRECISION),
        output=values.get("output", "center"),
        digits=values.get("digits", 6),
        log_level=values.get("log_level", "WARNING"),
        should_exit=True,
        exit_reason=reason,
    )


def init_startup(argv: Optional[list[str]] = None,
                 config: Optional[Config] = None) -> StartupContext:
    """
    起動時に最初に呼ぶ想定の関数。
    - 引数解析（不正な引数は argparse が SystemExit(2)）
    - 設定ファイルの読み込みと上書き
    - precision / output / digits の妥当性判定
    """
    ns = parse_args(argv)
    if config is None:
        config = Config(ns.config)

    precision = getattr(ns, "precision", None)
    if precision is None:
        precision = config.get("encode", "precision")
    output = getattr(ns, "output", None) or config.get("decode", "output")
    digits = getattr(ns, "digits", None)
    if digits is None:
        digits = config.get("decode", "digits")

    debug = bool(ns.debug or config.get("debug"))
    log_level = "DEBUG" if debug else str(config.get("logging", "level") or "WARNING").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning("Unknown log level %r; using WARNING", log_level)
        log_level = "WARNING"

    if (isinstance(precision, bool) or not isinstance(precision, int)
            or not grid_locator.MIN_PRECISION <= precision <= grid_locator.MAX_PRECISION):
        return _reject(ns, f"Invalid precision: {precision!r} "
                           f"(expected {grid_locator.MIN_PRECISION}-{grid_locator.MAX_PRECISION}).",
                       log_level=log_level)
    if output not in OUTPUT_STYLES:
        return _reject(ns, f"Invalid output style: {output!r}.",
                       precision=precision, log_level=log_level)
    if isinstance(digits, bool) or not isinstance(digits, int) or digits < 0:
        return _reject(ns, f"Invalid digits: {digits!r}.",
                       precision=precision, output=output, log_level=log_level)

    logger.debug("Startup init ok: command=%s precision=%s output=%s",
                 ns.command, precision, output)

    return StartupContext(
        command=ns.command,
        lat=getattr(ns, "lat", None),
        lon=getattr(ns, "lon", None),
        locators=tuple(getattr(ns, "locators", ()) or ()),
        precision=precision,
        output=output,
        digits=digits,
        log_level=log_level,
        should_exit=False,
        exit_reason="",
    )
