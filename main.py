"""
maidenhead — グリッドロケーター変換ツール
コマンドライン エントリーポイント

  maidenhead encode 30.416941 -97.663873        -> EM10ek00
  maidenhead decode IO93lo72 --output json
  maidenhead validate RR99xx AA0

Exit codes: 0 = OK, 1 = invalid locator / coordinates, 2 = usage error
"""
from __future__ import annotations

import json
import logging
import sys

import grid_locator
import startup


def _setup_logging() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _format_rectangle(rect: grid_locator.Rectangle, locator: str,
                      output: str, digits: int) -> str:
    if output == "json":
        return json.dumps({
            "locator": grid_locator.normalize_locator(locator),
            "precision": grid_locator.precision_of(locator),
            "x": rect.x,
            "y": rect.y,
            "width": rect.width,
            "height": rect.height,
            "cx": rect.cx,
            "cy": rect.cy,
        })
    if output == "box":
        # south west north east
        return " ".join(f"{v:.{digits}f}" for v in (rect.south, rect.west, rect.north, rect.east))
    return f"{rect.cy:.{digits}f} {rect.cx:.{digits}f}"


def run_encode(ctx: startup.StartupContext, log: logging.Logger) -> int:
    try:
        locator = grid_locator.encode(ctx.lat, ctx.lon, ctx.precision)
    except ValueError as e:
        log.error("encode failed: %s", e)
        return 1
    print(locator)
    return 0


def run_decode(ctx: startup.StartupContext, log: logging.Logger) -> int:
    status = 0
    for locator in ctx.locators:
        rect = grid_locator.decode(locator)
        if rect is None:
            log.error("Unparseable locator: %r", locator)
            status = 1
            continue
        print(_format_rectangle(rect, locator, ctx.output, ctx.digits))
    return status


def run_validate(ctx: startup.StartupContext, log: logging.Logger) -> int:
    status = 0
    for locator in ctx.locators:
        ok = grid_locator.is_valid_locator(locator)
        print(f"{locator}: {'valid' if ok else 'invalid'}")
        if not ok:
            status = 1
    return status


_COMMANDS = {
    "encode": run_encode,
    "decode": run_decode,
    "validate": run_validate,
}


def main(argv: list[str]) -> int:
    _setup_logging()
    log = logging.getLogger("maidenhead.main")

    ctx = startup.init_startup(argv)
    logging.getLogger().setLevel(ctx.log_level)
    log.debug("startup: command=%s precision=%s output=%s digits=%s should_exit=%s",
              ctx.command, ctx.precision, ctx.output, ctx.digits, ctx.should_exit)

    if ctx.should_exit:
        log.error("Startup rejected: %s", ctx.exit_reason)
        return 2

    return _COMMANDS[ctx.command](ctx, log)


def entry() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    entry()
