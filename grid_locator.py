"""
グリッドロケーター（Maidenhead Locator System）変換モジュール
ロケーター文字列 <-> 緯度経度（10進数）の双方向変換

decode(locator) -> Rectangle | None
encode(lat, lon, precision=4) -> str
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

MIN_PRECISION = 1
MAX_PRECISION = 5
DEFAULT_PRECISION = 4

# フィールドの初期解像度（経度20度×緯度10度）
FIELD_LON_RES = 20.0
FIELD_LAT_RES = 10.0

# レベルごとの (種別, 文字数, 除数)
# field / square / subsquare / extended square / extended subsquare
_LEVELS = (
    ("letter", 18, 1),
    ("digit", 10, 10),
    ("letter", 24, 24),
    ("digit", 10, 10),
    ("letter", 24, 24),
)


@dataclass(frozen=True)
class Rectangle:
    """
    ロケーターが表す矩形（度単位）

    x, y:          左下隅（経度, 緯度）
    width, height: 経度方向・緯度方向の大きさ
    cx, cy は常に x, y, width, height から計算する。
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def cx(self) -> float:
        return self.x + self.width / 2

    @property
    def cy(self) -> float:
        return self.y + self.height / 2

    @property
    def west(self) -> float:
        return self.x

    @property
    def south(self) -> float:
        return self.y

    @property
    def east(self) -> float:
        return self.x + self.width

    @property
    def north(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        """(緯度, 経度) の順"""
        return self.cy, self.cx

    def contains(self, lat: float, lon: float, tol: float = 0.0) -> bool:
        return (self.south - tol <= lat <= self.north + tol
                and self.west - tol <= lon <= self.east + tol)


def _letter_index(ch: str, count: int) -> Optional[int]:
    """'a'-'z' -> 0-25。count 以上・英字以外は None"""
    if len(ch) != 1 or not ('a' <= ch <= 'z'):
        return None
    idx = ord(ch) - ord('a')
    return idx if idx < count else None


def _digit_index(ch: str) -> Optional[int]:
    """'0'-'9' -> 0-9"""
    if len(ch) != 1 or not ('0' <= ch <= '9'):
        return None
    return ord(ch) - ord('0')


def _pair_indexes(text: str, pos: int, level: int) -> Optional[Tuple[int, int]]:
    """text[pos:pos+2] をレベル level のペアとして読む。読めなければ None"""
    pair = text[pos:pos + 2]
    if len(pair) < 2:
        return None
    kind, count, _ = _LEVELS[level]
    if kind == "digit":
        lon_idx, lat_idx = _digit_index(pair[0]), _digit_index(pair[1])
    else:
        lon_idx, lat_idx = _letter_index(pair[0], count), _letter_index(pair[1], count)
    if lon_idx is None or lat_idx is None:
        return None
    return lon_idx, lat_idx


def _to_char(index: int, level: int) -> str:
    kind, _, _ = _LEVELS[level]
    if kind == "digit":
        return str(index)
    # フィールドは大文字、サブスクエア以降は小文字
    base = 'A' if level == 0 else 'a'
    return chr(ord(base) + index)


def _scan(locator: str) -> list:
    """
    正規化した文字列を先頭から走査し、読めたペアのインデックスを返す。
    最初に文法に合わない文字が出たところで打ち切る（残りは無視）。
    """
    pairs = []
    for level in range(MAX_PRECISION):
        idx = _pair_indexes(locator, level * 2, level)
        if idx is None:
            break
        pairs.append(idx)
    return pairs


def _normalize(locator: str) -> str:
    return "".join(locator.split()).lower()


def decode(locator: str) -> Optional[Rectangle]:
    """
    ロケーター文字列を矩形に変換する。

    大文字小文字・空白は無視する。フィールド（先頭2文字 a-r）が読めなければ None。
    後続のペアは square(0-9) / subsquare(a-x) / extended square(0-9) /
    extended subsquare(a-x) の順に、読める所まで読む。
    """
    if not isinstance(locator, str):
        return None
    pairs = _scan(_normalize(locator))
    if not pairs:
        logger.debug("decode failed: %r", locator)
        return None

    lon_res, lat_res = FIELD_LON_RES, FIELD_LAT_RES
    lon, lat = -180.0, -90.0
    for level, (lon_idx, lat_idx) in enumerate(pairs):
        divisor = _LEVELS[level][2]
        lon_res /= divisor
        lat_res /= divisor
        # 1文字目が経度、2文字目が緯度（全レベル共通）
        lon += lon_idx * lon_res
        lat += lat_idx * lat_res

    return Rectangle(x=lon, y=lat, width=lon_res, height=lat_res)


def precision_of(locator: str) -> int:
    """decode が読み取るペア数（読めなければ 0）"""
    if not isinstance(locator, str):
        return 0
    return len(_scan(_normalize(locator)))


def normalize_locator(locator: str) -> Optional[str]:
    """読み取れた部分を正規表記（例: IO93lo72）にして返す"""
    if not isinstance(locator, str):
        return None
    pairs = _scan(_normalize(locator))
    if not pairs:
        return None
    return "".join(_to_char(lon_idx, level) + _to_char(lat_idx, level)
                   for level, (lon_idx, lat_idx) in enumerate(pairs))


def is_valid_locator(value) -> bool:
    """
    厳密チェック：空白を除いた文字列全体が 2-10 文字のロケーターであること。
    decode と違い、末尾の余分な文字は許さない。
    """
    if not isinstance(value, str):
        return False
    text = _normalize(value)
    if len(text) % 2 != 0 or not (2 <= len(text) <= MAX_PRECISION * 2):
        return False
    return len(_scan(text)) * 2 == len(text)


def _check_range(lat: float, lon: float, precision: int) -> None:
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValueError(f"precision must be an integer, got {precision!r}")
    if not (MIN_PRECISION <= precision <= MAX_PRECISION):
        raise ValueError(
            f"precision must be between {MIN_PRECISION} and {MAX_PRECISION}, got {precision}")
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError(f"coordinates must be finite: lat={lat}, lon={lon}")
    if not (-90.0 <= lat < 90.0):
        raise ValueError(f"latitude out of range [-90, 90): {lat}")
    if not (-180.0 <= lon < 180.0):
        raise ValueError(f"longitude out of range [-180, 180): {lon}")


def encode(lat: float, lon: float, precision: int = DEFAULT_PRECISION) -> str:
    """
    緯度経度をグリッドロケーターに変換

    Args:
        lat: 緯度（度）北緯が正、[-90, 90)
        lon: 経度（度）東経が正、[-180, 180)
        precision: ペア数（1-5）4で8桁、5で10桁

    Returns:
        グリッドロケーター文字列（例: EM10ek00）

    Raises:
        ValueError: 範囲外の座標・精度
    """
    lat = float(lat)
    lon = float(lon)
    _check_range(lat, lon, precision)

    # 経度を0-360、緯度を0-180に正規化
    adj_lon = lon + 180.0
    adj_lat = lat + 90.0
    lon_res, lat_res = FIELD_LON_RES, FIELD_LAT_RES

    grid = ""
    for level in range(precision):
        _, count, divisor = _LEVELS[level]
        lon_res /= divisor
        lat_res /= divisor
        # 浮動小数の余りで範囲外にならないようクランプ
        lon_idx = min(max(math.floor(adj_lon / lon_res), 0), count - 1)
        lat_idx = min(max(math.floor(adj_lat / lat_res), 0), count - 1)
        grid += _to_char(lon_idx, level) + _to_char(lat_idx, level)
        adj_lon -= lon_idx * lon_res
        adj_lat -= lat_idx * lat_res

    logger.debug("encode lat=%s lon=%s precision=%d -> %s", lat, lon, precision, grid)
    return grid
