# src/calastro/features/config.py
from __future__ import annotations

"""
Feature-level constants.

- 24 solar terms: 0..345 deg (15-deg step) => name / kind (major|minor) / n (0..23)
- seasons and principal moon phases
- named observation sites

n = (deg_norm / 15) % 24, counted from the March equinox. Even n is a
major term (zhongqi, deg % 30 == 0), odd n a minor term (jieqi).
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from calastro.core import location as loc
from calastro.core.location import Location

SOLAR_TERMS: List[Tuple[int, str]] = [
    (0,   "Chunfen"),
    (15,  "Qingming"),
    (30,  "Guyu"),
    (45,  "Lixia"),
    (60,  "Xiaoman"),
    (75,  "Mangzhong"),
    (90,  "Xiazhi"),
    (105, "Xiaoshu"),
    (120, "Dashu"),
    (135, "Liqiu"),
    (150, "Chushu"),
    (165, "Bailu"),
    (180, "Qiufen"),
    (195, "Hanlu"),
    (210, "Shuangjiang"),
    (225, "Lidong"),
    (240, "Xiaoxue"),
    (255, "Daxue"),
    (270, "Dongzhi"),
    (285, "Xiaohan"),
    (300, "Dahan"),
    (315, "Lichun"),
    (330, "Yushui"),
    (345, "Jingzhe"),
]

SOLAR_TERM_DEGS: List[int] = [deg for deg, _ in SOLAR_TERMS]
SOLAR_TERM_NAME_BY_DEG: Dict[int, str] = {deg: name for deg, name in SOLAR_TERMS}

SEASONS: Dict[int, str] = {
    0: "march_equinox",
    90: "june_solstice",
    180: "september_equinox",
    270: "december_solstice",
}

MOON_PHASES: Dict[int, str] = {
    0: "new_moon",
    90: "first_quarter",
    180: "full_moon",
    270: "last_quarter",
}

PLACES: Dict[str, Location] = {
    "urbana": loc.URBANA,
    "greenwich": loc.GREENWICH,
    "mecca": loc.MECCA,
    "jerusalem": loc.JERUSALEM,
    "acre": loc.ACRE,
    "tehran": loc.TEHRAN,
    "ujjain": loc.UJJAIN,
    "babylon": loc.BABYLON,
    "padua": loc.PADUA,
    "paris": loc.PARIS,
    "cairo": loc.CAIRO,
    "mt_gerizim": loc.MT_GERIZIM,
    "bahai_tehran": loc.BAHAI_TEHRAN,
    "cfs_alert": loc.CFS_ALERT,
}


def place_from_name(name: str) -> Location:
    key = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return PLACES[key]
    except KeyError as e:
        raise ValueError(f"unknown place: {name!r} (known: {', '.join(sorted(PLACES))})") from e


def normalize_term_deg(deg: float) -> int:
    """
    Normalize arbitrary degree value into one of:
      0, 15, 30, ..., 345 (int)
    """
    d = float(deg) % 360.0
    # nearest 15-deg bin
    k = int(round(d / 15.0)) % 24
    return k * 15


def term_kind_from_n(n: int) -> str:
    return "major" if int(n) % 2 == 0 else "minor"


@dataclass(frozen=True)
class TermInfo:
    n: int
    deg: int
    kind: str
    name: str


def term_info_from_deg(deg: float) -> TermInfo:
    """
    Normalized info bundle for a (possibly float) solar longitude.
    """
    deg_norm = normalize_term_deg(deg)
    n = deg_norm // 15
    return TermInfo(n=n, deg=deg_norm, kind=term_kind_from_n(n), name=SOLAR_TERM_NAME_BY_DEG[deg_norm])


def phase_name(deg: float) -> str:
    d = int(round(float(deg) % 360.0)) % 360
    try:
        return MOON_PHASES[d]
    except KeyError as e:
        raise ValueError(f"not a principal moon phase: {deg}") from e
