from __future__ import annotations
from typing import Final, Dict, Tuple

INDEX_NAME: Final[str] = "t_start"
DEFAULT_TZ: Final[str] = "Europe/Amsterdam"

# Header version tokens -> (major, minor)
VERSIONS: Dict[str, Tuple[int, int]] = {
    "v10": (1, 0),
    "v12": (1, 2),
}
BASE_VERSION: Final[Tuple[int, int]] = (1, 0)

# Extension suffix -> (gas, recursive)
EXTENSIONS: Dict[str, Tuple[bool, bool]] = {
    "g": (True, False),
    "r": (False, True),
    "gr": (True, True),
    "rg": (True, True),
}

START_VALUE: Final[str] = "START"
END_VALUE: Final[str] = "END"
SEVERITIES: Final[Tuple[str, ...]] = ("H", "L")
HIGH_SEVERITY: Final[str] = "H"
LOW_SEVERITY: Final[str] = "L"
INFORMATION_TYPES: Final[Tuple[str, ...]] = ("E", "G")
GAS_INFORMATION_TYPE: Final[str] = "G"
MAX_MESSAGE_LEN: Final[int] = 1024

MONTHS: Dict[str, int] = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}
YEAR_BASE: Final[int] = 2000

# DST flag -> is daylight saving; offsets are CEST / CET
DST_FLAGS: Dict[str, bool] = {"S": True, "W": False}
UTC_OFFSET_HOURS: Dict[bool, int] = {True: 2, False: 1}

PHASES: Final[int] = 3
DEFAULT_ENERGY_WINDOW: Final[int] = 12

# Series frame columns
PHASE_COLS: Final[list[str]] = ["phase_1", "phase_2", "phase_3"]
ENERGY_COLS: Final[list[str]] = ["consumed", "produced"]
