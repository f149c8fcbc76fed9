# pathviz/app/settings.py
#!/usr/bin/env python3
"""
Runtime settings.

- ENV: PATHVIZ_SPEED_MS, PATHVIZ_PATH_MS, PATHVIZ_LOG_LEVEL
- CLI: --speed=MS  --path-speed=MS  --log-level=LEVEL   (CLI wins over ENV)

Grid size and the initial markers are fixed for a session.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from pathviz.core.grid import ROWS, COLS
from pathviz.core.types import Coord

logger = logging.getLogger(__name__)

START: Coord = (5, 5)
END: Coord = (15, 35)

SPEED_MS_DEFAULT = 10       # visitation cadence
SPEED_MS_MIN = 1
SPEED_MS_MAX = 100
PATH_MS_DEFAULT = 50        # shortest-path cadence
PATH_MS_MIN = 1
PATH_MS_MAX = 500
LOG_LEVEL_DEFAULT = "INFO"


@dataclass
class Settings:
    rows: int = ROWS
    cols: int = COLS
    start: Coord = START
    end: Coord = END
    speed_ms: int = SPEED_MS_DEFAULT
    path_ms: int = PATH_MS_DEFAULT
    log_level: str = LOG_LEVEL_DEFAULT


def clamp_speed(ms: int) -> int:
    return int(max(SPEED_MS_MIN, min(SPEED_MS_MAX, ms)))


def _lookup(key: str, flag: str, argv: Sequence[str], environ: Mapping[str, str]) -> Optional[str]:
    value = environ.get(key)
    for arg in argv:
        if arg.startswith(f"--{flag}="):
            value = arg.split("=", 1)[1]
    return value


def _int_option(raw: Optional[str], name: str, default: int, lo: int, hi: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not an integer, using %d", name, raw, default)
        return default
    if not lo <= value <= hi:
        clamped = max(lo, min(hi, value))
        logger.warning("%s=%d outside %d..%d, using %d", name, value, lo, hi, clamped)
        return clamped
    return value


def _level_option(raw: Optional[str]) -> str:
    if not raw:
        return LOG_LEVEL_DEFAULT
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("unknown log level %r, using %s", raw, LOG_LEVEL_DEFAULT)
        return LOG_LEVEL_DEFAULT
    return level


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ
    return Settings(
        speed_ms=_int_option(_lookup("PATHVIZ_SPEED_MS", "speed", argv, environ),
                             "speed", SPEED_MS_DEFAULT, SPEED_MS_MIN, SPEED_MS_MAX),
        path_ms=_int_option(_lookup("PATHVIZ_PATH_MS", "path-speed", argv, environ),
                            "path-speed", PATH_MS_DEFAULT, PATH_MS_MIN, PATH_MS_MAX),
        log_level=_level_option(_lookup("PATHVIZ_LOG_LEVEL", "log-level", argv, environ)),
    )
