from __future__ import annotations

"""
Shared helpers for the developer scripts in tools/.

Dates on the command line are Gregorian (YYYY-MM-DD) and are turned into
RD moments at 00:00 UT; the end date is exclusive.
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import Tuple

from calastro.core.gregorian import fixed_from_gregorian
from calastro.core.providers.skyfield_provider import default_ephemeris_path


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--start", required=True, help="first day, YYYY-MM-DD")
    parser.add_argument("--end", required=True, help="day after the last, YYYY-MM-DD")
    parser.add_argument(
        "--ephemeris",
        default="",
        help="path to a .bsp file (default: CALASTRO_EPHEMERIS_PATH or data/de440s.bsp)",
    )
    parser.add_argument("--json", action="store_true", help="print one JSON document")


def moment_range(args: argparse.Namespace) -> Tuple[float, float]:
    start, end = date.fromisoformat(args.start), date.fromisoformat(args.end)
    if end <= start:
        raise SystemExit(f"--end ({end}) must be after --start ({start})")
    return (
        float(fixed_from_gregorian(start.year, start.month, start.day)),
        float(fixed_from_gregorian(end.year, end.month, end.day)),
    )


def ephemeris_or_skip(arg: str) -> Path:
    """Ephemeris file to use; exits with SKIP when there is none."""
    path = Path(arg).expanduser() if arg.strip() else default_ephemeris_path()
    if not path.exists():
        skip(f"ephemeris not found: {path} (pass --ephemeris or set CALASTRO_EPHEMERIS_PATH)")
    return path


def print_json(obj: object) -> None:
    print(json.dumps(obj, indent=2))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
