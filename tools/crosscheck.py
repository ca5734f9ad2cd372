from __future__ import annotations

"""
Compare the built-in solar and lunar series with a JPL ephemeris.

Samples both providers every --step hours and reports the worst longitude
differences, then lists the solar terms found by each.

Uses:
- calastro.core.astronomy.AstronomyEngine
- calastro.core.providers.skyfield_provider.SkyfieldProvider
- calastro.core.solarterms.solar_terms_between
"""

import argparse

from calastro.core.angles import angdiff180
from calastro.core.astronomy import AstronomyEngine, CalendricalProvider
from calastro.core.providers.skyfield_provider import SkyfieldProvider
from calastro.core.solarterms import solar_terms_between
from calastro.core.timeutil import datetime_from_moment
from calastro.features.config import term_info_from_deg

from tools.common import add_common_args, ephemeris_or_skip, moment_range, print_json


def _samples(start: float, end: float, step: float):
    out = []
    t = start
    while t < end:
        out.append(t)
        t += step
    return out


def _worst(a, b, tees):
    diffs = [abs(angdiff180(x - y)) for x, y in zip(a, b)]
    i = max(range(len(diffs)), key=diffs.__getitem__)
    return diffs[i], tees[i]


def main() -> None:
    parser = argparse.ArgumentParser(description="series vs ephemeris cross-check")
    add_common_args(parser)
    parser.add_argument("--step", type=float, default=6.0, help="sample step (hours)")
    args = parser.parse_args()

    start, end = moment_range(args)
    ephemeris = ephemeris_or_skip(args.ephemeris)
    tees = _samples(start, end, args.step / 24)

    ref = AstronomyEngine(provider=SkyfieldProvider(ephemeris=ephemeris))
    ours = AstronomyEngine(provider=CalendricalProvider())

    sun_diff, sun_at = _worst(ours.sun_lon_many(tees), ref.sun_lon_many(tees), tees)
    moon_diff, moon_at = _worst(ours.moon_lon_many(tees), ref.moon_lon_many(tees), tees)

    ours_terms = solar_terms_between(start, end)
    ref_terms = dict(solar_terms_between(start, end, engine=ref))
    rows = []
    for deg, t in ours_terms:
        r = ref_terms.get(deg)
        rows.append(
            {
                "name": term_info_from_deg(deg).name,
                "degree": int(deg),
                "series_utc": datetime_from_moment(t).isoformat(),
                "ephemeris_utc": datetime_from_moment(r).isoformat() if r is not None else None,
                "diff_seconds": round((t - r) * 86400, 1) if r is not None else None,
            }
        )

    summary = {
        "samples": len(tees),
        "sun_max_diff_deg": sun_diff,
        "sun_max_diff_at": datetime_from_moment(sun_at).isoformat(),
        "moon_max_diff_deg": moon_diff,
        "moon_max_diff_at": datetime_from_moment(moon_at).isoformat(),
    }

    if args.json:
        print_json({"summary": summary, "solar_terms": rows})
        return

    print(f"samples={summary['samples']}")
    print(f"sun  max |diff| = {sun_diff:.5f} deg at {summary['sun_max_diff_at']}")
    print(f"moon max |diff| = {moon_diff:.5f} deg at {summary['moon_max_diff_at']}")
    print()
    for r in rows:
        print(f"{r['name']:<12} deg={r['degree']:03d}  series={r['series_utc']}  diff={r['diff_seconds']}s")


if __name__ == "__main__":
    main()
