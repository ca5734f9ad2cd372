from __future__ import annotations

from datetime import timedelta

import pytest

from calastro.core.config import EngineConfig
from calastro.core.gregorian import fixed_from_gregorian
from calastro.core.location import MECCA
from calastro.features.config import (
    SOLAR_TERM_DEGS,
    phase_name,
    place_from_name,
    term_info_from_deg,
)
from calastro.features.events import (
    moon_phase_events_between,
    season_events_for_year,
    solar_term_events_between,
)

JAN_2000 = float(fixed_from_gregorian(2000, 1, 1))
JAN_2001 = float(fixed_from_gregorian(2001, 1, 1))


def test_term_info():
    info = term_info_from_deg(14.9)
    assert (info.deg, info.n, info.kind, info.name) == (15, 1, "minor", "Qingming")
    assert term_info_from_deg(359.9).name == "Chunfen"
    assert term_info_from_deg(270.0).kind == "major"
    assert len(SOLAR_TERM_DEGS) == 24


def test_phase_name():
    assert phase_name(180.0) == "full_moon"
    assert phase_name(360.0) == "new_moon"
    with pytest.raises(ValueError):
        phase_name(45.0)


def test_place_from_name():
    assert place_from_name(" Mecca ") == MECCA
    assert place_from_name("mt-gerizim").elevation == 881
    with pytest.raises(ValueError):
        place_from_name("atlantis")


def test_solar_term_events_2000():
    events = solar_term_events_between(JAN_2000, JAN_2001)
    assert len(events) == 24
    assert events[0].name == "Xiaohan"
    assert events[0].local_date == "2000-01-06"
    assert all(e.kind == "solar_term" for e in events)
    assert [e.universal for e in events] == sorted(e.universal for e in events)
    majors = [e for e in events if e.term_kind == "major"]
    assert len(majors) == 12
    assert all(e.deg % 30 == 0 for e in majors)


def test_season_events_with_zone_name():
    events = season_events_for_year(2000, tz="Asia/Tokyo")
    assert [e.name for e in events] == [
        "march_equinox",
        "june_solstice",
        "september_equinox",
        "december_solstice",
    ]
    june = events[1]
    assert june.local.utcoffset() == timedelta(hours=9)
    # 01:48 UT is 10:48 in Tokyo, same calendar day
    assert june.local_date == "2000-06-21"
    assert june.utc.hour == 1


def test_events_read_in_standard_time_of_location():
    events = season_events_for_year(2000, location=MECCA)
    december = events[-1]
    assert december.standard == pytest.approx(december.universal + 3 / 24)
    assert december.local.utcoffset() == timedelta(hours=3)


def test_moon_phase_events_january_2000():
    events = moon_phase_events_between(JAN_2000, JAN_2000 + 31)
    assert [e.name for e in events] == ["new_moon", "first_quarter", "full_moon", "last_quarter"]
    assert [e.local_date for e in events] == ["2000-01-06", "2000-01-14", "2000-01-21", "2000-01-28"]


def test_moon_phase_events_subset():
    events = moon_phase_events_between(JAN_2000, JAN_2001, phases=(180.0,))
    assert len(events) == 12
    assert {e.deg for e in events} == {180}


def test_engine_config_from_env():
    cfg = EngineConfig.from_env({})
    assert cfg.search.search_limit is None
    assert cfg.visibility.criterion == "shaukat"

    cfg = EngineConfig.from_env(
        {
            "CALASTRO_ANGULAR_EPSILON": "1e-6",
            "CALASTRO_SEARCH_LIMIT": "50",
            "CALASTRO_CRESCENT_CRITERION": "Yallop",
        }
    )
    assert cfg.search.angular_epsilon == 1e-6
    assert cfg.search.search_limit == 50
    assert cfg.visibility.criterion == "yallop"
    assert EngineConfig.from_env({"CALASTRO_SEARCH_LIMIT": "0"}).search.search_limit is None

    with pytest.raises(ValueError):
        EngineConfig.from_env({"CALASTRO_CRESCENT_CRITERION": "naked_eye"})
    with pytest.raises(ValueError):
        EngineConfig.from_env({"CALASTRO_ANGULAR_EPSILON": "-1"})
