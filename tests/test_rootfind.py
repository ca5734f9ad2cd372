from __future__ import annotations

import math

import pytest

from calastro.core.angles import mod
from calastro.core.config import SearchConfig
from calastro.core.results import BracketError, SearchLimitError
from calastro.core.rootfind import (
    binary_search,
    bisect_sign_change,
    bracket_by_scan,
    final_index,
    invert_angular,
    next_index,
)


def test_binary_search_sqrt2():
    x = binary_search(0.0, 2.0, lambda lo, hi: hi - lo < 1e-10, lambda m: m * m >= 2.0)
    assert x == pytest.approx(math.sqrt(2.0), abs=1e-9)


def test_invert_angular_linear():
    t = invert_angular(lambda t: mod(10 * t, 360), 45.0, 0.0, 10.0)
    assert t == pytest.approx(4.5, abs=1e-4)


def test_invert_angular_across_wrap():
    t = invert_angular(lambda t: mod(350 + 2 * t, 360), 5.0, 0.0, 10.0)
    assert t == pytest.approx(7.5, abs=1e-4)


def test_invert_angular_custom_epsilon():
    t = invert_angular(lambda t: mod(10 * t, 360), 45.0, 0.0, 10.0, 1e-9)
    assert t == pytest.approx(4.5, abs=1e-8)


def test_invert_angular_without_crossing_fails_loudly():
    with pytest.raises(BracketError):
        invert_angular(lambda t: mod(10 * t, 360), 200.0, 0.0, 10.0)


def test_invert_angular_rejects_bad_input():
    with pytest.raises(ValueError):
        invert_angular(lambda t: t, 1.0, 5.0, 1.0)
    with pytest.raises(ValueError):
        invert_angular(lambda t: t, 1.0, 0.0, 5.0, 0.0)


def test_invert_angular_residual_threshold_from_config():
    cfg = SearchConfig(angular_epsilon=1.0, max_residual_deg=0.001)
    # a one-day stopping width on a 10 deg/day function leaves a few degrees of residual
    with pytest.raises(BracketError):
        invert_angular(lambda t: mod(10 * t, 360), 44.0, 0.0, 10.0, config=cfg)


def test_next_and_final_index():
    assert next_index(0, lambda k: k >= 3) == 3
    assert next_index(5, lambda k: True) == 5
    assert final_index(0, lambda k: k < 4) == 3
    assert final_index(0, lambda k: False) == -1


def test_index_search_limit():
    with pytest.raises(SearchLimitError):
        next_index(0, lambda k: False, limit=10)
    with pytest.raises(SearchLimitError):
        final_index(0, lambda k: True, limit=10)
    assert next_index(0, lambda k: k >= 9, limit=10) == 9


def test_bracket_by_scan_counts_exact_hit_once():
    assert bracket_by_scan(lambda t: t, 0.0, 1.0, 0.25) == [(0.0, 0.0)]
    assert bracket_by_scan(lambda t: t - 0.5, 0.0, 1.0, 0.25) == [(0.5, 0.5)]


def test_bracket_by_scan_sign_changes():
    out = bracket_by_scan(lambda t: math.sin(t), 0.5, 7.0, 0.5)
    assert len(out) == 2
    (a1, b1), (a2, b2) = out
    assert a1 < math.pi < b1
    assert a2 < 2 * math.pi < b2
    assert bracket_by_scan(lambda t: t, 1.0, 1.0, 0.1) == []
    with pytest.raises(ValueError):
        bracket_by_scan(lambda t: t, 0.0, 1.0, 0.0)


def test_bisect_sign_change():
    r = bisect_sign_change(lambda t: t * t - 2.0, 0.0, 2.0, tol=1e-10)
    assert r == pytest.approx(math.sqrt(2.0), abs=1e-9)
    with pytest.raises(BracketError):
        bisect_sign_change(lambda t: t * t + 1.0, -1.0, 1.0, tol=1e-6)
