# src/calastro/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Literal, Optional

CrescentCriterion = Literal["shaukat", "yallop", "saudi", "babylonian"]
CRESCENT_CRITERIA: tuple[str, ...] = ("shaukat", "yallop", "saudi", "babylonian")


@dataclass(frozen=True)
class SearchConfig:
    """
    Tolerances for the bisection and discrete searches.
    All durations are fractions of a day.
    """
    # invert_angular stops once the bracket is this narrow
    angular_epsilon: float = 1e-5

    # |f(root) - target| above this means the bracket was not monotone
    max_residual_deg: float = 1.0

    # moment_of_depression refinement stops once successive estimates agree
    depression_tolerance: float = 30 / 86400

    # moonrise/moonset bracket half-width and stopping width
    riseset_window: float = 6 / 24
    riseset_tolerance: float = 1 / 1440

    # cap for discrete index searches; None keeps them unbounded
    search_limit: Optional[int] = None

    # sampled crossing search, used with external providers
    scan_step: float = 6 / 24
    scan_tolerance: float = 0.5 / 86400
    merge_window: float = 60 / 86400


@dataclass(frozen=True)
class VisibilityConfig:
    """
    Thresholds of the empirical crescent-visibility criteria.
    """
    criterion: CrescentCriterion = "shaukat"

    # dusk depression used for the simple best viewing time
    best_view_depression: float = 4.5

    # Shaukat
    shaukat_min_altitude: float = 4.1
    shaukat_min_arc_of_light: float = 10.6
    shaukat_max_arc_of_light: float = 90.0

    # Yallop: crescent visible under perfect conditions
    yallop_e: float = -0.14
    yallop_q1: tuple[float, ...] = (11.8371, -6.3226, 0.7319, -0.1018)

    # moonlag criteria (days)
    babylonian_min_lag: float = 48 / 1440
    saudi_min_lag: float = 0.0


@dataclass(frozen=True)
class EngineConfig:
    search: SearchConfig = field(default_factory=SearchConfig)
    visibility: VisibilityConfig = field(default_factory=VisibilityConfig)

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "EngineConfig":
        """
        Build a config with CALASTRO_* overrides:

          CALASTRO_ANGULAR_EPSILON     float, days
          CALASTRO_SEARCH_LIMIT        int, 0 or empty = unbounded
          CALASTRO_CRESCENT_CRITERION  shaukat | yallop | saudi | babylonian
        """
        env = os.environ if environ is None else environ
        search = SearchConfig()
        visibility = VisibilityConfig()

        eps = str(env.get("CALASTRO_ANGULAR_EPSILON", "")).strip()
        if eps:
            value = float(eps)
            if value <= 0:
                raise ValueError(f"CALASTRO_ANGULAR_EPSILON must be positive: {eps}")
            search = replace(search, angular_epsilon=value)

        limit = str(env.get("CALASTRO_SEARCH_LIMIT", "")).strip()
        if limit:
            n = int(limit)
            search = replace(search, search_limit=n if n > 0 else None)

        crit = str(env.get("CALASTRO_CRESCENT_CRITERION", "")).strip().lower()
        if crit:
            if crit not in CRESCENT_CRITERIA:
                raise ValueError(f"unknown crescent criterion: {crit!r} (expected one of {CRESCENT_CRITERIA})")
            visibility = replace(visibility, criterion=crit)  # type: ignore[arg-type]

        return cls(search=search, visibility=visibility)


DEFAULT_SEARCH = SearchConfig()
DEFAULT_VISIBILITY = VisibilityConfig()
