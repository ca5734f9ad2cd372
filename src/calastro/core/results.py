# src/calastro/core/results.py
from __future__ import annotations

from typing import Any, TypeVar, Union

T = TypeVar("T")


class _NoEvent:
    """
    Marker for "this event does not happen".

    Returned instead of a number when the sun never reaches a depression angle,
    the moon does not set on a given day, or an angle is undefined.
    It is a singleton; compare with ``is``.
    """

    _instance: "_NoEvent | None" = None

    def __new__(cls) -> "_NoEvent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_EVENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_NoEvent, ())


NO_EVENT = _NoEvent()

NoEvent = _NoEvent
MaybeMoment = Union[float, _NoEvent]
MaybeAngle = Union[float, _NoEvent]


def is_event(x: Any) -> bool:
    return x is not NO_EVENT


def value_or(x: Union[T, _NoEvent], default: T) -> T:
    return default if x is NO_EVENT else x  # type: ignore[return-value]


class CalastroError(Exception):
    """Base class for engine errors."""


class SearchError(CalastroError):
    pass


class BracketError(SearchError):
    """
    A search bracket was too wide (or did not contain the target), so the
    function was not monotone across it. This is a caller bug.
    """


class SearchLimitError(SearchError):
    """A bounded discrete search ran out of candidates."""


class TimeScaleError(CalastroError, ValueError):
    """A tagged moment was used in a time scale it does not belong to."""
