# ===== TYPES & INTERFACES =====

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """A signal that was fetched and parsed."""
    value: T


@dataclass(frozen=True)
class Unavailable:
    """A signal that could not be obtained: HTTP error, timeout, parse failure or no match."""
    reason: str


Signal = Union[Success[Any], Unavailable]

# A provider takes a lookup key (name candidate or app id) and settles to a Signal.
SignalFetcher = Callable[[Any], Awaitable[Signal]]
