"""Command-line argument parsing for the dining philosophers simulation."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import Sequence

INT_MAX = 2147483647
_SPACES = " \t\n\v\f\r"


class ParseError(ValueError):
    """Raised when an argument is not an acceptable non-negative count."""


@dataclass(frozen=True)
class Settings:
    """Parameters of one simulation run; times are in milliseconds."""

    n_philo: int
    time_to_die: int
    time_to_eat: int
    time_to_sleep: int
    n_meals: int = -1


def parse_count(text: str) -> int:
    """Parse a non-negative decimal number below INT_MAX.

    Leading whitespace and a single '+' are allowed; anything after the
    digits, a '-' sign or a missing number is rejected.
    """
    rest = text.lstrip(_SPACES)
    if rest.startswith("+"):
        rest = rest[1:]
    elif rest.startswith("-"):
        raise ParseError(f"negative value: {text!r}")
    if not rest or any(ch not in string.digits for ch in rest):
        raise ParseError(f"not a number: {text!r}")
    value = int(rest)
    if value >= INT_MAX:
        raise ParseError(f"value too large: {text!r}")
    return value


def parse_args(args: Sequence[str]) -> Settings:
    """Build Settings from four or five argument strings."""
    if len(args) not in (4, 5):
        raise ParseError(f"expected 4 or 5 arguments, got {len(args)}")
    n_philo, time_to_die, time_to_eat, time_to_sleep = (
        parse_count(arg) for arg in args[:4]
    )
    n_meals = parse_count(args[4]) if len(args) == 5 else -1
    return Settings(n_philo, time_to_die, time_to_eat, time_to_sleep, n_meals)