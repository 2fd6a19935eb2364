"""Parsing of the free-form ``--wait`` option.

A wait string is either a fixed delay (``2s``, ``time:500ms``) or a CSS
selector to wait for (``#app``, ``css:.ready``, ``selector:main > h1``).
Explicit prefixes win, bare durations win over bare selectors, and any other
string is treated as a selector.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import InvalidWaitFormat

_DURATION_RE = re.compile(r"([0-9]+)(ms|s|m)")

_UNIT_MULTIPLIERS = {
    "ms": 1,
    "s": 1000,
    "m": 60 * 1000,
}

TIME_PREFIX = "time:"
SELECTOR_PREFIXES = ("selector:", "css:")


class WaitKind(str, Enum):
    """Kinds of wait directive."""
    TIME = "time"
    SELECTOR = "selector"


@dataclass(frozen=True)
class WaitDirective:
    """Parsed wait instruction: a delay in milliseconds or a selector."""

    kind: WaitKind
    milliseconds: Optional[int] = None
    selector: Optional[str] = None

    @classmethod
    def time(cls, milliseconds: int) -> "WaitDirective":
        return cls(kind=WaitKind.TIME, milliseconds=milliseconds)

    @classmethod
    def for_selector(cls, selector: str) -> "WaitDirective":
        return cls(kind=WaitKind.SELECTOR, selector=selector)

    def describe(self) -> str:
        if self.kind == WaitKind.TIME:
            return f"{self.milliseconds}ms"
        return f'selector "{self.selector}"'


def parse_time_duration(duration: str) -> Optional[int]:
    """Convert ``<integer><ms|s|m>`` to milliseconds.

    Args:
        duration: Duration string such as ``250ms``, ``2s`` or ``1m``

    Returns:
        Milliseconds, or None if the string is not a duration
    """
    match = _DURATION_RE.fullmatch(duration)
    if not match:
        return None

    value, unit = match.groups()
    return int(value) * _UNIT_MULTIPLIERS[unit]


def parse_wait_directive(wait: str) -> WaitDirective:
    """Parse a raw wait string into a WaitDirective.

    Args:
        wait: Raw value of the wait option

    Returns:
        Time or selector directive

    Raises:
        InvalidWaitFormat: If a ``time:`` prefix is followed by a bad duration
    """
    if wait.startswith(TIME_PREFIX):
        duration = parse_time_duration(wait[len(TIME_PREFIX):])
        if duration is None:
            raise InvalidWaitFormat(wait)
        return WaitDirective.time(duration)

    if wait.startswith(SELECTOR_PREFIXES):
        return WaitDirective.for_selector(wait[wait.index(":") + 1:])

    duration = parse_time_duration(wait)
    if duration is not None:
        return WaitDirective.time(duration)

    # CSS id/class shorthand
    if wait.startswith(("#", ".")):
        return WaitDirective.for_selector(wait)

    return WaitDirective.for_selector(wait)
