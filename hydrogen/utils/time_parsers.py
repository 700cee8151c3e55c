"""Parsers for the time syntaxes users may type."""

from __future__ import annotations

import re
from datetime import timedelta

_SUFFIX = re.compile(r"(([0-9]{1,3})[sS]?|([0-9]{1,3})[mM]|([0-9]{1,3})[hH])")
_COLON = re.compile(r"((([0-9]{1,3}):([0-5][0-9])|([0-9]{1,3})):([0-5][0-9]))")


def suffix_syntax(data: str) -> timedelta | None:
    """Parse ``00``, ``00s``, ``00m`` or ``00h``; ``None`` if ``data`` does not match."""
    match = _SUFFIX.fullmatch(data)
    if match is None:
        return None
    seconds, minutes, hours = match.group(2, 3, 4)
    if seconds is not None:
        return timedelta(seconds=int(seconds))
    if minutes is not None:
        return timedelta(minutes=int(minutes))
    if hours is not None:
        return timedelta(hours=int(hours))
    return None


def semicolon_syntax(data: str) -> timedelta | None:
    """Parse ``HH:MM:SS`` or ``MM:SS``; ``None`` if ``data`` does not match."""
    match = _COLON.fullmatch(data)
    if match is None:
        return None
    seconds = timedelta(seconds=int(match.group(6)))
    hours = match.group(3)
    if hours is not None:
        return seconds + timedelta(hours=int(hours), minutes=int(match.group(4)))
    return seconds + timedelta(minutes=int(match.group(5)))