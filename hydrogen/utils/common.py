"""Constants and text helpers shared by the bot's commands and components."""

from __future__ import annotations

import math
from datetime import timedelta

HYDROGEN_PRIMARY_COLOR = 0x0DB363
"""The embed color used for success messages."""

HYDROGEN_EMPTY_CHAT_TIMEOUT = 10
"""Seconds to wait before leaving an empty voice channel."""

HYDROGEN_QUEUE_LIMIT = 1000
"""How many tracks the queue can hold."""

HYDROGEN_SEARCH_PREFIXES = ("ytsearch:", "dzsearch:", "scsearch:")
"""Search prefixes tried when looking up music."""

LAVALINK_RECONNECTION_DELAY = 5
"""Seconds to wait before reconnecting to a Lavalink node."""

HYDROGEN_VERSION = "0.0.1-alpha.14"
HYDROGEN_USER_AGENT = f"Hydrogen/{HYDROGEN_VERSION}"
"""The user agent sent to Lavalink nodes."""

HYDROGEN_READY_THRESHOLD = timedelta(milliseconds=600)
HYDROGEN_INTERACTION_CREATE_THRESHOLD = timedelta(milliseconds=15000)
HYDROGEN_UPDATE_VOICE_STATE_THRESHOLD = timedelta(milliseconds=1000)
HYDROGEN_UPDATE_VOICE_SERVER_THRESHOLD = timedelta(milliseconds=350)
HYDROGEN_LAVALINK_EVENT_THRESHOLD = timedelta(milliseconds=1000)

_BAR_WIDTH = 30
_BAR_FILLED = "▓"
_BAR_EMPTY = "░"


def time_to_string(seconds: int) -> str:
    """Format a number of seconds as ``MM:SS`` or, from one hour on, ``HH:MM:SS``.

    From one hour on, the middle field holds the seconds left over after the
    whole hours and the last field never goes below zero.
    """
    if seconds < 0:
        raise ValueError("seconds must not be negative")
    if seconds < 60:
        return f"00:{seconds:02}"
    if seconds < 60 * 60:
        minutes, rest = divmod(seconds, 60)
        return f"{minutes:02}:{rest:02}"

    time = float(seconds)
    hours = math.floor(time / 60.0 / 60.0)
    minutes = math.floor(time - hours * 60.0 * 60.0)
    rest = max(0.0, time - minutes * 60.0 - hours * 60.0 * 60.0)
    return f"{int(hours):02}:{int(minutes):02}:{int(rest):02}"


def progress_bar(current: int, total: int) -> str:
    """Draw a 30 cell progress bar for ``current`` out of ``total``."""
    if total == 0:
        filled = 0 if current == 0 else _BAR_WIDTH
    else:
        ratio = current / (total / _BAR_WIDTH)
        filled = max(0, math.floor(ratio + 0.5))
    bar = (_BAR_FILLED * min(filled, _BAR_WIDTH)).ljust(_BAR_WIDTH, _BAR_EMPTY)
    return f"╣{bar}╠"