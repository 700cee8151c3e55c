"""Messages and events sent by a Lavalink node over its WebSocket."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from .errors import DecodeError
from .tracks import LavalinkException, Track, TrackEndReason


def _mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"expected an object, got {type(data).__name__}")
    return data


def _get(data: Mapping[str, Any], key: str, kind: type, *, optional: bool = False) -> Any:
    value = data.get(key)
    if value is None:
        if optional:
            return None
        raise DecodeError(f"missing field {key!r}")
    if not isinstance(value, kind) or (isinstance(value, bool) and kind is not bool):
        raise DecodeError(f"field {key!r} must be of type {kind.__name__}")
    return value


def _uint(data: Mapping[str, Any], key: str) -> int:
    value = _get(data, key, int)
    if value < 0:
        raise DecodeError(f"field {key!r} must not be negative")
    return value


def _number(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        raise DecodeError(f"missing field {key!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"field {key!r} must be a number")
    return float(value)


def _enum(kind: type[Enum], value: Any) -> Any:
    try:
        return kind(value)
    except ValueError:
        raise DecodeError(f"unknown {kind.__name__} {value!r}") from None


class MessageKind(Enum):
    """The kind of a WebSocket message, as named in its ``op`` field."""

    READY = "ready"
    PLAYER_UPDATE = "playerUpdate"
    STATS = "stats"
    EVENT = "event"


class EventKind(Enum):
    """The kind of a player or voice event, as named in its ``type`` field."""

    TRACK_START = "TrackStartEvent"
    TRACK_END = "TrackEndEvent"
    TRACK_EXCEPTION = "TrackExceptionEvent"
    TRACK_STUCK = "TrackStuckEvent"
    WEBSOCKET_CLOSED = "WebSocketClosedEvent"


class Message:
    """A message received from a Lavalink node."""

    kind: ClassVar[MessageKind]

    @classmethod
    def from_dict(cls, data: Any) -> Message:
        """Decode a message, choosing its class from the ``op`` field."""
        data = _mapping(data)
        op = _get(data, "op", str)
        target = _MESSAGES.get(op)
        if target is None:
            raise DecodeError(f"unknown message op {op!r}")
        message = target._decode(data)
        if not isinstance(message, cls):
            raise DecodeError(f"expected a {cls.__name__} message, got op {op!r}")
        return message

    @classmethod
    def _decode(cls, data: Mapping[str, Any]) -> Message:
        raise NotImplementedError

    def _fields(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.kind.value, **self._fields()}


@dataclass
class Ready(Message):
    """Sent once the connection to the node is established."""

    kind: ClassVar[MessageKind] = MessageKind.READY
    guild_id: ClassVar[None] = None

    resumed: bool
    session_id: str

    @classmethod
    def _decode(cls, data: Mapping[str, Any]) -> Ready:
        return cls(
            resumed=_get(data, "resumed", bool),
            session_id=_get(data, "sessionId", str),
        )

    def _fields(self) -> dict[str, Any]:
        return {"resumed": self.resumed, "sessionId": self.session_id}


@dataclass
class PlayerState:
    """The state of a player."""

    time: int
    position: int
    connected: bool
    ping: int

    @classmethod
    def from_dict(cls, data: Any) -> PlayerState:
        data = _mapping(data)
        return cls(
            time=_uint(data, "time"),
            position=_uint(data, "position"),
            connected=_get(data, "connected", bool),
            ping=_get(data, "ping", int),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "time": self.time,
            "position": self.position,
            "connected": self.connected,
            "ping": self.ping,
        }


@dataclass
class PlayerUpdate(Message):
    """Periodic update with the latest state of a player."""

    kind: ClassVar[MessageKind] = MessageKind.PLAYER_UPDATE

    guild_id: str
    state: PlayerState

    @classmethod
    def _decode(cls, data: Mapping[str, Any]) -> PlayerUpdate:
        return cls(
            guild_id=_get(data, "guildId", str),
            state=PlayerState.from_dict(_get(data, "state", Mapping)),
        )

    def _fields(self) -> dict[str, Any]:
        return {"guildId": self.guild_id, "state": self.state.to_dict()}


@dataclass
class Memory:
    """Memory statistics of the node, in bytes."""

    free: int
    used: int
    allocated: int
    reservable: int

    @classmethod
    def from_dict(cls, data: Any) -> Memory:
        data = _mapping(data)
        return cls(
            free=_uint(data, "free"),
            used=_uint(data, "used"),
            allocated=_uint(data, "allocated"),
            reservable=_uint(data, "reservable"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "free": self.free,
            "used": self.used,
            "allocated": self.allocated,
            "reservable": self.reservable,
        }


@dataclass
class Cpu:
    """CPU statistics of the node."""

    cores: int
    system_load: float
    lavalink_load: float

    @classmethod
    def from_dict(cls, data: Any) -> Cpu:
        data = _mapping(data)
        return cls(
            cores=_uint(data, "cores"),
            system_load=_number(data, "systemLoad"),
            lavalink_load=_number(data, "lavalinkLoad"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "cores": self.cores,
            "systemLoad": self.system_load,
            "lavalinkLoad": self.lavalink_load,
        }


@dataclass
class FrameStats:
    """Audio frame statistics of the node."""

    sent: int
    nulled: int
    deficit: int

    @classmethod
    def from_dict(cls, data: Any) -> FrameStats:
        data = _mapping(data)
        return cls(
            sent=_uint(data, "sent"),
            nulled=_uint(data, "nulled"),
            deficit=_get(data, "deficit", int),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"sent": self.sent, "nulled": self.nulled, "deficit": self.deficit}


@dataclass
class Stats(Message):
    """Statistics the node sends about once per minute."""

    kind: ClassVar[MessageKind] = MessageKind.STATS
    guild_id: ClassVar[None] = None

    players: int
    playing_players: int
    uptime: int
    memory: Memory
    cpu: Cpu
    frame_stats: FrameStats | None = None

    @classmethod
    def _decode(cls, data: Mapping[str, Any]) -> Stats:
        frame_stats = _get(data, "frameStats", Mapping, optional=True)
        return cls(
            players=_uint(data, "players"),
            playing_players=_uint(data, "playingPlayers"),
            uptime=_uint(data, "uptime"),
            memory=Memory.from_dict(_get(data, "memory", Mapping)),
            cpu=Cpu.from_dict(_get(data, "cpu", Mapping)),
            frame_stats=None if frame_stats is None else FrameStats.from_dict(frame_stats),
        )

    def _fields(self) -> dict[str, Any]:
        return {
            "players": self.players,
            "playingPlayers": self.playing_players,
            "uptime": self.uptime,
            "memory": self.memory.to_dict(),
            "cpu": self.cpu.to_dict(),
            "frameStats": None if self.frame_stats is None else self.frame_stats.to_dict(),
        }


class Event(Message):
    """A player or voice event."""

    kind: ClassVar[MessageKind] = MessageKind.EVENT
    event_kind: ClassVar[EventKind]

    @classmethod
    def _decode(cls, data: Mapping[str, Any]) -> Event:
        return parse_event(data)

    @classmethod
    def _decode_event(cls, data: Mapping[str, Any]) -> Event:
        raise NotImplementedError

    def _event_fields(self) -> dict[str, Any]:
        raise NotImplementedError

    def _fields(self) -> dict[str, Any]:
        return {"type": self.event_kind.value, **self._event_fields()}


@dataclass
class TrackStartEvent(Event):
    """A track started playing."""

    event_kind: ClassVar[EventKind] = EventKind.TRACK_START

    guild_id: str
    track: Track

    @classmethod
    def _decode_event(cls, data: Mapping[str, Any]) -> TrackStartEvent:
        return cls(
            guild_id=_get(data, "guildId", str),
            track=Track.from_dict(_get(data, "track", Mapping)),
        )

    def _event_fields(self) -> dict[str, Any]:
        return {"guildId": self.guild_id, "track": self.track.to_dict()}


@dataclass
class TrackEndEvent(Event):
    """A track ended."""

    event_kind: ClassVar[EventKind] = EventKind.TRACK_END

    guild_id: str
    track: Track
    reason: TrackEndReason

    @classmethod
    def _decode_event(cls, data: Mapping[str, Any]) -> TrackEndEvent:
        return cls(
            guild_id=_get(data, "guildId", str),
            track=Track.from_dict(_get(data, "track", Mapping)),
            reason=_enum(TrackEndReason, _get(data, "reason", str)),
        )

    def _event_fields(self) -> dict[str, Any]:
        return {
            "guildId": self.guild_id,
            "track": self.track.to_dict(),
            "reason": self.reason.value,
        }


@dataclass
class TrackExceptionEvent(Event):
    """A track raised an exception."""

    event_kind: ClassVar[EventKind] = EventKind.TRACK_EXCEPTION

    guild_id: str
    track: Track
    exception: LavalinkException

    @classmethod
    def _decode_event(cls, data: Mapping[str, Any]) -> TrackExceptionEvent:
        return cls(
            guild_id=_get(data, "guildId", str),
            track=Track.from_dict(_get(data, "track", Mapping)),
            exception=LavalinkException.from_dict(_get(data, "exception", Mapping)),
        )

    def _event_fields(self) -> dict[str, Any]:
        return {
            "guildId": self.guild_id,
            "track": self.track.to_dict(),
            "exception": self.exception.to_dict(),
        }


@dataclass
class TrackStuckEvent(Event):
    """A track got stuck while playing."""

    event_kind: ClassVar[EventKind] = EventKind.TRACK_STUCK

    guild_id: str
    track: Track
    threshold_ms: int

    @classmethod
    def _decode_event(cls, data: Mapping[str, Any]) -> TrackStuckEvent:
        return cls(
            guild_id=_get(data, "guildId", str),
            track=Track.from_dict(_get(data, "track", Mapping)),
            threshold_ms=_uint(data, "thresholdMs"),
        )

    def _event_fields(self) -> dict[str, Any]:
        return {
            "guildId": self.guild_id,
            "track": self.track.to_dict(),
            "thresholdMs": self.threshold_ms,
        }


@dataclass
class WebSocketClosedEvent(Event):
    """The audio WebSocket to Discord was closed."""

    event_kind: ClassVar[EventKind] = EventKind.WEBSOCKET_CLOSED
    track: ClassVar[None] = None

    guild_id: str
    code: int
    reason: str
    by_remote: bool

    @classmethod
    def _decode_event(cls, data: Mapping[str, Any]) -> WebSocketClosedEvent:
        return cls(
            guild_id=_get(data, "guildId", str),
            code=_uint(data, "code"),
            reason=_get(data, "reason", str),
            by_remote=_get(data, "byRemote", bool),
        )

    def _event_fields(self) -> dict[str, Any]:
        return {
            "guildId": self.guild_id,
            "code": self.code,
            "reason": self.reason,
            "byRemote": self.by_remote,
        }


_MESSAGES: dict[str, type[Message]] = {
    MessageKind.READY.value: Ready,
    MessageKind.PLAYER_UPDATE.value: PlayerUpdate,
    MessageKind.STATS.value: Stats,
    MessageKind.EVENT.value: Event,
}

_EVENTS: dict[str, type[Event]] = {
    EventKind.TRACK_START.value: TrackStartEvent,
    EventKind.TRACK_END.value: TrackEndEvent,
    EventKind.TRACK_EXCEPTION.value: TrackExceptionEvent,
    EventKind.TRACK_STUCK.value: TrackStuckEvent,
    EventKind.WEBSOCKET_CLOSED.value: WebSocketClosedEvent,
}


def parse_event(data: Any) -> Event:
    """Decode an event object, choosing its class from the ``type`` field."""
    data = _mapping(data)
    event_type = _get(data, "type", str)
    target = _EVENTS.get(event_type)
    if target is None:
        raise DecodeError(f"unknown event type {event_type!r}")
    return target._decode_event(data)