"""Players, voice states and player or session updates."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import DecodeError
from .events import PlayerState
from .filters import Filters
from .tracks import Track


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


def _uint(data: Mapping[str, Any], key: str, maximum: int) -> int:
    value = _get(data, key, int)
    if not 0 <= value <= maximum:
        raise DecodeError(f"field {key!r} must be between 0 and {maximum}")
    return value


@dataclass
class VoiceState:
    """The Discord voice credentials a player connects with."""

    token: str
    endpoint: str
    session_id: str

    @classmethod
    def from_dict(cls, data: Any) -> VoiceState:
        data = _mapping(data)
        return cls(
            token=_get(data, "token", str),
            endpoint=_get(data, "endpoint", str),
            session_id=_get(data, "sessionId", str),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "endpoint": self.endpoint, "sessionId": self.session_id}


@dataclass
class Player:
    """A player on the Lavalink node."""

    guild_id: str
    track: Track | None
    volume: int
    paused: bool
    state: PlayerState
    voice: VoiceState
    filters: Filters

    @classmethod
    def from_dict(cls, data: Any) -> Player:
        data = _mapping(data)
        track = _get(data, "track", Mapping, optional=True)
        return cls(
            guild_id=_get(data, "guildId", str),
            track=None if track is None else Track.from_dict(track),
            volume=_uint(data, "volume", 0xFFFF),
            paused=_get(data, "paused", bool),
            state=PlayerState.from_dict(_get(data, "state", Mapping)),
            voice=VoiceState.from_dict(_get(data, "voice", Mapping)),
            filters=Filters.from_dict(_get(data, "filters", Mapping)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "guildId": self.guild_id,
            "track": None if self.track is None else self.track.to_dict(),
            "volume": self.volume,
            "paused": self.paused,
            "state": self.state.to_dict(),
            "voice": self.voice.to_dict(),
            "filters": self.filters.to_dict(),
        }


@dataclass
class UpdatePlayerTrack:
    """Which track a player should play, or that it should stop, plus user data."""

    encoded: str | None = None
    identifier: str | None = None
    user_data: dict[str, Any] | None = None
    stop_current: bool = False

    def __post_init__(self) -> None:
        chosen = sum((self.encoded is not None, self.identifier is not None, self.stop_current))
        if chosen > 1:
            raise ValueError("only one of encoded, identifier and stop_current may be given")

    @classmethod
    def play_encoded(cls, encoded: str, user_data: dict[str, Any] | None = None) -> UpdatePlayerTrack:
        """Play a base64 encoded track."""
        return cls(encoded=encoded, user_data=user_data)

    @classmethod
    def play_identifier(
        cls, identifier: str, user_data: dict[str, Any] | None = None
    ) -> UpdatePlayerTrack:
        """Load and play the track with the given identifier."""
        return cls(identifier=identifier, user_data=user_data)

    @classmethod
    def stop(cls, user_data: dict[str, Any] | None = None) -> UpdatePlayerTrack:
        """Stop the current track."""
        return cls(stop_current=True, user_data=user_data)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.stop_current:
            result["encoded"] = None
        elif self.encoded is not None:
            result["encoded"] = self.encoded
        if self.identifier is not None:
            result["identifier"] = self.identifier
        if self.user_data is not None:
            result["userData"] = dict(self.user_data)
        return result


@dataclass
class UpdatePlayer:
    """Changes to apply to a player; unset fields are left as they are."""

    track: UpdatePlayerTrack | None = None
    position: int | None = None
    end_time: int | None = None
    volume: int | None = None
    paused: bool | None = None
    filters: Filters | None = None
    voice: VoiceState | None = None
    clear_end_time: bool = False

    def reset_end_time(self) -> None:
        """Ask the node to clear a previously set end time."""
        self.end_time = None
        self.clear_end_time = True

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.track is not None:
            result["track"] = self.track.to_dict()
        if self.position is not None:
            result["position"] = self.position
        if self.end_time is not None:
            result["endTime"] = self.end_time
        elif self.clear_end_time:
            result["endTime"] = None
        if self.volume is not None:
            result["volume"] = self.volume
        if self.paused is not None:
            result["paused"] = self.paused
        if self.filters is not None:
            result["filters"] = self.filters.to_dict()
        if self.voice is not None:
            result["voice"] = self.voice.to_dict()
        return result


@dataclass
class UpdateSessionRequest:
    """Changes to the resuming settings of a session."""

    resuming: bool | None = None
    timeout: int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.resuming is not None:
            result["resuming"] = self.resuming
        if self.timeout is not None:
            result["timeout"] = self.timeout
        return result


@dataclass
class UpdateSessionResponse:
    """The resuming settings of a session after an update."""

    resuming: bool
    timeout: int

    @classmethod
    def from_dict(cls, data: Any) -> UpdateSessionResponse:
        data = _mapping(data)
        return cls(
            resuming=_get(data, "resuming", bool),
            timeout=_uint(data, "timeout", 0xFFFFFFFF),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"resuming": self.resuming, "timeout": self.timeout}