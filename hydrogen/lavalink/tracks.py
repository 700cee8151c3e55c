"""Tracks, playlists and load results of the Lavalink REST API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .errors import DecodeError


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


def _extra(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DecodeError(f"field {key!r} must be an object")
    return dict(value)


def _track_list(value: Any) -> list[Track]:
    if not isinstance(value, list):
        raise DecodeError("expected a list of tracks")
    return [Track.from_dict(item) for item in value]


def _enum(kind: type[Enum], value: Any) -> Any:
    try:
        return kind(value)
    except ValueError:
        raise DecodeError(f"unknown {kind.__name__} {value!r}") from None


@dataclass
class TrackInfo:
    """Information about a track."""

    identifier: str
    is_seekable: bool
    author: str
    length: int
    is_stream: bool
    position: int
    title: str
    uri: str | None = None
    artwork_url: str | None = None
    isrc: str | None = None
    source_name: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TrackInfo:
        data = _mapping(data)
        return cls(
            identifier=_get(data, "identifier", str),
            is_seekable=_get(data, "isSeekable", bool),
            author=_get(data, "author", str),
            length=_get(data, "length", int),
            is_stream=_get(data, "isStream", bool),
            position=_get(data, "position", int),
            title=_get(data, "title", str),
            uri=_get(data, "uri", str, optional=True),
            artwork_url=_get(data, "artworkUrl", str, optional=True),
            isrc=_get(data, "isrc", str, optional=True),
            source_name=_get(data, "sourceName", str, optional=True),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "isSeekable": self.is_seekable,
            "author": self.author,
            "length": self.length,
            "isStream": self.is_stream,
            "position": self.position,
            "title": self.title,
            "uri": self.uri,
            "artworkUrl": self.artwork_url,
            "isrc": self.isrc,
            "sourceName": self.source_name,
        }


@dataclass
class Track:
    """A track with its base64 encoded data."""

    encoded: str
    info: TrackInfo
    plugin_info: dict[str, Any] = field(default_factory=dict)
    user_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Track:
        data = _mapping(data)
        return cls(
            encoded=_get(data, "encoded", str),
            info=TrackInfo.from_dict(_get(data, "info", Mapping)),
            plugin_info=_extra(data, "pluginInfo"),
            user_data=_extra(data, "userData"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "encoded": self.encoded,
            "info": self.info.to_dict(),
            "pluginInfo": dict(self.plugin_info),
            "userData": dict(self.user_data),
        }


class TrackEndReason(Enum):
    """Why a track ended."""

    FINISHED = "finished"
    LOAD_FAILED = "loadFailed"
    STOPPED = "stopped"
    REPLACED = "replaced"
    CLEANUP = "cleanup"

    def may_start_next(self) -> bool:
        """Whether the next track should be started."""
        return self in (TrackEndReason.FINISHED, TrackEndReason.LOAD_FAILED)


class Severity(Enum):
    """Severity of an exception raised by the node."""

    COMMON = "common"
    SUSPICIOUS = "suspicious"
    FAULT = "fault"


@dataclass
class LavalinkException:
    """An exception reported by the Lavalink node."""

    message: str | None
    severity: Severity
    cause: str

    @classmethod
    def from_dict(cls, data: Any) -> LavalinkException:
        data = _mapping(data)
        return cls(
            message=_get(data, "message", str, optional=True),
            severity=_enum(Severity, _get(data, "severity", str)),
            cause=_get(data, "cause", str),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "severity": self.severity.value,
            "cause": self.cause,
        }


@dataclass
class PlaylistInfo:
    """Information about a playlist."""

    name: str
    selected_track: int

    @classmethod
    def from_dict(cls, data: Any) -> PlaylistInfo:
        data = _mapping(data)
        return cls(
            name=_get(data, "name", str),
            selected_track=_get(data, "selectedTrack", int),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "selectedTrack": self.selected_track}


@dataclass
class LoadResultPlaylist:
    """A loaded playlist."""

    info: PlaylistInfo
    tracks: list[Track]
    plugin_info: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> LoadResultPlaylist:
        data = _mapping(data)
        if "tracks" not in data:
            raise DecodeError("missing field 'tracks'")
        return cls(
            info=PlaylistInfo.from_dict(_get(data, "info", Mapping)),
            tracks=_track_list(data["tracks"]),
            plugin_info=_extra(data, "pluginInfo"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "info": self.info.to_dict(),
            "pluginInfo": dict(self.plugin_info),
            "tracks": [track.to_dict() for track in self.tracks],
        }


class LoadResultKind(Enum):
    """The kind of a load result, as named on the wire."""

    TRACK = "track"
    PLAYLIST = "playlist"
    SEARCH = "search"
    EMPTY = "empty"
    ERROR = "error"


LoadResultData = Union[Track, LoadResultPlaylist, list[Track], LavalinkException, None]


@dataclass
class LoadResult:
    """The result of loading tracks from an identifier."""

    kind: LoadResultKind
    data: LoadResultData = None

    @classmethod
    def from_dict(cls, data: Any) -> LoadResult:
        data = _mapping(data)
        kind = _enum(LoadResultKind, _get(data, "loadType", str))
        if kind is LoadResultKind.EMPTY:
            return cls(kind)
        if "data" not in data:
            raise DecodeError("missing field 'data'")
        content = data["data"]
        if kind is LoadResultKind.TRACK:
            return cls(kind, Track.from_dict(content))
        if kind is LoadResultKind.PLAYLIST:
            return cls(kind, LoadResultPlaylist.from_dict(content))
        if kind is LoadResultKind.SEARCH:
            return cls(kind, _track_list(content))
        return cls(kind, LavalinkException.from_dict(content))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"loadType": self.kind.value}
        if self.kind is LoadResultKind.EMPTY:
            return result
        if isinstance(self.data, list):
            result["data"] = [track.to_dict() for track in self.data]
        elif self.data is not None:
            result["data"] = self.data.to_dict()
        return result

    def as_track(self) -> Track | None:
        return self.data if self.kind is LoadResultKind.TRACK else None

    def as_playlist(self) -> LoadResultPlaylist | None:
        return self.data if self.kind is LoadResultKind.PLAYLIST else None

    def as_search(self) -> list[Track] | None:
        return self.data if self.kind is LoadResultKind.SEARCH else None

    def as_error(self) -> LavalinkException | None:
        return self.data if self.kind is LoadResultKind.ERROR else None