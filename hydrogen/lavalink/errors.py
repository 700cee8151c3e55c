"""Errors raised while talking to a Lavalink node."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


class HydrolinkError(Exception):
    """Base class for every error raised by the Lavalink client."""

    default_message = "Lavalink client error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)


class TransportError(HydrolinkError):
    """The HTTP or WebSocket transport failed."""

    default_message = "Lavalink transport error"


class DecodeError(HydrolinkError, ValueError):
    """Data received from Lavalink could not be decoded."""

    default_message = "Lavalink sent data that could not be decoded"


class InvalidUrlError(HydrolinkError, ValueError):
    """A URL for the Lavalink node could not be built."""

    default_message = "Invalid Lavalink URL"


class InvalidHeaderValueError(HydrolinkError, ValueError):
    """A value given for an HTTP header (such as the password) is invalid."""

    default_message = "Invalid header value"


class NoSessionIdError(HydrolinkError):
    """No session ID is known for the connection."""

    default_message = "No session ID was provided"


class InvalidMessageError(HydrolinkError):
    """The node sent a WebSocket message that is not valid."""

    default_message = "Lavalink sent an invalid message"


class AlreadyConnectedError(HydrolinkError):
    """The node is already connected."""

    default_message = "Lavalink node is already connected"


class NoResponseBodyError(HydrolinkError):
    """The node answered without a body where one was expected."""

    default_message = "Lavalink response had no body"


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


@dataclass(frozen=True)
class ApiError:
    """An error body returned by the Lavalink REST API."""

    timestamp: int
    status: int
    error: str
    message: str
    path: str
    trace: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ApiError:
        data = _mapping(data)
        return cls(
            timestamp=_get(data, "timestamp", int),
            status=_get(data, "status", int),
            error=_get(data, "error", str),
            message=_get(data, "message", str),
            path=_get(data, "path", str),
            trace=_get(data, "trace", str, optional=True),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "timestamp": self.timestamp,
            "status": self.status,
            "error": self.error,
        }
        if self.trace is not None:
            result["trace"] = self.trace
        result["message"] = self.message
        result["path"] = self.path
        return result


class LavalinkRestError(HydrolinkError):
    """The Lavalink REST API answered with an error body."""

    def __init__(self, error: ApiError) -> None:
        self.error = error
        super().__init__(error.message)

    def __str__(self) -> str:
        return f"Lavalink REST error: {self.error.message}"


def parse_api_response(data: Any, parse: Callable[[Any], T]) -> T:
    """Decode ``data`` with ``parse``, or raise the error body it carries instead."""
    try:
        return parse(data)
    except (KeyError, TypeError, ValueError) as original:
        try:
            error = ApiError.from_dict(data)
        except DecodeError:
            raise DecodeError(
                "response matched neither the expected shape nor an error body"
            ) from original
    raise LavalinkRestError(error)