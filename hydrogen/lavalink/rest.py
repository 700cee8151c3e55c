"""Client for the Lavalink REST API."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import Any, TypeVar
from urllib.parse import urljoin, urlsplit

import aiohttp

from .errors import (
    DecodeError,
    InvalidHeaderValueError,
    InvalidUrlError,
    NoResponseBodyError,
    TransportError,
    parse_api_response,
)
from .player import Player, UpdatePlayer, UpdateSessionRequest, UpdateSessionResponse
from .server import Info, RoutePlanner
from .tracks import LoadResult, Track

T = TypeVar("T")

_NO_BODY = object()
_READ_TIMEOUT = 60


def _check_header_value(value: str) -> None:
    for char in value:
        code = ord(char)
        if (code < 32 and char != "\t") or code == 127:
            raise InvalidHeaderValueError(f"invalid character {char!r} in header value")


def _check_host(host: str) -> None:
    if not host or any(char.isspace() or char in "/?#" for char in host):
        raise InvalidUrlError(f"invalid host {host!r}")
    parts = urlsplit(f"http://{host}")
    try:
        parts.port
    except ValueError as error:
        raise InvalidUrlError(f"invalid port in host {host!r}") from error
    if not parts.hostname:
        raise InvalidUrlError(f"invalid host {host!r}")


def _decode_json(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise DecodeError(f"response is not valid JSON: {error}") from error


def _list_of(parse: Callable[[Any], T]) -> Callable[[Any], list[T]]:
    def parse_list(data: Any) -> list[T]:
        if not isinstance(data, list):
            raise DecodeError("expected a list")
        return [parse(item) for item in data]

    return parse_list


def _required(value: T | None) -> T:
    if value is None:
        raise NoResponseBodyError()
    return value


class Rest:
    """REST client for one Lavalink node."""

    def __init__(self, host: str, password: str, user_agent: str, tls: bool = False) -> None:
        _check_header_value(password)
        _check_host(host)
        self.host = host
        self.user_agent = user_agent
        self.tls = tls
        self.trace = False
        self._password = password
        self._http_url = f"{'https' if tls else 'http'}://{host}/"
        self._websocket_uri = f"{'wss' if tls else 'ws'}://{host}/v4/websocket"
        self._session: aiohttp.ClientSession | None = None

    @property
    def password(self) -> str:
        """The password of the node, sent as the Authorization header."""
        return self._password

    @property
    def http_url(self) -> str:
        """The base HTTP URL of the node."""
        return self._http_url

    @property
    def websocket_uri(self) -> str:
        """The WebSocket URI of the node."""
        return self._websocket_uri

    def build_url(self, path: str) -> str:
        """Resolve ``path`` against the node's HTTP URL."""
        return urljoin(self._http_url, path)

    def _client(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": self._password,
                    "Content-Type": "application/json",
                    "User-Agent": self.user_agent,
                },
                timeout=aiohttp.ClientTimeout(sock_read=_READ_TIMEOUT),
            )
        return self._session

    def _query(self, **extra: str) -> dict[str, str]:
        return {**extra, "trace": str(self.trace).lower()}

    def _request_args(self, query: dict[str, str], body: Any) -> dict[str, Any]:
        arguments: dict[str, Any] = {"params": query}
        if body is not _NO_BODY:
            arguments["data"] = json.dumps(body).encode()
        return arguments

    async def _fetch(
        self,
        method: str,
        path: str,
        query: dict[str, str],
        parse: Callable[[Any], T],
        body: Any = _NO_BODY,
    ) -> T | None:
        """Send a request and decode its JSON answer; 204 and 404 give ``None``."""
        try:
            async with self._client().request(
                method, self.build_url(path), **self._request_args(query, body)
            ) as response:
                if response.status in (204, 404):
                    return None
                raw = await response.read()
        except aiohttp.ClientError as error:
            raise TransportError(str(error) or type(error).__name__) from error
        return parse_api_response(_decode_json(raw), parse)

    async def _execute(
        self, method: str, path: str, query: dict[str, str], body: Any = _NO_BODY
    ) -> None:
        """Send a request whose answer has no body; error statuses raise."""
        try:
            async with self._client().request(
                method, self.build_url(path), **self._request_args(query, body)
            ) as response:
                response.raise_for_status()
        except aiohttp.ClientError as error:
            raise TransportError(str(error) or type(error).__name__) from error

    async def load_track(self, identifier: str) -> LoadResult:
        """Load tracks from an identifier or search query."""
        return _required(
            await self._fetch(
                "GET",
                "/v4/loadtracks",
                self._query(identifier=identifier),
                LoadResult.from_dict,
            )
        )

    async def decode_track(self, encoded_track: str) -> Track:
        """Decode one base64 encoded track."""
        return _required(
            await self._fetch(
                "GET",
                "/v4/decodetrack",
                self._query(encodedTrack=encoded_track),
                Track.from_dict,
            )
        )

    async def decode_tracks(self, encoded_tracks: Iterable[str]) -> list[Track]:
        """Decode several base64 encoded tracks."""
        return _required(
            await self._fetch(
                "POST",
                "/v4/decodetracks",
                self._query(),
                _list_of(Track.from_dict),
                body=list(encoded_tracks),
            )
        )

    async def get_players(self, session_id: str) -> list[Player]:
        """All players of a session."""
        return _required(
            await self._fetch(
                "GET",
                f"/v4/sessions/{session_id}/players",
                self._query(),
                _list_of(Player.from_dict),
            )
        )

    async def get_player(self, session_id: str, guild_id: str) -> Player | None:
        """The player of a guild, or ``None`` if there is none."""
        return await self._fetch(
            "GET",
            f"/v4/sessions/{session_id}/players/{guild_id}",
            self._query(),
            Player.from_dict,
        )

    async def update_player(
        self, session_id: str, guild_id: str, player: UpdatePlayer, no_replace: bool = False
    ) -> Player:
        """Update or create the player of a guild."""
        return _required(
            await self._fetch(
                "PATCH",
                f"/v4/sessions/{session_id}/players/{guild_id}",
                self._query(noReplace=str(no_replace).lower()),
                Player.from_dict,
                body=player.to_dict(),
            )
        )

    async def destroy_player(self, session_id: str, guild_id: str) -> None:
        """Destroy the player of a guild."""
        await self._execute(
            "DELETE", f"/v4/sessions/{session_id}/players/{guild_id}", self._query()
        )

    async def update_session(
        self, session_id: str, session: UpdateSessionRequest
    ) -> UpdateSessionResponse:
        """Change the resuming settings of a session."""
        return _required(
            await self._fetch(
                "PATCH",
                f"/v4/sessions/{session_id}",
                self._query(),
                UpdateSessionResponse.from_dict,
                body=session.to_dict(),
            )
        )

    async def info(self) -> Info:
        """Information about the Lavalink server."""
        return _required(await self._fetch("GET", "/v4/info", self._query(), Info.from_dict))

    async def version(self) -> str:
        """The version string of the Lavalink server."""
        try:
            async with self._client().get(self.build_url("/version")) as response:
                return await response.text()
        except aiohttp.ClientError as error:
            raise TransportError(str(error) or type(error).__name__) from error

    async def routeplanner_status(self) -> RoutePlanner | None:
        """The route planner status, or ``None`` when no route planner is set up."""
        return await self._fetch(
            "GET", "/v4/routeplanner/status", self._query(), RoutePlanner.from_dict
        )

    async def routeplanner_unmark(self, address: str) -> None:
        """Unmark one failing address."""
        await self._execute(
            "POST", "/v4/routeplanner/free/address", self._query(), body={"address": address}
        )

    async def routeplanner_unmark_all(self) -> None:
        """Unmark every failing address."""
        await self._execute("POST", "/v4/routeplanner/free/all", self._query())

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> Rest:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()