"""WebSocket connection to a single Lavalink node."""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import suppress
from typing import Any, Protocol

import aiohttp

from .errors import DecodeError, NoSessionIdError, TransportError
from .events import Message, Ready
from .player import Player, UpdatePlayer, UpdateSessionRequest, UpdateSessionResponse
from .rest import Rest

LAVALINK_CLIENT_NAME = "Hydrolink/2.0.0"


class _Connection(Protocol):
    async def receive(self) -> str | bytes | None: ...

    async def close(self) -> None: ...


class _WebSocket:
    """An open WebSocket to a node, together with the HTTP session that carries it."""

    def __init__(self, session: aiohttp.ClientSession, socket: aiohttp.ClientWebSocketResponse):
        self._session = session
        self._socket = socket

    async def receive(self) -> str | bytes | None:
        """The next data frame, or ``None`` once the socket is closed."""
        while True:
            message = await self._socket.receive()
            if message.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                return message.data
            if message.type is aiohttp.WSMsgType.ERROR:
                error = self._socket.exception()
                raise TransportError(str(error) if error else "WebSocket error")
            if message.type in (
                aiohttp.WSMsgType.CLOSE,
                aiohttp.WSMsgType.CLOSING,
                aiohttp.WSMsgType.CLOSED,
            ):
                return None

    async def close(self) -> None:
        try:
            await self._socket.close()
        except aiohttp.ClientError as error:
            raise TransportError(str(error) or type(error).__name__) from error
        finally:
            await self._session.close()


async def _open(rest: Rest, headers: dict[str, str]) -> _WebSocket:
    session = aiohttp.ClientSession()
    try:
        socket = await session.ws_connect(rest.websocket_uri, headers=headers)
    except aiohttp.ClientError as error:
        await session.close()
        raise TransportError(str(error) or type(error).__name__) from error
    except BaseException:
        await session.close()
        raise
    return _WebSocket(session, socket)


def _headers(rest: Rest, user_id: str) -> dict[str, str]:
    return {
        "Authorization": rest.password,
        "User-Id": user_id,
        "Client-Name": LAVALINK_CLIENT_NAME,
    }


async def connect(rest: Rest, user_id: str) -> _WebSocket:
    """Open a new WebSocket session with the node of ``rest``."""
    return await _open(rest, _headers(rest, user_id))


async def resume_session(rest: Rest, user_id: str, session_id: str) -> _WebSocket:
    """Reconnect to the node of ``rest``, resuming a previous session."""
    return await _open(rest, {**_headers(rest, user_id), "Session-Id": session_id})


def decode_message(raw: str | bytes) -> Message:
    """Decode one WebSocket frame into a message."""
    try:
        data: Any = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise DecodeError(f"message is not valid JSON: {error}") from error
    return Message.from_dict(data)


class Lavalink:
    """A WebSocket connection to one Lavalink node plus its REST client."""

    def __init__(self, connection: _Connection, client: Rest, user_id: str) -> None:
        self._connection = connection
        self.client = client
        self.user_id = user_id
        self._session_id: str | None = None
        self._lock = asyncio.Lock()

    @classmethod
    async def connect_from(cls, rest: Rest, user_id: str) -> Lavalink:
        """Connect to the node of ``rest``."""
        return cls(await connect(rest, user_id), rest, user_id)

    @classmethod
    async def resume_from(cls, rest: Rest, user_id: str, session_id: str) -> Lavalink:
        """Connect to the node of ``rest``, resuming ``session_id``."""
        return cls(await resume_session(rest, user_id, session_id), rest, user_id)

    @property
    def session_id(self) -> str | None:
        """The session ID announced by the node, if any."""
        return self._session_id

    def _require_session(self) -> str:
        if self._session_id is None:
            raise NoSessionIdError()
        return self._session_id

    async def _replace(self, connection: _Connection) -> None:
        async with self._lock:
            old, self._connection = self._connection, connection
            with suppress(TransportError):
                await old.close()

    async def connect(self) -> None:
        """Open a fresh connection in place of the current one."""
        await self._replace(await connect(self.client, self.user_id))

    async def resume(self) -> None:
        """Reconnect, resuming the current session."""
        session_id = self._require_session()
        await self._replace(await resume_session(self.client, self.user_id, session_id))

    async def get_players(self) -> list[Player]:
        return await self.client.get_players(self._require_session())

    async def get_player(self, guild_id: str) -> Player | None:
        return await self.client.get_player(self._require_session(), guild_id)

    async def update_player(
        self, guild_id: str, player: UpdatePlayer, no_replace: bool = False
    ) -> Player:
        return await self.client.update_player(
            self._require_session(), guild_id, player, no_replace
        )

    async def destroy_player(self, guild_id: str) -> None:
        await self.client.destroy_player(self._require_session(), guild_id)

    async def update_session(self, session: UpdateSessionRequest) -> UpdateSessionResponse:
        return await self.client.update_session(self._require_session(), session)

    async def next(self) -> Message | None:
        """The next message from the node, or ``None`` once the connection ended."""
        async with self._lock:
            raw = await self._connection.receive()
        if raw is None:
            return None
        message = decode_message(raw)
        if isinstance(message, Ready):
            self._session_id = message.session_id
        return message

    async def close(self) -> None:
        """Close the WebSocket connection."""
        async with self._lock:
            await self._connection.close()

    def __aiter__(self) -> AsyncIterator[Message]:
        return self

    async def __anext__(self) -> Message:
        message = await self.next()
        if message is None:
            raise StopAsyncIteration
        return message