"""Several Lavalink nodes used in round-robin order, with one message stream."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from contextlib import suppress

from .connection import connect, decode_message
from .errors import AlreadyConnectedError, HydrolinkError, NoSessionIdError
from .events import Message, Ready
from .player import Player, UpdatePlayer, UpdateSessionRequest, UpdateSessionResponse
from .rest import Rest

ClusterItem = tuple[int, "Message | HydrolinkError | None"]


class Cluster:
    """Manages several nodes; messages from all of them arrive through :meth:`recv`.

    Each received item is ``(index, value)`` where ``value`` is a message, the error
    raised while receiving it, or ``None`` once that node's connection ended.
    """

    def __init__(self, nodes: Sequence[Rest], user_id: str) -> None:
        self._nodes = tuple(nodes)
        self.user_id = user_id
        self._queue: asyncio.Queue[ClusterItem] | None = None
        self._index = 0
        self._session_ids: dict[int, str] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def nodes(self) -> tuple[Rest, ...]:
        return self._nodes

    @property
    def current_index(self) -> int:
        return self._index

    def _channel(self) -> asyncio.Queue[ClusterItem]:
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=1)
        return self._queue

    async def connect(self, index: int) -> None:
        """Connect node ``index`` and start forwarding its messages."""
        if self.is_connected(index):
            raise AlreadyConnectedError()
        connection = await connect(self._nodes[index], self.user_id)
        task = asyncio.create_task(self._forward(index, connection))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _forward(self, index: int, connection) -> None:
        queue = self._channel()
        try:
            while True:
                item: Message | HydrolinkError
                try:
                    raw = await connection.receive()
                    if raw is None:
                        break
                    item = decode_message(raw)
                except HydrolinkError as error:
                    item = error
                if isinstance(item, Ready):
                    self._session_ids[index] = item.session_id
                await queue.put((index, item))
        finally:
            with suppress(HydrolinkError):
                await connection.close()
            self._session_ids.pop(index, None)
            await queue.put((index, None))

    def connected_nodes(self) -> list[int]:
        """Indexes of the nodes with a live session."""
        return list(self._session_ids)

    def disconnected_nodes(self) -> list[int]:
        """Indexes of the nodes without a live session."""
        return [index for index in range(len(self._nodes)) if index not in self._session_ids]

    def is_connected(self, index: int) -> bool:
        return index in self._session_ids

    def session_id(self, index: int) -> str | None:
        return self._session_ids.get(index)

    def next_index(self) -> int:
        """Return the current index and advance it for the next call."""
        current = self._index
        self._index = (current + 1) % len(self._nodes)
        return current

    def search_connected_node(self) -> int | None:
        """Find a connected node in round-robin order."""
        for _ in self._nodes:
            index = self.next_index()
            if self.is_connected(index):
                return index
        return None

    def _require_session(self, index: int) -> str:
        session_id = self.session_id(index)
        if session_id is None:
            raise NoSessionIdError()
        return session_id

    async def get_players(self, index: int) -> list[Player]:
        return await self._nodes[index].get_players(self._require_session(index))

    async def get_player(self, index: int, guild_id: str) -> Player | None:
        return await self._nodes[index].get_player(self._require_session(index), guild_id)

    async def update_player(
        self, index: int, guild_id: str, player: UpdatePlayer, no_replace: bool = False
    ) -> Player:
        return await self._nodes[index].update_player(
            self._require_session(index), guild_id, player, no_replace
        )

    async def destroy_player(self, index: int, guild_id: str) -> None:
        await self._nodes[index].destroy_player(self._require_session(index), guild_id)

    async def update_session(
        self, index: int, session: UpdateSessionRequest
    ) -> UpdateSessionResponse:
        return await self._nodes[index].update_session(self._require_session(index), session)

    async def recv(self) -> ClusterItem:
        """Wait for the next item from any node."""
        return await self._channel().get()

    def close(self) -> None:
        """Close every node connection."""
        for task in list(self._tasks):
            task.cancel()