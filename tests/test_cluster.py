import asyncio
import contextlib
import json

import pytest
from aiohttp import test_utils, web

from hydrogen.lavalink.cluster import Cluster
from hydrogen.lavalink.errors import AlreadyConnectedError, DecodeError, NoSessionIdError
from hydrogen.lavalink.events import Ready
from hydrogen.lavalink.rest import Rest

PASSWORD = "password"


def make_rest(host):
    password = PASSWORD
    return Rest(host, password, "agent", False)


@contextlib.asynccontextmanager
async def serve(frames):
    async def websocket(request):
        socket = web.WebSocketResponse()
        await socket.prepare(request)
        for frame in frames:
            await socket.send_str(frame)
        async for _ in socket:
            pass
        return socket

    async def players(request):
        assert request.match_info["session"] == "abc"
        return web.json_response([])

    app = web.Application()
    app.router.add_get("/v4/websocket", websocket)
    app.router.add_get("/v4/sessions/{session}/players", players)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield f"127.0.0.1:{server.port}"
    finally:
        await server.close()


READY = json.dumps({"op": "ready", "resumed": False, "sessionId": "abc"})


def test_next_index_round_robin():
    cluster = Cluster([make_rest("a:1"), make_rest("b:2"), make_rest("c:3")], "1")
    assert [cluster.next_index() for _ in range(5)] == [0, 1, 2, 0, 1]
    assert cluster.current_index == 2


def test_no_connected_node():
    cluster = Cluster([make_rest("a:1"), make_rest("b:2")], "1")
    assert cluster.search_connected_node() is None
    assert cluster.connected_nodes() == []
    assert cluster.disconnected_nodes() == [0, 1]
    assert cluster.is_connected(0) is False
    assert cluster.session_id(1) is None


def test_empty_cluster_has_no_node():
    cluster = Cluster([], "1")
    assert cluster.search_connected_node() is None
    assert cluster.disconnected_nodes() == []


@pytest.mark.asyncio
async def test_session_required_without_connection():
    cluster = Cluster([make_rest("a:1")], "1")
    with pytest.raises(NoSessionIdError):
        await cluster.get_players(0)
    with pytest.raises(NoSessionIdError):
        await cluster.get_player(0, "5")
    with pytest.raises(NoSessionIdError):
        await cluster.destroy_player(0, "5")


@pytest.mark.asyncio
async def test_connect_receive_and_close():
    async with serve([READY]) as host:
        rest = make_rest(host)
        cluster = Cluster([make_rest("other:1"), rest], "1234")
        await cluster.connect(1)
        index, message = await asyncio.wait_for(cluster.recv(), 5)
        assert index == 1
        assert message == Ready(resumed=False, session_id="abc")
        assert cluster.is_connected(1)
        assert cluster.connected_nodes() == [1]
        assert cluster.disconnected_nodes() == [0]
        assert cluster.session_id(1) == "abc"
        assert cluster.search_connected_node() == 1

        with pytest.raises(AlreadyConnectedError):
            await cluster.connect(1)

        assert await cluster.get_players(1) == []

        cluster.close()
        assert await asyncio.wait_for(cluster.recv(), 5) == (1, None)
        assert cluster.is_connected(1) is False
        assert cluster.disconnected_nodes() == [0, 1]
        await rest.close()


@pytest.mark.asyncio
async def test_bad_frame_is_forwarded_as_error():
    async with serve(["garbage", READY]) as host:
        cluster = Cluster([make_rest(host)], "1234")
        await cluster.connect(0)
        index, first = await asyncio.wait_for(cluster.recv(), 5)
        _, second = await asyncio.wait_for(cluster.recv(), 5)
        cluster.close()
        assert await asyncio.wait_for(cluster.recv(), 5) == (0, None)
    assert index == 0
    assert isinstance(first, DecodeError)
    assert second.session_id == "abc"