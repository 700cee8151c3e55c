import json
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from hydrogen.lavalink.errors import (
    DecodeError,
    InvalidHeaderValueError,
    InvalidUrlError,
    LavalinkRestError,
    NoResponseBodyError,
    TransportError,
)
from hydrogen.lavalink.player import UpdatePlayer, UpdateSessionRequest
from hydrogen.lavalink.rest import Rest
from hydrogen.lavalink.server import RoutePlannerKind
from hydrogen.lavalink.tracks import LoadResultKind

AGENT = "hydrogen-test"

TRACK = {
    "encoded": "QAAAjQIAJVJpY2s=",
    "info": {
        "identifier": "abc",
        "isSeekable": True,
        "author": "Artist",
        "length": 1000,
        "isStream": False,
        "position": 0,
        "title": "Song",
        "uri": None,
        "artworkUrl": None,
        "isrc": None,
        "sourceName": "youtube",
    },
    "pluginInfo": {},
    "userData": {},
}

PLAYER = {
    "guildId": "123",
    "track": None,
    "volume": 100,
    "paused": False,
    "state": {"time": 1, "position": 0, "connected": True, "ping": 5},
    "voice": {"token": "token", "endpoint": "example.com", "sessionId": "voice"},
    "filters": {},
}


def reply(payload=None, status=200, text=None):
    async def handler(request):
        if text is not None:
            return web.Response(text=text, status=status)
        if payload is None:
            return web.Response(status=status)
        return web.json_response(payload, status=status)

    return handler


@asynccontextmanager
async def serve(routes):
    seen = []

    @web.middleware
    async def record(request, handler):
        body = await request.read()
        seen.append(
            {
                "method": request.method,
                "path": request.path,
                "query": dict(request.query),
                "headers": request.headers.copy(),
                "body": body,
            }
        )
        return await handler(request)

    app = web.Application(middlewares=[record])
    for method, path, handler in routes:
        app.router.add_route(method, path, handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield f"{server.host}:{server.port}", seen
    finally:
        await server.close()


def make_rest(host):
    password = "password"
    return Rest(host, password, AGENT, False)


def test_urls_plain():
    rest = make_rest("localhost:2333")
    assert rest.http_url == "http://localhost:2333/"
    assert rest.websocket_uri == "ws://localhost:2333/v4/websocket"
    assert rest.build_url("/v4/info") == "http://localhost:2333/v4/info"
    assert rest.trace is False


def test_urls_tls():
    password = "password"
    rest = Rest("localhost:443", password, AGENT, True)
    assert rest.http_url == "https://localhost:443/"
    assert rest.websocket_uri == "wss://localhost:443/v4/websocket"


def test_invalid_header_value():
    header_value = "line\nbreak"
    with pytest.raises(InvalidHeaderValueError):
        Rest("localhost:2333", header_value, AGENT, False)


@pytest.mark.parametrize("host", ["", "bad/host", "local host", "localhost:port"])
def test_invalid_host(host):
    with pytest.raises(InvalidUrlError):
        make_rest(host)


@pytest.mark.asyncio
async def test_load_track_sends_headers_and_query():
    payload = {"loadType": "track", "data": TRACK}
    async with serve([("GET", "/v4/loadtracks", reply(payload))]) as (host, seen):
        async with make_rest(host) as rest:
            result = await rest.load_track("ytsearch:song")
    assert result.kind is LoadResultKind.TRACK
    assert result.as_track().encoded == TRACK["encoded"]
    request = seen[0]
    assert request["query"] == {"identifier": "ytsearch:song", "trace": "false"}
    assert request["headers"]["Authorization"] == "password"
    assert request["headers"]["User-Agent"] == AGENT


@pytest.mark.asyncio
async def test_trace_flag_in_query():
    async with serve([("GET", "/v4/decodetrack", reply(TRACK))]) as (host, seen):
        async with make_rest(host) as rest:
            rest.trace = True
            track = await rest.decode_track(TRACK["encoded"])
    assert track.info.title == "Song"
    assert seen[0]["query"] == {"encodedTrack": TRACK["encoded"], "trace": "true"}


@pytest.mark.asyncio
async def test_load_track_without_body():
    async with serve([("GET", "/v4/loadtracks", reply(status=204))]) as (host, _):
        async with make_rest(host) as rest:
            with pytest.raises(NoResponseBodyError):
                await rest.load_track("nothing")


@pytest.mark.asyncio
async def test_decode_tracks_posts_list():
    async with serve([("POST", "/v4/decodetracks", reply([TRACK, TRACK]))]) as (host, seen):
        async with make_rest(host) as rest:
            tracks = await rest.decode_tracks(["a", "b"])
    assert len(tracks) == 2
    assert json.loads(seen[0]["body"]) == ["a", "b"]
    assert seen[0]["headers"]["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_get_players_and_missing_player():
    routes = [
        ("GET", "/v4/sessions/s1/players", reply([PLAYER])),
        ("GET", "/v4/sessions/s1/players/999", reply(status=404)),
    ]
    async with serve(routes) as (host, _):
        async with make_rest(host) as rest:
            players = await rest.get_players("s1")
            missing = await rest.get_player("s1", "999")
    assert [player.guild_id for player in players] == ["123"]
    assert missing is None


@pytest.mark.asyncio
async def test_update_player_body_and_query():
    route = ("PATCH", "/v4/sessions/s1/players/123", reply(PLAYER))
    async with serve([route]) as (host, seen):
        async with make_rest(host) as rest:
            player = await rest.update_player("s1", "123", UpdatePlayer(paused=True), True)
    assert player.guild_id == "123"
    assert json.loads(seen[0]["body"]) == {"paused": True}
    assert seen[0]["query"] == {"noReplace": "true", "trace": "false"}


@pytest.mark.asyncio
async def test_error_body_raises_rest_error():
    error = {
        "timestamp": 1667857581613,
        "status": 400,
        "error": "Bad Request",
        "message": "invalid session",
        "path": "/v4/sessions/s1/players",
    }
    route = ("GET", "/v4/sessions/s1/players", reply(error, status=400))
    async with serve([route]) as (host, _):
        async with make_rest(host) as rest:
            with pytest.raises(LavalinkRestError) as caught:
                await rest.get_players("s1")
    assert caught.value.error.status == 400
    assert str(caught.value) == "Lavalink REST error: invalid session"


@pytest.mark.asyncio
async def test_invalid_json_raises_decode_error():
    async with serve([("GET", "/v4/info", reply(text="not json"))]) as (host, _):
        async with make_rest(host) as rest:
            with pytest.raises(DecodeError):
                await rest.info()


@pytest.mark.asyncio
async def test_destroy_player_status_handling():
    routes = [
        ("DELETE", "/v4/sessions/s1/players/1", reply(status=204)),
        ("DELETE", "/v4/sessions/s1/players/2", reply(status=500)),
    ]
    async with serve(routes) as (host, seen):
        async with make_rest(host) as rest:
            assert await rest.destroy_player("s1", "1") is None
            with pytest.raises(TransportError):
                await rest.destroy_player("s1", "2")
    assert [request["method"] for request in seen] == ["DELETE", "DELETE"]


@pytest.mark.asyncio
async def test_update_session():
    route = ("PATCH", "/v4/sessions/s1", reply({"resuming": True, "timeout": 60}))
    async with serve([route]) as (host, seen):
        async with make_rest(host) as rest:
            response = await rest.update_session("s1", UpdateSessionRequest(True, 60))
    assert response.resuming is True
    assert response.timeout == 60
    assert json.loads(seen[0]["body"]) == {"resuming": True, "timeout": 60}


@pytest.mark.asyncio
async def test_version_text():
    async with serve([("GET", "/version", reply(text="4.0.8"))]) as (host, seen):
        async with make_rest(host) as rest:
            version = await rest.version()
    assert version == "4.0.8"
    assert seen[0]["query"] == {}


@pytest.mark.asyncio
async def test_routeplanner_status():
    planner = {
        "BalancingIpRoutePlanner": {
            "ipBlock": {"type": "Inet4Address", "size": "16"},
            "failingAddresses": [],
        }
    }
    async with serve([("GET", "/v4/routeplanner/status", reply(planner))]) as (host, _):
        async with make_rest(host) as rest:
            status = await rest.routeplanner_status()
    assert status.kind is RoutePlannerKind.BALANCING


@pytest.mark.asyncio
async def test_routeplanner_status_absent():
    async with serve([("GET", "/v4/routeplanner/status", reply(status=204))]) as (host, _):
        async with make_rest(host) as rest:
            assert await rest.routeplanner_status() is None


@pytest.mark.asyncio
async def test_routeplanner_unmark_calls():
    routes = [
        ("POST", "/v4/routeplanner/free/address", reply(status=204)),
        ("POST", "/v4/routeplanner/free/all", reply(status=204)),
    ]
    async with serve(routes) as (host, seen):
        async with make_rest(host) as rest:
            await rest.routeplanner_unmark("1.0.0.1")
            await rest.routeplanner_unmark_all()
    assert json.loads(seen[0]["body"]) == {"address": "1.0.0.1"}
    assert seen[1]["path"] == "/v4/routeplanner/free/all"
    assert seen[1]["body"] == b""