# hydrogen

An asyncio client for Lavalink v4 nodes, together with the small helpers a
music bot needs around it: parsing node configuration strings, formatting
track times and reading user-typed durations.

It does not depend on any Discord library. You supply the bot's user ID and
forward voice server information to the node yourself.

## What is inside

The package `__init__` files import nothing; import from the modules below.

| Module | Purpose |
| --- | --- |
| `hydrogen.lavalink.rest` | `Rest`, the HTTP client for the Lavalink REST API |
| `hydrogen.lavalink.connection` | `Lavalink`, one WebSocket connection to a node, plus `connect`, `resume_session`, `decode_message` and `LAVALINK_CLIENT_NAME` |
| `hydrogen.lavalink.cluster` | `Cluster`, several nodes used round-robin, with one queue of incoming messages |
| `hydrogen.lavalink.config` | `ConfigParser`, turns a configuration string into `Rest` clients |
| `hydrogen.lavalink.tracks` | `Track`, `TrackInfo`, `LoadResult`, `LoadResultPlaylist`, `LavalinkException` and related enums |
| `hydrogen.lavalink.events` | `Message`, `Ready`, `PlayerUpdate`, `Stats`, `Event`, the track and WebSocket events, and `parse_event` |
| `hydrogen.lavalink.player` | `Player`, `VoiceState`, `UpdatePlayer`, `UpdatePlayerTrack`, `UpdateSessionRequest`, `UpdateSessionResponse` |
| `hydrogen.lavalink.filters` | `Filters` and the individual filters (`Equalizer`, `Karaoke`, `Timescale`, `Tremolo`, `Vibrato`, `Rotation`, `Distortion`, `ChannelMix`, `LowPass`) |
| `hydrogen.lavalink.server` | `Info`, `Version`, `Git`, `Plugin`, `IPBlock`, `FailingAddress`, `RoutePlanner` |
| `hydrogen.lavalink.errors` | `HydrolinkError` and its subclasses, `ApiError`, `parse_api_response` |
| `hydrogen.utils.common` | `time_to_string`, `progress_bar` and the bot's constants |
| `hydrogen.utils.time_parsers` | `suffix_syntax` and `semicolon_syntax` |

The models decode the node's camelCase JSON with `from_dict` and encode it
with `to_dict`. Data of the wrong shape raises `DecodeError`.

## Talking to one node

```python
import asyncio

from hydrogen.lavalink.connection import Lavalink
from hydrogen.lavalink.rest import Rest


async def main():
    password = "password"
    async with Rest("localhost:2333", password, "Hydrogen/0.0.1a14", False) as rest:
        result = await rest.load_track("ytsearch:never gonna give you up")
        for track in result.as_search() or []:
            print(track.info.title)

        node = await Lavalink.connect_from(rest, "123456789012345678")
        async for message in node:
            print(message.kind)
            break
        await node.close()


asyncio.run(main())
```

`Rest` opens its HTTP session on first use; `close()` (or leaving the
`async with` block) closes it. Set `rest.trace = True` to ask the node for
stack traces in error bodies. A password with control characters raises
`InvalidHeaderValueError`, a malformed host raises `InvalidUrlError`.

Once the node has sent its `Ready` message, `Lavalink.session_id` is set and
the session calls (`get_players`, `get_player`, `update_player`,
`destroy_player`, `update_session`) use it. Calling them earlier raises
`NoSessionIdError`. `resume()` reconnects with that session; `connect()`
opens a fresh connection in place of the current one.

Errors reported by the server are raised as `LavalinkRestError`, whose
`error` attribute is the server's `ApiError`. Network failures are raised as
`TransportError`. `get_player` and `routeplanner_status` return `None` when
the node answers 204 or 404; the other calls raise `NoResponseBodyError`.

## Starting a track

```python
from hydrogen.lavalink.player import UpdatePlayer, UpdatePlayerTrack

update = UpdatePlayer(track=UpdatePlayerTrack.play_identifier("dzsearch:song", None))
player = await node.update_player("guild-id", update, False)
```

`UpdatePlayerTrack.play_encoded(...)` plays an encoded track and
`UpdatePlayerTrack.stop(None)` stops the current one.
`UpdatePlayer.reset_end_time()` sends `endTime: null` to clear an end time.

## Several nodes

```python
from hydrogen.lavalink.cluster import Cluster
from hydrogen.lavalink.config import ConfigParser

nodes = ConfigParser("Hydrogen/0.0.1a14").parse(
    "localhost:2333@password;[::1]:2334@password/tls"
)
cluster = Cluster(nodes, "123456789012345678")

for index in cluster.disconnected_nodes():
    await cluster.connect(index)

node_index, item = await cluster.recv()
index = cluster.search_connected_node()
```

The configuration string is a `;`-separated list of `host:port@password`
entries; adding `/tls` to an entry switches that node to HTTPS and WSS.
Entries that do not give a valid client are skipped.

`recv` returns `(node index, item)` pairs, where the item is a `Message`, the
`HydrolinkError` raised while receiving it, or `None` once that node's
connection ended. A node counts as connected (`connected_nodes`,
`is_connected`) from its `Ready` message until its connection ends.
Connecting a connected node raises `AlreadyConnectedError`. The queue holds
one item at a time, so keep calling `recv`. `close()` stops every node's
connection.

## Utilities

```python
from hydrogen.utils.common import progress_bar, time_to_string
from hydrogen.utils.time_parsers import semicolon_syntax, suffix_syntax

time_to_string(75)          # "01:15"
progress_bar(30, 60)        # "╣" + 15 × "▓" + 15 × "░" + "╠"
suffix_syntax("5m")         # timedelta(minutes=5)
semicolon_syntax("1:02:03") # timedelta(hours=1, minutes=2, seconds=3)
```

`time_to_string` gives `MM:SS` below one hour. From one hour on it gives
`HH:XX:YY`, where the middle field holds the seconds left over after the
whole hours (3661 gives `"01:61:00"`). Negative input raises `ValueError`.

`suffix_syntax` reads `90`, `90s`, `5m` or `2h` (up to three digits);
`semicolon_syntax` reads `MM:SS` or `HH:MM:SS`. Both return `None` when the
text does not match.

## What this package does not do

There is no Discord bot here: no slash commands, no music queue, no player
manager and no command line program. The package is the Lavalink client and
the helpers such a bot would use.

## Tests

The `test` extra installs pytest and pytest-asyncio, which the suite in
`tests/` needs:

```
pip install -e ".[test]"
pytest
```