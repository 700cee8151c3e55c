import copy

import pytest

from hydrogen.lavalink.errors import DecodeError
from hydrogen.lavalink.filters import Filters, Timescale
from hydrogen.lavalink.player import (
    Player,
    UpdatePlayer,
    UpdatePlayerTrack,
    UpdateSessionRequest,
    UpdateSessionResponse,
    VoiceState,
)

TRACK = {
    "encoded": "QAAAjQIAJVJpY2sgQXN0bGV5",
    "info": {
        "identifier": "dQw4w9WgXcQ",
        "isSeekable": True,
        "author": "Some Artist",
        "length": 212000,
        "isStream": False,
        "position": 0,
        "title": "Some Song",
        "uri": "https://example.com/watch",
        "artworkUrl": None,
        "isrc": None,
        "sourceName": "youtube",
    },
    "pluginInfo": {},
    "userData": {"requester": "42"},
}

PLAYER = {
    "guildId": "1234",
    "track": TRACK,
    "volume": 100,
    "paused": False,
    "state": {"time": 1500000000000, "position": 6000, "connected": True, "ping": 50},
    "voice": {"token": "token", "endpoint": "voice.example.com", "sessionId": "abc"},
    "filters": {"timescale": {"speed": 1.25}},
}


def test_player_round_trip():
    player = Player.from_dict(PLAYER)
    assert player.to_dict() == PLAYER


def test_player_fields_decoded():
    player = Player.from_dict(PLAYER)
    assert player.guild_id == "1234"
    assert player.track.info.title == "Some Song"
    assert player.voice == VoiceState("token", "voice.example.com", "abc")
    assert player.filters == Filters(timescale=Timescale(speed=1.25))


def test_player_without_track():
    data = copy.deepcopy(PLAYER)
    data["track"] = None
    player = Player.from_dict(data)
    assert player.track is None
    assert player.to_dict()["track"] is None


def test_player_requires_filters():
    data = copy.deepcopy(PLAYER)
    del data["filters"]
    with pytest.raises(DecodeError):
        Player.from_dict(data)


@pytest.mark.parametrize("volume", [-1, 70000])
def test_player_volume_out_of_range(volume):
    data = copy.deepcopy(PLAYER)
    data["volume"] = volume
    with pytest.raises(DecodeError):
        Player.from_dict(data)


def test_voice_state_round_trip():
    data = {"token": "token", "endpoint": "voice.example.com", "sessionId": "xyz"}
    assert VoiceState.from_dict(data).to_dict() == data


def test_update_track_variants():
    assert UpdatePlayerTrack.stop().to_dict() == {"encoded": None}
    assert UpdatePlayerTrack.play_encoded("abc").to_dict() == {"encoded": "abc"}
    assert UpdatePlayerTrack.play_identifier("ytsearch:song", {"a": 1}).to_dict() == {
        "identifier": "ytsearch:song",
        "userData": {"a": 1},
    }


def test_update_track_rejects_conflicting_choices():
    with pytest.raises(ValueError):
        UpdatePlayerTrack(encoded="abc", identifier="xyz")
    with pytest.raises(ValueError):
        UpdatePlayerTrack(encoded="abc", stop_current=True)


def test_empty_update_player_is_empty():
    assert UpdatePlayer().to_dict() == {}


def test_update_player_reset_end_time():
    update = UpdatePlayer(end_time=5000)
    update.reset_end_time()
    assert update.end_time is None
    assert update.to_dict() == {"endTime": None}


def test_update_player_full():
    voice = VoiceState("token", "voice.example.com", "abc")
    update = UpdatePlayer(
        track=UpdatePlayerTrack.play_encoded("abc"),
        position=1000,
        end_time=9000,
        volume=80,
        paused=True,
        filters=Filters(volume=1.5),
        voice=voice,
    )
    encoded = update.to_dict()
    assert encoded["track"] == {"encoded": "abc"}
    assert encoded["position"] == 1000
    assert encoded["endTime"] == 9000
    assert encoded["volume"] == 80
    assert encoded["paused"] is True
    assert encoded["filters"] == {"volume": 1.5}
    assert encoded["voice"] == voice.to_dict()


def test_update_session_request_omits_unset():
    assert UpdateSessionRequest(resuming=True).to_dict() == {"resuming": True}
    assert UpdateSessionRequest(True, 60).to_dict() == {"resuming": True, "timeout": 60}


def test_update_session_response_round_trip():
    data = {"resuming": False, "timeout": 60}
    response = UpdateSessionResponse.from_dict(data)
    assert response == UpdateSessionResponse(False, 60)
    assert response.to_dict() == data


def test_update_session_response_rejects_negative_timeout():
    with pytest.raises(DecodeError):
        UpdateSessionResponse.from_dict({"resuming": True, "timeout": -5})