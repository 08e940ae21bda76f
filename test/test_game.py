import pytest

from cycle_overlay.game import (
    NORMAL,
    THARIS,
    GameSession,
    MapVariant,
    Timings,
    duration,
    fake_name,
    session_name,
)


def test_duration():
    assert duration(4, 0) == 240_000
    assert duration(16, 40) == 1_000_000


def test_time_between_storms():
    assert NORMAL.time_between_storms == 2_320_000
    assert THARIS.time_between_storms == 1_780_000
    assert Timings(1, 2, 3, 4).time_between_storms == 10


@pytest.mark.parametrize("code, variant", [
    ("MAP01", MapVariant.BRIGHT_SANDS),
    ("MAP02", MapVariant.CRESCENT_FALLS),
    ("AlienCaverns", MapVariant.THARIS_ISLAND),
    ("MAP03", None),
    ("", None),
])
def test_map_from_code(code, variant):
    assert MapVariant.from_code(code) is variant


def test_map_titles_and_timings():
    assert MapVariant.THARIS_ISLAND.title == "Tharis Island"
    assert MapVariant.THARIS_ISLAND.timings is THARIS
    assert MapVariant.CRESCENT_FALLS.timings is NORMAL
    assert MapVariant.default() is MapVariant.BRIGHT_SANDS


def test_session_name_is_deterministic():
    first = session_name("prospect-eu-0b1f4c9a27d3")

    assert first == session_name("prospect-eu-0b1f4c9a27d3")
    assert first == fake_name(0x0B1F4C9A27D3)
    color, animal = first.split(" ")
    assert color and animal


def test_session_name_uses_low_64_bits():
    assert session_name("x-1" + "0" * 16 + "5") == fake_name(5)


@pytest.mark.parametrize("instance_id", ["prospect-eu-", "", "prospect-eu-nothex"])
def test_session_name_without_hex_tail(instance_id):
    assert session_name(instance_id) == ""


def test_session_counters():
    game = GameSession("prospect-eu-1a", "EU")

    assert game.player_left() == 0
    assert game.total_players == 0
    assert game.player_joined() == 1
    assert game.player_joined() == 2
    assert game.player_left() == 2
    assert game.total_players == 1
    assert game.near_player_gone() == 0
    assert game.near_player_seen() == 1
    assert game.kill("a") == 1
    assert game.kill("a") == 2
    assert game.kill("b") == 1

    game.drop()

    assert (game.total_players, game.near_players, game.kill_count) == (0, 0, {})


def test_session_to_dict():
    game = GameSession("prospect-eu-1a", "EU", map=MapVariant.CRESCENT_FALLS, party_size=2)

    data = game.to_dict()

    assert data["instanceId"] == "prospect-eu-1a"
    assert data["map"] == "Crescent Falls"
    assert data["partySize"] == 2
    assert data["name"] == game.name
