import io
import json
from datetime import datetime, timedelta, timezone

import pytest

from conftest import BASE_TIME
from cycle_overlay.catalog import Rarity, get_actor, get_weapon
from cycle_overlay.config import LIGHT_GRAY_COLOR, SERVER_DYING_COLOR
from cycle_overlay.events import (
    Alert,
    EvacShipCalled,
    MeteorsEvent,
    NearPlayerCountUpdate,
    PlayerDead,
    TotalPlayerCountUpdate,
    UpdateState,
)
from cycle_overlay.game import GameSession, MapVariant
from cycle_overlay.overlay import Beeper, Overlay, TimeBlock, format_countdown, timestamp_millis


@pytest.fixture
def bell():
    return io.StringIO()


@pytest.fixture
def overlay(store, bell):
    return Overlay(store, Beeper(stream=bell))


def start_game(store, instance_id="prospect-eu-0b1f4c9a27d3", **kwargs):
    """The UpdateState a welcome line produces for this session."""
    return UpdateState(*store.set_game(GameSession(instance_id, "EU", created_at=BASE_TIME, **kwargs)))


def test_format_countdown():
    assert format_countdown(0) == "0:00"
    assert format_countdown(61_500) == "1:01"
    assert format_countdown(2_079_000) == "34:39"


def test_time_block_countdowns():
    block = TimeBlock()
    block.on_state_update(GameSession("prospect-eu-1a", "EU", created_at=BASE_TIME))
    now = timestamp_millis(BASE_TIME) + 1000

    countdowns = block.countdowns(now)

    assert countdowns == {
        "morning": 2_079_000,
        "day": 2_319_000,
        "evening": 999_000,
        "night": 1_799_000,
        "serverDeath": 6 * 3600 * 1000 - 1000,
    }


def test_time_block_tharis_cycle():
    block = TimeBlock()
    block.on_state_update(GameSession("prospect-eu-1a", "EU", map=MapVariant.THARIS_ISLAND, created_at=BASE_TIME))
    now = timestamp_millis(BASE_TIME) + 1_780_000 + 1000

    assert block.countdowns(now)["evening"] == 759_000


def test_time_block_server_dying_color():
    block = TimeBlock()
    block.on_state_update(GameSession("prospect-eu-1a", "EU", created_at=BASE_TIME))
    now = timestamp_millis(BASE_TIME + timedelta(hours=5, minutes=30))

    data = block.to_dict(now)

    assert data["countdowns"]["serverDeath"]["ms"] == 30 * 60 * 1000
    assert data["countdowns"]["serverDeath"]["color"] == "#{:02x}{:02x}{:02x}".format(*SERVER_DYING_COLOR)


def test_time_block_hidden_without_game():
    block = TimeBlock()

    assert block.countdowns(0) is None
    assert block.to_dict(0) == {"visible": False}


def test_evac_ship_progression():
    event = EvacShipCalled(BASE_TIME)

    assert event.render(BASE_TIME)[0] == "Evac ship [called]"
    assert event.render(BASE_TIME + timedelta(seconds=50))[0] == "Evac ship [landed]"
    assert event.render(BASE_TIME + timedelta(seconds=80)) == ("Evac ship [flying]", LIGHT_GRAY_COLOR)
    assert event.is_active(BASE_TIME + timedelta(seconds=85))
    assert not event.is_active(BASE_TIME + timedelta(seconds=86))


def test_player_dead_message():
    strider = get_actor("AIChar_Strider_BP")
    dead = PlayerDead(BASE_TIME, actor=strider, actor_kills=2, damage=35.5)

    assert dead.render() == ("Strider kills player (35.50 ) [x02]", Rarity.COMMON.color)


def test_player_dead_with_weapon():
    player = get_actor("PRO_PlayerCharacter")
    dead = PlayerDead(BASE_TIME, actor=player, actor_kills=1, weapon=get_weapon("WP_A_AR_Bullet_01"), damage=12)

    assert dead.render()[0] == "Player kills player (KOR: 12.00 )"


def test_beeper_ignores_old_alerts(bell):
    beeper = Beeper(stream=bell)
    now = datetime(2023, 5, 1, 12, 0, tzinfo=timezone.utc)

    assert beeper.beep(Alert(2000, 250, now - timedelta(seconds=10)), now)
    assert not beeper.beep(Alert(400, 150, now - timedelta(seconds=60)), now)
    assert bell.getvalue() == "\a"
    assert beeper.beeps == 1


def test_overlay_applies_queued_notifications(overlay, store):
    update = start_game(store, party_size=2)

    overlay.post(update)
    overlay.post(TotalPlayerCountUpdate(3))
    overlay.post(NearPlayerCountUpdate(1))
    assert overlay.server_block.total_players == 0

    assert overlay.pump() == 3
    assert overlay.pump() == 0

    server = overlay.server_block
    assert server.visible
    assert (server.total_players, server.near_players, server.party_size) == (3, 1, 2)
    assert server.session_name == update.game.name
    assert server.lines()[1].endswith("PARTY: 02")


def test_overlay_shows_games_ago(overlay, store):
    start_game(store)
    start_game(store, "prospect-eu-ffff")
    update = start_game(store)

    overlay.post(update)
    overlay.pump()

    assert overlay.server_block.session_name == f"{update.game.name} | 2"


def test_games_ago_fixed_when_session_started(overlay, store):
    start_game(store)
    start_game(store, "prospect-eu-ffff")
    update = start_game(store)
    overlay.post(update)

    # The store moves on before the overlay gets to the queued update
    start_game(store, "prospect-eu-eeee")
    overlay.pump()

    assert store.games_ago() is None
    assert overlay.server_block.session_name == f"{update.game.name} | 2"


def test_session_end_clears_events(overlay, store):
    now = datetime.now(timezone.utc)
    overlay.post(start_game(store))
    overlay.post(MeteorsEvent(now))
    overlay.pump()
    assert len(overlay.event_block.active(now)) == 1

    overlay.post(UpdateState(None))
    overlay.pump()

    assert overlay.event_block.active(now) == []
    assert not overlay.server_block.visible
    assert overlay.snapshot()["time"] == {"visible": False}


def test_overlay_beeps_for_recent_alert(overlay, bell):
    overlay.post(Alert(2000, 250, datetime.now(timezone.utc)))
    overlay.pump()

    assert bell.getvalue() == "\a"


def test_snapshot_and_export(overlay, store, tmp_path):
    now = datetime.now(timezone.utc)
    overlay.post(start_game(store))
    overlay.post(EvacShipCalled(now))
    overlay.pump()
    path = tmp_path / "live_overlay.json"

    overlay.export_json(path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["in_game"] is True
    assert data["server"]["visible"] is True
    assert data["time"]["map"] == "Bright Sands"
    assert data["events"][0]["kind"] == "evac_ship"
    assert data["events"][0]["message"] == "Evac ship [called]"


def test_terminal_snapshot(overlay, store, capsys):
    overlay.post(start_game(store))
    overlay.pump()

    overlay.print_terminal_snapshot(test_mode=True, clear=False)

    out = capsys.readouterr().out
    assert "THE CYCLE OVERLAY" in out
    assert "TEST MODE" in out
    assert "Bright Sands" in out
