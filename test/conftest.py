"""Shared fixtures: a store, a sink that records notifications, and game-log line builders."""

from datetime import datetime, timezone

import pytest

from cycle_overlay.listener import Listener
from cycle_overlay.state import SessionStore

BASE_TIME = datetime(2023, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


def log_line(event_type, text, stamp="2023.05.01-10.00.00:000", frame="  0"):
    return f"[{stamp}][{frame}]{event_type}: {text}"


def travel(is_match, session_id="prospect-eu-0b1f4c9a27d3", region="EU"):
    return log_line(
        "LogYTravel",
        f"UYControllerTravelComponent::TravelToServer m_isMatch [{is_match}] sessionId [{session_id}] region [{region}]",
    )


def squad(size):
    return log_line("LogYTravel", f"Forcing transition to match /Game/Maps/MP/MAP01/Map01_P?SquadSize={size}?Region=EU")


def challenge(seconds, stamp="2023.05.01-10.00.00:000"):
    return log_line("LogHandshake", f"SendChallengeResponse. Timestamp: {seconds}.531", stamp=stamp)


def welcomed(code="MAP01"):
    return log_line("LogNet", f"Welcomed by server (Level: /Game/Maps/MP/{code}/Map_P, Game: /Script/Prospect.YGameModeMatch)")


def match_state(state):
    return log_line("LogYPlayer", f"OnRep_PlayerMatchState [{state}]")


def death(causer="AIChar_Strider_BP_C_2147", origin="WP_E_Pistol_Bullet_01", damage="35.500000"):
    return log_line(
        "LogYPlayer",
        "AYPlayerState::OnRep_PlayerMatchFinishedResult Result:Dead "
        f"Damage:Causer:{causer} Origin:OriginRow:[{origin}] m_healthDamage:{damage} Location:X=1.0",
    )


def join_session(session_id="prospect-eu-0b1f4c9a27d3", party_size=3, code="MAP01"):
    """Lines that take the session parser from idle to a started session."""
    return [travel(1, session_id), squad(party_size), challenge(10), welcomed(code)]


class RecordingSink:
    """Presentation sink that keeps every notification it receives."""

    def __init__(self):
        self.notifications = []

    def post(self, notification):
        self.notifications.append(notification)

    def of_type(self, cls):
        return [n for n in self.notifications if isinstance(n, cls)]

    def clear(self):
        self.notifications.clear()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def listener(store, sink):
    return Listener(store, sink)


@pytest.fixture
def feed(listener):
    def _feed(*lines):
        for line in lines:
            listener.handle(line)
    return _feed
