"""Turn game log lines into session state changes and overlay notifications.

Every parser gets the same decoded record and the shared store, and returns
the notifications the line produced. Lines a parser does not care about
return an empty list.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from cycle_overlay.catalog import get_actor, get_weapon
from cycle_overlay.config import (
    CHALLENGE_TIMESTAMP_CORRECTION,
    HIGH_TONE,
    LINE_PATTERN,
    LOW_TONE,
    TIME_FORMAT,
)
from cycle_overlay.events import (
    Alert,
    EvacShipCalled,
    MeteorsEvent,
    NearPlayerCountUpdate,
    PlayerDead,
    PlayerEscaped,
    TotalPlayerCountUpdate,
    UpdateState,
)
from cycle_overlay.game import GameSession, MapVariant

LINE_RE = re.compile(LINE_PATTERN)

# Event types
TRAVEL = "LogYTravel"
HANDSHAKE = "LogHandshake"
NET = "LogNet"
PLAYER = "LogYPlayer"
INVENTORY = "LogYInventory"
ACTIVITIES = "LogYActivities"


# ---------- Parsing Helpers ----------
def extract(text, start, end):
    """Return the text between the first ``start`` and the first ``end`` after it, or None."""
    start_index = text.find(start)
    if start_index < 0:
        return None
    value_start = start_index + len(start)
    end_index = text.find(end, value_start)
    if end_index < 0:
        return None
    return text[value_start:end_index]


@dataclass(frozen=True)
class LogRecord:
    time: datetime
    event_type: str
    text: str


def parse_time(value):
    """Parse ``YYYY.MM.DD-HH.MM.SS:mmm`` as a UTC instant. Raises ValueError on bad digits."""
    return datetime.strptime(value, TIME_FORMAT).replace(tzinfo=timezone.utc)


def decode_line(line):
    """Decode one raw log line into a LogRecord, or None when it is not an event line."""
    m = LINE_RE.search(line)
    if not m:
        return None
    return LogRecord(parse_time(m.group(1)), m.group(2), m.group(3))


class Parser:
    """Interface shared by the event parsers."""

    def parse(self, record, store):
        raise NotImplementedError


# ---------- Session ----------
class SessionParser(Parser):
    """Follows travel, handshake and welcome lines to detect sessions starting and ending."""

    def __init__(self):
        self.instance_id = ""
        self.region = ""
        self.map = MapVariant.default()
        self.party_size = 1
        self.created_at = datetime.fromtimestamp(0, timezone.utc)
        self.holding = False

    def parse(self, record, store):
        text = record.text
        if record.event_type == TRAVEL:
            if text.startswith("UYControllerTravelComponent::TravelToServer"):
                return self._travel(text, store)
            if text.startswith("Forcing transition to match"):
                self._forcing_transition(text)
        elif record.event_type == HANDSHAKE and self.holding and text.startswith("SendChallengeResponse"):
            self._challenge_response(record)
        elif record.event_type == NET and self.holding and text.startswith("Welcomed by server"):
            return self._welcomed(text, store)
        return []

    def _travel(self, text, store):
        is_match = extract(text, "m_isMatch [", "]")
        if is_match is None:
            logging.error(f"Cannot parse: {text}")
            return []
        if is_match == "0":
            logging.info("--------------- LEAVE GAME ---------------")
            store.leave_game()
            return [UpdateState(None)]

        instance_id = extract(text, "sessionId [", "]")
        region = extract(text, "region [", "]")
        if instance_id is None or region is None:
            logging.error(f"Cannot parse session details: {text}")
            return []
        self.instance_id = instance_id
        self.region = region
        self.holding = True
        logging.debug(f"Travelling to match {instance_id} ({region})")
        return []

    def _forcing_transition(self, text):
        size = extract(text, "SquadSize=", "?")
        if size is None:
            self.party_size = 1
            return
        try:
            party_size = int(size)
        except ValueError:
            party_size = 0
        if party_size < 1:
            logging.warning(f"Bad squad size {size!r}, assuming solo")
            party_size = 1
        self.party_size = party_size

    def _challenge_response(self, record):
        timestamp = extract(record.text, "Timestamp: ", ".")
        try:
            seconds = int(timestamp) - CHALLENGE_TIMESTAMP_CORRECTION
        except (TypeError, ValueError):
            logging.warning(f"Cannot parse challenge timestamp: {record.text}")
            return
        self.created_at = record.time - timedelta(seconds=seconds)

    def _welcomed(self, text, store):
        code = extract(text, "/Game/Maps/MP/", "/")
        variant = MapVariant.from_code(code) if code else None
        if variant:
            self.map = variant
        else:
            logging.debug(f"Unknown map code {code!r}, keeping {self.map.title}")

        game = GameSession(
            instance_id=self.instance_id,
            region=self.region,
            map=self.map,
            created_at=self.created_at,
            party_size=self.party_size,
        )
        self.holding = False

        logging.info("==================================================")
        logging.info(f"New instance: {game.name!r}")
        logging.info("==================================================")

        current, games_ago = store.set_game(game)
        return [UpdateState(current, games_ago)]


# ---------- Players ----------
class PlayerParser(Parser):
    """Tracks player counts in the current session and the local player's match result."""

    def __init__(self):
        self.last_finished = False

    def parse(self, record, store):
        if not store.is_in_game():
            return []
        if record.event_type == PLAYER:
            return self._player(record, store)
        if record.event_type == INVENTORY and self.last_finished:
            return self._inventory(record, store)
        return []

    def _player(self, record, store):
        text = record.text
        notifications = []
        with store.modify() as game:
            if game is None:
                logging.error("Games list is empty")
                return []

            if text.startswith("OnRep_PlayerMatchState"):
                player_state = extract(text, "[", "]")
                if player_state is None:
                    logging.error(f"Cannot parse player state: {text}")
                    return []
                if player_state == "inMatch":
                    if game.player_joined() > game.party_size:
                        notifications.append(Alert(*HIGH_TONE, record.time))
                    self.last_finished = False
                elif game.total_players > 0:
                    if game.player_left() > game.party_size:
                        notifications.append(Alert(*LOW_TONE, record.time))
                    self.last_finished = True
                notifications.append(TotalPlayerCountUpdate(game.total_players))

            elif text.startswith("OnPlayerStateChanged"):
                notifications.append(NearPlayerCountUpdate(game.near_player_seen()))

            elif text.startswith("AYPlayerCharacter::Destroyed()"):
                if game.near_players > 0:
                    notifications.append(NearPlayerCountUpdate(game.near_player_gone()))

            elif text.startswith("AYPlayerState::OnRep_PlayerMatchFinishedResult"):
                notifications.extend(self._match_finished(record, game))

        return notifications

    def _match_finished(self, record, game):
        text = record.text
        result = extract(text, "Result:", " ")
        if result is None:
            logging.error(f"Cannot parse: {text}")
            return []

        result = result.lower()
        if result == "escaped":
            logging.info("Player escaped")
            return [PlayerEscaped(record.time)]
        if result != "dead":
            logging.error(f"Unknown result: {text}")
            return []

        causer_parts = extract(text, "Damage:Causer:", " ")
        if causer_parts is None:
            logging.warning(f"Death without causer: {text}")
            return []
        causer_name, _, attacker_id = causer_parts.partition("_C_")
        causer = get_actor(causer_name)

        origin = extract(text, "Origin:OriginRow:[", "]")
        if origin is None:
            logging.error("Origin string is empty")
        origin_weapon = get_weapon(origin)

        try:
            damage = float(extract(text, "m_healthDamage:", " "))
        except (TypeError, ValueError):
            logging.warning(f"Cannot parse damage: {text}")
            return []

        causer_kills = game.kill(attacker_id)
        weapon = resolve_weapon(causer, origin_weapon)

        logging.info("Player dead")
        logging.info(f"----- Killed by: {causer}")
        logging.info(f"----- Weapon: {weapon}")
        logging.info(f"----- Damage: {damage}")
        logging.info(f"----- Causer kills {causer_kills} times")

        return [PlayerDead(record.time, actor=causer, actor_kills=causer_kills, weapon=weapon, damage=damage)]

    def _inventory(self, record, store):
        if not record.text.startswith("GetInventoryComponentManager | Could not retrieve YGameStateMatch!"):
            return []
        with store.modify() as game:
            if game is None:
                return []
            total = game.player_joined()
        self.last_finished = False
        logging.info("Player finished before loading, revert player count.")
        return [TotalPlayerCountUpdate(total)]


def resolve_weapon(causer, origin_weapon):
    """Weapon to show for a death: suicide and fall damage have no origin weapon of their own."""
    if causer is None:
        return None
    if causer.name == "None":
        return get_weapon("Suicide")
    if causer.name == "Player":
        if origin_weapon is not None and origin_weapon.name == "None":
            return get_weapon("Fall")
        return origin_weapon
    return None


# ---------- Activities ----------
class ActivityParser(Parser):
    """World events everyone on the server can see: evac ships and meteor showers."""

    def parse(self, record, store):
        if record.event_type != ACTIVITIES or not store.is_in_game():
            return []
        if record.text.startswith("Warning: AC_EvacShip_BP"):
            logging.info("Evac ship called")
            return [EvacShipCalled(record.time)]
        if record.text.startswith("Warning: AA_MeteorShowerSpawner"):
            logging.info("Meteors event!")
            return [MeteorsEvent(record.time)]
        return []


def default_parsers():
    """Parsers in the order every line visits them."""
    return [ActivityParser(), PlayerParser(), SessionParser()]
