"""Game session model: map timings, map variants and the session record itself."""

import enum
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone

# ---------- Name Generator ----------
COLORS = [
    "red", "blue", "green", "yellow", "white", "black", "cyan", "magenta", "orange", "pink",
    "purple", "brown", "lime", "olive", "maroon", "navy", "gray", "silver",
]

ANIMALS = [
    "cat", "dog", "lion", "tiger", "elephant", "giraffe", "bear", "fox", "wolf",
    "hippopotamus", "zebra", "deer", "rabbit", "squirrel", "kangaroo", "koala",
    "monkey", "penguin", "dolphin", "whale", "shark", "crocodile", "turtle", "octopus",
]

SEED_MASK = 0xFFFFFFFFFFFFFFFF


def fake_name(seed):
    """Pick a stable "colour animal" name for a 64-bit seed."""
    rng = random.Random(seed)
    color = rng.choice(COLORS)
    animal = rng.choice(ANIMALS)
    return f"{color} {animal}"


def session_name(instance_id):
    """Derive the display name from the hex segment after the last hyphen of the instance id."""
    tail = instance_id.split("-")[-1]
    if not tail:
        return ""
    try:
        seed = int(tail, 16) & SEED_MASK
    except ValueError:
        logging.warning(f"Instance id has no hex tail, leaving it unnamed: {instance_id}")
        return ""
    return fake_name(seed)


# ---------- Timings ----------
def duration(minutes, seconds):
    """Total duration in milliseconds."""
    return (minutes * 60 + seconds) * 1000


@dataclass(frozen=True)
class Timings:
    """Length of each part of the day on a map, in milliseconds."""

    morning: int
    day: int
    evening: int
    night: int
    time_between_storms: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self, "time_between_storms", self.morning + self.day + self.evening + self.night
        )


NORMAL = Timings(duration(4, 0), duration(16, 40), duration(13, 20), duration(4, 40))
THARIS = Timings(duration(4, 0), duration(12, 40), duration(8, 20), duration(4, 40))


# ---------- Maps ----------
class MapVariant(enum.Enum):
    BRIGHT_SANDS = ("MAP01", NORMAL)
    CRESCENT_FALLS = ("MAP02", NORMAL)
    THARIS_ISLAND = ("AlienCaverns", THARIS)

    def __init__(self, code, timings):
        self.code = code
        self.timings = timings

    @classmethod
    def default(cls):
        return cls.BRIGHT_SANDS

    @classmethod
    def from_code(cls, code):
        """Map code from the level path (e.g. ``MAP01``), or None when unknown."""
        for variant in cls:
            if variant.code == code:
                return variant
        return None

    @property
    def title(self):
        return self.name.replace("_", " ").title()


# ---------- Session ----------
@dataclass
class GameSession:
    """One played match instance, tracked from "welcomed by server" to the next travel away."""

    instance_id: str
    region: str
    map: MapVariant = MapVariant.BRIGHT_SANDS
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    party_size: int = 1
    total_players: int = 0
    near_players: int = 0
    kill_count: dict = field(default_factory=dict)
    name: str = field(init=False)

    def __post_init__(self):
        self.name = session_name(self.instance_id)

    def drop(self):
        """Reset per-visit counters; the session itself stays in history."""
        self.kill_count.clear()
        self.total_players = 0
        self.near_players = 0

    def kill(self, causer_id):
        """Count one more kill by ``causer_id`` and return its tally."""
        self.kill_count[causer_id] = self.kill_count.get(causer_id, 0) + 1
        return self.kill_count[causer_id]

    def player_joined(self):
        self.total_players += 1
        return self.total_players

    def player_left(self):
        """Decrement the total, saturating at zero. Returns the count before the decrement."""
        before = self.total_players
        if self.total_players > 0:
            self.total_players -= 1
        return before

    def near_player_seen(self):
        self.near_players += 1
        return self.near_players

    def near_player_gone(self):
        if self.near_players > 0:
            self.near_players -= 1
        return self.near_players

    def to_dict(self):
        return {
            "instanceId": self.instance_id,
            "region": self.region,
            "name": self.name,
            "map": self.map.title,
            "createdAt": self.created_at.isoformat(),
            "partySize": self.party_size,
            "totalPlayers": self.total_players,
            "nearPlayers": self.near_players,
            "killCount": dict(self.kill_count),
        }
