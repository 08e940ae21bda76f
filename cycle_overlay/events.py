"""Notifications sent from the parsers to the presentation sink.

Count and state updates change what the overlay shows; timed events live in
the event log until their lifetime runs out. ``Alert`` asks for an audible cue.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

from cycle_overlay.catalog import Actor, Weapon
from cycle_overlay.config import (
    EVAC_SHIP_LIFETIME,
    GREEN_COLOR,
    LIGHT_GRAY_COLOR,
    METEORS_LIFETIME,
    PLAYER_EVENT_LIFETIME,
)
from cycle_overlay.game import GameSession


def utc_now():
    return datetime.now(timezone.utc)


# ---------- State Updates ----------
@dataclass
class TotalPlayerCountUpdate:
    players: int


@dataclass
class NearPlayerCountUpdate:
    players: int


@dataclass
class UpdateState:
    """A session started (with its snapshot) or ended (``game`` is None).

    ``games_ago`` is taken when the session starts, so a late consumer still
    shows the value for this session.
    """

    game: Optional[GameSession]
    games_ago: Optional[int] = None


@dataclass
class Alert:
    frequency: int
    duration_ms: int
    time: datetime


# ---------- Timed Events ----------
@dataclass
class TimedEvent:
    time: datetime
    lifetime: timedelta
    message: str = ""
    color: tuple = GREEN_COLOR
    kind: str = field(init=False, default="event")

    @property
    def end_time(self):
        return self.time + self.lifetime

    def remaining(self, now=None):
        """Time left before the event disappears; zero once expired."""
        now = now or utc_now()
        if now >= self.end_time:
            return timedelta(0)
        return self.end_time - now

    def is_active(self, now=None):
        return self.remaining(now) > timedelta(0)

    def render(self, now=None):
        """Message and color as they should be shown at ``now``."""
        return self.message, self.color

    def to_dict(self, now=None):
        message, color = self.render(now)
        return {
            "kind": self.kind,
            "message": message,
            "color": "#{:02x}{:02x}{:02x}".format(*color),
            "remaining": int(self.remaining(now).total_seconds()),
        }


@dataclass
class EvacShipCalled(TimedEvent):
    lifetime: timedelta = timedelta(seconds=EVAC_SHIP_LIFETIME)
    message: str = "Evac ship [called]"
    kind: str = field(init=False, default="evac_ship")

    def render(self, now=None):
        remaining = self.remaining(now)
        if remaining < timedelta(seconds=10):
            return "Evac ship [flying]", LIGHT_GRAY_COLOR
        if remaining < timedelta(seconds=39):
            return "Evac ship [landed]", self.color
        return self.message, self.color


@dataclass
class MeteorsEvent(TimedEvent):
    lifetime: timedelta = timedelta(seconds=METEORS_LIFETIME)
    message: str = "Meteors event!"
    kind: str = field(init=False, default="meteors")


@dataclass
class PlayerEscaped(TimedEvent):
    lifetime: timedelta = timedelta(seconds=PLAYER_EVENT_LIFETIME)
    message: str = "Player escaped"
    kind: str = field(init=False, default="player_escaped")


@dataclass
class PlayerDead(TimedEvent):
    lifetime: timedelta = timedelta(seconds=PLAYER_EVENT_LIFETIME)
    actor: Optional[Actor] = None
    actor_kills: int = 0
    weapon: Optional[Weapon] = None
    damage: float = 0.0
    kind: str = field(init=False, default="player_dead")

    def render(self, now=None):
        killer = self.actor.name if self.actor else "Something"
        if self.weapon:
            message = f"{killer} kills player ({self.weapon.name}: {self.damage:.2f} )"
        else:
            message = f"{killer} kills player ({self.damage:.2f} )"
        if self.actor_kills > 1:
            message += f" [x{self.actor_kills:02d}]"
        color = self.actor.rarity.color if self.actor else self.color
        return message, color
