"""Presentation side: the overlay blocks, their JSON export and the terminal view.

The parsing thread only ever calls :meth:`Overlay.post`, which queues the
notification. The presentation thread calls :meth:`Overlay.pump` to apply
everything queued so far, then reads the blocks.
"""

import datetime
import json
import logging
import os
import queue
import sys
import threading
from collections import deque

from colorama import Fore, Style, init

from cycle_overlay.config import (
    ALERT_MAX_AGE,
    DAY_COLOR,
    EVENING_COLOR,
    MORNING_COLOR,
    NIGHT_COLOR,
    ORANGE_COLOR,
    OUTPUT_JSON,
    SERVER_ALIVE_COLOR,
    SERVER_DEATH_WARNING_MS,
    SERVER_DYING_COLOR,
    SERVER_LIFETIME_HOURS,
)
from cycle_overlay.events import (
    Alert,
    NearPlayerCountUpdate,
    TimedEvent,
    TotalPlayerCountUpdate,
    UpdateState,
    utc_now,
)

init(autoreset=True)


def print_colored(text, color=Fore.WHITE, style=Style.NORMAL, end="\n"):
    """Print colored text."""
    print(f"{style}{color}{text}{Style.RESET_ALL}", end=end)


def hex_color(rgb):
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def format_countdown(ms):
    """Milliseconds as ``m:ss``."""
    return f"{ms // 60000}:{(ms % 60000) // 1000:02}"


def timestamp_millis(dt):
    return int(dt.timestamp() * 1000)


# ---------- Blocks ----------
class ServerBlock:
    """Player counts, session name and party size."""

    def __init__(self):
        self.total_players = 0
        self.near_players = 0
        self.party_size = 0
        self.session_name = ""
        self.visible = False

    def on_state_update(self, game, games_ago=None):
        if game is None:
            self.visible = False
            return
        self.party_size = game.party_size
        self.total_players = game.total_players
        self.near_players = game.near_players
        if games_ago is not None:
            self.session_name = f"{game.name} | {games_ago}"
        else:
            self.session_name = game.name
        self.visible = True

    def lines(self):
        if not self.visible:
            return []
        lines = [f"PLAYERS: TOTAL {self.total_players}  |  NEAR {self.near_players}"]
        server = f"SERVER: {self.session_name}"
        if self.party_size > 1:
            server += f"  PARTY: {self.party_size:02}"
        lines.append(server)
        return lines

    def to_dict(self):
        return {
            "visible": self.visible,
            "totalPlayers": self.total_players,
            "nearPlayers": self.near_players,
            "partySize": self.party_size,
            "sessionName": self.session_name,
            "color": hex_color(ORANGE_COLOR),
        }


class TimeBlock:
    """Countdowns to each part of the day and to the server shutting down."""

    def __init__(self):
        self.game_start = 0
        self.game_end = 0
        self.map = None
        self.visible = False

    def on_state_update(self, game):
        if game is None:
            self.visible = False
            return
        self.map = game.map
        created_at = timestamp_millis(game.created_at)
        self.game_start = created_at - game.map.timings.morning
        self.game_end = created_at + SERVER_LIFETIME_HOURS * 3600 * 1000
        self.visible = True

    @staticmethod
    def diff(now, target, cycle):
        diff = target - now
        return diff if diff > 0 else cycle + diff

    def countdowns(self, now_ms=None):
        """Milliseconds until morning, day, evening, night and server death; None without a map."""
        if self.map is None:
            return None
        if now_ms is None:
            now_ms = timestamp_millis(utc_now())
        timings = self.map.timings
        cycle = timings.time_between_storms
        elapsed = (now_ms - self.game_start) % cycle

        target = 0
        to_morning = self.diff(elapsed, target, cycle)
        target += timings.morning
        to_day = self.diff(elapsed, target, cycle)
        target += timings.day
        to_evening = self.diff(elapsed, target, cycle)
        target += timings.evening
        to_night = self.diff(elapsed, target, cycle)

        return {
            "morning": to_morning,
            "day": to_day,
            "evening": to_evening,
            "night": to_night,
            "serverDeath": self.game_end - now_ms,
        }

    def to_dict(self, now_ms=None):
        countdowns = self.countdowns(now_ms) if self.visible else None
        if countdowns is None:
            return {"visible": False}
        dying = countdowns["serverDeath"] <= SERVER_DEATH_WARNING_MS
        colors = {
            "morning": MORNING_COLOR,
            "day": DAY_COLOR,
            "evening": EVENING_COLOR,
            "night": NIGHT_COLOR,
            "serverDeath": SERVER_DYING_COLOR if dying else SERVER_ALIVE_COLOR,
        }
        return {
            "visible": True,
            "map": self.map.title,
            "countdowns": {
                key: {"ms": value, "text": format_countdown(max(value, 0)), "color": hex_color(colors[key])}
                for key, value in countdowns.items()
            },
        }


class EventLog:
    """Timed events, shown until they expire; cleared when the session ends."""

    def __init__(self, maxlen=50):
        self.log = deque(maxlen=maxlen)

    def post(self, event):
        self.log.append(event)

    def on_state_update(self, game):
        if game is None:
            self.log.clear()

    def active(self, now=None):
        now = now or utc_now()
        return [event for event in self.log if event.is_active(now)]

    def to_list(self, now=None):
        now = now or utc_now()
        return [event.to_dict(now) for event in self.active(now)]


# ---------- Alerts ----------
class Beeper:
    """Audible cue on the terminal bell. Alerts for old log lines stay silent."""

    def __init__(self, stream=None, max_age=ALERT_MAX_AGE):
        self.stream = stream or sys.stdout
        self.max_age = datetime.timedelta(seconds=max_age)
        self.beeps = 0

    def beep(self, alert, now=None):
        now = now or utc_now()
        if now - alert.time >= self.max_age:
            return False
        logging.debug(f"Beep {alert.frequency}Hz for {alert.duration_ms}ms")
        self.stream.write("\a")
        self.stream.flush()
        self.beeps += 1
        return True


# ---------- Overlay ----------
class Overlay:
    """Presentation sink: receives notifications and keeps the displayed blocks."""

    def __init__(self, store, beeper=None):
        self.store = store
        self.beeper = beeper or Beeper()
        self.queue = queue.Queue()
        self.server_block = ServerBlock()
        self.time_block = TimeBlock()
        self.event_block = EventLog()
        self.last_updated = None
        self._lock = threading.Lock()

    def post(self, notification):
        """Called from the parsing thread; never blocks."""
        self.queue.put_nowait(notification)

    def pump(self):
        """Apply every queued notification. Returns how many were applied."""
        applied = 0
        with self._lock:
            while True:
                try:
                    notification = self.queue.get_nowait()
                except queue.Empty:
                    break
                self.apply(notification)
                applied += 1
            if applied:
                self.last_updated = int(datetime.datetime.now().timestamp())
        return applied

    def apply(self, notification):
        if isinstance(notification, TotalPlayerCountUpdate):
            self.server_block.total_players = notification.players
        elif isinstance(notification, NearPlayerCountUpdate):
            self.server_block.near_players = notification.players
        elif isinstance(notification, UpdateState):
            self.server_block.on_state_update(notification.game, notification.games_ago)
            self.time_block.on_state_update(notification.game)
            self.event_block.on_state_update(notification.game)
        elif isinstance(notification, TimedEvent):
            self.event_block.post(notification)
        elif isinstance(notification, Alert):
            self.beeper.beep(notification)
        else:
            logging.warning(f"Unknown notification: {notification!r}")

    def snapshot(self, now=None):
        """Everything the overlay shows, as plain JSON-ready data."""
        now = now or utc_now()
        with self._lock:
            return {
                "in_game": self.store.is_in_game(),
                "last_updated": self.last_updated,
                "server": self.server_block.to_dict(),
                "time": self.time_block.to_dict(timestamp_millis(now)),
                "events": self.event_block.to_list(now),
            }

    def export_json(self, path=OUTPUT_JSON):
        """Exports the current overlay state to a JSON file."""
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self.snapshot(), f, indent=4)
        except OSError as e:
            logging.error(f"Error during JSON export: {e}")

    def print_terminal_snapshot(self, test_mode=False, clear=True):
        """Boxed terminal view of the overlay."""
        data = self.snapshot()
        if clear:
            os.system("cls" if os.name == "nt" else "clear")
        mode_text = "TEST MODE" if test_mode else "LIVE MODE"
        mode_color = Fore.YELLOW if test_mode else Fore.GREEN
        print_colored("╔" + "═" * 58 + "╗", Fore.BLUE)
        print_colored(f"║{'THE CYCLE OVERLAY':^58}║", Fore.CYAN, Style.BRIGHT)
        print_colored(f"║{mode_text + ' - ' + datetime.datetime.now().strftime('%H:%M:%S'):^58}║", mode_color)
        print_colored("╠" + "═" * 58 + "╣", Fore.BLUE)

        server_lines = self.server_block.lines()
        if not server_lines:
            print_colored(f"║ {'Waiting for a match...':<56} ║", Fore.WHITE, Style.DIM)
        for line in server_lines:
            print_colored(f"║ {line[:56]:<56} ║", Fore.YELLOW, Style.BRIGHT)

        time_data = data["time"]
        if time_data["visible"]:
            c = time_data["countdowns"]
            print_colored("╠" + "═" * 58 + "╣", Fore.BLUE)
            print_colored(f"║ {time_data['map']:<56} ║", Fore.WHITE)
            print_colored("║ ", Fore.WHITE, end="")
            print_colored(f"{c['morning']['text']:>6}", Fore.CYAN, end="")
            print_colored(f" / {c['day']['text']:>6}", Fore.YELLOW, end="")
            print_colored(f" / {c['evening']['text']:>6}", Fore.WHITE, Style.BRIGHT, end="")
            print_colored(f" / {c['night']['text']:>6}", Fore.MAGENTA, end="")
            dying = c["serverDeath"]["ms"] <= SERVER_DEATH_WARNING_MS
            print_colored(f" / {c['serverDeath']['text']:>7}", Fore.RED if dying else Fore.WHITE, end="")
            print_colored("        ║", Fore.WHITE)

        print_colored("╠" + "═" * 58 + "╣", Fore.BLUE)
        print_colored("║ EVENTS" + " " * 51 + "║", Fore.RED, Style.BRIGHT)
        events = data["events"][-5:]
        for event in events:
            text = f"[{event['remaining']:02}s] {event['message']}"
            text = text[:56] if len(text) <= 56 else text[:53] + "..."
            print_colored(f"║ {text:<56} ║", Fore.GREEN)
        for _ in range(max(0, 5 - len(events))):
            print_colored("║" + " " * 58 + "║", Fore.WHITE)
        print_colored("╚" + "═" * 58 + "╝", Fore.BLUE)
