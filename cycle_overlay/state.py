"""Session history shared between the parsing thread and the overlay."""

import copy
import logging
import threading
from contextlib import contextmanager


class SessionStore:
    """Most-recent-first session history plus the "in game" flag, behind one lock.

    Readers get copies; the parsing thread mutates the live front session only
    inside :meth:`modify`. Nothing here may be called while holding the lock
    across a notification hand-off.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._games = []
        self._in_game = False

    def set_game(self, game):
        """Make ``game`` the current session.

        Returns a copy of the new front and its games-ago distance, both taken
        under the same lock.

        A session already seen (same instance id) is re-entered rather than
        replaced: the existing object goes to the front again with its
        accumulated fields, and its earlier position stays as history.
        """
        with self._lock:
            self._in_game = True
            if self._games:
                self._games[0].drop()
            existing = next((g for g in self._games if g.instance_id == game.instance_id), None)
            if existing is not None:
                logging.info(f"Rejoined session {existing.name or existing.instance_id}")
                self._games.insert(0, existing)
            else:
                self._games.insert(0, game)
            return copy.deepcopy(self._games[0]), self._games_ago()

    def leave_game(self):
        with self._lock:
            self._in_game = False
            if self._games:
                self._games[0].drop()

    def is_in_game(self):
        with self._lock:
            return self._in_game

    def current(self):
        """Copy of the front session, or None."""
        with self._lock:
            return copy.deepcopy(self._games[0]) if self._games else None

    def history(self):
        with self._lock:
            return copy.deepcopy(self._games)

    @contextmanager
    def modify(self):
        """Hold the lock and yield the live front session (None when history is empty)."""
        with self._lock:
            yield self._games[0] if self._games else None

    def games_ago(self):
        """How many games back the current session was last played, or None."""
        with self._lock:
            return self._games_ago()

    def _games_ago(self):
        if len(self._games) < 2:
            return None
        front = self._games[0]
        for distance, game in enumerate(self._games[1:], start=1):
            if game == front:
                return distance
        return None

    def __len__(self):
        with self._lock:
            return len(self._games)
