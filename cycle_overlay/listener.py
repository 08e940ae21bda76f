"""Follow the game log and feed every line through the parsers on a background thread."""

import logging
import threading
import time
from pathlib import Path

from cycle_overlay.config import FILE_CHECK_INTERVAL
from cycle_overlay.parsers import decode_line, default_parsers


def follow(path, stop_event=None, interval=FILE_CHECK_INTERVAL, from_start=True):
    """Open ``path`` and return a generator of its lines, waiting for new ones at end of file.

    Raises FileNotFoundError immediately if the file does not exist. The
    generator never ends on its own; set ``stop_event`` to finish it.
    """
    path = Path(path)
    f = open(path, "rb")
    if not from_start:
        f.seek(0, 2)
    return _read_lines(f, stop_event or threading.Event(), interval)


def _read_lines(f, stop_event, interval):
    # Bytes are held until the newline so a character split across writes decodes whole
    pending = b""
    with f:
        while not stop_event.is_set():
            try:
                chunk = f.readline()
            except OSError as e:
                logging.error(f"Error reading line from file: {e}")
                continue
            if not chunk:
                # End of file: wait for the game to write more
                stop_event.wait(interval)
                continue
            pending += chunk
            if not pending.endswith(b"\n"):
                continue
            line, pending = pending.rstrip(b"\r\n"), b""
            yield line.decode("utf-8", errors="replace")


class Listener:
    """Runs tailer -> decoder -> parsers for each line and posts the results to the sink."""

    def __init__(self, store, sink, parsers=None):
        self.store = store
        self.sink = sink
        self.parsers = parsers if parsers is not None else default_parsers()
        self.stop_event = threading.Event()
        self.thread = None
        self.error = None
        self.lines_processed = 0

    def handle(self, line):
        """Decode one line and run it through every parser in order."""
        record = decode_line(line)
        if record is None:
            return
        self.lines_processed += 1
        for parser in self.parsers:
            for notification in parser.parse(record, self.store):
                self.sink.post(notification)

    def process_log_file(self, path, from_start=True, interval=FILE_CHECK_INTERVAL):
        logging.info(f"Processing log file {path} started...")
        try:
            for line in follow(path, self.stop_event, interval, from_start):
                self.handle(line)
        except Exception as e:
            self.error = e
            logging.exception(f"Log listener stopped: {e}")
            raise
        logging.info(f"Processing log file {path} stopped")

    def start(self, path, from_start=True):
        """Check the log exists, then start following it on a daemon thread."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Game log doesn't exist: {path}")
        self.stop_event.clear()
        self.thread = threading.Thread(
            target=self.process_log_file,
            args=(path, from_start),
            name="log-listener",
            daemon=True,
        )
        self.thread.start()
        return self.thread

    def stop(self, timeout=5):
        self.stop_event.set()
        if self.thread and self.thread.is_alive():
            self.thread.join(timeout=timeout)

    def is_running(self):
        return self.thread is not None and self.thread.is_alive()


def wait_for(condition, timeout=5.0, interval=0.05):
    """Poll ``condition`` until it is true or ``timeout`` seconds pass."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return condition()
