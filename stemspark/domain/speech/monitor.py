import threading
from typing import Optional

class ReadAloudMonitor:
    """
    Last outcome of the read-aloud callbacks, for clients that poll.
    Callbacks may arrive on the playback thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.last_event: Optional[str] = None
        self.last_error: Optional[str] = None

    def started(self):
        with self._lock:
            self.last_event, self.last_error = "started", None

    def ended(self):
        with self._lock:
            self.last_event = "ended"

    def failed(self, message: str):
        with self._lock:
            self.last_event, self.last_error = "error", message

    def reset(self):
        with self._lock:
            self.last_event, self.last_error = None, None
