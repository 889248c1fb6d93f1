import threading
from typing import Any, Dict, List


class SnapshotStore:
    """
    Latest engine snapshot + recent events, shared between the simulation
    thread (writer) and the API (readers). One store per app.
    """

    def __init__(self):
        self._snapshot: Dict[str, Any] = {}
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def update(self, snapshot: Dict[str, Any], events: List[Dict[str, Any]] = None):
        with self._lock:
            self._snapshot = snapshot
            if events is not None:
                self._events = list(events)

    def get_snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._snapshot)

    def get_events(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._events)

    def clear(self):
        with self._lock:
            self._snapshot = {}
            self._events = []
