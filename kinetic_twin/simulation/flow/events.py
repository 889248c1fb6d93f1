"""
Event System for the Kinetic Network

Pub-sub for network and machine lifecycle events.

RULES:
- Events are emitted by the ledger / scheduler
- Subscribers (counters, notifier, MQTT sink) only react
- Deterministic: timestamps are tick numbers, not wall clock
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Callable, List
from enum import Enum


class KineticEventType(str, Enum):
    """
    Events are emitted on state transitions,
    NOT on every simulation tick.
    """
    # Network
    NETWORK_OVERLOAD = "NETWORK_OVERLOAD"

    # Machine processing
    PROCESS_STARTED = "PROCESS_STARTED"
    PROCESS_DEFERRED = "PROCESS_DEFERRED"
    PROCESS_COMPLETED = "PROCESS_COMPLETED"
    PROCESS_CANCELLED = "PROCESS_CANCELLED"

    # Item hand-off
    ITEM_HANDED_OFF = "ITEM_HANDED_OFF"


# Events surfaced to the player through IWorld.notify
USER_FACING_EVENTS = frozenset({
    KineticEventType.NETWORK_OVERLOAD,
    KineticEventType.PROCESS_STARTED,
    KineticEventType.PROCESS_COMPLETED,
})


@dataclass
class Event:
    type: KineticEventType
    tick: int
    node_key: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    def message(self) -> str:
        """Human-readable form used for notifications."""
        if self.type == KineticEventType.NETWORK_OVERLOAD:
            return (f"Network overloaded: {self.data.get('demanded', 0):.1f} stress "
                    f"> capacity {self.data.get('capacity', 0):.1f}. All machines stopped.")
        if self.type == KineticEventType.PROCESS_STARTED:
            return f"{self.data.get('kind', 'Machine')} at {self.node_key} started {self.data.get('input')}"
        if self.type == KineticEventType.PROCESS_COMPLETED:
            return (f"{self.data.get('kind', 'Machine')} at {self.node_key} produced "
                    f"{self.data.get('output')} x{self.data.get('count', 1)}")
        return f"{self.type.value} at {self.node_key}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "tick": self.tick,
            "node": self.node_key,
            "data": dict(self.data),
        }

    def __repr__(self) -> str:
        return f"Event({self.type.value}, tick={self.tick}, node={self.node_key})"


class EventDispatcher:
    """
    Event dispatcher for pub-sub pattern.

    Subscribing to None receives every event type.
    """

    def __init__(self, log_limit: int = 1000):
        self._subscribers: Dict[Any, List[Callable]] = {}
        self._event_log: List[Event] = []  # For debugging/replay
        self._log_limit = log_limit

    def subscribe(self, event_type, callback: Callable[[Event], None]) -> None:
        """
        Args:
            event_type: KineticEventType, or None for all events
            callback: Function to call when event is emitted
        """
        if event_type not in self._subscribers:
            self._subscribers[event_type] = []
        self._subscribers[event_type].append(callback)

    def emit(self, event: Event) -> None:
        self._event_log.append(event)
        if len(self._event_log) > self._log_limit:
            del self._event_log[0]

        for callback in self._subscribers.get(event.type, []):
            callback(event)
        for callback in self._subscribers.get(None, []):
            callback(event)

    def get_event_log(self) -> List[Event]:
        """Get event log (for debugging/analysis)"""
        return self._event_log.copy()

    def clear_log(self) -> None:
        self._event_log.clear()
