"""
Counter System

Event-driven counts (overloads, processes started/completed/cancelled).
Counts never depend on wall-clock time.
"""

from typing import Dict

from .events import Event, EventDispatcher, KineticEventType


class CounterSystem:
    """
    Maintains one counter per event type, plus any ad-hoc counters.
    """

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def increment(self, counter_name: str, amount: int = 1) -> None:
        if counter_name not in self._counters:
            self._counters[counter_name] = 0
        self._counters[counter_name] += amount

    def get(self, counter_name: str) -> int:
        """
        Returns:
            Counter value (0 if not exists)
        """
        return self._counters.get(counter_name, 0)

    def get_all(self) -> Dict[str, int]:
        return self._counters.copy()

    def reset(self) -> None:
        self._counters.clear()

    def attach(self, dispatcher: EventDispatcher) -> None:
        """Count every event emitted on the dispatcher."""
        dispatcher.subscribe(None, self._on_event)

    def _on_event(self, event: Event) -> None:
        self.increment(event.type.value.lower())
        if event.type == KineticEventType.PROCESS_COMPLETED:
            self.increment(f"produced.{event.data.get('output')}", event.data.get("count", 1))
