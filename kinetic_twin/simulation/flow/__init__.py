"""
Kinetic event flow

Responsibilities:
- Publish network / machine lifecycle events
- Count them for diagnostics

NO:
- Propagation or stress logic
- Inventory writes
"""

from .events import Event, EventDispatcher, KineticEventType, USER_FACING_EVENTS
from .counters import CounterSystem

__all__ = [
    'Event',
    'EventDispatcher',
    'KineticEventType',
    'USER_FACING_EVENTS',
    'CounterSystem',
]
