"""
Tick Outbox

Deferred world writes. Everything the network/scheduler pass wants to change
in the host world is queued here and flushed after the pass completes, so
reads within a tick never observe the tick's own writes.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..errors import WorldUnavailableError
from ..gateway.interfaces import IWorld
from .network import Coord

logger = logging.getLogger("Outbox")

SlotRef = Tuple[Coord, int]


class TickOutbox:
    def __init__(self):
        # (coord, slot) -> (item, count); last write to a slot wins
        self._writes: Dict[SlotRef, Tuple[Optional[str], int]] = {}
        self._messages: List[str] = []

    def set_item(self, coord: Coord, slot: int, item_id: Optional[str], count: int) -> None:
        self._writes[(coord, slot)] = (item_id, count if item_id is not None else 0)

    def notify(self, message: str) -> None:
        self._messages.append(message)

    def has_pending(self, coord: Coord, slot: int) -> bool:
        return (coord, slot) in self._writes

    @property
    def writes(self) -> Dict[SlotRef, Tuple[Optional[str], int]]:
        return dict(self._writes)

    @property
    def messages(self) -> List[str]:
        return list(self._messages)

    def clear(self) -> None:
        self._writes.clear()
        self._messages.clear()

    def flush(self, world: Optional[IWorld]) -> List[SlotRef]:
        """
        Apply queued writes in queue order, then notifications.

        Returns:
            Slot refs whose write never reached the world (empty on success).
            An unavailable world drops the remainder of this tick's output.
        """
        pending = list(self._writes.items())
        applied = 0
        try:
            if world is None:
                return [ref for ref, _ in pending]
            for ((x, y, z), slot), (item_id, count) in pending:
                world.set_inventory_item(x, y, z, slot, item_id, count)
                applied += 1
            for message in self._messages:
                world.notify(message)
        except WorldUnavailableError as e:
            logger.error(f"World unavailable during output flush ({e}); "
                         f"{len(pending) - applied} writes dropped")
        finally:
            self.clear()
        return [ref for ref, _ in pending[applied:]]
