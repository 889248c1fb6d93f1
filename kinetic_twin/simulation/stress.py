"""
Stress Ledger

Per-node load = consumption * |speed| / 64 for every powered non-motor node.
If the network total exceeds capacity the whole network shuts down: a hard
cutoff, never partial power.
"""

import logging
from typing import Optional

from .catalog import MachineKind
from .flow.events import Event, EventDispatcher, KineticEventType
from .network import NetworkContext

logger = logging.getLogger("StressLedger")

SPEED_REFERENCE = 64.0


class StressLedger:
    def __init__(self, dispatcher: Optional[EventDispatcher] = None):
        self.dispatcher = dispatcher

    def apply(self, context: NetworkContext, tick: int = 0) -> NetworkContext:
        total = 0.0
        for node in context.nodes.values():
            node.current_stress = 0.0
            node.is_powered = False
            if node.kind == MachineKind.MOTOR or node.speed == 0:
                continue
            node.current_stress = node.consumption * abs(node.speed) / SPEED_REFERENCE
            node.is_powered = True
            total += node.current_stress

        context.demanded_stress = total
        context.current_stress = total
        context.overloaded = total > context.stress_capacity

        if context.overloaded:
            self._shutdown(context)
            logger.warning(f"Overload: {total:.1f} > {context.stress_capacity:.1f}; network stopped")
            if self.dispatcher is not None:
                self.dispatcher.emit(Event(
                    type=KineticEventType.NETWORK_OVERLOAD,
                    tick=tick,
                    data={"demanded": total, "capacity": context.stress_capacity},
                ))
        return context

    @staticmethod
    def _shutdown(context: NetworkContext) -> None:
        for node in context.nodes.values():
            node.speed = 0.0
            node.current_stress = 0.0
            node.is_powered = False
        context.current_stress = 0.0
