"""
Machine Process Scheduler

Runs one in-flight recipe per powered processing node (PRESS, MILLSTONE,
MIXER). Owned exclusively by the tick function.

CRITICAL:
- Power loss cancels immediately: no partial credit, consumed input is lost
- World reads happen during the pass, world writes go through the TickOutbox
"""

import logging
from typing import Dict, Iterable, Optional

from ...gateway.interfaces import IWorld
from ..catalog import Catalog, DEFAULT_CATALOG, recipe_key
from ..flow.events import Event, EventDispatcher, KineticEventType
from ..network import Coord, NetworkContext, NetworkNode, coord_key, neighbors
from ..outbox import SlotRef, TickOutbox
from .base_machine import ProcessInstance, ProcessState, scaled_ticks

logger = logging.getLogger("Processor")


class ProcessScheduler:
    def __init__(self, world: Optional[IWorld], catalog: Catalog = DEFAULT_CATALOG,
                 dispatcher: Optional[EventDispatcher] = None, handoff_enabled: bool = False):
        self.world = world
        self.catalog = catalog
        self.dispatcher = dispatcher
        self.handoff_enabled = handoff_enabled
        self.instances: Dict[Coord, ProcessInstance] = {}
        # coord -> input key already reported as waiting for heat
        self._deferred: Dict[Coord, str] = {}

    # ============================================================
    # CYCLIC EXECUTION
    # ============================================================

    def tick(self, context: NetworkContext, outbox: TickOutbox, tick: int = 0) -> None:
        self._cancel_unpowered(context, tick)
        self._forget_unpowered_deferrals(context)

        for node in context.nodes.values():
            if not node.is_powered or node.speed == 0:
                continue
            if self.catalog.processing_kind_for(node.kind) is None:
                continue

            instance = self.instances.get(node.coord)
            if instance is None:
                instance = self._try_start(node, outbox, tick)
                if instance is None:
                    continue

            if instance.advance():
                self._complete(node, instance, context, outbox, tick)

    def state_of(self, coord: Coord) -> ProcessState:
        instance = self.instances.get(coord)
        return instance.state if instance else ProcessState.IDLE

    def reset(self) -> None:
        self.instances.clear()
        self._deferred.clear()

    def revert_unconsumed(self, dropped: Iterable[SlotRef], tick: int) -> None:
        """
        Undo starts from `tick` whose input write never reached the world.

        The input is still in the machine, so the process is dropped and the
        item will start a fresh process on a later tick.
        """
        dropped = set(dropped)
        for coord, instance in list(self.instances.items()):
            if instance.started_tick != tick:
                continue
            if not any((coord, slot) in dropped for slot in instance.consumed_slots):
                continue
            del self.instances[coord]
            instance.cancel()
            logger.warning(f"{instance.kind.value} at {coord_key(coord)}: input "
                           f"{instance.input_key} was not consumed; start reverted")
            self._emit(KineticEventType.PROCESS_CANCELLED, tick, coord, {
                "kind": instance.kind.value,
                "input": instance.input_key,
                "remaining": instance.remaining,
                "reason": "input_not_consumed",
            })

    # ============================================================
    # TRANSITIONS
    # ============================================================

    def _cancel_unpowered(self, context: NetworkContext, tick: int) -> None:
        for coord in list(self.instances):
            node = context.get(coord)
            if node is not None and node.is_powered:
                continue
            instance = self.instances.pop(coord)
            instance.cancel()
            logger.info(f"{instance.kind.value} at {coord_key(coord)} lost power; "
                        f"{instance.recipe.output} cancelled with {instance.remaining} ticks left")
            self._emit(KineticEventType.PROCESS_CANCELLED, tick, coord, {
                "kind": instance.kind.value,
                "input": instance.input_key,
                "remaining": instance.remaining,
                "reason": "power_lost",
            })

    def _forget_unpowered_deferrals(self, context: NetworkContext) -> None:
        for coord in list(self._deferred):
            node = context.get(coord)
            if node is None or not node.is_powered or node.speed == 0:
                del self._deferred[coord]

    def _try_start(self, node: NetworkNode, outbox: TickOutbox, tick: int) -> Optional[ProcessInstance]:
        """IDLE -> RUNNING if the input slot(s) hold a known recipe key."""
        x, y, z = node.coord
        filled = {}
        for slot in node.template.input_slots:
            item = self.world.get_inventory_item(x, y, z, slot)
            if item:
                filled[slot] = item
        if not filled:
            self._deferred.pop(node.coord, None)
            return None

        key = recipe_key(filled.values())
        recipe = self.catalog.recipe_for(node.kind, key)
        if recipe is None:
            self._deferred.pop(node.coord, None)
            return None

        if recipe.requires_heat and not self.world.is_heated(x, y, z):
            if self._deferred.get(node.coord) != key:
                self._deferred[node.coord] = key
                logger.debug(f"{node.kind.value} at {node.key} waiting for heat ({key})")
                self._emit(KineticEventType.PROCESS_DEFERRED, tick, node.coord,
                           {"kind": node.kind.value, "input": key, "reason": "no_heat"})
            return None
        self._deferred.pop(node.coord, None)

        for slot in filled:
            outbox.set_item(node.coord, slot, None, 0)

        instance = ProcessInstance(
            coord=node.coord,
            kind=node.kind,
            recipe=recipe,
            remaining=scaled_ticks(recipe.time, node.speed),
            input_key=key,
            started_tick=tick,
            consumed_slots=tuple(filled),
        )
        self.instances[node.coord] = instance
        logger.debug(f"{node.kind.value} at {node.key} started {key} "
                     f"({instance.remaining} ticks at speed {node.speed})")
        self._emit(KineticEventType.PROCESS_STARTED, tick, node.coord, {
            "kind": node.kind.value,
            "input": key,
            "ticks": instance.remaining,
        })
        return instance

    def _complete(self, node: NetworkNode, instance: ProcessInstance,
                  context: NetworkContext, outbox: TickOutbox, tick: int) -> None:
        recipe = instance.recipe
        outbox.set_item(node.coord, node.template.output_slot, recipe.output, recipe.output_count)
        self._emit(KineticEventType.PROCESS_COMPLETED, tick, node.coord, {
            "kind": node.kind.value,
            "input": instance.input_key,
            "output": recipe.output,
            "count": recipe.output_count,
        })

        if self.handoff_enabled:
            self._hand_off(node, recipe.output, recipe.output_count, context, outbox, tick)

        del self.instances[node.coord]

    # ============================================================
    # HAND-OFF
    # ============================================================

    def _hand_off(self, node: NetworkNode, item: str, count: int,
                  context: NetworkContext, outbox: TickOutbox, tick: int) -> bool:
        """
        Forward the product to the first adjacent machine (+x, -x, +y, -y, +z, -z)
        whose input slot is empty. Whole stack or nothing; no queueing.
        """
        target = self._find_handoff_target(node, context, outbox)
        if target is None:
            return False

        outbox.set_item(target.coord, target.template.input_slot, item, count)
        outbox.set_item(node.coord, node.template.output_slot, None, 0)
        self._emit(KineticEventType.ITEM_HANDED_OFF, tick, node.coord, {
            "item": item,
            "count": count,
            "target": target.key,
        })
        return True

    def _find_handoff_target(self, node: NetworkNode, context: NetworkContext,
                             outbox: TickOutbox) -> Optional[NetworkNode]:
        for coord in neighbors(node.coord):
            neighbor = context.get(coord)
            if neighbor is None or neighbor.template.input_slot is None:
                continue
            slot = neighbor.template.input_slot
            if outbox.has_pending(coord, slot):
                # consumed or already fed this tick
                continue
            x, y, z = coord
            if self.world.get_inventory_item(x, y, z, slot):
                continue
            return neighbor
        return None

    def _emit(self, event_type: KineticEventType, tick: int, coord: Coord, data) -> None:
        if self.dispatcher is None:
            return
        self.dispatcher.emit(Event(type=event_type, tick=tick, node_key=coord_key(coord), data=data))
