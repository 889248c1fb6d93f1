"""
Power Propagation Engine

Seeds rotational speed from source nodes and spreads it breadth-first over
6-connected neighbours.

Two phases:
  1. Per-source BFS into a scratch contribution map (visited set scoped to
     that source).
  2. Merge by coordinate: largest |speed| wins; ties go to the source that
     comes first in scan order. The winning contribution supplies both speed
     (sign kept) and direction.

Transmission rules:
  SHAFT    -> inherits speed + direction
  GEARBOX  -> inherits speed, direction negated
  other    -> inherits speed + direction (no gear ratios)
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, List

from .catalog import MachineKind, MOTOR_SPEED, WINDMILL_BLOCK
from .network import Coord, NetworkContext, NetworkNode, Vector, UP, negate, neighbors

logger = logging.getLogger("Propagation")

WINDMILL_REFERENCE_HEIGHT = 64.0


@dataclass(frozen=True)
class Contribution:
    speed: float
    direction: Vector


@dataclass(frozen=True)
class Source:
    coord: Coord
    speed: float
    direction: Vector = UP
    bonus_capacity: float = 0.0


class PropagationEngine:
    def __init__(self, motor_speed: float = MOTOR_SPEED, windmill_bonus: float = 1024.0):
        self.motor_speed = motor_speed
        self.windmill_bonus = windmill_bonus

    # ========== Sources ==========

    def find_sources(self, nodes: Dict[Coord, NetworkNode]) -> List[Source]:
        """Motors (configured motor speed) and windmill markers (height-scaled)."""
        sources = []
        for coord, node in nodes.items():
            if node.block_id == WINDMILL_BLOCK:
                speed = self.motor_speed * (coord[1] / WINDMILL_REFERENCE_HEIGHT)
                sources.append(Source(coord, speed, UP, self.windmill_bonus))
            elif node.kind == MachineKind.MOTOR:
                sources.append(Source(coord, self.motor_speed, UP))
        return sources

    # ========== Phase 1: per-source traversal ==========

    def traverse(self, source: Source, nodes: Dict[Coord, NetworkNode]) -> Dict[Coord, Contribution]:
        """BFS from one source. Returns the speed/direction it gives each reached node."""
        reached: Dict[Coord, Contribution] = {}
        if source.speed == 0:
            return reached

        reached[source.coord] = Contribution(source.speed, source.direction)
        visited = {source.coord}
        queue = deque([source.coord])

        while queue:
            current = queue.popleft()
            contribution = reached[current]
            if contribution.speed == 0:
                continue

            for neighbor in neighbors(current):
                if neighbor in visited:
                    continue
                node = nodes.get(neighbor)
                if node is None:
                    continue
                visited.add(neighbor)
                reached[neighbor] = self._transmit(node, contribution)
                queue.append(neighbor)

        return reached

    @staticmethod
    def _transmit(node: NetworkNode, incoming: Contribution) -> Contribution:
        if node.kind == MachineKind.GEARBOX:
            return Contribution(incoming.speed, negate(incoming.direction))
        # SHAFT and every other kind: unchanged
        return Contribution(incoming.speed, incoming.direction)

    # ========== Phase 2: merge ==========

    @staticmethod
    def merge(per_source: List[Dict[Coord, Contribution]]) -> Dict[Coord, Contribution]:
        merged: Dict[Coord, Contribution] = {}
        for contributions in per_source:
            for coord, contribution in contributions.items():
                best = merged.get(coord)
                # strict '>' keeps the earlier source on ties
                if best is None or abs(contribution.speed) > abs(best.speed):
                    merged[coord] = contribution
        return merged

    # ========== Entry point ==========

    def propagate(self, context: NetworkContext) -> NetworkContext:
        """
        Apply propagation to the context's scan-time nodes in place.

        Adds source bonus capacity to context.stress_capacity.
        """
        nodes = context.nodes
        sources = self.find_sources(nodes)

        per_source = []
        for source in sources:
            context.stress_capacity += source.bonus_capacity
            if source.speed == 0:
                logger.debug(f"Source at {source.coord} idle (speed 0)")
            per_source.append(self.traverse(source, nodes))

        merged = self.merge(per_source)
        for coord, contribution in merged.items():
            node = nodes[coord]
            node.speed = contribution.speed
            node.direction = contribution.direction

        logger.debug(f"Propagated {len(sources)} sources to {len(merged)} nodes")
        return context
