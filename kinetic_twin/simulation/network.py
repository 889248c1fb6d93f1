"""
Kinetic Network Data Model

NetworkNode instances are tick-scoped: created by the WorldScanner, mutated by
propagation and the stress ledger, discarded at the end of the tick.
NetworkContext replaces global simulation state so independent networks can
coexist (one per engine / per test).
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple

from .catalog import MachineKind, MachineTemplate

Coord = Tuple[int, int, int]
Vector = Tuple[float, float, float]

UP: Vector = (0.0, 1.0, 0.0)

# Axis-aligned neighbour offsets. Order is fixed (+x, -x, +y, -y, +z, -z).
NEIGHBOR_OFFSETS: Tuple[Coord, ...] = (
    (1, 0, 0), (-1, 0, 0),
    (0, 1, 0), (0, -1, 0),
    (0, 0, 1), (0, 0, -1),
)


def coord_key(coord: Coord) -> str:
    """Identity key of a node: 'x,y,z'."""
    return f"{coord[0]},{coord[1]},{coord[2]}"


def neighbors(coord: Coord) -> Iterator[Coord]:
    x, y, z = coord
    for dx, dy, dz in NEIGHBOR_OFFSETS:
        yield (x + dx, y + dy, z + dz)


def negate(vector: Vector) -> Vector:
    return (-vector[0], -vector[1], -vector[2])


@dataclass
class NetworkNode:
    """One matched block instance at an integer coordinate."""
    coord: Coord
    template: MachineTemplate
    speed: float = 0.0
    direction: Vector = UP
    current_stress: float = 0.0
    is_powered: bool = False

    @property
    def key(self) -> str:
        return coord_key(self.coord)

    @property
    def kind(self) -> MachineKind:
        return self.template.kind

    @property
    def block_id(self) -> str:
        return self.template.block_id

    @property
    def consumption(self) -> float:
        return self.template.consumption

    def to_dict(self) -> Dict[str, object]:
        return {
            "coord": list(self.coord),
            "block_id": self.block_id,
            "kind": self.kind.value,
            "speed": self.speed,
            "direction": list(self.direction),
            "current_stress": round(self.current_stress, 3),
            "is_powered": self.is_powered,
            "consumption": self.consumption,
            "stress_capacity": self.template.stress_capacity,
        }


@dataclass
class NetworkContext:
    """
    Per-tick network snapshot passed explicitly to every phase.

    stress_capacity starts at the scanner's nominal figure; propagation adds
    source bonuses on top (capacities are additive, never recomputed).
    """
    nodes: Dict[Coord, NetworkNode] = field(default_factory=dict)
    stress_capacity: float = 0.0
    current_stress: float = 0.0
    demanded_stress: float = 0.0
    overloaded: bool = False

    def get(self, coord: Coord) -> Optional[NetworkNode]:
        return self.nodes.get(coord)

    def __len__(self) -> int:
        return len(self.nodes)

    def powered_nodes(self) -> Iterator[NetworkNode]:
        return (node for node in self.nodes.values() if node.is_powered)

    def to_dict(self) -> Dict[str, object]:
        return {
            "nodes": {node.key: node.to_dict() for node in self.nodes.values()},
            "current_stress": round(self.current_stress, 3),
            "stress_capacity": self.stress_capacity,
            "demanded_stress": round(self.demanded_stress, 3),
            "overloaded": self.overloaded,
        }
