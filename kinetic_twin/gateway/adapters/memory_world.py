import logging
from typing import Dict, List, Optional, Tuple

from ...errors import WorldUnavailableError
from ..interfaces import IWorld, Coord

logger = logging.getLogger("MemoryWorld")


class MemoryWorld(IWorld):
    """
    In-process IWorld backed by plain dicts.
    Used for headless runs and tests.

    Heat is looked up at the block directly below the queried coordinate.
    """
    def __init__(self, player: Optional[Coord] = (0, 0, 0)):
        self.blocks: Dict[Coord, str] = {}
        self.inventory: Dict[Tuple[Coord, int], Tuple[str, int]] = {}
        self.heat_sources = set()
        self.messages: List[str] = []
        self.player = player
        self.available = True

    # --- Layout helpers ---

    def place(self, coord: Coord, block_id: str) -> "MemoryWorld":
        self.blocks[tuple(coord)] = block_id
        return self

    def remove(self, coord: Coord) -> None:
        self.blocks.pop(tuple(coord), None)

    def set_heat(self, coord: Coord, heated: bool = True) -> None:
        """Mark/unmark a heat source block (e.g. a burner under a mixer)."""
        if heated:
            self.heat_sources.add(tuple(coord))
        else:
            self.heat_sources.discard(tuple(coord))

    def set_player(self, coord: Optional[Coord]) -> None:
        self.player = coord

    def put(self, coord: Coord, slot: int, item_id: str, count: int = 1) -> None:
        self.inventory[(tuple(coord), slot)] = (item_id, count)

    def count(self, coord: Coord, slot: int) -> int:
        return self.inventory.get((tuple(coord), slot), (None, 0))[1]

    @classmethod
    def from_layout(cls, layout: List[dict], player: Optional[Coord] = (0, 0, 0)) -> "MemoryWorld":
        """Build from [{"x":0,"y":0,"z":0,"block":"motor"}, ...]."""
        world = cls(player=player)
        for entry in layout:
            world.place((entry["x"], entry["y"], entry["z"]), entry["block"])
        return world

    # --- IWorld ---

    def _check(self):
        if not self.available:
            raise WorldUnavailableError("memory world marked unavailable")

    def lookup_block(self, x: int, y: int, z: int) -> Optional[str]:
        self._check()
        return self.blocks.get((x, y, z))

    def get_player_position(self) -> Optional[Coord]:
        self._check()
        return self.player

    def get_inventory_item(self, x: int, y: int, z: int, slot: int) -> Optional[str]:
        self._check()
        entry = self.inventory.get(((x, y, z), slot))
        return entry[0] if entry else None

    def set_inventory_item(self, x: int, y: int, z: int, slot: int,
                           item_id: Optional[str], count: int) -> None:
        self._check()
        if item_id is None or count <= 0:
            self.inventory.pop(((x, y, z), slot), None)
        else:
            self.inventory[((x, y, z), slot)] = (item_id, count)

    def is_heated(self, x: int, y: int, z: int) -> bool:
        self._check()
        return (x, y - 1, z) in self.heat_sources

    def notify(self, message: str) -> None:
        self._check()
        logger.info(f"[notify] {message}")
        self.messages.append(message)
