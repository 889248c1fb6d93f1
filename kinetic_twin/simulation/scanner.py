"""
World Scanner

Builds the initial, unpowered node set for one tick by querying the host
world over a cube around a center point.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..errors import WorldUnavailableError
from ..gateway.interfaces import IWorld
from .catalog import Catalog, DEFAULT_CATALOG
from .network import Coord, NetworkNode, UP

logger = logging.getLogger("Scanner")


@dataclass
class ScanResult:
    nodes: Dict[Coord, NetworkNode] = field(default_factory=dict)
    nominal_capacity: float = 0.0

    def __len__(self) -> int:
        return len(self.nodes)


class WorldScanner:
    """
    Scans [center - radius, center + radius]^3 and instantiates one node per
    block the Catalog recognizes.

    Nominal capacity = sum of template stress_capacity (in units) * stress_unit.
    """

    def __init__(self, world: Optional[IWorld], catalog: Catalog = DEFAULT_CATALOG,
                 stress_unit: float = 1024.0):
        self.world = world
        self.catalog = catalog
        self.stress_unit = stress_unit

    def scan(self, center: Coord, radius: int) -> ScanResult:
        result = ScanResult()
        if self.world is None:
            return result

        cx, cy, cz = center
        for x in range(cx - radius, cx + radius + 1):
            for y in range(cy - radius, cy + radius + 1):
                for z in range(cz - radius, cz + radius + 1):
                    template = self.catalog.template_for(self.world.lookup_block(x, y, z))
                    if template is None:
                        continue
                    coord = (x, y, z)
                    result.nodes[coord] = NetworkNode(
                        coord=coord,
                        template=template,
                        speed=0.0,
                        direction=UP,
                        is_powered=False,
                    )
                    result.nominal_capacity += template.stress_capacity * self.stress_unit

        logger.debug(f"Scanned {len(result.nodes)} machines around {center} "
                     f"(nominal capacity {result.nominal_capacity})")
        return result

    def scan_around_player(self, radius: int) -> ScanResult:
        """
        Scan centered on the player. Fails closed: an unavailable world or
        player yields an empty network for this tick.
        """
        if self.world is None:
            logger.warning("No world accessor; network empty this tick")
            return ScanResult()
        try:
            position = self.world.get_player_position()
            if position is None:
                logger.warning("Player position unavailable; network empty this tick")
                return ScanResult()
            center = tuple(math.floor(c) for c in position)
            return self.scan(center, radius)
        except WorldUnavailableError as e:
            logger.warning(f"World unavailable ({e}); network empty this tick")
            return ScanResult()
