from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Tuple

Coord = Tuple[int, int, int]


class IWorld(ABC):
    """
    Interface for the host world (block queries, inventories, heat, chat).

    Treated as synchronous and side-effect-bearing. Implementations may raise
    WorldUnavailableError when the host cannot be reached.
    """
    @abstractmethod
    def lookup_block(self, x: int, y: int, z: int) -> Optional[str]:
        """Returns the block id at a coordinate, or None for no block."""
        pass

    @abstractmethod
    def get_player_position(self) -> Optional[Coord]:
        """Returns the player position, or None if unavailable."""
        pass

    @abstractmethod
    def get_inventory_item(self, x: int, y: int, z: int, slot: int) -> Optional[str]:
        pass

    @abstractmethod
    def set_inventory_item(self, x: int, y: int, z: int, slot: int,
                           item_id: Optional[str], count: int) -> None:
        pass

    @abstractmethod
    def is_heated(self, x: int, y: int, z: int) -> bool:
        pass

    @abstractmethod
    def notify(self, message: str) -> None:
        """User-facing message (overload warnings, process events)."""
        pass


class ISink(ABC):
    """
    Interface for event sinks (e.g. MQTT).
    """
    @abstractmethod
    def write(self, data: Dict[str, Any]) -> None:
        """
        Writes one event payload to the sink.
        """
        pass


class IAdapter(ABC):
    @abstractmethod
    def connect(self):
        pass

    @abstractmethod
    def disconnect(self):
        pass
