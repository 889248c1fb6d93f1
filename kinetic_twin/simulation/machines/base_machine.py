"""
Process State Machine primitives

IDLE -> RUNNING -> (COMPLETE | CANCELLED) -> IDLE

A ProcessInstance is the only simulation state that outlives a tick. It is
keyed by node coordinate and re-validated against power every tick.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from ..catalog import MachineKind, RecipeEntry

SPEED_REFERENCE = 64.0


class ProcessState(Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"


def scaled_ticks(base_time: int, speed: float) -> int:
    """
    Timer length at a given rotational speed: ceil(time / (|speed| / 64)).
    Faster machines finish sooner; never below one tick.
    """
    factor = abs(speed) / SPEED_REFERENCE
    return max(1, math.ceil(base_time / factor))


@dataclass
class ProcessInstance:
    coord: Tuple[int, int, int]
    kind: MachineKind
    recipe: RecipeEntry
    remaining: int
    input_key: str
    started_tick: int = 0
    state: ProcessState = ProcessState.RUNNING
    consumed_slots: Tuple[int, ...] = ()

    def advance(self) -> bool:
        """One tick of work. Returns True when the timer has run out."""
        self.remaining -= 1
        if self.remaining <= 0:
            self.state = ProcessState.COMPLETE
            return True
        return False

    def cancel(self) -> None:
        self.state = ProcessState.CANCELLED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "input": self.input_key,
            "output": self.recipe.output,
            "remaining": self.remaining,
            "started_tick": self.started_tick,
            "state": self.state.value,
        }
