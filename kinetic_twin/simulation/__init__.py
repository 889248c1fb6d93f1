"""
Kinetic network simulation core.

Phase order per tick: WorldScanner -> PropagationEngine -> StressLedger ->
ProcessScheduler, driven by SimulationEngine.
"""

from .catalog import Catalog, MachineKind, MachineTemplate, ProcessingKind, RecipeEntry, DEFAULT_CATALOG
from .network import NetworkContext, NetworkNode, coord_key
from .scanner import WorldScanner, ScanResult
from .propagation import PropagationEngine
from .stress import StressLedger
from .engine import SimulationEngine

__all__ = [
    'Catalog',
    'DEFAULT_CATALOG',
    'MachineKind',
    'MachineTemplate',
    'ProcessingKind',
    'RecipeEntry',
    'NetworkContext',
    'NetworkNode',
    'coord_key',
    'WorldScanner',
    'ScanResult',
    'PropagationEngine',
    'StressLedger',
    'SimulationEngine',
]
