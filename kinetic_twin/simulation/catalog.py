"""
Machine & Recipe Catalog

Static registry:
- block id -> MachineTemplate
- (processing kind, input key) -> RecipeEntry

Pure data, no mutable state. Lookups return None on absence (not failure).
Malformed tables fail fast at construction with CatalogError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..errors import CatalogError


class MachineKind(str, Enum):
    MOTOR = "MOTOR"
    SHAFT = "SHAFT"
    GEARBOX = "GEARBOX"
    BELT = "BELT"
    PRESS = "PRESS"
    MILLSTONE = "MILLSTONE"
    MIXER = "MIXER"


class ProcessingKind(str, Enum):
    PRESSING = "pressing"
    MILLING = "milling"
    MIXING = "mixing"


PROCESSING_KINDS: Dict[MachineKind, ProcessingKind] = {
    MachineKind.PRESS: ProcessingKind.PRESSING,
    MachineKind.MILLSTONE: ProcessingKind.MILLING,
    MachineKind.MIXER: ProcessingKind.MIXING,
}

MOTOR_SPEED = 128.0
WINDMILL_BLOCK = "windmill_bearing"


@dataclass(frozen=True)
class MachineTemplate:
    """Immutable machine parameters, copied into every scanned node."""
    block_id: str
    kind: MachineKind
    speed: float = 0.0
    stress_capacity: float = 0.0  # in capacity units (see settings.stress_unit)
    consumption: float = 0.0
    processing_time: Optional[int] = None
    input_slot: Optional[int] = None
    output_slot: Optional[int] = None
    needs_heat: bool = False
    aux_input_slots: Tuple[int, ...] = ()

    @property
    def input_slots(self) -> Tuple[int, ...]:
        if self.input_slot is None:
            return ()
        return (self.input_slot,) + self.aux_input_slots


@dataclass(frozen=True)
class RecipeEntry:
    """One recipe. `inputs` is the ordered tuple of required item ids."""
    inputs: Tuple[str, ...]
    output: str
    output_count: int = 1
    stress_cost: float = 0.0  # informational, not charged
    time: int = 1
    requires_heat: bool = False

    @property
    def key(self) -> str:
        return recipe_key(self.inputs)


def recipe_key(items) -> str:
    """Composite key for multi-input recipes: comma-joined item ids."""
    return ",".join(items)


# ============================================================
# STATIC TABLES
# ============================================================

BLOCK_TEMPLATES: Tuple[MachineTemplate, ...] = (
    MachineTemplate("motor", MachineKind.MOTOR, speed=MOTOR_SPEED, stress_capacity=2.0),
    # Windmill marker: reinterpreted as a synthetic motor by the PropagationEngine
    MachineTemplate(WINDMILL_BLOCK, MachineKind.MOTOR),
    MachineTemplate("shaft", MachineKind.SHAFT, consumption=0.5),
    MachineTemplate("gearbox", MachineKind.GEARBOX, consumption=1.0),
    MachineTemplate("belt", MachineKind.BELT, consumption=1.0),
    MachineTemplate("press", MachineKind.PRESS, consumption=8.0,
                    processing_time=20, input_slot=0, output_slot=1),
    MachineTemplate("millstone", MachineKind.MILLSTONE, consumption=4.0,
                    processing_time=10, input_slot=0, output_slot=1),
    MachineTemplate("mixer", MachineKind.MIXER, consumption=4.0,
                    processing_time=40, input_slot=0, output_slot=2,
                    needs_heat=True, aux_input_slots=(1,)),
)

RECIPES: Dict[ProcessingKind, Tuple[RecipeEntry, ...]] = {
    ProcessingKind.PRESSING: (
        RecipeEntry(("iron_ingot",), "iron_sheet", stress_cost=8.0, time=20),
        RecipeEntry(("gold_ingot",), "gold_sheet", stress_cost=8.0, time=20),
        RecipeEntry(("copper_ingot",), "copper_sheet", stress_cost=8.0, time=20),
    ),
    ProcessingKind.MILLING: (
        RecipeEntry(("wheat",), "flour", stress_cost=4.0, time=10),
        RecipeEntry(("cobblestone",), "gravel", stress_cost=4.0, time=15),
        RecipeEntry(("gravel",), "sand", stress_cost=4.0, time=15),
    ),
    ProcessingKind.MIXING: (
        RecipeEntry(("raw_iron",), "iron_ingot", stress_cost=4.0, time=40, requires_heat=True),
        RecipeEntry(("flour", "water"), "dough", stress_cost=4.0, time=20),
        RecipeEntry(("copper_ingot", "zinc_ingot"), "brass_ingot", output_count=2,
                    stress_cost=6.0, time=30, requires_heat=True),
    ),
}


class Catalog:
    """
    Lookup facade over the static tables.

    Validates everything on construction; afterwards every lookup is a
    plain dict read.
    """

    def __init__(self, templates=BLOCK_TEMPLATES, recipes=None):
        recipes = RECIPES if recipes is None else recipes
        self._templates: Dict[str, MachineTemplate] = {}
        for template in templates:
            if template.block_id in self._templates:
                raise CatalogError(f"Duplicate block id: {template.block_id}")
            self._templates[template.block_id] = template

        self._recipes: Dict[ProcessingKind, Dict[str, RecipeEntry]] = {}
        for kind, entries in recipes.items():
            kind = ProcessingKind(kind)
            table = self._recipes.setdefault(kind, {})
            for entry in entries:
                if entry.key in table:
                    raise CatalogError(f"Duplicate {kind.value} recipe: {entry.key}")
                table[entry.key] = entry

        self.validate()

    def validate(self) -> None:
        """Fail fast on malformed machine/recipe data."""
        heated_kinds = set()
        for template in self._templates.values():
            if not isinstance(template.kind, MachineKind):
                raise CatalogError(f"{template.block_id}: unknown kind {template.kind!r}")
            for name in ("speed", "stress_capacity", "consumption"):
                if getattr(template, name) < 0:
                    raise CatalogError(f"{template.block_id}: {name} must be >= 0")
            if template.kind in PROCESSING_KINDS:
                if not template.processing_time or template.processing_time <= 0:
                    raise CatalogError(f"{template.block_id}: processing_time required")
                if template.input_slot is None or template.output_slot is None:
                    raise CatalogError(f"{template.block_id}: input_slot/output_slot required")
                if template.output_slot in template.input_slots:
                    raise CatalogError(f"{template.block_id}: output slot overlaps inputs")
                if template.needs_heat:
                    heated_kinds.add(PROCESSING_KINDS[template.kind])

        for kind, table in self._recipes.items():
            for key, entry in table.items():
                if not entry.inputs or not entry.output:
                    raise CatalogError(f"{kind.value} recipe {key!r}: inputs/output required")
                if entry.time <= 0 or entry.output_count <= 0:
                    raise CatalogError(f"{kind.value} recipe {key!r}: time/count must be > 0")
                if entry.requires_heat and kind not in heated_kinds:
                    raise CatalogError(
                        f"{kind.value} recipe {key!r} requires heat but no machine supports it")

    def template_for(self, block_id: Optional[str]) -> Optional[MachineTemplate]:
        if block_id is None:
            return None
        return self._templates.get(block_id)

    def recipe_for(self, kind, input_key: Optional[str]) -> Optional[RecipeEntry]:
        """
        Args:
            kind: ProcessingKind or the MachineKind of a processing machine
            input_key: single item id or comma-joined composite key
        """
        if not input_key:
            return None
        if isinstance(kind, MachineKind):
            kind = PROCESSING_KINDS.get(kind)
            if kind is None:
                return None
        return self._recipes.get(kind, {}).get(input_key)

    def processing_kind_for(self, kind: MachineKind) -> Optional[ProcessingKind]:
        return PROCESSING_KINDS.get(kind)

    def templates(self) -> Tuple[MachineTemplate, ...]:
        return tuple(self._templates.values())


DEFAULT_CATALOG = Catalog()


def template_for(block_id: Optional[str]) -> Optional[MachineTemplate]:
    return DEFAULT_CATALOG.template_for(block_id)


def recipe_for(kind, input_key: Optional[str]) -> Optional[RecipeEntry]:
    return DEFAULT_CATALOG.recipe_for(kind, input_key)
