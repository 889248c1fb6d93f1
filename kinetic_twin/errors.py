"""
Kinetic Twin error taxonomy.

Overload is NOT an error: it is a designed state transition handled by the
StressLedger. Missing recipes/items are absence, not failure.
"""


class KineticError(Exception):
    """Base class for all Kinetic Twin errors."""


class CatalogError(KineticError):
    """Static machine/recipe tables are malformed (raised at load time)."""


class WorldUnavailableError(KineticError):
    """The host world / player accessor cannot be reached this tick."""
