"""Kinetic Twin: mechanical-power and item-processing network simulation."""

__version__ = "0.1.0"
