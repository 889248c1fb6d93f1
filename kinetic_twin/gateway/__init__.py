"""
Host-world boundary.

The simulation core only ever talks to IWorld; concrete hosts (a game
server bridge, MemoryWorld for headless runs) live in adapters/.
"""

from .interfaces import IWorld, ISink, IAdapter

__all__ = ['IWorld', 'ISink', 'IAdapter']
