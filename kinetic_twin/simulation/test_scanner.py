"""
World Scanner Test

Scan idempotence, cube bounds, nominal capacity and fail-closed behaviour.
"""

from kinetic_twin.errors import WorldUnavailableError
from kinetic_twin.gateway.adapters import MemoryWorld
from kinetic_twin.simulation.catalog import MachineKind
from kinetic_twin.simulation.scanner import WorldScanner


def _line_world():
    world = MemoryWorld(player=(0, 0, 0))
    world.place((0, 0, 0), "motor")
    world.place((1, 0, 0), "shaft")
    world.place((2, 0, 0), "millstone")
    world.place((0, 2, 0), "dirt")  # not a machine
    return world


def test_scan_builds_unpowered_nodes():
    result = WorldScanner(_line_world()).scan((0, 0, 0), 2)

    assert set(result.nodes) == {(0, 0, 0), (1, 0, 0), (2, 0, 0)}
    for node in result.nodes.values():
        assert node.speed == 0
        assert node.direction == (0.0, 1.0, 0.0)
        assert not node.is_powered
    assert result.nodes[(2, 0, 0)].kind == MachineKind.MILLSTONE


def test_scan_respects_radius():
    result = WorldScanner(_line_world()).scan((0, 0, 0), 1)
    assert (2, 0, 0) not in result.nodes


def test_nominal_capacity_scales_with_stress_unit():
    world = _line_world()
    assert WorldScanner(world, stress_unit=1024).scan((0, 0, 0), 2).nominal_capacity == 2048
    assert WorldScanner(world, stress_unit=100).scan((0, 0, 0), 2).nominal_capacity == 200


def test_scan_is_idempotent():
    scanner = WorldScanner(_line_world())
    first = scanner.scan((0, 0, 0), 3)
    second = scanner.scan((0, 0, 0), 3)

    assert set(first.nodes) == set(second.nodes)
    for coord, node in first.nodes.items():
        assert node.template == second.nodes[coord].template
    assert first.nominal_capacity == second.nominal_capacity


def test_missing_player_yields_empty_network():
    world = _line_world()
    world.set_player(None)
    result = WorldScanner(world).scan_around_player(4)
    assert len(result) == 0
    assert result.nominal_capacity == 0


def test_unavailable_world_yields_empty_network():
    world = _line_world()
    world.available = False
    assert len(WorldScanner(world).scan_around_player(4)) == 0
    assert len(WorldScanner(None).scan_around_player(4)) == 0


def test_lookup_error_mid_scan_fails_closed():
    class FlakyWorld(MemoryWorld):
        def lookup_block(self, x, y, z):
            if (x, y, z) == (1, 0, 0):
                raise WorldUnavailableError("chunk unloaded")
            return super().lookup_block(x, y, z)

    world = FlakyWorld(player=(0, 0, 0))
    world.place((0, 0, 0), "motor")
    assert len(WorldScanner(world).scan_around_player(2)) == 0


def test_player_position_is_floored():
    world = _line_world()
    world.set_player((2.7, 0.2, 0.4))
    result = WorldScanner(world).scan_around_player(0)
    assert set(result.nodes) == {(2, 0, 0)}
