"""
Power Propagation Validation

Validates:
1. Shaft line inherits speed + direction
2. Gearbox reverses direction only (and is an involution)
3. Windmill speed scales with height and adds bonus capacity
4. Multiple sources merge by max |speed|, deterministic tie-break
5. Zero-speed sources never propagate
"""

from kinetic_twin.simulation.catalog import template_for
from kinetic_twin.simulation.network import NetworkContext, NetworkNode
from kinetic_twin.simulation.propagation import PropagationEngine

UP = (0.0, 1.0, 0.0)
DOWN = (0.0, -1.0, 0.0)


def build(layout, capacity=0.0):
    nodes = {coord: NetworkNode(coord=coord, template=template_for(block))
             for coord, block in layout.items()}
    return NetworkContext(nodes=nodes, stress_capacity=capacity)


def test_simple_shaft_line():
    context = build({(0, 0, 0): "motor", (1, 0, 0): "shaft"})
    PropagationEngine().propagate(context)

    shaft = context.get((1, 0, 0))
    assert shaft.speed == 128
    assert shaft.direction == UP


def test_gearbox_reversal():
    context = build({(0, 0, 0): "motor", (1, 0, 0): "gearbox"})
    PropagationEngine().propagate(context)

    gearbox = context.get((1, 0, 0))
    assert gearbox.speed == 128
    assert gearbox.direction == DOWN


def test_two_gearboxes_restore_direction():
    context = build({(0, 0, 0): "motor", (1, 0, 0): "gearbox", (2, 0, 0): "gearbox",
                     (3, 0, 0): "shaft"})
    PropagationEngine().propagate(context)

    assert context.get((1, 0, 0)).direction == DOWN
    assert context.get((2, 0, 0)).direction == UP
    assert context.get((3, 0, 0)).direction == UP


def test_other_kinds_use_default_inherit_rule():
    context = build({(0, 0, 0): "motor", (0, 0, 1): "belt", (0, 0, 2): "millstone"})
    PropagationEngine().propagate(context)
    assert context.get((0, 0, 1)).speed == 128
    assert context.get((0, 0, 2)).speed == 128
    assert context.get((0, 0, 2)).direction == UP


def test_disconnected_node_stays_still():
    context = build({(0, 0, 0): "motor", (1, 0, 0): "shaft", (5, 0, 0): "shaft"})
    PropagationEngine().propagate(context)
    assert context.get((5, 0, 0)).speed == 0


def test_windmill_speed_scales_with_height():
    context = build({(0, 32, 0): "windmill_bearing", (1, 32, 0): "shaft"}, capacity=100.0)
    PropagationEngine(motor_speed=128, windmill_bonus=1024).propagate(context)

    assert context.get((1, 32, 0)).speed == 64
    assert context.stress_capacity == 1124.0  # additive on top of nominal


def test_windmill_at_ground_level_is_idle():
    context = build({(0, 0, 0): "windmill_bearing", (1, 0, 0): "shaft"})
    PropagationEngine().propagate(context)
    assert context.get((1, 0, 0)).speed == 0
    # bonus is still granted
    assert context.stress_capacity == 1024.0


def test_max_speed_wins_when_sources_overlap():
    # windmill at y=32 gives 64, motor gives 128; shaft between them
    context = build({
        (0, 32, 0): "windmill_bearing",
        (1, 32, 0): "shaft",
        (2, 32, 0): "motor",
    })
    PropagationEngine().propagate(context)
    assert context.get((1, 32, 0)).speed == 128


def test_max_speed_wins_regardless_of_source_order():
    slow_first = build({(0, 16, 0): "windmill_bearing", (1, 16, 0): "shaft", (2, 16, 0): "motor"})
    fast_first = build({(2, 16, 0): "motor", (1, 16, 0): "shaft", (0, 16, 0): "windmill_bearing"})
    PropagationEngine().propagate(slow_first)
    PropagationEngine().propagate(fast_first)
    assert slow_first.get((1, 16, 0)).speed == fast_first.get((1, 16, 0)).speed == 128


def test_tie_break_is_first_source_in_scan_order():
    # Equal speeds arrive at the middle shaft; one path goes through a gearbox.
    context = build({
        (0, 0, 0): "motor",
        (1, 0, 0): "shaft",
        (2, 0, 0): "gearbox",
        (3, 0, 0): "motor",
    })
    engine = PropagationEngine()
    engine.propagate(context)
    # first motor's contribution (UP) wins the tie at (1,0,0)
    assert context.get((1, 0, 0)).direction == UP

    repeat = build({
        (0, 0, 0): "motor",
        (1, 0, 0): "shaft",
        (2, 0, 0): "gearbox",
        (3, 0, 0): "motor",
    })
    engine.propagate(repeat)
    assert repeat.get((1, 0, 0)).direction == context.get((1, 0, 0)).direction


def test_monotonicity_over_chain():
    layout = {(0, 0, 0): "motor"}
    layout.update({(x, 0, 0): "shaft" for x in range(1, 10)})
    context = build(layout)
    PropagationEngine().propagate(context)
    assert all(context.get((x, 0, 0)).speed == 128 for x in range(10))


def test_traverse_records_per_source_contributions():
    context = build({(0, 0, 0): "motor", (1, 0, 0): "gearbox"})
    engine = PropagationEngine()
    source = engine.find_sources(context.nodes)[0]
    reached = engine.traverse(source, context.nodes)

    assert set(reached) == {(0, 0, 0), (1, 0, 0)}
    assert reached[(1, 0, 0)].direction == DOWN
    # traversal never mutates nodes
    assert context.get((1, 0, 0)).speed == 0
