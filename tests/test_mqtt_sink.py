"""
MQTT notifier publishes engine events as JSON (broker replaced by a stub client).
"""

import json

from kinetic_twin.config import SimulationSettings
from kinetic_twin.gateway.adapters import MemoryWorld, MQTTNotifier
from kinetic_twin.simulation.engine import SimulationEngine


class StubClient:
    def __init__(self):
        self.published = []
        self.connected_to = None

    def connect(self, host, port, keepalive):
        self.connected_to = (host, port)

    def loop_start(self):
        pass

    def loop_stop(self):
        pass

    def disconnect(self):
        self.connected_to = None

    def publish(self, topic, payload, qos=0, retain=False):
        self.published.append((topic, json.loads(payload)))


def test_notifier_publishes_overload():
    client = StubClient()
    notifier = MQTTNotifier("localhost", 1883, "kinetic-twin/events", client=client)
    notifier.connect()
    assert client.connected_to == ("localhost", 1883)

    world = MemoryWorld(player=(0, 0, 0))
    world.place((0, 0, 0), "motor")
    world.place((1, 0, 0), "press")
    engine = SimulationEngine(world, SimulationSettings(scan_radius=2, stress_unit=1))
    engine.event_dispatcher.subscribe(None, notifier)
    engine.tick()

    topic, payload = client.published[0]
    assert topic == "kinetic-twin/events/network_overload"
    assert payload["type"] == "NETWORK_OVERLOAD"
    assert payload["data"]["capacity"] == 2.0

    notifier.disconnect()
    assert client.connected_to is None


def test_empty_payload_is_ignored():
    client = StubClient()
    MQTTNotifier("localhost", 1883, "t", client=client).write({})
    assert client.published == []
