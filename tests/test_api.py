"""
Diagnostics API: state and event endpoints.
"""

from fastapi.testclient import TestClient

from kinetic_twin.config import SimulationSettings
from kinetic_twin.gateway.adapters import MemoryWorld
from kinetic_twin.main import build_engine, create_app


def motor_and_shaft():
    world = MemoryWorld(player=(0, 0, 0))
    world.place((0, 0, 0), "motor")
    world.place((1, 0, 0), "shaft")
    return world


def test_state_endpoint_serves_latest_snapshot():
    engine = build_engine(SimulationSettings(scan_radius=2), motor_and_shaft())
    app = create_app(engine, autostart=False)

    with TestClient(app) as client:
        assert client.get("/").json()["status"] == "ok"

        engine.tick()
        state = client.get("/api/state").json()
        assert state["tick"] == 1
        assert state["nodes"]["1,0,0"]["speed"] == 128
        assert state["stress_capacity"] == 2048

        assert client.get("/api/events").json() == []


def test_apps_keep_separate_state():
    busy = build_engine(SimulationSettings(scan_radius=2), motor_and_shaft())
    empty = build_engine(SimulationSettings(scan_radius=2), MemoryWorld(player=(0, 0, 0)))
    busy_app = create_app(busy, autostart=False)
    empty_app = create_app(empty, autostart=False)

    with TestClient(busy_app) as busy_client, TestClient(empty_app) as empty_client:
        busy.tick()
        empty.tick()
        empty.tick()

        busy_state = busy_client.get("/api/state").json()
        empty_state = empty_client.get("/api/state").json()
        assert busy_state["tick"] == 1
        assert set(busy_state["nodes"]) == {"0,0,0", "1,0,0"}
        assert empty_state["tick"] == 2
        assert empty_state["nodes"] == {}
