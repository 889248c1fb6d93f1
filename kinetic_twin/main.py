import logging
import threading
from typing import Optional

from fastapi import FastAPI
import uvicorn

from .config import SimulationSettings, load_settings
from .gateway.adapters import MemoryWorld, MQTTNotifier
from .gateway.interfaces import IWorld
from .scada.store import SnapshotStore
from .simulation.engine import SimulationEngine

logging.basicConfig(level=logging.INFO, format='[KINETIC] %(asctime)s | %(name)s | %(message)s',
                    datefmt='%H:%M:%S')
logger = logging.getLogger("KineticTwin")


def build_engine(settings: Optional[SimulationSettings] = None,
                 world: Optional[IWorld] = None) -> SimulationEngine:
    """
    Assemble an engine. Without a host world, an empty MemoryWorld is used
    (headless mode).
    """
    settings = settings or load_settings()
    if world is None:
        world = MemoryWorld(player=(0, 0, 0))
    engine = SimulationEngine(world, settings)

    if settings.mqtt.enabled:
        notifier = MQTTNotifier(settings.mqtt.broker, settings.mqtt.port, settings.mqtt.topic)
        notifier.connect()
        engine.event_dispatcher.subscribe(None, notifier)
    return engine


class SimulationRunner:
    """Runs engine.run_loop() on a background thread and publishes snapshots."""

    def __init__(self, engine: SimulationEngine, store: Optional[SnapshotStore] = None):
        self.engine = engine
        self.store = store or SnapshotStore()
        self.thread: Optional[threading.Thread] = None
        engine.set_post_step_callback(self.publish)

    def publish(self):
        self.store.update(self.engine.snapshot(), self.engine.get_event_log())

    def start(self):
        if self.thread is not None:
            return
        self.thread = threading.Thread(target=self.engine.run_loop, daemon=True)
        self.thread.start()

    def stop(self):
        self.engine.stop()
        if self.thread:
            self.thread.join(timeout=2.0)
            self.thread = None


def create_app(engine: Optional[SimulationEngine] = None, autostart: bool = True) -> FastAPI:
    engine = engine or build_engine()
    runner = SimulationRunner(engine)
    store = runner.store
    app = FastAPI(title="Kinetic Twin Diagnostics API")
    app.state.engine = engine
    app.state.runner = runner
    app.state.store = store

    @app.on_event("startup")
    def startup_event():
        runner.publish()
        if autostart:
            runner.start()

    @app.on_event("shutdown")
    def shutdown_event():
        runner.stop()

    @app.get("/")
    def read_root():
        return {"status": "ok", "service": "Kinetic Twin", "tick": engine.ticks}

    @app.get("/api/state")
    def get_state():
        """Latest network snapshot (nodes, stress, processes)."""
        return store.get_snapshot()

    @app.get("/api/events")
    def get_events():
        return store.get_events()

    return app


def main():
    settings = load_settings()
    app = create_app(build_engine(settings))
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    main()
