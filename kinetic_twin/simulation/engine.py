import logging
import threading
import time
from typing import Any, Dict, Optional

from ..config import SimulationSettings
from ..errors import WorldUnavailableError
from ..gateway.interfaces import IWorld
from .catalog import Catalog, DEFAULT_CATALOG
from .flow import CounterSystem, Event, EventDispatcher, USER_FACING_EVENTS
from .machines import ProcessScheduler
from .network import NetworkContext, coord_key
from .outbox import TickOutbox
from .propagation import PropagationEngine
from .scanner import WorldScanner
from .stress import StressLedger

logger = logging.getLogger("SimulationEngine")


class SimulationEngine:
    """
    Owns the tick loop and every piece of simulation state.

    Each tick:
      1. INPUT:  scan the world around the player (fresh node set)
      2. LOGIC:  propagate power, settle stress, advance machine processes
      3. OUTPUT: flush deferred inventory writes and notifications

    CRITICAL: ticks never overlap. Network state is rebuilt every tick; only
    the scheduler's ProcessInstances carry over.
    """

    def __init__(self, world: Optional[IWorld], settings: Optional[SimulationSettings] = None,
                 catalog: Catalog = DEFAULT_CATALOG):
        self.world = world
        self.settings = settings or SimulationSettings()
        self.catalog = catalog

        self.event_dispatcher = EventDispatcher()
        self.counters = CounterSystem()
        self.counters.attach(self.event_dispatcher)
        for event_type in USER_FACING_EVENTS:
            self.event_dispatcher.subscribe(event_type, self._forward_to_player)

        self.scanner = WorldScanner(world, catalog, stress_unit=self.settings.stress_unit)
        self.propagation = PropagationEngine(
            motor_speed=self.settings.motor_speed,
            windmill_bonus=self.settings.windmill_bonus,
        )
        self.ledger = StressLedger(self.event_dispatcher)
        self.scheduler = ProcessScheduler(
            world, catalog,
            dispatcher=self.event_dispatcher,
            handoff_enabled=self.settings.handoff_enabled,
        )

        self.outbox = TickOutbox()
        self.network = NetworkContext()
        self.ticks = 0
        self.running = False
        self.overruns = 0
        self.post_step_callbacks = []
        self._tick_lock = threading.Lock()

    def set_post_step_callback(self, callback):
        self.post_step_callbacks.append(callback)

    # ============================================================
    # TICK
    # ============================================================

    def tick(self) -> None:
        """Advance the simulation by one step. All effects go through the world."""
        with self._tick_lock:
            self.ticks += 1
            try:
                network = self._build_network()
                self.scheduler.tick(network, self.outbox, self.ticks)
            except WorldUnavailableError as e:
                logger.warning(f"World unavailable mid-tick ({e}); treating network as empty")
                self.outbox.clear()
                network = NetworkContext()
                self.scheduler.tick(network, self.outbox, self.ticks)
            self.network = network
            dropped = self.outbox.flush(self.world)
            if dropped:
                self.scheduler.revert_unconsumed(dropped, self.ticks)

        for callback in self.post_step_callbacks:
            callback()

    def _build_network(self) -> NetworkContext:
        scan = self.scanner.scan_around_player(self.settings.scan_radius)
        context = NetworkContext(nodes=scan.nodes, stress_capacity=scan.nominal_capacity)
        self.propagation.propagate(context)
        self.ledger.apply(context, tick=self.ticks)
        return context

    def _forward_to_player(self, event: Event) -> None:
        self.outbox.notify(event.message())

    # ============================================================
    # LOOP
    # ============================================================

    def run_loop(self, max_ticks: Optional[int] = None) -> None:
        """
        Blocking fixed-period loop.

        Overrun policy: drift. A late tick is followed immediately by the next
        one; missed periods are not replayed.
        """
        period = self.settings.tick_period
        self.running = True
        logger.info(f"Simulation loop started (period {self.settings.tick_period_ms} ms)")
        try:
            executed = 0
            while self.running:
                start = time.perf_counter()
                self.tick()
                executed += 1
                if max_ticks is not None and executed >= max_ticks:
                    break

                elapsed = time.perf_counter() - start
                if elapsed > period:
                    self.overruns += 1
                    logger.warning(f"Tick {self.ticks} overran period: "
                                   f"{elapsed * 1000:.1f} ms > {self.settings.tick_period_ms} ms")
                time.sleep(max(0.0, period - elapsed))
        finally:
            self.running = False
            logger.info("Simulation loop stopped")

    def stop(self) -> None:
        self.running = False

    def reset(self) -> None:
        """Drop all in-flight processes and tick state (clean restart)."""
        with self._tick_lock:
            self.scheduler.reset()
            self.outbox.clear()
            self.network = NetworkContext()
            self.ticks = 0

    # ============================================================
    # DIAGNOSTICS
    # ============================================================

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view of the last completed tick."""
        with self._tick_lock:
            view = self.network.to_dict()
            view["tick"] = self.ticks
            view["processes"] = {
                coord_key(c): p.to_dict() for c, p in self.scheduler.instances.items()
            }
            view["counters"] = self.counters.get_all()
            return view

    def get_event_log(self, limit: int = 100):
        return [e.to_dict() for e in self.event_dispatcher.get_event_log()[-limit:]]
