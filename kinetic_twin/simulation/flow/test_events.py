"""
Event flow - basic test

Dispatcher fan-out, wildcard subscription, log bound, counters.
"""

from kinetic_twin.simulation.flow import CounterSystem, Event, EventDispatcher, KineticEventType


def test_dispatcher_and_counters():
    dispatcher = EventDispatcher()
    counters = CounterSystem()
    counters.attach(dispatcher)

    completed = []
    dispatcher.subscribe(KineticEventType.PROCESS_COMPLETED, completed.append)

    dispatcher.emit(Event(KineticEventType.PROCESS_STARTED, tick=1, node_key="2,0,0",
                          data={"kind": "MILLSTONE", "input": "wheat"}))
    dispatcher.emit(Event(KineticEventType.PROCESS_COMPLETED, tick=10, node_key="2,0,0",
                          data={"kind": "MILLSTONE", "output": "flour", "count": 1}))

    assert len(completed) == 1
    assert counters.get("process_started") == 1
    assert counters.get("process_completed") == 1
    assert counters.get("produced.flour") == 1
    assert counters.get("network_overload") == 0
    assert [e.type for e in dispatcher.get_event_log()] == [
        KineticEventType.PROCESS_STARTED, KineticEventType.PROCESS_COMPLETED]


def test_event_messages():
    done = Event(KineticEventType.PROCESS_COMPLETED, tick=3, node_key="1,2,3",
                 data={"kind": "PRESS", "output": "iron_sheet", "count": 1})
    assert done.message() == "PRESS at 1,2,3 produced iron_sheet x1"
    assert done.to_dict()["type"] == "PROCESS_COMPLETED"


def test_event_log_is_bounded():
    dispatcher = EventDispatcher(log_limit=3)
    for tick in range(5):
        dispatcher.emit(Event(KineticEventType.PROCESS_CANCELLED, tick=tick))
    assert [e.tick for e in dispatcher.get_event_log()] == [2, 3, 4]
