from .memory_world import MemoryWorld
from .sink_mqtt import MQTTNotifier

__all__ = ['MemoryWorld', 'MQTTNotifier']
