import json
import logging
import paho.mqtt.client as mqtt
from typing import Dict, Any
from ..interfaces import ISink, IAdapter

logger = logging.getLogger("mqtt_sink")


class MQTTNotifier(ISink, IAdapter):
    """
    Publishes engine events to an MQTT Broker.
    Topic Format: <base_topic>/<event_type>, JSON payload
    """
    def __init__(self, broker: str, port: int, topic: str, client=None):
        self.broker = broker
        self.port = port
        self.topic = topic
        self.client = client or mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)
        self.connected = False

    def connect(self):
        try:
            logger.info(f"Connecting to MQTT Broker {self.broker}:{self.port}...")
            self.client.connect(self.broker, self.port, 60)
            self.client.loop_start()
            self.connected = True
            logger.info("MQTT Connected")
        except OSError as e:
            logger.error(f"MQTT Connection Failed: {e}")

    def disconnect(self):
        if not self.connected:
            return
        self.client.loop_stop()
        self.client.disconnect()
        self.connected = False

    def write(self, data: Dict[str, Any]) -> None:
        if not data:
            return
        topic = f"{self.topic}/{data.get('type', 'event').lower()}"
        payload = json.dumps(data)
        logger.debug(f"Publishing to MQTT topic {topic}: {payload}")
        self.client.publish(topic, payload, qos=0, retain=False)

    def __call__(self, event) -> None:
        """EventDispatcher callback."""
        self.write(event.to_dict())
