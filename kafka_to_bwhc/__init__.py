"""
kafka-to-bwhc - forwards MTB-Files from Kafka to the bwHC backend.

This package provides a Kafka consumer/producer bridge that:
- Consumes MTB-Files from a Kafka topic
- Sends each file to the bwHC backend REST API
- Produces the backend's response, keyed like the request, to a response topic
- Reports an unreachable backend with the status 900

Typical usage:
    from kafka_to_bwhc import KafkaToBwhcBridge

    bridge = KafkaToBwhcBridge()
    bridge.run()
"""

from kafka_to_bwhc.bridge import KafkaToBwhcBridge
from kafka_to_bwhc.config import BridgeConfig

__version__ = "1.0.0"
__all__ = ["KafkaToBwhcBridge", "BridgeConfig"]
