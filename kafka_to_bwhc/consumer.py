"""
Kafka consumer module for the bridge.

Reads one record at a time; offsets are committed explicitly by the bridge
once the response has been delivered.
"""

from typing import List, Optional

from confluent_kafka import Consumer, KafkaError, KafkaException, Message, TopicPartition

from kafka_to_bwhc.config import BridgeConfig
from kafka_to_bwhc.logger import BridgeLogger


class KafkaConsumerWrapper:
    """Wrapper around confluent-kafka Consumer with manual offset commits."""

    def __init__(self, config: BridgeConfig, logger: BridgeLogger):
        """Initialize the Kafka consumer.

        Args:
            config: Bridge configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger
        self.consumer: Optional[Consumer] = None

    def connect(self) -> None:
        """Connect to Kafka and subscribe to the input topic."""
        kafka_config = self.config.get_kafka_consumer_config()
        kafka_config["on_commit"] = self._on_commit
        self.consumer = Consumer(kafka_config)
        self.consumer.subscribe(
            [self.config.input_topic],
            on_assign=self._on_assign,
            on_revoke=self._on_revoke,
        )

        self.logger.info(
            "Connected to Kafka",
            bootstrap_servers=self.config.kafka_bootstrap_servers,
            topic=self.config.input_topic,
            group_id=kafka_config["group.id"],
        )

    def close(self) -> None:
        """Close the consumer connection."""
        if self.consumer:
            self.consumer.close()
            self.consumer = None
            self.logger.info("Consumer closed")

    def _on_assign(self, consumer: Consumer, partitions: List[TopicPartition]) -> None:
        self.logger.debug("Partitions assigned", partitions=_describe(partitions))

    def _on_revoke(self, consumer: Consumer, partitions: List[TopicPartition]) -> None:
        self.logger.debug("Partitions revoked", partitions=_describe(partitions))

    def _on_commit(self, err: Optional[KafkaError], partitions: List[TopicPartition]) -> None:
        if err:
            self.logger.warning("Offset commit failed", error=str(err))
        else:
            self.logger.debug("Offsets committed", partitions=_describe(partitions))

    def poll(self, timeout: Optional[float] = None) -> Optional[Message]:
        """Poll for a single message.

        Args:
            timeout: Poll timeout in seconds (default: config.poll_timeout)

        Returns:
            Message if available, None otherwise

        Raises:
            KafkaException: If the broker reports an error other than end of partition
        """
        if not self.consumer:
            raise RuntimeError("Consumer not connected")

        msg = self.consumer.poll(self.config.poll_timeout if timeout is None else timeout)

        if msg is None:
            return None

        if msg.error():
            if msg.error().code() == KafkaError._PARTITION_EOF:
                return None
            raise KafkaException(msg.error())

        return msg

    def commit(self, message: Message) -> None:
        """Synchronously commit the offset following the given message."""
        if not self.consumer:
            raise RuntimeError("Consumer not connected")

        self.consumer.commit(message=message, asynchronous=False)


def _describe(partitions: List[TopicPartition]) -> List[str]:
    return [f"{p.topic}[{p.partition}]@{p.offset}" for p in partitions]
