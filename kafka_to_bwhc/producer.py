"""
Kafka producer module for the bridge.

Each response is delivered synchronously: ``publish`` returns only after the
broker acknowledged the record, and raises PublishError otherwise.
"""

from typing import List, Optional

from confluent_kafka import KafkaError, KafkaException, Message, Producer

from kafka_to_bwhc.config import BridgeConfig
from kafka_to_bwhc.errors import PublishError
from kafka_to_bwhc.logger import BridgeLogger
from kafka_to_bwhc.models import OutboundRecord


class KafkaProducerWrapper:
    """Wrapper around confluent-kafka Producer with delivery confirmation."""

    def __init__(self, config: BridgeConfig, logger: BridgeLogger):
        """Initialize the Kafka producer.

        Args:
            config: Bridge configuration, with the response topic resolved
            logger: Logger instance
        """
        self.config = config
        self.logger = logger
        self.producer: Optional[Producer] = None
        self._delivery_errors: List[KafkaError] = []

    def connect(self) -> None:
        """Connect to Kafka."""
        kafka_config = self.config.get_kafka_producer_config()
        self.producer = Producer(kafka_config)

        self.logger.info(
            "Producer connected to Kafka",
            bootstrap_servers=self.config.kafka_bootstrap_servers,
            response_topic=self.config.response_topic,
        )

    def close(self) -> None:
        """Flush and close the producer."""
        if self.producer:
            remaining = self.producer.flush(timeout=self.config.producer_timeout)
            if remaining > 0:
                self.logger.warning(
                    "Producer closed with undelivered messages",
                    remaining=remaining,
                )
            else:
                self.logger.info("Producer closed successfully")
            self.producer = None

    def _delivery_callback(self, err: Optional[KafkaError], msg: Message) -> None:
        """Handle message delivery confirmation callback."""
        if err:
            self._delivery_errors.append(err)
        else:
            self.logger.record_produced()
            self.logger.debug(
                "Response delivered",
                topic=msg.topic(),
                partition=msg.partition(),
                offset=msg.offset(),
            )

    def publish(self, record: OutboundRecord, topic: Optional[str] = None) -> None:
        """Publish a record and wait for the broker's acknowledgement.

        Args:
            record: Record to publish; its key is sent as is, None means no key
            topic: Target topic (default: config.response_topic)

        Raises:
            PublishError: If the record was not acknowledged
        """
        if not self.producer:
            raise RuntimeError("Producer not connected")

        topic = topic or self.config.response_topic
        self._delivery_errors = []

        try:
            self.producer.produce(
                topic=topic,
                key=record.key,
                value=record.value,
                headers=record.headers,
                callback=self._delivery_callback,
            )
            remaining = self.producer.flush(timeout=self.config.producer_timeout)

        except (KafkaException, BufferError) as e:
            self._fail(topic, record, str(e), e)

        if self._delivery_errors:
            self._fail(topic, record, str(self._delivery_errors[0]))

        if remaining > 0:
            self._fail(topic, record, f"not acknowledged within {self.config.producer_timeout}s")

    def _fail(
        self,
        topic: str,
        record: OutboundRecord,
        reason: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.logger.record_publish_failure()
        self.logger.error(
            "Failed to publish response",
            topic=topic,
            key=_printable_key(record.key),
            error=reason,
        )
        raise PublishError(f"Failed to publish response to {topic}: {reason}", cause)


def _printable_key(key: Optional[bytes]) -> Optional[str]:
    if key is None:
        return None
    return key.decode("utf-8", errors="replace")
