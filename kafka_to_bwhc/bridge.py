"""
Main bridge orchestrator.

Consumes MTB-Files, forwards each one to the bwHC backend and publishes the
backend's response with the original key, one record at a time.
"""

import signal
from typing import Optional

from confluent_kafka import Message

from kafka_to_bwhc.backend_client import BackendClient
from kafka_to_bwhc.config import BridgeConfig
from kafka_to_bwhc.consumer import KafkaConsumerWrapper
from kafka_to_bwhc.envelope import build_response
from kafka_to_bwhc.logger import BridgeLogger
from kafka_to_bwhc.models import InboundRecord, TransportFailure
from kafka_to_bwhc.producer import KafkaProducerWrapper

METRICS_LOG_INTERVAL = 100


class KafkaToBwhcBridge:
    """Runs the consume-forward-produce loop."""

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        logger: Optional[BridgeLogger] = None,
        consumer: Optional[KafkaConsumerWrapper] = None,
        producer: Optional[KafkaProducerWrapper] = None,
        backend_client: Optional[BackendClient] = None,
    ):
        """Initialize the bridge.

        Args:
            config: Bridge configuration (default: load from environment)
            logger, consumer, producer, backend_client: Optional replacements
                for the components built from the configuration

        Raises:
            ConfigurationError: If the configuration is incomplete
        """
        config = config or BridgeConfig()
        config.validate()
        self.config = config.resolved()

        self.logger = logger or BridgeLogger(self.config)
        self.consumer = consumer or KafkaConsumerWrapper(self.config, self.logger)
        self.producer = producer or KafkaProducerWrapper(self.config, self.logger)
        self.backend_client = backend_client or BackendClient(self.config, self.logger)

        self._running = False

    def _setup_signal_handlers(self) -> None:
        """Set up graceful shutdown on SIGTERM/SIGINT."""

        def signal_handler(signum, frame):
            self.logger.info(
                "Received shutdown signal",
                signal=signal.Signals(signum).name,
            )
            self.stop()

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    def connect(self) -> None:
        """Connect to Kafka."""
        self.logger.info("Starting bridge", config=str(self.config))
        self.consumer.connect()
        self.producer.connect()

    def close(self) -> None:
        """Close all connections."""
        self.logger.info("Closing bridge")
        try:
            self.producer.close()
        finally:
            self.consumer.close()
            self.backend_client.close()
            self.logger.log_metrics()

    def process_message(self, message: Message) -> None:
        """Forward one inbound message and publish the response.

        The offset is committed only after the response was delivered; a
        PublishError leaves it uncommitted so the message is redelivered.
        """
        record = InboundRecord.from_message(message)
        self.logger.record_consumed()
        self.logger.debug(
            "Record received",
            topic=record.topic,
            partition=record.partition,
            offset=record.offset,
        )

        outcome = self.backend_client.forward(record.payload)
        response = build_response(record.key, outcome)
        self.producer.publish(response)
        self.consumer.commit(message)

        self.logger.info(
            "Response sent",
            partition=record.partition,
            offset=record.offset,
            reachable=not isinstance(outcome, TransportFailure),
            status_code=getattr(outcome, "status_code", None),
        )

    def run(self) -> None:
        """Run the bridge until stopped or a broker error occurs."""
        self._running = True
        self._setup_signal_handlers()

        try:
            self.connect()

            self.logger.info(
                "Bridge running",
                input_topic=self.config.input_topic,
                response_topic=self.config.response_topic,
                group_id=self.config.consumer_group_id,
                rest_uri=self.config.rest_uri,
            )

            while self._running:
                message = self.consumer.poll()
                if message is None:
                    continue

                self.process_message(message)

                if self.logger.metrics["records_consumed"] % METRICS_LOG_INTERVAL == 0:
                    self.logger.log_metrics()

        except KeyboardInterrupt:
            self.logger.info("Interrupted by user")

        except Exception as e:
            self.logger.exception("Bridge error", error=str(e))
            raise

        finally:
            self.close()

    def stop(self) -> None:
        """Stop after the record in progress has been handled."""
        self._running = False


def main():
    """Entry point for the bridge."""
    bridge = KafkaToBwhcBridge()
    bridge.run()


if __name__ == "__main__":
    main()
