"""
Configuration module for the kafka-to-bwhc bridge.

All configuration is done via environment variables for easy Docker deployment.
The configuration is read once at startup and never changes afterwards.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Optional

from kafka_to_bwhc.errors import ConfigurationError
from kafka_to_bwhc.topics import resolve_topics


def _optional_env(name: str) -> Optional[str]:
    """Return the variable's value, treating empty strings as unset."""
    return os.getenv(name) or None


@dataclass(frozen=True)
class BridgeConfig:
    """Configuration for the bridge.

    All values can be set via environment variables.
    """

    # bwHC backend
    rest_uri: Optional[str] = field(default_factory=lambda: _optional_env("APP_REST_URI"))
    rest_timeout: float = field(
        default_factory=lambda: float(os.getenv("APP_REST_TIMEOUT", "5"))
    )

    # Kafka connection
    kafka_bootstrap_servers: Optional[str] = field(
        default_factory=lambda: _optional_env("KAFKA_BOOTSTRAP_SERVERS")
    )
    kafka_security_protocol: str = field(
        default_factory=lambda: os.getenv("KAFKA_SECURITY_PROTOCOL", "PLAINTEXT")
    )
    kafka_sasl_mechanism: Optional[str] = field(
        default_factory=lambda: _optional_env("KAFKA_SASL_MECHANISM")
    )
    kafka_sasl_username: Optional[str] = field(
        default_factory=lambda: _optional_env("KAFKA_SASL_USERNAME")
    )
    kafka_sasl_password: Optional[str] = field(
        default_factory=lambda: _optional_env("KAFKA_SASL_PASSWORD")
    )

    # Consumer settings
    input_topic: Optional[str] = field(default_factory=lambda: _optional_env("APP_KAFKA_TOPIC"))
    consumer_group_id: Optional[str] = field(
        default_factory=lambda: _optional_env("APP_KAFKA_GROUP_ID")
    )
    auto_offset_reset: str = field(
        default_factory=lambda: os.getenv("AUTO_OFFSET_RESET", "earliest")
    )
    poll_timeout: float = field(
        default_factory=lambda: float(os.getenv("KAFKA_POLL_TIMEOUT", "1.0"))
    )

    # Producer settings
    response_topic: Optional[str] = field(
        default_factory=lambda: _optional_env("APP_KAFKA_RESPONSE_TOPIC")
    )
    producer_timeout: float = field(
        default_factory=lambda: float(os.getenv("KAFKA_PRODUCER_TIMEOUT", "5.0"))
    )

    # Logging settings
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: _optional_env("LOG_FILE"))
    log_format: str = field(default_factory=lambda: os.getenv("LOG_FORMAT", "json"))  # json, text

    # Bridge identification
    bridge_name: str = field(default_factory=lambda: os.getenv("BRIDGE_NAME", "kafka-to-bwhc"))

    def resolved(self) -> "BridgeConfig":
        """Return a copy with response topic and group id filled in."""
        topics = resolve_topics(self)
        return dataclasses.replace(
            self,
            response_topic=topics.response_topic,
            consumer_group_id=topics.group_id,
        )

    def _security_config(self) -> dict:
        config = {"security.protocol": self.kafka_security_protocol}

        if self.kafka_sasl_mechanism:
            config["sasl.mechanism"] = self.kafka_sasl_mechanism
        if self.kafka_sasl_username:
            config["sasl.username"] = self.kafka_sasl_username
        if self.kafka_sasl_password:
            config["sasl.password"] = self.kafka_sasl_password

        return config

    def get_kafka_consumer_config(self) -> dict:
        """Get Kafka consumer configuration dictionary."""
        config = {
            "bootstrap.servers": self.kafka_bootstrap_servers,
            "group.id": resolve_topics(self).group_id,
            "auto.offset.reset": self.auto_offset_reset,
            "enable.auto.commit": False,  # commit only after the response is delivered
        }
        config.update(self._security_config())
        return config

    def get_kafka_producer_config(self) -> dict:
        """Get Kafka producer configuration dictionary."""
        config = {
            "bootstrap.servers": self.kafka_bootstrap_servers,
            "acks": "all",
            "message.timeout.ms": int(self.producer_timeout * 1000),
        }
        config.update(self._security_config())
        return config

    def validate(self) -> None:
        """Validate configuration and raise ConfigurationError if invalid."""
        if not self.rest_uri:
            raise ConfigurationError("Missing configuration 'APP_REST_URI'")

        if not self.kafka_bootstrap_servers:
            raise ConfigurationError("Missing configuration 'KAFKA_BOOTSTRAP_SERVERS'")

        if not self.input_topic:
            raise ConfigurationError("Missing configuration 'APP_KAFKA_TOPIC'")

        if self.rest_timeout <= 0:
            raise ConfigurationError(f"Invalid APP_REST_TIMEOUT: {self.rest_timeout}")

        if self.producer_timeout <= 0:
            raise ConfigurationError(f"Invalid KAFKA_PRODUCER_TIMEOUT: {self.producer_timeout}")

        if self.log_format not in ("json", "text"):
            raise ConfigurationError(f"Invalid log_format: {self.log_format}")

    def __str__(self) -> str:
        """Return a string representation with sensitive fields masked."""
        topics = resolve_topics(self)
        return (
            f"BridgeConfig(\n"
            f"  kafka_bootstrap_servers={self.kafka_bootstrap_servers},\n"
            f"  kafka_security_protocol={self.kafka_security_protocol},\n"
            f"  kafka_sasl_password={'***' if self.kafka_sasl_password else None},\n"
            f"  input_topic={self.input_topic},\n"
            f"  response_topic={topics.response_topic},\n"
            f"  consumer_group_id={topics.group_id},\n"
            f"  rest_uri={self.rest_uri},\n"
            f"  rest_timeout={self.rest_timeout},\n"
            f"  bridge_name={self.bridge_name}\n"
            f")"
        )
