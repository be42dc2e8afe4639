"""
Response topic and consumer group resolution.

The ETL-Processor expects responses on ``<topic>_response`` and the bridge
joins ``<topic>_group`` unless either is configured explicitly.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kafka_to_bwhc.config import BridgeConfig

RESPONSE_TOPIC_SUFFIX = "_response"
GROUP_ID_SUFFIX = "_group"


@dataclass(frozen=True)
class TopicResolution:
    """Resolved response topic and consumer group id."""

    response_topic: str
    group_id: str


def resolve_topics(config: "BridgeConfig") -> TopicResolution:
    """Resolve the response topic and group id for a configuration.

    Explicit values are used verbatim; missing ones are derived from the
    inbound topic name.
    """
    response_topic = config.response_topic or f"{config.input_topic}{RESPONSE_TOPIC_SUFFIX}"
    group_id = config.consumer_group_id or f"{config.input_topic}{GROUP_ID_SUFFIX}"
    return TopicResolution(response_topic=response_topic, group_id=group_id)
