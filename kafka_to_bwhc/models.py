"""
Records and outcomes passed between the bridge components.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from confluent_kafka import Message


@dataclass(frozen=True)
class InboundRecord:
    """A record read from the inbound topic.

    The payload is kept as raw bytes; the bridge never re-encodes it.
    """

    key: Optional[bytes]
    payload: bytes
    topic: Optional[str] = None
    partition: Optional[int] = None
    offset: Optional[int] = None

    @classmethod
    def from_message(cls, message: Message) -> "InboundRecord":
        """Build a record from a confluent-kafka message.

        A missing value (tombstone) becomes an empty payload.
        """
        return cls(
            key=message.key(),
            payload=message.value() or b"",
            topic=message.topic(),
            partition=message.partition(),
            offset=message.offset(),
        )


@dataclass(frozen=True)
class BackendSuccess:
    """The backend answered; status and body are passed on untouched."""

    status_code: int
    body: bytes


@dataclass(frozen=True)
class TransportFailure:
    """The backend could not be reached or did not answer in time."""

    reason: str


BackendOutcome = Union[BackendSuccess, TransportFailure]


@dataclass(frozen=True)
class OutboundRecord:
    """A response record for the response topic."""

    key: Optional[bytes]
    value: bytes
    headers: List[Tuple[str, bytes]] = field(default_factory=list)
