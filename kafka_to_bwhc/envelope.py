"""
Builds response records for the response topic.

The backend's body is passed on verbatim. When the backend could not be
reached, a small JSON document with the sentinel status 900 is sent instead,
so the ETL-Processor can tell "bridge could not reach backend" apart from any
status the backend itself returns.
"""

import json
from typing import Optional

from kafka_to_bwhc.models import BackendOutcome, BackendSuccess, OutboundRecord

# Agreed with the ETL-Processor; must not change.
TRANSPORT_FAILURE_STATUS = 900
DEFAULT_FAILURE_REASON = "No HTTP connection"

STATUS_CODE_HEADER = "status_code"


def failure_document(reason: str) -> bytes:
    """Encode the sentinel document for an unreachable backend."""
    return json.dumps(
        {"status": TRANSPORT_FAILURE_STATUS, "reason": reason or DEFAULT_FAILURE_REASON}
    ).encode("utf-8")


def build_response(original_key: Optional[bytes], outcome: BackendOutcome) -> OutboundRecord:
    """Build the response record for one inbound record.

    Args:
        original_key: Key of the inbound record, None if it had none
        outcome: Result of forwarding the inbound payload

    Returns:
        OutboundRecord with the same key
    """
    if isinstance(outcome, BackendSuccess):
        status_code = outcome.status_code
        value = outcome.body
    else:
        status_code = TRANSPORT_FAILURE_STATUS
        value = failure_document(outcome.reason)

    return OutboundRecord(
        key=original_key,
        value=value,
        headers=[(STATUS_CODE_HEADER, str(status_code).encode("ascii"))],
    )
