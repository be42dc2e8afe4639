"""
Minimal MTB-File inspection.

Only the consent section is read, to decide whether the file is to be stored
or the patient's data deleted. The rest of the document stays opaque.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ConsentStatus(str, Enum):
    ACTIVE = "active"
    REJECTED = "rejected"


@dataclass(frozen=True)
class MTBFileConsent:
    """Consent status and patient id of an MTB-File."""

    status: ConsentStatus
    patient_id: str

    @property
    def has_consent(self) -> bool:
        return self.status is ConsentStatus.ACTIVE


def parse_consent(payload: bytes) -> Optional[MTBFileConsent]:
    """Read the consent of an MTB-File payload.

    Returns:
        The consent, or None if the payload is not JSON or has no
        recognizable ``consent.status`` / ``consent.patient``.
    """
    try:
        document = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None

    if not isinstance(document, dict):
        return None

    consent = document.get("consent")
    if not isinstance(consent, dict):
        return None

    patient_id = consent.get("patient")
    if not isinstance(patient_id, str) or not patient_id:
        return None

    try:
        status = ConsentStatus(consent.get("status"))
    except ValueError:
        return None

    return MTBFileConsent(status=status, patient_id=patient_id)
