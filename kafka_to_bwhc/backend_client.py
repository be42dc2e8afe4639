"""
HTTP client for the bwHC backend.

One request per forwarded payload, no retries. Any received response is a
success from the bridge's point of view; only transport problems are failures.
"""

from typing import Optional
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from kafka_to_bwhc.config import BridgeConfig
from kafka_to_bwhc.logger import BridgeLogger
from kafka_to_bwhc.models import BackendOutcome, BackendSuccess, TransportFailure
from kafka_to_bwhc.mtbfile import ConsentStatus, parse_consent

MTBFILE_PATH = "/MTBFile"


class BackendClient:
    """HTTP client forwarding MTB-Files to the backend."""

    def __init__(self, config: BridgeConfig, logger: BridgeLogger):
        """Initialize the backend client.

        Args:
            config: Bridge configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger
        self.session = self._create_session()
        self.base_url = config.rest_uri.rstrip("/")
        self.timeout = config.rest_timeout

    def _create_session(self) -> requests.Session:
        """Create a requests session without retries."""
        session = requests.Session()

        # Redelivery is left to the broker
        adapter = HTTPAdapter(max_retries=Retry(total=0, read=False))
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def forward(self, payload: bytes) -> BackendOutcome:
        """Forward a payload to the backend.

        Files with rejected consent are turned into a delete request for the
        patient; everything else is posted verbatim.

        Args:
            payload: Raw MTB-File bytes

        Returns:
            BackendSuccess with the backend's status and body, or
            TransportFailure if no response was received
        """
        consent = parse_consent(payload)
        if consent is not None and consent.status is ConsentStatus.REJECTED:
            return self.send_delete(consent.patient_id)
        return self.send_mtb_file(payload)

    def send_mtb_file(self, payload: bytes) -> BackendOutcome:
        """POST an MTB-File to the backend."""
        return self._request(
            "POST",
            f"{self.base_url}{MTBFILE_PATH}",
            data=payload,
        )

    def send_delete(self, patient_id: str) -> BackendOutcome:
        """Request deletion of all data of a patient."""
        return self._request(
            "DELETE",
            f"{self.base_url}{MTBFILE_PATH}/{quote(patient_id, safe='')}",
        )

    def _request(self, method: str, url: str, data: Optional[bytes] = None) -> BackendOutcome:
        try:
            response = self.session.request(
                method,
                url,
                data=data,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            # Reading the body may still fail on a broken connection
            body = response.content

        except requests.exceptions.RequestException as e:
            reason = self._describe_failure(e)
            self.logger.record_backend_call(reachable=False)
            self.logger.warning(
                "Backend not reachable",
                method=method,
                url=url,
                reason=reason,
                error=str(e),
            )
            return TransportFailure(reason=reason)

        self.logger.record_backend_call(reachable=True)
        self.logger.debug(
            "Backend responded",
            method=method,
            url=url,
            status_code=response.status_code,
            elapsed_ms=int(response.elapsed.total_seconds() * 1000),
        )
        return BackendSuccess(status_code=response.status_code, body=body)

    def _describe_failure(self, error: requests.exceptions.RequestException) -> str:
        """Short human readable reason for a transport failure."""
        if isinstance(error, requests.exceptions.Timeout):
            return f"timeout after {self.timeout}s"
        if isinstance(error, requests.exceptions.ConnectionError):
            if "refused" in str(error).lower():
                return "connection refused"
            return "connection failed"
        return str(error) or type(error).__name__

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
