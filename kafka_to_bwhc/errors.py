"""
Exceptions raised by the bridge.

Backend transport problems are not exceptions here: they are reported as
``TransportFailure`` outcomes and published like any other response.
"""

from typing import Optional


class BridgeError(Exception):
    """Base class for bridge errors."""

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error


class ConfigurationError(BridgeError, ValueError):
    """Raised at startup when the configuration is incomplete or invalid."""


class PublishError(BridgeError):
    """Raised when a response could not be delivered to the response topic."""
