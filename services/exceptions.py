"""Error taxonomy for LAMA Agent.

Publisher raises these while classifying a push and converts them into
`PushOutcome`s; `retryable` decides between a transient and a fatal
outcome when no recovery applies. Only `BootstrapError` is allowed to
stop the process.
"""

from typing import Any, Dict, Optional


class LamaError(Exception):
    """Base class for LAMA API errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        response_code: Optional[int] = None,
        response_desc: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.response_code = response_code
        self.response_desc = response_desc

    def details(self) -> Dict[str, Any]:
        """HTTP and LAMA response context for outcomes and log lines."""
        return {
            "http_status": self.http_status,
            "response_code": self.response_code,
            "response_desc": self.response_desc,
        }


class TransportError(LamaError):
    """The request never produced an HTTP response."""

    retryable = True


class DecodeError(LamaError):
    """The response body could not be decoded."""


class AuthRejected(LamaError):
    """Login was refused by the API. Not retried automatically."""


class TokenInvalidated(LamaError):
    """The session token was rejected; retry after a fresh login."""

    retryable = True


class SequenceMismatch(LamaError):
    """The API expects a different sequence id.

    `expected` is None when the description did not carry a parsable value.
    """

    def __init__(self, message: str, expected: Optional[int] = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.expected = expected
        self.retryable = expected is not None


class UnrecognizedResponseCode(LamaError):
    """Response code the agent has no recovery for."""


class MetricsSourceError(Exception):
    """A metrics source query or liveness check failed."""


class BootstrapError(Exception):
    """Startup could not complete; fatal to the process."""
