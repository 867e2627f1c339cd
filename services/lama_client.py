"""LAMA API transport for LAMA Agent.

This module owns the HTTP session and the static headers the exchange
requires. It knows nothing about response codes; callers classify them.
"""

from collections import namedtuple
from typing import Any, Dict, Optional

import requests

from config import ApplicationConfig
from utils import create_contextual_logger
from .exceptions import DecodeError, TransportError

USER_AGENT = "LAMAAPI/1.0.0"
LOGIN_PATH = "/api/V1/auth/login"
METRICS_PATH = "/api/V1/metrics/{category}"

# Decoded response passed back to the session manager and publisher
LamaResponse = namedtuple("LamaResponse", ["status_code", "body"])


class LamaClient:
    """Synchronous JSON client for the LAMA reporting API."""

    def __init__(self, config: ApplicationConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self.base_url = config.lama_url
        self.timeout = config.lama_timeout
        self.logger = create_contextual_logger(
            __name__,
            service="lama_client",
            login_id=config.lama_login_id,
            member_id=config.lama_member_id,
            exchange_id=config.lama_exchange_id,
        )
        self._session = session or requests.Session()
        self.headers = self._static_headers()
        self.logger.debug("LAMA client created", url=self.base_url)

    def _static_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Referer": self.base_url,
            "User-Agent": USER_AGENT,
            "Accept-Language": "en-US",
            "Cookie": "test" if "uat" in self.base_url else "prod",
        }

    def post(self, path: str, payload: Dict[str, Any], token: Optional[str] = None) -> LamaResponse:
        """POST a JSON payload and decode the JSON response.

        Raises:
            TransportError: the request failed before a response arrived.
            DecodeError: the response body is not a JSON object.
        """
        url = self.base_url + path
        headers = dict(self.headers)
        if token is not None:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self._session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error("LAMA HTTP request failed", url=url, error=str(e))
            raise TransportError(f"HTTP request to {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            self.logger.error(
                "Unable to decode LAMA response", url=url, http_status=response.status_code
            )
            raise DecodeError(
                f"failed to decode response from {path}: {e}", http_status=response.status_code
            ) from e

        if not isinstance(body, dict):
            raise DecodeError(
                f"unexpected response body type from {path}: {type(body).__name__}",
                http_status=response.status_code,
            )

        return LamaResponse(status_code=response.status_code, body=body)

    def close(self) -> None:
        self._session.close()
