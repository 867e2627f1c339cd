"""Session management for the LAMA API.

One bearer token is shared by every category worker. It is obtained through
the login handshake and replaced whenever a push reports it invalid or
expired; there is no client-side expiry clock.
"""

import threading
from typing import Optional

from pydantic import ValidationError

from config import ApplicationConfig
from models import LoginRequest, LoginResponse, ResponseCode
from utils import create_contextual_logger
from .exceptions import AuthRejected, DecodeError
from .health_metrics import login_attempts_total
from .lama_client import LOGIN_PATH, LamaClient


class SessionManager:
    """Owns the LAMA session token."""

    def __init__(self, config: ApplicationConfig, client: LamaClient) -> None:
        self.config = config
        self.client = client
        self.logger = create_contextual_logger(
            __name__,
            service="session_manager",
            login_id=config.lama_login_id,
            member_id=config.lama_member_id,
        )
        self._lock = threading.Lock()
        self._token: Optional[str] = None

    @property
    def has_session(self) -> bool:
        return self.current_token() is not None

    def current_token(self) -> Optional[str]:
        """Last token obtained; may already be stale."""
        with self._lock:
            return self._token

    def login(self) -> None:
        """Perform the login handshake and store the new token.

        The stored token is only replaced on success.

        Raises:
            AuthRejected: the API refused the credentials or answered non-200.
            TransportError: the request failed.
            DecodeError: the response body was malformed.
        """
        self.logger.info("Starting login process", url=self.client.base_url + LOGIN_PATH)
        request = LoginRequest(
            member_id=self.config.lama_member_id,
            login_id=self.config.lama_login_id,
            password=self.config.lama_password.get_secret_value(),
        )

        try:
            response = self.client.post(LOGIN_PATH, request.model_dump(by_alias=True))
        except Exception:
            login_attempts_total.labels(status="error").inc()
            raise

        try:
            result = LoginResponse.model_validate(response.body)
        except ValidationError as e:
            login_attempts_total.labels(status="error").inc()
            if response.status_code != 200:
                raise AuthRejected(
                    f"login returned HTTP status {response.status_code}",
                    http_status=response.status_code,
                ) from e
            raise DecodeError(
                f"failed to decode login response: {e}", http_status=response.status_code
            ) from e

        if response.status_code != 200 or result.response_code != ResponseCode.SUCCESS or not result.token:
            login_attempts_total.labels(status="rejected").inc()
            self.logger.error(
                "Login failed",
                http_status=response.status_code,
                response_code=result.response_code,
                response_desc=result.response_desc,
            )
            raise AuthRejected(
                f"login failed with response code {result.response_code} "
                f"and description: {result.response_desc}",
                http_status=response.status_code,
                response_code=result.response_code,
                response_desc=result.response_desc,
            )

        with self._lock:
            self._token = result.token

        login_attempts_total.labels(status="success").inc()
        self.logger.info("Login successful")
