"""Publisher for LAMA metric pushes.

`Publisher.push` performs exactly one attempt: build the envelope, send it,
classify the response and apply the matching recovery (re-login or
sequence resync). Retrying is left to the caller.
"""

import re
from typing import Optional

from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from config import ApplicationConfig
from models import MetricCategory, MetricSample, MetricsResponse, PushOutcome, ResponseCode
from utils import create_contextual_logger
from .envelope import build_envelope
from .exceptions import (
    DecodeError,
    LamaError,
    SequenceMismatch,
    TokenInvalidated,
    UnrecognizedResponseCode,
)
from .health_metrics import push_attempts_total
from .lama_client import METRICS_PATH, LamaClient, LamaResponse
from .sequence_tracker import SequenceTracker
from .session_manager import SessionManager

SEQUENCE_ID_PATTERN = re.compile(r"SequenceId should be (\d+)")

ACCEPTED_CODES = (ResponseCode.SUCCESS, ResponseCode.PARTIAL_SUCCESS)
TOKEN_REJECTED_CODES = (ResponseCode.INVALID_TOKEN, ResponseCode.EXPIRED_TOKEN)


def extract_expected_sequence_id(desc: Optional[str]) -> int:
    """Extract the sequence id the API expects from a response description.

    Raises:
        SequenceMismatch: the description carries no expected sequence id.
    """
    match = SEQUENCE_ID_PATTERN.search(desc or "")
    # Sequence ids start at 1; a declared 0 is treated as unparsable.
    if not match or int(match.group(1)) < 1:
        raise SequenceMismatch(
            "expected SequenceID not found in the description",
            response_code=ResponseCode.INVALID_SEQUENCE_ID,
            response_desc=desc,
        )
    return int(match.group(1))


class Publisher:
    """Pushes metric samples for any category to the LAMA API."""

    def __init__(
        self,
        config: ApplicationConfig,
        client: LamaClient,
        session_manager: SessionManager,
        sequence_tracker: SequenceTracker,
    ) -> None:
        self.config = config
        self.client = client
        self.session_manager = session_manager
        self.sequence_tracker = sequence_tracker
        self.logger = create_contextual_logger(__name__, service="publisher")

    def push(self, category: MetricCategory, host: str, sample: MetricSample) -> PushOutcome:
        category = MetricCategory(category)
        outcome = self._push(category, host, sample)
        push_attempts_total.labels(category=category.value, outcome=outcome.kind.value).inc()
        return outcome

    def _push(self, category: MetricCategory, host: str, sample: MetricSample) -> PushOutcome:
        log = self.logger.bind(category=category.value, host=host)

        token = self.session_manager.current_token()
        seq_id = self.sequence_tracker.next_sequence(category)

        envelope = build_envelope(
            sample,
            member_id=self.config.lama_member_id,
            exchange_id=self.config.lama_exchange_id,
            sequence_id=seq_id,
            application_id=self.config.lama_application_id,
        )
        path = METRICS_PATH.format(category=category.value)
        log.info("Preparing to send metrics", url=self.client.base_url + path, seq_id=seq_id)
        log.debug("Metrics payload", payload=envelope.to_wire())

        try:
            response = self.client.post(path, envelope.to_wire(), token=token)
            result = self._classify(response, log)
        except TokenInvalidated as e:
            log.warning("Token is invalid or expired, attempting to log in again")
            try:
                self.session_manager.login()
            except LamaError as login_error:
                log.error("Relogin attempt failed", error=login_error.message)
            return PushOutcome.after_reauth(category, host, error=e.message, **e.details())
        except SequenceMismatch as e:
            if not e.retryable:
                log.error("Failed to extract expected sequence ID", error=e.message)
                return PushOutcome.fatal(category, host, error=e.message, **e.details())
            log.warning("Sequence ID is invalid, updating", expected_seq_id=e.expected)
            self.sequence_tracker.resync(category, e.expected)
            return PushOutcome.after_resync(
                category, host, corrected_sequence=e.expected, error=e.message, **e.details()
            )
        except LamaError as e:
            if e.retryable:
                log.warning("Metrics push did not reach the API", error=e.message)
                return PushOutcome.transient(category, host, error=e.message, **e.details())
            log.error("Giving up on metrics push", error=e.message, **e.details())
            return PushOutcome.fatal(category, host, error=e.message, **e.details())

        new_seq_id = self.sequence_tracker.advance(category)
        log.info("Metrics push accepted", next_seq_id=new_seq_id)
        return PushOutcome.success(
            category,
            host,
            http_status=response.status_code,
            response_code=result.response_code,
            response_desc=result.response_desc,
        )

    def _classify(self, response: LamaResponse, log: BoundLogger) -> MetricsResponse:
        """Return the parsed response of an accepted push.

        Raises:
            DecodeError: the body carries no response code.
            TokenInvalidated: the token was rejected.
            SequenceMismatch: the sequence id was rejected; `expected` holds
                the server-declared value when it could be parsed.
            UnrecognizedResponseCode: any other refusal.
        """
        try:
            result = MetricsResponse.model_validate(response.body)
        except ValidationError as e:
            raise DecodeError(
                f"malformed metrics response: {e}", http_status=response.status_code
            ) from e

        details = dict(
            http_status=response.status_code,
            response_code=result.response_code,
            response_desc=result.response_desc,
        )
        log.info("Received response for metrics push", **details)

        if response.status_code == 200 and result.response_code in ACCEPTED_CODES:
            if result.errors:
                log.warning(
                    "Metrics push partially accepted",
                    errors=[err.model_dump(exclude_none=True) for err in result.errors],
                )
            return result

        errors = [err.model_dump(exclude_none=True) for err in result.errors or []]
        log.error("Metrics push failed", errors=errors, **details)

        if result.response_code in TOKEN_REJECTED_CODES:
            raise TokenInvalidated(f"token rejected with response code {result.response_code}", **details)

        if result.response_code == ResponseCode.INVALID_SEQUENCE_ID:
            try:
                expected = extract_expected_sequence_id(result.response_desc)
            except SequenceMismatch as e:
                raise SequenceMismatch(
                    f"failed to extract expected sequence ID: {e.message}", **details
                ) from e
            raise SequenceMismatch(
                f"sequence id rejected, API expects {expected}", expected=expected, **details
            )

        raise UnrecognizedResponseCode(
            f"metrics push failed with unhandled response code {result.response_code}", **details
        )
