"""Prometheus HTTP API client used as the agent's metrics source."""

import math
import time
from typing import Optional

import requests

from config import ApplicationConfig
from utils import create_contextual_logger
from .exceptions import MetricsSourceError

STATUS_PATH = "/api/v1/status/tsdb"


class PrometheusClient:
    """Answers instant queries with a single numeric value."""

    def __init__(self, config: ApplicationConfig, session: Optional[requests.Session] = None) -> None:
        self.endpoint = config.prometheus_endpoint
        self.query_path = config.prometheus_query_path
        self.timeout = config.prometheus_timeout
        self.logger = create_contextual_logger(__name__, service="metrics_source")
        self._session = session or requests.Session()
        adapter = requests.adapters.HTTPAdapter(pool_maxsize=config.prometheus_max_idle_conns)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

        self._auth = None
        password = config.prometheus_password.get_secret_value()
        if config.prometheus_username and password:
            self._auth = (config.prometheus_username, password)

    def ping(self) -> None:
        """Check that the Prometheus server is up.

        Raises:
            MetricsSourceError: the status page is unreachable or not 200.
        """
        try:
            response = self._session.get(self.endpoint + STATUS_PATH, auth=self._auth, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise MetricsSourceError(f"failed to query tsdb status page: {e}") from e

        if response.status_code != 200:
            raise MetricsSourceError(
                f"received non-200 response ({response.status_code}) from tsdb status page"
            )

    def query(self, expression: str) -> float:
        """Evaluate an instant query and return the first sample's value.

        Raises:
            MetricsSourceError: on transport errors, non-200 responses or a
                result that holds no usable numeric value.
        """
        params = {"query": expression, "time": str(int(time.time()))}
        try:
            response = self._session.get(
                self.endpoint + self.query_path, params=params, auth=self._auth, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise MetricsSourceError(f"HTTP request failed: {e}") from e

        if response.status_code != 200:
            raise MetricsSourceError(f"HTTP request returned a non-200 status code ({response.status_code})")

        try:
            body = response.json()
        except ValueError as e:
            raise MetricsSourceError(f"failed to unmarshal the response body: {e}") from e
        if not isinstance(body, dict):
            raise MetricsSourceError("response body is not a JSON object")

        data = body.get("data")
        if data is not None and not isinstance(data, dict):
            raise MetricsSourceError("'data' in the response is not an object")
        results = (data or {}).get("result") or []
        if not isinstance(results, list):
            raise MetricsSourceError("'result' in the response is not a list")
        if not results:
            raise MetricsSourceError("response contains no result data")
        if not isinstance(results[0], dict):
            raise MetricsSourceError("first result in the response is not an object")

        value = results[0].get("value") or []
        if not isinstance(value, list):
            raise MetricsSourceError("'value' in the response is not a list")
        if len(value) < 2:
            raise MetricsSourceError("response contains no 'value' field")
        if not isinstance(value[1], str):
            raise MetricsSourceError("value in the response is not a string")

        try:
            parsed = float(value[1])
        except ValueError as e:
            raise MetricsSourceError(f"failed to convert response value to float: {e}") from e

        if not math.isfinite(parsed):
            raise MetricsSourceError(f"response value is not finite: {value[1]}")
        return parsed

    def close(self) -> None:
        self._session.close()
