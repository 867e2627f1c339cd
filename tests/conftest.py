"""Test utilities and fixtures for LAMA Agent tests."""

import os
import sys
from typing import Any, Dict, Optional
from unittest.mock import Mock

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from prometheus_client import REGISTRY

from config import ApplicationConfig
from models import MetricCategory, MetricSample
from services.lama_client import LamaClient, LamaResponse


@pytest.fixture
def mock_config() -> ApplicationConfig:
    """Create a configuration for testing without reading the environment file."""
    return ApplicationConfig(
        _env_file=None,
        lama_url="https://lama-uat.example.com/",
        lama_login_id="login-001",
        lama_member_id="member-001",
        lama_exchange_id=1,
        lama_password="s3cret",
        prometheus_endpoint="http://prometheus:9090",
        max_retries=3,
        retry_interval=5.0,
        sync_interval=60.0,
        hardware_hosts=["h1"],
        database_hosts=["db1"],
        network_hosts=["n1"],
        application_hosts=["app1"],
        application_queries={"throughput": "sum(rate(requests_total[1m]))"},
    )


@pytest.fixture
def mock_lama_client() -> Mock:
    """Create a mock LAMA transport client."""
    client = Mock(spec=LamaClient)
    client.base_url = "https://lama-uat.example.com"
    return client


@pytest.fixture
def hardware_sample() -> MetricSample:
    """Hardware sample used throughout the publication tests."""
    return MetricSample(
        category=MetricCategory.HARDWARE,
        host="h1",
        values={"cpu": 12.345, "memory": 50.0, "disk": 70.0, "uptime": 99999.4},
    )


def lama_response(
    status_code: int = 200,
    response_code: int = 601,
    response_desc: str = "Success",
    **extra: Any,
) -> LamaResponse:
    """Create a decoded LAMA response."""
    body: Dict[str, Any] = {
        "timestamp": 1700000000,
        "versionNo": "1.0",
        "responseCode": response_code,
        "responseDesc": response_desc,
    }
    body.update(extra)
    return LamaResponse(status_code=status_code, body=body)


def http_response(status_code: int = 200, json_body: Optional[Any] = None, json_error: bool = False) -> Mock:
    """Create a mock `requests.Response`."""
    response = Mock()
    response.status_code = status_code
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = json_body
    return response


def sample_value(name: str, labels: Dict[str, str]) -> float:
    """Current value of a Prometheus sample, 0 when not yet recorded."""
    return REGISTRY.get_sample_value(name, labels) or 0.0
