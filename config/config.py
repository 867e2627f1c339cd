"""Configuration classes for LAMA Agent.

This module contains all configuration classes organized by domain.
Configuration is loaded from environment variables and .env files.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models.enums import MetricCategory


def str_to_bool(value: Any) -> bool:
    """Convert various string representations to boolean values.

    Args:
        value: The value to convert. Can be bool, str, int, or any other type.

    Returns:
        bool: The converted boolean value.

    Examples:
        >>> str_to_bool("true")
        True
        >>> str_to_bool("0")
        False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("true", "1", "yes", "on", "enabled")
    return bool(value)


def _validate_http_url(name: str, v: str) -> str:
    if not v.startswith(("http://", "https://")):
        raise ValueError(f"{name} must start with http:// or https://")
    return v.rstrip("/")


class ServerConfig(BaseSettings):
    """Server configuration settings."""

    # Application metadata
    app_name: str = "LAMA Agent"
    app_version: str = "1.0.0"

    # Health/metrics HTTP surface
    server_port: int = Field(default=8081, alias="SERVER_PORT")
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")


class LamaConfig(BaseSettings):
    """LAMA reporting API configuration settings."""

    lama_url: str = Field(default="https://lama.example.invalid", alias="LAMA_URL")
    lama_login_id: str = Field(default="", alias="LAMA_LOGIN_ID")
    lama_member_id: str = Field(default="", alias="LAMA_MEMBER_ID")
    lama_exchange_id: int = Field(default=1, alias="LAMA_EXCHANGE_ID")
    lama_password: SecretStr = Field(default=SecretStr(""), alias="LAMA_PASSWORD")
    lama_timeout: float = Field(default=10.0, gt=0, alias="LAMA_TIMEOUT")
    lama_application_id: int = Field(default=1, alias="LAMA_APPLICATION_ID")
    lama_initial_sequence_id: int = Field(default=1, ge=1, alias="LAMA_INITIAL_SEQUENCE_ID")

    @field_validator("lama_url")
    @classmethod
    def validate_lama_url(cls, v: str) -> str:
        """Ensure LAMA URL is properly formatted."""
        return _validate_http_url("lama_url", v)


class PrometheusConfig(BaseSettings):
    """Metrics source (Prometheus HTTP API) configuration settings."""

    prometheus_endpoint: str = Field(default="http://localhost:9090", alias="PROMETHEUS_ENDPOINT")
    prometheus_query_path: str = Field(default="/api/v1/query", alias="PROMETHEUS_QUERY_PATH")
    prometheus_username: str = Field(default="", alias="PROMETHEUS_USERNAME")
    prometheus_password: SecretStr = Field(default=SecretStr(""), alias="PROMETHEUS_PASSWORD")
    prometheus_timeout: float = Field(default=10.0, gt=0, alias="PROMETHEUS_TIMEOUT")
    prometheus_max_idle_conns: int = Field(default=10, ge=1, alias="PROMETHEUS_MAX_IDLE_CONNS")
    prometheus_config_path: Optional[str] = Field(default=None, alias="PROMETHEUS_CONFIG_PATH")
    prometheus_scrape_job: str = Field(default="metrics-db", alias="PROMETHEUS_SCRAPE_JOB")

    @field_validator("prometheus_endpoint")
    @classmethod
    def validate_prometheus_endpoint(cls, v: str) -> str:
        """Ensure Prometheus endpoint is properly formatted."""
        return _validate_http_url("prometheus_endpoint", v)


class SyncConfig(BaseSettings):
    """Sync loop and retry configuration settings."""

    max_retries: int = Field(default=3, ge=0, alias="APP_MAX_RETRIES")
    retry_interval: float = Field(default=5.0, ge=0, alias="APP_RETRY_INTERVAL")
    sync_interval: float = Field(default=60.0, gt=0, alias="APP_SYNC_INTERVAL")
    shutdown_timeout: float = Field(default=30.0, gt=0, alias="APP_SHUTDOWN_TIMEOUT")


class CategoryConfig(BaseSettings):
    """Per-category host lists and metric queries.

    Queries are `string.Template` strings; `$host` is replaced with the
    host being polled.
    """

    hardware_hosts: List[str] = Field(default_factory=list, alias="METRICS_HARDWARE_HOSTS")
    hardware_queries: Dict[str, str] = Field(
        default_factory=lambda: {
            "cpu": '100 * (1 - avg(rate(node_cpu_seconds_total{mode="idle",instance="$host"}[5m])))',
            "memory": '100 * (1 - node_memory_MemAvailable_bytes{instance="$host"} / node_memory_MemTotal_bytes{instance="$host"})',
            "disk": '100 * (1 - node_filesystem_avail_bytes{mountpoint="/",instance="$host"} / node_filesystem_size_bytes{mountpoint="/",instance="$host"})',
            "uptime": 'node_time_seconds{instance="$host"} - node_boot_time_seconds{instance="$host"}',
        },
        alias="METRICS_HARDWARE_QUERIES",
    )

    database_hosts: List[str] = Field(default_factory=list, alias="METRICS_DATABASE_HOSTS")
    database_queries: Dict[str, str] = Field(
        default_factory=lambda: {"status": 'up{instance="$host"}'},
        alias="METRICS_DATABASE_QUERIES",
    )

    network_hosts: List[str] = Field(default_factory=list, alias="METRICS_NETWORK_HOSTS")
    network_queries: Dict[str, str] = Field(
        default_factory=lambda: {
            "packet_errors": 'sum(node_network_receive_errs_total{instance="$host"}) + sum(node_network_transmit_errs_total{instance="$host"})',
        },
        alias="METRICS_NETWORK_QUERIES",
    )

    application_hosts: List[str] = Field(default_factory=list, alias="METRICS_APPLICATION_HOSTS")
    application_queries: Dict[str, str] = Field(
        default_factory=dict, alias="METRICS_APPLICATION_QUERIES"
    )

    def category_hosts(self, category: MetricCategory) -> List[str]:
        return list(getattr(self, f"{MetricCategory(category).value}_hosts"))

    def category_queries(self, category: MetricCategory) -> Dict[str, str]:
        return dict(getattr(self, f"{MetricCategory(category).value}_queries"))


class MonitoringConfig(BaseSettings):
    """Monitoring configuration settings."""

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_json", mode="before")
    @classmethod
    def validate_log_json(cls, v) -> bool:
        """Convert string boolean values to actual boolean."""
        return str_to_bool(v)


class ApplicationConfig(
    ServerConfig,
    LamaConfig,
    PrometheusConfig,
    SyncConfig,
    CategoryConfig,
    MonitoringConfig,
    BaseSettings
):
    """Main application configuration that combines all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
