"""Main application entry point for LAMA Agent."""

import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from config import ApplicationConfig, load_config, resolve_category_hosts
from models import MetricCategory
from routers import health_router, metrics_router
from services import (
    BootstrapError,
    HealthMetricsService,
    LamaClient,
    LamaError,
    MetricsCollector,
    MetricsSourceError,
    PrometheusClient,
    Publisher,
    RetryPolicy,
    SequenceTracker,
    SessionManager,
    SyncOrchestrator,
    SyncScheduler,
)
from utils import configure_logging, get_logger


@dataclass
class AgentServices:
    """Everything the lifespan has to start and tear down."""

    metrics_source: PrometheusClient
    lama_client: LamaClient
    session_manager: SessionManager
    sequence_tracker: SequenceTracker
    orchestrator: SyncOrchestrator
    health_metrics: HealthMetricsService

    def close(self) -> None:
        self.lama_client.close()
        self.metrics_source.close()


def build_services(
    config: ApplicationConfig,
    metrics_source: Optional[PrometheusClient] = None,
    lama_client: Optional[LamaClient] = None,
) -> AgentServices:
    """Wire the agent and run the startup checks.

    Raises:
        BootstrapError: the metrics source is down, no hosts are configured
            for a category, or the initial login fails.
    """
    logger = get_logger(__name__)

    metrics_source = metrics_source or PrometheusClient(config)
    try:
        metrics_source.ping()
    except MetricsSourceError as e:
        raise BootstrapError(f"failed to init metrics source: {e}") from e

    try:
        hosts = resolve_category_hosts(config)
    except (OSError, ValueError) as e:
        raise BootstrapError(f"failed to resolve hosts: {e}") from e

    lama_client = lama_client or LamaClient(config)
    session_manager = SessionManager(config, lama_client)
    try:
        session_manager.login()
    except LamaError as e:
        raise BootstrapError(f"failed to login to LAMA API: {e}") from e

    sequence_tracker = SequenceTracker(initial=config.lama_initial_sequence_id)
    publisher = Publisher(config, lama_client, session_manager, sequence_tracker)
    collector = MetricsCollector(
        metrics_source,
        hosts=hosts,
        queries={category: config.category_queries(category) for category in MetricCategory},
    )

    shutdown_event = threading.Event()
    schedulers = [
        SyncScheduler(
            category=category,
            collector=collector,
            publisher=publisher,
            retry_policy=RetryPolicy(config.max_retries, config.retry_interval, wait=shutdown_event.wait),
            interval=config.sync_interval,
            shutdown_event=shutdown_event,
        )
        for category in MetricCategory
    ]
    orchestrator = SyncOrchestrator(schedulers, shutdown_event)
    health_metrics = HealthMetricsService(config.app_version, session_manager, sequence_tracker, orchestrator)

    logger.info("LAMA agent services initialised", hosts={c.value: h for c, h in hosts.items()})
    return AgentServices(
        metrics_source=metrics_source,
        lama_client=lama_client,
        session_manager=session_manager,
        sequence_tracker=sequence_tracker,
        orchestrator=orchestrator,
        health_metrics=health_metrics,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Bootstrap the agent, run the sync workers, and stop them on shutdown."""
    config = load_config()
    configure_logging(config.log_level, json_output=config.log_json)
    logger = get_logger(__name__)
    logger.info("Booting LAMA agent", version=config.app_version)

    services = build_services(config)
    try:
        services.orchestrator.start()
        app.state.health_metrics = services.health_metrics
        logger.info("All services are running.")

        yield

    finally:
        logger.info("Shutting down services...")
        services.orchestrator.stop(timeout=config.shutdown_timeout)
        services.close()
        logger.info("All services stopped successfully.")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="LAMA Agent",
        description="Relays operational health metrics to the exchange LAMA API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(health_router)
    app.include_router(metrics_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    config = load_config()
    uvicorn.run(app, host=config.server_host, port=config.server_port)
