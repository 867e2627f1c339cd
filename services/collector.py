"""Metric collection for one category across its configured hosts."""

from string import Template
from typing import Dict, List

from models import MetricCategory, MetricSample
from utils import create_contextual_logger
from .envelope import known_metric
from .exceptions import MetricsSourceError
from .metrics_source import PrometheusClient


class MetricsCollector:
    """Resolves per-host queries against the metrics source.

    A failed query only drops that metric from the host's sample.
    """

    def __init__(
        self,
        source: PrometheusClient,
        hosts: Dict[MetricCategory, List[str]],
        queries: Dict[MetricCategory, Dict[str, str]],
    ) -> None:
        self.source = source
        self.hosts = {MetricCategory(k): list(v) for k, v in hosts.items()}
        self.queries = {MetricCategory(k): dict(v) for k, v in queries.items()}
        self.logger = create_contextual_logger(__name__, service="collector")

    def hosts_for(self, category: MetricCategory) -> List[str]:
        return list(self.hosts.get(MetricCategory(category), []))

    def collect(self, category: MetricCategory) -> List[MetricSample]:
        """One sample per configured host, in configuration order."""
        category = MetricCategory(category)
        return [self.collect_host(category, host) for host in self.hosts_for(category)]

    def collect_host(self, category: MetricCategory, host: str) -> MetricSample:
        values: Dict[str, float] = {}
        for metric, query in self.queries.get(category, {}).items():
            if not known_metric(category, metric):
                self.logger.warning(
                    "Unknown metric queried", category=category.value, host=host, metric=metric
                )
                continue
            try:
                values[metric] = self.source.query(Template(query).safe_substitute(host=host))
            except MetricsSourceError as e:
                self.logger.error(
                    "Failed to query Prometheus",
                    category=category.value,
                    host=host,
                    metric=metric,
                    error=str(e),
                )

        sample = MetricSample(category=category, host=host, values=values)
        self.logger.debug("Fetched metrics", category=category.value, host=host, data=values)
        return sample
