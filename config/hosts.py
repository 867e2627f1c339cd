"""Host resolution for metric categories.

Hosts come from the per-category settings. When a category has none and a
Prometheus configuration file is configured, the scrape targets of the
configured job are used instead.
"""

from typing import Dict, List

import yaml

from models.enums import MetricCategory
from .config import ApplicationConfig


def load_scrape_targets(path: str, job_name: str) -> List[str]:
    """Return the static targets of `job_name` from a Prometheus config file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    targets: List[str] = []
    for scrape_config in data.get("scrape_configs") or []:
        if scrape_config.get("job_name") != job_name:
            continue
        for static_config in scrape_config.get("static_configs") or []:
            targets.extend(static_config.get("targets") or [])
    return targets


def resolve_category_hosts(config: ApplicationConfig) -> Dict[MetricCategory, List[str]]:
    """Resolve the host list of every category.

    Raises:
        ValueError: if a category ends up without any host.
    """
    default_hosts: List[str] = []
    if config.prometheus_config_path:
        default_hosts = load_scrape_targets(
            config.prometheus_config_path, config.prometheus_scrape_job
        )

    resolved: Dict[MetricCategory, List[str]] = {}
    for category in MetricCategory:
        hosts = config.category_hosts(category) or list(default_hosts)
        if not hosts:
            raise ValueError(f"no hosts found in the config for category '{category.value}'")
        resolved[category] = hosts
    return resolved
