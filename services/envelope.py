"""Envelope construction for LAMA metric pushes.

Each category has a payload convention: scalar categories send the raw
value, aggregate categories send `{min, max, avg, med}` with only `avg`
filled in and rounded to the precision the exchange displays.
"""

import time
from collections import namedtuple
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from models import MetricCategory, MetricData, MetricPayload, MetricSample, MetricsRequest, MetricValue

# aggregate: whether values are sent as MetricValue; keys: config metric name -> wire key
CategoryLayout = namedtuple("CategoryLayout", ["aggregate", "keys"])

CATEGORY_LAYOUTS = {
    MetricCategory.HARDWARE: CategoryLayout(
        aggregate=True,
        keys={"cpu": "cpu", "memory": "memory", "disk": "disk", "uptime": "uptime"},
    ),
    MetricCategory.DATABASE: CategoryLayout(aggregate=False, keys={"status": "status"}),
    MetricCategory.NETWORK: CategoryLayout(aggregate=False, keys={"packet_errors": "packetCount"}),
    MetricCategory.APPLICATION: CategoryLayout(
        aggregate=False,
        keys={"throughput": "throughput", "failure_count": "failureCount"},
    ),
}

# Keys reported without decimals; everything else keeps two.
WHOLE_NUMBER_KEYS = frozenset({"uptime"})


def round_metric(key: str, value: float) -> float:
    """Round half-up on the shortest decimal form of `value`.

    >>> round_metric("uptime", 123456.7)
    123457.0
    >>> round_metric("cpu", 12.345)
    12.35
    """
    exponent = Decimal("1") if key in WHOLE_NUMBER_KEYS else Decimal("0.01")
    return float(Decimal(repr(float(value))).quantize(exponent, rounding=ROUND_HALF_UP))


def new_metric_data(key: str, value: float, simple: bool) -> MetricData:
    if simple:
        return MetricData(key=key, value=float(value))
    return MetricData(key=key, value=MetricValue(min=0, max=0, avg=round_metric(key, value), med=0))


def build_metric_data(sample: MetricSample) -> List[MetricData]:
    """Metric entries of `sample` in the category's key order.

    Metrics missing from the sample are left out.
    """
    layout = CATEGORY_LAYOUTS[MetricCategory(sample.category)]
    return [
        new_metric_data(wire_key, sample.values[name], simple=not layout.aggregate)
        for name, wire_key in layout.keys.items()
        if name in sample.values
    ]


def build_envelope(
    sample: MetricSample,
    member_id: str,
    exchange_id: int,
    sequence_id: int,
    application_id: int = 1,
    timestamp: Optional[int] = None,
) -> MetricsRequest:
    """Build a fresh envelope for one push attempt."""
    return MetricsRequest(
        member_id=member_id,
        exchange_id=exchange_id,
        sequence_id=sequence_id,
        timestamp=int(time.time()) if timestamp is None else timestamp,
        payload=[
            MetricPayload(application_id=application_id, metric_data=build_metric_data(sample)),
        ],
    )


def known_metric(category: MetricCategory, name: str) -> bool:
    return name in CATEGORY_LAYOUTS[MetricCategory(category)].keys
