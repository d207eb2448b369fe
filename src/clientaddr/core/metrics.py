"""Prometheus metrics for client-address resolution.

All metrics use the ``clientaddr_`` prefix.
"""

from prometheus_client import Counter

from .models import AddressSource

RESOLUTIONS_TOTAL = Counter(
    "clientaddr_resolutions_total",
    "Total number of client-address resolutions by policy path",
    ["source"],  # see AddressSource
)


def record_resolution(source: AddressSource) -> None:
    RESOLUTIONS_TOTAL.labels(source=source.value).inc()
