"""Metrics collection for the page fetch layer."""

from dataclasses import dataclass, field
from typing import ClassVar

from widget_proxy.fetch.models import FetchFailureKind


@dataclass
class FetchMetrics:
    """Metrics for outbound fetches.

    Singleton class that tracks upstream status codes, failures by kind,
    bytes received and time spent fetching.
    """

    upstream_status_total: dict[int, int] = field(default_factory=dict)
    failures_total: dict[str, int] = field(default_factory=dict)
    probes_total: int = 0
    fetches_total: int = 0
    bytes_total: int = 0
    duration_ms_total: float = 0.0

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_attempt(self, probe: bool) -> None:
        """Record that a probe or fetch was started."""
        if probe:
            self.probes_total += 1
        else:
            self.fetches_total += 1

    def record_response(self, status_code: int, bytes_received: int) -> None:
        """Record an upstream response.

        Args:
            status_code: Upstream HTTP status code.
            bytes_received: Number of body bytes received.
        """
        self.upstream_status_total[status_code] = (
            self.upstream_status_total.get(status_code, 0) + 1
        )
        self.bytes_total += bytes_received

    def record_failure(self, kind: FetchFailureKind) -> None:
        """Record a fetch failure."""
        key = kind.value
        self.failures_total[key] = self.failures_total.get(key, 0) + 1

    def record_duration(self, duration_ms: float) -> None:
        """Record fetch duration in milliseconds."""
        self.duration_ms_total += duration_ms

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "upstream_status_total": dict(self.upstream_status_total),
            "failures_total": dict(self.failures_total),
            "probes_total": self.probes_total,
            "fetches_total": self.fetches_total,
            "bytes_total": self.bytes_total,
            "duration_ms_total": round(self.duration_ms_total, 2),
        }
