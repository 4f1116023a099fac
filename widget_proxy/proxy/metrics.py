"""Metrics collection for the proxy request pipeline."""

from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class ProxyMetrics:
    """Metrics for handled proxy requests.

    Singleton class that tracks responses by status code, rejected
    requests by error category and requests by mode.
    """

    responses_total: dict[int, int] = field(default_factory=dict)
    errors_total: dict[str, int] = field(default_factory=dict)
    probe_requests_total: int = 0
    page_requests_total: int = 0
    pages_rewritten_total: int = 0

    _instance: ClassVar["ProxyMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "ProxyMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_request(self, probe: bool) -> None:
        """Record an admitted request by mode."""
        if probe:
            self.probe_requests_total += 1
        else:
            self.page_requests_total += 1

    def record_response(self, status_code: int) -> None:
        """Record the status of a response sent to a caller."""
        self.responses_total[status_code] = self.responses_total.get(status_code, 0) + 1

    def record_error(self, category: str) -> None:
        """Record an error response by category."""
        self.errors_total[category] = self.errors_total.get(category, 0) + 1

    def record_rewrite(self) -> None:
        """Record that an HTML page was rewritten."""
        self.pages_rewritten_total += 1

    def to_dict(self) -> dict[str, int | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "responses_total": dict(self.responses_total),
            "errors_total": dict(self.errors_total),
            "probe_requests_total": self.probe_requests_total,
            "page_requests_total": self.page_requests_total,
            "pages_rewritten_total": self.pages_rewritten_total,
        }
