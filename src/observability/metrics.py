import threading
import time
from collections import defaultdict

from src.models.delivery import DeliveryRecord


class MetricsCollector:
    """Collects webhook delivery outcomes in a rolling window, overall and per webhook."""

    def __init__(self, window_seconds: float = 300):
        self._window_seconds = window_seconds
        # webhook_id -> timestamps
        self._successes: dict[str, list[float]] = defaultdict(list)
        self._failures: dict[str, list[float]] = defaultdict(list)
        self._lock = threading.Lock()

    def record(self, delivery: DeliveryRecord) -> None:
        if delivery.success:
            self.record_success(delivery.webhook_id)
        else:
            self.record_failure(delivery.webhook_id)

    def record_success(self, webhook_id: str = "") -> None:
        with self._lock:
            self._successes[webhook_id].append(time.monotonic())

    def record_failure(self, webhook_id: str = "") -> None:
        with self._lock:
            self._failures[webhook_id].append(time.monotonic())

    def _count(self, data: dict[str, list[float]], webhook_id: str | None, now: float) -> int:
        cutoff = now - self._window_seconds
        if webhook_id is not None:
            series = {webhook_id: data.get(webhook_id, [])}
        else:
            series = data
        return sum(1 for stamps in series.values() for t in stamps if t >= cutoff)

    def _prune(self, now: float) -> None:
        cutoff = now - self._window_seconds
        for data in (self._successes, self._failures):
            for key in list(data):
                data[key] = [t for t in data[key] if t >= cutoff]
                if not data[key]:
                    del data[key]

    def failure_rate(self, webhook_id: str | None = None) -> float:
        """Failure rate in the current rolling window (0.0 to 1.0)."""
        with self._lock:
            now = time.monotonic()
            self._prune(now)
            failures = self._count(self._failures, webhook_id, now)
            total = failures + self._count(self._successes, webhook_id, now)
            if total == 0:
                return 0.0
            return failures / total

    def total_in_window(self, webhook_id: str | None = None) -> int:
        with self._lock:
            now = time.monotonic()
            return (
                self._count(self._successes, webhook_id, now)
                + self._count(self._failures, webhook_id, now)
            )

    def failure_count_in_window(self, webhook_id: str | None = None) -> int:
        with self._lock:
            return self._count(self._failures, webhook_id, time.monotonic())

    def success_count_in_window(self, webhook_id: str | None = None) -> int:
        with self._lock:
            return self._count(self._successes, webhook_id, time.monotonic())

    def webhook_ids(self) -> list[str]:
        with self._lock:
            return sorted(set(self._successes) | set(self._failures))

    def reset(self) -> None:
        with self._lock:
            self._successes.clear()
            self._failures.clear()
