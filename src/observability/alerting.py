from src.observability.metrics import MetricsCollector


class AlertManager:
    """Fires once per webhook when its delivery failure rate crosses a threshold."""

    def __init__(
        self,
        metrics: MetricsCollector,
        threshold: float = 0.10,
        callback=None,
    ):
        self.metrics = metrics
        self.threshold = threshold
        self.callback = callback
        # keyed by webhook_id, None for the aggregate
        self._fired: set[str | None] = set()
        self._alerts: list[dict] = []

    def check(self, webhook_id: str | None = None) -> dict | None:
        """Check one webhook (or all deliveries when None). Returns alert dict or None."""
        total = self.metrics.total_in_window(webhook_id)
        if total == 0:
            return None

        rate = self.metrics.failure_rate(webhook_id)
        if rate <= self.threshold:
            # Back below threshold, allow the next breach to fire again
            self._fired.discard(webhook_id)
            return None

        if webhook_id in self._fired:
            return None

        failures = self.metrics.failure_count_in_window(webhook_id)
        scope = f"Webhook {webhook_id}" if webhook_id is not None else "Webhook"
        alert = {
            "type": "webhook_failure_rate",
            "webhook_id": webhook_id,
            "failure_rate": rate,
            "threshold": self.threshold,
            "total_deliveries": total,
            "failed_deliveries": failures,
            "message": (
                f"{scope} failure rate {rate:.1%} exceeds "
                f"threshold {self.threshold:.1%} "
                f"({failures}/{total} deliveries failed)"
            ),
        }
        self._fired.add(webhook_id)
        self._alerts.append(alert)

        if self.callback:
            self.callback(alert)

        return alert

    def check_all(self) -> list[dict]:
        """Check every webhook seen by the collector."""
        alerts = []
        for webhook_id in self.metrics.webhook_ids():
            alert = self.check(webhook_id)
            if alert is not None:
                alerts.append(alert)
        return alerts

    def get_alerts(self) -> list[dict]:
        return list(self._alerts)

    def reset(self) -> None:
        self._fired.clear()
        self._alerts.clear()
