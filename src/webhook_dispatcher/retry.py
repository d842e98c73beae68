class RetryManager:
    """Manages retry decisions and exponential backoff for webhook delivery."""

    DEFAULT_BASE_DELAY = 0.1  # seconds; 100ms, 200ms, 400ms, ...
    DEFAULT_MAX_RETRIES = 2

    def __init__(self, base_delay: float | None = None, max_retries: int | None = None):
        self.base_delay = base_delay if base_delay is not None else self.DEFAULT_BASE_DELAY
        self.max_retries = max_retries if max_retries is not None else self.DEFAULT_MAX_RETRIES

    def should_retry(self, status_code: int | None) -> bool:
        """Determine if a delivery should be retried based on status code.

        Returns True for:
        - None (transport error / timeout / unreadable response)
        - 5xx server errors
        Returns False for everything else (2xx success, 3xx, 4xx).
        """
        if status_code is None:
            return True
        return status_code >= 500

    def next_delay(self, attempt: int) -> float:
        """Get the delay in seconds before retrying after `attempt` (0-indexed)."""
        return self.base_delay * (2 ** attempt)

    def has_attempts_remaining(self, attempt: int) -> bool:
        """Check if more retry attempts are allowed."""
        return attempt < self.max_retries
