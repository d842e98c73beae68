import pytest

from src.webhook_dispatcher.retry import RetryManager


class TestShouldRetry:
    """Tests for RetryManager.should_retry()."""

    @pytest.mark.unit
    @pytest.mark.parametrize("status_code", [500, 502, 503, 504])
    def test_should_retry_true_for_5xx(self, retry_manager, status_code):
        assert retry_manager.should_retry(status_code) is True

    @pytest.mark.unit
    def test_should_retry_true_for_none_transport_error(self, retry_manager):
        assert retry_manager.should_retry(None) is True

    @pytest.mark.unit
    @pytest.mark.parametrize("status_code", [200, 201, 204])
    def test_should_retry_false_for_2xx(self, retry_manager, status_code):
        assert retry_manager.should_retry(status_code) is False

    @pytest.mark.unit
    @pytest.mark.parametrize("status_code", [301, 400, 401, 403, 404, 422, 429])
    def test_should_retry_false_for_other_non_2xx(self, retry_manager, status_code):
        assert retry_manager.should_retry(status_code) is False


class TestNextDelay:
    """Tests for RetryManager.next_delay()."""

    @pytest.mark.unit
    def test_default_backoff_is_100ms_doubling(self):
        rm = RetryManager()
        assert rm.next_delay(0) == pytest.approx(0.1)
        assert rm.next_delay(1) == pytest.approx(0.2)
        assert rm.next_delay(2) == pytest.approx(0.4)

    @pytest.mark.unit
    def test_custom_base_delay(self):
        rm = RetryManager(base_delay=1.5)
        assert rm.next_delay(0) == 1.5
        assert rm.next_delay(3) == 12.0

    @pytest.mark.unit
    def test_zero_base_delay_disables_waiting(self, retry_manager):
        assert retry_manager.next_delay(0) == 0
        assert retry_manager.next_delay(5) == 0


class TestHasAttemptsRemaining:
    """Tests for RetryManager.has_attempts_remaining()."""

    @pytest.mark.unit
    def test_two_retries_by_default(self):
        rm = RetryManager()
        assert rm.has_attempts_remaining(0) is True
        assert rm.has_attempts_remaining(1) is True
        assert rm.has_attempts_remaining(2) is False

    @pytest.mark.unit
    def test_custom_max_retries_overrides_default(self):
        rm = RetryManager(max_retries=4)
        assert rm.has_attempts_remaining(3) is True
        assert rm.has_attempts_remaining(4) is False

    @pytest.mark.unit
    def test_max_retries_zero_means_no_retries(self):
        rm = RetryManager(max_retries=0)
        assert rm.has_attempts_remaining(0) is False


class TestDefaults:

    @pytest.mark.unit
    def test_constructor_defaults(self):
        rm = RetryManager()
        assert rm.base_delay == RetryManager.DEFAULT_BASE_DELAY == 0.1
        assert rm.max_retries == RetryManager.DEFAULT_MAX_RETRIES == 2
