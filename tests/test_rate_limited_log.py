"""
Tests for rate-limited logging.
"""
from unittest.mock import MagicMock, patch

from cachetools import TTLCache

from tint_sdk import _rate_limited_log
from tint_sdk._rate_limited_log import rate_limited_log, reset_rate_limits


class TestRateLimitedLog:

    def test_repeated_message_suppressed(self):
        mock_logger = MagicMock()

        assert rate_limited_log("Pool query failed", logger_instance=mock_logger) is True
        assert rate_limited_log("Pool query failed", logger_instance=mock_logger) is False

        mock_logger.warning.assert_called_once_with("Pool query failed")

    def test_level_and_message_are_keyed_separately(self):
        mock_logger = MagicMock()

        rate_limited_log("Test message", level="warning", logger_instance=mock_logger)
        rate_limited_log("Test message", level="error", logger_instance=mock_logger)
        rate_limited_log("Different message", level="warning", logger_instance=mock_logger)

        mock_logger.error.assert_called_once_with("Test message")
        assert mock_logger.warning.call_count == 2

    def test_unknown_level_falls_back_to_warning(self):
        mock_logger = MagicMock(spec=["warning"])
        rate_limited_log("odd level", level="loud", logger_instance=mock_logger)
        mock_logger.warning.assert_called_once_with("odd level")

    def test_intervals_use_separate_caches(self):
        mock_logger = MagicMock()

        rate_limited_log("msg", interval=30, logger_instance=mock_logger)
        rate_limited_log("msg", interval=60, logger_instance=mock_logger)

        assert mock_logger.warning.call_count == 2
        assert set(_rate_limited_log._error_log_caches) == {30, 60}
        assert all(isinstance(c, TTLCache) for c in _rate_limited_log._error_log_caches.values())

    def test_expired_entry_logs_again(self):
        mock_logger = MagicMock()
        now = [0]
        cache = TTLCache(maxsize=100, ttl=60, timer=lambda: now[0])

        with patch.dict(_rate_limited_log._error_log_caches, {60: cache}):
            assert rate_limited_log("msg", logger_instance=mock_logger) is True
            now[0] = 30
            assert rate_limited_log("msg", logger_instance=mock_logger) is False
            now[0] = 61
            assert rate_limited_log("msg", logger_instance=mock_logger) is True

        assert mock_logger.warning.call_count == 2

    def test_reset(self):
        mock_logger = MagicMock()
        rate_limited_log("msg", logger_instance=mock_logger)

        reset_rate_limits()

        assert rate_limited_log("msg", logger_instance=mock_logger) is True
        assert mock_logger.warning.call_count == 2

    def test_lock_is_held_while_logging(self):
        mock_lock = MagicMock()
        mock_logger = MagicMock()

        with patch.object(_rate_limited_log, "_error_log_cache_lock", mock_lock):
            rate_limited_log("locked", logger_instance=mock_logger)

        mock_lock.__enter__.assert_called()
        mock_logger.warning.assert_called_once_with("locked")
