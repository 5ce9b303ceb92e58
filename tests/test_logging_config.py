"""
Tests for logging configuration.
"""
import logging

from conftest import TEST_PASSWORD


class TestLoggingConfiguration:
    """Test logging setup and configuration."""

    def test_setup_logging_default_level(self, monkeypatch):
        """Test that setup_logging defaults to INFO level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        from menuboard.logging_config import setup_logging
        setup_logging()

        logger = logging.getLogger("menuboard")
        assert logger.level == logging.INFO

    def test_setup_logging_respects_env_var(self, monkeypatch):
        """Test that LOG_LEVEL env var is respected."""
        monkeypatch.setenv("LOG_LEVEL", "warning")

        from menuboard.logging_config import setup_logging
        setup_logging()

        logger = logging.getLogger("menuboard")
        assert logger.level == logging.WARNING
        setup_logging(level="INFO")

    def test_setup_logging_invalid_level_defaults_to_info(self):
        """Test that invalid level falls back to INFO."""
        from menuboard.logging_config import setup_logging
        setup_logging(level="INVALID_LEVEL")

        assert logging.getLogger("menuboard").level == logging.INFO

    def test_third_party_loggers_quieted(self):
        from menuboard.logging_config import setup_logging
        setup_logging(level="INFO")

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("botocore").level == logging.WARNING


class TestNoSensitiveDataInLogs:
    """Test that credentials are not logged at INFO level or higher."""

    def test_login_does_not_log_password_or_token(self, client, owner, caplog):
        with caplog.at_level(logging.DEBUG, logger="menuboard"):
            resp = client.post(
                "/auth/login",
                json={"email": owner.email, "password": TEST_PASSWORD},
            )
        assert resp.status_code == 200
        token = resp.json()["access_token"]

        for record in caplog.records:
            assert TEST_PASSWORD not in record.getMessage()
            assert token not in record.getMessage()

    def test_debug_logs_not_shown_at_info_level(self, caplog):
        """Test that DEBUG logs don't appear when level is INFO."""
        from menuboard.logging_config import setup_logging
        setup_logging(level="INFO")

        with caplog.at_level(logging.INFO):
            logger = logging.getLogger("menuboard.test")
            logger.debug("This should not appear")
            logger.info("This should appear")

            messages = [r.message for r in caplog.records]
            assert "This should not appear" not in messages
            assert "This should appear" in messages
