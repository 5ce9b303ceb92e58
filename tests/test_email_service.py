"""
Tests for outgoing email (mock mode and SMTP delivery).
"""
import smtplib
from unittest.mock import MagicMock

import pytest

import menuboard.config as config_mod
import menuboard.email_service as email_service


@pytest.fixture
def smtp_configured(monkeypatch):
    monkeypatch.setattr(config_mod, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(config_mod, "SMTP_USERNAME", "mailer")
    monkeypatch.setattr(config_mod, "SMTP_PASSWORD", "secret")
    monkeypatch.setattr(config_mod, "SMTP_FROM_EMAIL", "no-reply@example.com")


def test_mock_mode_when_unconfigured(monkeypatch):
    monkeypatch.setattr(config_mod, "SMTP_HOST", "")
    result = email_service.send_password_reset_email("pepe@example.com", "Pepe", "https://a.example.com/r?token=x")
    assert result["status"] == "sent"
    assert result["mock"] is True


def test_sends_through_smtp(smtp_configured, monkeypatch):
    server = MagicMock()
    smtp_cls = MagicMock()
    smtp_cls.return_value.__enter__.return_value = server
    monkeypatch.setattr(email_service.smtplib, "SMTP", smtp_cls)

    result = email_service.send_welcome_email("pepe@example.com", "Pepe", "don-pepe")

    assert result == {
        "status": "sent",
        "to_email": "pepe@example.com",
        "subject": "Welcome to Menuboard",
        "mock": False,
    }
    smtp_cls.assert_called_once_with("smtp.example.com", config_mod.SMTP_PORT)
    server.login.assert_called_once_with("mailer", "secret")
    server.sendmail.assert_called_once()


def test_smtp_failure_is_reported(smtp_configured, monkeypatch):
    smtp_cls = MagicMock(side_effect=smtplib.SMTPConnectError(421, "busy"))
    monkeypatch.setattr(email_service.smtplib, "SMTP", smtp_cls)

    result = email_service.send_password_reset_email("pepe@example.com", None, None)
    assert result["status"] == "error"
