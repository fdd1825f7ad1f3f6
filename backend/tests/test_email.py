"""Tests for SMTP delivery and reset link construction."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from autoclinic.core.config import settings
from autoclinic.services import email as email_service
from autoclinic.services.email import EmailDeliveryError, build_reset_links, send_email


@pytest.fixture
def smtp_credentials(monkeypatch):
    monkeypatch.setattr(settings, "SMTP_USERNAME", "shop@example.com")
    monkeypatch.setattr(settings, "SMTP_PASSWORD", "app-password")
    monkeypatch.setattr(settings, "SMTP_PORT", 587)


def test_missing_credentials():
    with pytest.raises(EmailDeliveryError):
        send_email("a@x.com", "Hi", "<p>Hi</p>")


def test_starttls_delivery(smtp_credentials):
    with patch("autoclinic.services.email.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value
        server.__enter__.return_value = server
        send_email("a@x.com", "Hi", "<p>Hi</p>", text="Hi")

    server.starttls.assert_called_once()
    server.login.assert_called_once_with("shop@example.com", "app-password")
    args = server.sendmail.call_args.args
    assert args[1] == ["a@x.com"]
    assert "Subject: Hi" in args[2]


def test_ssl_port(smtp_credentials, monkeypatch):
    monkeypatch.setattr(settings, "SMTP_PORT", 465)
    with patch("autoclinic.services.email.smtplib.SMTP_SSL") as ssl_cls:
        server = ssl_cls.return_value
        server.__enter__.return_value = server
        send_email("a@x.com", "Hi", "<p>Hi</p>")
    server.starttls.assert_not_called()
    server.sendmail.assert_called_once()


def test_attachment_is_included(smtp_credentials):
    with patch("autoclinic.services.email.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value
        server.__enter__.return_value = server
        send_email(
            "a@x.com", "Receipt", "<p>Attached</p>",
            attachments=[{"filename": "receipt.pdf", "content": b"%PDF-1.4", "content_type": "application/pdf"}],
        )
    message = server.sendmail.call_args.args[2]
    assert 'filename="receipt.pdf"' in message


def test_smtp_failure_is_wrapped(smtp_credentials):
    with patch("autoclinic.services.email.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value
        server.__enter__.return_value = server
        server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
        with pytest.raises(EmailDeliveryError):
            send_email("a@x.com", "Hi", "<p>Hi</p>")


def test_connection_failure_is_wrapped(smtp_credentials):
    with patch("autoclinic.services.email.smtplib.SMTP", side_effect=OSError("unreachable")):
        with pytest.raises(EmailDeliveryError):
            send_email("a@x.com", "Hi", "<p>Hi</p>")


def test_reset_links(monkeypatch):
    monkeypatch.setattr(settings, "APP_BASE_URL", "https://shop.example.com/")
    app_link, web_link = build_reset_links("abc123")
    assert app_link == "jwautoclinic246://auth/reset-password?token=abc123"
    assert web_link == "https://shop.example.com/auth/reset-password?token=abc123"


def test_reset_link_override(monkeypatch):
    monkeypatch.setattr(settings, "APP_RESET_LINK_BASE", "exp://127.0.0.1:19000/--/reset")
    app_link, _ = build_reset_links("abc123")
    assert app_link == "exp://127.0.0.1:19000/--/reset?token=abc123"


def test_reset_email_mentions_link_and_expiry():
    send = MagicMock()
    with patch.object(email_service, "send_email", send):
        email_service.send_password_reset_email("a@x.com", "https://shop/auth/reset-password?token=t")
    to, subject, html_body = send.call_args.args
    assert to == "a@x.com"
    assert "token=t" in html_body
    assert "30 minutes" in send.call_args.kwargs["text"]


def test_support_report_escapes_html():
    send = MagicMock()
    with patch.object(email_service, "send_email", send):
        email_service.send_support_report("help@shop.com", "Crash", "<script>x</script>", name="Ann")
    html_body = send.call_args.args[2]
    assert "<script>" not in html_body
    assert "&lt;script&gt;" in html_body
