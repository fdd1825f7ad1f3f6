"""
Outbound email over SMTP.

``send_email`` is the single delivery primitive; it raises
``EmailDeliveryError`` on any failure so callers decide whether the failure
reaches the client. The helpers below only build message bodies.
"""

import html as html_lib
import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import quote

from autoclinic.core.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


def send_email(
    to: str,
    subject: str,
    html: str,
    text: str | None = None,
    attachments: list[dict] | None = None,
) -> None:
    """
    Send a message through the configured SMTP server.

    ``attachments`` entries are dicts with ``filename``, ``content`` (bytes)
    and optional ``content_type``. This is a blocking call.
    """
    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        raise EmailDeliveryError("SMTP_USERNAME/SMTP_PASSWORD not configured")

    sender = settings.SMTP_FROM or f"{settings.APP_NAME} <{settings.SMTP_USERNAME}>"

    msg = MIMEMultipart("mixed")
    msg["Subject"] = subject
    msg["From"] = sender
    msg["To"] = to

    body = MIMEMultipart("alternative")
    if text:
        body.attach(MIMEText(text, "plain"))
    body.attach(MIMEText(html, "html"))
    msg.attach(body)

    for item in attachments or []:
        subtype = (item.get("content_type") or "application/octet-stream").split("/", 1)[-1]
        part = MIMEApplication(item["content"], _subtype=subtype)
        part.add_header("Content-Disposition", "attachment", filename=item["filename"])
        msg.attach(part)

    try:
        if settings.SMTP_PORT == 465:
            server = smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT)
        else:
            server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT)
        with server:
            server.ehlo()
            if settings.SMTP_PORT != 465:
                server.starttls()
                server.ehlo()
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.sendmail(settings.SMTP_USERNAME, [to], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email via %s:%s: %s", settings.SMTP_HOST, settings.SMTP_PORT, e)
        raise EmailDeliveryError(f"Email sending failed: {e}") from e

    logger.info("Email sent via %s:%s to %s", settings.SMTP_HOST, settings.SMTP_PORT, to)


def build_reset_links(raw_token: str) -> tuple[str, str]:
    """Return ``(app_link, web_link)`` for a reset secret."""
    token = quote(raw_token, safe="")
    app_base = settings.APP_RESET_LINK_BASE or f"{settings.CLIENT_SCHEME}://auth/reset-password"
    web_base = f"{settings.APP_BASE_URL.rstrip('/')}/auth/reset-password"
    return f"{app_base}?token={token}", f"{web_base}?token={token}"


def send_password_reset_email(to_email: str, web_link: str) -> None:
    subject = "Password Reset"

    html_body = f"""
    <p>Hello,</p>
    <p>You requested a password reset. Click the button below to set a new password:</p>

    <p>
      <a href="{web_link}"
         style="display:inline-block;padding:10px 18px;background:#6a0dad;color:#ffffff;
                text-decoration:none;border-radius:6px;font-weight:bold;">
        Reset Password
      </a>
    </p>

    <p>If the button does not work, copy and paste this link into your browser:</p>
    <p><a href="{web_link}">{web_link}</a></p>

    <p>This link will expire in 30 minutes and can only be used once.</p>
    """

    text_body = f"""
Hello,

You requested a password reset.

Open this link in your browser:
{web_link}

This link will expire in 30 minutes and can only be used once.
    """.strip()

    send_email(to_email, subject, html_body, text=text_body)


def send_temporary_password_email(to_email: str, name: str, temporary_password: str) -> None:
    html_body = f"""
    <p>Hi {html_lib.escape(name or 'there')},</p>
    <p>An administrator reset your password.</p>
    <p>Your temporary password is:</p>
    <p style="font-size:16px;"><b>{html_lib.escape(temporary_password)}</b></p>
    <p>Please log in and change it immediately.</p>
    """
    send_email(to_email, "Your password has been reset", html_body)


def send_support_report(
    to_email: str,
    subject: str,
    message: str,
    name: str = "",
    email: str = "",
    phone: str = "",
) -> None:
    esc = html_lib.escape
    html_body = f"""
    <div style="font-family: Arial, sans-serif">
      <h2>App Support Report</h2>
      <p><strong>Subject:</strong> {esc(subject)}</p>
      <p><strong>Name:</strong> {esc(name or "-")}</p>
      <p><strong>Email:</strong> {esc(email or "-")}</p>
      <p><strong>Phone:</strong> {esc(phone or "-")}</p>
      <hr/>
      <p style="white-space: pre-wrap">{esc(message)}</p>
    </div>
    """
    text_body = f"Name: {name or '-'}\nEmail: {email or '-'}\nPhone: {phone or '-'}\n\n{message}"
    send_email(to_email, f"[{settings.APP_NAME}] {subject}", html_body, text=text_body)
