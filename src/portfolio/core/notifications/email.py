"""Email client using Resend API."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass

import resend

from src.portfolio.core.config import get_settings
from src.portfolio.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

# Shared email styles
_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_HEADING_STYLE = "color: #2563eb; margin-bottom: 24px;"
_MUTED_STYLE = "color: #666; font-size: 14px;"


@dataclass(frozen=True)
class EmailMessage:
    """A rendered notification: subject plus text and HTML bodies."""

    subject: str
    text: str
    html: str


def _recipient_for_log(to: str) -> str:
    """Mask the address unless user emails may be logged."""
    if get_settings().log_user_emails:
        return to
    _, _, domain = to.partition("@")
    return f"***@{domain}" if domain else "***"


def send_email(to: str, subject: str, text_body: str, html_body: str) -> bool:
    """Send one email through Resend.

    Args:
        to: Recipient email address
        subject: Subject line
        text_body: Plain-text body
        html_body: HTML body

    Returns:
        True if email was sent (or logged in dev mode), False on error.
        Never raises.
    """
    settings = get_settings()

    if not settings.resend_api_key:
        # Dev mode: log email instead of sending
        logger.warning(
            "RESEND_API_KEY not set - email not sent",
            to=_recipient_for_log(to),
            subject=subject,
        )
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": subject,
                "text": text_body,
                "html": html_body,
            }
        )

    try:
        # Use thread pool with timeout to prevent hanging on slow API responses
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Email sent", to=_recipient_for_log(to), subject=subject)
        return True
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out",
            to=_recipient_for_log(to),
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Failed to send email", to=_recipient_for_log(to), error=str(e))
        return False


def build_project_approved_email(project_name: str) -> EmailMessage:
    """Render the notification sent to a creator when a project is approved."""
    safe_name = html.escape(project_name)
    return EmailMessage(
        subject=f"Project Approved: {project_name}",
        text=f'Your project "{project_name}" has been approved by a Team Leader.',
        html=_wrap_html(
            "Project approved",
            f'<p>Your project "<strong>{safe_name}</strong>" has been approved '
            "by a Team Leader.</p>"
            "<p>It is now visible in the public portfolio.</p>",
        ),
    )


def build_project_rejected_email(project_name: str, reason: str | None = None) -> EmailMessage:
    """Render the rejection notification. The reason is appended verbatim when given."""
    safe_name = html.escape(project_name)
    text = f'Your project "{project_name}" has been rejected by a Team Leader.'
    body = (
        f'<p>Your project "<strong>{safe_name}</strong>" has been rejected '
        "by a Team Leader.</p>"
    )
    if reason:
        text += f"\nReason: {reason}"
        body += f'<p style="{_MUTED_STYLE}">Reason: {html.escape(reason)}</p>'
    return EmailMessage(
        subject=f"Project Rejected: {project_name}",
        text=text,
        html=_wrap_html("Project rejected", body),
    )


def send_project_approved_email(to: str, project_name: str) -> bool:
    """Notify a creator that their project was approved."""
    message = build_project_approved_email(project_name)
    return send_email(to, message.subject, message.text, message.html)


def send_project_rejected_email(to: str, project_name: str, reason: str | None = None) -> bool:
    """Notify a creator that their project was rejected."""
    message = build_project_rejected_email(project_name, reason)
    return send_email(to, message.subject, message.text, message.html)


def _wrap_html(title: str, body: str) -> str:
    """Generate the HTML document around a notification body."""
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="{_HEADING_STYLE}">{html.escape(title)}</h1>
    {body}
</body>
</html>"""
