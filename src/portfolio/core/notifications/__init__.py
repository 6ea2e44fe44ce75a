"""Notification utilities - email.

Re-exports all notification-related functions for convenience.
"""

from src.portfolio.core.notifications.email import (
    EmailMessage,
    build_project_approved_email,
    build_project_rejected_email,
    send_email,
    send_project_approved_email,
    send_project_rejected_email,
)

__all__ = [
    "EmailMessage",
    "build_project_approved_email",
    "build_project_rejected_email",
    "send_email",
    "send_project_approved_email",
    "send_project_rejected_email",
]
