"""Root test fixtures shared across all test types.

Environment defaults must be in place before any app import, because
settings are cached and `src.portfolio.main` builds the app at import time.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os
import tempfile

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-portfolio-api-0123456789")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="portfolio-media-"))
os.environ.pop("RESEND_API_KEY", None)

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import Iterator

import pytest

from src.portfolio.core.config import get_settings
from src.portfolio.core.logging import clear_request_context
from src.portfolio.core.storage import get_media_storage
from tests.helpers import EmailOutbox

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()
get_media_storage.cache_clear()


@pytest.fixture
def outbox(monkeypatch: pytest.MonkeyPatch) -> EmailOutbox:
    """Patch the project notification senders with an in-memory outbox."""
    box = EmailOutbox()
    monkeypatch.setattr(
        "src.portfolio.services.project_service.send_project_approved_email", box.approved
    )
    monkeypatch.setattr(
        "src.portfolio.services.project_service.send_project_rejected_email", box.rejected
    )
    return box


@pytest.fixture(autouse=True)
def _clean_log_context() -> Iterator[None]:
    clear_request_context()
    yield
    clear_request_context()

