"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- Shared fixtures for ids and the "now" used across service unit tests

Architecture:
- Unit tests (test/service/**/): every collaborator is an AsyncMock/MagicMock,
  wired into the use case the same way the DI container does it
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are instantiated at import time (src.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    if worker_id == 'master':
        os.environ['POSTGRES_DB'] = 'membership_test_db'
    else:
        os.environ['POSTGRES_DB'] = f'membership_test_db_{worker_id}'

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('SECRET_KEY', 'unit_test_secret_key')
    os.environ.setdefault('FEIDE_CLIENT_ID', 'test-client')
    os.environ.setdefault('FEIDE_CLIENT_SECRET', 'test-secret')
    os.environ.setdefault('REDIRECT_ORIGINS', 'http://localhost:3000')


_early_setup_test_environment()

from datetime import datetime, timedelta, timezone  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
import uuid_utils  # noqa: E402


def new_id() -> UUID:
    return UUID(str(uuid_utils.uuid7()))


@pytest.fixture
def user_id() -> UUID:
    return new_id()


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def tomorrow(now: datetime) -> datetime:
    return now + timedelta(days=1)
