import os
from pathlib import Path

import pytest

# the seed installer reads settings; keep bcrypt cheap in tests
os.environ.setdefault("SCHOLAR_PORTAL_SETTINGS", str(Path(__file__).parent / "settings_test.yaml"))

from core.db import get_engine, init_db  # noqa: E402
from sqlalchemy import text as sa_text  # noqa: E402


@pytest.fixture()
def engine():
    eng = get_engine("sqlite://")
    init_db(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def bare_engine():
    """In-memory database without any tables."""
    eng = get_engine("sqlite://")
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture()
def scholar_id(engine):
    """application_no -> scholar_applications.id"""
    def _lookup(application_no):
        with engine.begin() as conn:
            return conn.execute(
                sa_text("SELECT id FROM scholar_applications WHERE application_no=:n"), {"n": application_no}
            ).scalar()
    return _lookup
