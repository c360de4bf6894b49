import pytest
from sqlalchemy import inspect

from core import schema_registry
from core.schema_registry import register, registered_names, run_all


@pytest.fixture()
def registry(monkeypatch):
    monkeypatch.setattr(schema_registry, "_REGISTRY", [])
    return schema_registry


def test_register_forms(registry):
    @register
    def plain(engine):
        pass

    @register("named")
    def other(engine):
        pass

    def third(engine):
        pass
    register("explicit", third)

    assert registered_names() == ["plain", "named", "explicit"]


def test_register_twice_is_a_no_op(registry):
    def installer(engine):
        pass
    register(installer)
    register(installer)
    assert registered_names() == ["installer"]


def test_register_rejects_nonsense(registry):
    with pytest.raises(TypeError):
        register(42)


def test_run_all_skips_failing_installer(registry, caplog):
    calls = []

    @register
    def broken(engine):
        raise RuntimeError("boom")

    @register
    def fine(engine):
        calls.append(engine)

    run_all("engine-sentinel")
    assert calls == ["engine-sentinel"]
    assert "broken" in caplog.text


def test_init_db_creates_every_table(engine):
    tables = set(inspect(engine).get_table_names())
    assert {
        "configs", "users", "roles", "user_roles", "page_access_rules", "portal_users",
        "departments", "scholar_applications", "examination_records", "activity_logs",
    } <= tables


def test_seed_runs_last_and_once(engine):
    from core.db import init_db
    from sqlalchemy import text as sa_text

    assert registered_names()[-1] == "seed_demo_data"
    init_db(engine)
    with engine.begin() as conn:
        assert conn.execute(sa_text("SELECT COUNT(*) FROM portal_users")).scalar() == 5
        assert conn.execute(sa_text("SELECT COUNT(*) FROM scholar_applications")).scalar() == 6
        assert conn.execute(sa_text("SELECT COUNT(*) FROM examination_records")).scalar() == 4
