import pytest
from pydantic import ValidationError

from core.settings import DEFAULT_SETTINGS_PATH, load_settings


def test_default_file_loads(monkeypatch):
    monkeypatch.delenv("SCHOLAR_PORTAL_SETTINGS", raising=False)
    monkeypatch.delenv("SCHOLAR_PORTAL_DB_URL", raising=False)
    settings = load_settings()
    assert DEFAULT_SETTINGS_PATH.exists()
    assert settings.app.name == "Scholarship Admin Portal"
    assert settings.db.url.startswith("sqlite:///")
    assert settings.portal.default_theme == "default"


def test_env_path_and_db_override(tmp_path, monkeypatch):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(
        "app:\n  name: Staging Portal\n  environment: staging\n"
        "db:\n  url: sqlite:///staging.db\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SCHOLAR_PORTAL_SETTINGS", str(cfg))
    monkeypatch.setenv("SCHOLAR_PORTAL_DB_URL", "sqlite://")
    settings = load_settings()
    assert settings.app.name == "Staging Portal"
    assert settings.app.log_level == "INFO"
    assert settings.db.url == "sqlite://"
    # sections left out fall back to defaults
    assert settings.auth.bcrypt_rounds == 12
    assert settings.portal.page_size == 50


def test_missing_db_url_is_rejected(tmp_path, monkeypatch):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("app:\n  name: Broken\ndb: {}\n", encoding="utf-8")
    monkeypatch.delenv("SCHOLAR_PORTAL_DB_URL", raising=False)
    with pytest.raises(ValidationError):
        load_settings(cfg)
