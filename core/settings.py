from __future__ import annotations
import os
import yaml
from pathlib import Path
from pydantic import BaseModel

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[1] / "config" / "settings.yaml"

class AppConfig(BaseModel):
    name: str
    environment: str = "development"
    log_level: str = "INFO"

class AuthConfig(BaseModel):
    demo_password: str = "Portal@1234"
    bcrypt_rounds: int = 12

class DBConfig(BaseModel):
    url: str

class PortalConfig(BaseModel):
    page_size: int = 50
    default_theme: str = "default"

class Settings(BaseModel):
    app: AppConfig
    auth: AuthConfig
    db: DBConfig
    portal: PortalConfig = PortalConfig()

def load_settings(path: str | Path | None = None) -> Settings:
    path = path or os.getenv("SCHOLAR_PORTAL_SETTINGS") or DEFAULT_SETTINGS_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    db = dict(data.get("db") or {})
    if os.getenv("SCHOLAR_PORTAL_DB_URL"):
        db["url"] = os.environ["SCHOLAR_PORTAL_DB_URL"]
    return Settings(
        app=AppConfig(**data["app"]),
        auth=AuthConfig(**(data.get("auth") or {})),
        db=DBConfig(**db),
        portal=PortalConfig(**(data.get("portal") or {})),
    )
