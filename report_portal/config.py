import os
import threading
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def get_project_root() -> Path:
    """Get the project root directory"""
    return Path(__file__).resolve().parent.parent


PROJECT_ROOT = get_project_root()

# Environment variable -> AppConfig field
ENV_OVERRIDES: Dict[str, str] = {
    "ADMIN_USERNAME": "admin_username",
    "ADMIN_PASSWORD": "admin_password_hash",
    "DATABASE_URL": "database_url",
    "HOST": "host",
    "PORT": "port",
    "REPORT_UPLOAD_DIR": "upload_dir",
    "SESSION_TTL_SECONDS": "session_ttl_seconds",
    "SESSION_COOKIE_NAME": "session_cookie_name",
    "COOKIE_SECURE": "cookie_secure",
    "MAX_UPLOAD_MB": "max_upload_mb",
    "LOG_LEVEL": "log_level",
}


def default_database_url() -> str:
    db_dir = PROJECT_ROOT / "db"
    return f"sqlite+aiosqlite:///{db_dir / 'reports.db'}"


class AppConfig(BaseModel):
    admin_username: Optional[str] = Field(None, description="Admin login name")
    admin_password_hash: Optional[str] = Field(
        None, description="bcrypt hash of the admin password"
    )
    database_url: str = Field(
        default_factory=default_database_url,
        description="SQLAlchemy async database URL",
    )
    host: str = Field("0.0.0.0", description="Server host")
    port: int = Field(3000, description="Server port")
    upload_dir: Path = Field(
        default_factory=lambda: PROJECT_ROOT / "public" / "uploads" / "reports",
        description="Directory holding uploaded report files",
    )
    session_ttl_seconds: int = Field(
        86400, gt=0, description="Lifetime of an admin session"
    )
    session_cookie_name: str = Field(
        "report_portal_session", description="Name of the session cookie"
    )
    cookie_secure: bool = Field(
        False, description="Only send the session cookie over HTTPS"
    )
    max_upload_mb: int = Field(20, gt=0, description="Maximum upload size in MB")
    log_level: str = Field("INFO", description="Console log level")

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _env_overrides() -> Dict[str, Any]:
    overrides = {}
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            overrides[field_name] = value
    return overrides


class Config:
    _instance = None
    _lock = threading.Lock()
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        cls = self.__class__
        if not cls._initialized:
            with cls._lock:
                if not cls._initialized:
                    self._config = None
                    self._load_initial_config()
                    cls._initialized = True

    @staticmethod
    def _get_config_path() -> Optional[Path]:
        root = PROJECT_ROOT
        config_path = root / "config" / "config.toml"
        if config_path.exists():
            return config_path
        return None

    def _load_config(self) -> dict:
        config_path = self._get_config_path()
        if config_path is None:
            return {}
        with config_path.open("rb") as f:
            return tomllib.load(f)

    def _load_initial_config(self):
        # .env never overrides variables already set in the process
        load_dotenv(PROJECT_ROOT / ".env", override=False)

        raw_config = self._load_config()
        portal_config = dict(raw_config.get("portal", {}))
        portal_config.update(_env_overrides())
        self._config = AppConfig(**portal_config)

    @property
    def settings(self) -> AppConfig:
        return self._config


config = Config()
