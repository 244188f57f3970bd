"""
Process settings, read from the environment once at startup.

`load_settings()` is called by `main.py`; the resulting object lives on
`app.state.settings` and reaches routes through `get_settings`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from fastapi import Request

DEFAULT_JWT_SECRET = "dev-change-this-secret"


def _env_str(env: Mapping[str, str], name: str, default: str = "") -> str:
    return (env.get(name) or "").strip() or default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(env: Mapping[str, str], name: str) -> tuple[str, ...]:
    raw = env.get(name) or ""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    port: int = 8000
    log_level: str = "DEBUG"
    allowed_origins: tuple[str, ...] = ("http://localhost:5173",)

    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "sponsor_connect"
    db_pool_size: int = 10
    db_pool_timeout: float = 10.0
    db_command_timeout: float = 30.0

    google_client_id: str = ""
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    session_ttl_seconds: int = 3600
    admin_emails: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env

    environment = _env_str(env, "APP_ENV", "development").lower()
    default_level = "INFO" if environment == "production" else "DEBUG"
    jwt_secret = _env_str(env, "JWT_SECRET", DEFAULT_JWT_SECRET)
    if environment == "production" and jwt_secret == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET must be set in production.")

    return Settings(
        environment=environment,
        port=_env_int(env, "PORT", 8000),
        log_level=_env_str(env, "LOG_LEVEL", default_level).upper(),
        allowed_origins=_env_list(env, "ALLOWED_ORIGIN") or ("http://localhost:5173",),
        database_url=_env_str(env, "DATABASE_URL"),
        db_host=_env_str(env, "DB_HOST", "localhost"),
        db_port=_env_int(env, "DB_PORT", 5432),
        db_user=_env_str(env, "DB_USER", "postgres"),
        db_password=env.get("DB_PASSWORD") or "",
        db_name=_env_str(env, "DB_NAME", "sponsor_connect"),
        db_pool_size=max(1, _env_int(env, "DB_POOL_SIZE", 10)),
        db_pool_timeout=_env_float(env, "DB_POOL_TIMEOUT", 10.0),
        db_command_timeout=_env_float(env, "DB_COMMAND_TIMEOUT", 30.0),
        google_client_id=_env_str(env, "GOOGLE_CLIENT_ID"),
        jwt_secret=jwt_secret,
        jwt_algorithm=_env_str(env, "JWT_ALG", "HS256"),
        session_ttl_seconds=_env_int(env, "SESSION_TTL_SECONDS", 3600),
        admin_emails=frozenset(_env_list(env, "ADMIN_EMAILS")),
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
