from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    app_name: str
    environment: str
    cors_allow_origins: list[str]
    database_url: str
    seed_sample_employees: bool
    ws_send_timeout_seconds: float
    log_level: str


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    load_dotenv()

    cors = os.getenv("CORS_ALLOW_ORIGINS")
    cors_allow_origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    if cors:
        try:
            cors_allow_origins = list(json.loads(cors))
        except ValueError:
            cors_allow_origins = [x.strip() for x in cors.split(",") if x.strip()]

    return Settings(
        app_name=os.getenv("APP_NAME", "Check-in Tracker API"),
        environment=os.getenv("ENVIRONMENT", "dev"),
        cors_allow_origins=cors_allow_origins,
        database_url=os.getenv("DATABASE_URL", "sqlite+pysqlite:///./attendance.db"),
        seed_sample_employees=_env_flag("SEED_SAMPLE_EMPLOYEES", "1"),
        ws_send_timeout_seconds=float(os.getenv("WS_SEND_TIMEOUT_SECONDS", "5")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


settings = load_settings()
