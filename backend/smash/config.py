import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from smash.services.group_rules import GROUP_SIZING_STRATEGIES

load_dotenv()

_TRUTHY = ("true", "1", "yes")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./smash.db"
    sql_echo: bool = False
    match_duration_minutes: int = 30
    buffer_minutes: int = 15
    group_sizing: str = "HEURISTIC"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=list)


def load_settings() -> Settings:
    """Resolve settings from the environment (and .env, if present)"""
    group_sizing = os.getenv("SMASH_GROUP_SIZING", "HEURISTIC").strip().upper()
    if group_sizing not in GROUP_SIZING_STRATEGIES:
        raise ValueError(f"SMASH_GROUP_SIZING must be one of {sorted(GROUP_SIZING_STRATEGIES)}, got {group_sizing!r}")

    cors_origins = [
        "http://localhost:8081",
        "http://127.0.0.1:8081",
    ]
    extra = os.getenv("CORS_ORIGINS", "")
    if extra:
        cors_origins.extend(o.strip() for o in extra.split(",") if o.strip())

    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./smash.db"),
        sql_echo=os.getenv("SQL_ECHO", "false").lower() in _TRUTHY,
        match_duration_minutes=_int_env("SMASH_MATCH_DURATION_MINUTES", 30),
        buffer_minutes=_int_env("SMASH_BUFFER_MINUTES", 15),
        group_sizing=group_sizing,
        log_level=os.getenv("SMASH_LOG_LEVEL", "INFO").upper(),
        cors_origins=cors_origins,
    )


settings = load_settings()
