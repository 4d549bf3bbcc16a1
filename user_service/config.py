"""Configuration management for the user service."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .database import resolve_database_path
from .events import DEFAULT_SOCKET_TIMEOUT, DEFAULT_TOPIC


@dataclass(frozen=True)
class Settings:
    """Runtime settings for storage and event publication."""

    database_path: Path
    events_topic: str = DEFAULT_TOPIC
    redis_url: Optional[str] = None
    redis_max_stream_length: int = 10_000
    redis_socket_timeout: float = DEFAULT_SOCKET_TIMEOUT

    @staticmethod
    def from_dict(data: Dict[str, object], base_path: Path | None = None) -> "Settings":
        """Create :class:`Settings` from raw dictionary data."""
        raw_db_path = data.get("database_path")
        if raw_db_path:
            expanded = Path(str(raw_db_path)).expanduser()
            if not expanded.is_absolute() and base_path is not None:
                expanded = base_path / expanded
            database_path = expanded.resolve(strict=False)
        else:
            database_path = resolve_database_path(None)

        events = data.get("events") or {}
        if not isinstance(events, dict):
            raise ValueError("The 'events' configuration section must be a mapping")

        topic = str(events.get("topic", DEFAULT_TOPIC)).strip()
        if not topic:
            raise ValueError("Event topic must not be empty")

        raw_redis_url = events.get("redis_url")
        redis_url = str(raw_redis_url).strip() if raw_redis_url else ""
        max_len = int(events.get("max_stream_length", 10_000))
        if max_len <= 0:
            raise ValueError("events.max_stream_length must be positive")

        socket_timeout = float(events.get("socket_timeout", DEFAULT_SOCKET_TIMEOUT))
        if socket_timeout <= 0:
            raise ValueError("events.socket_timeout must be positive")

        return Settings(
            database_path=database_path,
            events_topic=topic,
            redis_url=redis_url or None,
            redis_max_stream_length=max_len,
            redis_socket_timeout=socket_timeout,
        )


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "user-service.yaml").resolve(strict=False)
    return candidate


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from an optional YAML file, then apply environment overrides."""
    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env.get("USER_SERVICE_CONFIG"))

    raw: Dict[str, object] = {}
    if path.is_file():
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        raw = loaded

    settings = Settings.from_dict(raw, base_path=path.parent)

    db_override = env.get("USER_SERVICE_DB_PATH")
    topic_override = (env.get("USER_SERVICE_EVENTS_TOPIC") or "").strip()
    redis_override = (env.get("USER_SERVICE_REDIS_URL") or "").strip()

    return replace(
        settings,
        database_path=resolve_database_path(db_override) if db_override else settings.database_path,
        events_topic=topic_override or settings.events_topic,
        redis_url=redis_override or settings.redis_url,
    )


__all__ = ["Settings", "load_settings", "resolve_config_path"]
