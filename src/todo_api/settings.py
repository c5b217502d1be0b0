from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - TODO_HOST_ADDRESS: MongoDB address, 'host:port' or a mongodb:// URI. Default 'localhost:27017'
    - TODO_DATABASE_NAME: database holding the todo collection. Default 'demo_todo'
    - TODO_COLLECTION_NAME: collection name. Default 'Todo'
    - TODO_LISTEN_HOST: interface to bind. Default '0.0.0.0'
    - TODO_LISTEN_PORT: port to listen on. Default 9000
    - PERSISTENCE_BACKEND: 'mongo' (default) or 'memory'
    - TODO_SHUTDOWN_GRACE_PERIOD: seconds to wait for in-flight requests on shutdown. Default 5
    - TODO_IDLE_TIMEOUT: seconds an idle keep-alive connection is held open. Default 60
    - LOG_LEVEL: logging level name. Default 'INFO'
    """

    host_address: str = "localhost:27017"
    database_name: str = "demo_todo"
    collection_name: str = "Todo"
    listen_host: str = "0.0.0.0"
    listen_port: int = 9000
    persistence_backend: str = "mongo"
    shutdown_grace_period: int = 5
    idle_timeout: int = 60
    log_level: str = "INFO"

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_BACKENDS = {"mongo", "memory"}


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def normalize_backend(value: str) -> str:
    backend = value.strip().lower()
    # Fallback to mongo if unsupported
    return backend if backend in _BACKENDS else "mongo"


# Level names uvicorn accepts, plus the stdlib aliases for them
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "TRACE"}
_LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


def normalize_log_level(value: str) -> str:
    level = value.strip().upper()
    level = _LOG_LEVEL_ALIASES.get(level, level)
    # Fallback to INFO if unknown
    return level if level in _LOG_LEVELS else "INFO"


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    defaults = Settings()
    return Settings(
        host_address=_get_env("TODO_HOST_ADDRESS", defaults.host_address).strip(),
        database_name=_get_env("TODO_DATABASE_NAME", defaults.database_name).strip(),
        collection_name=_get_env("TODO_COLLECTION_NAME", defaults.collection_name).strip(),
        listen_host=_get_env("TODO_LISTEN_HOST", defaults.listen_host).strip(),
        listen_port=_parse_int(_get_env("TODO_LISTEN_PORT", str(defaults.listen_port)), defaults.listen_port),
        persistence_backend=normalize_backend(_get_env("PERSISTENCE_BACKEND", defaults.persistence_backend)),
        shutdown_grace_period=_parse_int(
            _get_env("TODO_SHUTDOWN_GRACE_PERIOD", str(defaults.shutdown_grace_period)),
            defaults.shutdown_grace_period,
        ),
        idle_timeout=_parse_int(_get_env("TODO_IDLE_TIMEOUT", str(defaults.idle_timeout)), defaults.idle_timeout),
        log_level=normalize_log_level(_get_env("LOG_LEVEL", defaults.log_level)),
    )
