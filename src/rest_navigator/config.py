from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from rest_navigator.core.logging import apply_log_level, parse_level
from rest_navigator.endpoints.entry import EntryEndpoint

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class NavigatorConfig:
    base_url: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL


def load_env_config(*, use_dotenv: bool = True) -> NavigatorConfig:
    """Load API root, timeout and log level from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    base_url = os.getenv("REST_NAVIGATOR_BASE_URL", "").strip()
    raw_timeout = os.getenv("REST_NAVIGATOR_TIMEOUT_SECONDS", "").strip()
    log_level = os.getenv("REST_NAVIGATOR_LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL

    try:
        timeout_seconds = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise ValueError(
            f"REST_NAVIGATOR_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}."
        ) from exc

    try:
        parse_level(log_level)
    except ValueError as exc:
        raise ValueError(f"REST_NAVIGATOR_LOG_LEVEL: {exc}") from exc

    return NavigatorConfig(
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        log_level=log_level.upper(),
    )


def create_entry_from_env(*, use_dotenv: bool = True, **kwargs) -> EntryEndpoint:
    """
    Create an EntryEndpoint for REST_NAVIGATOR_BASE_URL.
    REST_NAVIGATOR_LOG_LEVEL is applied to the package loggers; handlers are
    left to the application (see `setup_logging`).
    """
    cfg = load_env_config(use_dotenv=use_dotenv)
    if not cfg.base_url:
        raise ValueError("Missing REST_NAVIGATOR_BASE_URL in environment.")
    apply_log_level(cfg.log_level)
    kwargs.setdefault("timeout_seconds", cfg.timeout_seconds)
    return EntryEndpoint(cfg.base_url, **kwargs)


__all__ = ["NavigatorConfig", "load_env_config", "create_entry_from_env"]
