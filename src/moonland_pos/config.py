from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

T = TypeVar("T")

ENV_PREFIX = "MOONLAND_"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    """Settings for one store process: where the API lives and how hard to try."""

    env_name: str
    api_base_url: str
    timeout_seconds: float = 10.0
    retries: int = 3
    retry_backoff_seconds: float = 0.3
    max_workers: int = 5
    verify_ssl: bool = True
    data_dir: str | None = None


def _env(key: str) -> str | None:
    value = os.getenv(ENV_PREFIX + key)
    if value is None:
        return None
    return value.strip() or None


def _setting(key: str, default: T, parse: Callable[[str], T], accept: Callable[[T], bool], rule: str) -> T:
    raw = _env(key)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{key} must be {rule}, got {raw!r}") from exc
    if not accept(value):
        raise ConfigError(f"{ENV_PREFIX}{key} must be {rule}, got {raw!r}")
    return value


def _flag(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(raw)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build a ClientConfig from MOONLAND_* variables, after loading ``env_file``.

    The API base URL may be given per environment (``MOONLAND_API_BASE_URL_STAGING``)
    and falls back to the plain ``MOONLAND_API_BASE_URL``.
    """
    load_dotenv(env_file)

    env_name = _env("ENV") or "dev"
    base_url = _env(f"API_BASE_URL_{env_name.upper()}") or _env("API_BASE_URL")
    if not base_url:
        raise ConfigError(f"{ENV_PREFIX}API_BASE_URL is required")

    return ClientConfig(
        env_name=env_name,
        api_base_url=base_url.rstrip("/"),
        timeout_seconds=_setting("TIMEOUT_SECONDS", 10.0, float, lambda v: v > 0, "a number > 0"),
        retries=_setting("RETRIES", 3, int, lambda v: v >= 0, "an integer >= 0"),
        retry_backoff_seconds=_setting("RETRY_BACKOFF_SECONDS", 0.3, float, lambda v: v >= 0, "a number >= 0"),
        max_workers=_setting("MAX_WORKERS", 5, int, lambda v: v >= 1, "an integer >= 1"),
        verify_ssl=_setting("VERIFY_SSL", True, _flag, lambda v: True, "a boolean"),
        data_dir=_env("DATA_DIR"),
    )
