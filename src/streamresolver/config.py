"""
Runtime settings, read from the environment (and a .env file if present).
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .targets import Target

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


@dataclass
class Settings:
    timeout: int = 10
    proxy_url: Optional[str] = None
    http_proxy: Optional[str] = None
    target: Target = Target.NATIVE
    consistent_ip: bool = True
    skip_validation_ids: frozenset[str] = field(default_factory=frozenset)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[dict] = None) -> "Settings":
        if env is None:
            load_dotenv()
            env = os.environ
        settings = cls()
        raw = env.get("STREAMRESOLVER_TIMEOUT")
        if raw:
            settings.timeout = _int("STREAMRESOLVER_TIMEOUT", raw)
        settings.proxy_url = env.get("STREAMRESOLVER_PROXY_URL") or None
        settings.http_proxy = env.get("STREAMRESOLVER_HTTP_PROXY") or None
        raw = env.get("STREAMRESOLVER_TARGET")
        if raw:
            try:
                settings.target = Target(raw.strip().lower())
            except ValueError:
                raise ConfigError(f"Unknown target {raw!r}") from None
        raw = env.get("STREAMRESOLVER_CONSISTENT_IP")
        if raw:
            settings.consistent_ip = _bool("STREAMRESOLVER_CONSISTENT_IP", raw)
        raw = env.get("STREAMRESOLVER_SKIP_VALIDATION")
        if raw:
            settings.skip_validation_ids = frozenset(
                part.strip() for part in raw.split(",") if part.strip()
            )
        raw = env.get("STREAMRESOLVER_LOG_LEVEL")
        if raw:
            level = raw.strip().upper()
            if not isinstance(logging.getLevelName(level), int):
                raise ConfigError(f"Unknown log level {raw!r}")
            settings.log_level = level
        return settings


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
