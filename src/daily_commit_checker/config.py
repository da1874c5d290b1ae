"""Environment-driven settings for the checker, the CLI and the web app."""

import logging
import os
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Mapping

from dotenv import load_dotenv

from .checker import SOURCES, BaseSource, CommitChecker
from .constants import (
    DEFAULT_TIMEZONE,
    DEFAULT_TIMEZONE_NAME,
    GITHUB_API_URL,
    PARTICIPANTS,
    REQUEST_TIMEOUT_SECONDS,
)
from .date_window import parse_utc_offset
from .github_client import GitHubClient

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigError(ValueError):
    """Raised when a setting cannot be understood."""


@dataclass(frozen=True)
class Settings:
    token: str | None = None
    source: str = "calendar"
    timezone_name: str = DEFAULT_TIMEZONE_NAME
    tz: tzinfo = DEFAULT_TIMEZONE
    participants: tuple[str, ...] = field(default=PARTICIPANTS)
    api_url: str = GITHUB_API_URL
    timeout: float = REQUEST_TIMEOUT_SECONDS
    check_on_startup: bool = True
    log_level: str = "INFO"

    def make_source(self) -> BaseSource:
        return SOURCES[self.source]()

    def make_client(self) -> GitHubClient:
        return GitHubClient(self.token, base_url=self.api_url, timeout=self.timeout)

    def make_checker(self) -> CommitChecker:
        return CommitChecker(
            self.participants,
            self.make_source(),
            self.make_client,
            tz=self.tz,
        )


def _env_flag(value: str | None, default: bool) -> bool:
    """Parse truthy feature-toggle values."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_participants(value: str) -> tuple[str, ...]:
    """Split a comma-separated roster, dropping blanks and keeping order."""
    names = [name.strip() for name in value.split(",")]
    return tuple(dict.fromkeys(name for name in names if name))


def load_settings(env: Mapping[str, str] | None = None, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env: Mapping to read instead of ``os.environ``
        use_dotenv: Load a ``.env`` file into ``os.environ`` first

    Raises:
        ConfigError: If a value is present but invalid
    """
    if env is None:
        if use_dotenv:
            load_dotenv()
        env = os.environ

    token = env.get("GH_TOKEN") or env.get("GITHUB_TOKEN") or None
    if token and not token.isascii():
        raise ConfigError("GitHub token contains non-ASCII characters")

    source = env.get("CHECK_SOURCE", "calendar").strip().lower()
    if source not in SOURCES:
        raise ConfigError(
            f"Invalid CHECK_SOURCE {source!r}. Choose from: {', '.join(SOURCES)}"
        )

    timezone_name = env.get("CHECK_TIMEZONE", DEFAULT_TIMEZONE_NAME)
    try:
        tz = parse_utc_offset(timezone_name)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    participants = PARTICIPANTS
    if env.get("PARTICIPANTS"):
        participants = parse_participants(env["PARTICIPANTS"])
        if not participants:
            raise ConfigError("PARTICIPANTS is set but lists no usernames")

    try:
        timeout = float(env.get("GITHUB_TIMEOUT", REQUEST_TIMEOUT_SECONDS))
    except ValueError as e:
        raise ConfigError(f"Invalid GITHUB_TIMEOUT: {env.get('GITHUB_TIMEOUT')!r}") from e
    if timeout <= 0:
        raise ConfigError("GITHUB_TIMEOUT must be positive")

    log_level = env.get("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Invalid LOG_LEVEL: {log_level!r}")

    return Settings(
        token=token,
        source=source,
        timezone_name=timezone_name,
        tz=tz,
        participants=participants,
        api_url=env.get("GITHUB_API_URL", GITHUB_API_URL).rstrip("/"),
        timeout=timeout,
        check_on_startup=_env_flag(env.get("CHECK_ON_STARTUP"), True),
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
