"""Configuration module for the brewstate environment."""

from __future__ import annotations

import functools
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

_DEF_LOG_DIR = Path.home() / ".brewstate" / "logs"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_BREW_CANDIDATES = (
    Path("/opt/homebrew/bin/brew"),
    Path("/usr/local/bin/brew"),
    Path("/home/linuxbrew/.linuxbrew/bin/brew"),
)


@dataclass(frozen=True)
class Settings:
    """Configuration for the brewstate environment."""
    brew: str
    log_level: str = "INFO"
    log_dir: Path = _DEF_LOG_DIR


def discover_brew() -> str:
    """Locate the brew executable.

    Looks on PATH first, then in the standard Homebrew prefixes. Falls back
    to the bare command name so a missing install surfaces when it is run.
    """
    found = shutil.which("brew")
    if found:
        return found

    for candidate in _BREW_CANDIDATES:
        if candidate.exists():
            return str(candidate)

    return "brew"


def load_settings() -> Settings:
    """Build settings from BREWSTATE_* environment variables.

    An unknown log level falls back to INFO.
    """
    brew = os.environ.get("BREWSTATE_BREW") or discover_brew()
    log_level = os.environ.get("BREWSTATE_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = "INFO"
    log_dir = Path(os.environ.get("BREWSTATE_LOG_DIR") or _DEF_LOG_DIR)

    return Settings(brew=brew, log_level=log_level, log_dir=log_dir)


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    return load_settings()
