"""
Runtime configuration for queuesim.

Environment Variables:
- QUEUESIM_TESTING_MODE: "fake" simulates batches in memory (default),
  "disabled" hands batch operations to a real backend when one is supplied
- QUEUESIM_DEFAULT_QUEUE: Queue name for workers that do not set one (default: default)
- QUEUESIM_LOG_LEVEL: Level for the queuesim logger (default: WARNING)
- QUEUESIM_STRICT_CALLBACKS: Re-raise the first callback failure after all
  callbacks ran (default: false)

A .env file in the working directory is honoured through python-dotenv;
variables already present in the environment win.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

TESTING_MODE_FAKE = "fake"
TESTING_MODE_DISABLED = "disabled"
VALID_TESTING_MODES = (TESTING_MODE_FAKE, TESTING_MODE_DISABLED)


# =============================================================================
# Environment helpers
# =============================================================================

def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    val = os.getenv(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    elif val in ("false", "0", "no", "off"):
        return False
    return default


def _get_env_str(key: str, default: Optional[str]) -> Optional[str]:
    """Get a non-empty string from environment variable."""
    val = os.getenv(key)
    if val is None or not val.strip():
        return default
    return val.strip()


# =============================================================================
# Settings
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """Resolved queuesim settings."""

    testing_mode: str = TESTING_MODE_FAKE
    default_queue: str = "default"
    log_level: str = "WARNING"
    strict_callbacks: bool = False

    def __post_init__(self):
        if self.testing_mode not in VALID_TESTING_MODES:
            raise ConfigurationError(
                f"Invalid testing mode {self.testing_mode!r}, "
                f"expected one of {', '.join(VALID_TESTING_MODES)}"
            )

    @property
    def is_fake(self) -> bool:
        return self.testing_mode == TESTING_MODE_FAKE

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from the environment.

        Args:
            dotenv: Load a .env file first (existing variables are kept)

        Returns:
            Settings instance
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True), override=False)

        mode = (_get_env_str("QUEUESIM_TESTING_MODE", TESTING_MODE_FAKE) or "").lower()
        return cls(
            testing_mode=mode,
            default_queue=_get_env_str("QUEUESIM_DEFAULT_QUEUE", "default"),
            log_level=_get_env_str("QUEUESIM_LOG_LEVEL", "WARNING").upper(),
            strict_callbacks=_get_env_bool("QUEUESIM_STRICT_CALLBACKS", False),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.debug(f"[Config] Loaded settings: {_settings}")
    return _settings


def configure(settings: Settings) -> Settings:
    """Install explicit settings (mainly for tests)."""
    global _settings
    _settings = settings
    return settings


def reset_settings() -> None:
    """Forget cached settings; the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
