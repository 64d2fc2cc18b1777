"""
Harness settings.

Provides a single typed interface for environment-driven settings. Profile
definitions (capabilities plus directives) are loaded separately through
`harness.settings.profiles`.
"""

import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from harness.constants import ACTIVITY_LOG_FILE, PROFILES_FILE
from harness.exceptions import HarnessError


_DEFAULT_SYSTEM_ROOT = Path(tempfile.gettempdir()) / "harness"


class SettingsError(HarnessError):
    """Raised when harness settings or profiles are invalid or unavailable."""


class HarnessSettings(BaseSettings):
    """
    Infrastructure settings loaded from environment variables.

    Attributes:
        system_root: Directory holding the activity log and the profiles file
        profiles_path: Explicit profiles file, overriding the system root copy
        logfire_enabled: Send spans to Logfire when a token is present
        log_console: Mirror Logfire output to the console
    """

    model_config = SettingsConfigDict(env_file=None, extra="ignore", case_sensitive=True)

    system_root: Path = Field(default=_DEFAULT_SYSTEM_ROOT, alias="HARNESS_SYSTEM_ROOT")
    profiles_path: Optional[Path] = Field(default=None, alias="HARNESS_PROFILES_PATH")
    logfire_enabled: bool = Field(default=False, alias="HARNESS_LOGFIRE")
    log_console: bool = Field(default=False, alias="HARNESS_LOG_CONSOLE")

    @field_validator("system_root", mode="before")
    @classmethod
    def _expand_system_root(cls, value):
        """Expand user paths, falling back to the temp directory default."""
        if value in (None, ""):
            return _DEFAULT_SYSTEM_ROOT
        return Path(value).expanduser()

    @field_validator("profiles_path", mode="before")
    @classmethod
    def _expand_profiles_path(cls, value):
        """Expand user paths to absolute Path instances."""
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @property
    def activity_log_path(self) -> Path:
        return self.system_root / ACTIVITY_LOG_FILE

    @property
    def resolved_profiles_path(self) -> Path:
        return self.profiles_path or self.system_root / PROFILES_FILE


@lru_cache(maxsize=1)
def get_harness_settings() -> HarnessSettings:
    """
    Load harness settings from environment variables.
    """
    return HarnessSettings()


def refresh_settings_cache() -> None:
    """Clear cached settings so future calls reload from environment."""
    get_harness_settings.cache_clear()  # type: ignore[attr-defined]


def get_system_root() -> Path:
    """Return the active system root (activity log, profiles)."""
    return get_harness_settings().system_root
