"""
Profile file loader.

A profile names the capabilities of a composition and the directives it runs
with. Profiles live in ``profiles.yaml`` under the system root (or at
``HARNESS_PROFILES_PATH``), seeded from the packaged template on first use.
"""

from __future__ import annotations

import shutil
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from harness.capabilities.bootstrap import get_capability_registry
from harness.capabilities.registry import UnknownCapabilityError
from harness.composition.capability_set import CompositionSet
from harness.constants import OFF, ON
from harness.directives.defaults import create_default_store
from harness.directives.store import DirectiveStore
from harness.logger import UnifiedLogger

from . import SettingsError, get_harness_settings

logger = UnifiedLogger(tag="profile-store")

PROFILES_TEMPLATE = Path(__file__).parent / "profiles.template.yaml"


class ProfileConfig(BaseModel):
    """Configuration for a single profile."""

    description: str | None = None
    capabilities: List[str] = Field(default_factory=list)
    directives: Dict[str, List[str]] = Field(default_factory=dict)
    include_defaults: bool = True

    @field_validator("directives", mode="before")
    @classmethod
    def _coerce_directive_values(cls, value):
        """Accept scalars for single-valued directives."""
        if not isinstance(value, dict):
            return value
        coerced = {}
        for name, values in value.items():
            if values is None:
                values = [""]
            elif not isinstance(values, list):
                values = [values]
            coerced[str(name)] = [_directive_value(item) for item in values]
        return coerced


def _directive_value(item) -> str:
    # YAML reads bare On/Off as booleans
    if isinstance(item, bool):
        return ON if item else OFF
    return str(item)


class ProfilesFile(BaseModel):
    """Root schema for profiles.yaml content."""

    profiles: Dict[str, ProfileConfig] = Field(default_factory=dict)


def _ensure_profiles_file(target_path: Path) -> None:
    """Ensure the profiles file exists, seeding from the template if missing."""
    if target_path.exists():
        return

    if not PROFILES_TEMPLATE.exists():
        raise FileNotFoundError(f"Default profiles template missing: {PROFILES_TEMPLATE}")

    target_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(PROFILES_TEMPLATE, target_path)


def get_active_profiles_path() -> Path:
    """Return the active profiles file path, ensuring it exists."""
    path = get_harness_settings().resolved_profiles_path
    _ensure_profiles_file(path)
    return path


def parse_profiles(raw_text: str) -> ProfilesFile:
    """Validate profiles YAML text.

    Raises:
        SettingsError: If the YAML is malformed or does not match the schema
    """
    try:
        raw_data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid profiles YAML: {exc}") from exc

    if not isinstance(raw_data, dict):
        raise SettingsError("Invalid profiles YAML: expected a mapping at the top level")
    if raw_data.get("profiles") is None:
        raw_data["profiles"] = {}

    try:
        return ProfilesFile.model_validate(raw_data)
    except ValidationError as exc:
        raise SettingsError(f"Invalid profiles configuration: {exc}") from exc


@lru_cache(maxsize=1)
def load_profiles() -> ProfilesFile:
    """Load the complete profiles file with caching."""
    profiles_file = get_active_profiles_path()

    with open(profiles_file, "r", encoding="utf-8") as handle:
        return parse_profiles(handle.read())


def refresh_profiles_cache() -> None:
    """Clear the profiles cache so future calls reload from disk."""
    load_profiles.cache_clear()  # type: ignore[attr-defined]


def get_profile(name: str) -> ProfileConfig:
    profiles = load_profiles().profiles
    if name not in profiles:
        raise SettingsError(f"Unknown profile '{name}'. Available profiles: {sorted(profiles)}")
    return profiles[name]


def build_profile(profile: ProfileConfig) -> Tuple[CompositionSet, DirectiveStore]:
    """Build the completed composition and the directives a profile describes.

    Raises:
        SettingsError: If the profile names an unknown capability
    """
    registry = get_capability_registry()
    composition = CompositionSet()
    for type_name in profile.capabilities:
        try:
            composition.add(registry.create(type_name))
        except UnknownCapabilityError as exc:
            raise SettingsError(str(exc)) from exc
    composition.complete_with_defaults(registry)

    directives = create_default_store() if profile.include_defaults else DirectiveStore()
    overrides = DirectiveStore()
    for directive, values in profile.directives.items():
        for value in values:
            overrides.add(directive, value)
    directives.merge_replace(overrides)

    logger.debug(
        "Built profile",
        capabilities=[capability.name() for capability in composition],
        directive_count=directives.count_directives(),
    )
    return composition, directives


def build_named_profile(name: str) -> Tuple[CompositionSet, DirectiveStore]:
    return build_profile(get_profile(name))
