"""Configuration loading for aicache."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from aicache.models import SafetyTier
from aicache.overrides import CONFIG_DIR
from aicache.sizing import expand_path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


class Settings(BaseModel):
    """User-adjustable scan settings."""

    default_safety_tier: SafetyTier = Field(
        SafetyTier.CAUTION,
        description="Tier assigned to directories no signature recognises",
    )
    exclude_patterns: list[str] = Field(
        default_factory=list,
        description="Name patterns to exclude (reserved, not applied by the scanner)",
    )
    max_depth: int = Field(1, ge=1, description="Levels of children expanded under each root")
    show_notifications: bool = Field(True, description="Print summaries after actions")


def default_config_file() -> Path:
    """Location of the settings file."""
    return expand_path(CONFIG_DIR) / CONFIG_FILE_NAME


def load_settings(file: Optional[Path] = None) -> Settings:
    """
    Load settings from disk.

    Missing, unreadable or invalid files fall back to defaults.

    Args:
        file: Settings file (default: ~/.aicache/config.json)

    Returns:
        Settings
    """
    file = file if file is not None else default_config_file()
    if not file.exists():
        return Settings()

    try:
        with open(file) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", file, e)
        return Settings()

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring invalid config %s: %s", file, e)
        return Settings()


def save_settings(settings: Settings, file: Optional[Path] = None) -> bool:
    """Save settings to disk."""
    file = file if file is not None else default_config_file()
    try:
        file.parent.mkdir(parents=True, exist_ok=True)
        with open(file, "w") as f:
            json.dump(settings.model_dump(mode="json"), f, indent=2)
        return True
    except OSError as e:
        logger.warning("Could not save config %s: %s", file, e)
        return False
