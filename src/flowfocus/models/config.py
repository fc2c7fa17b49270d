"""
FlowFocus Configuration Models

This module contains Pydantic models for FlowFocus configuration management,
including API settings, storage location and study preferences.
"""

from pathlib import Path
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
from platformdirs import user_config_dir, user_data_dir
from .settings import DefaultSettings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class FlowFocusConfig(BaseModel):
    """
    Main configuration model for FlowFocus.

    Contains all user preferences and settings for the FlowFocus application.
    """

    # OpenAI Configuration
    openai_key_path: Optional[Path] = Field(
        default=None,
        description="Path to file containing OpenAI API key"
    )
    default_model: str = Field(
        default=DefaultSettings.DEFAULT_MODEL,
        description="Default OpenAI model for study material generation"
    )

    # Storage
    data_dir: Path = Field(description="Directory holding the collection files")
    debounce_seconds: float = Field(
        default=DefaultSettings.DEBOUNCE_SECONDS,
        ge=0,
        description="Quiet period before edits are written to disk"
    )

    # Study Preferences
    card_transition_delay: float = Field(default=DefaultSettings.CARD_TRANSITION_DELAY, ge=0)
    default_flashcard_count: int = Field(
        default=DefaultSettings.DEFAULT_FLASHCARD_COUNT,
        ge=DefaultSettings.MIN_FLASHCARD_COUNT,
        le=DefaultSettings.MAX_FLASHCARD_COUNT,
        description="Number of cards generated when none is requested"
    )
    summary_style: Optional[str] = Field(default=None, description="Persona for transcript summaries")

    # Logging
    log_level: LogLevel = Field(default=DefaultSettings.DEFAULT_LOG_LEVEL)

    model_config = ConfigDict(
        validate_assignment=True,
        arbitrary_types_allowed=True
    )

    @field_validator('openai_key_path')
    @classmethod
    def validate_key_path_exists(cls, v: Optional[Path]) -> Optional[Path]:
        """Validate that the key file exists when one is configured."""
        if v is not None and not v.expanduser().exists():
            raise ValueError(f"Path does not exist: {v}")
        return v

    @field_validator('default_model')
    @classmethod
    def validate_model_name(cls, v: str) -> str:
        """Validate that model name is not empty."""
        if not v.strip():
            raise ValueError("Model name cannot be empty")
        return v.strip()


def get_config_dir() -> Path:
    """
    Get the FlowFocus configuration directory following XDG standards.

    Returns:
        Path to the configuration directory
    """
    return Path(user_config_dir("flowfocus", ensure_exists=True))


def get_config_path() -> Path:
    """
    Get the path to the FlowFocus configuration file.

    Returns:
        Path to the configuration file
    """
    return get_config_dir() / DefaultSettings.CONFIG_FILE


def get_default_data_dir() -> Path:
    """
    Get the default data directory following XDG standards.

    Returns:
        Path to the directory holding the collection files
    """
    return Path(user_data_dir("flowfocus", ensure_exists=True))


def create_default_config() -> FlowFocusConfig:
    """
    Create a default configuration with sensible defaults.

    The key file is only referenced when it already exists.

    Returns:
        FlowFocusConfig with default settings
    """
    key_file = get_config_dir() / DefaultSettings.KEY_FILE

    return FlowFocusConfig(
        openai_key_path=key_file if key_file.exists() else None,
        default_model=DefaultSettings.DEFAULT_MODEL,
        data_dir=get_default_data_dir(),
    )
