"""
FlowFocus Configuration Manager

This module handles reading, writing, and managing FlowFocus configuration files.
"""

import logging
from pathlib import Path
from typing import Optional
from ruamel.yaml import YAML
from .config import FlowFocusConfig, create_default_config, get_config_path
from .settings import DefaultSettings

# Set up module logger
logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Manages FlowFocus configuration file operations.

    Handles reading, writing, and validating configuration files in YAML format.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else get_config_path()
        self.yaml = YAML()
        self.yaml.preserve_quotes = DefaultSettings.YAML_PRESERVE_QUOTES
        self.yaml.width = DefaultSettings.YAML_LINE_WIDTH

    def load_config(self) -> Optional[FlowFocusConfig]:
        """
        Load configuration from the config file.

        Returns:
            FlowFocusConfig if file exists and is valid, None otherwise
        """
        if not self.config_path.exists():
            return None

        try:
            with open(self.config_path, 'r') as f:
                config_data = self.yaml.load(f)

            if not config_data:
                return None

            config_data = dict(config_data)
            for key in ('openai_key_path', 'data_dir'):
                if config_data.get(key):
                    config_data[key] = Path(config_data[key])

            return FlowFocusConfig(**config_data)

        except Exception as e:
            logger.error(f"Error loading config from {self.config_path}: {e}", exc_info=True)
            return None

    def load_or_default(self) -> FlowFocusConfig:
        """
        Load the configuration, falling back to defaults when there is none.

        Returns:
            Stored or default FlowFocusConfig
        """
        config = self.load_config()
        if config is None:
            logger.info("No usable configuration found, using defaults")
            config = create_default_config()
        return config

    def save_config(self, config: FlowFocusConfig) -> bool:
        """
        Save configuration to the config file.

        Args:
            config: FlowFocusConfig object to save

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

            # Convert Path objects to strings for YAML serialization
            config_dict = config.model_dump()
            config_dict['openai_key_path'] = str(config.openai_key_path) if config.openai_key_path else None
            config_dict['data_dir'] = str(config.data_dir)

            with open(self.config_path, 'w') as f:
                self.yaml.dump(config_dict, f)

            logger.info(f"Configuration saved to: {self.config_path}")
            return True

        except Exception as e:
            logger.error(f"Error saving config to {self.config_path}: {e}", exc_info=True)
            return False

    def config_exists(self) -> bool:
        """
        Check if a configuration file already exists.

        Returns:
            True if config file exists, False otherwise
        """
        return self.config_path.exists()

    def get_config_path_str(self) -> str:
        """
        Get the configuration file path as a string.

        Returns:
            String path to the configuration file
        """
        return str(self.config_path)
