"""
Tests for FlowFocus configuration and the YAML config manager.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from flowfocus.models.config import FlowFocusConfig, create_default_config
from flowfocus.models.config_manager import ConfigManager


class TestFlowFocusConfig:
    """Test cases for configuration validation."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = FlowFocusConfig(data_dir=tmp_path)

        assert config.default_model == "gpt-4o-mini"
        assert config.debounce_seconds == 0.5
        assert config.default_flashcard_count == 10
        assert config.log_level == "WARNING"
        assert config.openai_key_path is None

    def test_missing_key_file_is_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError, match="Path does not exist"):
            FlowFocusConfig(openai_key_path=tmp_path / "nope.txt", data_dir=tmp_path)

    def test_model_name_is_stripped(self, tmp_path: Path) -> None:
        assert FlowFocusConfig(data_dir=tmp_path, default_model="  gpt-4o  ").default_model == "gpt-4o"

        with pytest.raises(ValidationError, match="cannot be empty"):
            FlowFocusConfig(data_dir=tmp_path, default_model="   ")

    @pytest.mark.parametrize("field,value", [
        ("default_flashcard_count", 0),
        ("default_flashcard_count", 51),
        ("debounce_seconds", -1),
        ("log_level", "LOUD"),
    ])
    def test_out_of_range_values(self, tmp_path: Path, field: str, value) -> None:
        with pytest.raises(ValidationError):
            FlowFocusConfig(data_dir=tmp_path, **{field: value})

    def test_assignment_is_validated(self, config: FlowFocusConfig) -> None:
        with pytest.raises(ValidationError):
            config.default_flashcard_count = 100

    def test_default_config_skips_missing_key_file(self, tmp_path: Path) -> None:
        """The default config only points at a key file that exists."""
        with patch("flowfocus.models.config.get_config_dir", return_value=tmp_path), \
                patch("flowfocus.models.config.get_default_data_dir", return_value=tmp_path / "data"):
            without_key = create_default_config()
            (tmp_path / "openai_key.txt").write_text("sk-test")
            with_key = create_default_config()

        assert without_key.openai_key_path is None
        assert with_key.openai_key_path == tmp_path / "openai_key.txt"
        assert with_key.data_dir == tmp_path / "data"


class TestConfigManager:
    """Test cases for reading and writing the YAML file."""

    def test_save_then_load(self, config: FlowFocusConfig, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path / "conf" / "config.yaml")
        config.summary_style = "Academic"

        assert manager.save_config(config) is True
        loaded = manager.load_config()

        assert loaded == config
        assert isinstance(loaded.data_dir, Path)

    def test_saved_file_is_plain_yaml(self, config: FlowFocusConfig, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path / "config.yaml")
        manager.save_config(config)

        text = (tmp_path / "config.yaml").read_text()

        assert f"data_dir: {config.data_dir}" in text
        assert "default_model: gpt-4o-mini" in text

    def test_missing_file(self, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path / "config.yaml")

        assert manager.config_exists() is False
        assert manager.load_config() is None

    def test_invalid_file_loads_as_none(self, tmp_path: Path) -> None:
        """A file that fails validation is reported and ignored."""
        path = tmp_path / "config.yaml"
        path.write_text(f"data_dir: {tmp_path}\ndefault_flashcard_count: 500\n")

        assert ConfigManager(path).load_config() is None

    def test_empty_file_loads_as_none(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert ConfigManager(path).load_config() is None

    def test_load_or_default(self, tmp_path: Path) -> None:
        manager = ConfigManager(tmp_path / "config.yaml")
        fallback = FlowFocusConfig(data_dir=tmp_path / "default-data")

        with patch("flowfocus.models.config_manager.create_default_config", return_value=fallback):
            assert manager.load_or_default() is fallback

    def test_config_path_str(self, tmp_path: Path) -> None:
        assert ConfigManager(tmp_path / "c.yaml").get_config_path_str() == str(tmp_path / "c.yaml")
