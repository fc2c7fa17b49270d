"""
Tests for the interactive setup wizard with questionary mocked out.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from flowfocus.cli.wizard import run_setup_wizard, validate_api_key_file, validate_openai_key
from flowfocus.models.config_manager import ConfigManager

VALID_KEY = "sk-test-key-1234567890abcdef"


@pytest.fixture
def key_file(tmp_path: Path) -> Path:
    path = tmp_path / "key.txt"
    path.write_text(VALID_KEY + "\n")
    return path


@pytest.fixture
def wizard_env(tmp_path: Path):
    """Patch questionary and the default directories used by the wizard."""
    with patch("flowfocus.cli.wizard.questionary") as mock_questionary, \
            patch("flowfocus.cli.wizard.get_config_dir", return_value=tmp_path / "config"), \
            patch("flowfocus.cli.wizard.get_default_data_dir", return_value=tmp_path / "default-data"):
        yield mock_questionary


class TestRunSetupWizard:
    """Test cases for the wizard flow."""

    def test_custom_key_and_data_dir(self, wizard_env: MagicMock, key_file: Path, tmp_path: Path) -> None:
        wizard_env.select.return_value.ask.side_effect = ["custom", "gpt-4o", 20]
        wizard_env.path.return_value.ask.side_effect = [str(key_file), str(tmp_path / "my-data")]
        wizard_env.confirm.return_value.ask.return_value = False
        wizard_env.text.return_value.ask.return_value = "  Academic  "
        manager = ConfigManager(tmp_path / "config.yaml")

        config = run_setup_wizard(manager)

        assert config is not None
        assert config.openai_key_path == key_file
        assert config.default_model == "gpt-4o"
        assert config.data_dir == tmp_path / "my-data"
        assert config.default_flashcard_count == 20
        assert config.summary_style == "Academic"
        assert (tmp_path / "my-data").is_dir()
        assert manager.load_config() == config

    def test_default_data_dir_and_no_style(self, wizard_env: MagicMock, key_file: Path, tmp_path: Path) -> None:
        wizard_env.select.return_value.ask.side_effect = ["custom", "gpt-4o-mini", 10]
        wizard_env.path.return_value.ask.return_value = str(key_file)
        wizard_env.confirm.return_value.ask.return_value = True
        wizard_env.text.return_value.ask.return_value = ""

        config = run_setup_wizard(ConfigManager(tmp_path / "config.yaml"))

        assert config.data_dir == tmp_path / "default-data"
        assert config.summary_style is None

    def test_cancel_at_first_question(self, wizard_env: MagicMock, tmp_path: Path) -> None:
        wizard_env.select.return_value.ask.return_value = None
        manager = ConfigManager(tmp_path / "config.yaml")

        assert run_setup_wizard(manager) is None
        assert not manager.config_exists()

    def test_rejects_badly_formatted_key(self, wizard_env: MagicMock, tmp_path: Path) -> None:
        bad_key = tmp_path / "bad.txt"
        bad_key.write_text("not-a-key")
        wizard_env.select.return_value.ask.return_value = "custom"
        wizard_env.path.return_value.ask.return_value = str(bad_key)

        assert run_setup_wizard(ConfigManager(tmp_path / "config.yaml")) is None


class TestWizardValidators:
    """Test cases for the input validators."""

    @pytest.mark.parametrize("key,expected", [
        (VALID_KEY, True),
        ("sk-short", False),
        ("pk-test-key-1234567890abcdef", False),
        ("sk-test key 1234567890abcdef", False),
    ])
    def test_validate_openai_key(self, key: str, expected: bool) -> None:
        assert validate_openai_key(key) is expected

    def test_validate_api_key_file(self, key_file: Path, tmp_path: Path) -> None:
        assert validate_api_key_file(str(key_file)) is True
        assert "does not exist" in validate_api_key_file(str(tmp_path / "missing"))
        assert "Not a file" in validate_api_key_file(str(tmp_path))
