"""
FlowFocus Setup Wizard

This module provides an interactive wizard for setting up the FlowFocus
configuration: OpenAI key, model, data directory and study preferences.
"""

import os
from pathlib import Path
from typing import Optional, Union

import click
import questionary

from ..models.config import FlowFocusConfig, get_config_dir, get_default_data_dir
from ..models.config_manager import ConfigManager
from ..models.settings import DefaultSettings


@click.command()
@click.option(
    '--force',
    is_flag=True,
    help='Overwrite existing configuration without prompting'
)
@click.pass_context
def wizard(ctx: click.Context, force: bool) -> None:
    """
    Interactive setup wizard for FlowFocus.

    Guides you through setting up your OpenAI API key, where your data is
    stored, and your study preferences.
    """
    config_manager = ConfigManager((ctx.find_root().obj or {}).get("config_path"))

    if config_manager.config_exists() and not force:
        if not click.confirm("Configuration already exists. Do you want to overwrite it?"):
            click.echo("Setup cancelled. Using existing configuration.")
            return

    result = run_setup_wizard(config_manager)
    if result:
        click.echo("✅ Setup completed successfully!")
    else:
        click.echo("❌ Setup was cancelled or failed.")


def run_setup_wizard(config_manager: ConfigManager) -> Optional[FlowFocusConfig]:
    """
    Run the interactive setup wizard for FlowFocus.

    Args:
        config_manager: Manager the finished configuration is saved with

    Returns:
        FlowFocusConfig if setup was completed, None if cancelled
    """
    click.echo("\n🧙 Welcome to the FlowFocus Setup Wizard!")
    click.echo("Let's set up your study workspace.\n")

    # OpenAI API Key file path setup
    click.echo("📝 First, let's set up your OpenAI API key file path...")
    click.echo("💡 Tip: Keep the key in a file with restrictive permissions (chmod 600)\n")

    default_paths = [
        Path.home() / ".secrets" / "openai_api_key",
        Path.home() / ".openai_api_key",
        get_config_dir() / DefaultSettings.KEY_FILE
    ]
    existing_paths = [p for p in default_paths if p.exists()]

    choices = [{"name": str(p), "value": str(p)} for p in existing_paths]
    choices.append({"name": "Enter custom path", "value": "custom"})
    choices.append({"name": "Create a new key file", "value": "create"})

    api_key_path_choice = questionary.select(
        "Where is your OpenAI API key stored?",
        choices=choices
    ).ask()

    if not api_key_path_choice:
        click.echo("Setup cancelled.")
        return None

    if api_key_path_choice == "create":
        api_key_path = create_api_key_file()
    elif api_key_path_choice == "custom":
        custom_path = questionary.path(
            "Enter the path to your OpenAI API key file:",
            validate=validate_api_key_file
        ).ask()
        api_key_path = Path(custom_path).expanduser() if custom_path else None
    else:
        api_key_path = Path(api_key_path_choice)

    if not api_key_path:
        click.echo("Setup cancelled.")
        return None

    try:
        if not validate_openai_key(api_key_path.read_text().strip()):
            click.echo(f"❌ Invalid API key format in {api_key_path}")
            return None
    except OSError as e:
        click.echo(f"❌ Error reading API key file: {e}")
        return None

    # Choose model
    click.echo("\n🤖 Choose your preferred AI model...")
    model_choice = questionary.select(
        "Which OpenAI model would you like to use?",
        choices=[
            {"name": "GPT-4o Mini (Recommended - Fast & Cost-effective)", "value": "gpt-4o-mini"},
            {"name": "GPT-4o (Most Capable)", "value": "gpt-4o"},
            {"name": "GPT-4 Turbo (Balanced)", "value": "gpt-4-turbo"},
        ],
        default=DefaultSettings.DEFAULT_MODEL,
        instruction="Use arrow keys to navigate, Enter to select"
    ).ask()

    if not model_choice:
        click.echo("Setup cancelled.")
        return None

    # Data directory setup
    click.echo("\n📁 Where should FlowFocus keep your notes, tasks and decks?")
    default_data_dir = get_default_data_dir()

    use_default_dir = questionary.confirm(
        f"Use default directory: {default_data_dir}?",
        default=True
    ).ask()

    if use_default_dir:
        data_dir = default_data_dir
    else:
        custom_dir = questionary.path(
            "Enter custom data directory:",
            validate=lambda x: Path(x).expanduser().parent.exists() or "Parent directory must exist"
        ).ask()

        if not custom_dir:
            click.echo("Setup cancelled.")
            return None

        data_dir = Path(custom_dir).expanduser()

    data_dir.mkdir(parents=True, exist_ok=True)

    # Study preferences
    click.echo("\n⚙️ Let's configure your study preferences...")

    flashcard_count = questionary.select(
        "How many flashcards should be generated by default?",
        choices=[
            {"name": "5 cards (Quick review)", "value": 5},
            {"name": "10 cards (Standard)", "value": 10},
            {"name": "20 cards (Thorough)", "value": 20}
        ],
        default=DefaultSettings.DEFAULT_FLASHCARD_COUNT
    ).ask()

    if flashcard_count is None:
        click.echo("Setup cancelled.")
        return None

    summary_style = questionary.text(
        "Preferred style for video summaries (e.g. Academic, Simple; leave empty for none):"
    ).ask()

    config = FlowFocusConfig(
        openai_key_path=api_key_path,
        default_model=model_choice,
        data_dir=data_dir,
        default_flashcard_count=flashcard_count,
        summary_style=summary_style.strip() if summary_style and summary_style.strip() else None,
    )

    if not config_manager.save_config(config):
        click.echo("❌ Failed to save configuration. Please try again.")
        return None

    click.echo("\n✅ Configuration saved successfully!")
    click.echo(f"📂 Data will be stored in: {data_dir}")
    click.echo(f"🤖 Using model: {model_choice}")
    click.echo(f"🔑 API key file: {api_key_path}")
    click.echo("\n🚀 Try 'flowfocus plans generate' to create your first study plan.")
    return config


def create_api_key_file() -> Optional[Path]:
    """
    Create a new API key file with proper permissions.

    Returns:
        Path to the created file, or None if cancelled
    """
    click.echo("\n🔑 Let's create a new API key file...")

    default_path = get_config_dir() / DefaultSettings.KEY_FILE
    file_path = questionary.path(
        "Where to save the API key file?",
        default=str(default_path)
    ).ask()

    if not file_path:
        return None

    file_path = Path(file_path).expanduser()

    api_key = questionary.password(
        "Enter your OpenAI API key:",
        validate=lambda x: validate_openai_key(x.strip()) or "Invalid API key format. Should start with 'sk-'"
    ).ask()

    if not api_key:
        return None

    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Save API key with restrictive permissions
    file_path.write_text(api_key.strip())
    file_path.chmod(0o600)

    click.echo(f"✅ API key saved to: {file_path}")
    return file_path


def validate_api_key_file(path: str) -> Union[bool, str]:
    """
    Validate that the API key file exists and is readable.

    Args:
        path: Path to the API key file

    Returns:
        True if valid, or error message if not
    """
    p = Path(path).expanduser()
    if not p.exists():
        return f"File does not exist: {path}"
    if not p.is_file():
        return f"Not a file: {path}"
    if not os.access(p, os.R_OK):
        return f"File is not readable: {path}"
    return True


def validate_openai_key(api_key: str) -> bool:
    """
    Validate the OpenAI API key format.

    Args:
        api_key: The API key to validate

    Returns:
        True if the API key appears to be valid, False otherwise
    """
    return (
        api_key.startswith('sk-') and
        len(api_key) >= 20 and
        all(c.isalnum() or c in '-_' for c in api_key)
    )
