"""
FlowFocus Main CLI

This module defines the main CLI group and entry point for FlowFocus commands.
"""

from pathlib import Path
from typing import Optional

import click

from .. import __version__
from ..models.config_manager import ConfigManager
from .context import configure_logging
from .notes import notes
from .planner import habits, pomodoro, tasks
from .study import decks, flashcards, plans, summarize
from .wizard import wizard


@click.group()
@click.version_option(version=__version__, prog_name="flowfocus")
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    help='Configuration file to use instead of the default one'
)
@click.option(
    '--data-dir',
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory holding the FlowFocus collections'
)
@click.option(
    '--log-level',
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help='Logging level (defaults to the configured one)'
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], data_dir: Optional[Path], log_level: Optional[str]) -> None:
    """
    FlowFocus: notes, tasks, habits, flashcards and AI study plans in one place.

    Everything is stored locally as JSON collections; AI features use your
    OpenAI API key.
    """
    config = ConfigManager(config_path).load_or_default()
    if data_dir is not None:
        config = config.model_copy(update={"data_dir": data_dir})

    configure_logging(log_level or config.log_level)
    ctx.obj = {"config": config, "config_path": config_path}


# Register subcommands
cli.add_command(wizard)
cli.add_command(notes)
cli.add_command(tasks)
cli.add_command(habits)
cli.add_command(pomodoro)
cli.add_command(decks)
cli.add_command(flashcards)
cli.add_command(plans)
cli.add_command(summarize)


def main() -> None:
    """Main entry point for the FlowFocus CLI."""
    cli()
