"""
FlowFocus CLI Context

Shared helpers for the command modules: configuration lookup, store
lifetime and error reporting.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, NoReturn, Optional

import click

from ..models.config import FlowFocusConfig
from ..models.store import FlowFocusStore, create_store

# Set up module logger
logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)-7s] [%(name)-25s] %(message)s"


def configure_logging(level: str) -> None:
    """
    Configure root logging for a CLI run.

    Args:
        level: Level name such as ``WARNING`` or ``DEBUG``
    """
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT, force=True)


def get_config(ctx: click.Context) -> FlowFocusConfig:
    """Configuration resolved by the ``flowfocus`` group."""
    return ctx.find_root().obj["config"]


@contextmanager
def open_store(ctx: click.Context) -> Iterator[FlowFocusStore]:
    """
    Open the store for the duration of a command.

    Pending writes are flushed when the block exits, whether or not it
    raised.
    """
    store = create_store(get_config(ctx))
    try:
        yield store
    finally:
        store.close()


def fail(message: str, tip: Optional[str] = None) -> NoReturn:
    """
    Report an error to the user and abort the command.

    Args:
        message: Error message
        tip: Optional hint printed below the error
    """
    click.echo(f"❌ {message}")
    if tip:
        click.echo(f"💡 Tip: {tip}")
    raise click.Abort()
