"""
FlowFocus Notes Commands

This module implements the 'flowfocus notes' commands for listing, creating,
importing and exporting markdown notes.
"""

from pathlib import Path
from typing import Optional, Tuple

import click
from pydantic import ValidationError

from ..utils import truncate_string
from .context import fail, open_store


@click.group()
def notes() -> None:
    """Create, search and export markdown notes."""


@notes.command('list')
@click.option('--search', default='', help='Only notes whose title or body contains this text')
@click.option('--tag', help='Only notes carrying this tag')
@click.pass_context
def list_notes(ctx: click.Context, search: str, tag: Optional[str]) -> None:
    """List notes, pinned first and most recently edited first."""
    with open_store(ctx) as store:
        store.notes.search_term = search
        store.notes.selected_tag = tag
        view = store.notes.view()

        if not view:
            click.echo("No notes found.")
            return

        for note in view:
            pin = "📌 " if note.is_pinned else "   "
            tags = f" [{', '.join(note.tags)}]" if note.tags else ""
            click.echo(f"{pin}{note.id}  {click.style(note.title, bold=True)}{tags}")
            if note.body:
                click.echo(f"      {truncate_string(note.body.splitlines()[0], 70)}")


@notes.command('new')
@click.option('--title', prompt='Note title', help='Title of the note')
@click.option('--body', default='', help='Markdown body of the note')
@click.option('--tag', 'tags', multiple=True, help='Tag to apply (repeatable)')
@click.pass_context
def new_note(ctx: click.Context, title: str, body: str, tags: Tuple[str, ...]) -> None:
    """Create a new note."""
    with open_store(ctx) as store:
        try:
            note = store.notes.create(title=title, body=body, tags=list(tags))
        except ValidationError as e:
            fail(f"Invalid note: {e}")

    click.echo(f"✅ Created note {note.id}: {note.title}")


@notes.command('import')
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_notes(ctx: click.Context, files: Tuple[Path, ...]) -> None:
    """Import .md or .txt files as notes tagged 'imported'."""
    with open_store(ctx) as store:
        for path in files:
            note = store.notes.import_markdown(path.name, path.read_text(encoding='utf-8'))
            click.echo(f"📥 Imported {path.name} as note {note.id}")


@notes.command('export')
@click.argument('note_id')
@click.option(
    '--output-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=Path('.'),
    show_default=True,
    help='Directory to write the markdown file to'
)
@click.pass_context
def export_note(ctx: click.Context, note_id: str, output_dir: Path) -> None:
    """Export a note as a markdown file."""
    with open_store(ctx) as store:
        try:
            content = store.notes.export_markdown(note_id)
            filename = store.notes.markdown_filename(note_id)
        except KeyError:
            fail(f"Note not found: {note_id}", "Run 'flowfocus notes list' to see note ids")

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    path.write_text(content, encoding='utf-8')
    click.echo(f"✅ Exported note to {path}")


@notes.command('pin')
@click.argument('note_id')
@click.pass_context
def pin_note(ctx: click.Context, note_id: str) -> None:
    """Pin or unpin a note."""
    with open_store(ctx) as store:
        note = store.notes.toggle_pin(note_id)
        if note is None:
            fail(f"Note not found: {note_id}")

    state = "Pinned" if note.is_pinned else "Unpinned"
    click.echo(f"📌 {state} note {note.id}")


@notes.command('delete')
@click.argument('note_id')
@click.pass_context
def delete_note(ctx: click.Context, note_id: str) -> None:
    """Delete a note."""
    with open_store(ctx) as store:
        if not store.notes.delete(note_id):
            fail(f"Note not found: {note_id}")

    click.echo(f"🗑️  Deleted note {note_id}")
