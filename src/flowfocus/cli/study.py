"""
FlowFocus Study Commands

This module implements the flashcard deck, study plan, flashcard generation
and video summary commands. The generation commands call OpenAI through the
AI flows and need a configured API key.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Type

import click
from pydantic import ValidationError

from ..agents.base_flow import GenerationFlow
from ..agents.flashcard_generator import FlashcardGenerator, cards_as_records
from ..agents.study_plan_generator import StudyPlanGenerator
from ..agents.transcript_summarizer import TranscriptSummarizer, save_summary_as_note
from ..exceptions import FlowFocusError
from ..models.deck_player import DeckPlayer
from ..models.entities import StudyPlan
from ..transcripts import TranscriptFetcher
from ..utils import get_today
from .context import fail, get_config, open_store


def run_flow(ctx: click.Context, flow_class: Type[GenerationFlow], request: Mapping[str, Any]) -> Any:
    """
    Run a generation flow built from the CLI configuration.

    Configuration problems and flow failures abort the command with a
    single message.
    """
    try:
        flow = flow_class.from_config(get_config(ctx))
        return flow.run(request)
    except FileNotFoundError as e:
        fail(f"Configuration error: {e}", "Run 'flowfocus wizard' to set up your configuration")
    except FlowFocusError as e:
        fail(str(e))


def _print_plan(plan: StudyPlan) -> None:
    click.echo(f"📘 {click.style(plan.title, bold=True)}  ({plan.id})")
    click.echo(f"   Goal: {plan.goal}  •  {plan.completion_percentage:.0f}% complete")
    for task in plan.tasks:
        box = "☑" if task.completed else "☐"
        duration = f" ({task.duration})" if task.duration else ""
        click.echo(f"   {box} {task.date.isoformat()}  {task.id}  {task.topic}{duration}")


# ====================================================================
# Decks
# ====================================================================

@click.group()
def decks() -> None:
    """Browse and study flashcard decks."""


@decks.command('list')
@click.pass_context
def list_decks(ctx: click.Context) -> None:
    """List decks and their card counts."""
    with open_store(ctx) as store:
        if not len(store.decks):
            click.echo("No decks yet.")
            return

        for deck in store.decks:
            click.echo(f"🗂️  {deck.id}  {click.style(deck.name, bold=True)} ({len(deck.cards)} cards)")
            if deck.description:
                click.echo(f"      {deck.description}")


@decks.command('new')
@click.argument('name')
@click.option('--description', default='', help='What the deck covers')
@click.pass_context
def new_deck(ctx: click.Context, name: str, description: str) -> None:
    """Create an empty deck."""
    with open_store(ctx) as store:
        try:
            deck = store.decks.create(name=name, description=description)
        except ValidationError as e:
            fail(f"Invalid deck: {e}")

    click.echo(f"✅ Created deck {deck.id}: {deck.name}")


@decks.command('study')
@click.argument('deck_id')
@click.option('--shuffle', is_flag=True, help='Study the cards in random order')
@click.pass_context
def study_deck(ctx: click.Context, deck_id: str, shuffle: bool) -> None:
    """Study a deck one card at a time."""
    with open_store(ctx) as store:
        deck = store.decks.get(deck_id)

    if deck is None:
        fail(f"Deck not found: {deck_id}", "Run 'flowfocus decks list' to see deck ids")
    if not deck.cards:
        fail(f"Deck '{deck.name}' has no cards yet")

    player = DeckPlayer(deck, transition_delay=get_config(ctx).card_transition_delay)
    if shuffle:
        player.shuffle()

    while True:
        side = "A" if player.is_flipped else "Q"
        click.echo(f"\n[{player.index + 1}/{len(player)}] {side}: {player.visible_text}")
        action = click.prompt(
            "[f]lip [n]ext [p]rev [s]huffle [q]uit",
            type=click.Choice(["f", "n", "p", "s", "q"]),
            default="f",
            show_choices=False
        )
        if action == "f":
            player.flip()
        elif action == "n":
            player.next()
        elif action == "p":
            player.prev()
        elif action == "s":
            if player.is_shuffled:
                player.unshuffle()
            else:
                player.shuffle()
        else:
            break


# ====================================================================
# Flashcard generation
# ====================================================================

@click.group()
def flashcards() -> None:
    """Generate flashcards with AI."""


@flashcards.command('generate')
@click.option('--file', 'source', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='Text file to learn from')
@click.option('--text', help='Text to learn from')
@click.option('--count', type=int, help='Number of cards (default from configuration)')
@click.option('--deck', 'deck_id', help='Add the cards to this deck')
@click.option('--new-deck', help='Create a deck with this name for the cards')
@click.pass_context
def generate_flashcards(
    ctx: click.Context,
    source: Optional[Path],
    text: Optional[str],
    count: Optional[int],
    deck_id: Optional[str],
    new_deck: Optional[str]
) -> None:
    """Generate question/answer flashcards from text."""
    if source is not None:
        text = source.read_text(encoding='utf-8')
    if not text:
        fail("Provide study text with --file or --text")

    card_count = count if count is not None else get_config(ctx).default_flashcard_count
    click.echo(f"🤖 Generating {card_count} flashcards...")
    result = run_flow(ctx, FlashcardGenerator, {"content": text, "card_count": card_count})

    for i, card in enumerate(result.cards, 1):
        click.echo(f"\n{i}. Q: {card.question}")
        click.echo(f"   A: {card.answer}")

    if not deck_id and not new_deck:
        return

    with open_store(ctx) as store:
        if new_deck:
            try:
                deck_id = store.decks.create(name=new_deck).id
            except ValidationError as e:
                fail(f"Invalid deck: {e}")
        elif deck_id not in store.decks:
            fail(f"Deck not found: {deck_id}")

        added = store.decks.add_generated_cards(deck_id, cards_as_records(result))

    click.echo(f"\n✅ Added {len(added)} cards to deck {deck_id}")


# ====================================================================
# Study plans
# ====================================================================

@click.group()
def plans() -> None:
    """Generate, track, export and import study plans."""


@plans.command('list')
@click.pass_context
def list_plans(ctx: click.Context) -> None:
    """List study plans with their progress."""
    with open_store(ctx) as store:
        view = store.study_plans.view()

    if not view:
        click.echo("No study plans yet. Create one with 'flowfocus plans generate'.")
        return

    for plan in view:
        click.echo(f"📘 {plan.id}  {click.style(plan.title, bold=True)}  {plan.completion_percentage:.0f}%")


@plans.command('show')
@click.argument('plan_id')
@click.pass_context
def show_plan(ctx: click.Context, plan_id: str) -> None:
    """Show a study plan with all its tasks."""
    with open_store(ctx) as store:
        plan = store.study_plans.get(plan_id)

    if plan is None:
        fail(f"Study plan not found: {plan_id}")
    _print_plan(plan)


@plans.command('check')
@click.argument('plan_id')
@click.argument('task_id')
@click.option('--undo', is_flag=True, help='Mark the task as not done instead')
@click.pass_context
def check_plan_task(ctx: click.Context, plan_id: str, task_id: str, undo: bool) -> None:
    """Mark a study task done."""
    with open_store(ctx) as store:
        plan = store.study_plans.set_task_completed(plan_id, task_id, not undo)
        if plan is None:
            fail(f"Study task not found: {plan_id}/{task_id}")

    click.echo(f"✅ {plan.title}: {plan.completion_percentage:.0f}% complete")


@plans.command('generate')
@click.option('--subject', prompt='What do you want to study?', help='Subject or learning goal')
@click.option(
    '--duration',
    prompt='How much time can you commit? (e.g. "3 weeks, 4 days a week, 2 hours per day")',
    help='Total duration and frequency'
)
@click.option('--details', default='', help='Preferences such as pace, level or learning style')
@click.option('--start-date', type=click.DateTime(formats=["%Y-%m-%d"]), help='First study day (default: today)')
@click.pass_context
def generate_plan(
    ctx: click.Context,
    subject: str,
    duration: str,
    details: str,
    start_date: Optional[datetime]
) -> None:
    """Generate a day-by-day study plan with AI."""
    request = {
        "subject": subject,
        "duration": duration,
        "details": details or None,
        "start_date": start_date.date() if start_date else get_today(),
    }

    click.echo(f"\n🎯 Creating a study plan for: {click.style(subject, fg='cyan', bold=True)}")
    plan = run_flow(ctx, StudyPlanGenerator, request)

    with open_store(ctx) as store:
        store.study_plans.add_plan(plan)

    click.echo("✅ Study plan created!\n")
    _print_plan(plan)


@plans.command('export')
@click.option(
    '--output-dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=Path('.'),
    show_default=True,
    help='Directory to write the export file to'
)
@click.pass_context
def export_plans(ctx: click.Context, output_dir: Path) -> None:
    """Export every study plan to a dated JSON file."""
    with open_store(ctx) as store:
        try:
            path = store.study_plans.export_json(output_dir)
        except ValueError as e:
            fail(str(e))
        except OSError as e:
            fail(f"Export failed: {e}")

    click.echo(f"✅ Exported study plans to {path}")


@plans.command('import')
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_plans(ctx: click.Context, file: Path) -> None:
    """Import study plans from an export file; plans with known ids are replaced."""
    with open_store(ctx) as store:
        try:
            imported = store.study_plans.import_file(file)
        except FlowFocusError as e:
            fail(f"Import failed: {e}")

    click.echo(f"✅ Imported {len(imported)} study plans")


# ====================================================================
# Video summaries
# ====================================================================

@click.command()
@click.argument('url')
@click.option('--title', 'video_title', help='Video title to guide the note title')
@click.option('--style', help='Persona and writing style, e.g. "Academic" or "Simple"')
@click.option('--save/--no-save', default=True, show_default=True, help='Save the summary as a note')
@click.pass_context
def summarize(ctx: click.Context, url: str, video_title: Optional[str], style: Optional[str], save: bool) -> None:
    """Summarize a YouTube video's transcript into study notes."""
    click.echo("📺 Fetching transcript...")
    try:
        transcript = TranscriptFetcher().fetch_transcript(url)
    except FlowFocusError as e:
        fail(str(e))

    click.echo("🤖 Writing study notes...")
    summary = run_flow(ctx, TranscriptSummarizer, {
        "transcript": transcript,
        "video_title": video_title,
        "summary_style": style or get_config(ctx).summary_style,
    })

    click.echo(f"\n# {summary.title}\n")
    click.echo(summary.summary)

    if save:
        with open_store(ctx) as store:
            note = save_summary_as_note(store.notes, summary)
        click.echo(f"\n✅ Saved as note {note.id}")
