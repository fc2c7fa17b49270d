"""
FlowFocus Planner Commands

This module implements the 'flowfocus tasks', 'flowfocus habits' and
'flowfocus pomodoro' commands.
"""

import time
from datetime import datetime
from typing import Optional

import click
from pydantic import ValidationError

from ..models.pomodoro import PomodoroTimer
from ..utils import get_today
from .context import fail, open_store

PRIORITY_COLORS = {"high": "red", "medium": "yellow", "low": "green"}


# ====================================================================
# Tasks
# ====================================================================

@click.group()
def tasks() -> None:
    """Manage the to-do list."""


@tasks.command('list')
@click.option('--search', default='', help='Only tasks whose name, description or category contains this text')
@click.option('--category', help='Only tasks in this category')
@click.option('--today', is_flag=True, help="Only today's agenda")
@click.pass_context
def list_tasks(ctx: click.Context, search: str, category: Optional[str], today: bool) -> None:
    """List tasks, open ones first by priority and due date."""
    with open_store(ctx) as store:
        store.tasks.search_term = search
        store.tasks.filter_value = category
        view = store.tasks.due_on(get_today()) if today else store.tasks.view()

        if not view:
            click.echo("No tasks found.")
            return

        for task in view:
            box = "☑" if task.completed else "☐"
            priority = click.style(task.priority, fg=PRIORITY_COLORS[task.priority])
            due = f" due {task.due_date.isoformat()}" if task.due_date else ""
            habit = store.tasks.linked_habit(task.id, store.habits)
            link = f" → {habit.name}" if habit else ""
            click.echo(f"{box} {task.id}  {task.name} ({task.category}, {priority}){due}{link}")


@tasks.command('add')
@click.argument('name')
@click.option('--description', help='Longer description')
@click.option('--category', default='General', show_default=True, help='Task category')
@click.option('--due', type=click.DateTime(formats=["%Y-%m-%d"]), help='Due date (YYYY-MM-DD)')
@click.option(
    '--priority',
    type=click.Choice(["low", "medium", "high"]),
    default="medium",
    show_default=True,
    help='Task priority'
)
@click.option('--habit', 'habit_id', help='ID of a habit completed together with this task')
@click.pass_context
def add_task(
    ctx: click.Context,
    name: str,
    description: Optional[str],
    category: str,
    due: Optional[datetime],
    priority: str,
    habit_id: Optional[str]
) -> None:
    """Add a task."""
    with open_store(ctx) as store:
        if habit_id and habit_id not in store.habits:
            fail(f"Habit not found: {habit_id}", "Run 'flowfocus habits list' to see habit ids")
        try:
            task = store.tasks.create(
                name=name,
                description=description,
                category=category,
                due_date=due.date() if due else None,
                priority=priority,
                habit_id=habit_id,
            )
        except ValidationError as e:
            fail(f"Invalid task: {e}")

    click.echo(f"✅ Added task {task.id}: {task.name}")


@tasks.command('done')
@click.argument('task_id')
@click.option('--undo', is_flag=True, help='Mark the task as not done instead')
@click.pass_context
def complete_task(ctx: click.Context, task_id: str, undo: bool) -> None:
    """Mark a task done; its linked habit follows."""
    with open_store(ctx) as store:
        task = store.complete_task(task_id, completed=not undo)
        if task is None:
            fail(f"Task not found: {task_id}")

        click.echo(f"{'☐' if undo else '☑'} {task.name}")
        habit = store.tasks.linked_habit(task_id, store.habits)
        if habit is not None:
            state = "done" if habit.completed_today else "not done"
            click.echo(f"   Habit '{habit.name}' marked {state} for today")


@tasks.command('delete')
@click.argument('task_id')
@click.pass_context
def delete_task(ctx: click.Context, task_id: str) -> None:
    """Delete a task."""
    with open_store(ctx) as store:
        if not store.tasks.delete(task_id):
            fail(f"Task not found: {task_id}")

    click.echo(f"🗑️  Deleted task {task_id}")


# ====================================================================
# Habits
# ====================================================================

@click.group()
def habits() -> None:
    """Track daily habits."""


@habits.command('list')
@click.pass_context
def list_habits(ctx: click.Context) -> None:
    """List habits grouped by category."""
    with open_store(ctx) as store:
        groups = store.habits.grouped_by_category()
        if not groups:
            click.echo("No habits yet.")
            return

        for category, members in groups.items():
            click.echo(click.style(category, bold=True))
            for habit in members:
                mark = "✅" if habit.completed_today else "⬜"
                progress = f" {habit.value}/{habit.target} {habit.unit}".rstrip() if habit.type == "quantitative" else ""
                click.echo(f"  {mark} {habit.id}  {habit.name}{progress}  🔥 {habit.streak}")


@habits.command('add')
@click.argument('name')
@click.option('--category', required=True, help='Habit category')
@click.option('--target', type=float, help='Daily target; makes the habit quantitative')
@click.option('--unit', default='', help='Unit of the target, e.g. "min"')
@click.option('--goal-streak', type=int, help='Streak you are aiming for')
@click.pass_context
def add_habit(
    ctx: click.Context,
    name: str,
    category: str,
    target: Optional[float],
    unit: str,
    goal_streak: Optional[int]
) -> None:
    """Add a habit."""
    fields = {"name": name, "category": category, "goal_streak": goal_streak}
    if target is not None:
        fields.update(type="quantitative", target=int(target) if target.is_integer() else target, unit=unit)

    with open_store(ctx) as store:
        try:
            habit = store.habits.create(**fields)
        except ValidationError as e:
            fail(f"Invalid habit: {e}")

    click.echo(f"✅ Added habit {habit.id}: {habit.name}")


@habits.command('check')
@click.argument('habit_id')
@click.option('--value', type=float, help="Today's amount for a quantitative habit")
@click.pass_context
def check_habit(ctx: click.Context, habit_id: str, value: Optional[float]) -> None:
    """Toggle a habit for today, or record a quantity."""
    with open_store(ctx) as store:
        if value is None:
            habit = store.habits.toggle_binary(habit_id)
        else:
            habit = store.habits.set_quantity(habit_id, int(value) if value.is_integer() else value)

        if habit is None:
            fail(f"Habit not found: {habit_id}")

    state = "done" if habit.completed_today else "not done"
    click.echo(f"✅ {habit.name} is {state} for today")


# ====================================================================
# Pomodoro
# ====================================================================

@click.group()
def pomodoro() -> None:
    """Pomodoro focus timer and session history."""


@pomodoro.command('stats')
@click.option('--days', default=7, show_default=True, type=click.IntRange(1, 365), help='Number of days to show')
@click.pass_context
def pomodoro_stats(ctx: click.Context, days: int) -> None:
    """Show finished focus sessions per day."""
    with open_store(ctx) as store:
        history = store.pomodoro.recent_sessions(days)

    for day, count in history:
        label = "today" if day == get_today() else day.strftime("%a %d %b")
        click.echo(f"{label:>10}  {'🍅' * count}{' ' if count else ''}{count}")
    click.echo(f"Total: {sum(count for _, count in history)} sessions")


@pomodoro.command('settings')
@click.option('--pomodoro', 'pomodoro_minutes', type=int, help='Focus length in minutes')
@click.option('--short-break', type=int, help='Short break length in minutes')
@click.option('--long-break', type=int, help='Long break length in minutes')
@click.pass_context
def pomodoro_settings(
    ctx: click.Context,
    pomodoro_minutes: Optional[int],
    short_break: Optional[int],
    long_break: Optional[int]
) -> None:
    """Show or change the timer lengths."""
    changes = {
        key: value
        for key, value in (("pomodoro", pomodoro_minutes), ("short_break", short_break), ("long_break", long_break))
        if value is not None
    }

    with open_store(ctx) as store:
        settings = store.pomodoro.settings
        if changes:
            try:
                settings = store.pomodoro.update_settings(**changes)
            except ValidationError as e:
                fail(f"Invalid timer settings: {e}")

    click.echo(f"🍅 Focus: {settings.pomodoro} min")
    click.echo(f"☕ Short break: {settings.short_break} min")
    click.echo(f"🛋️  Long break: {settings.long_break} min")


@pomodoro.command('start')
@click.option(
    '--mode',
    type=click.Choice(["pomodoro", "short_break", "long_break"]),
    default="pomodoro",
    show_default=True,
    help='Timer mode to run'
)
@click.pass_context
def pomodoro_start(ctx: click.Context, mode: str) -> None:
    """Run one timer in the terminal; a finished focus session is recorded."""
    with open_store(ctx) as store:
        timer = PomodoroTimer(store.pomodoro, mode=mode)
        timer.start()

        with click.progressbar(length=timer.duration, label=f"⏱️  {mode.replace('_', ' ')}") as bar:
            finished = False
            while not finished:
                time.sleep(1)
                finished = timer.tick(1)
                bar.update(1)

        if mode == "pomodoro":
            click.echo(f"🎉 Session recorded! {store.pomodoro.sessions_on(get_today())} today. Time for a break.")
        else:
            click.echo("🔔 Break over, back to focus.")
