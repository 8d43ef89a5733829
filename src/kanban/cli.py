"""
Command Line Interface for the kanban task manager.
"""

import click
from datetime import timedelta
from pathlib import Path
from .version import VERSION
from .config import KanbanConfig
from .logs import setup_logging, get_logger
from .managers import get_file_backed
from .models import Task, Epic, Subtask, TaskStatus, TaskType
from .recovery import KanbanError

log = get_logger("cli")

START_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]
STATUS_CHOICE = click.Choice([status.value for status in TaskStatus])


def _open_manager(ctx):
    try:
        return get_file_backed(ctx.obj['file_path'])
    except KanbanError as e:
        _fail(ctx, f"Cannot open {ctx.obj['file_path']}: {e}")


def _fail(ctx, message):
    log.debug(message)
    click.echo(f"❌ {message}", err=True)
    ctx.exit(1)


def _describe(task: Task) -> str:
    status = task.status.value if task.status else "-"
    line = f"[{task.id}] {task.type.value:<7} {task.title or '(untitled)'} ({status})"
    if task.start_time is not None:
        line += f" {task.start_time:%Y-%m-%d %H:%M} - {task.end_time:%Y-%m-%d %H:%M}"
    return line


def _schedule_options(func):
    func = click.option('--duration', type=click.IntRange(min=1), help='Planned length in minutes')(func)
    func = click.option('--start', type=click.DateTime(formats=START_FORMATS), help='Planned start, e.g. 2024-05-01T09:30')(func)
    func = click.option('--status', type=STATUS_CHOICE, default=TaskStatus.NEW.value, show_default=True)(func)
    func = click.option('-d', '--description', help='Longer description')(func)
    return func


@click.group()
@click.version_option(version=VERSION, prog_name="kanban")
@click.option('-f', '--file', 'file_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Task file (default: $KANBAN_DATA_FILE or ./kanban.csv)')
@click.pass_context
def main(ctx, file_path):
    """
    Kanban - track tasks, epics and subtasks from the command line.
    """
    config = KanbanConfig.from_env()
    setup_logging(config)
    ctx.ensure_object(dict)
    ctx.obj['file_path'] = file_path or config.data_file


@main.command(name='list')
@click.pass_context
def list_all(ctx):
    """List all tasks, and epics with their subtasks."""
    manager = _open_manager(ctx)
    tasks, epics = manager.get_tasks(), manager.get_epics()
    if not tasks and not epics:
        click.echo("📭 No tasks yet")
        return

    for task in tasks:
        click.echo(_describe(task))
    for epic in epics:
        click.echo(_describe(epic))
        for subtask in manager.get_epic_subtasks(epic.id):
            click.echo(f"   {_describe(subtask)}")


@main.command()
@click.pass_context
def schedule(ctx):
    """Show scheduled tasks and subtasks in chronological order."""
    manager = _open_manager(ctx)
    prioritized = manager.get_prioritized_tasks()
    if not prioritized:
        click.echo("📭 Nothing scheduled")
        return

    click.echo("📅 Schedule:")
    for task in prioritized:
        click.echo(f"   {_describe(task)}")


@main.command()
@click.argument('task_id', type=int)
@click.pass_context
def show(ctx, task_id):
    """Show one task, epic or subtask."""
    manager = _open_manager(ctx)
    kind = manager.registry.kind_of(task_id)
    if kind is None:
        _fail(ctx, f"No task, epic or subtask with id={task_id}")

    try:
        if kind == TaskType.EPIC:
            task = manager.get_epic_by_id(task_id)
        elif kind == TaskType.SUBTASK:
            task = manager.get_subtask_by_id(task_id)
        else:
            task = manager.get_task_by_id(task_id)
    except KanbanError as e:
        _fail(ctx, f"Error showing {task_id}: {e}")

    click.echo(_describe(task))
    if task.description:
        click.echo(f"   📝 {task.description}")
    if kind == TaskType.EPIC:
        click.echo(f"   📋 Subtasks: {len(task.subtask_ids)}")
    elif kind == TaskType.SUBTASK:
        click.echo(f"   🗂️  Epic: {task.epic_id}")


@main.command(name='add-task')
@click.argument('title')
@_schedule_options
@click.pass_context
def add_task(ctx, title, description, status, start, duration):
    """Add a new task."""
    manager = _open_manager(ctx)
    try:
        task_id = manager.create_task(Task(
            title=title,
            description=description,
            status=TaskStatus(status),
            start_time=start,
            duration=timedelta(minutes=duration) if duration else None,
        ))
    except KanbanError as e:
        _fail(ctx, f"Error adding task: {e}")
    click.echo(f"✅ Added task {task_id}")


@main.command(name='add-epic')
@click.argument('title')
@click.option('-d', '--description', help='Longer description')
@click.pass_context
def add_epic(ctx, title, description):
    """Add a new epic."""
    manager = _open_manager(ctx)
    try:
        epic_id = manager.create_epic(Epic(title=title, description=description))
    except KanbanError as e:
        _fail(ctx, f"Error adding epic: {e}")
    click.echo(f"✅ Added epic {epic_id}")


@main.command(name='add-subtask')
@click.argument('epic_id', type=int)
@click.argument('title')
@_schedule_options
@click.pass_context
def add_subtask(ctx, epic_id, title, description, status, start, duration):
    """Add a new subtask to an epic."""
    manager = _open_manager(ctx)
    try:
        subtask_id = manager.create_subtask(Subtask(
            epic_id=epic_id,
            title=title,
            description=description,
            status=TaskStatus(status),
            start_time=start,
            duration=timedelta(minutes=duration) if duration else None,
        ))
    except KanbanError as e:
        _fail(ctx, f"Error adding subtask: {e}")
    click.echo(f"✅ Added subtask {subtask_id} to epic {epic_id}")


@main.command()
@click.argument('task_id', type=int)
@click.confirmation_option(prompt='Are you sure you want to remove it?')
@click.pass_context
def remove(ctx, task_id):
    """Remove a task, subtask or epic (with its subtasks)."""
    manager = _open_manager(ctx)
    kind = manager.registry.kind_of(task_id)
    if kind is None:
        _fail(ctx, f"No task, epic or subtask with id={task_id}")

    try:
        if kind == TaskType.EPIC:
            manager.delete_epic(task_id)
        elif kind == TaskType.SUBTASK:
            manager.delete_subtask(task_id)
        else:
            manager.delete_task(task_id)
    except KanbanError as e:
        _fail(ctx, f"Error removing {task_id}: {e}")
    click.echo(f"🗑️  Removed {kind.value.lower()} {task_id}")


if __name__ == "__main__":
    main()
