"""DeskHive CLI - grouped todo list and lunar calendar."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime

import click

from .adapters.json_store import StoreError, group_to_dict, todo_to_dict
from .config import load_config
from .core.calendar import LOCALES, CalendarResolver
from .core.errors import DeskHiveError, InvalidArgument, NotFound
from .core.ordering import OrderingEngine
from .core.todos import Priority, Todo, completed, filter_overdue, pending, sort_for_display
from .workflows import apply, ensure_default_group, load_board


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _match(kind: str, ref: str, ids: list[str]) -> str:
    """Resolve a full id or unique id prefix."""
    if ref in ids:
        return ref
    hits = [i for i in ids if i.startswith(ref)]
    if not hits:
        raise NotFound(f"{kind} not found: {ref}")
    if len(hits) > 1:
        raise InvalidArgument(f"Ambiguous {kind.lower()} id {ref!r} matches {len(hits)} entries")
    return hits[0]


def _group_id(engine: OrderingEngine, ref: str) -> str:
    return _match("Group", ref, [g.id for g in engine.groups()])


def _todo_id(engine: OrderingEngine, ref: str) -> str:
    ids = [t.id for g in engine.groups() for t in engine.todos_in(g.id)]
    return _match("Todo", ref, ids)


def _parse_deadline(value: str) -> int:
    try:
        return int(datetime.fromisoformat(value).timestamp())
    except ValueError:
        raise click.BadParameter(f"Expected an ISO date or datetime, got {value!r}")


def _run(operation):
    """Apply one engine operation against the configured store."""
    config = load_config()
    try:
        return apply(config, operation)
    except (DeskHiveError, StoreError) as e:
        _fail(e)


def _format_todo(todo: Todo, now: int) -> str:
    check = "x" if todo.completed else " "
    marker = "!" if todo.is_important else " "
    due = ""
    if todo.deadline is not None:
        due = f" (due {datetime.fromtimestamp(todo.deadline).strftime('%Y-%m-%d %H:%M')})"
        if todo.is_overdue(now):
            due += " OVERDUE"
    return f"[{check}]{marker} {todo.text}{due}  {todo.id[:8]}"


@click.group()
@click.version_option(package_name="deskhive")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """DeskHive - grouped todo list with a lunar calendar."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


# ============== Groups ==============


@main.group()
def group():
    """Manage todo groups."""
    pass


@group.command("add")
@click.argument("name")
def group_add(name: str):
    """Create a group at the end of the list."""
    created = _run(lambda engine: engine.create_group(name))
    click.echo(f"Created group {created.name} ({created.id[:8]})")


@group.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def group_list(as_json: bool):
    """List groups in display order."""
    try:
        board = load_board(load_config())
    except (DeskHiveError, StoreError) as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([group_to_dict(g) for g in board.groups], indent=2, ensure_ascii=False))
        return

    if not board.groups:
        click.echo("No groups.")
        return

    for g in board.groups:
        count = len(board.todos_in(g.id))
        state = "+" if g.collapsed else "-"
        click.echo(f"{g.order:>2} {state} {g.name} ({count})  {g.id[:8]}")


@group.command("rename")
@click.argument("group_ref")
@click.argument("name")
def group_rename(group_ref: str, name: str):
    """Rename a group."""
    _run(lambda engine: engine.rename_group(_group_id(engine, group_ref), name))


@group.command("collapse")
@click.argument("group_ref")
def group_collapse(group_ref: str):
    """Collapse a group."""
    _run(lambda engine: engine.set_collapsed(_group_id(engine, group_ref), True))


@group.command("expand")
@click.argument("group_ref")
def group_expand(group_ref: str):
    """Expand a group."""
    _run(lambda engine: engine.set_collapsed(_group_id(engine, group_ref), False))


@group.command("toggle")
@click.argument("group_ref")
def group_toggle(group_ref: str):
    """Flip a group between collapsed and expanded."""
    toggled = _run(lambda engine: engine.toggle_collapsed(_group_id(engine, group_ref)))
    click.echo(f"{toggled.name}: {'collapsed' if toggled.collapsed else 'expanded'}")


@group.command("move")
@click.argument("group_ref")
@click.argument("index", type=int)
def group_move(group_ref: str, index: int):
    """Move a group to a new position."""
    _run(lambda engine: engine.reorder_groups(_group_id(engine, group_ref), index))


@group.command("rm")
@click.argument("group_ref")
@click.confirmation_option(prompt="Delete the group and all its todos?")
def group_rm(group_ref: str):
    """Delete a group and every todo in it."""
    _run(lambda engine: engine.delete_group(_group_id(engine, group_ref)))


# ============== Todos ==============


@main.group()
def todo():
    """Manage todos."""
    pass


@todo.command("add")
@click.argument("text")
@click.option("--group", "group_ref", help="Group id (defaults to the first group)")
@click.option("--important", is_flag=True, help="Mark as important")
@click.option("--deadline", help="Deadline as ISO date or datetime")
def todo_add(text: str, group_ref: str | None, important: bool, deadline: str | None):
    """Add a todo at the end of a group."""
    config = load_config()
    due = _parse_deadline(deadline) if deadline else None
    priority = Priority.IMPORTANT if important else Priority.NORMAL

    def operation(engine: OrderingEngine) -> Todo:
        if group_ref:
            group_id = _group_id(engine, group_ref)
        else:
            group_id = ensure_default_group(engine, config.default_group_name)
        return engine.create_todo(group_id, text, priority=priority, deadline=due)

    try:
        created = apply(config, operation)
    except (DeskHiveError, StoreError) as e:
        _fail(e)
    click.echo(f"Added {created.text} ({created.id[:8]})")


@todo.command("list")
@click.option("--group", "group_ref", help="Only this group")
@click.option("--pending", "status", flag_value="pending", help="Only incomplete todos")
@click.option("--done", "status", flag_value="done", help="Only completed todos, most recent first")
@click.option("--overdue", is_flag=True, help="Only overdue todos")
@click.option("--timeline", is_flag=True, help="One flat list ordered by deadline or creation time")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def todo_list(group_ref: str | None, status: str | None, overdue: bool, timeline: bool, as_json: bool):
    """List todos grouped by group."""
    now = int(datetime.now().timestamp())
    config = load_config()
    try:
        board = load_board(config)
        groups = list(board.groups)
        if group_ref:
            wanted = _match("Group", group_ref, [g.id for g in groups])
            groups = [g for g in groups if g.id == wanted]
    except (DeskHiveError, StoreError) as e:
        _fail(e)

    sections = []
    for g in groups:
        todos = board.todos_in(g.id)
        if status == "pending":
            todos = pending(todos)
        elif status == "done":
            todos = completed(todos)
        if overdue:
            todos = filter_overdue(todos, now)
        sections.append((g, todos))

    if timeline:
        flat = sort_for_display(
            [t for _, todos in sections for t in todos],
            deadline_first=config.timeline_deadline_priority,
        )
        sections = [(None, flat)]

    if as_json:
        click.echo(
            json.dumps(
                [t for _, todos in sections for t in map(todo_to_dict, todos)],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not any(todos for _, todos in sections):
        click.echo("No todos.")
        return

    for g, todos in sections:
        if not todos:
            continue
        if g is not None:
            click.echo(f"### {g.name}")
            if g.collapsed:
                click.echo(f"  ({len(todos)} hidden)")
                continue
        for t in todos:
            click.echo(f"  {_format_todo(t, now)}")


@todo.command("done")
@click.argument("todo_ref")
def todo_done(todo_ref: str):
    """Mark a todo completed."""
    _run(lambda engine: engine.set_completed(_todo_id(engine, todo_ref), True))


@todo.command("undo")
@click.argument("todo_ref")
def todo_undo(todo_ref: str):
    """Mark a todo not completed."""
    _run(lambda engine: engine.set_completed(_todo_id(engine, todo_ref), False))


@todo.command("edit")
@click.argument("todo_ref")
@click.argument("text")
def todo_edit(todo_ref: str, text: str):
    """Replace a todo's text."""
    _run(lambda engine: engine.update_text(_todo_id(engine, todo_ref), text))


@todo.command("deadline")
@click.argument("todo_ref")
@click.argument("when", required=False)
@click.option("--clear", is_flag=True, help="Remove the deadline")
def todo_deadline(todo_ref: str, when: str | None, clear: bool):
    """Set or clear a todo's deadline."""
    if not clear and not when:
        raise click.UsageError("Give a deadline or --clear")
    due = None if clear else _parse_deadline(when)
    _run(lambda engine: engine.set_deadline(_todo_id(engine, todo_ref), due))


@todo.command("priority")
@click.argument("todo_ref")
@click.argument("level", type=click.Choice(["normal", "important"]))
def todo_priority(todo_ref: str, level: str):
    """Set a todo's priority."""
    priority = Priority[level.upper()]
    _run(lambda engine: engine.set_priority(_todo_id(engine, todo_ref), priority))


@todo.command("reorder")
@click.argument("todo_ref")
@click.argument("index", type=int)
def todo_reorder(todo_ref: str, index: int):
    """Move a todo to a new position within its group."""

    def operation(engine: OrderingEngine) -> None:
        todo_id = _todo_id(engine, todo_ref)
        engine.reorder_within_group(engine.get_todo(todo_id).group_id, todo_id, index)

    _run(operation)


@todo.command("move")
@click.argument("todo_ref")
@click.argument("group_ref")
@click.argument("index", type=int, required=False)
def todo_move(todo_ref: str, group_ref: str, index: int | None):
    """Move a todo into another group (appends unless INDEX is given)."""

    def operation(engine: OrderingEngine) -> None:
        todo_id = _todo_id(engine, todo_ref)
        group_id = _group_id(engine, group_ref)
        target = index
        if target is None:
            target = len([t for t in engine.todos_in(group_id) if t.id != todo_id])
        engine.move_to_group(todo_id, group_id, target)

    _run(operation)


@todo.command("rm")
@click.argument("todo_ref")
def todo_rm(todo_ref: str):
    """Delete a todo."""
    _run(lambda engine: engine.delete_todo(_todo_id(engine, todo_ref)))


# ============== Calendar ==============


@main.command("date")
@click.argument("day", required=False, type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--locale", type=click.Choice(LOCALES), help="Label language")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def date_info(day: datetime | None, locale: str | None, as_json: bool):
    """Show solar and lunar date info (today by default)."""
    config = load_config()
    resolver = CalendarResolver(locale or config.locale)
    try:
        info = resolver.resolve_today(day.date() if day else None)
    except DeskHiveError as e:
        _fail(e)

    if as_json:
        data = asdict(info)
        data["solar"] = info.solar.isoformat()
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    click.echo(f"{info.solar_date} {info.weekday}")
    click.echo(f"{info.lunar_date}")
    click.echo(f"{info.lunar_year}")


# ============== Reminders ==============


@main.command()
def watch():
    """Run the deadline reminder watcher."""
    from .reminders import run_watcher

    click.echo("Starting DeskHive reminder watcher...")
    click.echo("Press Ctrl+C to stop")
    try:
        run_watcher(load_config())
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Stopped.")
