"""Tests for the click CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from deskhive.cli import main
from deskhive.config import Config
from deskhive.workflows import load_board


@pytest.fixture
def config(tmp_path):
    return Config(data_file=str(tmp_path / "todo_list.json"), default_group_name="Inbox")


@pytest.fixture
def runner(config):
    with patch("deskhive.cli.load_config", return_value=config):
        yield CliRunner()


def invoke(runner, *args):
    result = runner.invoke(main, list(args))
    assert result.exit_code == 0, result.output
    return result


def todo_texts(config, group_index=0):
    board = load_board(config)
    return [t.text for t in board.todos_in(board.groups[group_index].id)]


class TestGroupCommands:
    def test_add_and_list(self, runner, config):
        invoke(runner, "group", "add", "Work")
        invoke(runner, "group", "add", "Home")
        result = invoke(runner, "group", "list")
        assert "Work" in result.output
        assert "Home" in result.output

    def test_list_json(self, runner, config):
        invoke(runner, "group", "add", "Work")
        data = json.loads(invoke(runner, "group", "list", "--json").output)
        assert [g["name"] for g in data] == ["Work"]
        assert data[0]["order"] == 0

    def test_move_rename_collapse(self, runner, config):
        invoke(runner, "group", "add", "Work")
        invoke(runner, "group", "add", "Home")
        home = load_board(config).groups[1]

        invoke(runner, "group", "move", home.id[:8], "0")
        invoke(runner, "group", "rename", home.id, "House")
        invoke(runner, "group", "collapse", home.id)

        first = load_board(config).groups[0]
        assert first.name == "House"
        assert first.collapsed is True

    def test_toggle_flips_collapsed(self, runner, config):
        invoke(runner, "group", "add", "Work")
        group = load_board(config).groups[0]

        result = invoke(runner, "group", "toggle", group.id[:8])
        assert "Work: collapsed" in result.output
        assert load_board(config).groups[0].collapsed is True

        result = invoke(runner, "group", "toggle", group.id)
        assert "Work: expanded" in result.output
        assert load_board(config).groups[0].collapsed is False

    def test_rm_with_confirmation(self, runner, config):
        invoke(runner, "group", "add", "Work")
        group = load_board(config).groups[0]
        invoke(runner, "todo", "add", "A", "--group", group.id)
        invoke(runner, "group", "rm", group.id, "--yes")
        board = load_board(config)
        assert board.groups == ()
        assert board.todos == ()

    def test_unknown_group_fails(self, runner):
        result = runner.invoke(main, ["group", "rename", "nope", "x"])
        assert result.exit_code == 1
        assert "Group not found" in result.output


class TestTodoCommands:
    def test_add_creates_default_group(self, runner, config):
        invoke(runner, "todo", "add", "Buy milk")
        board = load_board(config)
        assert [g.name for g in board.groups] == ["Inbox"]
        assert todo_texts(config) == ["Buy milk"]

    def test_reorder_scenario(self, runner, config):
        invoke(runner, "group", "add", "Work")
        for text in ("A", "B", "C"):
            invoke(runner, "todo", "add", text)
        c = load_board(config).todos[2]

        invoke(runner, "todo", "reorder", c.id, "0")

        assert todo_texts(config) == ["C", "A", "B"]

    def test_done_and_undo(self, runner, config):
        invoke(runner, "todo", "add", "Task")
        todo = load_board(config).todos[0]

        invoke(runner, "todo", "done", todo.id)
        assert load_board(config).todos[0].completed is True
        assert load_board(config).todos[0].completed_at is not None

        invoke(runner, "todo", "undo", todo.id)
        restored = load_board(config).todos[0]
        assert restored.completed is False
        assert restored.completed_at is None

    def test_edit_deadline_priority(self, runner, config):
        invoke(runner, "todo", "add", "Draft", "--deadline", "2030-01-01T09:00")
        todo = load_board(config).todos[0]
        assert todo.deadline is not None

        invoke(runner, "todo", "edit", todo.id, "Final")
        invoke(runner, "todo", "deadline", todo.id, "--clear")
        invoke(runner, "todo", "priority", todo.id, "important")

        updated = load_board(config).todos[0]
        assert updated.text == "Final"
        assert updated.deadline is None
        assert updated.is_important

    def test_deadline_requires_value(self, runner, config):
        invoke(runner, "todo", "add", "Draft")
        todo = load_board(config).todos[0]
        result = runner.invoke(main, ["todo", "deadline", todo.id])
        assert result.exit_code != 0

    def test_bad_deadline_format(self, runner):
        result = runner.invoke(main, ["todo", "add", "x", "--deadline", "next week"])
        assert result.exit_code != 0
        assert "ISO date" in result.output

    def test_move_appends_by_default(self, runner, config):
        invoke(runner, "group", "add", "Work")
        invoke(runner, "group", "add", "Home")
        work, home = load_board(config).groups
        invoke(runner, "todo", "add", "A", "--group", work.id)
        invoke(runner, "todo", "add", "X", "--group", home.id)
        a = load_board(config).todos_in(work.id)[0]

        invoke(runner, "todo", "move", a.id, home.id)

        board = load_board(config)
        assert board.todos_in(work.id) == []
        assert [t.text for t in board.todos_in(home.id)] == ["X", "A"]

    def test_rm(self, runner, config):
        invoke(runner, "todo", "add", "A")
        invoke(runner, "todo", "add", "B")
        a = load_board(config).todos[0]
        invoke(runner, "todo", "rm", a.id)
        assert todo_texts(config) == ["B"]
        assert load_board(config).todos[0].order == 0

    def test_list_output(self, runner, config):
        invoke(runner, "todo", "add", "Visible", "--important")
        result = invoke(runner, "todo", "list")
        assert "### Inbox" in result.output
        assert "Visible" in result.output

    def test_list_collapsed_group_hides_items(self, runner, config):
        invoke(runner, "todo", "add", "Secret")
        group = load_board(config).groups[0]
        invoke(runner, "group", "collapse", group.id)
        result = invoke(runner, "todo", "list")
        assert "Secret" not in result.output
        assert "(1 hidden)" in result.output

    def test_list_json(self, runner, config):
        invoke(runner, "todo", "add", "A")
        data = json.loads(invoke(runner, "todo", "list", "--json").output)
        assert data[0]["text"] == "A"
        assert data[0]["groupId"] == load_board(config).groups[0].id

    def test_list_empty(self, runner):
        assert "No todos." in invoke(runner, "todo", "list").output

    def test_unknown_todo_fails_without_writing(self, runner, config):
        invoke(runner, "todo", "add", "A")
        before = load_board(config)
        result = runner.invoke(main, ["todo", "done", "does-not-exist"])
        assert result.exit_code == 1
        assert "Todo not found" in result.output
        assert load_board(config) == before

    def test_reorder_out_of_range(self, runner, config):
        invoke(runner, "todo", "add", "A")
        todo = load_board(config).todos[0]
        result = runner.invoke(main, ["todo", "reorder", todo.id, "5"])
        assert result.exit_code == 1
        assert "outside" in result.output


class TestDateCommand:
    def test_english(self, runner):
        result = invoke(runner, "date", "2024-02-10")
        assert "2024-02-10 Saturday" in result.output
        assert "Jiachen year, Month 1, Day 1" in result.output

    def test_chinese_json(self, runner):
        data = json.loads(invoke(runner, "date", "2024-02-10", "--locale", "zh", "--json").output)
        assert data["lunar_date"] == "甲辰年正月初一"
        assert data["weekday"] == "星期六"
        assert data["solar"] == "2024-02-10"
        assert data["lunar"] == {"year": 2024, "month": 1, "day": 1, "is_leap": False}

    def test_out_of_range(self, runner):
        result = runner.invoke(main, ["date", "1850-01-01"])
        assert result.exit_code == 1
        assert "outside supported range" in result.output


class TestWatchCommand:
    @patch("deskhive.reminders.run_watcher", side_effect=ValueError("disabled"))
    def test_reports_configuration_error(self, mock_run, runner):
        result = runner.invoke(main, ["watch"])
        assert result.exit_code == 1
        assert "Configuration error: disabled" in result.output


class TestTodoListViews:
    @pytest.fixture
    def seeded(self, runner, config):
        invoke(runner, "group", "add", "Work")
        invoke(runner, "group", "add", "Home")
        work, home = load_board(config).groups
        invoke(runner, "todo", "add", "No deadline", "--group", work.id)
        invoke(runner, "todo", "add", "Due later", "--group", work.id, "--deadline", "2031-06-01")
        invoke(runner, "todo", "add", "Due sooner", "--group", home.id, "--deadline", "2030-06-01")
        invoke(runner, "todo", "add", "Finished", "--group", home.id)
        finished = load_board(config).todos_in(home.id)[1]
        invoke(runner, "todo", "done", finished.id)

    def test_timeline_orders_by_deadline(self, runner, seeded):
        data = json.loads(invoke(runner, "todo", "list", "--timeline", "--json").output)
        assert [t["text"] for t in data] == ["Due sooner", "Due later", "No deadline", "Finished"]

    def test_pending_only(self, runner, seeded):
        data = json.loads(invoke(runner, "todo", "list", "--pending", "--json").output)
        assert "Finished" not in [t["text"] for t in data]
        assert len(data) == 3

    def test_done_only(self, runner, seeded):
        data = json.loads(invoke(runner, "todo", "list", "--done", "--json").output)
        assert [t["text"] for t in data] == ["Finished"]

    def test_timeline_by_creation_time(self, runner, config, seeded):
        config.timeline_deadline_priority = False
        data = json.loads(invoke(runner, "todo", "list", "--timeline", "--json").output)
        assert [t["text"] for t in data] == ["No deadline", "Due later", "Due sooner", "Finished"]
