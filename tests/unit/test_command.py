"""Tests for the Command builder."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from pipekit import Command, Pipeline, cmd


def test_builder_returns_new_commands():
    base = Command("ls")
    extended = base.arg("-l")

    assert base.argv == ["ls"]
    assert extended.argv == ["ls", "-l"]


def test_command_is_frozen():
    command = Command("ls")
    with pytest.raises(ValidationError):
        command.program = "rm"


def test_args_appends_in_order():
    command = Command("git").arg("log").args(["--oneline", "-n", "3"])
    assert command.argv == ["git", "log", "--oneline", "-n", "3"]


def test_path_arguments_are_converted(tmp_path):
    command = Command(Path("/bin/echo")).arg(tmp_path).current_dir(tmp_path)
    assert command.program == "/bin/echo"
    assert command.arguments == (str(tmp_path),)
    assert command.cwd == str(tmp_path)


def test_cmd_shorthand():
    assert cmd("echo", "a", "b").argv == ["echo", "a", "b"]


def test_empty_program_is_accepted_at_build_time():
    command = Command("")
    assert command.program == ""
    assert command.argv == [""]


def test_env_last_write_wins():
    command = Command("env").env("A", "1").env("B", "2").env("A", "3")
    assert command.env_overrides == {"B": "2", "A": "3"}


def test_envs_sets_each_pair():
    command = Command("env").envs({"A": "1", "B": "2"})
    assert command.env_overrides == {"A": "1", "B": "2"}


def test_resolve_env_inherits_when_untouched():
    assert Command("env").resolve_env() is None


def test_resolve_env_overlays_inherited(monkeypatch):
    monkeypatch.setenv("PIPEKIT_TEST_KEEP", "kept")
    env = Command("env").env("PIPEKIT_TEST_NEW", "new").resolve_env()

    assert env["PIPEKIT_TEST_KEEP"] == "kept"
    assert env["PIPEKIT_TEST_NEW"] == "new"


def test_env_remove_drops_inherited_variable(monkeypatch):
    monkeypatch.setenv("PIPEKIT_TEST_GONE", "x")
    env = Command("env").env_remove("PIPEKIT_TEST_GONE").resolve_env()

    assert "PIPEKIT_TEST_GONE" not in env
    assert env.get("PATH") == os.environ.get("PATH")


def test_env_remove_after_set_wins():
    env = Command("env").env("A", "1").env_remove("A").resolve_env()
    assert "A" not in env


def test_env_clear_starts_empty_and_keeps_later_overrides():
    command = Command("env").env("BEFORE", "1").env_clear().env("AFTER", "2")

    assert command.resolve_env() == {"AFTER": "2"}
    assert command.clear_env is True


def test_no_echo_marks_command_quiet():
    assert Command("ls").no_echo().quiet is True
    assert Command("ls").quiet is False


def test_display_quotes_arguments():
    command = Command("echo").args(["hello world", "it's", ""])
    assert command.display() == "echo 'hello world' \"it's\" \"\""


def test_pipe_shortcuts_build_pipelines():
    pipeline = Command("a").pipe_both(Command("b"))

    assert isinstance(pipeline, Pipeline)
    assert [c.program for c in pipeline.stages] == ["a", "b"]
    assert [m.value for m in pipeline.edges] == ["both"]


def test_input_shortcut_attaches_input():
    pipeline = Command("cat").input("abc")
    assert pipeline.input_source == b"abc"


def test_command_is_hashable_and_env_cannot_be_mutated():
    command = Command("ls").env("A", "1")

    overrides = command.env_overrides
    overrides["B"] = "2"

    assert command.env_overrides == {"A": "1"}
    assert hash(command) == hash(Command("ls").env("A", "1"))
    assert command == Command("ls").env("A", "1")
