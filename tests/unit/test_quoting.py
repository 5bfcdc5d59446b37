"""Tests for display quoting."""

from pathlib import Path

import pytest

from pipekit.quoting import join_arguments, quote_argument


@pytest.mark.parametrize(
    "arg, expected",
    [
        ("hello", "hello"),
        ("--flag=value", "'--flag=value'"),
        ("hello world", "'hello world'"),
        ("*.py", "'*.py'"),
        ("$HOME", "'$HOME'"),
        ("a|b", "'a|b'"),
        ("", '""'),
        ("it's", '"it\'s"'),
        ('say "hi" it\'s', '"say \\"hi\\" it\'s"'),
        ("line1\nline2", "'line1\\nline2'"),
        ("tab\there", "'tab\\there'"),
        ("bell\x07", "'bell\\x07'"),
    ],
)
def test_quote_argument(arg, expected):
    assert quote_argument(arg) == expected


def test_quote_argument_accepts_paths():
    assert quote_argument(Path("/tmp/a b")) == "'/tmp/a b'"


def test_single_quote_with_control_character_is_escaped():
    assert quote_argument("it's\n") == '"it\'s\\n"'


def test_join_arguments():
    assert join_arguments(["grep", "-e", "a b"]) == "grep -e 'a b'"
