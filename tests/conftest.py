"""Pytest configuration and shared fixtures."""

import shutil

import pytest
from click.testing import CliRunner

from pipekit.cli import cli

POSIX_TOOLS = ("sh", "cat", "tr", "wc", "head", "echo", "sort", "ls")


def pytest_collection_modifyitems(config, items):
    """Skip tests that shell out when the POSIX tools are missing."""
    missing = [tool for tool in POSIX_TOOLS if shutil.which(tool) is None]
    if not missing:
        return
    skip = pytest.mark.skip(reason=f"missing tools: {', '.join(missing)}")
    for item in items:
        if "unit" not in item.nodeid:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def quiet_echo(monkeypatch):
    """Keep pipeline echo out of test output.

    Tests that exercise echo remove the variable themselves.
    """
    monkeypatch.setenv("PIPEKIT_NO_ECHO", "1")
    monkeypatch.delenv("NO_ECHO", raising=False)
    monkeypatch.delenv("PIPEKIT_CHUNK_SIZE", raising=False)
    yield


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke the CLI with args and optional input.

    Usage:
        result = invoke(["run", "--", "echo", "hi", "|", "wc", "-c"])
        result = invoke(["run", "--input", "-", "--", "cat"], input_data=b"x")

    Read ``result.stdout``: depending on the click version ``result.output``
    may also contain stderr.
    """

    def _invoke(args, input_data=None):
        return cli_runner.invoke(cli, args, input=input_data)

    return _invoke


@pytest.fixture
def big_payload():
    """Ten megabytes of lowercase text, far larger than any pipe buffer."""
    line = b"the quick brown fox jumps over the lazy dog\n"
    repeat = (10 * 1024 * 1024) // len(line) + 1
    return (line * repeat)[: 10 * 1024 * 1024]
