"""Integration tests for spawn failures and stage failures."""

import io
import os

import pytest

from pipekit import (
    Command,
    IoFailure,
    NonZeroExit,
    Pipeline,
    PipelineConsumed,
    SpawnFailure,
    Terminated,
)

MISSING = "pipekit-definitely-not-a-program"


def sh(script):
    return Command("sh").args(["-c", script])


def test_missing_first_program():
    with pytest.raises(SpawnFailure) as exc_info:
        Command(MISSING).output()

    error = exc_info.value
    assert error.stage == 0
    assert error.program == MISSING
    assert isinstance(error.error, FileNotFoundError)
    assert len(error.status) == 0
    assert MISSING in str(error)


def test_missing_middle_program_waits_for_earlier_stages():
    with pytest.raises(SpawnFailure) as exc_info:
        (
            Command("echo")
            .arg("hi")
            .pipe(Command(MISSING))
            .pipe(Command("wc"))
            .output()
        )

    error = exc_info.value
    assert error.stage == 1
    assert [stage.program for stage in error.status.stages] == ["echo"]


def test_missing_program_with_input_attached(big_payload):
    with pytest.raises(SpawnFailure) as exc_info:
        Command("cat").input_bytes(big_payload).pipe(Command(MISSING)).output()

    assert exc_info.value.stage == 1


def test_nonzero_exit_keeps_partial_output():
    with pytest.raises(NonZeroExit) as exc_info:
        Command("echo").arg("partial").pipe(sh("cat; exit 3")).output()

    error = exc_info.value
    assert error.stage == 1
    assert error.code == 3
    assert error.output == b"partial\n"
    assert error.status.stages[0].success


def test_terminated_stage():
    with pytest.raises(Terminated) as exc_info:
        sh("kill -9 $$").pipe(Command("cat")).output()

    error = exc_info.value
    assert error.stage == 0
    assert error.signal == 9
    assert error.status.stages[0].code is None


def test_earliest_failure_is_reported():
    with pytest.raises(NonZeroExit) as exc_info:
        sh("exit 2").pipe(sh("cat >/dev/null; exit 5")).run()

    assert exc_info.value.stage == 0
    assert exc_info.value.code == 2


def test_check_false_returns_status():
    status = sh("exit 4").pipe(Command("cat")).run(check=False)

    assert not status.success()
    assert list(status.code()) == [4, 0]
    assert status.first_failure().index == 0


def test_output_without_check():
    output = sh("echo kept; exit 1").output(check=False)
    assert output == "kept\n"


def test_closed_sink_raises_io_failure():
    sink = io.BytesIO()
    sink.close()

    with pytest.raises(IoFailure):
        Command("echo").arg("lost").stream_to(sink)


def test_pipeline_can_only_be_spawned_once():
    pipeline = Pipeline(Command("true"))
    pipeline.run()

    with pytest.raises(PipelineConsumed):
        pipeline.run()


def test_empty_program_fails_at_spawn():
    with pytest.raises(SpawnFailure) as exc_info:
        Command("").run()

    assert exc_info.value.stage == 0
    assert isinstance(exc_info.value.error, OSError)


def test_text_sink_failure_reaps_every_stage(tmp_path):
    pidfile = tmp_path / "pid"
    writer = Command("sh").args(["-c", 'echo $$ > "$1"; echo hi', "sh", pidfile])

    with pytest.raises(IoFailure) as exc_info:
        writer.pipe(Command("cat")).stream_to(io.StringIO())

    assert isinstance(exc_info.value.error, TypeError)
    # Reaped children no longer exist, not even as zombies
    with pytest.raises(ProcessLookupError):
        os.kill(int(pidfile.read_text()), 0)
