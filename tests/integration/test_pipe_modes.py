"""Integration tests for the three edge modes."""

from pipekit import Command, PipeMode, Pipeline

BOTH_STREAMS = "echo out; echo err >&2"


def sh(script):
    return Command("sh").args(["-c", script])


def test_stdout_edge_uppercases():
    output = (
        Command("echo")
        .arg("hello world")
        .pipe(Command("tr").args(["[:lower:]", "[:upper:]"]))
        .output()
    )
    assert output == "HELLO WORLD\n"


def test_both_edge_carries_both_streams():
    output = sh(BOTH_STREAMS).pipe_both(Command("wc").arg("-l")).output()
    assert int(output) == 2


def test_stderr_edge_carries_only_stderr():
    # stdout of the upstream stage stays inherited, so only the stderr
    # message reaches wc
    output = (
        sh("echo error message >&2")
        .pipe_stderr(Command("wc").arg("-c"))
        .output()
    )
    assert int(output) == 14


def test_stderr_edge_leaves_stdout_out_of_the_pipe():
    output = sh("echo err >&2").pipe_stderr(Command("cat")).output()
    assert output == "err\n"


def test_stdout_edge_hides_stderr():
    output = sh(BOTH_STREAMS).pipe(Command("cat")).output()
    assert output == "out\n"


def test_mixed_modes_apply_per_edge():
    output = (
        Pipeline(sh("echo visible; echo hidden >&2"))
        .pipe(sh("cat; echo extra >&2"))
        .pipe_both(Command("sort"))
        .output()
    )
    assert output.splitlines() == ["extra", "visible"]


def test_capture_both_on_last_stage():
    output = sh(BOTH_STREAMS).to_pipeline().capture(PipeMode.BOTH).output()
    assert sorted(output.splitlines()) == ["err", "out"]


def test_capture_stderr_on_last_stage():
    output = sh(BOTH_STREAMS).to_pipeline().capture(PipeMode.STDERR).output()
    assert output == "err\n"


def test_stages_keep_their_own_env_and_cwd(tmp_path):
    (tmp_path / "marker.txt").write_text("x")

    output = (
        Command("ls")
        .current_dir(tmp_path)
        .pipe(sh('cat; echo "$PIPEKIT_TEST_VALUE"').env("PIPEKIT_TEST_VALUE", "42"))
        .output()
    )

    assert output.splitlines() == ["marker.txt", "42"]


def test_env_remove_and_clear():
    removed = (
        sh('echo "${PIPEKIT_TEST_VALUE:-unset}"')
        .env("PIPEKIT_TEST_VALUE", "1")
        .env_remove("PIPEKIT_TEST_VALUE")
        .output()
    )
    cleared = Command("/usr/bin/env").env_clear().env("ONLY", "this").output()

    assert removed == "unset\n"
    assert cleared == "ONLY=this\n"
