from __future__ import annotations

import io
import sys

import pytest

import justcmd
from justcmd import (
    CommandError,
    PrefixedError,
    Runner,
    RecordingFailureHandler,
    command,
    err,
    get_stdout,
    get_stdout_sh,
    out,
    run,
    run_sh,
    sh,
)


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def test_get_stdout() -> None:
    result = get_stdout(command("echo", "hello"))
    assert result == b"hello\n"


def test_get_stdout_accepts_argument_list() -> None:
    assert get_stdout(["echo", "hello"]) == b"hello\n"


def test_get_stdout_with_options() -> None:
    buf = io.BytesIO()
    result = get_stdout(command("echo", "hello"), out(buf))
    assert result == b"hello\n"
    assert buf.getvalue() == b"hello\n"


def test_get_stdout_option_receives_stderr_copy(recorder: RecordingFailureHandler) -> None:
    buf = io.BytesIO()
    get_stdout(_python("import sys; sys.stderr.write('oops'); sys.exit(2)"), err(buf))
    assert buf.getvalue() == b"oops"
    assert "oops" in str(recorder.last)


def test_get_stdout_nice_errors(recorder: RecordingFailureHandler) -> None:
    get_stdout(command("bash", "-c", "echo 'the stderr contents' 1>&2; exit 3"))

    got = recorder.last
    assert got is not None
    assert "exit status 3" in str(got)
    assert "the stderr contents" in str(got)


def test_get_stdout_error_shape(recorder: RecordingFailureHandler) -> None:
    get_stdout_sh("echo partial; echo broken >&2; exit 4")

    got = recorder.last
    assert isinstance(got, PrefixedError)
    assert got.prefix == "output"
    assert isinstance(got.error, CommandError)
    assert got.error.returncode == 4
    assert got.error.stderr == b"broken\n"
    assert str(got) == "output: exit status 4; stderr: broken\n"


def test_get_stdout_returns_partial_output_after_failure(recorder: RecordingFailureHandler) -> None:
    result = get_stdout_sh("echo partial; exit 1")
    assert result == b"partial\n"
    assert len(recorder.errors) == 1


def test_get_stdout_binary_output() -> None:
    payload = bytes(range(256))
    result = get_stdout(_python("import sys; sys.stdout.buffer.write(bytes(range(256)))"))
    assert result == payload


def test_get_stdout_large_output() -> None:
    result = get_stdout(_python("import sys; sys.stdout.write('x' * 1_000_000)"))
    assert len(result) == 1_000_000


def test_spawn_failure_is_prefixed(recorder: RecordingFailureHandler) -> None:
    result = get_stdout(command("justcmd-definitely-missing-binary"))
    assert result == b""
    got = recorder.last
    assert isinstance(got, PrefixedError)
    assert isinstance(got.error, FileNotFoundError)
    assert str(got).startswith("output: ")


def test_run_passes_exit_error_unmodified(recorder: RecordingFailureHandler) -> None:
    run(_python("raise SystemExit(5)"))
    got = recorder.last
    assert isinstance(got, CommandError)
    assert str(got) == "exit status 5"
    assert got.stderr is None


def test_run_spawn_failure_unmodified(recorder: RecordingFailureHandler) -> None:
    run(["justcmd-definitely-missing-binary", "--flag"])
    assert isinstance(recorder.last, FileNotFoundError)


def test_run_success_does_not_call_handler(recorder: RecordingFailureHandler) -> None:
    buf = io.BytesIO()
    run(command("echo", "hello"), out(buf))
    assert recorder.errors == []
    assert buf.getvalue() == b"hello\n"


def test_run_sh_matches_run_of_shell_command() -> None:
    via_helper = io.BytesIO()
    via_command = io.BytesIO()
    run_sh("echo hello", out(via_helper))
    run(sh("echo hello"), out(via_command))
    assert via_helper.getvalue() == via_command.getvalue() == b"hello\n"


def test_run_sh_supports_shell_features() -> None:
    assert get_stdout_sh("printf 'a\\nb\\n' | wc -l | tr -d ' '") == b"2\n"


def test_signal_exit_is_reported(recorder: RecordingFailureHandler) -> None:
    run_sh("kill -TERM $$")
    got = recorder.last
    assert isinstance(got, CommandError)
    assert got.returncode < 0
    assert str(got).startswith("signal: ")


def test_command_runs_once(recorder: RecordingFailureHandler) -> None:
    cmd = command("true")
    run(cmd)
    run(cmd)
    assert isinstance(recorder.last, justcmd.AlreadyExecutedError)
    assert len(recorder.errors) == 1


def test_command_cwd_and_env(tmp_path) -> None:
    cmd = command(
        sys.executable,
        "-c",
        "import os; print(os.getcwd()); print(os.environ['JUSTCMD_TEST'])",
        cwd=tmp_path,
        env={"JUSTCMD_TEST": "value"},
    )
    lines = get_stdout(cmd).decode().splitlines()
    assert lines[0] == str(tmp_path.resolve())
    assert lines[1] == "value"


def test_replaced_handler_receives_error_without_exit() -> None:
    seen: list[BaseException] = []
    justcmd.set_fail_handler(seen.append)

    run_sh("exit 7")

    assert len(seen) == 1
    assert "exit status 7" in str(seen[0])


def test_default_handler_terminates(caplog) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_sh("exit 9")
    assert excinfo.value.code == 1
    assert "exit status 9" in caplog.text


def test_runner_uses_injected_handler(recorder: RecordingFailureHandler) -> None:
    own = RecordingFailureHandler()
    runner = Runner(handler=own)

    runner.run_sh("exit 2")

    assert "exit status 2" in str(own.last)
    assert recorder.errors == []


def test_runner_without_handler_follows_global_handler() -> None:
    runner = Runner()
    first = RecordingFailureHandler()
    second = RecordingFailureHandler()

    with justcmd.fail_handler(first):
        runner.run_sh("exit 1")
    with justcmd.fail_handler(second):
        runner.run_sh("exit 1")

    assert len(first.errors) == 1
    assert len(second.errors) == 1


def test_runner_raise_handler() -> None:
    runner = Runner(handler=justcmd.RaiseFailureHandler())
    with pytest.raises(PrefixedError, match="exit status 3"):
        runner.get_stdout_sh("exit 3")


def test_rejected_arguments_reach_handler(recorder: RecordingFailureHandler) -> None:
    run(["echo", "a\x00b"])
    got = recorder.last
    assert isinstance(got, justcmd.SpawnError)
    assert isinstance(got.__cause__, ValueError)
    assert "null byte" in str(got)


def test_rejected_environment_is_prefixed(recorder: RecordingFailureHandler) -> None:
    result = get_stdout(command("echo", "hi", env={"BAD": "a\x00b"}))
    assert result == b""
    got = recorder.last
    assert isinstance(got, PrefixedError)
    assert got.prefix == "output"
    assert isinstance(got.error, justcmd.SpawnError)
