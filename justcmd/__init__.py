"""justcmd - run external commands without threading errors through every call.

Example usage:
    from justcmd import command, decode_json_output, get_stdout, out, run_sh

    run_sh("make build")
    version = get_stdout(command("git", "describe", "--tags")).decode().strip()
    info = decode_json_output(["kubectl", "get", "pods", "-o", "json"], {})

Every failure goes to the failure handler instead of being returned. By
default the handler logs and exits; tests and services install another one
with ``set_fail_handler`` or build a ``Runner`` around their own handler.
"""

from justcmd.command import Command, Option, as_command, command, err, out, sh
from justcmd.errors import (
    AlreadyExecutedError,
    CommandError,
    DecodeShapeError,
    JustCmdError,
    PrefixedError,
    SinkError,
    SpawnError,
)
from justcmd.failure import (
    ExitFailureHandler,
    FailureHandler,
    LogFailureHandler,
    RaiseFailureHandler,
    RecordingFailureHandler,
    check,
    check_p,
    fail_handler,
    get_fail_handler,
    set_fail_handler,
)
from justcmd.runner import (
    Runner,
    decode_json,
    decode_json_output,
    decode_json_output_sh,
    get_stdout,
    get_stdout_sh,
    run,
    run_sh,
)

__version__ = "0.1.0"

__all__ = [
    # Commands and options
    "Command",
    "Option",
    "as_command",
    "command",
    "err",
    "out",
    "sh",
    # Running
    "Runner",
    "decode_json",
    "decode_json_output",
    "decode_json_output_sh",
    "get_stdout",
    "get_stdout_sh",
    "run",
    "run_sh",
    # Failure handling
    "ExitFailureHandler",
    "FailureHandler",
    "LogFailureHandler",
    "RaiseFailureHandler",
    "RecordingFailureHandler",
    "check",
    "check_p",
    "fail_handler",
    "get_fail_handler",
    "set_fail_handler",
    # Errors
    "AlreadyExecutedError",
    "CommandError",
    "DecodeShapeError",
    "JustCmdError",
    "PrefixedError",
    "SinkError",
    "SpawnError",
]
