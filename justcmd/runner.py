"""Run commands, capture their output and decode it as JSON.

None of these functions return an error. Failures go to a failure handler
(see ``justcmd.failure``): the module-level functions use the process-wide
handler, a ``Runner`` uses the handler it was built with.
"""

from __future__ import annotations

import io
import json
from collections.abc import MutableMapping, MutableSequence, Sequence
from typing import IO, Any

from justcmd.command import Command, Option, apply_options, as_command, err, out, sh
from justcmd.config.schema import FailureHandlerInterface, RunnerConfig
from justcmd.errors import CommandError, DecodeShapeError, JustCmdError, PrefixedError
from justcmd.failure import FailureHandler, get_fail_handler
from justcmd.process import execute
from justcmd.utils.logging_config import configure_logging

CommandLike = Command | Sequence[str]
JSONSource = bytes | bytearray | str | IO[Any]

_DECODER = json.JSONDecoder()


def _json_text(source: JSONSource) -> str:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8")
    if isinstance(source, str):
        return source
    data = source.read()
    return data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data


def _load_first_value(text: str) -> Any:
    # only the first JSON value is read, trailing output is ignored
    start = len(text) - len(text.lstrip())
    value, _ = _DECODER.raw_decode(text, start)
    return value


def _fill(result: Any, value: Any) -> Any:
    if result is None:
        return value
    if isinstance(result, MutableMapping):
        if not isinstance(value, dict):
            raise DecodeShapeError(
                f"cannot decode JSON {_json_kind(value)} into {type(result).__name__}"
            )
        result.update(value)
        return result
    if isinstance(result, MutableSequence):
        if not isinstance(value, list):
            raise DecodeShapeError(
                f"cannot decode JSON {_json_kind(value)} into {type(result).__name__}"
            )
        result[:] = value
        return result
    raise DecodeShapeError(f"unsupported destination type {type(result).__name__}")


def _json_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "bool"
    if value is None:
        return "null"
    return "number"


class Runner:
    """Command runner bound to one failure handler and one ``RunnerConfig``.

    Args:
        handler: Called with every error. ``None`` uses whatever process-wide
            handler is installed at the time of the failure.
        config: Shell and stdio settings.
    """

    def __init__(
        self,
        handler: FailureHandler | None = None,
        config: RunnerConfig | None = None,
    ) -> None:
        self.config = config or RunnerConfig()
        self._handler = handler

    @classmethod
    def from_config(cls, config: RunnerConfig) -> Runner:
        handler = None
        if config.failure_handler is not None:
            handler = config.failure_handler.instantiate(FailureHandlerInterface)
        if config.log_level is not None:
            configure_logging(config.log_level)
        return cls(handler=handler, config=config)

    @property
    def handler(self) -> FailureHandler:
        return self._handler if self._handler is not None else get_fail_handler()

    def check(self, error: BaseException | None) -> None:
        if error is not None:
            self.handler(error)

    def check_p(self, prefix: str, error: BaseException | None) -> None:
        if error is not None:
            self.handler(PrefixedError(prefix, error))

    def sh(self, command_line: str) -> Command:
        return sh(command_line, shell=self.config.shell, flag=self.config.shell_flag)

    def _execute(self, cmd: Command) -> int:
        return execute(cmd, inherit_stdio=self.config.inherit_stdio)

    def run(self, command: CommandLike, *options: Option) -> None:
        """Run ``command``; a spawn error or non-zero exit goes to the handler as is."""
        cmd = apply_options(as_command(command), options)
        try:
            returncode = self._execute(cmd)
        except (OSError, JustCmdError) as exc:
            self.check(exc)
            return
        if returncode != 0:
            self.check(CommandError(cmd.argv, returncode))

    def run_sh(self, command_line: str, *options: Option) -> None:
        self.run(self.sh(command_line), *options)

    def get_stdout(self, command: CommandLike, *options: Option) -> bytes:
        """Run ``command`` and return everything it wrote to stdout.

        Sinks passed through ``options`` still get a copy of both streams.
        On failure the handler receives ``output: exit status N; stderr: ...``
        and whatever stdout was captured so far is returned.
        """
        cmd = apply_options(as_command(command), options)
        stdout, stderr = io.BytesIO(), io.BytesIO()
        apply_options(cmd, (out(stdout), err(stderr)))
        try:
            returncode = self._execute(cmd)
        except (OSError, JustCmdError) as exc:
            self.check_p("output", exc)
            return stdout.getvalue()
        if returncode != 0:
            self.check_p("output", CommandError(cmd.argv, returncode, stderr=stderr.getvalue()))
        return stdout.getvalue()

    def get_stdout_sh(self, command_line: str, *options: Option) -> bytes:
        return self.get_stdout(self.sh(command_line), *options)

    def decode_json(self, source: JSONSource, result: Any = None) -> Any:
        """Decode the first JSON value in ``source``.

        ``result`` may be a mutable mapping (decoded keys are merged into it,
        other keys are kept), a mutable sequence (contents replaced) or ``None``. The decoded value is returned either way. Parse
        and shape errors go to the handler labelled ``decode json``.
        """
        try:
            return _fill(result, _load_first_value(_json_text(source)))
        except (ValueError, DecodeShapeError) as exc:
            self.check_p("decode json", exc)
            return result

    def decode_json_output(self, command: CommandLike, result: Any = None, *options: Option) -> Any:
        return self.decode_json(self.get_stdout(command, *options), result)

    def decode_json_output_sh(self, command_line: str, result: Any = None, *options: Option) -> Any:
        return self.decode_json_output(self.sh(command_line), result, *options)


_DEFAULT_RUNNER = Runner()


def run(command: CommandLike, *options: Option) -> None:
    _DEFAULT_RUNNER.run(command, *options)


def run_sh(command_line: str, *options: Option) -> None:
    """Run ``command_line`` through ``/bin/sh -c``.

    The line is not escaped in any way; never build it from untrusted input.
    """
    _DEFAULT_RUNNER.run_sh(command_line, *options)


def get_stdout(command: CommandLike, *options: Option) -> bytes:
    return _DEFAULT_RUNNER.get_stdout(command, *options)


def get_stdout_sh(command_line: str, *options: Option) -> bytes:
    return _DEFAULT_RUNNER.get_stdout_sh(command_line, *options)


def decode_json(source: JSONSource, result: Any = None) -> Any:
    return _DEFAULT_RUNNER.decode_json(source, result)


def decode_json_output(command: CommandLike, result: Any = None, *options: Option) -> Any:
    return _DEFAULT_RUNNER.decode_json_output(command, result, *options)


def decode_json_output_sh(command_line: str, result: Any = None, *options: Option) -> Any:
    return _DEFAULT_RUNNER.decode_json_output_sh(command_line, result, *options)


__all__ = [
    "Runner",
    "decode_json",
    "decode_json_output",
    "decode_json_output_sh",
    "get_stdout",
    "get_stdout_sh",
    "run",
    "run_sh",
]
