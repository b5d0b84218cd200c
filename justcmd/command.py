"""Pending commands and the options that configure them before execution."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from justcmd.errors import AlreadyExecutedError
from justcmd.sinks import Sink

DEFAULT_SHELL = "/bin/sh"


@dataclass(kw_only=True)
class Command:
    """An external process invocation that has not run yet.

    Attributes:
        argv: Program followed by its arguments. The program is resolved
            through ``PATH`` when it is not a path.
        cwd: Working directory for the child, ``None`` for the current one.
        env: Full environment for the child, ``None`` to inherit.
        stdout: Sinks receiving the child's stdout, in attach order.
        stderr: Sinks receiving the child's stderr, in attach order.
    """

    argv: list[str]
    cwd: str | os.PathLike[str] | None = None
    env: Mapping[str, str] | None = None
    stdout: list[Sink] = field(default_factory=list)
    stderr: list[Sink] = field(default_factory=list)
    executed: bool = False

    def mark_executed(self) -> None:
        if self.executed:
            raise AlreadyExecutedError(f"command already executed: {self.argv}")
        self.executed = True


Option = Callable[[Command], None]


def command(
    program: str | os.PathLike[str],
    *args: str,
    cwd: str | os.PathLike[str] | None = None,
    env: Mapping[str, str] | None = None,
) -> Command:
    """Build a command running ``program`` with ``args``."""
    return Command(argv=[os.fspath(program), *args], cwd=cwd, env=env)


def sh(command_line: str, shell: str = DEFAULT_SHELL, flag: str = "-c") -> Command:
    """Build a command that hands ``command_line`` to a POSIX shell.

    Pipes, globs and variable expansion all work. Nothing is escaped: callers
    must not build ``command_line`` from untrusted input.
    """
    return Command(argv=[shell, flag, command_line])


def as_command(value: Command | Sequence[str]) -> Command:
    if isinstance(value, Command):
        return value
    if isinstance(value, (str, bytes)):
        raise TypeError("pass a sequence of arguments, or use sh() for a command line")
    argv = [os.fspath(part) for part in value]
    if not argv:
        raise ValueError("command needs at least a program name")
    return Command(argv=argv)


def out(sink: Sink) -> Option:
    """Also send stdout to ``sink``; sinks already attached keep their copy."""

    def _apply(cmd: Command) -> None:
        cmd.stdout.append(sink)

    return _apply


def err(sink: Sink) -> Option:
    """Also send stderr to ``sink``; sinks already attached keep their copy."""

    def _apply(cmd: Command) -> None:
        cmd.stderr.append(sink)

    return _apply


def apply_options(cmd: Command, options: Iterable[Option]) -> Command:
    for option in options:
        option(cmd)
    return cmd


__all__ = [
    "DEFAULT_SHELL",
    "Command",
    "Option",
    "apply_options",
    "as_command",
    "command",
    "err",
    "out",
    "sh",
]
