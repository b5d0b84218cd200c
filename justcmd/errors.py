"""Exception types delivered to the failure handler."""

from __future__ import annotations

import signal
from collections.abc import Sequence


class JustCmdError(RuntimeError):
    """Base class for errors raised inside justcmd."""


class CommandError(JustCmdError):
    """A process ran but did not exit successfully.

    ``str()`` reads ``exit status N`` (or ``signal: <name>`` when the child was
    killed by a signal). When stderr was captured, its full text is appended
    as ``; stderr: <text>``.
    """

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stderr: bytes | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self._format())

    def _format(self) -> str:
        if self.returncode < 0:
            description = signal.strsignal(-self.returncode) or str(-self.returncode)
            message = f"signal: {description.lower()}"
        else:
            message = f"exit status {self.returncode}"
        if self.stderr is not None:
            message += f"; stderr: {self.stderr.decode('utf-8', 'replace')}"
        return message

    def __str__(self) -> str:
        return self._format()


class PrefixedError(JustCmdError):
    """Attach a short static label to another error without replacing it."""

    def __init__(self, prefix: str, error: BaseException) -> None:
        self.prefix = prefix
        self.error = error
        super().__init__(f"{prefix}: {error}")
        self.__cause__ = error


class AlreadyExecutedError(JustCmdError):
    """A command object was handed to the runner a second time."""


class DecodeShapeError(JustCmdError):
    """Decoded JSON does not fit the caller supplied destination."""


class SpawnError(JustCmdError):
    """The process could not be started because its arguments were rejected."""


class SinkError(JustCmdError):
    """Writing child output into one of the configured sinks failed."""


__all__ = [
    "AlreadyExecutedError",
    "CommandError",
    "DecodeShapeError",
    "JustCmdError",
    "PrefixedError",
    "SinkError",
    "SpawnError",
]
