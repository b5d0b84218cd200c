"""Process-wide failure handler and the strategies it can be set to.

Every error in justcmd ends up here instead of being returned to the caller.
The default strategy logs the error and exits the process, which suits short
scripts. Long-running programs and tests install another strategy, either
globally with ``set_fail_handler`` or per ``Runner``.

The global handler is a plain module attribute with no locking. Swap it at
startup or in single-threaded test setup only.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from compoconf import ConfigInterface, register

from justcmd.config.schema import FailureHandlerInterface
from justcmd.errors import PrefixedError
from justcmd.utils.logging_config import parse_level

LOGGER = logging.getLogger(__name__)

FailureHandler = Callable[[BaseException], None]


class BaseFailureHandler(FailureHandlerInterface):
    config: ConfigInterface

    def __init__(self, config: ConfigInterface) -> None:
        self.config = config

    def handle(self, error: BaseException) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def __call__(self, error: BaseException) -> None:
        self.handle(error)


@dataclass
class ExitFailureHandlerConfig(ConfigInterface):
    class_name: str = "ExitFailureHandler"
    exit_code: int = 1


@register
class ExitFailureHandler(BaseFailureHandler):
    """Log at CRITICAL and terminate the process."""

    config: ExitFailureHandlerConfig

    def __init__(self, config: ExitFailureHandlerConfig | None = None) -> None:
        super().__init__(config or ExitFailureHandlerConfig())

    def handle(self, error: BaseException) -> None:
        LOGGER.critical("%s", error)
        sys.exit(self.config.exit_code)


@dataclass
class RaiseFailureHandlerConfig(ConfigInterface):
    class_name: str = "RaiseFailureHandler"


@register
class RaiseFailureHandler(BaseFailureHandler):
    """Raise the error at the call site, for callers that prefer try/except."""

    config: RaiseFailureHandlerConfig

    def __init__(self, config: RaiseFailureHandlerConfig | None = None) -> None:
        super().__init__(config or RaiseFailureHandlerConfig())

    def handle(self, error: BaseException) -> None:
        raise error


@dataclass
class LogFailureHandlerConfig(ConfigInterface):
    class_name: str = "LogFailureHandler"
    level: str = "ERROR"


@register
class LogFailureHandler(BaseFailureHandler):
    config: LogFailureHandlerConfig

    def __init__(self, config: LogFailureHandlerConfig | None = None) -> None:
        super().__init__(config or LogFailureHandlerConfig())

    def handle(self, error: BaseException) -> None:
        LOGGER.log(parse_level(self.config.level, logging.ERROR), "%s", error)


@dataclass
class RecordingFailureHandlerConfig(ConfigInterface):
    class_name: str = "RecordingFailureHandler"


@register
class RecordingFailureHandler(BaseFailureHandler):
    """Keep every error for later inspection."""

    config: RecordingFailureHandlerConfig

    def __init__(self, config: RecordingFailureHandlerConfig | None = None) -> None:
        super().__init__(config or RecordingFailureHandlerConfig())
        self.errors: list[BaseException] = []

    def handle(self, error: BaseException) -> None:
        self.errors.append(error)

    @property
    def last(self) -> BaseException | None:
        return self.errors[-1] if self.errors else None


_FAIL_HANDLER: FailureHandler = ExitFailureHandler()


def get_fail_handler() -> FailureHandler:
    return _FAIL_HANDLER


def set_fail_handler(handler: FailureHandler) -> FailureHandler:
    """Replace the process-wide handler and return the previous one."""
    global _FAIL_HANDLER
    previous = _FAIL_HANDLER
    _FAIL_HANDLER = handler
    return previous


@contextmanager
def fail_handler(handler: FailureHandler) -> Iterator[FailureHandler]:
    """Install ``handler`` for the duration of the ``with`` block."""
    previous = set_fail_handler(handler)
    try:
        yield handler
    finally:
        set_fail_handler(previous)


def check(error: BaseException | None) -> None:
    """Pass ``error`` to the process-wide handler unless it is ``None``."""
    if error is not None:
        _FAIL_HANDLER(error)


def check_p(prefix: str, error: BaseException | None) -> None:
    """Like ``check`` but labels the error as ``<prefix>: <error>``."""
    if error is not None:
        _FAIL_HANDLER(PrefixedError(prefix, error))


__all__ = [
    "BaseFailureHandler",
    "ExitFailureHandler",
    "ExitFailureHandlerConfig",
    "FailureHandler",
    "LogFailureHandler",
    "LogFailureHandlerConfig",
    "RaiseFailureHandler",
    "RaiseFailureHandlerConfig",
    "RecordingFailureHandler",
    "RecordingFailureHandlerConfig",
    "check",
    "check_p",
    "fail_handler",
    "get_fail_handler",
    "set_fail_handler",
]
