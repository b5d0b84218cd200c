"""Typed configuration for justcmd runners."""

from justcmd.config.schema import FailureHandlerInterface, RunnerConfig

__all__ = ["FailureHandlerInterface", "RunnerConfig"]
