"""Configuration dataclasses and registries for justcmd.

These types are designed for use with compoconf so that failure handling
strategies can be selected declaratively from configuration files.
"""

from __future__ import annotations

from dataclasses import dataclass

from compoconf import ConfigInterface, RegistrableConfigInterface, register_interface


@register_interface
class FailureHandlerInterface(RegistrableConfigInterface):
    """Strategy invoked with every error instead of returning it.

    Implementations are callables taking the exception. They decide whether
    the process terminates, the error is logged, recorded or raised.
    """


@dataclass(kw_only=True)
class RunnerConfig(ConfigInterface):
    """Settings for a ``Runner``.

    Attributes:
        shell: Shell used by the ``*_sh`` helpers.
        shell_flag: Flag making ``shell`` read the command from its argument.
        inherit_stdio: Share this process' stdin/stdout/stderr with the child
            for streams that have no sink attached, instead of the null device.
        failure_handler: Handler strategy for this runner. ``None`` defers to
            the process-wide handler.
        log_level: When set, ``Runner.from_config`` sends justcmd logs to
            stderr at this level.
    """

    class_name: str = "Runner"
    shell: str = "/bin/sh"
    shell_flag: str = "-c"
    inherit_stdio: bool = False
    log_level: str | None = None
    failure_handler: FailureHandlerInterface.cfgtype | None = None


__all__ = ["FailureHandlerInterface", "RunnerConfig"]
