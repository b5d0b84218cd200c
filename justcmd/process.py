"""Spawn a command and pump its output streams into the attached sinks."""

from __future__ import annotations

import logging
import shlex
import signal
import subprocess
import threading
from typing import IO

from justcmd.command import Command
from justcmd.errors import SinkError, SpawnError
from justcmd.sinks import FanOutWriter

LOGGER = logging.getLogger(__name__)

_CHUNK_BYTES = 8192


def _forward(src: IO[bytes], sink: FanOutWriter, failures: list[BaseException]) -> None:
    try:
        for chunk in iter(lambda: src.read1(_CHUNK_BYTES), b""):
            sink.write(chunk)
        sink.close()
    except Exception as exc:  # reported by execute() once the child is done
        failures.append(exc)
        # keep draining so the child never blocks on a full pipe
        for _ in iter(lambda: src.read1(_CHUNK_BYTES), b""):
            pass
    finally:
        src.close()


def _interrupt(proc: subprocess.Popen[bytes]) -> int:
    """Pass SIGINT on to the child, escalating if it does not exit."""
    try:
        proc.send_signal(signal.SIGINT)
    except ProcessLookupError:
        pass
    try:
        return proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        try:
            proc.terminate()
        except ProcessLookupError:
            pass
    try:
        return proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()
        return proc.wait()


def execute(command: Command, *, inherit_stdio: bool = False) -> int:
    """Run ``command`` to completion and return its exit status.

    Streams with sinks attached are piped and copied into every sink on a
    reader thread. Streams without sinks, and stdin, go to the null device,
    or are shared with this process when ``inherit_stdio`` is set.

    Raises:
        AlreadyExecutedError: ``command`` was executed before.
        OSError: The program could not be started.
        SpawnError: Popen rejected the arguments (NUL bytes, bad cwd or env).
        SinkError: Writing to one of the sinks failed.
    """
    command.mark_executed()

    unattached = None if inherit_stdio else subprocess.DEVNULL
    writers = {
        "stdout": FanOutWriter(command.stdout) if command.stdout else None,
        "stderr": FanOutWriter(command.stderr) if command.stderr else None,
    }

    LOGGER.debug("Running command: %s", shlex.join(command.argv))
    try:
        proc = subprocess.Popen(
            command.argv,
            stdin=unattached,
            stdout=subprocess.PIPE if writers["stdout"] else unattached,
            stderr=subprocess.PIPE if writers["stderr"] else unattached,
            cwd=command.cwd,
            env=command.env,
        )
    except (ValueError, TypeError) as exc:
        raise SpawnError(f"start {command.argv[0]!r}: {exc}") from exc

    failures: list[BaseException] = []
    threads = []
    for stream, writer in ((proc.stdout, writers["stdout"]), (proc.stderr, writers["stderr"])):
        if writer is None or stream is None:
            continue
        thread = threading.Thread(target=_forward, args=(stream, writer, failures), daemon=True)
        thread.start()
        threads.append(thread)

    try:
        returncode = proc.wait()
    except KeyboardInterrupt:
        _interrupt(proc)
        for thread in threads:
            thread.join()
        raise

    for thread in threads:
        thread.join()

    LOGGER.debug("Command returned: %d", returncode)
    if failures:
        raise SinkError(f"write output: {failures[0]}") from failures[0]
    return returncode


__all__ = ["execute"]
