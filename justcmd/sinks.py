"""Fan-out writer combining the sinks attached to one stream."""

from __future__ import annotations

import codecs
import io
from collections.abc import Callable, Sequence
from typing import IO, Any

Sink = IO[Any]


class _TextTarget:
    """Feeds bytes into a text-only sink through an incremental decoder."""

    def __init__(self, sink: io.TextIOBase, encoding: str) -> None:
        self._sink = sink
        self._decoder = codecs.getincrementaldecoder(encoding)("replace")

    def write(self, chunk: bytes) -> None:
        text = self._decoder.decode(chunk)
        if text:
            self._sink.write(text)

    def close(self) -> None:
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._sink.write(tail)


def _is_text(sink: Sink) -> bool:
    return isinstance(sink, io.TextIOBase) or isinstance(getattr(sink, "encoding", None), str)


def _binary_writer(sink: Sink) -> Callable[[bytes], Any]:
    buffer = getattr(sink, "buffer", None)
    if buffer is None:
        return sink.write

    def _write(chunk: bytes) -> None:
        # pending text must reach the buffer before raw bytes do
        sink.flush()
        buffer.write(chunk)

    return _write


class FanOutWriter:
    """Write every chunk to each sink, in the order the sinks were attached.

    Binary sinks receive the raw bytes. A sink counts as text when it is an
    ``io.TextIOBase`` or carries a string ``encoding`` attribute. Text sinks
    receive the bytes through their ``.buffer`` when they have one
    (``sys.stdout``), otherwise as text decoded with ``encoding``. Any other
    object is treated as binary and must accept ``bytes``.
    """

    def __init__(self, sinks: Sequence[Sink], encoding: str = "utf-8") -> None:
        self._sinks = list(sinks)
        self._text_targets: list[_TextTarget] = []
        self._writers: list[Callable[[bytes], Any]] = []
        for sink in self._sinks:
            if _is_text(sink) and getattr(sink, "buffer", None) is None:
                target = _TextTarget(sink, encoding)
                self._text_targets.append(target)
                self._writers.append(target.write)
            else:
                self._writers.append(_binary_writer(sink))

    def __len__(self) -> int:
        return len(self._sinks)

    def write(self, chunk: bytes) -> int:
        for write in self._writers:
            write(chunk)
        return len(chunk)

    def flush(self) -> None:
        for sink in self._sinks:
            flush = getattr(sink, "flush", None)
            if flush is not None:
                flush()

    def close(self) -> None:
        """Emit any partially decoded text and flush; sinks stay open."""
        for target in self._text_targets:
            target.close()
        self.flush()


__all__ = ["FanOutWriter", "Sink"]
