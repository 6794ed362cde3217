"""Pipeline coordinator — direct annotation, or annotation around an inner filter.

In wrapping mode the diff is piped through an inner, line-preserving filter
(e.g. ``diff-highlight``) and the prefixes computed from the original text
are re-attached to the filter's output. Two threads take part:

* the calling thread reads the diff, computes each prefix, queues it and
  then writes the line to the filter's stdin;
* a drain thread reads the filter's stdout and pairs every output line with
  the next queued prefix.

Only the queue is shared. Pipe backpressure throttles the feeding side when
the filter falls behind.
"""

from __future__ import annotations

import logging
import queue
import subprocess
import threading
from typing import IO, Iterable, List, Optional, Sequence

from blamediff.annotator.engine import DiffAnnotator

logger = logging.getLogger(__name__)

_END = object()  # queued after the last prefix


class PipelineError(Exception):
    """Raised when the inner filter cannot be run or breaks the line contract."""


def _chomp(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def direct_diff(annotator: DiffAnnotator, reader: Iterable[str], writer: IO[str]) -> None:
    """Write each line preceded by its prefix."""
    for raw in reader:
        line = _chomp(raw)
        prefix = annotator.process_line(line)
        if prefix is not None:
            writer.write(prefix)
        writer.write(line)
        writer.write("\n")


class _Drain(threading.Thread):
    """Read the filter's output and write it with the queued prefixes."""

    def __init__(
        self,
        proc: subprocess.Popen,
        prefixes: "queue.Queue[object]",
        writer: IO[str],
    ) -> None:
        super().__init__(name="blamediff-drain", daemon=True)
        self.proc = proc
        self.prefixes = prefixes
        self.writer = writer
        self.error: Optional[Exception] = None

    def run(self) -> None:
        try:
            self._pair_lines()
        except Exception as exc:  # re-raised by the feeding thread
            self.error = exc
            # unblock a feeding thread stuck writing to a full pipe
            self.proc.kill()

    def _pair_lines(self) -> None:
        assert self.proc.stdout is not None
        emitted = 0
        for raw in self.proc.stdout:
            prefix = self.prefixes.get()
            if prefix is _END:
                raise PipelineError(
                    f"inner filter emitted more lines than its input ({emitted})"
                )
            if prefix is not None:
                self.writer.write(prefix)  # type: ignore[arg-type]
            self.writer.write(_chomp(raw))
            self.writer.write("\n")
            emitted += 1

        if self.prefixes.get() is not _END:
            raise PipelineError(
                f"inner filter emitted fewer lines than its input (got {emitted})"
            )


def _spawn(inner: Sequence[str]) -> subprocess.Popen:
    try:
        return subprocess.Popen(
            list(inner),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="surrogateescape",
        )
    except OSError as exc:
        raise PipelineError(f"Inner cmd: {inner[0]}: {exc}") from exc


def wrapping_diff(
    annotator: DiffAnnotator,
    reader: Iterable[str],
    writer: IO[str],
    inner: Sequence[str],
) -> None:
    """Annotate the output of *inner* run over the diff read from *reader*."""
    proc = _spawn(inner)
    logger.debug("started inner filter %s (pid %s)", inner, proc.pid)
    assert proc.stdin is not None

    prefixes: "queue.Queue[object]" = queue.Queue()
    drain = _Drain(proc, prefixes, writer)
    drain.start()

    feed_error: Optional[BrokenPipeError] = None
    try:
        for raw in reader:
            line = _chomp(raw)
            prefixes.put(annotator.process_line(line))
            proc.stdin.write(line)
            proc.stdin.write("\n")
    except BrokenPipeError as exc:
        feed_error = exc
    finally:
        try:
            proc.stdin.close()
        except BrokenPipeError:
            pass  # filter already exited; its output is still drained
        prefixes.put(_END)
        drain.join()
        returncode = proc.wait()
        logger.debug("inner filter exited with %d", returncode)

    if drain.error is not None:
        raise drain.error
    if feed_error is not None:
        raise PipelineError(f"inner filter stopped reading its input: {feed_error}") from feed_error


def annotate_diff(
    annotator: DiffAnnotator,
    reader: Iterable[str],
    writer: IO[str],
    inner: Optional[List[str]] = None,
) -> None:
    """Annotate the diff from *reader* onto *writer*, through *inner* if given."""
    if inner:
        wrapping_diff(annotator, reader, writer, inner)
    else:
        direct_diff(annotator, reader, writer)
