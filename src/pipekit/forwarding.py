"""Copy loops between external sources/sinks and pipe endpoints.

Background forwarding runs one thread per copy: the stdin feeder for stage 0
and, for ``Pipeline.spawn_to``, the output drainer. Each loop copies until
EOF and closes its pipe end on the way out, whatever happened, so a failed
copy never leaves a child blocked on a pipe nobody will service.
"""

from __future__ import annotations

import logging
import threading
from typing import IO, Any, BinaryIO, Callable, Iterable, Iterator, Optional, Union

from .context import chunk_size
from .exceptions import IoFailure

logger = logging.getLogger(__name__)

InputSource = Union[bytes, bytearray, memoryview, BinaryIO, Iterable[bytes]]


def iter_chunks(source: InputSource, size: int) -> Iterator[bytes]:
    """Yield the bytes of an input source.

    Buffers are yielded whole (written in one shot); readers are consumed
    ``size`` bytes at a time; anything else is treated as an iterable of
    chunks. Text chunks are encoded as UTF-8.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield bytes(source)
        return

    read = getattr(source, "read", None)
    if read is not None:
        while chunk := read(size):
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
        return

    for chunk in source:
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def close_quietly(stream: Optional[IO[Any]]) -> None:
    """Close a pipe end, ignoring errors from flushing into a dead reader."""
    if stream is None:
        return
    try:
        stream.close()
    except OSError:
        # Buffered data could not reach a reader that already exited
        pass


def feed(source: InputSource, pipe: BinaryIO, size: Optional[int] = None) -> None:
    """Copy ``source`` into ``pipe`` until exhausted, then close ``pipe``.

    Errors end the copy and are logged, never raised: a stage that stops
    reading early (``head``) is a normal way for a pipeline to finish.
    """
    size = size or chunk_size()
    written = 0
    try:
        for chunk in iter_chunks(source, size):
            pipe.write(chunk)
            written += len(chunk)
        pipe.flush()
    except BrokenPipeError:
        logger.debug("stdin reader exited after %d bytes", written)
    except OSError as exc:
        logger.debug("input forwarding stopped after %d bytes: %s", written, exc)
    except Exception:
        logger.warning("input source failed after %d bytes", written, exc_info=True)
    finally:
        close_quietly(pipe)


def copy_out(pipe: BinaryIO, sink: BinaryIO, size: Optional[int] = None) -> int:
    """Copy ``pipe`` into ``sink`` until EOF and close ``pipe``.

    Reads return as soon as data is available so the sink sees output
    incrementally.

    Returns:
        Number of bytes copied

    Raises:
        IoFailure: Reading the pipe or writing the sink failed
    """
    size = size or chunk_size()
    read = getattr(pipe, "read1", pipe.read)
    copied = 0
    try:
        while chunk := read(size):
            sink.write(chunk)
            copied += len(chunk)
        flush = getattr(sink, "flush", None)
        if flush is not None:
            flush()
    except Exception as exc:
        # ValueError for a closed sink, TypeError for a text-mode sink
        raise IoFailure("Failed to copy pipeline output to sink", exc) from exc
    finally:
        close_quietly(pipe)
    return copied


def drain(pipe: BinaryIO, sink: BinaryIO, size: Optional[int] = None) -> None:
    """Background variant of :func:`copy_out` that logs instead of raising."""
    try:
        copied = copy_out(pipe, sink, size)
    except IoFailure as exc:
        logger.debug("output forwarding stopped: %s", exc)
    else:
        logger.debug("output forwarding finished after %d bytes", copied)


def start_thread(target: Callable[..., None], *args: Any, name: str) -> threading.Thread:
    """Run ``target(*args)`` on a daemon thread and return the thread."""
    thread = threading.Thread(target=target, args=args, name=name, daemon=True)
    thread.start()
    return thread


__all__ = [
    "InputSource",
    "close_quietly",
    "copy_out",
    "drain",
    "feed",
    "iter_chunks",
    "start_thread",
]
