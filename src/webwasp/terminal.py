"""Terminal abstraction for raw-mode byte I/O.

Provides a ``TerminalSession`` that owns the raw-mode lifetime of a tty,
a ``Terminal`` protocol describing what the console needs from a
terminal, and a concrete ``ProcessTerminal`` backed by stdin/stdout file
descriptors.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import termios
import tty
from types import FrameType
from typing import Protocol

from webwasp.errors import TerminalError

logger = logging.getLogger(__name__)

# Signals that unwind the console instead of killing it outright
_EXIT_SIGNALS = (signal.SIGTERM, signal.SIGHUP)

# Fd of the session currently holding the terminal in raw mode
_active_fd: int | None = None


def is_session_active() -> bool:
    return _active_fd is not None


# ---------------------------------------------------------------------------
# TerminalSession
# ---------------------------------------------------------------------------


class TerminalSession:
    """Raw mode for one tty, restored exactly once.

    Use as a context manager so the original configuration comes back on
    every exit path::

        with TerminalSession(sys.stdin.fileno()):
            ...
    """

    def __init__(self, fd: int) -> None:
        self._fd = fd
        self._original: list | None = None
        self._prev_handlers: dict[int, object] = {}

    @property
    def fd(self) -> int:
        return self._fd

    @property
    def active(self) -> bool:
        return self._original is not None

    def enter(self) -> None:
        """Capture the current configuration and switch the tty to raw mode."""
        global _active_fd

        if _active_fd is not None:
            raise TerminalError(f"terminal session already active on fd {_active_fd}")

        try:
            original = termios.tcgetattr(self._fd)
        except (termios.error, OSError) as e:
            raise TerminalError(f"cannot read terminal configuration: {e}") from e

        # 8-bit, no echo or signals, blocking one-byte reads (VMIN 1, VTIME 0)
        try:
            tty.setraw(self._fd, termios.TCSAFLUSH)
        except (termios.error, OSError) as e:
            raise TerminalError(f"cannot apply raw mode: {e}") from e

        self._original = original
        _active_fd = self._fd
        self._install_signal_handlers()
        logger.debug("terminal fd %d in raw mode", self._fd)

    def leave(self) -> None:
        """Restore the configuration captured by :meth:`enter`.

        Calling it again, or without a prior ``enter``, does nothing.
        """
        global _active_fd

        if self._original is None:
            return

        original = self._original
        self._original = None
        _active_fd = None
        self._restore_signal_handlers()

        try:
            termios.tcsetattr(self._fd, termios.TCSAFLUSH, original)
        except (termios.error, OSError) as e:
            logger.error("failed to restore terminal fd %d: %s", self._fd, e)
            raise TerminalError(f"cannot restore terminal configuration: {e}") from e
        logger.debug("terminal fd %d restored", self._fd)

    def __enter__(self) -> TerminalSession:
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.leave()

    # -- private: signals ---------------------------------------------------

    def _install_signal_handlers(self) -> None:
        for signum in _EXIT_SIGNALS:
            try:
                self._prev_handlers[signum] = signal.signal(signum, _raise_system_exit)
            except ValueError:
                # Not on the main thread; the context manager still restores.
                pass

    def _restore_signal_handlers(self) -> None:
        for signum, handler in self._prev_handlers.items():
            # None means the previous handler was not installed from Python
            signal.signal(signum, signal.SIG_DFL if handler is None else handler)
        self._prev_handlers.clear()


def _raise_system_exit(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the console's terminal I/O."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def read_byte(self) -> int | None: ...

    def write(self, data: str) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the process's stdin and stdout.

    Bytes map to characters one-to-one (latin-1), so the console works in
    columns and bytes without any Unicode decoding.
    """

    def __init__(self, input_fd: int | None = None, output_fd: int | None = None) -> None:
        self._input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self._output_fd = sys.stdout.fileno() if output_fd is None else output_fd
        self._session = TerminalSession(self._input_fd)
        self._write_log_path: str = os.environ.get("WEBWASP_WRITE_LOG", "")

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Put stdin into raw mode. Raises :class:`TerminalError` if it is not a tty."""
        self._session.enter()

    def stop(self) -> None:
        """Restore stdin to the configuration captured by :meth:`start`."""
        self._session.leave()

    # -- input --------------------------------------------------------------

    def read_byte(self) -> int | None:
        """Block for one byte. Returns None at end of input or on a read error."""
        try:
            data = os.read(self._input_fd, 1)
        except OSError as e:
            logger.debug("read from fd %d failed: %s", self._input_fd, e)
            return None
        if not data:
            logger.debug("end of input on fd %d", self._input_fd)
            return None
        return data[0]

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write *data* to stdout and optionally to the write log."""
        if not data:
            return
        self._raw_write(data.encode("latin-1", errors="replace"))

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="latin-1") as f:
                    f.write(data)
            except OSError:
                pass

    def _raw_write(self, payload: bytes) -> None:
        """Write all of *payload*, bypassing Python's buffering."""
        view = memoryview(payload)
        while view:
            try:
                written = os.write(self._output_fd, view)
            except OSError as e:
                logger.debug("write to fd %d failed: %s", self._output_fd, e)
                return
            view = view[written:]
