"""Tests for raw-mode session handling and ProcessTerminal I/O."""

from __future__ import annotations

import os
import termios
import tty

import pytest

from webwasp import terminal as terminal_mod
from webwasp.errors import TerminalError
from webwasp.terminal import ProcessTerminal, TerminalSession, is_session_active

# termios attribute list indices
LFLAG = 3
CC = 6


def cooked_attrs() -> list:
    return [0xFFFF, 0xFFFF, 0, 0xFFFF, 38400, 38400, [b"\x00"] * 32]


class FakeTermios:
    """Stands in for a real tty: records raw-mode switches and restores."""

    def __init__(self) -> None:
        self.attrs = cooked_attrs()
        self.raw_calls: list[tuple[int, int]] = []
        self.set_calls: list[tuple[int, int, list]] = []
        self.fail_get = False
        self.fail_raw = False
        self.fail_set = False

    def tcgetattr(self, fd: int) -> list:
        if self.fail_get:
            raise termios.error(25, "Inappropriate ioctl for device")
        return list(self.attrs)

    def setraw(self, fd: int, when: int = termios.TCSAFLUSH) -> None:
        if self.fail_raw:
            raise termios.error(5, "Input/output error")
        self.raw_calls.append((fd, when))

    def tcsetattr(self, fd: int, when: int, attrs: list) -> None:
        if self.fail_set:
            raise termios.error(5, "Input/output error")
        self.set_calls.append((fd, when, list(attrs)))


@pytest.fixture
def fake_termios(monkeypatch: pytest.MonkeyPatch) -> FakeTermios:
    fake = FakeTermios()
    monkeypatch.setattr(termios, "tcgetattr", fake.tcgetattr)
    monkeypatch.setattr(termios, "tcsetattr", fake.tcsetattr)
    monkeypatch.setattr(tty, "setraw", fake.setraw)
    monkeypatch.setattr(terminal_mod, "_active_fd", None)
    return fake


@pytest.fixture
def pty_pair(monkeypatch: pytest.MonkeyPatch):
    try:
        master, slave = os.openpty()
    except OSError:
        pytest.skip("no pseudo-terminal available")
    monkeypatch.setattr(terminal_mod, "_active_fd", None)
    yield master, slave
    os.close(master)
    os.close(slave)


def cc_value(value) -> int:
    return value[0] if isinstance(value, bytes) else value


class TestRawModeOnPty:
    """Raw mode applied to a real pseudo-terminal."""

    def test_reads_block_for_one_byte(self, pty_pair) -> None:
        _, slave = pty_pair
        attrs = termios.tcgetattr(slave)
        attrs[LFLAG] &= ~termios.ICANON
        attrs[CC][termios.VMIN] = 0
        attrs[CC][termios.VTIME] = 0
        termios.tcsetattr(slave, termios.TCSANOW, attrs)

        with TerminalSession(slave):
            raw = termios.tcgetattr(slave)
            assert cc_value(raw[CC][termios.VMIN]) == 1
            assert cc_value(raw[CC][termios.VTIME]) == 0

    def test_flags_cleared(self, pty_pair) -> None:
        _, slave = pty_pair
        with TerminalSession(slave):
            raw = termios.tcgetattr(slave)
        for flag in (termios.ECHO, termios.ICANON, termios.ISIG, termios.IEXTEN):
            assert raw[LFLAG] & flag == 0
        assert raw[1] & termios.OPOST == 0
        assert raw[2] & termios.CS8 == termios.CS8

    def test_original_restored(self, pty_pair) -> None:
        _, slave = pty_pair
        before = termios.tcgetattr(slave)
        with TerminalSession(slave):
            pass
        assert termios.tcgetattr(slave) == before

    def test_byte_read_through_raw_pty(self, pty_pair) -> None:
        master, slave = pty_pair
        term = ProcessTerminal(input_fd=slave, output_fd=slave)
        term.start()
        try:
            os.write(master, b"\x03")
            assert term.read_byte() == 3
        finally:
            term.stop()


class TestTerminalSession:
    """Raw mode is entered once and the original configuration restored once."""

    def test_enter_applies_raw_mode(self, fake_termios: FakeTermios) -> None:
        session = TerminalSession(7)
        session.enter()
        try:
            assert session.active
            assert is_session_active()
            assert fake_termios.raw_calls == [(7, termios.TCSAFLUSH)]
        finally:
            session.leave()

    def test_leave_restores_original(self, fake_termios: FakeTermios) -> None:
        with TerminalSession(7):
            pass
        assert fake_termios.set_calls == [(7, termios.TCSAFLUSH, cooked_attrs())]
        assert not is_session_active()

    def test_leave_is_idempotent(self, fake_termios: FakeTermios) -> None:
        session = TerminalSession(7)
        session.enter()
        session.leave()
        session.leave()
        assert len(fake_termios.set_calls) == 1

    def test_leave_without_enter_does_nothing(self, fake_termios: FakeTermios) -> None:
        TerminalSession(7).leave()
        assert fake_termios.set_calls == []

    def test_restored_on_exception(self, fake_termios: FakeTermios) -> None:
        with pytest.raises(RuntimeError):
            with TerminalSession(7):
                raise RuntimeError("boom")
        assert fake_termios.set_calls == [(7, termios.TCSAFLUSH, cooked_attrs())]
        assert not is_session_active()

    def test_second_session_rejected(self, fake_termios: FakeTermios) -> None:
        with TerminalSession(7):
            with pytest.raises(TerminalError, match="already active"):
                TerminalSession(8).enter()
        assert fake_termios.raw_calls == [(7, termios.TCSAFLUSH)]
        assert len(fake_termios.set_calls) == 1

    def test_not_a_tty(self, fake_termios: FakeTermios) -> None:
        fake_termios.fail_get = True
        session = TerminalSession(7)
        with pytest.raises(TerminalError):
            session.enter()
        assert not session.active
        assert not is_session_active()
        assert fake_termios.raw_calls == []

    def test_apply_failure(self, fake_termios: FakeTermios) -> None:
        fake_termios.fail_raw = True
        with pytest.raises(TerminalError):
            TerminalSession(7).enter()
        assert not is_session_active()

    def test_restore_failure_raises(self, fake_termios: FakeTermios) -> None:
        session = TerminalSession(7)
        session.enter()
        fake_termios.fail_set = True
        with pytest.raises(TerminalError):
            session.leave()
        assert not is_session_active()



class TestProcessTerminal:
    """Byte I/O over a pipe; raw mode is not needed for reads and writes."""

    def test_read_bytes_then_eof(self) -> None:
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"ab")
        os.close(write_fd)
        try:
            term = ProcessTerminal(input_fd=read_fd, output_fd=read_fd)
            assert term.read_byte() == ord("a")
            assert term.read_byte() == ord("b")
            assert term.read_byte() is None
        finally:
            os.close(read_fd)

    def test_write_sends_latin1_bytes(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            term = ProcessTerminal(input_fd=read_fd, output_fd=write_fd)
            term.write("ab\b\r\n")
            assert os.read(read_fd, 16) == b"ab\b\r\n"
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_write_log(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        log = tmp_path / "writes.log"
        monkeypatch.setenv("WEBWASP_WRITE_LOG", str(log))
        read_fd, write_fd = os.pipe()
        try:
            term = ProcessTerminal(input_fd=read_fd, output_fd=write_fd)
            term.write("> ")
            term.write("show")
        finally:
            os.close(read_fd)
            os.close(write_fd)
        assert log.read_text(encoding="latin-1") == "> show"

    def test_start_and_stop(self, fake_termios: FakeTermios) -> None:
        term = ProcessTerminal(input_fd=0, output_fd=1)
        term.start()
        assert is_session_active()
        term.stop()
        term.stop()
        assert not is_session_active()
        assert fake_termios.raw_calls == [(0, termios.TCSAFLUSH)]
        assert len(fake_termios.set_calls) == 1
