"""Interactive console: the read-evaluate loop around the line editor.

``ConsoleSession`` owns the terminal, the edit buffer, the command
history and the completion trie. Each keystroke is decoded, applied to
the buffer (or to history recall, or to completion) and immediately
echoed so the visible line always matches the buffer. Finished lines go
to history and then to the dispatcher.
"""

from __future__ import annotations

import logging
from enum import Enum, auto

from webwasp.commands import COMMAND_VOCABULARY, CommandDispatcher, Dispatcher
from webwasp.completion import CompletionTrie, Vocabulary, apply_completion, completion_tokens
from webwasp.config import ConsoleConfig
from webwasp.decoder import InputDecoder, Keystroke
from webwasp.errors import BufferFull
from webwasp.history import CommandHistory, HistoryRecall
from webwasp.keys import Key
from webwasp.line_buffer import EditBuffer
from webwasp.terminal import Terminal

logger = logging.getLogger(__name__)

NEWLINE = "\r\n"
BELL = "\a"

BANNER = (
    r"      __        __   _      __        __" "\r\n"
    r"      \ \      / /__| |__   \ \      / /_ _ ___ _ __ " "\r\n"
    r"       \ \ /\ / / _ \ '_ \   \ \ /\ / / _` / __| '_ \ " "\r\n"
    r"        \ V  V /  __/ |_) |   \ V  V / (_| \__ \ |_) |   " "\r\n"
    r"         \_/\_/ \___|_.__/     \_/\_/ \__,_|___/ .__/ " "\r\n"
    r"            Get Stinging                        |_|    " "\r\n"
)


class LineStatus(Enum):
    EDITING = auto()
    SUBMITTED = auto()
    CANCELED = auto()


class ConsoleSession:
    """Composition root for one interactive console."""

    def __init__(
        self,
        terminal: Terminal,
        dispatcher: Dispatcher | None = None,
        config: ConsoleConfig | None = None,
        vocabulary: Vocabulary | None = None,
    ) -> None:
        self._config = (config or ConsoleConfig()).validate()
        self._terminal = terminal
        self._dispatcher: Dispatcher = (
            dispatcher if dispatcher is not None else CommandDispatcher(terminal.write)
        )

        self._buffer = EditBuffer(self._config.line_capacity)
        self._history = CommandHistory(self._config.history_max)
        self._recall = HistoryRecall(self._history)
        self._trie = CompletionTrie(COMMAND_VOCABULARY if vocabulary is None else vocabulary)
        self._decoder = InputDecoder()

        # Matches shown by the last multi-match completion
        self.last_matches: list[str] = []

    # -- accessors ------------------------------------------------------------

    @property
    def buffer(self) -> EditBuffer:
        return self._buffer

    @property
    def history(self) -> CommandHistory:
        return self._history

    @property
    def recall(self) -> HistoryRecall:
        return self._recall

    @property
    def trie(self) -> CompletionTrie:
        return self._trie

    # -- main loop ------------------------------------------------------------

    def run(self) -> int:
        """Run until the user quits or input ends. Returns the exit status.

        Raises :class:`~webwasp.errors.TerminalError` if the terminal
        cannot be put into raw mode or restored.
        """
        self._terminal.start()
        try:
            if self._config.show_banner:
                self._terminal.write(BANNER + NEWLINE)

            while True:
                self._terminal.write(self._config.prompt)
                line = self.read_line()
                self._terminal.write(NEWLINE)
                if line is None:
                    break

                self._history.push(line)
                if not self._dispatcher.dispatch(line):
                    break
        finally:
            self._terminal.stop()
        return 0

    def read_line(self) -> str | None:
        """Read and edit one line.

        Returns the submitted text, or None when the user cancels with
        Ctrl-C or input ends.
        """
        self._buffer.clear()
        self._recall.reset()
        self._decoder.reset()
        self.last_matches = []

        while True:
            byte = self._terminal.read_byte()
            if byte is None:
                self._buffer.clear()
                return None

            keystroke = self._decoder.feed(byte)
            if keystroke is None:
                continue

            status = self.handle_keystroke(keystroke)
            if status is LineStatus.SUBMITTED:
                self._recall.reset()
                return self._buffer.clear()
            if status is LineStatus.CANCELED:
                self._recall.reset()
                self._buffer.clear()
                return None

    # -- keystroke handling ---------------------------------------------------

    def handle_keystroke(self, keystroke: Keystroke) -> LineStatus:
        key = keystroke.key

        if key == Key.enter:
            return LineStatus.SUBMITTED

        if key == Key.interrupt:
            self._terminal.write(self._buffer.move_to_end() + "^C")
            return LineStatus.CANCELED

        if key == Key.char:
            self._insert(keystroke.char)
        elif key == Key.backspace:
            if self._buffer.cursor > 0:
                self._edited()
            self._terminal.write(self._buffer.delete_before_cursor())
        elif key == Key.left:
            self._terminal.write(self._buffer.move_cursor(-1))
        elif key == Key.right:
            self._terminal.write(self._buffer.move_cursor(1))
        elif key == Key.line_start:
            self._terminal.write(self._buffer.move_to_start())
        elif key == Key.line_end:
            self._terminal.write(self._buffer.move_to_end())
        elif key == Key.redraw:
            self._terminal.write(self._buffer.redraw())
        elif key == Key.up:
            self._show_recalled(self._recall.older(self._buffer.text))
        elif key == Key.down:
            self._show_recalled(self._recall.newer())
        elif key == Key.tab:
            self._complete()

        return LineStatus.EDITING

    def _insert(self, ch: str) -> None:
        try:
            output = self._buffer.insert(ch)
        except BufferFull:
            logger.debug("buffer full, dropping %r", ch)
            self._terminal.write(BELL)
            return
        self._edited()
        self._terminal.write(output)

    def _edited(self) -> None:
        # Editing a recalled line makes it the new draft.
        if self._recall.active:
            self._recall.reset()

    def _show_recalled(self, text: str | None) -> None:
        if text is None:
            return
        self._terminal.write(self._buffer.replace_all(text))

    def _complete(self) -> None:
        tokens = completion_tokens(self._buffer.text)
        matches = self._trie.complete(tokens)

        if len(matches) == 1:
            completed = apply_completion(self._buffer.text, matches[0])
            if len(completed) > self._buffer.capacity:
                logger.debug("completion %r exceeds line capacity", completed)
                self._terminal.write(BELL)
                return
            self._edited()
            self._terminal.write(self._buffer.replace_all(completed))
            return

        if len(matches) > 1:
            self.last_matches = matches
            self._terminal.write(
                NEWLINE
                + "  ".join(matches)
                + NEWLINE
                + self._config.prompt
                + self._buffer.paint()
            )
