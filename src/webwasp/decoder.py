"""Byte-level input decoder.

Raw-mode reads deliver one byte at a time, so an arrow key arrives as
``ESC``, ``[`` and a final byte across three reads. The decoder keeps the
partial-sequence state between bytes and turns each completed key into a
:class:`Keystroke`. Unsupported or malformed sequences are absorbed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from webwasp.keys import (
    ARROW_KEYS,
    CONTROL_KEYS,
    CSI_INTRODUCER,
    ESCAPE,
    Key,
    KeyId,
    describe_byte,
    is_printable,
)

logger = logging.getLogger(__name__)


class DecoderState(Enum):
    NORMAL = auto()
    AWAIT_ESCAPE1 = auto()
    AWAIT_ESCAPE2 = auto()


@dataclass(frozen=True)
class Keystroke:
    """A decoded key. ``char`` is set only for ``Key.char``."""

    key: KeyId
    char: str = ""


def transition(state: DecoderState, byte: int) -> tuple[DecoderState, Keystroke | None]:
    """Advance the decoder by one byte.

    Total over every ``(state, byte)`` pair: returns the next state and
    the completed keystroke, or ``None`` when the byte started, continued
    or aborted an escape sequence.
    """
    if state is DecoderState.AWAIT_ESCAPE1:
        if byte == CSI_INTRODUCER:
            return DecoderState.AWAIT_ESCAPE2, None
        logger.debug("discarding ESC %s", describe_byte(byte))
        return DecoderState.NORMAL, None

    if state is DecoderState.AWAIT_ESCAPE2:
        key = ARROW_KEYS.get(byte)
        if key is None:
            logger.debug("discarding ESC [ %s", describe_byte(byte))
            return DecoderState.NORMAL, None
        return DecoderState.NORMAL, Keystroke(key)

    if byte == ESCAPE:
        return DecoderState.AWAIT_ESCAPE1, None

    key = CONTROL_KEYS.get(byte)
    if key is not None:
        return DecoderState.NORMAL, Keystroke(key)

    if is_printable(byte):
        return DecoderState.NORMAL, Keystroke(Key.char, chr(byte))

    logger.debug("ignoring byte %s", describe_byte(byte))
    return DecoderState.NORMAL, None


class InputDecoder:
    """Stateful wrapper around :func:`transition`."""

    def __init__(self) -> None:
        self._state = DecoderState.NORMAL

    @property
    def state(self) -> DecoderState:
        return self._state

    def feed(self, byte: int) -> Keystroke | None:
        self._state, keystroke = transition(self._state, byte)
        return keystroke

    def reset(self) -> None:
        """Drop any partial escape sequence."""
        self._state = DecoderState.NORMAL
