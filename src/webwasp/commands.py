"""Command dispatch for submitted console lines."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from webwasp.http import FIELD_LABELS, HttpFields

logger = logging.getLogger(__name__)

SHOW_ARGUMENTS = ("all", *FIELD_LABELS)

# Completion vocabulary: one nesting level per token position
COMMAND_VOCABULARY: dict[str, dict] = {
    "help": {},
    "quit": {},
    "exit": {},
    "show": {arg: {} for arg in SHOW_ARGUMENTS},
    "set": {name: {} for name in FIELD_LABELS},
    "unset": {name: {} for name in FIELD_LABELS},
    "headers": {},
}

HELP_LINES = (
    "Commands:",
    "  show {all | host | auth | maxforward | referer | useragent}",
    "  set <field> <value>",
    "  unset <field>",
    "  headers",
    "  help",
    "  quit | exit",
)


def tokenize(line: str) -> list[str]:
    """Split a command line on runs of whitespace."""
    return line.split()


class Dispatcher(Protocol):
    """Consumes one finished console line."""

    def dispatch(self, line: str) -> bool:
        """Run *line*. Returns False when the console should exit."""
        ...


class CommandDispatcher:
    """Executes header inspection commands against an :class:`HttpFields`."""

    def __init__(
        self,
        echo: Callable[[str], None],
        fields: HttpFields | None = None,
    ) -> None:
        self._echo = echo
        self.fields = fields if fields is not None else HttpFields()

    def _print(self, line: str = "") -> None:
        # Raw mode disables output post-processing, so lines need \r\n.
        self._echo(line + "\r\n")

    def dispatch(self, line: str) -> bool:
        argv = tokenize(line)
        if not argv:
            return True

        cmd = argv[0]
        if cmd in ("quit", "exit"):
            return False

        handler = getattr(self, f"_cmd_{cmd}", None)
        if handler is None:
            logger.info("unrecognized command %r", cmd)
            self._print(f"Unrecognized command: '{cmd}'")
            return True

        handler(argv)
        return True

    # -- commands -------------------------------------------------------------

    def _cmd_help(self, argv: list[str]) -> None:
        for line in HELP_LINES:
            self._print(line)

    def _cmd_show(self, argv: list[str]) -> None:
        if len(argv) != 2:
            self._print("[?] Incorrect syntax for command: 'show'")
            self._print("[?] Usage: show {'header field' | all}")
            return

        arg = argv[1]
        if arg == "all":
            lines = self.fields.show()
        elif HttpFields.is_field(arg):
            lines = self.fields.show(arg)
        else:
            self._print(f"[?] Invalid argument '{arg}'")
            return

        for line in lines:
            self._print(line)

    def _cmd_headers(self, argv: list[str]) -> None:
        headers = self.fields.to_headers()
        if not headers:
            self._print("[-] No header fields set")
            return
        for name, value in headers.items():
            self._print(f"{name}: {value}")

    def _cmd_set(self, argv: list[str]) -> None:
        if len(argv) < 3:
            self._print("[?] Incorrect syntax for command: 'set'")
            self._print("[?] Usage: set <field> <value>")
            return

        name = argv[1]
        if not HttpFields.is_field(name):
            self._print(f"[?] Invalid argument '{name}'")
            return

        self.fields.set_field(name, " ".join(argv[2:]))
        logger.debug("set %s", name)

    def _cmd_unset(self, argv: list[str]) -> None:
        if len(argv) != 2:
            self._print("[?] Incorrect syntax for command: 'unset'")
            self._print("[?] Usage: unset <field>")
            return

        name = argv[1]
        if not HttpFields.is_field(name):
            self._print(f"[?] Invalid argument '{name}'")
            return

        self.fields.clear_field(name)
