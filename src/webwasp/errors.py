"""Exception types raised by the console."""

from __future__ import annotations


class WebWaspError(Exception):
    """Base class for console errors."""


class TerminalError(WebWaspError):
    """The terminal configuration could not be read, applied or restored."""


class BufferFull(WebWaspError):
    """The edit buffer is at capacity."""


class ConfigError(WebWaspError, ValueError):
    """A configuration value is out of range."""
