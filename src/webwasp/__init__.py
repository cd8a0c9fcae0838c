"""webwasp: interactive console for HTTP header inspection."""

# Command layer
from webwasp.commands import COMMAND_VOCABULARY, CommandDispatcher, Dispatcher, tokenize

# Tab completion
from webwasp.completion import (
    CompletionTrie,
    TrieNode,
    Vocabulary,
    apply_completion,
    completion_tokens,
)

# Configuration
from webwasp.config import ConsoleConfig, load_config

# Console session
from webwasp.console import ConsoleSession, LineStatus

# Input decoding
from webwasp.decoder import DecoderState, InputDecoder, Keystroke, transition

# Errors
from webwasp.errors import BufferFull, ConfigError, TerminalError, WebWaspError

# History
from webwasp.history import CommandHistory, HistoryRecall

# Header fields
from webwasp.http import HttpFields

# Keys
from webwasp.keys import Key, KeyId

# Edit buffer
from webwasp.line_buffer import EditBuffer

# Terminal interface and implementations
from webwasp.terminal import ProcessTerminal, Terminal, TerminalSession

__version__ = "0.1.0"

__all__ = [
    # Commands
    "COMMAND_VOCABULARY",
    "CommandDispatcher",
    "Dispatcher",
    "tokenize",
    # Completion
    "CompletionTrie",
    "TrieNode",
    "Vocabulary",
    "apply_completion",
    "completion_tokens",
    # Config
    "ConsoleConfig",
    "load_config",
    # Console
    "ConsoleSession",
    "LineStatus",
    # Decoder
    "DecoderState",
    "InputDecoder",
    "Keystroke",
    "transition",
    # Errors
    "BufferFull",
    "ConfigError",
    "TerminalError",
    "WebWaspError",
    # History
    "CommandHistory",
    "HistoryRecall",
    # HTTP
    "HttpFields",
    # Keys
    "Key",
    "KeyId",
    # Edit buffer
    "EditBuffer",
    # Terminal
    "ProcessTerminal",
    "Terminal",
    "TerminalSession",
]
