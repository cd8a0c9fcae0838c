"""Token-structured tab completion for console commands.

Commands are whitespace-separated tokens, and each trie depth holds the
words that are valid at that token position: depth 1 is the command name,
depth 2 its first argument, and so on. A completion query walks the trie
breadth-first, requiring exact matches for every token except the last,
which only has to be a prefix.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

# Nested mapping of label -> sub-vocabulary. ``None`` or ``{}`` marks a leaf.
Vocabulary = Mapping[str, Union["Vocabulary", None]]


@dataclass
class TrieNode:
    """A node of the completion trie. The root has no label and depth 0."""

    label: str | None
    depth: int
    children: list[TrieNode] = field(default_factory=list)

    def child(self, label: str) -> TrieNode | None:
        for node in self.children:
            if node.label == label:
                return node
        return None


class CompletionTrie:
    """Read-only completion tree built once from a vocabulary."""

    def __init__(self, vocabulary: Vocabulary) -> None:
        self._root = TrieNode(label=None, depth=0)
        self._adopt(self._root, vocabulary)

    @property
    def root(self) -> TrieNode:
        return self._root

    def _adopt(self, parent: TrieNode, vocabulary: Vocabulary | None) -> None:
        if not vocabulary:
            return
        for label, sub_vocabulary in vocabulary.items():
            if not label or label != label.strip() or len(label.split()) != 1:
                raise ValueError(f"completion labels must be single tokens, got {label!r}")
            if parent.child(label) is not None:
                raise ValueError(f"duplicate completion label {label!r}")
            node = TrieNode(label=label, depth=parent.depth + 1)
            parent.children.append(node)
            self._adopt(node, sub_vocabulary)

    def complete(self, tokens: list[str]) -> list[str]:
        """Return the labels that can complete the last of *tokens*.

        Results follow the vocabulary's insertion order.
        """
        if not tokens:
            return []

        last_depth = len(tokens)
        matches: list[str] = []
        queue: deque[TrieNode] = deque(self._root.children)

        while queue:
            node = queue.popleft()
            label = node.label or ""
            token = tokens[node.depth - 1]

            if node.depth == last_depth:
                if label.startswith(token):
                    matches.append(label)
            elif label == token:
                queue.extend(node.children)

        return matches


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


def completion_tokens(line: str) -> list[str]:
    """Split *line* into the tokens used for a completion query.

    A trailing space means the user has finished the last word, so an
    empty token is appended to ask for every word at the next position.
    """
    tokens = line.split()
    if tokens and line[-1].isspace():
        tokens.append("")
    return tokens


def apply_completion(line: str, label: str) -> str:
    """Replace the last token of *line* with *label* and a trailing space."""
    tokens = completion_tokens(line)
    head = tokens[:-1]
    return " ".join([*head, label]) + " "
