"""Trivia fragments: the whitespace, line breaks and comments between tokens."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class TriviaKind(str, Enum):
    WHITESPACE = "whitespace"
    END_OF_LINE = "end_of_line"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    DOC_COMMENT = "doc_comment"
    OTHER = "other"


COMMENT_KINDS = frozenset(
    {TriviaKind.LINE_COMMENT, TriviaKind.BLOCK_COMMENT, TriviaKind.DOC_COMMENT}
)


@dataclass(frozen=True)
class Trivia:
    """A single trivia fragment.

    ``text`` is the exact source text, so a sequence of fragments renders
    back to the original bytes.
    """

    kind: TriviaKind
    text: str

    @property
    def is_comment(self) -> bool:
        return self.kind in COMMENT_KINDS

    @property
    def is_end_of_line(self) -> bool:
        return self.kind is TriviaKind.END_OF_LINE

    @property
    def is_whitespace(self) -> bool:
        return self.kind is TriviaKind.WHITESPACE


def whitespace(text: str) -> Trivia:
    return Trivia(TriviaKind.WHITESPACE, text)


def end_of_line(text: str = "\n") -> Trivia:
    return Trivia(TriviaKind.END_OF_LINE, text)


def line_comment(text: str) -> Trivia:
    return Trivia(TriviaKind.LINE_COMMENT, text)


# Alternation order matters: doc forms must win over the plain comment forms.
_TRIVIA_RE = re.compile(
    r"""
    (?P<eol>\r\n|\n|\r)
    | (?P<ws>[^\S\r\n]+)
    | (?P<doc>///(?!/)[^\r\n]*)
    | (?P<docblock>/\*\*(?![*/])[\s\S]*?\*/)
    | (?P<line>//[^\r\n]*)
    | (?P<block>/\*[\s\S]*?\*/)
    | (?P<directive>\#[^\r\n]*)
    | (?P<other>[^\s/]+|/)
    """,
    re.VERBOSE,
)

_GROUP_KINDS = {
    "eol": TriviaKind.END_OF_LINE,
    "ws": TriviaKind.WHITESPACE,
    "doc": TriviaKind.DOC_COMMENT,
    "docblock": TriviaKind.DOC_COMMENT,
    "line": TriviaKind.LINE_COMMENT,
    "block": TriviaKind.BLOCK_COMMENT,
    "directive": TriviaKind.OTHER,
    "other": TriviaKind.OTHER,
}


def lex_trivia(text: str) -> tuple[Trivia, ...]:
    """Split *text* into trivia fragments.

    Lossless: ``render_trivia(lex_trivia(text)) == text`` for any input.
    Preprocessor directives and anything that is not whitespace or a
    comment come back as OTHER fragments.
    """
    fragments: list[Trivia] = []
    for match in _TRIVIA_RE.finditer(text):
        fragments.append(Trivia(_GROUP_KINDS[match.lastgroup], match.group()))
    return tuple(fragments)


def render_trivia(fragments: Iterable[Trivia]) -> str:
    return "".join(fragment.text for fragment in fragments)


def split_lines(
    fragments: Iterable[Trivia],
) -> tuple[list[Trivia], list[tuple[Trivia, list[Trivia]]]]:
    """Group fragments into the head segment and ``(line_break, segment)`` pairs.

    The head is whatever precedes the first line break. Every following
    pair is a line break and the fragments on the line it opens.
    """
    head: list[Trivia] = []
    lines: list[tuple[Trivia, list[Trivia]]] = []
    current = head
    for fragment in fragments:
        if fragment.is_end_of_line:
            current = []
            lines.append((fragment, current))
        else:
            current.append(fragment)
    return head, lines


def has_doc_comment(fragments: Iterable[Trivia]) -> bool:
    return any(fragment.kind is TriviaKind.DOC_COMMENT for fragment in fragments)
