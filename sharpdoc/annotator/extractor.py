"""Pulls the doc comment out of a raw model answer and re-indents it."""

from __future__ import annotations

import re

from sharpdoc.syntax.trivia import Trivia, TriviaKind, lex_trivia

DEFAULT_MARKER = "///"

_BLOCK_LINE_PREFIX = re.compile(r"^[ \t]*\*(?!/) ?")


class CommentExtractor:
    """Finds the first documentation comment in generated text.

    The answer is lexed like C# trivia. The doc-comment fragments of the
    first trivia run that contains one are kept; any prose before or after
    them is dropped.
    """

    def __init__(self, marker: str = DEFAULT_MARKER) -> None:
        self.marker = marker

    def extract(self, raw: str, indentation: str = "") -> tuple[str, ...]:
        lines: list[str] = []
        for fragment in first_doc_block(raw):
            lines.extend(_fragment_lines(fragment))
        return tuple(self._format_line(line, indentation) for line in lines)

    def _format_line(self, line: str, indentation: str) -> str:
        content = _strip_marker(line.rstrip("\r"))
        if not content.strip():
            return indentation + self.marker
        return f"{indentation}{self.marker} {content}"


def first_doc_block(raw: str) -> list[Trivia]:
    """Doc-comment fragments of the first trivia run that has any."""
    block: list[Trivia] = []
    for fragment in lex_trivia(raw):
        if fragment.kind is TriviaKind.DOC_COMMENT:
            block.append(fragment)
        elif fragment.kind is TriviaKind.OTHER and block:
            break
    return block


def _fragment_lines(fragment: Trivia) -> list[str]:
    text = fragment.text
    if not text.startswith("/**"):
        return [text]
    body = text[3:-2] if text.endswith("*/") else text[3:]
    lines = [_BLOCK_LINE_PREFIX.sub("", line) for line in re.split(r"\r\n|\n|\r", body)]
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def _strip_marker(line: str) -> str:
    content = line.lstrip().lstrip("/")
    return content[1:] if content.startswith(" ") else content
