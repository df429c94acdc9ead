"""Merges a generated comment block into a declaration's leading trivia."""

from __future__ import annotations

from collections.abc import Sequence

from sharpdoc.syntax.trivia import (
    Trivia,
    end_of_line,
    line_comment,
    split_lines,
    whitespace,
)


class TriviaSplicer:
    """Replaces whatever comments precede a declaration with a new block.

    Leading trivia is expected to start at the line break that closes the
    previous token's line (or at the start of the file). Non-comment
    trivia such as blank lines and directive lines is kept byte for byte
    and in order; the new block goes directly above the declaration.
    """

    def splice(
        self,
        leading: Sequence[Trivia],
        comment_lines: Sequence[str],
        indentation: str,
        newline: str = "\n",
        *,
        line_start: bool = False,
    ) -> tuple[Trivia, ...]:
        """Return the new leading trivia.

        *line_start* tells that the trivia begins at the start of a line (the
        top of the file), where the block needs no line break above it.
        """
        leading = tuple(leading)
        if not comment_lines:
            return leading

        kept = self._strip_comments(leading)
        kept = self._drop_own_line(kept)
        if not kept and not line_start:
            kept.append(end_of_line(newline))

        for index, line in enumerate(comment_lines):
            if index:
                kept.append(end_of_line(newline))
            kept.append(line_comment(line))

        kept.append(end_of_line(newline))
        if indentation:
            kept.append(whitespace(indentation))
        return tuple(kept)

    @staticmethod
    def _strip_comments(leading: Sequence[Trivia]) -> list[Trivia]:
        """Remove comment fragments, and lines left empty by that removal."""
        head, lines = split_lines(leading)
        segments = [head] + [segment for _, segment in lines]
        # breaks[i] terminates segments[i]; the last segment has none.
        breaks = [line_break for line_break, _ in lines]
        result: list[Trivia] = []
        for index, segment in enumerate(segments):
            if _only_comments_and_space(segment):
                continue
            result.extend(f for f in segment if not f.is_comment)
            if index < len(breaks):
                result.append(breaks[index])
        return result

    @staticmethod
    def _drop_own_line(fragments: list[Trivia]) -> list[Trivia]:
        """Cut the run after the last line break: the declaration's indentation."""
        for index in range(len(fragments) - 1, -1, -1):
            if fragments[index].is_end_of_line:
                return fragments[: index + 1]
        return []


def _only_comments_and_space(segment: Sequence[Trivia]) -> bool:
    """True for a line that holds a comment and nothing but whitespace besides."""
    return any(f.is_comment for f in segment) and all(
        f.is_comment or f.is_whitespace for f in segment
    )
