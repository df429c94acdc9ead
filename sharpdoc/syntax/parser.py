"""C# parsing via tree-sitter into the lossless :mod:`sharpdoc.syntax.tree` model."""

from __future__ import annotations

import bisect
import logging
from pathlib import Path
from typing import Any

import tree_sitter
import tree_sitter_c_sharp

from sharpdoc.syntax.tree import SyntaxNode, SyntaxTree
from sharpdoc.syntax.trivia import Trivia, lex_trivia, render_trivia

logger = logging.getLogger(__name__)

_BOM = b"\xef\xbb\xbf"

ROOT_KIND = "compilation_unit"

# Declarations that can carry a doc comment.
DECLARATION_TYPES = frozenset({
    "class_declaration",
    "struct_declaration",
    "interface_declaration",
    "record_declaration",
    "record_struct_declaration",
    "enum_declaration",
    "method_declaration",
    "property_declaration",
    "field_declaration",
    "delegate_declaration",
    "enum_member_declaration",
    "event_field_declaration",
})

# Nodes whose children may hold further declarations.
CONTAINER_TYPES = frozenset({
    "namespace_declaration",
    "file_scoped_namespace_declaration",
    "declaration_list",
    "enum_member_declaration_list",
    "class_declaration",
    "struct_declaration",
    "interface_declaration",
    "record_declaration",
    "record_struct_declaration",
    "enum_declaration",
    "preproc_if",
    "preproc_elif",
    "preproc_else",
})


class SourceParseError(ValueError):
    """Raised when a file cannot be parsed into a usable tree."""


class CSharpParser:
    """Builds :class:`SyntaxTree` objects from C# source.

    Only declarations and the nodes that contain them become tree nodes;
    everything else stays as raw text. Leading trivia of a declaration runs
    from the line break that ends the previous token's line up to the
    declaration's first token, or covers the whole gap when both share a
    line.
    """

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(tree_sitter.Language(tree_sitter_c_sharp.language()))

    def parse_file(self, path: Path) -> SyntaxTree:
        return self.parse_bytes(path.read_bytes(), path=path)

    def parse(self, source: str, path: Path | None = None) -> SyntaxTree:
        return self.parse_bytes(source.encode("utf-8"), path=path)

    def parse_bytes(self, data: bytes, path: Path | None = None) -> SyntaxTree:
        bom = data.startswith(_BOM)
        if bom:
            data = data[len(_BOM):]
        try:
            source = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceParseError(f"{path or '<source>'} is not valid UTF-8: {e}") from e

        ts_tree = self._parser.parse(data)
        if ts_tree.root_node.has_error:
            raise SourceParseError(f"{path or '<source>'} contains syntax errors")

        builder = _TreeBuilder(data)
        root = builder.build_root(ts_tree.root_node)
        newline = "\r\n" if "\r\n" in source else "\n"
        return SyntaxTree(root=root, source=source, newline=newline, path=path, bom=bom)

    @staticmethod
    def serialize(tree: SyntaxTree) -> bytes:
        """Encode a tree back to file bytes, restoring a BOM if it had one."""
        data = tree.to_full_string().encode("utf-8")
        return _BOM + data if tree.bom else data


class _TreeBuilder:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._token_starts: list[int] = []
        self._token_ends: list[int] = []

    def _text(self, start: int, end: int) -> str:
        return self._data[start:end].decode("utf-8")

    def _collect_tokens(self, root: Any) -> None:
        # Iterative walk; extras (comments, region directives) are trivia, not tokens.
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_extra:
                continue
            if node.child_count == 0:
                if node.end_byte > node.start_byte:
                    self._token_starts.append(node.start_byte)
                    self._token_ends.append(node.end_byte)
                continue
            stack.extend(reversed(node.children))
        pairs = sorted(zip(self._token_starts, self._token_ends))
        self._token_starts = [start for start, _ in pairs]
        self._token_ends = [end for _, end in pairs]

    def build_root(self, ts_root: Any) -> SyntaxNode:
        self._collect_tokens(ts_root)
        parts = self._build_parts(ts_root, 0, len(self._data))
        return SyntaxNode(kind=ROOT_KIND, parts=tuple(parts))

    def _first_token_start(self, ts_node: Any) -> int:
        index = bisect.bisect_left(self._token_starts, ts_node.start_byte)
        if index < len(self._token_starts) and self._token_starts[index] < ts_node.end_byte:
            return self._token_starts[index]
        return ts_node.start_byte

    def _leading_trivia_start(self, token_start: int, floor: int) -> int:
        index = bisect.bisect_right(self._token_ends, token_start) - 1
        if index < 0:
            return floor
        gap_start = self._token_ends[index]
        fragments = lex_trivia(self._text(gap_start, token_start))
        for position, fragment in enumerate(fragments):
            if fragment.is_end_of_line:
                trailing = render_trivia(fragments[:position])
                return max(floor, gap_start + len(trailing.encode("utf-8")))
        # Same line as the previous token: the whole gap leads the declaration.
        return max(floor, gap_start)

    def _build_parts(self, ts_node: Any, start: int, end: int) -> list[str | SyntaxNode]:
        parts: list[str | SyntaxNode] = []
        cursor = start
        for child in ts_node.children:
            if child.type in DECLARATION_TYPES:
                node, child_start = self._build_declaration(child, cursor)
            elif child.type in CONTAINER_TYPES:
                child_start = max(cursor, child.start_byte)
                node = SyntaxNode(
                    kind=child.type,
                    parts=tuple(self._build_parts(child, child_start, child.end_byte)),
                    line=child.start_point[0],
                    column=child.start_point[1],
                )
            else:
                continue
            if child_start > cursor:
                parts.append(self._text(cursor, child_start))
            parts.append(node)
            cursor = max(cursor, child.end_byte)
        if end > cursor:
            parts.append(self._text(cursor, end))
        return parts

    def _build_declaration(self, ts_node: Any, floor: int) -> tuple[SyntaxNode, int]:
        token_start = max(floor, self._first_token_start(ts_node))
        trivia_start = self._leading_trivia_start(token_start, floor)
        leading: tuple[Trivia, ...] = lex_trivia(self._text(trivia_start, token_start))
        line = self._data.count(b"\n", 0, token_start)
        line_start = self._data.rfind(b"\n", 0, token_start) + 1
        column = len(self._text(line_start, token_start))
        if ts_node.type in CONTAINER_TYPES:
            parts = self._build_parts(ts_node, token_start, ts_node.end_byte)
        else:
            parts = [self._text(token_start, ts_node.end_byte)]
        node = SyntaxNode(
            kind=ts_node.type,
            parts=tuple(parts),
            leading_trivia=leading,
            line=line,
            column=column,
        )
        return node, trivia_start
