"""Per-tree annotation: prompt, generate, extract and splice for each declaration."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from sharpdoc.annotator.extractor import CommentExtractor
from sharpdoc.annotator.kinds import DeclarationKind, declaration_kind
from sharpdoc.annotator.prompts import PromptBuilder
from sharpdoc.annotator.splicer import TriviaSplicer
from sharpdoc.llm.models import CompletionError
from sharpdoc.llm.resilient import ResilientCompletionClient
from sharpdoc.output import OutputSink
from sharpdoc.syntax.tree import NodePath, SyntaxNode, SyntaxTree
from sharpdoc.syntax.trivia import has_doc_comment

logger = logging.getLogger(__name__)


class AnnotationReport(BaseModel):
    annotated: int = 0
    unchanged: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def visited(self) -> int:
        return self.annotated + self.unchanged + self.skipped + self.failed


class AnnotationEngine:
    """Walks one syntax tree and rewrites the doc comment of every declaration.

    Declarations are handled one at a time in document order. A failure on
    one node is logged and reported, and the walk moves on with that node
    left as it was.
    """

    def __init__(
        self,
        client: ResilientCompletionClient,
        sink: OutputSink | None = None,
        *,
        prompt_builder: PromptBuilder | None = None,
        extractor: CommentExtractor | None = None,
        splicer: TriviaSplicer | None = None,
        skip_documented: bool = False,
    ) -> None:
        self.client = client
        self.sink = sink
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.extractor = extractor or CommentExtractor()
        self.splicer = splicer or TriviaSplicer()
        self.skip_documented = skip_documented

    async def annotate(self, tree: SyntaxTree) -> tuple[SyntaxTree, AnnotationReport]:
        report = AnnotationReport()
        stack: list[NodePath] = [()]
        while stack:
            path = stack.pop()
            node = tree.node_at(path)
            kind = declaration_kind(node.kind)
            if kind is not None:
                tree = await self._visit(tree, path, node, kind, report)
                node = tree.node_at(path)
            child_paths = [path + (index,) for index, _ in node.iter_children()]
            stack.extend(reversed(child_paths))
        return tree, report

    async def _visit(
        self,
        tree: SyntaxTree,
        path: NodePath,
        node: SyntaxNode,
        kind: DeclarationKind,
        report: AnnotationReport,
    ) -> SyntaxTree:
        if self.skip_documented and has_doc_comment(node.leading_trivia):
            logger.debug("Skipping documented %s at line %d", kind.label, node.line + 1)
            report.skipped += 1
            return tree

        location = _location(tree, node)
        try:
            request = self.prompt_builder.build(kind, node.to_full_string())
            raw = await self.client.execute(request)
            indentation = tree.indentation_of(node)
            if not tree.begins_line(node):
                # Moved onto its own line, one level inside its container.
                indentation += tree.indent_unit
            lines = self.extractor.extract(raw, indentation)
            if not lines:
                logger.info("No doc comment in answer for %s at %s", kind.label, location)
                report.unchanged += 1
                return tree
            trivia = self.splicer.splice(
                node.leading_trivia,
                lines,
                indentation,
                tree.newline,
                line_start=tree.trivia_starts_line(node),
            )
            tree = tree.with_leading_trivia(path, trivia)
        except CompletionError as e:
            logger.warning("Generation failed for %s at %s: %s", kind.label, location, e)
            self._report_error(
                f"Could not generate a comment for {kind.label} at {location}: {e}"
            )
            report.failed += 1
            return tree
        except Exception as e:
            logger.exception("Unexpected error annotating %s at %s", kind.label, location)
            self._report_error(f"Could not annotate {kind.label} at {location}: {e}")
            report.failed += 1
            return tree

        report.annotated += 1
        return tree

    def _report_error(self, message: str) -> None:
        if self.sink is not None:
            self.sink.error(message)


def _location(tree: SyntaxTree, node: SyntaxNode) -> str:
    name = tree.path.name if tree.path is not None else "<source>"
    return f"{name}:{node.line + 1}"
