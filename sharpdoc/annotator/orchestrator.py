"""Batch annotation of every C# file reachable from a folder."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from pydantic import BaseModel, Field

from sharpdoc.annotator.engine import AnnotationEngine, AnnotationReport
from sharpdoc.annotator.extractor import CommentExtractor
from sharpdoc.annotator.prompts import PromptBuilder
from sharpdoc.config.models import AnnotateSettings, DiscoverySettings
from sharpdoc.llm.resilient import ResilientCompletionClient
from sharpdoc.output import OutputSink
from sharpdoc.syntax.parser import CSharpParser, SourceParseError
from sharpdoc.workspace import discover

logger = logging.getLogger(__name__)


class FileResult(BaseModel):
    path: Path
    written: bool = False
    error: str | None = None
    report: AnnotationReport = Field(default_factory=AnnotationReport)


class BatchReport(BaseModel):
    files: list[FileResult] = Field(default_factory=list)
    skipped_units: list[Path] = Field(default_factory=list)

    @property
    def written(self) -> int:
        return sum(1 for f in self.files if f.written)

    @property
    def failed(self) -> int:
        return sum(1 for f in self.files if f.error is not None)

    @property
    def annotated(self) -> int:
        return sum(f.report.annotated for f in self.files)

    @property
    def node_failures(self) -> int:
        return sum(f.report.failed for f in self.files)


class BatchOrchestrator:
    """Discovers source files and annotates them with bounded concurrency.

    Each file is read, parsed, annotated by its own engine and written back
    in place. A file that cannot be processed is reported and left alone;
    the rest of the batch carries on.
    """

    def __init__(
        self,
        client: ResilientCompletionClient,
        sink: OutputSink,
        *,
        settings: AnnotateSettings | None = None,
        discovery: DiscoverySettings | None = None,
        parser: CSharpParser | None = None,
    ) -> None:
        self.client = client
        self.sink = sink
        self.settings = settings or AnnotateSettings()
        self.discovery = discovery or DiscoverySettings()
        self.parser = parser or CSharpParser()

    async def run(self, folder: Path, pattern: str | None = None) -> BatchReport:
        """Annotate everything *pattern* reaches under *folder*.

        Raises :class:`~sharpdoc.workspace.NoInputError` when nothing matches.
        """
        units = discover(folder, self.discovery, pattern)
        report = BatchReport()
        files: list[Path] = []
        for unit in units:
            if unit.kind == "solution" and not unit.projects:
                self.sink.error(f"No projects in {unit.origin}")
                report.skipped_units.append(unit.origin)
                continue
            self.sink.info(f"Processing {unit.kind}: {unit.origin}")
            files.extend(unit.files)

        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def bounded(path: Path) -> FileResult:
            async with semaphore:
                return await self.process_file(path)

        report.files = list(await asyncio.gather(*(bounded(path) for path in files)))
        logger.info(
            "Batch finished: %d written, %d failed, %d declarations annotated",
            report.written,
            report.failed,
            report.annotated,
        )
        return report

    async def process_file(self, path: Path) -> FileResult:
        result = FileResult(path=path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
            tree = self.parser.parse_bytes(data, path=path)
            engine = self._make_engine()
            tree, result.report = await engine.annotate(tree)
            await asyncio.to_thread(path.write_bytes, CSharpParser.serialize(tree))
        except (OSError, SourceParseError) as e:
            logger.warning("Skipping %s: %s", path, e)
            result.error = str(e)
            self.sink.error(f"Could not process {path}: {e}")
            return result
        except Exception as e:
            logger.exception("Unexpected error processing %s", path)
            result.error = str(e)
            self.sink.error(f"Could not process {path} on exception {e!r}")
            return result

        result.written = True
        self.sink.info(f"Done writing {path}")
        return result

    def _make_engine(self) -> AnnotationEngine:
        return AnnotationEngine(
            self.client,
            self.sink,
            prompt_builder=PromptBuilder(self.settings.max_prompt_chars),
            extractor=CommentExtractor(self.settings.comment_marker),
            skip_documented=self.settings.skip_documented,
        )
