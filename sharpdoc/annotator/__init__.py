"""Doc-comment generation for declarations of a C# syntax tree."""

from .engine import AnnotationEngine, AnnotationReport
from .extractor import CommentExtractor
from .kinds import DeclarationKind, declaration_kind
from .orchestrator import BatchOrchestrator, BatchReport, FileResult
from .prompts import PromptBuilder
from .splicer import TriviaSplicer

__all__ = [
    "AnnotationEngine",
    "AnnotationReport",
    "BatchOrchestrator",
    "BatchReport",
    "CommentExtractor",
    "DeclarationKind",
    "FileResult",
    "PromptBuilder",
    "TriviaSplicer",
    "declaration_kind",
]
