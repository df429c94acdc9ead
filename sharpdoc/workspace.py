"""Discovery of the C# files to annotate from solutions, projects or source globs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from sharpdoc.config.models import DiscoverySettings

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".cs"
PROJECT_SUFFIX = ".csproj"
SOLUTION_SUFFIX = ".sln"

# Project("{type-guid}") = "Name", "relative\path\Name.csproj", "{project-guid}"
_SLN_PROJECT_RE = re.compile(
    r'^\s*Project\("\{[^}]*\}"\)\s*=\s*"[^"]*"\s*,\s*"(?P<path>[^"]+)"',
    re.MULTILINE,
)


class NoInputError(Exception):
    """Raised when the discovery glob matches nothing under the folder."""


@dataclass
class WorkUnit:
    """One glob match and the source files it stands for.

    ``projects`` lists the C# projects a solution references; it stays
    empty for project and source matches.
    """

    origin: Path
    kind: str
    projects: list[Path] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)


def _matches_any(path: Path, patterns: set[str]) -> bool:
    """Check whether any component of *path* matches one of *patterns*."""
    return any(part in patterns for part in path.parts)


def solution_projects(solution: Path) -> list[Path]:
    """C# project files referenced by a ``.sln`` file that exist on disk."""
    text = solution.read_text(encoding="utf-8-sig", errors="replace")
    projects: list[Path] = []
    for match in _SLN_PROJECT_RE.finditer(text):
        relative = match.group("path").replace("\\", "/")
        if not relative.lower().endswith(PROJECT_SUFFIX):
            continue
        project = (solution.parent / relative).resolve()
        if project.is_file():
            projects.append(project)
        else:
            logger.warning("Project %s listed in %s does not exist", project, solution)
    return projects


def project_sources(project: Path, ignore: set[str]) -> list[Path]:
    """Every ``.cs`` file under the project's directory, minus ignored dirs."""
    root = project.parent
    return [
        p.resolve()
        for p in sorted(root.rglob(f"*{SOURCE_SUFFIX}"))
        if p.is_file() and not _matches_any(p.relative_to(root).parent, ignore)
    ]


def discover(
    folder: Path,
    settings: DiscoverySettings | None = None,
    pattern: str | None = None,
) -> list[WorkUnit]:
    """Expand glob matches under *folder* into work units.

    Solutions resolve to their C# projects, projects to the ``.cs`` files
    below them and source files to themselves. A file reached from more
    than one match is listed only under the first.
    """
    settings = settings or DiscoverySettings()
    pattern = pattern or settings.glob
    ignore = set(settings.ignore_dirs)
    folder = folder.resolve()

    matches = [
        p
        for p in sorted(folder.glob(pattern))
        if p.is_file() and not _matches_any(p.relative_to(folder).parent, ignore)
    ]
    if not matches:
        raise NoInputError(f"No files matching {pattern!r} under {folder}")

    seen: set[Path] = set()
    units: list[WorkUnit] = []
    for match in matches:
        suffix = match.suffix.lower()
        if suffix == SOLUTION_SUFFIX:
            unit = WorkUnit(origin=match, kind="solution", projects=solution_projects(match))
            candidates = [f for p in unit.projects for f in project_sources(p, ignore)]
        elif suffix == PROJECT_SUFFIX:
            unit = WorkUnit(origin=match, kind="project")
            candidates = project_sources(match, ignore)
        elif suffix == SOURCE_SUFFIX:
            unit = WorkUnit(origin=match, kind="source")
            candidates = [match.resolve()]
        else:
            logger.debug("Ignoring unsupported match %s", match)
            continue
        for path in candidates:
            if path not in seen:
                seen.add(path)
                unit.files.append(path)
        units.append(unit)
    return units
