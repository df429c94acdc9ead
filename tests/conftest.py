"""Shared test fixtures for sharpdoc."""

from pathlib import Path

import pytest
from unittest.mock import AsyncMock, MagicMock

from rich.console import Console

from sharpdoc.config.models import SharpdocConfig
from sharpdoc.llm.base import LLMProvider
from sharpdoc.llm.models import LLMConfig, LLMResponse, TokenUsage
from sharpdoc.llm.resilient import ResilientCompletionClient
from sharpdoc.output import OutputSink
from sharpdoc.syntax.tree import SyntaxNode, SyntaxTree
from sharpdoc.syntax.trivia import end_of_line, whitespace

DOC_ANSWER = "/// <summary>\n/// Generated.\n/// </summary>"

SAMPLE_SOURCE = """\
namespace Demo
{
    public class Greeter
    {
        // old note
        public string Name { get; set; }

        public string Greet()
        {
            return "Hi " + Name;
        }
    }
}
"""


def make_response(content: str) -> LLMResponse:
    return LLMResponse(
        content=content,
        usage=TokenUsage(input_tokens=10, output_tokens=20),
        model="test-model",
    )


@pytest.fixture
def simple_tree():
    """``class A { int x; }`` laid out on four lines, built by hand."""
    field = SyntaxNode(
        kind="field_declaration",
        parts=("int x;",),
        leading_trivia=(end_of_line(), whitespace("    ")),
        line=2,
        column=4,
    )
    cls = SyntaxNode(
        kind="class_declaration",
        parts=("class A\n{", field, "\n}"),
        line=0,
        column=0,
    )
    root = SyntaxNode(kind="compilation_unit", parts=(cls, "\n"))
    return SyntaxTree(root=root, source="class A\n{\n    int x;\n}\n")


@pytest.fixture
def mock_llm_provider():
    provider = MagicMock(spec=LLMProvider)
    provider.name = "mock"
    provider.config = LLMConfig(provider="openai", model="test-model")
    provider.complete = AsyncMock(return_value=make_response(DOC_ANSWER))
    return provider


@pytest.fixture
def mock_client():
    client = MagicMock(spec=ResilientCompletionClient)
    client.execute = AsyncMock(return_value=DOC_ANSWER)
    return client


@pytest.fixture
def sink():
    console = Console(record=True, width=200, color_system=None)
    return OutputSink(console)


@pytest.fixture
def sample_config():
    return SharpdocConfig()


@pytest.fixture
def cs_project(tmp_path):
    """A folder with one project holding two sources and a build output dir."""
    project_dir = tmp_path / "Demo"
    project_dir.mkdir()
    (project_dir / "Demo.csproj").write_text("<Project Sdk=\"Microsoft.NET.Sdk\" />\n")
    (project_dir / "Greeter.cs").write_text(SAMPLE_SOURCE)
    (project_dir / "Models").mkdir()
    (project_dir / "Models" / "Color.cs").write_text(
        "enum Color\n{\n    Red,\n    Green\n}\n"
    )
    (project_dir / "obj").mkdir()
    (project_dir / "obj" / "Generated.cs").write_text("class Generated { }\n")
    return tmp_path


@pytest.fixture
def doc_answer():
    return DOC_ANSWER


@pytest.fixture
def sample_source():
    return SAMPLE_SOURCE


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run with an empty cwd and home so no real config files are found."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(work)
    return work
