"""Prompt templates for doc-comment generation."""

from __future__ import annotations

from sharpdoc.annotator.kinds import DeclarationKind
from sharpdoc.llm.models import ChatMessage, CompletionRequest

MAX_PROMPT_CHARS = 14_000

SYSTEM_PREAMBLE = """\
You generate C# XML documentation comments.
You only produce the XML documentation comment, written with /// markers. \
Do not write anything outside the comment so it can be pasted as is.
You never generate a <remarks> section.
{instructions}
Follow the StyleCop documentation formatting rules.\
"""

KIND_INSTRUCTIONS: dict[DeclarationKind, str] = {
    DeclarationKind.TYPE_DECLARATION: (
        "Only document the type itself, not its methods, properties or fields."
    ),
    DeclarationKind.METHOD: (
        "Give a two to three sentence summary of what the method does, without "
        "implementation details such as LINQ operations or loops. Besides the "
        "summary, only use <param>, <typeparam> and <returns> tags."
    ),
    DeclarationKind.FIELD: "Provide only a brief description of the field.",
    DeclarationKind.PROPERTY: "Provide only the <summary> section of the comment, nothing else.",
}

DEFAULT_INSTRUCTIONS = "Provide only the <summary> section of the comment."

USER_PROMPT_TEMPLATE = "Here is my {label} that I want you to generate an XML comment for\n{code}"


class PromptBuilder:
    """Turns a declaration's source text into a :class:`CompletionRequest`."""

    def __init__(self, max_chars: int = MAX_PROMPT_CHARS) -> None:
        self.max_chars = max_chars

    def build(self, kind: DeclarationKind, source_text: str) -> CompletionRequest:
        system = SYSTEM_PREAMBLE.format(instructions=instructions_for(kind))
        user = USER_PROMPT_TEMPLATE.format(label=kind.label, code=self.prepare_code(source_text))
        return CompletionRequest(
            messages=[
                ChatMessage(role="system", content=system),
                ChatMessage(role="user", content=user),
            ]
        )

    def prepare_code(self, source_text: str) -> str:
        """Strip every line and hard-cut the result at ``max_chars``."""
        code = "\n".join(line.strip() for line in source_text.splitlines())
        return code[: self.max_chars]


def instructions_for(kind: DeclarationKind) -> str:
    return KIND_INSTRUCTIONS.get(kind, DEFAULT_INSTRUCTIONS)
