from .parser import CSharpParser, SourceParseError
from .tree import NodePath, SyntaxNode, SyntaxTree, replace_at
from .trivia import Trivia, TriviaKind, lex_trivia, render_trivia

__all__ = [
    "CSharpParser",
    "NodePath",
    "SourceParseError",
    "SyntaxNode",
    "SyntaxTree",
    "Trivia",
    "TriviaKind",
    "lex_trivia",
    "render_trivia",
    "replace_at",
]
