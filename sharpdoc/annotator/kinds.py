"""The closed set of declaration kinds that receive doc comments."""

from __future__ import annotations

from enum import Enum


class DeclarationKind(str, Enum):
    TYPE_DECLARATION = "type"
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    DELEGATE = "delegate"
    ENUM_MEMBER = "enum_member"
    EVENT_FIELD = "event_field"

    @property
    def label(self) -> str:
        """Human-readable name used in prompts."""
        return _LABELS[self]


_LABELS = {
    DeclarationKind.TYPE_DECLARATION: "type",
    DeclarationKind.METHOD: "method",
    DeclarationKind.PROPERTY: "property",
    DeclarationKind.FIELD: "field",
    DeclarationKind.DELEGATE: "delegate",
    DeclarationKind.ENUM_MEMBER: "enum member",
    DeclarationKind.EVENT_FIELD: "event",
}

# tree-sitter node type -> declaration kind
NODE_KINDS: dict[str, DeclarationKind] = {
    "class_declaration": DeclarationKind.TYPE_DECLARATION,
    "struct_declaration": DeclarationKind.TYPE_DECLARATION,
    "interface_declaration": DeclarationKind.TYPE_DECLARATION,
    "record_declaration": DeclarationKind.TYPE_DECLARATION,
    "record_struct_declaration": DeclarationKind.TYPE_DECLARATION,
    "enum_declaration": DeclarationKind.TYPE_DECLARATION,
    "method_declaration": DeclarationKind.METHOD,
    "property_declaration": DeclarationKind.PROPERTY,
    "field_declaration": DeclarationKind.FIELD,
    "delegate_declaration": DeclarationKind.DELEGATE,
    "enum_member_declaration": DeclarationKind.ENUM_MEMBER,
    "event_field_declaration": DeclarationKind.EVENT_FIELD,
}


def declaration_kind(node_kind: str) -> DeclarationKind | None:
    return NODE_KINDS.get(node_kind)
