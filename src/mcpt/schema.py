"""Introspection of tool input schemas.

Two views of the same ``inputSchema``:

- :func:`required_template` lists the top-level required fields, in the order
  of the schema's ``required`` array, each paired with a placeholder token.
- :func:`annotate_properties` walks every property depth-first and reports
  its dotted path, type, whether its parent object requires it, and the
  element type of arrays.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from mcpt._types import SchemaNode
from mcpt.errors import SchemaMalformedError


@dataclass(frozen=True)
class PropertyAnnotation:
    path: str
    type_label: str
    required: bool
    item_type: str | None = None
    unique_items: bool = False


def parse_schema(raw: Any) -> SchemaNode:
    """Validate a raw ``inputSchema`` mapping into a :class:`SchemaNode`."""
    if isinstance(raw, SchemaNode):
        return raw
    if not isinstance(raw, Mapping):
        raise SchemaMalformedError(f"inputSchema is not an object: {raw!r}")
    try:
        return SchemaNode.model_validate(raw)
    except ValidationError as exc:
        raise SchemaMalformedError(f"inputSchema is malformed: {exc}") from exc


def _type_name(node: SchemaNode) -> str | None:
    if isinstance(node.type, list):
        return "|".join(node.type)
    return node.type


def placeholder(key: str, node: SchemaNode) -> str:
    """``<<key>>`` for scalars, ``<<keyObject>>`` for objects, ``<<keyEnum>>`` for enums."""
    if node.type == "object":
        return f"<<{key}Object>>"
    if node.type == "enum":
        return f"<<{key}Enum>>"
    return f"<<{key}>>"


def required_template(schema: SchemaNode | Mapping[str, Any]) -> list[tuple[str, str]]:
    """Return ``(key, placeholder)`` for each top-level required property."""
    node = parse_schema(schema)
    if node.required is None:
        raise SchemaMalformedError("required not found")
    if node.properties is None:
        raise SchemaMalformedError("properties not found")

    fields: list[tuple[str, str]] = []
    for raw_key in node.required:
        key = raw_key.strip()
        prop = node.properties.get(key)
        if prop is None:
            raise SchemaMalformedError(f"required property {key!r} not found in properties")
        if prop.type is None:
            raise SchemaMalformedError(f"type not found for property {key!r}")
        fields.append((key, placeholder(key, prop)))
    return fields


def type_label(node: SchemaNode) -> str | None:
    """``enum("A","B")`` when the node has an enum, else its type."""
    if node.enum is not None:
        return "enum(" + ",".join(json.dumps(v) for v in node.enum) + ")"
    return _type_name(node)


def _walk(
    properties: Mapping[str, SchemaNode], prefix: str, required: frozenset[str]
) -> Iterator[PropertyAnnotation]:
    for key, prop in properties.items():
        path = f"{prefix}.{key}" if prefix else key

        label = type_label(prop)
        if label is not None:
            item_type = None
            unique = False
            if prop.items is not None:
                item_type = _type_name(prop.items)
                unique = bool(prop.unique_items)
            yield PropertyAnnotation(
                path=path,
                type_label=label,
                required=key in required,
                item_type=item_type,
                unique_items=unique,
            )

        if prop.properties:
            yield from _walk(prop.properties, path, frozenset(prop.required or ()))


def annotate_properties(schema: SchemaNode | Mapping[str, Any]) -> list[PropertyAnnotation]:
    """Annotate every property of ``schema``, depth-first."""
    node = parse_schema(schema)
    if not node.properties:
        return []
    return list(_walk(node.properties, "", frozenset(node.required or ())))
