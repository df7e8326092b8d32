"""Rendering of listed features for the ``json`` and ``call`` output modes."""

from __future__ import annotations

import json
import shlex
from typing import Any

import click
from pydantic import ValidationError

from mcpt._types import FeatureDescriptor, OutputFormat, SchemaNode
from mcpt.errors import SchemaMalformedError
from mcpt.schema import PropertyAnnotation, annotate_properties, required_template

_PAD = " " * len("[REQUIRED]")


def render_json(features: list[Any]) -> str:
    return json.dumps(features, indent=2, ensure_ascii=False)


def _descriptor(raw: Any) -> FeatureDescriptor:
    if not isinstance(raw, dict):
        raise SchemaMalformedError("feature element is not an object")
    try:
        return FeatureDescriptor.model_validate(raw)
    except ValidationError as exc:
        raise SchemaMalformedError(f"feature descriptor is malformed: {exc}") from exc


def call_command(host: str, tool: str, schema: SchemaNode) -> str:
    """A ready-to-edit ``mcpt call`` line with placeholders for required fields."""
    fields = required_template(schema)
    arguments = ",".join(
        f"{json.dumps(key, ensure_ascii=False)}:{click.style(token, fg='red')}"
        for key, token in fields
    )
    return (
        f"mcpt call --host {shlex.quote(host)} --tool {shlex.quote(tool.strip())} "
        f"--arguments {shlex.quote('{' + arguments + '}')}"
    )


def annotation_line(annotation: PropertyAnnotation) -> str:
    text = click.style(f"{annotation.path} -> type: {annotation.type_label}", fg="blue")
    if annotation.required:
        line = click.style("[REQUIRED]", fg="red") + " " + text
    else:
        line = f"{_PAD} {text}"
    if annotation.item_type is not None:
        line += click.style(f"[ArrayItems -> type: {annotation.item_type}]", fg="blue")
    if annotation.unique_items:
        line += "[UNIQUE]"
    return line


def render_call(features: list[Any], host: str) -> str:
    """Invocation template plus annotated property listing for each feature."""
    blocks: list[str] = []
    for raw in features:
        descriptor = _descriptor(raw)
        schema = descriptor.input_schema
        if schema is None:
            raise SchemaMalformedError(f"inputSchema not found for {descriptor.name!r}")
        lines = [call_command(host, descriptor.name, schema)]
        lines.extend(annotation_line(a) for a in annotate_properties(schema))
        blocks.append("\n".join(lines) + "\n")
    return "\n".join(blocks)


def render_features(features: list[Any], output: OutputFormat, host: str) -> str:
    if output == OutputFormat.CALL:
        return render_call(features, host)
    return render_json(features)
