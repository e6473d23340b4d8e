"""Recursive conversion of Python types into strict JSON Schema."""

import logging
from collections.abc import Mapping
from typing import Any, get_origin

from .config import SchemaOptions
from .introspect import (
    deref,
    is_record,
    is_sequence,
    parse_json_tag,
    primitive_name,
    record_fields,
    sequence_element,
)
from .types import (
    CircularReferenceError,
    Converted,
    Primitive,
    Schema,
    UnsupportedTypeError,
)

logger = logging.getLogger(__name__)


def json_type_of(
    tp: Any,
    path: set[type],
    depth: int,
    options: SchemaOptions,
) -> Converted:
    """
    Convert a type into a primitive name or a schema node.

    Args:
        tp: The type to convert
        path: Records whose expansion is currently open
        depth: Current nesting depth
        options: Generation options

    Returns:
        A Primitive for scalar types, a Schema for arrays and records

    Raises:
        CircularReferenceError: On a self-referencing record or when the
            depth exceeds options.max_depth
        UnsupportedTypeError: On types the schema dialect cannot express
    """
    # Checked before anything else so deep array chains terminate too
    if depth > options.max_depth:
        raise CircularReferenceError(depth=depth)

    tp = deref(tp)

    if is_record(tp):
        if tp in path:
            raise CircularReferenceError(tp)
        return record_schema(tp, path, depth + 1, options)

    if is_sequence(tp):
        return array_schema(tp, path, depth + 1, options)

    name = primitive_name(tp)
    if name is None:
        raise UnsupportedTypeError(tp, _unsupported_reason(tp))
    return Primitive(name)


def array_schema(
    tp: Any,
    path: set[type],
    depth: int,
    options: SchemaOptions,
) -> Schema:
    """Build an array schema whose items describe the sequence element type."""
    items = json_type_of(sequence_element(tp), path, depth, options)
    if isinstance(items, Primitive):
        items = items.as_schema()
    return {"type": "array", "items": items}


def record_schema(
    tp: type,
    path: set[type],
    depth: int,
    options: SchemaOptions,
) -> Schema:
    """Build an object schema listing every exported field of a record."""
    properties, required = record_properties(tp, path, depth, options)
    schema: Schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    schema["additionalProperties"] = options.allow_additional_properties
    return schema


def record_properties(
    tp: type,
    path: set[type],
    depth: int,
    options: SchemaOptions,
) -> tuple[dict[str, Schema], list[str]]:
    """
    Collect the property schemas and required names of a record.

    Embedded records are flattened into the result at the same depth.
    Every emitted property is required; optional fields are expressed
    as a union with null instead.
    """
    if tp in path:
        raise CircularReferenceError(tp)

    logger.debug("Expanding record %s at depth %d", tp.__qualname__, depth)
    path.add(tp)
    try:
        properties: dict[str, Schema] = {}
        required: list[str] = []

        for field in record_fields(tp):
            if not field.exported or field.excluded:
                continue

            if field.embedded:
                embedded = deref(field.annotation)
                if not is_record(embedded):
                    raise UnsupportedTypeError(embedded, "embedded field must be a record")
                embedded_properties, embedded_required = record_properties(
                    embedded, path, depth, options
                )
                properties.update(embedded_properties)
                _extend_unique(required, embedded_required)
                continue

            parsed = parse_json_tag(field.name, field.tag)
            if parsed is None:
                continue
            name, optional = parsed

            converted = json_type_of(field.annotation, path, depth, options)
            properties[name] = _nullable(converted) if optional else _as_schema(converted)
            # OpenAI structured outputs require all fields in required
            _extend_unique(required, [name])

        return properties, required
    finally:
        path.discard(tp)


def _as_schema(converted: Converted) -> Schema:
    if isinstance(converted, Primitive):
        return converted.as_schema()
    return converted


def _nullable(converted: Converted) -> Schema:
    if isinstance(converted, Primitive):
        return {"type": [converted.name, "null"]}
    return {"anyOf": [converted, {"type": "null"}]}


def _extend_unique(names: list[str], new_names: list[str]) -> None:
    for name in new_names:
        if name not in names:
            names.append(name)


def _unsupported_reason(tp: Any) -> str | None:
    origin = get_origin(tp) or tp
    if isinstance(origin, type) and issubclass(origin, Mapping):
        return "maps are not allowed because additionalProperties must be false"
    if tp is Any:
        return "the element type must be concrete"
    return None
