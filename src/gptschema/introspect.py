"""Type introspection helpers for dataclasses and Pydantic models.

These functions answer the questions the converter asks about a type:
what it is once indirection is removed, whether it is a record, which
fields it declares and how each field's serialization tag reads.
"""

import dataclasses
import types
from collections.abc import MutableSequence, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, TypeAliasType, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from .types import Embedded, JsonTag, PrimitiveName, UnsupportedTypeError

# Tag directive marking a field as optional
OMIT_EMPTY = "omitempty"

# Tag name that removes a field from the schema
SKIP = "-"

# Metadata keys understood on dataclass fields
TAG_KEY = "json"
EMBED_KEY = "embed"

_SEQUENCE_ORIGINS = (list, tuple, Sequence, MutableSequence)


@dataclass
class RecordField:
    """A field declared on a record type."""

    name: str
    annotation: Any
    tag: str = ""
    embedded: bool = False
    excluded: bool = False

    @property
    def exported(self) -> bool:
        return not self.name.startswith("_")


def deref(tp: Any) -> Any:
    """
    Strip indirection layers until the described type is reached.

    Unwraps ``Annotated[T, ...]``, ``T | None``, ``NewType`` and
    ``type`` aliases. Unions with more than one non-None member are
    returned unchanged.
    """
    while True:
        origin = get_origin(tp)
        if origin is Annotated:
            tp = tp.__origin__
        elif origin is Union or origin is types.UnionType:
            args = get_args(tp)
            non_none = [arg for arg in args if arg is not type(None)]
            if len(non_none) != 1 or len(non_none) == len(args):
                return tp
            tp = non_none[0]
        elif isinstance(tp, TypeAliasType):
            tp = tp.__value__
        elif hasattr(tp, "__supertype__"):
            tp = tp.__supertype__
        else:
            return tp


def is_record(tp: Any) -> bool:
    """Check whether a resolved type is a dataclass or a Pydantic model class."""
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def primitive_name(tp: Any) -> PrimitiveName | None:
    """Map a resolved scalar type to its schema type name, or None if not a scalar."""
    if not isinstance(tp, type):
        return None
    # bool is a subclass of int
    if issubclass(tp, bool):
        return "boolean"
    if issubclass(tp, int):
        return "integer"
    if issubclass(tp, float):
        return "number"
    if issubclass(tp, str):
        return "string"
    return None


def is_sequence(tp: Any) -> bool:
    return tp is list or tp is tuple or get_origin(tp) in _SEQUENCE_ORIGINS


def sequence_element(tp: Any) -> Any:
    """
    Get the element type of a sequence type.

    Raises:
        UnsupportedTypeError: If the sequence has no single element type
    """
    args = get_args(tp)
    if not args:
        raise UnsupportedTypeError(tp, "sequence without an element type")

    if get_origin(tp) is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        # Fixed length tuples are arrays only when homogeneous
        if any(arg != args[0] for arg in args[1:]):
            raise UnsupportedTypeError(tp, "heterogeneous tuple")

    return args[0]


def parse_json_tag(field_name: str, tag: str) -> tuple[str, bool] | None:
    """
    Parse a serialization tag into the emitted name and optionality.

    Args:
        field_name: The declared field name, used when the tag gives no name
        tag: Comma separated tag directives, may be empty

    Returns:
        (name, optional), or None if the field should be skipped
    """
    if not tag:
        return field_name, False

    first, *directives = tag.split(",")
    if first == SKIP:
        return None

    name = first or field_name
    # Unknown directives are ignored
    optional = OMIT_EMPTY in directives
    return name, optional


def record_fields(tp: type) -> list[RecordField]:
    """List the fields of a record type in declaration order."""
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return _model_fields(tp)
    return _dataclass_fields(tp)


def _dataclass_fields(tp: type) -> list[RecordField]:
    # The record's own name must resolve for classes defined in a function
    try:
        hints = get_type_hints(tp, localns={tp.__name__: tp}, include_extras=True)
    except (NameError, TypeError) as e:
        raise UnsupportedTypeError(tp, f"unresolvable annotation: {e}") from e
    fields = []
    for f in dataclasses.fields(tp):
        annotation = hints.get(f.name, f.type)
        markers = _annotated_metadata(annotation)
        tag = f.metadata.get(TAG_KEY, _find_tag(markers))
        embedded = bool(f.metadata.get(EMBED_KEY)) or _has_embed(markers)
        fields.append(RecordField(f.name, annotation, tag=tag, embedded=embedded))
    return fields


def _model_fields(tp: type[BaseModel]) -> list[RecordField]:
    fields = []
    for name, info in tp.model_fields.items():
        markers = (*info.metadata, *_annotated_metadata(info.annotation))
        tag = _find_tag(markers)
        extra = info.json_schema_extra
        if isinstance(extra, dict) and isinstance(extra.get(TAG_KEY), str):
            tag = extra[TAG_KEY]
        fields.append(
            RecordField(
                name,
                info.annotation,
                tag=tag,
                embedded=_has_embed(markers),
                excluded=bool(info.exclude),
            )
        )
    return fields


def _annotated_metadata(annotation: Any) -> tuple[Any, ...]:
    """Collect Annotated metadata, including inside Optional wrappers."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return (*annotation.__metadata__, *_annotated_metadata(annotation.__origin__))
    if origin is Union or origin is types.UnionType:
        return tuple(
            marker
            for arg in get_args(annotation)
            if arg is not type(None)
            for marker in _annotated_metadata(arg)
        )
    return ()


def _find_tag(markers: Sequence[Any]) -> str:
    for marker in markers:
        if isinstance(marker, JsonTag):
            return marker.value
    return ""


def _has_embed(markers: Sequence[Any]) -> bool:
    return any(isinstance(marker, Embedded) or marker is Embedded for marker in markers)
