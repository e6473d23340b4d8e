"""Shared types and exceptions for gptschema."""

from dataclasses import dataclass
from typing import Any, Literal

# A single JSON Schema node
Schema = dict[str, Any]

PrimitiveName = Literal["string", "boolean", "integer", "number"]


@dataclass(frozen=True)
class Primitive:
    """A bare primitive type name, not yet wrapped into a schema node."""

    name: PrimitiveName

    def as_schema(self) -> Schema:
        return {"type": self.name}


# Result of converting one type: either a primitive name or a full schema node
Converted = Primitive | Schema


@dataclass(frozen=True)
class JsonTag:
    """
    Serialization tag attached to a record field.

    Uses the same directive syntax as Go's ``encoding/json`` tags:
    ``"name"``, ``"name,omitempty"``, ``",omitempty"`` or ``"-"``.

    Example:
        @dataclass
        class Address:
            city: Annotated[str, JsonTag("city")]
            postal_code: Annotated[str, JsonTag("postalCode,omitempty")]
    """

    value: str = ""


@dataclass(frozen=True)
class Embedded:
    """Marks a record field whose own fields are flattened into the parent."""


# Exceptions
class SchemaError(Exception):
    """Base exception for gptschema errors."""

    pass


class UnsupportedTypeError(SchemaError):
    """The type graph contains a kind the target schema dialect cannot express."""

    def __init__(self, type_: Any, reason: str | None = None):
        message = f"unsupported type for JSON schema: {_type_name(type_)}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.type_ = type_


class CircularReferenceError(SchemaError):
    """
    A record is expanded inside its own expansion, or max depth ran out.

    Both causes share this error type; ``type_`` is set for a detected cycle
    and ``depth`` for an exhausted depth budget.
    """

    def __init__(self, type_: Any = None, depth: int | None = None):
        if type_ is not None:
            detail = f"{_type_name(type_)} is already being expanded"
        else:
            detail = f"maximum depth exceeded at depth {depth}"
        super().__init__(f"circular reference detected: {detail}")
        self.type_ = type_
        self.depth = depth


class InvalidInputError(SchemaError):
    """The root value cannot be converted into a schema."""

    pass


class ConfigError(SchemaError):
    """Configuration error."""

    pass


def _type_name(type_: Any) -> str:
    if isinstance(type_, type):
        return type_.__qualname__
    return repr(type_)
