"""JSON schema generation from dataclasses and Pydantic models."""

import json
import logging
from typing import Any, get_origin

from jinja2 import Template

from .config import Option, SchemaOptions, resolve_options
from .converter import json_type_of
from .introspect import deref, is_record
from .types import InvalidInputError, Schema, SchemaError

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = Template(
    """You must respond with valid JSON matching this schema:

```json
{{ schema }}
```

Important:
- Respond ONLY with the JSON object, no other text
- Include every field listed in "required"; use null for fields that allow it
- Use the exact field names and types specified"""
)


def generate_schema(
    value: Any,
    *options: Option,
    config: SchemaOptions | None = None,
) -> Schema:
    """
    Generate a JSON schema compatible with OpenAI structured outputs.

    The generated schema follows the strict mode rules:
    - additionalProperties is false on every object
    - every property is listed in required
    - optional fields (``omitempty`` tag) are a union with null

    Args:
        value: A dataclass or Pydantic model class, or an instance of one
        *options: Option functions such as with_max_depth()
        config: Base options to apply the option functions to

    Returns:
        The JSON schema of the record

    Raises:
        InvalidInputError: If value is None or not a record
        UnsupportedTypeError: If a field uses a type that cannot be expressed
        CircularReferenceError: If a record references itself or the
            maximum depth is exceeded

    Example:
        @dataclass
        class Person:
            name: Annotated[str, JsonTag("name")]
            age: Annotated[int, JsonTag("age")]

        schema = generate_schema(Person)
    """
    tp = _root_type(value)
    if not is_record(tp):
        raise InvalidInputError(
            "the schema is expected to be a dataclass or a Pydantic model, "
            f"got {getattr(tp, '__qualname__', repr(tp))}"
        )

    resolved = resolve_options(config, options)
    logger.debug(
        "Generating schema for %s (max_depth=%d)", tp.__qualname__, resolved.max_depth
    )
    try:
        result = json_type_of(tp, set(), 0, resolved)
    except SchemaError as e:
        logger.debug("Schema generation for %s failed: %s", tp.__qualname__, e)
        raise

    if not isinstance(result, dict):
        raise InvalidInputError(f"expected an object schema, got {result!r}")
    return result


def generate_schema_json(
    value: Any,
    *options: Option,
    config: SchemaOptions | None = None,
    indent: int | None = None,
) -> str:
    """
    Generate the JSON schema of a record as a JSON string.

    Accepts the same arguments as generate_schema(), plus the indentation
    passed to json.dumps.
    """
    schema = generate_schema(value, *options, config=config)
    return json.dumps(schema, indent=indent)


def format_schema_for_openai(
    value: Any,
    *options: Option,
    name: str | None = None,
    description: str | None = None,
    strict: bool = True,
    config: SchemaOptions | None = None,
) -> dict[str, Any]:
    """
    Format a schema for OpenAI's structured outputs feature.

    OpenAI's structured outputs (response_format with json_schema)
    requires a specific format with name and strict fields.

    Args:
        value: A dataclass or Pydantic model class, or an instance of one
        name: Schema name, defaults to the record class name
        description: Optional description of the expected response
        strict: Whether the provider should enforce the schema

    Returns:
        Dict formatted for OpenAI's response_format parameter
    """
    schema = generate_schema(value, *options, config=config)
    if name is None:
        name = _root_type(value).__name__

    json_schema: dict[str, Any] = {"name": name}
    if description is not None:
        json_schema["description"] = description
    json_schema["strict"] = strict
    json_schema["schema"] = schema

    return {"type": "json_schema", "json_schema": json_schema}


def schema_to_prompt(value: Any, *options: Option, config: SchemaOptions | None = None) -> str:
    """
    Describe the expected JSON structure for inclusion in a system prompt.

    Useful for models without native structured output support.
    """
    schema = generate_schema(value, *options, config=config)
    return _PROMPT_TEMPLATE.render(schema=json.dumps(schema, indent=2))


def is_supported_type(value: Any, *options: Option, config: SchemaOptions | None = None) -> bool:
    """Check whether a schema can be generated for a record."""
    try:
        generate_schema(value, *options, config=config)
        return True
    except SchemaError:
        return False


def _root_type(value: Any) -> Any:
    if value is None:
        raise InvalidInputError("cannot generate schema for None")
    if isinstance(value, type) or get_origin(value) is not None:
        return deref(value)
    return deref(type(value))
