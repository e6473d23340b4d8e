"""
gptschema - JSON schemas for LLM structured outputs from Python types.

Features:
- Dataclasses and Pydantic models as schema sources
- Strict mode output: additionalProperties false, every property required
- Optional fields as unions with null via ``omitempty`` tags
- Embedded records flattened into their parent
- Cycle detection and a configurable maximum depth
"""

from .config import SchemaOptions, with_max_depth
from .schema import (
    format_schema_for_openai,
    generate_schema,
    generate_schema_json,
    is_supported_type,
    schema_to_prompt,
)
from .types import (
    CircularReferenceError,
    ConfigError,
    Embedded,
    InvalidInputError,
    JsonTag,
    Schema,
    SchemaError,
    UnsupportedTypeError,
)

__version__ = "0.1.0"

__all__ = [
    # Schema generation
    "generate_schema",
    "generate_schema_json",
    "format_schema_for_openai",
    "schema_to_prompt",
    "is_supported_type",
    # Configuration
    "SchemaOptions",
    "with_max_depth",
    # Field markers
    "JsonTag",
    "Embedded",
    "Schema",
    # Exceptions
    "SchemaError",
    "UnsupportedTypeError",
    "CircularReferenceError",
    "InvalidInputError",
    "ConfigError",
]
