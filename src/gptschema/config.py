"""Schema generation options and environment loading."""

import os
from collections.abc import Callable
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from .types import ConfigError

DEFAULT_MAX_DEPTH = 50


@dataclass(frozen=True)
class SchemaOptions:
    """Options for a single schema generation call."""

    # OpenAI strict mode requires additionalProperties to be false on every
    # object, which is also why mappings are not supported at all
    allow_additional_properties: bool = False

    # Ceiling on nesting of records and arrays
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "SchemaOptions":
        """
        Create options from environment variables.

        Args:
            env_file: Optional .env file to load before reading the environment

        Returns:
            SchemaOptions with GPTSCHEMA_ prefixed overrides applied
        """
        if env_file is not None:
            load_dotenv(Path(env_file), override=True)

        options = cls()

        if max_depth := os.getenv("GPTSCHEMA_MAX_DEPTH"):
            try:
                depth = int(max_depth)
            except ValueError:
                raise ConfigError(f"Invalid GPTSCHEMA_MAX_DEPTH: {max_depth}")
            if depth < 0:
                raise ConfigError(f"Invalid GPTSCHEMA_MAX_DEPTH: {max_depth}")
            options = replace(options, max_depth=depth)

        return options


# An option function derives new options from existing ones
Option = Callable[[SchemaOptions], SchemaOptions]


def with_max_depth(depth: int) -> Option:
    """
    Set the maximum depth for nested record traversal.

    Every record and every array counts as one level. Exceeding the depth
    raises CircularReferenceError.

    Example:
        schema = generate_schema(MyRecord, with_max_depth(20))
    """

    def apply(options: SchemaOptions) -> SchemaOptions:
        return replace(options, max_depth=depth)

    return apply


def resolve_options(config: SchemaOptions | None, options: tuple[Option, ...]) -> SchemaOptions:
    """Apply option functions in order on top of a base configuration."""
    resolved = config if config is not None else SchemaOptions()
    for option in options:
        resolved = option(resolved)
    return resolved
