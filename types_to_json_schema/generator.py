"""
Entry point for generating JSON Schemas from Python types.
"""

from __future__ import annotations

import logging
from typing import Any

from .builder import SchemaBuilder
from .config import SchemaGeneratorConfig
from .type_context import TypeContext

logger = logging.getLogger(__name__)


class SchemaGenerator:
    """Generates schemas according to one configuration.

    Example:
        config = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, PLAIN_JSON).build()
        schema = SchemaGenerator(config).generate_schema(User)

    The generator may be reused for several types. It keeps a TypeContext
    caching the introspected members, which is why a generator instance
    must not be shared between threads.
    """

    def __init__(self, config: SchemaGeneratorConfig, type_context: TypeContext | None = None):
        self.config = config
        self.type_context = type_context or TypeContext()

    def generate_schema(self, target: Any, *type_parameters: Any) -> dict:
        """
        Generate the schema document for the given type.

        Args:
            target: Class or typing construct to describe
            type_parameters: Arguments for the target's type variables, e.g.
                `generate_schema(Box, str)` for `Box[str]`

        Returns:
            The schema as JSON-compatible dictionary
        """
        logger.debug("generating %s schema for %r", self.config.schema_version.value, target)
        return SchemaBuilder(self.config, self.type_context).create_schema_for_single_type(target, *type_parameters)

    def build_multiple_types_schema(self) -> SchemaBuilder:
        """
        Start a schema covering several types with shared definitions.

        Call `create_schema_reference()` for each type and embed the returned
        nodes in the enclosing document, then place the result of
        `collect_definitions(path)` at that path.
        """
        return SchemaBuilder(self.config, self.type_context)
