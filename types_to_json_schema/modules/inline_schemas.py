"""
Inlining of every schema, instead of collecting shared definitions.
"""

from __future__ import annotations

import logging

from ..definitions import CustomDefinition
from ..descriptors import TypeDescriptor
from ..errors import CircularReferenceError
from . import Module

logger = logging.getLogger(__name__)


class InlineSchemaModule(Module):
    """Provides every non-container type as inline custom definition.

    Types currently being inlined are tracked, so that a type referring back
    to one of its enclosing types is reported instead of recursing forever.
    """

    def __init__(self):
        self._parents: list[TypeDescriptor] = []

    def apply_to_config_builder(self, builder) -> None:
        builder.for_types().with_custom_definition_provider(self.provide_definition)

    def provide_definition(self, descriptor: TypeDescriptor, context) -> CustomDefinition | None:
        if descriptor in self._parents:
            raise CircularReferenceError(
                f"Cannot inline all schemas: {descriptor.full_name} refers to itself "
                f"via {' -> '.join(parent.simple_name for parent in self._parents)}"
            )
        if context.type_context.is_container(descriptor):
            # Containers are inlined anyway and handle their item scopes themselves
            return None
        self._parents.append(descriptor)
        try:
            definition = context.create_standard_definition(descriptor, self.provide_definition)
        finally:
            self._parents.pop()
        logger.debug("inlining definition of %s", descriptor)
        return CustomDefinition.inline(definition)
