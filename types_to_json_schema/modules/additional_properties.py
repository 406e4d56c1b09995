"""
Resolvers for `additionalProperties`.
"""

from __future__ import annotations

from typing import Callable

from ..attributes import FORBIDDEN
from ..descriptors import TypeScope
from ..keywords import SchemaKeyword
from . import Module


class AdditionalPropertiesModule(Module):
    """Registers one type-level `additionalProperties` resolver."""

    def __init__(self, resolver: Callable[[TypeScope, object], object]):
        self.resolver = resolver

    @staticmethod
    def for_mapping_values() -> AdditionalPropertiesModule:
        """Describe the values of `dict[K, V]` (and other mappings) through their value type."""

        def resolve(scope: TypeScope, context):
            type_context = scope.type_context
            if type_context.is_mapping(scope.type):
                # Unparameterized mappings yield Any, leaving the keyword out
                return type_context.mapping_value_type(scope.type)
            return None

        return AdditionalPropertiesModule(resolve)

    @staticmethod
    def forbidden_for_all_objects_but_containers() -> AdditionalPropertiesModule:
        def resolve(scope: TypeScope, context):
            if scope.is_container or scope.type_context.is_mapping(scope.type):
                return None
            return FORBIDDEN

        return AdditionalPropertiesModule(resolve)

    def apply_to_config_builder(self, builder) -> None:
        builder.for_types().with_attribute_resolver(SchemaKeyword.TAG_ADDITIONAL_PROPERTIES, self.resolver)
