"""
Schemas for `typing` constructs: Any, Literal, Union and fixed-length tuples.
"""

from __future__ import annotations

from typing import Any

from ..attributes import AttributeCollector
from ..definitions import CustomDefinition
from ..descriptors import TypeDescriptor
from ..keywords import SchemaKeyword, SchemaType
from ..utils import infer_json_types
from . import Module


class TypingConstructsModule(Module):
    """Provides inline definitions for typing constructs without own members."""

    def apply_to_config_builder(self, builder) -> None:
        builder.for_types().with_custom_definition_provider(self.provide_definition)

    def provide_definition(self, descriptor: TypeDescriptor, context) -> CustomDefinition | None:
        if descriptor.origin is Any:
            return CustomDefinition.inline({})
        if descriptor.is_literal:
            return CustomDefinition.inline(self._literal(descriptor, context))
        if descriptor.is_union:
            alternatives = [context.create_definition_reference(arg) for arg in descriptor.args]
            return CustomDefinition.inline({context.keyword(SchemaKeyword.TAG_ANYOF): alternatives}, include_attributes=False)
        if descriptor.origin is tuple and descriptor.args and not context.type_context.is_container(descriptor):
            return CustomDefinition.inline(self._fixed_tuple(descriptor, context))
        return None

    @staticmethod
    def _literal(descriptor: TypeDescriptor, context) -> dict:
        node: dict = {}
        types = infer_json_types(descriptor.values)
        if types:
            node[context.keyword(SchemaKeyword.TAG_TYPE)] = types[0] if len(types) == 1 else types
        AttributeCollector(context).set_enum(node, descriptor.values)
        return node

    @staticmethod
    def _fixed_tuple(descriptor: TypeDescriptor, context) -> dict:
        """`tuple[A, B]` as array with one schema per position and a fixed length."""
        return {
            context.keyword(SchemaKeyword.TAG_TYPE): SchemaType.ARRAY.value,
            context.keyword(SchemaKeyword.TAG_PREFIX_ITEMS): [
                context.create_definition_reference(arg) for arg in descriptor.args
            ],
            context.keyword(SchemaKeyword.TAG_ITEMS_MIN): len(descriptor.args),
            context.keyword(SchemaKeyword.TAG_ITEMS_MAX): len(descriptor.args),
        }
