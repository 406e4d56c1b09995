"""
Enum classes as plain value lists.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from ..attributes import AttributeCollector
from ..definitions import CustomDefinition
from ..descriptors import TypeDescriptor
from ..keywords import SchemaKeyword
from ..utils import infer_json_types, to_json_value, unique_in_order
from . import Module


class EnumModule(Module):
    """Describes Enum subclasses through `enum` (or `const` for one member)."""

    def __init__(self, to_value: Callable[[Enum], Any]):
        self.to_value = to_value

    @staticmethod
    def as_strings_from_name() -> EnumModule:
        return EnumModule(lambda member: member.name)

    @staticmethod
    def as_values() -> EnumModule:
        return EnumModule(lambda member: to_json_value(member.value))

    def apply_to_config_builder(self, builder) -> None:
        builder.for_types().with_custom_definition_provider(self.provide_definition)

    def provide_definition(self, descriptor: TypeDescriptor, context) -> CustomDefinition | None:
        if not descriptor.is_subclass_of(Enum):
            return None
        values = unique_in_order(self.to_value(member) for member in descriptor.origin)
        if not values:
            return None
        node: dict = {}
        types = infer_json_types(values)
        if types:
            node[context.keyword(SchemaKeyword.TAG_TYPE)] = types[0] if len(types) == 1 else types
        AttributeCollector(context).set_enum(node, values)
        return CustomDefinition(node)
