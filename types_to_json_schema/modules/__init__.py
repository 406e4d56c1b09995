"""
Modules bundling related configuration.

A module registers resolvers, checks and custom definition providers on a
SchemaGeneratorConfigBuilder. The standard modules below are applied
according to the enabled options when the configuration is built.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..options import Option

if TYPE_CHECKING:
    from ..config import SchemaGeneratorConfigBuilder


class Module(ABC):
    """A set of configurations applied to a builder in one go."""

    @abstractmethod
    def apply_to_config_builder(self, builder: SchemaGeneratorConfigBuilder) -> None:
        """Register this module's settings on the given builder."""


from .additional_properties import AdditionalPropertiesModule  # noqa: E402
from .constant_values import ConstantValueModule  # noqa: E402
from .dataclass_fields import DataclassFieldsModule  # noqa: E402
from .enums import EnumModule  # noqa: E402
from .inline_schemas import InlineSchemaModule  # noqa: E402
from .markers import AnnotatedMarkersModule  # noqa: E402
from .member_exclusion import MemberExclusionModule  # noqa: E402
from .simple_types import SimpleTypeModule  # noqa: E402
from .typing_constructs import TypingConstructsModule  # noqa: E402


def core_modules() -> list[Module]:
    """Modules applied regardless of the options."""
    return [TypingConstructsModule(), AnnotatedMarkersModule(), DataclassFieldsModule()]


def option_modules(enabled: set[Option]) -> list[Module]:
    """Modules realizing the given set of enabled options, in option order."""
    modules: list[Module] = []
    if Option.ADDITIONAL_FIXED_TYPES in enabled:
        modules.append(SimpleTypeModule.for_primitive_and_additional_types())
    else:
        modules.append(SimpleTypeModule.for_primitive_types())
    if Option.FLATTENED_ENUMS in enabled:
        modules.append(EnumModule.as_strings_from_name())
    if Option.FLATTENED_ENUMS_FROM_VALUES in enabled:
        modules.append(EnumModule.as_values())
    if Option.VALUES_FROM_CONSTANT_FIELDS in enabled:
        modules.append(ConstantValueModule())
    if Option.PRIVATE_FIELDS not in enabled:
        modules.append(MemberExclusionModule.for_private_members())
    if Option.PROPERTY_ACCESSORS not in enabled:
        modules.append(MemberExclusionModule.for_accessors())
    if Option.MAP_VALUES_AS_ADDITIONAL_PROPERTIES in enabled:
        modules.append(AdditionalPropertiesModule.for_mapping_values())
    if Option.FORBIDDEN_ADDITIONAL_PROPERTIES_BY_DEFAULT in enabled:
        modules.append(AdditionalPropertiesModule.forbidden_for_all_objects_but_containers())
    if Option.INLINE_ALL_SCHEMAS in enabled:
        modules.append(InlineSchemaModule())
    return modules


__all__ = [
    "Module",
    "AdditionalPropertiesModule",
    "AnnotatedMarkersModule",
    "ConstantValueModule",
    "DataclassFieldsModule",
    "EnumModule",
    "InlineSchemaModule",
    "MemberExclusionModule",
    "SimpleTypeModule",
    "TypingConstructsModule",
    "core_modules",
    "option_modules",
]
