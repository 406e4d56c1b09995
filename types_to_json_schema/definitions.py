"""
Definition keys and custom definitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .descriptors import TypeDescriptor


@dataclass(frozen=True)
class DefinitionKey:
    """Identity of one schema definition.

    The same type may have several definitions when a custom definition
    provider asked for the "standard" definition of its own type, skipping
    itself (and everything before it) in the provider chain.
    """

    type: TypeDescriptor
    ignored_provider: Any = None

    def __str__(self) -> str:
        if self.ignored_provider is None:
            return self.type.simple_name
        return f"{self.type.simple_name} (skipping {self.ignored_provider!r})"


class DefinitionType(str, Enum):
    """Where a custom definition ends up."""

    INLINE = "inline"  # Copied directly into the referencing node
    STANDARD = "standard"  # Registered as a shareable definition


class AttributeInclusion(str, Enum):
    """Whether collected attributes are merged into a custom definition."""

    YES = "yes"
    NO = "no"


@dataclass
class CustomDefinition:
    """A schema supplied by a custom definition provider.

    Attributes:
        value: Schema node replacing the standard generation for the type
        definition_type: Whether to inline the value or register it as definition
        attribute_inclusion: Whether default attribute collection still applies
        never_inline: Whether to always emit a separate definition
    """

    value: dict
    definition_type: DefinitionType = DefinitionType.STANDARD
    attribute_inclusion: AttributeInclusion = AttributeInclusion.YES
    never_inline: bool = False

    @property
    def is_inline(self) -> bool:
        return self.definition_type is DefinitionType.INLINE

    @property
    def includes_attributes(self) -> bool:
        return self.attribute_inclusion is AttributeInclusion.YES

    @classmethod
    def inline(cls, value: dict, include_attributes: bool = True) -> CustomDefinition:
        return cls(
            value,
            DefinitionType.INLINE,
            AttributeInclusion.YES if include_attributes else AttributeInclusion.NO,
        )
