"""
Collection of schema attributes for members and types.

Asks the configured resolvers for each supported keyword and assembles the
answers into one flat schema fragment.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from .descriptors import MemberDescriptor, TypeDescriptor, TypeScope
from .keywords import SchemaKeyword, SchemaType
from .utils import to_json_value, unique_in_order

if TYPE_CHECKING:
    from .context import GenerationContext

logger = logging.getLogger(__name__)

_STRING_KEYWORDS = (
    SchemaKeyword.TAG_LENGTH_MIN,
    SchemaKeyword.TAG_LENGTH_MAX,
    SchemaKeyword.TAG_FORMAT,
    SchemaKeyword.TAG_PATTERN,
)
_NUMERIC_KEYWORDS = (
    SchemaKeyword.TAG_MINIMUM,
    SchemaKeyword.TAG_MINIMUM_EXCLUSIVE,
    SchemaKeyword.TAG_MAXIMUM,
    SchemaKeyword.TAG_MAXIMUM_EXCLUSIVE,
    SchemaKeyword.TAG_MULTIPLE_OF,
)
_ARRAY_KEYWORDS = (
    SchemaKeyword.TAG_ITEMS_MIN,
    SchemaKeyword.TAG_ITEMS_MAX,
    SchemaKeyword.TAG_ITEMS_UNIQUE,
)
_OBJECT_KEYWORDS = (
    SchemaKeyword.TAG_PROPERTIES_MIN,
    SchemaKeyword.TAG_PROPERTIES_MAX,
)

# Sentinel for resolvers to forbid additional properties
FORBIDDEN = False


class AttributeCollector:
    """Builds attribute fragments from the resolvers of the configuration."""

    def __init__(self, context: GenerationContext):
        self.context = context
        self.config = context.config

    def collect_member_attributes(self, member: MemberDescriptor) -> dict:
        """
        Collect the attributes declared for one field or accessor.

        Instance attribute overrides are applied to the result.

        Args:
            member: The field or accessor (or its container item)

        Returns:
            Schema fragment holding the collected attributes
        """
        node: dict = {}
        resolve = self.config.resolve_member_attribute

        self.set_value(node, SchemaKeyword.TAG_TITLE, resolve(SchemaKeyword.TAG_TITLE, member, self.context))
        self.set_value(node, SchemaKeyword.TAG_DESCRIPTION, resolve(SchemaKeyword.TAG_DESCRIPTION, member, self.context))
        self.set_default(node, resolve(SchemaKeyword.TAG_DEFAULT, member, self.context))
        self.set_enum(node, resolve(SchemaKeyword.TAG_ENUM, member, self.context))
        self.set_examples(node, resolve(SchemaKeyword.TAG_EXAMPLES, member, self.context))
        if self.config.is_read_only(member):
            node[self.context.keyword(SchemaKeyword.TAG_READ_ONLY)] = True
        if self.config.is_write_only(member):
            node[self.context.keyword(SchemaKeyword.TAG_WRITE_ONLY)] = True
        self.set_additional_properties(
            node, resolve(SchemaKeyword.TAG_ADDITIONAL_PROPERTIES, member, self.context)
        )
        self.set_pattern_properties(node, resolve(SchemaKeyword.TAG_PATTERN_PROPERTIES, member, self.context))
        for keyword in _OBJECT_KEYWORDS + _STRING_KEYWORDS + _NUMERIC_KEYWORDS + _ARRAY_KEYWORDS:
            self.set_value(node, keyword, resolve(keyword, member, self.context))

        for override in self.config.instance_attribute_overrides(member):
            override(node, member, self.context)
        return node

    def collect_type_attributes(self, scope: TypeScope, allowed_types: set[str]) -> dict:
        """
        Collect the attributes declared for a type in general.

        Type-specific keywords are only considered if the schema either does not
        restrict its `type` or allows the matching one.

        Args:
            scope: The type (possibly a member, being a specialized type scope)
            allowed_types: Values of the definition's `type` keyword

        Returns:
            Schema fragment holding the collected attributes
        """
        node: dict = {}
        resolve = self.config.resolve_type_attribute

        self.set_value(node, SchemaKeyword.TAG_ID, resolve(SchemaKeyword.TAG_ID, scope, self.context))
        self.set_value(node, SchemaKeyword.TAG_ANCHOR, resolve(SchemaKeyword.TAG_ANCHOR, scope, self.context))
        self.set_value(node, SchemaKeyword.TAG_TITLE, resolve(SchemaKeyword.TAG_TITLE, scope, self.context))
        self.set_value(node, SchemaKeyword.TAG_DESCRIPTION, resolve(SchemaKeyword.TAG_DESCRIPTION, scope, self.context))
        self.set_default(node, resolve(SchemaKeyword.TAG_DEFAULT, scope, self.context))
        self.set_enum(node, resolve(SchemaKeyword.TAG_ENUM, scope, self.context))
        self.set_examples(node, resolve(SchemaKeyword.TAG_EXAMPLES, scope, self.context))

        def allows(*types: SchemaType) -> bool:
            return not allowed_types or any(t.value in allowed_types for t in types)

        if allows(SchemaType.OBJECT):
            self.set_additional_properties(
                node, resolve(SchemaKeyword.TAG_ADDITIONAL_PROPERTIES, scope, self.context)
            )
            self.set_pattern_properties(node, resolve(SchemaKeyword.TAG_PATTERN_PROPERTIES, scope, self.context))
            for keyword in _OBJECT_KEYWORDS:
                self.set_value(node, keyword, resolve(keyword, scope, self.context))
        if allows(SchemaType.STRING):
            for keyword in _STRING_KEYWORDS:
                self.set_value(node, keyword, resolve(keyword, scope, self.context))
        if allows(SchemaType.INTEGER, SchemaType.NUMBER):
            for keyword in _NUMERIC_KEYWORDS:
                self.set_value(node, keyword, resolve(keyword, scope, self.context))
        if allows(SchemaType.ARRAY):
            for keyword in _ARRAY_KEYWORDS:
                self.set_value(node, keyword, resolve(keyword, scope, self.context))
        return node

    def set_value(self, node: dict, keyword: SchemaKeyword, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, Decimal):
            value = int(value) if value == value.to_integral_value() else float(value)
        node[self.context.keyword(keyword)] = value

    def set_default(self, node: dict, value: Any) -> None:
        if value is None:
            return
        converted = to_json_value(value)
        if converted is NotImplemented:
            logger.debug("ignoring default value %r without JSON representation", value)
            return
        node[self.context.keyword(SchemaKeyword.TAG_DEFAULT)] = converted

    def set_examples(self, node: dict, values: Any) -> None:
        if not values:
            return
        converted = [to_json_value(value) for value in values]
        node[self.context.keyword(SchemaKeyword.TAG_EXAMPLES)] = [
            value for value in converted if value is not NotImplemented
        ]

    def set_enum(self, node: dict, values: Any) -> None:
        """
        Set the allowed values.

        A single value is written as `const` unless the configuration asks for
        a one-element `enum`. Values without a JSON scalar representation are
        dropped.
        """
        if values is None:
            return
        allowed = []
        for value in values:
            converted = to_json_value(value)
            if converted is NotImplemented or isinstance(converted, (list, dict)):
                logger.debug("ignoring unsupported enum value %r", value)
                continue
            allowed.append(converted)
        allowed = unique_in_order(allowed)
        if len(allowed) == 1 and self.config.should_represent_single_value_as_const():
            node[self.context.keyword(SchemaKeyword.TAG_CONST)] = allowed[0]
        elif allowed:
            node[self.context.keyword(SchemaKeyword.TAG_ENUM)] = allowed

    def set_additional_properties(self, node: dict, value: Any) -> None:
        """
        Set `additionalProperties` from a resolver result.

        `False` forbids additional properties, a TypeDescriptor is turned into a
        (possibly shared) schema reference, a dict is used as-is. Any other
        value, or a descriptor of `Any`, leaves the keyword out.
        """
        tag = self.context.keyword(SchemaKeyword.TAG_ADDITIONAL_PROPERTIES)
        if value is FORBIDDEN:
            node[tag] = False
        elif isinstance(value, TypeDescriptor):
            if value.origin is not Any:
                node[tag] = self.context.create_definition_reference(value)
        elif isinstance(value, dict):
            node[tag] = value

    def set_pattern_properties(self, node: dict, value: Any) -> None:
        if not value:
            return
        patterns = {}
        for pattern, target in value.items():
            if isinstance(target, TypeDescriptor):
                patterns[pattern] = self.context.create_definition_reference(target)
            else:
                patterns[pattern] = target
        node[self.context.keyword(SchemaKeyword.TAG_PATTERN_PROPERTIES)] = patterns
