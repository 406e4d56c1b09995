"""
Configuration parts holding resolvers for types and for members.

Every resolver is a plain callable. Attribute resolvers receive the scope
(a TypeScope or a MemberDescriptor) and the generation context and return a
value or None. Where several resolvers are registered for the same concern,
the first one returning a non-None value wins, except for the boolean checks
(ignore/required/read-only/write-only) where any positive answer counts.
"""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any, Callable

from .keywords import SchemaKeyword

Resolver = Callable[..., Any]

TYPE_ATTRIBUTE_KEYWORDS = frozenset(
    {
        SchemaKeyword.TAG_ID,
        SchemaKeyword.TAG_ANCHOR,
        SchemaKeyword.TAG_TITLE,
        SchemaKeyword.TAG_DESCRIPTION,
        SchemaKeyword.TAG_DEFAULT,
        SchemaKeyword.TAG_ENUM,
        SchemaKeyword.TAG_EXAMPLES,
        SchemaKeyword.TAG_ADDITIONAL_PROPERTIES,
        SchemaKeyword.TAG_PATTERN_PROPERTIES,
        SchemaKeyword.TAG_PROPERTIES_MIN,
        SchemaKeyword.TAG_PROPERTIES_MAX,
        SchemaKeyword.TAG_LENGTH_MIN,
        SchemaKeyword.TAG_LENGTH_MAX,
        SchemaKeyword.TAG_FORMAT,
        SchemaKeyword.TAG_PATTERN,
        SchemaKeyword.TAG_MINIMUM,
        SchemaKeyword.TAG_MINIMUM_EXCLUSIVE,
        SchemaKeyword.TAG_MAXIMUM,
        SchemaKeyword.TAG_MAXIMUM_EXCLUSIVE,
        SchemaKeyword.TAG_MULTIPLE_OF,
        SchemaKeyword.TAG_ITEMS_MIN,
        SchemaKeyword.TAG_ITEMS_MAX,
        SchemaKeyword.TAG_ITEMS_UNIQUE,
    }
)

MEMBER_ATTRIBUTE_KEYWORDS = TYPE_ATTRIBUTE_KEYWORDS - {SchemaKeyword.TAG_ID, SchemaKeyword.TAG_ANCHOR}


def _check_callable(resolver: Any) -> Any:
    if not callable(resolver):
        raise TypeError(f"Expected a callable, got {type(resolver).__name__}")
    return resolver


class _AttributeResolvingPart:
    """Common storage for keyword-specific attribute resolvers."""

    supported_keywords: frozenset[SchemaKeyword] = frozenset()

    def __init__(self):
        self._attribute_resolvers: dict[SchemaKeyword, list[Resolver]] = defaultdict(list)

    def with_attribute_resolver(self, keyword: SchemaKeyword, resolver: Resolver):
        """
        Register a resolver for one schema keyword.

        Args:
            keyword: Keyword the resolver provides a value for
            resolver: Callable taking (scope, context), returning a value or None

        Returns:
            This part, for chaining

        Raises:
            ValueError: If the keyword is not resolvable in this part
            TypeError: If the resolver is not callable
        """
        if keyword not in self.supported_keywords:
            raise ValueError(f"{keyword.name} cannot be resolved by {type(self).__name__}")
        self._attribute_resolvers[keyword].append(_check_callable(resolver))
        return self

    def with_title_resolver(self, resolver: Resolver):
        return self.with_attribute_resolver(SchemaKeyword.TAG_TITLE, resolver)

    def with_description_resolver(self, resolver: Resolver):
        return self.with_attribute_resolver(SchemaKeyword.TAG_DESCRIPTION, resolver)

    def with_default_resolver(self, resolver: Resolver):
        return self.with_attribute_resolver(SchemaKeyword.TAG_DEFAULT, resolver)

    def with_enum_resolver(self, resolver: Resolver):
        return self.with_attribute_resolver(SchemaKeyword.TAG_ENUM, resolver)

    def resolve_attribute(self, keyword: SchemaKeyword, scope, context) -> Any:
        """Return the first non-None value of the resolvers for this keyword."""
        return _first_result(self._attribute_resolvers.get(keyword, ()), scope, context)

    def copy(self):
        """Return a copy whose resolver lists can be extended independently."""
        clone = copy.copy(self)
        for name, value in vars(self).items():
            if isinstance(value, list):
                setattr(clone, name, list(value))
        clone._attribute_resolvers = defaultdict(
            list, {keyword: list(resolvers) for keyword, resolvers in self._attribute_resolvers.items()}
        )
        return clone


def _first_result(resolvers, *args) -> Any:
    for resolver in resolvers:
        result = resolver(*args)
        if result is not None:
            return result
    return None


class TypeConfigPart(_AttributeResolvingPart):
    """Settings applying to types, regardless of where they are declared."""

    supported_keywords = TYPE_ATTRIBUTE_KEYWORDS

    def __init__(self):
        super().__init__()
        self.custom_definition_providers: list[Resolver] = []
        self.subtype_resolvers: list[Resolver] = []
        self.type_attribute_overrides: list[Resolver] = []

    def with_custom_definition_provider(self, provider: Resolver) -> TypeConfigPart:
        """Register a provider taking (type_descriptor, context) and returning a CustomDefinition or None."""
        self.custom_definition_providers.append(_check_callable(provider))
        return self

    def with_subtype_resolver(self, resolver: Resolver) -> TypeConfigPart:
        """Register a resolver taking (type_descriptor, context) and returning a list of subtypes or None."""
        self.subtype_resolvers.append(_check_callable(resolver))
        return self

    def with_type_attribute_override(self, override: Resolver) -> TypeConfigPart:
        """Register a hook taking (definition_node, scope, context), run after everything else."""
        self.type_attribute_overrides.append(_check_callable(override))
        return self

    def resolve_subtypes(self, descriptor, context) -> list:
        result = _first_result(self.subtype_resolvers, descriptor, context)
        return list(result) if result is not None else []


class MemberConfigPart(_AttributeResolvingPart):
    """Settings applying to either fields or accessors."""

    supported_keywords = MEMBER_ATTRIBUTE_KEYWORDS

    def __init__(self):
        super().__init__()
        self.ignore_checks: list[Resolver] = []
        self.required_checks: list[Resolver] = []
        self.nullable_checks: list[Resolver] = []
        self.read_only_checks: list[Resolver] = []
        self.write_only_checks: list[Resolver] = []
        self.property_name_overrides: list[Resolver] = []
        self.target_type_overrides: list[Resolver] = []
        self.custom_definition_providers: list[Resolver] = []
        self.instance_attribute_overrides: list[Resolver] = []
        self.dependent_required_resolvers: list[Resolver] = []

    def with_ignore_check(self, check: Resolver) -> MemberConfigPart:
        self.ignore_checks.append(_check_callable(check))
        return self

    def with_required_check(self, check: Resolver) -> MemberConfigPart:
        self.required_checks.append(_check_callable(check))
        return self

    def with_nullable_check(self, check: Resolver) -> MemberConfigPart:
        """Register a check returning True/False, or None to defer to the next one."""
        self.nullable_checks.append(_check_callable(check))
        return self

    def with_read_only_check(self, check: Resolver) -> MemberConfigPart:
        self.read_only_checks.append(_check_callable(check))
        return self

    def with_write_only_check(self, check: Resolver) -> MemberConfigPart:
        self.write_only_checks.append(_check_callable(check))
        return self

    def with_property_name_override(self, resolver: Resolver) -> MemberConfigPart:
        self.property_name_overrides.append(_check_callable(resolver))
        return self

    def with_target_type_override(self, resolver: Resolver) -> MemberConfigPart:
        """Register a resolver returning alternative TypeDescriptors for a member, or None."""
        self.target_type_overrides.append(_check_callable(resolver))
        return self

    def with_custom_definition_provider(self, provider: Resolver) -> MemberConfigPart:
        """Register a provider taking (member, context) and returning a CustomDefinition or None."""
        self.custom_definition_providers.append(_check_callable(provider))
        return self

    def with_instance_attribute_override(self, override: Resolver) -> MemberConfigPart:
        """Register a hook taking (attributes_node, member, context), run after collecting attributes."""
        self.instance_attribute_overrides.append(_check_callable(override))
        return self

    def with_dependent_required_resolver(self, resolver: Resolver) -> MemberConfigPart:
        """Register a resolver returning property names required when the member is present."""
        self.dependent_required_resolvers.append(_check_callable(resolver))
        return self

    def should_ignore(self, member) -> bool:
        return any(check(member) for check in self.ignore_checks)

    def is_required(self, member) -> bool:
        return any(check(member) for check in self.required_checks)

    def is_read_only(self, member) -> bool:
        return any(check(member) for check in self.read_only_checks)

    def is_write_only(self, member) -> bool:
        return any(check(member) for check in self.write_only_checks)

    def is_nullable(self, member) -> bool | None:
        return _first_result(self.nullable_checks, member)

    def resolve_property_name_override(self, member) -> str | None:
        return _first_result(self.property_name_overrides, member)

    def resolve_target_type_overrides(self, member) -> list | None:
        result = _first_result(self.target_type_overrides, member)
        return list(result) if result is not None else None

    def resolve_dependent_required(self, member) -> list[str]:
        return list(_first_result(self.dependent_required_resolvers, member) or [])
