"""
Collection of the members forming an object's properties.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .descriptors import MemberDescriptor, TypeScope
from .options import Option

if TYPE_CHECKING:
    from .config import SchemaGeneratorConfig

logger = logging.getLogger(__name__)


class MemberCollector:
    """Gathers the fields and accessors of a type along its hierarchy.

    Levels are visited from the type itself up to its supertypes. When two
    members share a schema name, the first one seen (i.e. the overriding
    one) is kept.
    """

    def __init__(self, config: SchemaGeneratorConfig):
        self.config = config
        self._members: dict[str, MemberDescriptor] = {}
        self._required: set[str] = set()

    def collect(self, scope: TypeScope) -> tuple[list[MemberDescriptor], set[str]]:
        """
        Collect the members of the given type.

        Args:
            scope: The object type whose properties are collected

        Returns:
            Sorted member list and the set of required schema names

        Raises:
            UnsupportedTypeError: If the type's annotations cannot be resolved
        """
        self._members = {}
        self._required = set()
        levels = scope.type_context.hierarchy(scope.type)
        for level in levels:
            for member in level.fields:
                self._collect(member)
        for level in levels:
            for member in level.methods:
                self._collect(member)
        if self.config.is_enabled(Option.STATIC_FIELDS):
            # Class variables are taken from each level directly
            for level in levels:
                for member in level.static_fields:
                    self._collect(member)
        return self.config.sort_members(list(self._members.values())), set(self._required)

    def _collect(self, member: MemberDescriptor) -> None:
        if self.config.should_ignore(member):
            return
        name_override = self.config.resolve_property_name_override(member)
        if name_override is not None:
            member = member.with_overridden_name(name_override)
        name = member.schema_name
        if self.config.is_required(member):
            self._required.add(name)
        if name in self._members:
            logger.debug("ignoring overridden %s", member)
            return
        self._members[name] = member
