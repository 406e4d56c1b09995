"""
Exclusion of members that are not part of a type's public shape.
"""

from __future__ import annotations

from typing import Callable

from ..descriptors import MemberDescriptor
from . import Module


class MemberExclusionModule(Module):
    """Registers ignore checks for fields and/or accessors."""

    def __init__(
        self,
        field_check: Callable[[MemberDescriptor], bool] | None = None,
        method_check: Callable[[MemberDescriptor], bool] | None = None,
    ):
        self.field_check = field_check
        self.method_check = method_check

    @staticmethod
    def for_private_members() -> MemberExclusionModule:
        """Ignore fields and accessors whose name starts with an underscore."""

        def is_private(member: MemberDescriptor) -> bool:
            return member.declared_name.startswith("_")

        return MemberExclusionModule(is_private, is_private)

    @staticmethod
    def for_accessors() -> MemberExclusionModule:
        """Ignore all property accessors."""
        return MemberExclusionModule(method_check=lambda member: True)

    def apply_to_config_builder(self, builder) -> None:
        if self.field_check is not None:
            builder.for_fields().with_ignore_check(self.field_check)
        if self.method_check is not None:
            builder.for_methods().with_ignore_check(self.method_check)
