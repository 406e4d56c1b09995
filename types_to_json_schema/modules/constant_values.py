"""
Class variables holding a JSON value are described as constants.
"""

from __future__ import annotations

import dataclasses

from ..descriptors import MemberDescriptor
from ..utils import to_json_value
from . import Module


def _constant_value(member: MemberDescriptor) -> list | None:
    if not member.is_static or member.is_container_item or member.raw is dataclasses.MISSING:
        return None
    value = to_json_value(member.raw)
    if value is NotImplemented:
        return None
    return [value]


class ConstantValueModule(Module):
    """Turns `ClassVar` members with a value into `const` (or `null`)."""

    def apply_to_config_builder(self, builder) -> None:
        builder.for_fields().with_enum_resolver(
            lambda member, context: _constant_value(member)
        ).with_nullable_check(self.is_nullable_constant)

    @staticmethod
    def is_nullable_constant(member: MemberDescriptor) -> bool | None:
        values = _constant_value(member)
        if values is None:
            return None
        return values[0] is None
