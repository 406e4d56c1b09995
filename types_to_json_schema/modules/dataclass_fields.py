"""
Requiredness, defaults and documentation taken from dataclass fields.
"""

from __future__ import annotations

import dataclasses

from ..descriptors import MemberDescriptor
from ..utils import to_json_value
from . import Module


def _dataclass_field(member: MemberDescriptor) -> dataclasses.Field | None:
    if member.is_container_item or not isinstance(member.raw, dataclasses.Field):
        return None
    return member.raw


class DataclassFieldsModule(Module):
    """Derives member settings from field declarations.

    - dataclass fields without default (or default factory) are required
    - JSON-compatible defaults, also of plain class attributes, become `default`
    - `field(metadata={"title": ..., "description": ...})` provides documentation
    """

    def apply_to_config_builder(self, builder) -> None:
        builder.for_fields().with_required_check(self.is_required).with_default_resolver(
            self.resolve_default
        ).with_title_resolver(self._metadata_resolver("title")).with_description_resolver(
            self._metadata_resolver("description")
        )

    @staticmethod
    def is_required(member: MemberDescriptor) -> bool:
        declared = _dataclass_field(member)
        if declared is None:
            return False
        return declared.default is dataclasses.MISSING and declared.default_factory is dataclasses.MISSING

    @staticmethod
    def resolve_default(member: MemberDescriptor, context):
        if member.is_static or member.is_container_item:
            return None
        default = member.default
        if default is dataclasses.MISSING or default is None:
            return None
        value = to_json_value(default)
        return None if value is NotImplemented else value

    @staticmethod
    def _metadata_resolver(key: str):
        def resolve(member: MemberDescriptor, context):
            declared = _dataclass_field(member)
            if declared is None:
                return None
            return declared.metadata.get(key)

        return resolve
