"""
Member configuration read from `typing.Annotated` markers.
"""

from __future__ import annotations

from .. import markers
from ..descriptors import MemberDescriptor
from ..keywords import SchemaKeyword
from . import Module

# Marker class -> keyword, for markers holding a single value
_VALUE_MARKERS = {
    markers.Title: SchemaKeyword.TAG_TITLE,
    markers.Description: SchemaKeyword.TAG_DESCRIPTION,
    markers.Default: SchemaKeyword.TAG_DEFAULT,
    markers.MinLength: SchemaKeyword.TAG_LENGTH_MIN,
    markers.MaxLength: SchemaKeyword.TAG_LENGTH_MAX,
    markers.Pattern: SchemaKeyword.TAG_PATTERN,
    markers.Format: SchemaKeyword.TAG_FORMAT,
    markers.Minimum: SchemaKeyword.TAG_MINIMUM,
    markers.Maximum: SchemaKeyword.TAG_MAXIMUM,
    markers.ExclusiveMinimum: SchemaKeyword.TAG_MINIMUM_EXCLUSIVE,
    markers.ExclusiveMaximum: SchemaKeyword.TAG_MAXIMUM_EXCLUSIVE,
    markers.MultipleOf: SchemaKeyword.TAG_MULTIPLE_OF,
    markers.MinItems: SchemaKeyword.TAG_ITEMS_MIN,
    markers.MaxItems: SchemaKeyword.TAG_ITEMS_MAX,
    markers.UniqueItems: SchemaKeyword.TAG_ITEMS_UNIQUE,
}


def _value_resolver(kind: type):
    def resolve(member: MemberDescriptor, context):
        marker = member.get_metadata(kind)
        return None if marker is None else marker.value

    return resolve


def _examples(member: MemberDescriptor, context):
    marker = member.get_metadata(markers.Examples)
    return None if marker is None else list(marker.values)


def _flag(kind: type):
    def check(member: MemberDescriptor) -> bool:
        return member.get_metadata(kind) is not None

    return check


def _nullable(member: MemberDescriptor) -> bool | None:
    marker = member.get_metadata(markers.Nullable)
    return None if marker is None else marker.value


def _property_name(member: MemberDescriptor) -> str | None:
    marker = member.get_metadata(markers.PropertyName)
    return None if marker is None else marker.value


def _dependent_required(member: MemberDescriptor) -> list[str] | None:
    marker = member.get_metadata(markers.DependentRequired)
    return None if marker is None else list(marker.names)


class AnnotatedMarkersModule(Module):
    """Applies the markers of `types_to_json_schema.markers` to fields and accessors."""

    def apply_to_config_builder(self, builder) -> None:
        for part in (builder.for_fields(), builder.for_methods()):
            for kind, keyword in _VALUE_MARKERS.items():
                part.with_attribute_resolver(keyword, _value_resolver(kind))
            part.with_attribute_resolver(SchemaKeyword.TAG_EXAMPLES, _examples)
            part.with_read_only_check(_flag(markers.ReadOnly))
            part.with_write_only_check(_flag(markers.WriteOnly))
            part.with_required_check(_flag(markers.Required))
            part.with_ignore_check(_flag(markers.Ignore))
            part.with_nullable_check(_nullable)
            part.with_property_name_override(_property_name)
            part.with_dependent_required_resolver(_dependent_required)
