"""
Generator options and option presets.
"""

from __future__ import annotations

from enum import Enum


class Option(str, Enum):
    """Behavioral switches of the generator."""

    # Include "$schema" with the targeted draft's identifier
    SCHEMA_VERSION_INDICATOR = "schema_version_indicator"
    # Fixed schemas for date/time, UUID, Decimal, bytes and paths, not just primitives
    ADDITIONAL_FIXED_TYPES = "additional_fixed_types"
    # Enums as strings, derived from the member names
    FLATTENED_ENUMS = "flattened_enums"
    # Enums as their member values (overrides FLATTENED_ENUMS)
    FLATTENED_ENUMS_FROM_VALUES = "flattened_enums_from_values"
    # Class variables holding a JSON value become "const"
    VALUES_FROM_CONSTANT_FIELDS = "values_from_constant_fields"
    # Include ClassVar members
    STATIC_FIELDS = "static_fields"
    # Include underscore-prefixed fields
    PRIVATE_FIELDS = "private_fields"
    # Include property accessors
    PROPERTY_ACCESSORS = "property_accessors"
    # Fields are nullable unless stated otherwise
    NULLABLE_FIELDS_BY_DEFAULT = "nullable_fields_by_default"
    # Accessor return values are nullable unless stated otherwise
    NULLABLE_METHOD_RETURN_VALUES_BY_DEFAULT = "nullable_method_return_values_by_default"
    # Nullable checks also apply to container items
    NULLABLE_ARRAY_ITEMS_ALLOWED = "nullable_array_items_allowed"
    # Mapping values are described through "additionalProperties"
    MAP_VALUES_AS_ADDITIONAL_PROPERTIES = "map_values_as_additional_properties"
    # Single allowed values stay a one-element "enum" instead of "const"
    ENUM_KEYWORD_FOR_SINGLE_VALUES = "enum_keyword_for_single_values"
    # "additionalProperties": false on every object that is not a container
    FORBIDDEN_ADDITIONAL_PROPERTIES_BY_DEFAULT = "forbidden_additional_properties_by_default"
    # Every object type gets its own definition, even if referenced once
    DEFINITIONS_FOR_ALL_OBJECTS = "definitions_for_all_objects"
    # The main type lives under the definitions too, referenced from the root
    DEFINITION_FOR_MAIN_SCHEMA = "definition_for_main_schema"
    # Inline everything; fails on circular references
    INLINE_ALL_SCHEMAS = "inline_all_schemas"
    # Definition names restricted to alphanumerics plus ".-_"
    PLAIN_DEFINITION_KEYS = "plain_definition_keys"
    # Add OpenAPI "format" values (int32, int64, double, ...)
    EXTRA_OPEN_API_FORMAT_VALUES = "extra_open_api_format_values"
    # Merge "allOf" parts where they do not conflict
    ALLOF_CLEANUP_AT_THE_END = "allof_cleanup_at_the_end"
    # Always use an "anyOf" wrapper for nullable values
    NULLABLE_ALWAYS_AS_ANYOF = "nullable_always_as_anyof"
    # Never create "-nullable" definitions
    INLINE_NULLABLE_SCHEMAS = "inline_nullable_schemas"
    # Drop member attributes repeating the referenced definition's values
    DUPLICATE_MEMBER_ATTRIBUTE_CLEANUP_AT_THE_END = "duplicate_member_attribute_cleanup_at_the_end"
    # Add the "type" implied by other keywords to every schema
    STRICT_TYPE_INFO = "strict_type_info"

    @property
    def overridden_options(self) -> frozenset[Option]:
        """Options ignored while this one is enabled."""
        return _OVERRIDES.get(self, frozenset())

    @staticmethod
    def parse(name: str) -> Option:
        """Look up an option by value or member name (case-insensitive)."""
        normalized = name.strip().lower().replace("-", "_")
        for option in Option:
            if option.value == normalized:
                return option
        raise ValueError(f"Unknown option: {name}")


_OVERRIDES = {
    Option.FLATTENED_ENUMS_FROM_VALUES: frozenset({Option.FLATTENED_ENUMS}),
    Option.INLINE_ALL_SCHEMAS: frozenset({Option.DEFINITIONS_FOR_ALL_OBJECTS, Option.DEFINITION_FOR_MAIN_SCHEMA}),
}


class OptionPreset:
    """A set of options enabled unless explicitly switched off."""

    def __init__(self, name: str, *enabled_by_default: Option):
        self.name = name
        self._enabled = frozenset(enabled_by_default)

    def is_enabled_by_default(self, option: Option) -> bool:
        return option in self._enabled

    def __repr__(self) -> str:
        return f"OptionPreset({self.name})"

    @staticmethod
    def by_name(name: str) -> OptionPreset:
        for preset in (FULL_DOCUMENTATION, PLAIN_JSON, PYTHON_OBJECT):
            if preset.name == name.lower():
                return preset
        raise ValueError(f"Unknown option preset: {name}")


FULL_DOCUMENTATION = OptionPreset(
    "full_documentation",
    Option.VALUES_FROM_CONSTANT_FIELDS,
    Option.STATIC_FIELDS,
    Option.PRIVATE_FIELDS,
    Option.PROPERTY_ACCESSORS,
    Option.FLATTENED_ENUMS,
    Option.DEFINITIONS_FOR_ALL_OBJECTS,
    Option.NULLABLE_FIELDS_BY_DEFAULT,
    Option.NULLABLE_METHOD_RETURN_VALUES_BY_DEFAULT,
    Option.ALLOF_CLEANUP_AT_THE_END,
)

PLAIN_JSON = OptionPreset(
    "plain_json",
    Option.SCHEMA_VERSION_INDICATOR,
    Option.ADDITIONAL_FIXED_TYPES,
    Option.FLATTENED_ENUMS,
    Option.VALUES_FROM_CONSTANT_FIELDS,
    Option.ALLOF_CLEANUP_AT_THE_END,
)

PYTHON_OBJECT = OptionPreset(
    "python_object",
    Option.VALUES_FROM_CONSTANT_FIELDS,
    Option.STATIC_FIELDS,
    Option.PROPERTY_ACCESSORS,
    Option.FLATTENED_ENUMS,
    Option.ALLOF_CLEANUP_AT_THE_END,
)
