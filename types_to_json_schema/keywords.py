"""
Schema keyword lookup table.

Maps abstract keywords to the literal strings used in a generated document,
considering the targeted JSON Schema draft.
"""

from __future__ import annotations

from enum import Enum


class SchemaVersion(str, Enum):
    """Supported JSON Schema drafts."""

    DRAFT_6 = "draft-06"
    DRAFT_7 = "draft-07"
    DRAFT_2019_09 = "2019-09"
    DRAFT_2020_12 = "2020-12"

    @property
    def identifier(self) -> str:
        """The `$schema` value for this draft."""
        return _IDENTIFIERS[self]

    @property
    def is_legacy(self) -> bool:
        """Whether sibling keywords next to `$ref` are ignored in this draft."""
        return self in (SchemaVersion.DRAFT_6, SchemaVersion.DRAFT_7)


_IDENTIFIERS = {
    SchemaVersion.DRAFT_6: "http://json-schema.org/draft-06/schema#",
    SchemaVersion.DRAFT_7: "http://json-schema.org/draft-07/schema#",
    SchemaVersion.DRAFT_2019_09: "https://json-schema.org/draft/2019-09/schema",
    SchemaVersion.DRAFT_2020_12: "https://json-schema.org/draft/2020-12/schema",
}


class SchemaType(str, Enum):
    """Values of the `type` keyword."""

    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    BOOLEAN = "boolean"
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"


class TagContent(Enum):
    """Kind of value expected under a keyword."""

    SCHEMA = "schema"  # a single sub-schema
    ARRAY_OF_SCHEMAS = "array"  # a list of sub-schemas
    NAMED_SCHEMAS = "named"  # a mapping of names to sub-schemas
    NON_SCHEMA = "value"  # anything else


_OBJECT = (SchemaType.OBJECT,)
_ARRAY = (SchemaType.ARRAY,)
_STRING = (SchemaType.STRING,)
_NUMERIC = (SchemaType.INTEGER, SchemaType.NUMBER)

_SCHEMA = (TagContent.SCHEMA,)
_SCHEMAS = (TagContent.ARRAY_OF_SCHEMAS,)
_NAMED = (TagContent.NAMED_SCHEMAS,)
_VALUE = (TagContent.NON_SCHEMA,)


class SchemaKeyword(Enum):
    """Abstract schema keywords.

    Each member holds: the tag name, the tag name for draft-06/07 (when it
    differs), the `type` values implied by the keyword, and its content kinds.
    """

    TAG_SCHEMA = ("$schema", None, (), _VALUE)
    TAG_ID = ("$id", None, (), _VALUE)
    TAG_ANCHOR = ("$anchor", None, (), _VALUE)
    TAG_DEFINITIONS = ("$defs", "definitions", (), _NAMED)
    TAG_REF = ("$ref", None, (), _VALUE)
    TAG_COMMENT = ("$comment", None, (), _VALUE)

    TAG_TYPE = ("type", None, (), _VALUE)

    TAG_PROPERTIES = ("properties", None, _OBJECT, _NAMED)
    TAG_UNEVALUATED_PROPERTIES = ("unevaluatedProperties", None, _OBJECT, _SCHEMA)
    TAG_ITEMS = ("items", None, _ARRAY, (TagContent.SCHEMA, TagContent.ARRAY_OF_SCHEMAS))
    TAG_PREFIX_ITEMS = ("prefixItems", "items", _ARRAY, _SCHEMAS)
    TAG_UNEVALUATED_ITEMS = ("unevaluatedItems", None, _ARRAY, _SCHEMA)
    TAG_REQUIRED = ("required", None, _OBJECT, _VALUE)
    TAG_DEPENDENT_SCHEMAS = ("dependentSchemas", "dependencies", _OBJECT, _NAMED)
    TAG_DEPENDENT_REQUIRED = ("dependentRequired", "dependencies", _OBJECT, _VALUE)
    TAG_ADDITIONAL_PROPERTIES = ("additionalProperties", None, _OBJECT, _SCHEMA)
    TAG_PATTERN_PROPERTIES = ("patternProperties", None, _OBJECT, _NAMED)
    TAG_PROPERTIES_MIN = ("minProperties", None, _OBJECT, _VALUE)
    TAG_PROPERTIES_MAX = ("maxProperties", None, _OBJECT, _VALUE)

    TAG_ALLOF = ("allOf", None, (), _SCHEMAS)
    TAG_ANYOF = ("anyOf", None, (), _SCHEMAS)
    TAG_ONEOF = ("oneOf", None, (), _SCHEMAS)
    TAG_NOT = ("not", None, (), _SCHEMA)

    TAG_TITLE = ("title", None, (), _VALUE)
    TAG_DESCRIPTION = ("description", None, (), _VALUE)
    TAG_CONST = ("const", None, (), _VALUE)
    TAG_ENUM = ("enum", None, (), _VALUE)
    TAG_DEFAULT = ("default", None, (), _VALUE)
    TAG_EXAMPLES = ("examples", None, (), _VALUE)
    TAG_READ_ONLY = ("readOnly", None, (), _VALUE)
    TAG_WRITE_ONLY = ("writeOnly", None, (), _VALUE)

    TAG_LENGTH_MIN = ("minLength", None, _STRING, _VALUE)
    TAG_LENGTH_MAX = ("maxLength", None, _STRING, _VALUE)
    TAG_FORMAT = ("format", None, _STRING, _VALUE)
    TAG_PATTERN = ("pattern", None, _STRING, _VALUE)

    TAG_MINIMUM = ("minimum", None, _NUMERIC, _VALUE)
    TAG_MINIMUM_EXCLUSIVE = ("exclusiveMinimum", None, _NUMERIC, _VALUE)
    TAG_MAXIMUM = ("maximum", None, _NUMERIC, _VALUE)
    TAG_MAXIMUM_EXCLUSIVE = ("exclusiveMaximum", None, _NUMERIC, _VALUE)
    TAG_MULTIPLE_OF = ("multipleOf", None, _NUMERIC, _VALUE)

    TAG_ITEMS_MIN = ("minItems", None, _ARRAY, _VALUE)
    TAG_ITEMS_MAX = ("maxItems", None, _ARRAY, _VALUE)
    TAG_ITEMS_UNIQUE = ("uniqueItems", None, _ARRAY, _VALUE)

    TAG_IF = ("if", None, (), _SCHEMA)
    TAG_THEN = ("then", None, (), _SCHEMA)
    TAG_ELSE = ("else", None, (), _SCHEMA)

    def __init__(self, tag, legacy_tag, implied_types, content_types):
        self.tag = tag
        self.legacy_tag = legacy_tag
        self.implied_types = implied_types
        self.content_types = content_types

    def for_version(self, version: SchemaVersion) -> str:
        """Return the tag name to use in the given draft."""
        if self.legacy_tag is not None and version.is_legacy:
            return self.legacy_tag
        return self.tag

    def supports(self, content: TagContent) -> bool:
        return content in self.content_types

    @staticmethod
    def reverse_tag_map(version: SchemaVersion, predicate=None) -> dict[str, SchemaKeyword]:
        """
        Map tag names back to their keywords.

        When two keywords share a tag name in the given draft, the one declared
        first wins.

        Args:
            version: Targeted draft
            predicate: Optional filter applied to each keyword

        Returns:
            Tag name to keyword mapping
        """
        result: dict[str, SchemaKeyword] = {}
        for keyword in SchemaKeyword:
            if predicate is not None and not predicate(keyword):
                continue
            result.setdefault(keyword.for_version(version), keyword)
        return result


REF_MAIN = "#"
