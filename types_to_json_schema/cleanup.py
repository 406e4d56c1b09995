"""
Structural simplification of generated schemas.

All clean-up steps visit every sub-schema reachable through the keywords
holding schemas (e.g. `items`, `allOf`, `properties`), breadth-first, and
modify the nodes in place.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Callable

from .context import make_nullable
from .keywords import SchemaKeyword, SchemaType, TagContent
from .options import Option
from .utils import json_equal, unique_in_order

if TYPE_CHECKING:
    from .config import SchemaGeneratorConfig

logger = logging.getLogger(__name__)

# Returned by merge functions when the values cannot be combined
_UNMERGEABLE = object()

_LOWEST_WINS = (
    SchemaKeyword.TAG_ITEMS_MAX,
    SchemaKeyword.TAG_PROPERTIES_MAX,
    SchemaKeyword.TAG_MAXIMUM,
    SchemaKeyword.TAG_MAXIMUM_EXCLUSIVE,
    SchemaKeyword.TAG_LENGTH_MAX,
)
_HIGHEST_WINS = (
    SchemaKeyword.TAG_ITEMS_MIN,
    SchemaKeyword.TAG_PROPERTIES_MIN,
    SchemaKeyword.TAG_MINIMUM,
    SchemaKeyword.TAG_MINIMUM_EXCLUSIVE,
    SchemaKeyword.TAG_LENGTH_MIN,
)
_SUB_SCHEMA_MERGES = (
    SchemaKeyword.TAG_ITEMS,
    SchemaKeyword.TAG_UNEVALUATED_ITEMS,
    SchemaKeyword.TAG_ADDITIONAL_PROPERTIES,
    SchemaKeyword.TAG_UNEVALUATED_PROPERTIES,
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SchemaCleanUp:
    """Clean-up steps applied to generated schemas."""

    def __init__(self, config: SchemaGeneratorConfig):
        self.config = config
        self.version = config.schema_version
        self._merge_functions: dict[SchemaKeyword, Callable[[list], Any]] = {
            SchemaKeyword.TAG_ALLOF: self._merge_arrays,
            SchemaKeyword.TAG_REQUIRED: self._merge_arrays,
            SchemaKeyword.TAG_PROPERTIES: self._merge_object_properties,
            SchemaKeyword.TAG_DEPENDENT_REQUIRED: self._merge_dependent_required,
            SchemaKeyword.TAG_DEPENDENT_SCHEMAS: self._merge_dependent_schemas,
            SchemaKeyword.TAG_TYPE: self._overlap_of_types,
        }
        for keyword in _SUB_SCHEMA_MERGES:
            self._merge_functions[keyword] = self._merge_sub_schemas
        for keyword in _LOWEST_WINS:
            self._merge_functions[keyword] = lambda values: self._numeric(values, min)
        for keyword in _HIGHEST_WINS:
            self._merge_functions[keyword] = lambda values: self._numeric(values, max)

    def _keyword(self, keyword: SchemaKeyword) -> str:
        return self.config.keyword(keyword)

    # ------------------------------------------------------------------
    # Public clean-up steps
    # ------------------------------------------------------------------

    def reduce_all_of_nodes(self, nodes: list[dict]) -> None:
        """Merge `allOf` parts into their parent where they do not conflict."""
        tag_map = SchemaKeyword.reverse_tag_map(self.version)
        self._finalise_schema_parts(nodes, lambda node: self._merge_all_of_parts(node, tag_map))

    def reduce_any_of_nodes(self, nodes: list[dict]) -> None:
        """Replace `anyOf` entries that only wrap another `anyOf` by that one's entries."""
        self._finalise_schema_parts(nodes, self._reduce_any_of_wrappers)

    def reduce_redundant_member_attributes(self, nodes: list[dict], definitions: dict, prefix: str) -> None:
        """
        Drop attributes of property schemas that the referenced definition holds as well.

        Args:
            nodes: Schemas to clean up
            definitions: The definitions section, by name
            prefix: Reference prefix of the definitions, e.g. `#/$defs/`
        """
        by_reference = {prefix + name: definition for name, definition in definitions.items()}
        properties_tag = self._keyword(SchemaKeyword.TAG_PROPERTIES)
        ref_tag = self._keyword(SchemaKeyword.TAG_REF)

        def reduce(node: dict) -> None:
            properties = node.get(properties_tag)
            if not isinstance(properties, dict):
                return
            for member_schema in properties.values():
                if not isinstance(member_schema, dict):
                    continue
                definition = by_reference.get(member_schema.get(ref_tag))
                if isinstance(definition, dict):
                    self._reduce_redundant_attributes(member_schema, definition)

        self._finalise_schema_parts(nodes, reduce)

    def set_strict_type_info(self, nodes: list[dict], consider_null_type: bool = True) -> None:
        """
        Add the `type` implied by other keywords wherever it is missing.

        Args:
            nodes: Schemas to extend
            consider_null_type: Whether to allow "null" in addition to the implied types
        """
        tag_map = SchemaKeyword.reverse_tag_map(self.version, lambda keyword: bool(keyword.implied_types))
        type_tag = self._keyword(SchemaKeyword.TAG_TYPE)
        always_wrap = self.config.is_enabled(Option.NULLABLE_ALWAYS_AS_ANYOF)
        order = list(SchemaType)

        def add_type(node: dict) -> None:
            if type_tag in node:
                return
            implied = {schema_type for tag, keyword in tag_map.items() if tag in node for schema_type in keyword.implied_types}
            if not implied:
                return
            types = [schema_type.value for schema_type in sorted(implied, key=order.index)]
            if consider_null_type and not always_wrap:
                types.append(SchemaType.NULL.value)
            node[type_tag] = types[0] if len(types) == 1 else types
            if consider_null_type and always_wrap:
                make_nullable(node, self.config)

        self._finalise_schema_parts(nodes, add_type)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _finalise_schema_parts(self, nodes: list[dict], clean_up: Callable[[dict], None]) -> None:
        """Apply the clean-up to the given nodes and all their sub-schemas, breadth-first."""
        tag_map = SchemaKeyword.reverse_tag_map(
            self.version, lambda keyword: keyword.content_types != (TagContent.NON_SCHEMA,)
        )
        pending = deque(nodes)
        visited: set[int] = set()
        while pending:
            node = pending.popleft()
            if not isinstance(node, dict) or id(node) in visited:
                continue
            visited.add(id(node))
            clean_up(node)
            for tag, value in node.items():
                keyword = tag_map.get(tag)
                if keyword is None:
                    continue
                if isinstance(value, list) and keyword.supports(TagContent.ARRAY_OF_SCHEMAS):
                    pending.extend(value)
                elif isinstance(value, dict) and keyword.supports(TagContent.SCHEMA):
                    pending.append(value)
                elif isinstance(value, dict) and keyword.supports(TagContent.NAMED_SCHEMAS):
                    pending.extend(value.values())

    # ------------------------------------------------------------------
    # allOf
    # ------------------------------------------------------------------

    def _merge_all_of_parts(self, node: dict, tag_map: dict[str, SchemaKeyword]) -> None:
        all_of_tag = self._keyword(SchemaKeyword.TAG_ALLOF)
        parts = node.get(all_of_tag)
        if not isinstance(parts, list):
            return
        for part in parts:
            if isinstance(part, dict):
                self._merge_all_of_parts(part, tag_map)
        merged = self._merge_schemas(node, [node, *parts], tag_map)
        if merged is _UNMERGEABLE:
            logger.debug("keeping %s with %d part(s)", all_of_tag, len(parts))
            return
        node.clear()
        node.update(merged)

    def _merge_schemas(self, main: dict | None, candidates: list, tag_map: dict[str, SchemaKeyword]):
        """
        Merge the given schemas into a new one.

        Args:
            main: The node holding the `allOf` being dissolved (None if all candidates are equal peers)
            candidates: All schemas to merge, including `main`
            tag_map: Tag name to keyword lookup

        Returns:
            The merged schema, or `_UNMERGEABLE`
        """
        if any(candidate is False for candidate in candidates):
            return _UNMERGEABLE
        parts = [candidate for candidate in candidates if isinstance(candidate, dict)]
        values_by_tag: dict[str, list] = {}
        for part in parts:
            for tag, value in part.items():
                values_by_tag.setdefault(tag, []).append(value)
        if self._blocked_by_reference(main, parts, values_by_tag):
            return _UNMERGEABLE
        if self._keyword(SchemaKeyword.TAG_IF) in values_by_tag:
            # conditionals stay isolated in their sub-schema
            return _UNMERGEABLE

        merged: dict = {}
        for tag, values in values_by_tag.items():
            keyword = tag_map.get(tag)
            if keyword is None:
                if len(values) > 1:
                    return _UNMERGEABLE
                merged[tag] = values[0]
                continue
            if keyword is SchemaKeyword.TAG_ALLOF and main is not None:
                # the wrapper being dissolved does not count
                values = values[1:]
                if not values:
                    continue
            value = values[0] if len(values) == 1 else self._merge_values(keyword, values)
            if value is _UNMERGEABLE:
                return _UNMERGEABLE
            merged[tag] = value
        return merged

    def _blocked_by_reference(self, main: dict | None, parts: list[dict], values_by_tag: dict) -> bool:
        """Whether a `$ref` must not be mixed with other keywords (draft-06/07)."""
        if not self.version.is_legacy or self._keyword(SchemaKeyword.TAG_REF) not in values_by_tag:
            return False
        if main is None:
            return len(parts) > 1
        return len(main) > 1 or len(parts) > 2

    def _merge_values(self, keyword: SchemaKeyword, values: list):
        merge = self._merge_functions.get(keyword)
        if merge is None:
            return values[0] if all(json_equal(value, values[0]) for value in values[1:]) else _UNMERGEABLE
        return merge(values)

    @staticmethod
    def _merge_arrays(values: list):
        if not all(isinstance(value, list) for value in values):
            return _UNMERGEABLE
        return unique_in_order(item for value in values for item in value)

    @staticmethod
    def _merge_object_properties(values: list):
        if not all(isinstance(value, dict) for value in values):
            return _UNMERGEABLE
        merged: dict = {}
        for value in values:
            for name, schema in value.items():
                if name not in merged:
                    merged[name] = schema
                elif not json_equal(merged[name], schema):
                    return _UNMERGEABLE
        return merged

    @staticmethod
    def _merge_dependent_required(values: list):
        merged: dict[str, list[str]] = {}
        for value in values:
            if not isinstance(value, dict):
                return _UNMERGEABLE
            for lead, names in value.items():
                if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
                    return _UNMERGEABLE
                merged[lead] = unique_in_order([*merged.get(lead, []), *names])
        return merged

    def _merge_dependent_schemas(self, values: list):
        if self.version.is_legacy:
            # "dependencies" covers both property names and schemas
            merged = self._merge_dependent_required(values)
            if merged is not _UNMERGEABLE:
                return merged
        return self._merge_object_properties(values)

    def _merge_sub_schemas(self, values: list):
        if not all(isinstance(value, dict) for value in values):
            return _UNMERGEABLE
        return self._merge_schemas(None, values, SchemaKeyword.reverse_tag_map(self.version))

    @staticmethod
    def _overlap_of_types(values: list):
        remaining: list[str] | None = None
        for value in values:
            if isinstance(value, str):
                current = [value]
            elif isinstance(value, list) and all(isinstance(entry, str) for entry in value):
                current = value
            else:
                return _UNMERGEABLE
            remaining = list(current) if remaining is None else [entry for entry in remaining if entry in current]
            if not remaining:
                return _UNMERGEABLE
        return remaining[0] if len(remaining) == 1 else remaining

    @staticmethod
    def _numeric(values: list, pick: Callable):
        if not all(_is_number(value) for value in values):
            return _UNMERGEABLE
        return pick(values)

    # ------------------------------------------------------------------
    # anyOf
    # ------------------------------------------------------------------

    def _reduce_any_of_wrappers(self, node: dict) -> None:
        any_of_tag = self._keyword(SchemaKeyword.TAG_ANYOF)
        entries = node.get(any_of_tag)
        if not isinstance(entries, list):
            return
        for entry in entries:
            if isinstance(entry, dict):
                self._reduce_any_of_wrappers(entry)
        for index in range(len(entries) - 1, -1, -1):
            entry = entries[index]
            if isinstance(entry, dict) and len(entry) == 1 and isinstance(entry.get(any_of_tag), list):
                entries[index : index + 1] = entry[any_of_tag]

    # ------------------------------------------------------------------
    # Redundant member attributes
    # ------------------------------------------------------------------

    def _reduce_redundant_attributes(self, member_schema: dict, definition: dict) -> None:
        conditionals = [self._keyword(k) for k in (SchemaKeyword.TAG_IF, SchemaKeyword.TAG_THEN, SchemaKeyword.TAG_ELSE)]
        skipped = set()
        if any(not json_equal(member_schema.get(tag), definition.get(tag)) for tag in conditionals):
            skipped.update(conditionals)
        for tag in list(member_schema):
            if tag in skipped or tag not in definition:
                continue
            if json_equal(member_schema[tag], definition[tag]):
                del member_schema[tag]
