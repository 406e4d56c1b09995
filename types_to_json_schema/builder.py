"""
Assembly of the final schema document.

After the generation context traversed all types, the SchemaBuilder decides
per definition whether it is emitted under the definitions section (and
referenced via `$ref`) or copied into each place referring to it. Finally, the
configured clean-up steps are applied.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from .cleanup import SchemaCleanUp
from .context import GenerationContext
from .definitions import DefinitionKey
from .errors import DuplicateDefinitionNameError
from .keywords import REF_MAIN, SchemaKeyword
from .options import Option
from .utils import merge_missing_attributes

if TYPE_CHECKING:
    from .config import SchemaGeneratorConfig
    from .descriptors import TypeDescriptor
    from .type_context import TypeContext

logger = logging.getLogger(__name__)


class SchemaBuilder:
    """Builds the schema for one type, or shared definitions for several.

    Example:
        builder = SchemaBuilder(config, TypeContext())
        schema = builder.create_schema_for_single_type(User)
    """

    def __init__(self, config: SchemaGeneratorConfig, type_context: TypeContext):
        self.config = config
        self.type_context = type_context
        self.context = GenerationContext(config, type_context)
        self.naming_strategy = config.naming_strategy
        self.schema_nodes: list[dict] = []

    def _keyword(self, keyword: SchemaKeyword) -> str:
        return self.config.keyword(keyword)

    def resolve(self, target: Any, type_parameters: tuple = ()) -> TypeDescriptor:
        """Describe the target type, binding the given type parameters (e.g. `Box`, `(str,)`)."""
        annotation = target[type_parameters] if type_parameters else target
        return self.type_context.resolve(annotation)

    # ------------------------------------------------------------------
    # Single type
    # ------------------------------------------------------------------

    def create_schema_for_single_type(self, target: Any, *type_parameters: Any) -> dict:
        """
        Generate the complete schema document for one type.

        Args:
            target: The class (or typing construct) to describe
            type_parameters: Arguments for the target's type variables

        Returns:
            The schema document

        Raises:
            UnsupportedTypeError: If the target type itself cannot be described
            CircularReferenceError: If inlining all schemas meets a cycle
            DuplicateDefinitionNameError: If definition names cannot be made distinct
        """
        main_type = self.resolve(target, type_parameters)
        main_key = self.context.parse_type(main_type)

        result: dict = {}
        if self.config.is_enabled(Option.SCHEMA_VERSION_INDICATOR):
            result[self._keyword(SchemaKeyword.TAG_SCHEMA)] = self.config.schema_version.identifier
        main_as_definition = self.config.is_enabled(Option.DEFINITION_FOR_MAIN_SCHEMA)
        if main_as_definition:
            self.context.add_reference(main_key, result, False)
        definitions_tag = self._keyword(SchemaKeyword.TAG_DEFINITIONS)
        prefix = self._reference_prefix(definitions_tag)
        definitions = self.build_definitions_and_resolve_references(prefix, main_key)
        if definitions:
            result[definitions_tag] = definitions
        if not main_as_definition:
            merge_missing_attributes(result, self.context.get_definition(main_key))
            self.schema_nodes.append(result)
        self.perform_cleanup(definitions, prefix)
        return result

    # ------------------------------------------------------------------
    # Multiple types
    # ------------------------------------------------------------------

    def create_schema_reference(self, target: Any, *type_parameters: Any) -> dict:
        """
        Create a placeholder for the given type's schema.

        The returned node is populated (with an inline schema or a `$ref`)
        once `collect_definitions()` is called.
        """
        node = self.context.create_definition_reference(self.resolve(target, type_parameters))
        self.schema_nodes.append(node)
        return node

    def collect_definitions(self, designated_path: str) -> dict:
        """
        Resolve all placeholders and return the shared definitions.

        Args:
            designated_path: Location of the definitions in the enclosing document,
                e.g. "components/schemas"

        Returns:
            The definitions, by name; references point to `#/<designated_path>/<name>`
        """
        prefix = self._reference_prefix(designated_path)
        definitions = self.build_definitions_and_resolve_references(prefix, None)
        self.perform_cleanup(definitions, prefix)
        return definitions

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    @staticmethod
    def _reference_prefix(designated_path: str) -> str:
        return f"{REF_MAIN}/{designated_path}/"

    def _should_produce_definition(self, key: DefinitionKey, main_key: DefinitionKey | None, direct_only: bool) -> bool:
        if self.context.is_never_inline(key):
            return True
        if self.config.is_enabled(Option.INLINE_ALL_SCHEMAS):
            return False
        if self.config.is_enabled(Option.DEFINITIONS_FOR_ALL_OBJECTS) or key == main_key:
            return True
        references = self.context.references(key)
        if direct_only and not references:
            return False
        return len(references) + len(self.context.nullable_references(key)) > 1

    def _should_produce_nullable_definition(self, key: DefinitionKey) -> bool:
        if self.config.is_enabled(Option.INLINE_NULLABLE_SCHEMAS):
            return False
        if self.context.is_never_inline(key):
            return True
        if self.config.is_enabled(Option.INLINE_ALL_SCHEMAS):
            return False
        return self.config.is_enabled(Option.DEFINITIONS_FOR_ALL_OBJECTS) or len(self.context.nullable_references(key)) > 1

    def build_definitions_and_resolve_references(self, prefix: str, main_key: DefinitionKey | None) -> dict:
        """
        Decide per definition whether to emit or inline it, and update all references.

        Args:
            prefix: Prefix of `$ref` values pointing into the definitions section
            main_key: Key of the main type (None when collecting definitions for several types)

        Returns:
            The definitions section, by name
        """
        definitions: dict = {}
        names = self._definition_names(main_key)
        for key, name in names.items():
            produced = self._should_produce_definition(key, main_key, True)
            reference = self._update_references(key, name, produced, main_key, definitions, prefix)
            nullable_references = self.context.nullable_references(key)
            if nullable_references:
                self._update_nullable_references(key, name, reference, nullable_references, definitions, prefix)
        self.schema_nodes.extend(definitions.values())
        return definitions

    def _definition_names(self, main_key: DefinitionKey | None) -> dict[DefinitionKey, str]:
        """Name every definition to be emitted; others are mapped to an empty name."""
        groups: dict[str, list[DefinitionKey]] = {}
        for key in self.context.defined_keys():
            groups.setdefault(self.naming_strategy.get_definition_name(key, self.context), []).append(key)

        main_as_definition = self.config.is_enabled(Option.DEFINITION_FOR_MAIN_SCHEMA)
        names: dict[DefinitionKey, str] = {}
        for base_name in sorted(groups):
            produced = []
            for key in groups[base_name]:
                names[key] = ""
                if self._should_produce_definition(key, main_key, False):
                    produced.append(key)
            distinct = len(produced) == 1 or (len(produced) == 2 and not main_as_definition and main_key in produced)
            if distinct:
                for key in produced:
                    names[key] = base_name
                continue
            group = {key: base_name for key in produced}
            self.naming_strategy.adjust_duplicate_names(group, self.context)
            if len(group) != len(produced):
                raise DuplicateDefinitionNameError(
                    f"{type(self.naming_strategy).__name__} altered the list of definitions named {base_name!r}"
                )
            names.update(group)

        # the main schema is referenced as "#" unless it is emitted as definition itself
        used = [name for key, name in names.items() if name and (main_as_definition or key != main_key)]
        duplicates = sorted(name for name, count in Counter(used).items() if count > 1)
        if duplicates:
            raise DuplicateDefinitionNameError(
                f"{type(self.naming_strategy).__name__} produced duplicate definition names: {', '.join(duplicates)}"
            )
        return names

    def _update_references(
        self,
        key: DefinitionKey,
        name: str,
        produced: bool,
        main_key: DefinitionKey | None,
        definitions: dict,
        prefix: str,
    ) -> str | None:
        references = self.context.references(key)
        if produced:
            if key == main_key and not self.config.is_enabled(Option.DEFINITION_FOR_MAIN_SCHEMA):
                reference = REF_MAIN
            else:
                definitions[name] = self.context.get_definition(key)
                reference = prefix + name
            for node in references:
                node[self._keyword(SchemaKeyword.TAG_REF)] = reference
            return reference
        # inline the definition wherever it is referenced
        definition = self.context.get_definition(key)
        for node in references:
            merge_missing_attributes(node, definition)
        return None

    def _update_nullable_references(
        self,
        key: DefinitionKey,
        name: str,
        reference: str | None,
        nullable_references: list[dict],
        definitions: dict,
        prefix: str,
    ) -> None:
        if reference is None:
            # the original may still be inlined or emitted as it is
            definition = dict(self.context.get_definition(key))
        else:
            definition = {self._keyword(SchemaKeyword.TAG_REF): reference}
        self.context.make_nullable(definition)
        if self._should_produce_nullable_definition(key):
            nullable_name = self.naming_strategy.adjust_nullable_name(key, name, self.context)
            definitions[nullable_name] = definition
            for node in nullable_references:
                node[self._keyword(SchemaKeyword.TAG_REF)] = prefix + nullable_name
        else:
            for node in nullable_references:
                merge_missing_attributes(node, definition)

    # ------------------------------------------------------------------
    # Clean-up
    # ------------------------------------------------------------------

    def perform_cleanup(self, definitions: dict, prefix: str) -> None:
        clean_up = SchemaCleanUp(self.config)
        if self.config.is_enabled(Option.ALLOF_CLEANUP_AT_THE_END):
            clean_up.reduce_all_of_nodes(self.schema_nodes)
        clean_up.reduce_any_of_nodes(self.schema_nodes)
        if self.config.is_enabled(Option.DUPLICATE_MEMBER_ATTRIBUTE_CLEANUP_AT_THE_END):
            clean_up.reduce_redundant_member_attributes(self.schema_nodes, definitions, prefix)
        if self.config.is_enabled(Option.STRICT_TYPE_INFO):
            clean_up.set_strict_type_info(self.schema_nodes, True)
            # null types may have introduced more anyOf wrappers
            clean_up.reduce_any_of_nodes(self.schema_nodes)
