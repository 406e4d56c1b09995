"""
Generation context.

Holds the definitions and the references collected while traversing the type
graph of one schema generation run. Every definition is registered under its
DefinitionKey before its members are traversed, so that encountering the same
type again (e.g. in a self-referential type) only records another reference.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from .attributes import AttributeCollector
from .definitions import DefinitionKey
from .descriptors import MemberDescriptor, TypeDescriptor, TypeScope
from .errors import UnsupportedTypeError
from .keywords import SchemaKeyword, SchemaType
from .members import MemberCollector
from .options import Option
from .utils import merge_missing_attributes

if TYPE_CHECKING:
    from .config import SchemaGeneratorConfig
    from .type_context import TypeContext

logger = logging.getLogger(__name__)

_WRAPPED_WHEN_NULLABLE = (
    SchemaKeyword.TAG_REF,
    SchemaKeyword.TAG_ALLOF,
    SchemaKeyword.TAG_ANYOF,
    SchemaKeyword.TAG_ONEOF,
    SchemaKeyword.TAG_CONST,
    SchemaKeyword.TAG_ENUM,
)


class GenerationContext:
    """State and traversal logic of a single schema generation run.

    Attributes:
        config: The generator configuration
        type_context: Introspection of the traversed types
    """

    def __init__(self, config: SchemaGeneratorConfig, type_context: TypeContext):
        self.config = config
        self.type_context = type_context
        self._definitions: dict[DefinitionKey, dict] = {}
        self._references: dict[DefinitionKey, list[dict]] = defaultdict(list)
        self._nullable_references: dict[DefinitionKey, list[dict]] = defaultdict(list)
        self._never_inline: set[DefinitionKey] = set()

    def keyword(self, keyword: SchemaKeyword) -> str:
        return self.config.keyword(keyword)

    # ------------------------------------------------------------------
    # Definitions and references
    # ------------------------------------------------------------------

    def parse_type(self, descriptor: TypeDescriptor) -> DefinitionKey:
        """
        Traverse the given type as main type of a schema.

        Args:
            descriptor: The type to generate the schema for

        Returns:
            Key under which the type's definition was registered
        """
        self._traverse(self.type_context.create_type_scope(descriptor), None, False, False, None)
        return DefinitionKey(descriptor, None)

    def put_definition(self, key: DefinitionKey, definition: dict) -> None:
        if key in self._definitions:
            raise ValueError(f"Definition of {key} is already registered")
        self._definitions[key] = definition

    def get_definition(self, key: DefinitionKey) -> dict:
        return self._definitions[key]

    def defined_keys(self) -> list[DefinitionKey]:
        """Keys of all registered definitions, in registration order."""
        return list(self._definitions)

    def add_reference(self, key: DefinitionKey, node: dict, nullable: bool) -> None:
        """Remember that the node is to hold the key's definition or a `$ref` to it."""
        target = self._nullable_references if nullable else self._references
        target[key].append(node)

    def references(self, key: DefinitionKey) -> list[dict]:
        return list(self._references.get(key, ()))

    def nullable_references(self, key: DefinitionKey) -> list[dict]:
        return list(self._nullable_references.get(key, ()))

    def is_never_inline(self, key: DefinitionKey) -> bool:
        return key in self._never_inline

    # ------------------------------------------------------------------
    # Entry points for custom definition providers
    # ------------------------------------------------------------------

    def create_definition(self, descriptor: TypeDescriptor) -> dict:
        """Create the inline schema of a type, considering all providers."""
        return self.create_standard_definition(descriptor, None)

    def create_definition_reference(self, descriptor: TypeDescriptor) -> dict:
        """Create a node that ends up holding the type's schema or a reference to it."""
        return self.create_standard_definition_reference(descriptor, None)

    def create_standard_definition(self, descriptor: TypeDescriptor, ignored_provider) -> dict:
        """
        Create the inline schema of a type, skipping some custom definition providers.

        Args:
            descriptor: The type to describe
            ignored_provider: Provider (usually the caller) after which to continue the lookup

        Returns:
            The generated schema node
        """
        node: dict = {}
        self._traverse(self.type_context.create_type_scope(descriptor), node, False, True, ignored_provider)
        return node

    def create_standard_definition_reference(self, descriptor: TypeDescriptor, ignored_provider) -> dict:
        node: dict = {}
        self._traverse(self.type_context.create_type_scope(descriptor), node, False, False, ignored_provider)
        return node

    def create_standard_member_definition(self, member: MemberDescriptor, ignored_provider):
        """Create the inline schema of a member, skipping some member providers."""
        return self._create_member_schema(member, False, True, ignored_provider)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _traverse(
        self,
        scope: TypeScope,
        target: dict | None,
        nullable: bool,
        force_inline: bool,
        ignored_provider,
    ) -> None:
        descriptor = scope.type
        key = DefinitionKey(descriptor, ignored_provider)
        if not force_inline and key in self._definitions:
            logger.debug("adding reference to existing definition of %s", descriptor)
            if target is not None:
                self.add_reference(key, target, nullable)
            return

        custom = self.config.get_custom_definition(descriptor, self, ignored_provider)
        if custom is not None and (custom.is_inline or force_inline):
            include_attributes = custom.includes_attributes
            if target is None:
                logger.debug("storing custom inline definition of %s as main schema", descriptor)
                definition = custom.value
                self.put_definition(key, definition)
            else:
                logger.debug("applying custom inline definition of %s", descriptor)
                target.update(custom.value)
                definition = target
            if nullable:
                self.make_nullable(definition)
        else:
            is_container = scope.is_container
            if force_inline or (is_container and target is not None and custom is None):
                # arrays are never shared
                definition = target
            else:
                definition = {}
                self.put_definition(key, definition)
                if target is not None:
                    self.add_reference(key, target, nullable)
            if custom is not None:
                logger.debug("applying custom definition of %s", descriptor)
                definition.update(custom.value)
                include_attributes = custom.includes_attributes
                if custom.never_inline:
                    self._never_inline.add(key)
            elif is_container:
                logger.debug("generating array definition for %s", descriptor)
                self._generate_array_definition(scope, definition, nullable)
                include_attributes = True
            else:
                logger.debug("generating definition for %s", descriptor)
                include_attributes = not self._add_subtype_references(scope, definition)
                if nullable and force_inline:
                    self.make_nullable(definition)

        if include_attributes:
            type_attributes = AttributeCollector(self).collect_type_attributes(scope, self._allowed_types(definition))
            merge_missing_attributes(definition, type_attributes)
        for override in self.config.type_attribute_overrides:
            override(definition, scope, self)

    def _allowed_types(self, definition: dict) -> set[str]:
        declared = definition.get(self.keyword(SchemaKeyword.TAG_TYPE))
        if declared is None:
            return set()
        if isinstance(declared, str):
            return {declared}
        return set(declared)

    def _add_subtype_references(self, scope: TypeScope, definition: dict) -> bool:
        """Reference the configured subtypes, or generate the object definition if there are none."""
        subtypes = self.config.resolve_subtypes(scope.type, self)
        if not subtypes:
            self._generate_object_definition(scope, definition)
            return False
        # one subtype still gets a wrapper, to not share the node with the supertype's definition
        tag = SchemaKeyword.TAG_ALLOF if len(subtypes) == 1 else SchemaKeyword.TAG_ANYOF
        alternatives: list[dict] = []
        definition[self.keyword(tag)] = alternatives
        for subtype in subtypes:
            node: dict = {}
            alternatives.append(node)
            self._traverse(self.type_context.create_type_scope(subtype), node, False, False, None)
        return True

    def _generate_array_definition(self, scope: TypeScope, definition: dict, nullable: bool) -> None:
        if nullable:
            definition[self.keyword(SchemaKeyword.TAG_TYPE)] = [SchemaType.ARRAY.value, SchemaType.NULL.value]
        else:
            definition[self.keyword(SchemaKeyword.TAG_TYPE)] = SchemaType.ARRAY.value
        if isinstance(scope, MemberDescriptor) and not scope.is_container_item:
            definition[self.keyword(SchemaKeyword.TAG_ITEMS)] = self._populate_member_schema(scope.as_container_item())
        else:
            items: dict = {}
            definition[self.keyword(SchemaKeyword.TAG_ITEMS)] = items
            self._traverse(self.type_context.create_type_scope(scope.container_item_type), items, False, False, None)

    def _generate_object_definition(self, scope: TypeScope, definition: dict) -> None:
        definition[self.keyword(SchemaKeyword.TAG_TYPE)] = SchemaType.OBJECT.value
        logger.debug("collecting fields and accessors of %s", scope.type)
        members, required = MemberCollector(self.config).collect(scope)
        if not members:
            return
        properties = {}
        dependent_required = {}
        for member in members:
            properties[member.schema_name] = self._populate_member_schema(member)
            dependents = self.config.dependent_required(member)
            if dependents:
                dependent_required[member.schema_name] = dependents
        definition[self.keyword(SchemaKeyword.TAG_PROPERTIES)] = properties
        required_names = [member.schema_name for member in members if member.schema_name in required]
        if required_names:
            definition[self.keyword(SchemaKeyword.TAG_REQUIRED)] = required_names
        if dependent_required:
            definition[self.keyword(SchemaKeyword.TAG_DEPENDENT_REQUIRED)] = dependent_required

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _populate_member_schema(self, member: MemberDescriptor):
        """Create the schema of a property (or of a container member's items)."""
        is_void = member.is_method and member.is_void
        overrides = self.config.resolve_target_type_overrides(member)
        if overrides is None and not is_void:
            overrides = self.config.resolve_subtypes(member.type, self)
        options = [member.with_overridden_type(target) for target in overrides] if overrides else [member]
        # nullability is decided on the declared type, not on the overrides
        nullable = is_void or self.config.is_nullable(member)
        if len(options) == 1:
            return self._create_member_schema(options[0], nullable)
        alternatives = []
        if nullable:
            alternatives.append({self.keyword(SchemaKeyword.TAG_TYPE): SchemaType.NULL.value})
        alternatives.extend(self._create_member_schema(option, False) for option in options)
        return {self.keyword(SchemaKeyword.TAG_ANYOF): alternatives}

    def _create_member_schema(
        self,
        member: MemberDescriptor,
        nullable: bool,
        force_inline: bool = False,
        ignored_provider=None,
    ):
        if member.is_method and member.is_void:
            return False
        node: dict = {}
        attributes = AttributeCollector(self).collect_member_attributes(member)
        self._populate_member_node(member, node, nullable, force_inline, attributes, ignored_provider)
        return node

    def _populate_member_node(
        self,
        member: MemberDescriptor,
        target: dict,
        nullable: bool,
        force_inline: bool,
        attributes: dict,
        ignored_provider,
    ) -> None:
        custom = self.config.get_member_custom_definition(member, self, ignored_provider)
        if custom is not None:
            # member specific definitions are always applied inline
            target.update(custom.value)
            if custom.includes_attributes:
                merge_missing_attributes(target, attributes)
                type_attributes = AttributeCollector(self).collect_type_attributes(member, self._allowed_types(target))
                merge_missing_attributes(target, type_attributes)
            if nullable:
                self.make_nullable(target)
            return

        if not attributes:
            container = target
        elif member.is_container:
            # attributes of container members apply to the array itself
            container = target
            merge_missing_attributes(target, attributes)
        else:
            # keep the member's attributes apart from a potential "$ref"
            container = {}
            target[self.keyword(SchemaKeyword.TAG_ALLOF)] = [container, attributes]
        try:
            self._traverse(member, container, nullable, force_inline, None)
        except UnsupportedTypeError:
            logger.warning("Skipping type definition due to error", exc_info=True)

    # ------------------------------------------------------------------
    # Nullability
    # ------------------------------------------------------------------

    def make_nullable(self, node: dict) -> dict:
        """Allow `null` in addition to what the given node allows (in place)."""
        return make_nullable(node, self.config)


def make_nullable(node: dict, config: SchemaGeneratorConfig) -> dict:
    """
    Allow `null` in addition to what the given node allows (in place).

    Simple schemas get "null" added to their `type`. Schemas holding a
    reference, a composition or fixed values are wrapped into an `anyOf`
    with a separate null option instead.

    Args:
        node: The schema node to adjust
        config: Configuration providing the keywords and options

    Returns:
        The same node
    """
    null_type = SchemaType.NULL.value
    type_tag = config.keyword(SchemaKeyword.TAG_TYPE)
    any_of_tag = config.keyword(SchemaKeyword.TAG_ANYOF)
    null_schema = {type_tag: null_type}
    if list(node) == [any_of_tag] and null_schema in node[any_of_tag]:
        return node
    if node == null_schema:
        return node
    if _allows_null_value(node, config):
        return node
    if config.is_enabled(Option.NULLABLE_ALWAYS_AS_ANYOF) or any(
        config.keyword(keyword) in node for keyword in _WRAPPED_WHEN_NULLABLE
    ):
        original = dict(node)
        node.clear()
        node[any_of_tag] = [null_schema, original]
        return node
    declared = node.get(type_tag)
    if isinstance(declared, list):
        if null_type not in declared:
            node[type_tag] = [*declared, null_type]
    elif isinstance(declared, str) and declared != null_type:
        node[type_tag] = [declared, null_type]
    # without "type", null is allowed already
    return node


def _allows_null_value(node: dict, config: SchemaGeneratorConfig) -> bool:
    """Whether both the `type` and the fixed values of a plain node already include null."""
    composition = (SchemaKeyword.TAG_REF, SchemaKeyword.TAG_ALLOF, SchemaKeyword.TAG_ANYOF, SchemaKeyword.TAG_ONEOF)
    if any(config.keyword(keyword) in node for keyword in composition):
        return False
    declared = node.get(config.keyword(SchemaKeyword.TAG_TYPE))
    null_type = SchemaType.NULL.value
    if declared != null_type and not (isinstance(declared, list) and null_type in declared):
        return False
    const_tag = config.keyword(SchemaKeyword.TAG_CONST)
    enum_tag = config.keyword(SchemaKeyword.TAG_ENUM)
    if const_tag in node:
        return node[const_tag] is None
    if enum_tag in node:
        return any(value is None for value in node[enum_tag])
    return False
