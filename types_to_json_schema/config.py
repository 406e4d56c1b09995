"""
Configuration for the schema generator.

Declarative settings (as loaded from a JSON file) are turned into a
SchemaGeneratorConfigBuilder, which collects options, modules and resolvers
and finally produces the immutable SchemaGeneratorConfig used during
generation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from .config_parts import MemberConfigPart, TypeConfigPart
from .definitions import CustomDefinition
from .descriptors import MemberDescriptor, TypeDescriptor, TypeScope
from .keywords import SchemaKeyword, SchemaVersion
from .naming import (
    CleanDefinitionNamingStrategy,
    DefaultDefinitionNamingStrategy,
    DefinitionNamingStrategy,
    TemplateDefinitionNamingStrategy,
    ensure_plain,
    ensure_uri_compatible,
)
from .options import FULL_DOCUMENTATION, Option, OptionPreset

if TYPE_CHECKING:
    from .modules import Module

logger = logging.getLogger(__name__)


def default_member_order(member: MemberDescriptor) -> tuple:
    """Fields before accessors, then alphabetically by schema name."""
    return (0 if member.is_field else 1, member.schema_name)


@dataclass
class GeneratorSettings:
    """Declarative generator settings, e.g. loaded from a JSON file."""

    # Targeted JSON Schema draft ("draft-06", "draft-07", "2019-09", "2020-12")
    schema_version: str = SchemaVersion.DRAFT_2020_12.value

    # Name of the option preset providing the default options
    preset: str = FULL_DOCUMENTATION.name

    # Options to enable on top of the preset
    with_options: list[str] = field(default_factory=list)

    # Options to disable even if the preset enables them
    without_options: list[str] = field(default_factory=list)

    # Jinja2 template for definition names (None = simple type description)
    definition_name_template: str | None = None

    # Indentation of the written JSON document
    indent: int = 2

    # Add a "$comment" holding the generating command line
    add_generation_comment: bool = False

    @staticmethod
    def from_dict(d: dict) -> GeneratorSettings:
        """
        Create settings from a dictionary.

        Raises:
            ValueError: If a key, draft, preset or option name is unknown
        """
        settings = GeneratorSettings()
        for k, v in d.items():
            if not hasattr(settings, k):
                raise ValueError(f"Unknown setting: {k}")
            setattr(settings, k, v)
        settings.validate()
        return settings

    def to_dict(self) -> dict:
        """Convert settings to a dictionary."""
        return {
            "schema_version": self.schema_version,
            "preset": self.preset,
            "with_options": list(self.with_options),
            "without_options": list(self.without_options),
            "definition_name_template": self.definition_name_template,
            "indent": self.indent,
            "add_generation_comment": self.add_generation_comment,
        }

    def validate(self) -> None:
        """Raise ValueError for an unknown draft, preset or option name."""
        _ = self.version
        OptionPreset.by_name(self.preset)
        for name in [*self.with_options, *self.without_options]:
            Option.parse(name)

    @property
    def version(self) -> SchemaVersion:
        try:
            return SchemaVersion(self.schema_version)
        except ValueError as e:
            raise ValueError(f"Unknown schema version: {self.schema_version}") from e

    def to_config_builder(self) -> SchemaGeneratorConfigBuilder:
        """Create a builder reflecting these settings."""
        builder = SchemaGeneratorConfigBuilder(self.version, OptionPreset.by_name(self.preset))
        builder.with_option(*(Option.parse(name) for name in self.with_options))
        builder.without_option(*(Option.parse(name) for name in self.without_options))
        if self.definition_name_template:
            builder.with_definition_naming_strategy(TemplateDefinitionNamingStrategy(self.definition_name_template))
        return builder


class SchemaGeneratorConfigBuilder:
    """Collects options, modules and resolvers for a SchemaGeneratorConfig.

    Example:
        builder = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, PLAIN_JSON)
        builder.with_option(Option.DEFINITIONS_FOR_ALL_OBJECTS)
        builder.for_fields().with_description_resolver(lambda member, context: ...)
        config = builder.build()
    """

    def __init__(
        self,
        schema_version: SchemaVersion | str = SchemaVersion.DRAFT_2020_12,
        preset: OptionPreset | str = FULL_DOCUMENTATION,
    ):
        self.schema_version = SchemaVersion(schema_version)
        self.preset = preset if isinstance(preset, OptionPreset) else OptionPreset.by_name(preset)
        self._options: dict[Option, bool] = {}
        self._types = TypeConfigPart()
        self._fields = MemberConfigPart()
        self._methods = MemberConfigPart()
        self._naming_strategy: DefinitionNamingStrategy | None = None
        self._member_order: Callable[[MemberDescriptor], Any] = default_member_order

    def with_option(self, *options: Option) -> SchemaGeneratorConfigBuilder:
        for option in options:
            self._options[Option(option)] = True
        return self

    def without_option(self, *options: Option) -> SchemaGeneratorConfigBuilder:
        for option in options:
            self._options[Option(option)] = False
        return self

    def get_setting(self, option: Option) -> bool | None:
        """Explicitly configured flag for the option, or None if left to the preset."""
        return self._options.get(option)

    def with_module(self, module: Module) -> SchemaGeneratorConfigBuilder:
        """Apply a module's registrations to this builder right away."""
        if not hasattr(module, "apply_to_config_builder"):
            raise TypeError(f"Expected a module, got {type(module).__name__}")
        module.apply_to_config_builder(self)
        return self

    def for_types(self) -> TypeConfigPart:
        return self._types

    def for_fields(self) -> MemberConfigPart:
        return self._fields

    def for_methods(self) -> MemberConfigPart:
        return self._methods

    def with_definition_naming_strategy(self, strategy: DefinitionNamingStrategy) -> SchemaGeneratorConfigBuilder:
        if not isinstance(strategy, DefinitionNamingStrategy):
            raise TypeError(f"Expected a DefinitionNamingStrategy, got {type(strategy).__name__}")
        self._naming_strategy = strategy
        return self

    def with_member_order(self, key: Callable[[MemberDescriptor], Any]) -> SchemaGeneratorConfigBuilder:
        """Set the sort key for the properties of an object."""
        if not callable(key):
            raise TypeError(f"Expected a callable, got {type(key).__name__}")
        self._member_order = key
        return self

    def enabled_options(self) -> set[Option]:
        """Options in effect, after dropping those overridden by other enabled ones."""
        enabled = {option for option in Option if self._options.get(option, self.preset.is_enabled_by_default(option))}
        overridden = set().union(*(option.overridden_options for option in enabled))
        return enabled - overridden

    def build(self) -> SchemaGeneratorConfig:
        """
        Create the configuration.

        The built-in modules (typing constructs, markers, dataclass fields and
        the ones associated with the enabled options) are applied to copies of
        the registered parts, after everything registered explicitly. The
        builder itself stays untouched, so it can be built again.

        Returns:
            The configuration to pass to a SchemaGenerator
        """
        from .modules import core_modules, option_modules

        enabled = self.enabled_options()
        staged = SchemaGeneratorConfigBuilder(self.schema_version, self.preset)
        staged._options = dict(self._options)
        staged._types = self._types.copy()
        staged._fields = self._fields.copy()
        staged._methods = self._methods.copy()
        for module in [*core_modules(), *option_modules(enabled)]:
            module.apply_to_config_builder(staged)

        naming = self._naming_strategy or DefaultDefinitionNamingStrategy()
        clean_up = ensure_plain if Option.PLAIN_DEFINITION_KEYS in enabled else ensure_uri_compatible
        logger.debug("enabled options: %s", ", ".join(sorted(option.value for option in enabled)))
        return SchemaGeneratorConfig(
            schema_version=self.schema_version,
            options=frozenset(enabled),
            types=staged._types,
            fields=staged._fields,
            methods=staged._methods,
            naming_strategy=CleanDefinitionNamingStrategy(naming, clean_up),
            member_order=self._member_order,
        )


class SchemaGeneratorConfig:
    """Read-only view of the configuration, queried during generation."""

    def __init__(
        self,
        schema_version: SchemaVersion,
        options: frozenset[Option],
        types: TypeConfigPart,
        fields: MemberConfigPart,
        methods: MemberConfigPart,
        naming_strategy: DefinitionNamingStrategy,
        member_order: Callable[[MemberDescriptor], Any] = default_member_order,
    ):
        self.schema_version = schema_version
        self.options = options
        self.types = types
        self.fields = fields
        self.methods = methods
        self.naming_strategy = naming_strategy
        self.member_order = member_order

    def is_enabled(self, option: Option) -> bool:
        return option in self.options

    def keyword(self, keyword: SchemaKeyword) -> str:
        return keyword.for_version(self.schema_version)

    def _part(self, member: MemberDescriptor) -> MemberConfigPart:
        return self.fields if member.is_field else self.methods

    # ------------------------------------------------------------------
    # Custom definitions
    # ------------------------------------------------------------------

    def get_custom_definition(self, descriptor: TypeDescriptor, context, ignored_provider=None) -> CustomDefinition | None:
        """
        Ask the type providers for a custom definition.

        The lookup starts right after the ignored provider. It starts at the
        head if there is none, or if the ignored provider is not a type
        provider (i.e. a member provider asked for the type's definition).
        """
        providers = self.types.custom_definition_providers
        start = providers.index(ignored_provider) + 1 if ignored_provider in providers else 0
        for provider in providers[start:]:
            definition = provider(descriptor, context)
            if definition is not None:
                return definition
        return None

    def get_member_custom_definition(self, member: MemberDescriptor, context, ignored_provider=None) -> CustomDefinition | None:
        """Ask the member providers; None if the ignored provider is a type provider."""
        providers = self._part(member).custom_definition_providers
        if ignored_provider is None:
            start = 0
        elif ignored_provider in providers:
            start = providers.index(ignored_provider) + 1
        else:
            return None
        for provider in providers[start:]:
            definition = provider(member, context)
            if definition is not None:
                return definition
        return None

    def resolve_subtypes(self, descriptor: TypeDescriptor, context) -> list[TypeDescriptor]:
        return self.types.resolve_subtypes(descriptor, context)

    @property
    def type_attribute_overrides(self) -> list:
        return self.types.type_attribute_overrides

    def resolve_type_attribute(self, keyword: SchemaKeyword, scope: TypeScope, context) -> Any:
        return self.types.resolve_attribute(keyword, scope, context)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def should_ignore(self, member: MemberDescriptor) -> bool:
        return self._part(member).should_ignore(member)

    def is_required(self, member: MemberDescriptor) -> bool:
        return self._part(member).is_required(member)

    def is_read_only(self, member: MemberDescriptor) -> bool:
        return self._part(member).is_read_only(member)

    def is_write_only(self, member: MemberDescriptor) -> bool:
        return self._part(member).is_write_only(member)

    def is_nullable(self, member: MemberDescriptor) -> bool:
        """
        Decide whether a member (or container item) accepts null.

        Explicit nullable checks take precedence, then the annotation
        (Optional / `| None`), then the option-driven default. Container items
        only consult checks and defaults with NULLABLE_ARRAY_ITEMS_ALLOWED.
        """
        if member.is_container_item and not self.is_enabled(Option.NULLABLE_ARRAY_ITEMS_ALLOWED):
            return member.declared_nullable
        checked = self._part(member).is_nullable(member)
        if checked is not None:
            return bool(checked)
        if member.declared_nullable:
            return True
        if member.is_field:
            return self.is_enabled(Option.NULLABLE_FIELDS_BY_DEFAULT)
        return self.is_enabled(Option.NULLABLE_METHOD_RETURN_VALUES_BY_DEFAULT)

    def resolve_property_name_override(self, member: MemberDescriptor) -> str | None:
        return self._part(member).resolve_property_name_override(member)

    def resolve_target_type_overrides(self, member: MemberDescriptor) -> list[TypeDescriptor] | None:
        return self._part(member).resolve_target_type_overrides(member)

    def resolve_member_attribute(self, keyword: SchemaKeyword, member: MemberDescriptor, context) -> Any:
        return self._part(member).resolve_attribute(keyword, member, context)

    def instance_attribute_overrides(self, member: MemberDescriptor) -> list:
        return self._part(member).instance_attribute_overrides

    def dependent_required(self, member: MemberDescriptor) -> list[str]:
        return self._part(member).resolve_dependent_required(member)

    def sort_members(self, members: list[MemberDescriptor]) -> list[MemberDescriptor]:
        return sorted(members, key=self.member_order)

    def should_represent_single_value_as_const(self) -> bool:
        return not self.is_enabled(Option.ENUM_KEYWORD_FOR_SINGLE_VALUES)
