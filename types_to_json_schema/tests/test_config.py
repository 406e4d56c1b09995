import unittest
from unittest import TestCase

from types_to_json_schema.config import GeneratorSettings, SchemaGeneratorConfigBuilder
from types_to_json_schema.keywords import SchemaKeyword, SchemaVersion
from types_to_json_schema.naming import TemplateDefinitionNamingStrategy
from types_to_json_schema.options import FULL_DOCUMENTATION, PLAIN_JSON, PYTHON_OBJECT, Option, OptionPreset


class TestOptions(TestCase):
    def test_parse(self):
        self.assertIs(Option.parse("strict_type_info"), Option.STRICT_TYPE_INFO)
        self.assertIs(Option.parse("Strict-Type-Info"), Option.STRICT_TYPE_INFO)
        with self.assertRaises(ValueError):
            Option.parse("bogus")

    def test_presets_by_name(self):
        self.assertIs(OptionPreset.by_name("plain_json"), PLAIN_JSON)
        self.assertIs(OptionPreset.by_name("PYTHON_OBJECT"), PYTHON_OBJECT)
        with self.assertRaises(ValueError):
            OptionPreset.by_name("everything")

    def test_preset_defaults(self):
        enabled = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, PLAIN_JSON).enabled_options()
        self.assertEqual(
            enabled,
            {
                Option.SCHEMA_VERSION_INDICATOR,
                Option.ADDITIONAL_FIXED_TYPES,
                Option.FLATTENED_ENUMS,
                Option.VALUES_FROM_CONSTANT_FIELDS,
                Option.ALLOF_CLEANUP_AT_THE_END,
            },
        )

    def test_explicit_settings_win_over_preset(self):
        builder = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, FULL_DOCUMENTATION)
        builder.without_option(Option.STATIC_FIELDS).with_option(Option.STRICT_TYPE_INFO)
        enabled = builder.enabled_options()
        self.assertNotIn(Option.STATIC_FIELDS, enabled)
        self.assertIn(Option.STRICT_TYPE_INFO, enabled)
        self.assertIs(builder.get_setting(Option.STATIC_FIELDS), False)
        self.assertIsNone(builder.get_setting(Option.PRIVATE_FIELDS))

    def test_enum_values_override_enum_names(self):
        builder = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, PLAIN_JSON)
        builder.with_option(Option.FLATTENED_ENUMS_FROM_VALUES)
        enabled = builder.enabled_options()
        self.assertIn(Option.FLATTENED_ENUMS_FROM_VALUES, enabled)
        self.assertNotIn(Option.FLATTENED_ENUMS, enabled)

    def test_inline_all_overrides_definitions(self):
        builder = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, FULL_DOCUMENTATION)
        builder.with_option(Option.INLINE_ALL_SCHEMAS, Option.DEFINITION_FOR_MAIN_SCHEMA)
        config = builder.build()
        self.assertTrue(config.is_enabled(Option.INLINE_ALL_SCHEMAS))
        self.assertFalse(config.is_enabled(Option.DEFINITIONS_FOR_ALL_OBJECTS))
        self.assertFalse(config.is_enabled(Option.DEFINITION_FOR_MAIN_SCHEMA))

    def test_build_leaves_builder_untouched(self):
        builder = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, PLAIN_JSON)
        builder.build()
        self.assertEqual(builder.for_types().custom_definition_providers, [])
        self.assertEqual(builder.for_fields().ignore_checks, [])


class TestResolverRegistration(TestCase):
    def setUp(self):
        self.builder = SchemaGeneratorConfigBuilder(SchemaVersion.DRAFT_2020_12, PLAIN_JSON)

    def test_non_callables_are_rejected(self):
        with self.assertRaises(TypeError):
            self.builder.for_types().with_custom_definition_provider("not callable")
        with self.assertRaises(TypeError):
            self.builder.for_fields().with_required_check(None)
        with self.assertRaises(TypeError):
            self.builder.with_member_order(42)
        with self.assertRaises(TypeError):
            self.builder.with_definition_naming_strategy(lambda key, context: "name")
        with self.assertRaises(TypeError):
            self.builder.with_module(object())

    def test_type_only_keywords_are_rejected_for_members(self):
        self.builder.for_types().with_attribute_resolver(SchemaKeyword.TAG_ID, lambda scope, context: None)
        with self.assertRaises(ValueError):
            self.builder.for_fields().with_attribute_resolver(SchemaKeyword.TAG_ID, lambda member, context: None)
        with self.assertRaises(ValueError):
            self.builder.for_types().with_attribute_resolver(SchemaKeyword.TAG_PROPERTIES, lambda scope, context: None)


class TestKeywords(TestCase):
    def test_tags_per_version(self):
        self.assertEqual(SchemaKeyword.TAG_DEFINITIONS.for_version(SchemaVersion.DRAFT_7), "definitions")
        self.assertEqual(SchemaKeyword.TAG_DEFINITIONS.for_version(SchemaVersion.DRAFT_2019_09), "$defs")
        self.assertEqual(SchemaKeyword.TAG_PREFIX_ITEMS.for_version(SchemaVersion.DRAFT_6), "items")
        self.assertEqual(SchemaKeyword.TAG_PREFIX_ITEMS.for_version(SchemaVersion.DRAFT_2020_12), "prefixItems")
        self.assertEqual(SchemaKeyword.TAG_DEPENDENT_REQUIRED.for_version(SchemaVersion.DRAFT_7), "dependencies")

    def test_reverse_tag_map_prefers_first_declared(self):
        legacy = SchemaKeyword.reverse_tag_map(SchemaVersion.DRAFT_7)
        self.assertIs(legacy["items"], SchemaKeyword.TAG_ITEMS)
        self.assertIs(legacy["dependencies"], SchemaKeyword.TAG_DEPENDENT_SCHEMAS)
        self.assertNotIn("$defs", legacy)

        current = SchemaKeyword.reverse_tag_map(SchemaVersion.DRAFT_2020_12)
        self.assertIs(current["prefixItems"], SchemaKeyword.TAG_PREFIX_ITEMS)
        self.assertIs(current["dependentRequired"], SchemaKeyword.TAG_DEPENDENT_REQUIRED)

    def test_reverse_tag_map_with_predicate(self):
        string_keywords = SchemaKeyword.reverse_tag_map(
            SchemaVersion.DRAFT_2020_12, lambda keyword: "string" in keyword.implied_types
        )
        self.assertEqual(set(string_keywords), {"minLength", "maxLength", "format", "pattern"})

    def test_identifiers(self):
        self.assertTrue(SchemaVersion.DRAFT_6.is_legacy)
        self.assertFalse(SchemaVersion.DRAFT_2019_09.is_legacy)
        self.assertEqual(SchemaVersion.DRAFT_2020_12.identifier, "https://json-schema.org/draft/2020-12/schema")


class TestGeneratorSettings(TestCase):
    def test_defaults(self):
        settings = GeneratorSettings()
        self.assertEqual(settings.version, SchemaVersion.DRAFT_2020_12)
        self.assertEqual(settings.preset, "full_documentation")
        self.assertEqual(settings.indent, 2)

    def test_round_trip(self):
        data = {
            "schema_version": "draft-07",
            "preset": "python_object",
            "with_options": ["strict_type_info"],
            "without_options": ["static_fields"],
            "definition_name_template": "{{ name }}",
            "indent": 4,
            "add_generation_comment": True,
        }
        self.assertEqual(GeneratorSettings.from_dict(data).to_dict(), data)

    def test_invalid_settings(self):
        for data in (
            {"colour": "blue"},
            {"schema_version": "draft-03"},
            {"preset": "everything"},
            {"with_options": ["bogus"]},
        ):
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    GeneratorSettings.from_dict(data)

    def test_to_config_builder(self):
        settings = GeneratorSettings.from_dict(
            {
                "schema_version": "draft-07",
                "preset": "plain_json",
                "with_options": ["plain_definition_keys"],
                "without_options": ["schema_version_indicator"],
                "definition_name_template": "{{ name | pascal_case }}",
            }
        )
        builder = settings.to_config_builder()
        self.assertEqual(builder.schema_version, SchemaVersion.DRAFT_7)
        self.assertIs(builder.preset, PLAIN_JSON)
        config = builder.build()
        self.assertTrue(config.is_enabled(Option.PLAIN_DEFINITION_KEYS))
        self.assertFalse(config.is_enabled(Option.SCHEMA_VERSION_INDICATOR))
        self.assertIsInstance(config.naming_strategy.strategy, TemplateDefinitionNamingStrategy)


if __name__ == "__main__":
    unittest.main()
