import copy
import json
from pathlib import Path
from unittest import TestCase

from types_to_json_schema.cleanup import SchemaCleanUp
from types_to_json_schema.config import SchemaGeneratorConfigBuilder
from types_to_json_schema.options import PLAIN_JSON, Option
from types_to_json_schema.utils import json_equal, unique_in_order


def clean_up_for(version="2020-12", *options):
    builder = SchemaGeneratorConfigBuilder(version, PLAIN_JSON).with_option(*options)
    return SchemaCleanUp(builder.build())


class TestCleanUpCases(TestCase):
    """allOf and anyOf reduction, driven by test_data/cleanup_tests.json"""

    def setUp(self):
        self.test_data_path = Path(__file__).parent / "test_data" / "cleanup_tests.json"
        with open(self.test_data_path) as f:
            self.test_cases = json.load(f)

    def test_cases(self):
        for test_case in self.test_cases:
            with self.subTest(test_case["name"]):
                node = copy.deepcopy(test_case["input"])
                clean_up = clean_up_for(test_case["version"])
                if test_case["step"] == "all_of":
                    clean_up.reduce_all_of_nodes([node])
                else:
                    clean_up.reduce_any_of_nodes([node])
                self.assertEqual(node, test_case["expected"])


class TestAllOfReduction(TestCase):
    def test_shared_node_is_reduced_once(self):
        shared = {"allOf": [{"type": "string"}, {"minLength": 1}]}
        root = {"properties": {"a": shared, "b": shared}}
        clean_up_for().reduce_all_of_nodes([root])
        self.assertEqual(root["properties"]["a"], {"type": "string", "minLength": 1})
        self.assertIs(root["properties"]["a"], root["properties"]["b"])

    def test_cyclic_structures_terminate(self):
        node = {"type": "object", "properties": {}}
        node["properties"]["self"] = node
        clean_up_for().reduce_all_of_nodes([node])
        self.assertIs(node["properties"]["self"], node)


class TestRedundantMemberAttributes(TestCase):
    def test_attributes_repeated_from_definition_are_dropped(self):
        definitions = {"A": {"type": "object", "title": "A"}}
        root = {"properties": {"a": {"$ref": "#/$defs/A", "title": "A", "description": "x"}}}
        clean_up_for().reduce_redundant_member_attributes([root], definitions, "#/$defs/")
        self.assertEqual(root["properties"]["a"], {"$ref": "#/$defs/A", "description": "x"})

    def test_differing_conditionals_are_kept(self):
        definitions = {"A": {"if": {"type": "string"}, "then": {"minLength": 1}}}
        member = {"$ref": "#/$defs/A", "if": {"type": "string"}, "then": {"minLength": 2}}
        root = {"properties": {"a": member}}
        clean_up_for().reduce_redundant_member_attributes([root], definitions, "#/$defs/")
        self.assertEqual(member["if"], {"type": "string"})
        self.assertEqual(member["then"], {"minLength": 2})

    def test_unknown_reference_is_ignored(self):
        root = {"properties": {"a": {"$ref": "#/$defs/B", "title": "A"}}}
        clean_up_for().reduce_redundant_member_attributes([root], {"A": {"title": "A"}}, "#/$defs/")
        self.assertEqual(root["properties"]["a"], {"$ref": "#/$defs/B", "title": "A"})

    def test_boolean_attribute_is_not_taken_for_number(self):
        definitions = {"A": {"default": 1, "const": 0}}
        member = {"$ref": "#/$defs/A", "default": True, "const": False}
        clean_up_for().reduce_redundant_member_attributes([{"properties": {"a": member}}], definitions, "#/$defs/")
        self.assertIs(member["default"], True)
        self.assertIs(member["const"], False)


class TestJsonEquality(TestCase):
    def test_booleans_differ_from_numbers(self):
        self.assertFalse(json_equal(True, 1))
        self.assertFalse(json_equal(0, False))
        self.assertFalse(json_equal([1, {"a": 0}], [True, {"a": False}]))
        self.assertTrue(json_equal(1, 1.0))
        self.assertTrue(json_equal({"a": [None, "x"]}, {"a": [None, "x"]}))

    def test_unique_values_keep_booleans(self):
        values = unique_in_order([1, True, 0, False, 1.0, "a", "a"])
        self.assertEqual([type(value) for value in values], [int, bool, int, bool, str])


class TestStrictTypeInfo(TestCase):
    def test_implied_type_is_added_with_null(self):
        node = {"minLength": 1}
        clean_up_for().set_strict_type_info([node])
        self.assertEqual(node, {"minLength": 1, "type": ["string", "null"]})

    def test_implied_type_without_null(self):
        node = {"minLength": 1}
        clean_up_for().set_strict_type_info([node], consider_null_type=False)
        self.assertEqual(node, {"minLength": 1, "type": "string"})

    def test_several_implied_types_follow_type_order(self):
        node = {"minimum": 1, "properties": {}}
        clean_up_for().set_strict_type_info([node], consider_null_type=False)
        self.assertEqual(node["type"], ["object", "integer", "number"])

    def test_declared_type_is_kept(self):
        node = {"type": "integer", "minLength": 1}
        clean_up_for().set_strict_type_info([node])
        self.assertEqual(node, {"type": "integer", "minLength": 1})

    def test_nodes_without_implying_keywords_are_kept(self):
        node = {"title": "t"}
        clean_up_for().set_strict_type_info([node])
        self.assertEqual(node, {"title": "t"})

    def test_null_as_separate_option(self):
        node = {"minLength": 1}
        clean_up_for("2020-12", Option.NULLABLE_ALWAYS_AS_ANYOF).set_strict_type_info([node])
        self.assertEqual(node, {"anyOf": [{"type": "null"}, {"minLength": 1, "type": "string"}]})
