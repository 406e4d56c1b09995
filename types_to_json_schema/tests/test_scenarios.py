import unittest
from dataclasses import dataclass
from typing import Annotated, Literal, Optional
from unittest import TestCase

from types_to_json_schema.cleanup import SchemaCleanUp
from types_to_json_schema.config import SchemaGeneratorConfigBuilder
from types_to_json_schema.context import GenerationContext, make_nullable
from types_to_json_schema.definitions import DefinitionKey
from types_to_json_schema.descriptors import TypeDescriptor
from types_to_json_schema.generator import SchemaGenerator
from types_to_json_schema.markers import MaxLength, MinLength
from types_to_json_schema.members import MemberCollector
from types_to_json_schema.options import PLAIN_JSON, Option
from types_to_json_schema.type_context import TypeContext


@dataclass
class Empty:
    pass


@dataclass
class Person:
    name: Annotated[str, MinLength(2)]


@dataclass
class Node:
    value: str
    next: "Node | None" = None


@dataclass
class Shape:
    pass


@dataclass
class Circle(Shape):
    radius: float


@dataclass
class Square(Shape):
    side: float


@dataclass
class Triangle(Shape):
    base: float
    height: float


@dataclass
class Choice:
    mode: Optional[Literal["a", None]] = None


@dataclass
class Labelled:
    label: str


@dataclass
class ShortLabelled(Labelled):
    label: Annotated[str, MaxLength(5)]


def plain_config(*options, configure=None):
    """PLAIN_JSON configuration without "$schema", plus the given options"""
    builder = SchemaGeneratorConfigBuilder("2020-12", PLAIN_JSON)
    builder.without_option(Option.SCHEMA_VERSION_INDICATOR)
    builder.with_option(*options)
    if configure is not None:
        configure(builder)
    return builder.build()


def generate(target, *options, configure=None):
    return SchemaGenerator(plain_config(*options, configure=configure)).generate_schema(target)


def subtypes_of_shape(descriptor, context):
    if descriptor.origin is Shape:
        return [TypeDescriptor(Circle), TypeDescriptor(Square), TypeDescriptor(Triangle)]
    return None


class TestScenarios(TestCase):
    """End-to-end generation of representative schemas"""

    def test_type_without_members(self):
        self.assertEqual(generate(Empty), {"type": "object"})

    def test_required_string_with_min_length(self):
        expected = {
            "type": "object",
            "properties": {"name": {"type": "string", "minLength": 2}},
            "required": ["name"],
        }
        self.assertEqual(generate(Person), expected)

    def test_self_reference_through_nullable_member(self):
        schema = generate(Node, Option.DEFINITION_FOR_MAIN_SCHEMA)

        self.assertEqual(schema["$ref"], "#/$defs/Node")
        self.assertEqual(list(schema["$defs"]), ["Node"])
        node = schema["$defs"]["Node"]
        self.assertEqual(node["properties"]["next"], {"anyOf": [{"type": "null"}, {"$ref": "#/$defs/Node"}]})
        self.assertEqual(node["properties"]["value"], {"type": "string"})
        self.assertEqual(node["required"], ["value"])

    def test_self_reference_of_main_schema_points_to_root(self):
        schema = generate(Node)

        self.assertNotIn("$defs", schema)
        self.assertEqual(schema["properties"]["next"], {"anyOf": [{"type": "null"}, {"$ref": "#"}]})

    def test_three_subtypes_become_any_of(self):
        schema = generate(
            Shape,
            Option.DEFINITIONS_FOR_ALL_OBJECTS,
            configure=lambda builder: builder.for_types().with_subtype_resolver(subtypes_of_shape),
        )

        self.assertEqual(
            schema["anyOf"],
            [{"$ref": "#/$defs/Circle"}, {"$ref": "#/$defs/Square"}, {"$ref": "#/$defs/Triangle"}],
        )
        self.assertNotIn("type", schema)
        self.assertEqual(set(schema["$defs"]), {"Circle", "Square", "Triangle"})
        self.assertEqual(schema["$defs"]["Circle"]["properties"], {"radius": {"type": "number"}})

    def test_all_of_without_conflicts_collapses(self):
        node = {"allOf": [{"title": "t"}, {"type": "string"}]}
        SchemaCleanUp(plain_config()).reduce_all_of_nodes([node])
        self.assertEqual(node, {"title": "t", "type": "string"})

    def test_nested_any_of_is_flattened(self):
        node = {"anyOf": [{"type": "string"}, {"anyOf": [{"type": "number"}, {"type": "boolean"}]}]}
        SchemaCleanUp(plain_config()).reduce_any_of_nodes([node])
        self.assertEqual(node, {"anyOf": [{"type": "string"}, {"type": "number"}, {"type": "boolean"}]})


class TestProperties(TestCase):
    """General guarantees of the generation"""

    def test_repeated_traversal_adds_references_only(self):
        context = GenerationContext(plain_config(), TypeContext())
        first = context.create_definition_reference(TypeDescriptor(Person))
        second = context.create_definition_reference(TypeDescriptor(Person))

        key = DefinitionKey(TypeDescriptor(Person))
        self.assertEqual(context.defined_keys(), [key])
        self.assertEqual(len(context.references(key)), 2)
        self.assertIs(context.references(key)[0], first)
        self.assertIs(context.references(key)[1], second)

    def test_cycle_terminates_with_one_definition(self):
        context = GenerationContext(plain_config(), TypeContext())
        key = context.parse_type(TypeDescriptor(Node))

        self.assertEqual(context.defined_keys(), [key])
        self.assertEqual(len(context.nullable_references(key)), 1)

    def test_subtype_member_overrides_supertype_member(self):
        config = plain_config()
        scope = TypeContext().create_type_scope(TypeDescriptor(ShortLabelled))
        members, required = MemberCollector(config).collect(scope)

        self.assertEqual([member.schema_name for member in members], ["label"])
        self.assertIs(members[0].declaring_type.origin, ShortLabelled)
        self.assertEqual(required, {"label"})
        self.assertEqual(
            generate(ShortLabelled)["properties"]["label"],
            {"type": "string", "maxLength": 5},
        )

    def test_all_of_merge_keeps_single_keywords(self):
        node = {"allOf": [{"type": "string", "minLength": 1}, {"title": "t"}, {"pattern": "^a"}]}
        SchemaCleanUp(plain_config()).reduce_all_of_nodes([node])
        self.assertEqual(node, {"type": "string", "minLength": 1, "title": "t", "pattern": "^a"})

    def test_all_of_merge_never_keeps_conflicting_values(self):
        node = {"allOf": [{"type": "string", "format": "date"}, {"format": "time"}]}
        original = {"allOf": [{"type": "string", "format": "date"}, {"format": "time"}]}
        SchemaCleanUp(plain_config()).reduce_all_of_nodes([node])
        self.assertEqual(node, original)

    def test_nullable_twice_equals_nullable_once(self):
        config = plain_config()
        for original in ({"type": "string"}, {"$ref": "#/$defs/A"}, {"type": ["integer", "null"]}, {"const": 1}):
            once = make_nullable(dict(original), config)
            twice = make_nullable(make_nullable(dict(original), config), config)
            self.assertEqual(once, twice)

        self.assertEqual(make_nullable({"type": "string"}, config), {"type": ["string", "null"]})

    def test_nullable_fixed_values_including_null_stay_flat(self):
        config = plain_config()
        node = {"type": ["string", "null"], "enum": ["a", None]}
        self.assertEqual(make_nullable(dict(node), config), node)
        self.assertEqual(make_nullable({"type": "null", "const": None}, config), {"type": "null", "const": None})
        self.assertEqual(
            make_nullable({"type": "string", "enum": ["a"]}, config),
            {"anyOf": [{"type": "null"}, {"type": "string", "enum": ["a"]}]},
        )

    def test_optional_literal_with_none(self):
        self.assertEqual(generate(Choice)["properties"]["mode"], {"type": ["string", "null"], "enum": ["a", None]})


if __name__ == "__main__":
    unittest.main()
