import collections.abc
from dataclasses import dataclass
from typing import Annotated, Any, Callable, ClassVar, Generic, Literal, Optional, TypeVar, Union

import pytest

from types_to_json_schema.descriptors import NoneType, TypeDescriptor
from types_to_json_schema.errors import UnsupportedTypeError
from types_to_json_schema.markers import MinLength
from types_to_json_schema.type_context import TypeContext

T = TypeVar("T")
N = TypeVar("N", bound=int)

STR = TypeDescriptor(str)
INT = TypeDescriptor(int)


@dataclass
class Box(Generic[T]):
    content: T


@dataclass
class StringBox(Box[str]):
    label: str
    LIMIT: ClassVar[int] = 10

    @property
    def size(self) -> int:
        return len(self.content)


class TestResolve:
    """Turning annotations into descriptors"""

    def setup_method(self):
        self.context = TypeContext()

    def test_plain_class(self):
        assert self.context.resolve(str) == STR

    def test_generic_alias(self):
        assert self.context.resolve(list[int]) == TypeDescriptor(list, (INT,))
        assert self.context.resolve(dict[str, list[int]]) == TypeDescriptor(dict, (STR, TypeDescriptor(list, (INT,))))

    def test_descriptor_identity(self):
        assert self.context.resolve(list[int]) == self.context.resolve(list[int])
        assert self.context.resolve(list[int]) != self.context.resolve(list[str])
        assert hash(self.context.resolve(Box[str])) == hash(self.context.resolve(Box[str]))

    def test_any_and_object(self):
        assert self.context.resolve(Any).origin is Any
        assert self.context.resolve(object).origin is Any

    def test_optional_keeps_none_in_union(self):
        descriptor = self.context.resolve(Optional[int])
        assert descriptor.is_union
        assert descriptor.args == (INT, TypeDescriptor(NoneType))

    def test_nested_unions_are_flattened(self):
        descriptor = self.context.resolve(Union[int, Union[str, int]])
        assert descriptor.args == (INT, STR)
        assert self.context.resolve(int | str) == descriptor

    def test_literal(self):
        descriptor = self.context.resolve(Literal["a", 1])
        assert descriptor.is_literal
        assert descriptor.values == ("a", 1)

    def test_annotated_is_stripped(self):
        assert self.context.resolve(Annotated[str, MinLength(1)]) == STR

    def test_unparameterized_generic(self):
        assert self.context.resolve(Box) == TypeDescriptor(Box, (TypeDescriptor(Any),))

    def test_bound_type_variable(self):
        assert self.context.resolve(N) == INT
        assert self.context.resolve(T, {T: STR}) == STR

    def test_names(self):
        descriptor = self.context.resolve(Box[str])
        assert descriptor.simple_name == "Box[str]"
        assert descriptor.full_name == f"{__name__}.Box[builtins.str]"

    @pytest.mark.parametrize("annotation", [Callable[[int], int], "Forward", type[int]])
    def test_unsupported(self, annotation):
        with pytest.raises(UnsupportedTypeError):
            self.context.resolve(annotation)


class TestDescribe:
    def setup_method(self):
        self.context = TypeContext()

    def test_optional_is_nullable(self):
        described = self.context.describe(Optional[int])
        assert described.type == INT
        assert described.nullable

    def test_optional_union(self):
        described = self.context.describe(int | str | None)
        assert described.type == TypeDescriptor(Union, (INT, STR))
        assert described.nullable

    def test_annotated_metadata(self):
        described = self.context.describe(Annotated[str | None, MinLength(2)])
        assert described.type == STR
        assert described.nullable
        assert described.metadata == (MinLength(2),)

    def test_class_variable(self):
        described = self.context.describe(ClassVar[int])
        assert described.type == INT
        assert described.is_class_variable


class TestClassification:
    def setup_method(self):
        self.context = TypeContext()

    @pytest.mark.parametrize(
        "annotation", [list[int], set[str], frozenset[int], tuple[int, ...], collections.abc.Sequence[str], list]
    )
    def test_containers(self, annotation):
        assert self.context.is_container(self.context.resolve(annotation))

    @pytest.mark.parametrize("annotation", [tuple[int, str], dict[str, int], str, Box[int]])
    def test_not_containers(self, annotation):
        assert not self.context.is_container(self.context.resolve(annotation))

    def test_container_item_type(self):
        assert self.context.container_item_type(self.context.resolve(tuple[int, ...])) == INT
        assert self.context.container_item_type(self.context.resolve(list)).origin is Any
        assert self.context.container_item_type(STR) is None

    def test_mappings(self):
        descriptor = self.context.resolve(dict[str, int])
        assert self.context.is_mapping(descriptor)
        assert self.context.mapping_value_type(descriptor) == INT
        assert not self.context.is_mapping(self.context.resolve(list[int]))


class TestHierarchy:
    def test_levels_follow_mro(self):
        levels = TypeContext().hierarchy(TypeDescriptor(StringBox))
        assert [level.type for level in levels] == [TypeDescriptor(StringBox), TypeDescriptor(Box, (STR,))]

    def test_inherited_type_variables_are_bound(self):
        levels = TypeContext().hierarchy(TypeDescriptor(StringBox))
        content = levels[1].fields[0]
        assert content.declared_name == "content"
        assert content.type == STR
        assert content.declaring_type == TypeDescriptor(Box, (STR,))

    def test_member_kinds(self):
        level = TypeContext().hierarchy(TypeDescriptor(StringBox))[0]
        assert [member.declared_name for member in level.fields] == ["label"]
        assert [member.declared_name for member in level.static_fields] == ["LIMIT"]
        assert level.static_fields[0].raw == 10
        assert [member.declared_name for member in level.methods] == ["size"]
        assert level.methods[0].type == INT

    def test_results_are_cached(self):
        context = TypeContext()
        assert context.hierarchy(TypeDescriptor(StringBox)) is context.hierarchy(TypeDescriptor(StringBox))

    def test_renaming_returns_new_descriptor(self):
        member = TypeContext().hierarchy(TypeDescriptor(StringBox))[0].fields[0]
        renamed = member.with_overridden_name("title")
        retyped = member.with_overridden_type(INT)
        assert member.schema_name == "label"
        assert renamed.schema_name == "title"
        assert retyped.type == INT
        assert retyped.declared_type == STR
        assert member.type == STR
