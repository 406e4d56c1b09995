"""
Descriptors for types and their members.

A TypeDescriptor is an immutable, hashable handle for a (possibly
parameterized) Python type. Scopes wrap a descriptor together with the
information about where it is being used: a plain type scope, or a member
(field or accessor) of a declaring type.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Literal, TypeVar, Union

if TYPE_CHECKING:
    from .type_context import TypeContext

NoneType = type(None)


@dataclass(frozen=True)
class TypeDescriptor:
    """A type together with its generic bindings.

    Two descriptors are equal iff they share the same origin, the same
    (recursively compared) type arguments and, for `Literal`, the same values.
    """

    # The runtime class, or a typing special form (Any, Union, Literal, a TypeVar)
    origin: Any

    # Bound type arguments, in declaration order
    args: tuple[TypeDescriptor, ...] = ()

    # Allowed values, only used for Literal
    values: tuple = ()

    @property
    def is_none(self) -> bool:
        return self.origin is NoneType

    @property
    def is_union(self) -> bool:
        return self.origin is Union

    @property
    def is_literal(self) -> bool:
        return self.origin is Literal

    @property
    def is_type_variable(self) -> bool:
        return isinstance(self.origin, TypeVar)

    @property
    def is_class(self) -> bool:
        return isinstance(self.origin, type)

    def is_subclass_of(self, base: type) -> bool:
        return self.is_class and issubclass(self.origin, base)

    @property
    def simple_name(self) -> str:
        """Short description, e.g. `Box[str]`."""
        return self._describe(qualified=False)

    @property
    def full_name(self) -> str:
        """Module-qualified description, e.g. `app.models.Box[builtins.str]`."""
        return self._describe(qualified=True)

    def _describe(self, qualified: bool) -> str:
        if self.is_literal:
            return "Literal[" + ", ".join(repr(value) for value in self.values) + "]"
        if self.is_none:
            base = "None"
        elif self.origin is Ellipsis:
            return "..."
        elif self.is_union:
            base = "Union"
        elif self.is_type_variable:
            base = self.origin.__name__
        elif hasattr(self.origin, "__qualname__"):
            base = self.origin.__qualname__ if qualified else self.origin.__name__
            if qualified and getattr(self.origin, "__module__", None):
                base = f"{self.origin.__module__}.{base}"
        else:
            # typing special forms such as Any
            base = getattr(self.origin, "_name", None) or str(self.origin)
        if not self.args:
            return base
        return base + "[" + ", ".join(arg._describe(qualified) for arg in self.args) + "]"

    def __str__(self) -> str:
        return self.simple_name


@dataclass(frozen=True, eq=False)
class TypeScope:
    """A type as seen at one particular position of the type graph."""

    type: TypeDescriptor
    type_context: TypeContext = field(repr=False)

    @property
    def is_container(self) -> bool:
        return self.type_context.is_container(self.type)

    @property
    def container_item_type(self) -> TypeDescriptor | None:
        """Element type if this is a container, otherwise None."""
        return self.type_context.container_item_type(self.type)


@dataclass(frozen=True, eq=False)
class MemberDescriptor(TypeScope):
    """A field or accessor of a declaring type.

    Renaming and retyping return new descriptors; the original stays untouched.
    """

    # Name as declared in the class body
    declared_name: str = ""

    # Type (with bindings) declaring this member
    declaring_type: TypeDescriptor | None = None

    # Annotation as written, used to look into container item annotations
    annotation: Any = field(default=None, repr=False)

    # typing.Annotated extras attached to the member's annotation
    metadata: tuple = ()

    # Whether the annotation explicitly allows None (Optional[X] / X | None)
    declared_nullable: bool = False

    # Schema-visible name override
    override_name: str | None = None

    # Type before any target type override
    declared_type: TypeDescriptor | None = None

    # Whether this member is a class-level (ClassVar) member
    is_static: bool = False

    # Whether this is the synthetic member describing a container's items
    is_container_item: bool = False

    # Generic bindings of the declaring type
    bindings: dict = field(default_factory=dict, repr=False)

    # Underlying object (dataclass Field, property, class attribute value)
    raw: Any = field(default=None, repr=False)

    @property
    def schema_name(self) -> str:
        return self.override_name if self.override_name is not None else self.declared_name

    @property
    def is_field(self) -> bool:
        return False

    @property
    def is_method(self) -> bool:
        return False

    def with_overridden_name(self, name: str) -> MemberDescriptor:
        return replace(self, override_name=name)

    def with_overridden_type(self, target: TypeDescriptor) -> MemberDescriptor:
        return replace(self, type=target, declared_type=self.declared_type or self.type)

    def as_container_item(self) -> MemberDescriptor:
        """Describe this member's container items as a member of its own.

        The resulting descriptor keeps the declaring type and name, so that
        member-level resolvers can apply to the items (e.g. constraints
        attached through `list[Annotated[str, ...]]`).
        """
        if self.is_container_item or not self.is_container:
            raise ValueError(f"{self.declaring_type}.{self.declared_name} is not a container member")
        item = self.type_context.describe_container_item(self.annotation, self.type, self.bindings)
        return replace(
            self,
            type=item.type,
            declared_type=None,
            annotation=item.annotation,
            metadata=item.metadata,
            declared_nullable=item.nullable,
            is_container_item=True,
        )

    def get_metadata(self, kind: type) -> Any | None:
        """Return the first metadata entry of the given class, if any."""
        for entry in self.metadata:
            if isinstance(entry, kind):
                return entry
        return None

    def __str__(self) -> str:
        owner = self.declaring_type.simple_name if self.declaring_type else "?"
        suffix = "[]" if self.is_container_item else ""
        return f"{owner}.{self.declared_name}{suffix}"


@dataclass(frozen=True, eq=False)
class FieldDescriptor(MemberDescriptor):
    """An annotated attribute."""

    @property
    def is_field(self) -> bool:
        return True

    @property
    def default(self) -> Any:
        """The declared default value, or `dataclasses.MISSING`."""
        if isinstance(self.raw, dataclasses.Field):
            return self.raw.default
        return self.raw


@dataclass(frozen=True, eq=False)
class MethodDescriptor(MemberDescriptor):
    """A property accessor, typed by its return annotation."""

    @property
    def is_method(self) -> bool:
        return True

    @property
    def is_void(self) -> bool:
        return self.type.is_none
