"""
Introspection of Python types.

Turns annotations into TypeDescriptors and enumerates the members (annotated
fields, property accessors, class variables) declared along a type's MRO,
resolving generic type variables on the way.
"""

from __future__ import annotations

import collections
import collections.abc
import dataclasses
import functools
import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, Final, Generic, Literal, Protocol, TypeVar, Union

from .descriptors import FieldDescriptor, MethodDescriptor, NoneType, TypeDescriptor, TypeScope
from .errors import UnsupportedTypeError

logger = logging.getLogger(__name__)

ANY = TypeDescriptor(Any)

CONTAINER_ORIGINS = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)

# Modules whose classes never contribute members
_OPAQUE_MODULES = {"builtins", "typing", "typing_extensions", "abc", "enum", "collections.abc", "_collections_abc"}


@dataclass
class ResolvedAnnotation:
    """An annotation split into its type, nullability and Annotated extras."""

    type: TypeDescriptor
    annotation: Any
    nullable: bool = False
    metadata: tuple = ()
    is_class_variable: bool = False


@dataclass
class HierarchyLevel:
    """Members declared directly on one class of a type's MRO."""

    type: TypeDescriptor
    fields: list[FieldDescriptor] = field(default_factory=list)
    methods: list[MethodDescriptor] = field(default_factory=list)
    static_fields: list[FieldDescriptor] = field(default_factory=list)


class TypeContext:
    """Resolves annotations and enumerates members.

    Results per type are cached on the instance. The cache is not guarded
    against concurrent use; a context is meant to serve one generation run
    at a time.
    """

    def __init__(self):
        self._hierarchy_cache: dict[TypeDescriptor, list[HierarchyLevel]] = {}

    # ------------------------------------------------------------------
    # Annotations
    # ------------------------------------------------------------------

    def resolve(self, annotation: Any, bindings: dict | None = None) -> TypeDescriptor:
        """
        Create a descriptor for the given annotation.

        Args:
            annotation: Any type hint (class, generic alias, typing construct)
            bindings: Type variable bindings of the enclosing generic type

        Returns:
            Descriptor of the annotated type, keeping `None` inside unions

        Raises:
            UnsupportedTypeError: If the annotation has no schema counterpart
        """
        bindings = bindings or {}
        if annotation is None or annotation is NoneType:
            return TypeDescriptor(NoneType)
        if annotation is Any or annotation is object:
            return ANY
        if annotation is Ellipsis:
            return TypeDescriptor(Ellipsis)
        if isinstance(annotation, TypeVar):
            if annotation in bindings:
                return bindings[annotation]
            return self._unbound(annotation)
        if isinstance(annotation, (str, typing.ForwardRef)):
            raise UnsupportedTypeError(f"unresolved forward reference {annotation!r}")
        if isinstance(annotation, dataclasses.InitVar):
            raise UnsupportedTypeError(f"init-only variable {annotation!r} is not a member type")

        origin = typing.get_origin(annotation)
        args = typing.get_args(annotation)
        if origin is Annotated:
            return self.resolve(args[0], bindings)
        if origin in (ClassVar, Final) or annotation in (ClassVar, Final):
            return self.resolve(args[0], bindings) if args else ANY
        if origin is Literal:
            return TypeDescriptor(Literal, values=tuple(args))
        if origin is Union or origin is types.UnionType:
            return self._union([self.resolve(arg, bindings) for arg in args])
        if origin is collections.abc.Callable or origin is type:
            raise UnsupportedTypeError(f"{annotation!r} cannot be described as a schema")
        if origin is not None:
            if any(isinstance(arg, list) for arg in args):
                raise UnsupportedTypeError(f"{annotation!r} cannot be described as a schema")
            return TypeDescriptor(origin, tuple(self.resolve(arg, bindings) for arg in args))
        if isinstance(annotation, type):
            parameters = getattr(annotation, "__parameters__", ())
            if parameters:
                return TypeDescriptor(annotation, tuple(self._unbound(param) for param in parameters))
            return TypeDescriptor(annotation)
        raise UnsupportedTypeError(f"{annotation!r} is not a supported type annotation")

    def describe(self, annotation: Any, bindings: dict | None = None) -> ResolvedAnnotation:
        """Resolve an annotation and split off Optional and Annotated wrappers."""
        metadata: list = []
        is_class_variable = False
        nullable = False
        inner = annotation
        while True:
            origin = typing.get_origin(inner)
            args = typing.get_args(inner)
            if origin is Annotated:
                metadata.extend(args[1:])
                inner = args[0]
            elif origin in (ClassVar, Final) or inner in (ClassVar, Final):
                is_class_variable = is_class_variable or origin is ClassVar or inner is ClassVar
                inner = args[0] if args else Any
            elif (origin is Union or origin is types.UnionType) and NoneType in args:
                nullable = True
                inner = self._strip_none(inner)
            else:
                break
        resolved, bound_nullable = self.unwrap_nullable(self.resolve(inner, bindings))
        nullable = nullable or bound_nullable
        return ResolvedAnnotation(
            type=resolved,
            annotation=inner,
            nullable=nullable,
            metadata=tuple(metadata),
            is_class_variable=is_class_variable,
        )

    def describe_container_item(self, annotation: Any, container: TypeDescriptor, bindings: dict) -> ResolvedAnnotation:
        """Describe the element annotation of a container annotation."""
        args = [arg for arg in typing.get_args(annotation) if arg is not Ellipsis]
        if args and typing.get_origin(annotation) is not None:
            return self.describe(args[0], bindings)
        item_type = self.container_item_type(container) or ANY
        item_type, nullable = self.unwrap_nullable(item_type)
        return ResolvedAnnotation(type=item_type, annotation=item_type.origin, nullable=nullable)

    @staticmethod
    def unwrap_nullable(descriptor: TypeDescriptor) -> tuple[TypeDescriptor, bool]:
        """Remove `None` from a union, reporting whether it was present."""
        if not descriptor.is_union:
            return descriptor, False
        remaining = tuple(arg for arg in descriptor.args if not arg.is_none)
        if len(remaining) == len(descriptor.args):
            return descriptor, False
        if len(remaining) == 1:
            return remaining[0], True
        return TypeDescriptor(Union, remaining), True

    def _union(self, alternatives: list[TypeDescriptor]) -> TypeDescriptor:
        flattened: list[TypeDescriptor] = []
        for alternative in alternatives:
            for entry in alternative.args if alternative.is_union else (alternative,):
                if entry not in flattened:
                    flattened.append(entry)
        if len(flattened) == 1:
            return flattened[0]
        return TypeDescriptor(Union, tuple(flattened))

    @staticmethod
    def _strip_none(annotation: Any) -> Any:
        args = [arg for arg in typing.get_args(annotation) if arg is not NoneType]
        if len(args) == 1:
            return args[0]
        return Union[tuple(args)]

    def _unbound(self, variable: TypeVar) -> TypeDescriptor:
        if variable.__bound__ is not None:
            return self.resolve(variable.__bound__)
        if variable.__constraints__:
            return self._union([self.resolve(c) for c in variable.__constraints__])
        return ANY

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def is_container(self, descriptor: TypeDescriptor) -> bool:
        """Whether values of this type are represented as JSON arrays."""
        if descriptor.origin is tuple:
            return not descriptor.args or descriptor.args[-1].origin is Ellipsis
        return descriptor.origin in CONTAINER_ORIGINS

    def container_item_type(self, descriptor: TypeDescriptor) -> TypeDescriptor | None:
        if not self.is_container(descriptor):
            return None
        return descriptor.args[0] if descriptor.args else ANY

    def is_mapping(self, descriptor: TypeDescriptor) -> bool:
        return descriptor.origin in MAPPING_ORIGINS or (
            descriptor.is_class and issubclass(descriptor.origin, collections.abc.Mapping)
        )

    def mapping_value_type(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        return descriptor.args[1] if len(descriptor.args) == 2 else ANY

    def create_type_scope(self, descriptor: TypeDescriptor) -> TypeScope:
        return TypeScope(descriptor, self)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def type_bindings(self, descriptor: TypeDescriptor) -> dict:
        """Map the type variables of a generic class to the bound arguments."""
        parameters = getattr(descriptor.origin, "__parameters__", ()) if descriptor.is_class else ()
        return self._bind(parameters, list(descriptor.args))

    def _bind(self, parameters, arguments: list[TypeDescriptor]) -> dict:
        bindings = {}
        for index, parameter in enumerate(parameters):
            if not isinstance(parameter, TypeVar):
                continue
            bindings[parameter] = arguments[index] if index < len(arguments) else self._unbound(parameter)
        return bindings

    def hierarchy(self, descriptor: TypeDescriptor) -> list[HierarchyLevel]:
        """
        Collect the members declared along the MRO of the given type.

        The declaring type comes first, followed by its supertypes, so that
        overriding members are seen before the ones they override.

        Raises:
            UnsupportedTypeError: If annotations cannot be resolved
        """
        if descriptor in self._hierarchy_cache:
            return self._hierarchy_cache[descriptor]
        levels: list[HierarchyLevel] = []
        if descriptor.is_class:
            cls = descriptor.origin
            collected = {cls: self.type_bindings(descriptor)}
            self._bind_bases(cls, collected[cls], collected)
            for klass in cls.__mro__:
                if not self._is_inspectable(klass):
                    continue
                levels.append(self._collect_level(klass, collected.get(klass, {})))
        self._hierarchy_cache[descriptor] = levels
        return levels

    def _bind_bases(self, cls: type, own: dict, collected: dict) -> None:
        for base in cls.__dict__.get("__orig_bases__", cls.__bases__):
            origin = typing.get_origin(base) or base
            if not isinstance(origin, type) or origin in (Generic, Protocol) or origin in collected:
                continue
            arguments = [self.resolve(arg, own) for arg in typing.get_args(base)]
            collected[origin] = self._bind(getattr(origin, "__parameters__", ()), arguments)
            self._bind_bases(origin, collected[origin], collected)

    @staticmethod
    def _is_inspectable(klass: type) -> bool:
        return klass is not object and getattr(klass, "__module__", "builtins") not in _OPAQUE_MODULES

    @staticmethod
    def _own_annotations(cls: type) -> dict:
        try:
            return inspect.get_annotations(cls)
        except NameError:
            # deferred annotations (Python 3.14+) naming something undefined
            import annotationlib

            return annotationlib.get_annotations(cls, format=annotationlib.Format.FORWARDREF)

    @staticmethod
    def _type_hints(cls: type, own: dict) -> dict:
        """
        Evaluate the annotations declared on the class itself.

        If they cannot all be evaluated together, each one is evaluated on its
        own against the module globals and the class namespace. Members whose
        annotation still fails are left out with a warning.
        """
        try:
            hints = typing.get_type_hints(cls, include_extras=True)
        except (NameError, TypeError, AttributeError):
            logger.debug("resolving the annotations of %s one by one", cls.__qualname__)
        else:
            return {name: hints[name] for name in own if name in hints}
        namespace = dict(vars(cls))
        type_params = getattr(cls, "__type_params__", ())
        hints = {}
        for name, annotation in own.items():
            single = type(cls.__name__, (), {"__module__": cls.__module__, "__annotations__": {name: annotation}})
            single.__type_params__ = type_params
            try:
                hints[name] = typing.get_type_hints(single, localns=namespace, include_extras=True)[name]
            except (NameError, TypeError, AttributeError):
                logger.warning("Skipping member %s.%s due to error", cls.__qualname__, name, exc_info=True)
        return hints

    def _collect_level(self, cls: type, bindings: dict) -> HierarchyLevel:
        parameters = getattr(cls, "__parameters__", ())
        declaring = TypeDescriptor(cls, tuple(bindings[p] for p in parameters if p in bindings))
        level = HierarchyLevel(type=declaring)
        try:
            own = self._own_annotations(cls)
        except (TypeError, AttributeError) as e:
            raise UnsupportedTypeError(f"cannot read annotations of {cls.__qualname__}: {e}") from e
        hints = self._type_hints(cls, own) if own else {}
        dataclass_fields = getattr(cls, "__dataclass_fields__", {})

        for name in own:
            if name not in hints:
                continue
            hint = hints[name]
            if isinstance(hint, dataclasses.InitVar) or hint is dataclasses.InitVar:
                continue
            try:
                described = self.describe(hint, bindings)
            except UnsupportedTypeError:
                logger.warning("Skipping member %s.%s due to error", cls.__qualname__, name, exc_info=True)
                continue
            # class variables are listed among the dataclass fields too, but hold their value on the class
            raw = None if described.is_class_variable else dataclass_fields.get(name)
            if raw is None:
                raw = cls.__dict__.get(name, dataclasses.MISSING)
            member = FieldDescriptor(
                type=described.type,
                type_context=self,
                declared_name=name,
                declaring_type=declaring,
                annotation=described.annotation,
                metadata=described.metadata,
                declared_nullable=described.nullable,
                is_static=described.is_class_variable,
                bindings=bindings,
                raw=raw,
            )
            if member.is_static:
                level.static_fields.append(member)
            else:
                level.fields.append(member)

        for name, value in cls.__dict__.items():
            if isinstance(value, property):
                getter = value.fget
            elif isinstance(value, functools.cached_property):
                getter = value.func
            else:
                continue
            try:
                returned = typing.get_type_hints(getter, include_extras=True).get("return", Any)
                described = self.describe(returned, bindings)
            except (NameError, TypeError, AttributeError, UnsupportedTypeError):
                logger.warning("Skipping accessor %s.%s due to error", cls.__qualname__, name, exc_info=True)
                continue
            level.methods.append(
                MethodDescriptor(
                    type=described.type,
                    type_context=self,
                    declared_name=name,
                    declaring_type=declaring,
                    annotation=described.annotation,
                    metadata=described.metadata,
                    declared_nullable=described.nullable,
                    bindings=bindings,
                    raw=value,
                )
            )
        logger.debug(
            "collected %d field(s), %d accessor(s) and %d class variable(s) from %s",
            len(level.fields),
            len(level.methods),
            len(level.static_fields),
            declaring,
        )
        return level
