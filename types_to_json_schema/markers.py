"""
Markers for `typing.Annotated` member annotations.

Example:
    @dataclass
    class User:
        name: Annotated[str, Title("Name"), MinLength(1)]
        tags: list[Annotated[str, Pattern("^[a-z]+$")]] = field(default_factory=list)
        nickname: Annotated[str | None, PropertyName("nick")] = None
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Title:
    value: str


@dataclass(frozen=True)
class Description:
    value: str


@dataclass(frozen=True)
class Default:
    value: Any


@dataclass(frozen=True, init=False)
class Examples:
    values: tuple

    def __init__(self, *values: Any):
        object.__setattr__(self, "values", values)


# String constraints


@dataclass(frozen=True)
class MinLength:
    value: int


@dataclass(frozen=True)
class MaxLength:
    value: int


@dataclass(frozen=True)
class Pattern:
    value: str


@dataclass(frozen=True)
class Format:
    value: str


# Numeric constraints


@dataclass(frozen=True)
class Minimum:
    value: int | float


@dataclass(frozen=True)
class Maximum:
    value: int | float


@dataclass(frozen=True)
class ExclusiveMinimum:
    value: int | float


@dataclass(frozen=True)
class ExclusiveMaximum:
    value: int | float


@dataclass(frozen=True)
class MultipleOf:
    value: int | float


# Array constraints


@dataclass(frozen=True)
class MinItems:
    value: int


@dataclass(frozen=True)
class MaxItems:
    value: int


@dataclass(frozen=True)
class UniqueItems:
    value: bool = True


# Member flags


@dataclass(frozen=True)
class ReadOnly:
    pass


@dataclass(frozen=True)
class WriteOnly:
    pass


@dataclass(frozen=True)
class Required:
    pass


@dataclass(frozen=True)
class Nullable:
    value: bool = True


@dataclass(frozen=True)
class PropertyName:
    value: str


@dataclass(frozen=True)
class Ignore:
    pass


@dataclass(frozen=True, init=False)
class DependentRequired:
    """Property names that must be present whenever the annotated member is."""

    names: tuple[str, ...]

    def __init__(self, *names: str):
        object.__setattr__(self, "names", names)
