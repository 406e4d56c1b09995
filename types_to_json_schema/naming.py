"""
Naming strategies for entries in the definitions section.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Callable

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from .definitions import DefinitionKey
from .descriptors import TypeDescriptor
from .utils import to_pascal_case

_URI_INVALID = re.compile(r"[^a-zA-Z0-9.\-_$*(),]+")
_PLAIN_INVALID = re.compile(r"[^a-zA-Z0-9.\-_]+")


def ensure_uri_compatible(name: str) -> str:
    """Keep generic markers as URI-safe punctuation: `Box[str]` -> `Box(str)`."""
    name = name.replace("[", "(").replace("]", ")")
    return _URI_INVALID.sub("", name)


def ensure_plain(name: str) -> str:
    """Restrict to alphanumerics plus `.-_`: `Box[str, int]` -> `Box_str.int_`."""
    name = name.replace("$", "-")
    name = re.sub(r"[\[\]]", "_", name)
    name = name.replace(",", ".")
    return _PLAIN_INVALID.sub("", name)


class DefinitionNamingStrategy(ABC):
    """Decides the names under which definitions are emitted."""

    @abstractmethod
    def get_definition_name(self, key: DefinitionKey, context) -> str:
        """
        Name the definition identified by the given key.

        Args:
            key: Definition key (type plus ignored provider)
            context: The generation context

        Returns:
            Definition name, possibly shared with other keys
        """

    def adjust_duplicate_names(self, names: dict[DefinitionKey, str], context) -> None:
        """Make the names of keys sharing one base name distinct, in place."""
        for index, key in enumerate(names, start=1):
            names[key] = f"{names[key]}-{index}"

    def adjust_nullable_name(self, key: DefinitionKey, name: str, context) -> str:
        """Name of the nullable variant of a definition."""
        return f"{name}-nullable"


class DefaultDefinitionNamingStrategy(DefinitionNamingStrategy):
    """Uses the simple type description, e.g. `Node` or `Box[str]`."""

    def get_definition_name(self, key: DefinitionKey, context) -> str:
        return key.type.simple_name


class TemplateDefinitionNamingStrategy(DefinitionNamingStrategy):
    """Renders definition names from a jinja2 template.

    Available variables: `name` (simple name without arguments), `qualname`,
    `module`, `args` (simple names of the type arguments) and `full_name`.
    The `pascal_case` filter is registered as well.

    Example:
        TemplateDefinitionNamingStrategy("{{ name }}{% for a in args %}Of{{ a | pascal_case }}{% endfor %}")
    """

    def __init__(self, template: str):
        self.source = template
        env = SandboxedEnvironment(undefined=StrictUndefined, autoescape=False)
        env.filters["pascal_case"] = to_pascal_case
        try:
            self._template = env.from_string(template)
        except TemplateError as e:
            raise ValueError(f"Invalid definition name template {template!r}: {e}") from e

    def get_definition_name(self, key: DefinitionKey, context) -> str:
        origin = key.type.origin
        bare = TypeDescriptor(origin, values=key.type.values)
        return self._template.render(
            name=bare.simple_name,
            qualname=getattr(origin, "__qualname__", bare.simple_name),
            module=getattr(origin, "__module__", ""),
            args=[arg.simple_name for arg in key.type.args],
            full_name=key.type.full_name,
        ).strip()


class CleanDefinitionNamingStrategy(DefinitionNamingStrategy):
    """Wraps another strategy and sanitizes every name it produces."""

    def __init__(self, strategy: DefinitionNamingStrategy, clean_up: Callable[[str], str]):
        self.strategy = strategy
        self.clean_up = clean_up

    def get_definition_name(self, key: DefinitionKey, context) -> str:
        return self.clean_up(self.strategy.get_definition_name(key, context))

    def adjust_duplicate_names(self, names: dict[DefinitionKey, str], context) -> None:
        self.strategy.adjust_duplicate_names(names, context)
        for key, name in names.items():
            names[key] = self.clean_up(name)

    def adjust_nullable_name(self, key: DefinitionKey, name: str, context) -> str:
        return self.clean_up(self.strategy.adjust_nullable_name(key, name, context))
