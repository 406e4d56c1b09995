"""Python Types to JSON Schema Generator

A Python package for generating JSON Schema documents from Python types
(dataclasses, annotated classes, enums and typing constructs).
Supports draft-06, draft-07, 2019-09 and 2020-12 with configurable
options, pluggable resolvers and definition naming strategies.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .config import GeneratorSettings, SchemaGeneratorConfig, SchemaGeneratorConfigBuilder
from .definitions import AttributeInclusion, CustomDefinition, DefinitionKey, DefinitionType
from .descriptors import FieldDescriptor, MemberDescriptor, MethodDescriptor, TypeDescriptor, TypeScope
from .errors import CircularReferenceError, DuplicateDefinitionNameError, SchemaGenerationError, UnsupportedTypeError
from .generator import SchemaGenerator
from .keywords import SchemaKeyword, SchemaType, SchemaVersion
from .naming import (
    CleanDefinitionNamingStrategy,
    DefaultDefinitionNamingStrategy,
    DefinitionNamingStrategy,
    TemplateDefinitionNamingStrategy,
)
from .options import FULL_DOCUMENTATION, PLAIN_JSON, PYTHON_OBJECT, Option, OptionPreset
from .type_context import TypeContext

__all__ = [
    "SchemaGenerator",
    "SchemaGeneratorConfig",
    "SchemaGeneratorConfigBuilder",
    "GeneratorSettings",
    "Option",
    "OptionPreset",
    "FULL_DOCUMENTATION",
    "PLAIN_JSON",
    "PYTHON_OBJECT",
    "SchemaVersion",
    "SchemaKeyword",
    "SchemaType",
    "TypeContext",
    "TypeDescriptor",
    "TypeScope",
    "MemberDescriptor",
    "FieldDescriptor",
    "MethodDescriptor",
    "DefinitionKey",
    "CustomDefinition",
    "DefinitionType",
    "AttributeInclusion",
    "DefinitionNamingStrategy",
    "DefaultDefinitionNamingStrategy",
    "TemplateDefinitionNamingStrategy",
    "CleanDefinitionNamingStrategy",
    "SchemaGenerationError",
    "UnsupportedTypeError",
    "CircularReferenceError",
    "DuplicateDefinitionNameError",
]
