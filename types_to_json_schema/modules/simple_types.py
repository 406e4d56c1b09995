"""
Fixed schemas for primitive and well-known value types.
"""

from __future__ import annotations

import datetime
import decimal
import pathlib
import uuid

from ..definitions import CustomDefinition
from ..descriptors import NoneType, TypeDescriptor
from ..keywords import SchemaKeyword, SchemaType
from ..options import Option
from . import Module


class SimpleTypeModule(Module):
    """Maps classes to a fixed `type` (plus an optional OpenAPI `format`).

    The resulting schemas are always inlined.
    """

    def __init__(self):
        self.fixed_types: dict[type, SchemaType] = {}
        self.open_api_formats: dict[type, str] = {}

    @staticmethod
    def for_primitive_types() -> SimpleTypeModule:
        module = SimpleTypeModule()
        module.with_type(str, SchemaType.STRING)
        module.with_type(bool, SchemaType.BOOLEAN)
        module.with_type(int, SchemaType.INTEGER, "int64")
        module.with_type(float, SchemaType.NUMBER, "double")
        module.with_type(NoneType, SchemaType.NULL)
        return module

    @staticmethod
    def for_primitive_and_additional_types() -> SimpleTypeModule:
        module = SimpleTypeModule.for_primitive_types()
        module.with_type(datetime.date, SchemaType.STRING, "date")
        module.with_type(datetime.datetime, SchemaType.STRING, "date-time")
        module.with_type(datetime.time, SchemaType.STRING, "time")
        module.with_type(datetime.timedelta, SchemaType.STRING, "duration")
        module.with_type(uuid.UUID, SchemaType.STRING, "uuid")
        module.with_type(decimal.Decimal, SchemaType.NUMBER)
        module.with_type(bytes, SchemaType.STRING, "byte")
        for path_type in (pathlib.PurePath, pathlib.PurePosixPath, pathlib.PureWindowsPath, pathlib.Path):
            module.with_type(path_type, SchemaType.STRING)
        return module

    def with_type(self, python_type: type, schema_type: SchemaType, open_api_format: str | None = None) -> SimpleTypeModule:
        self.fixed_types[python_type] = schema_type
        if open_api_format is not None:
            self.open_api_formats[python_type] = open_api_format
        return self

    def apply_to_config_builder(self, builder) -> None:
        builder.for_types().with_custom_definition_provider(self.provide_definition)

    def provide_definition(self, descriptor: TypeDescriptor, context) -> CustomDefinition | None:
        if descriptor.args or not descriptor.is_class:
            return None
        schema_type = self.fixed_types.get(descriptor.origin)
        if schema_type is None:
            return None
        node = {context.keyword(SchemaKeyword.TAG_TYPE): schema_type.value}
        if context.config.is_enabled(Option.EXTRA_OPEN_API_FORMAT_VALUES):
            open_api_format = self.open_api_formats.get(descriptor.origin)
            if open_api_format is not None:
                node[context.keyword(SchemaKeyword.TAG_FORMAT)] = open_api_format
        return CustomDefinition.inline(node)
