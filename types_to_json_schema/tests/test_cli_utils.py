#!/usr/bin/env python3

import click
import pytest

from types_to_json_schema.cli_utils import import_target, reconstruct_command_line
from types_to_json_schema.markers import Title
from types_to_json_schema.options import Option
from types_to_json_schema.types_to_json_schema import types_to_json_schema


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context, only the command name is returned"""
        result = reconstruct_command_line(types_to_json_schema)
        assert result == "types_to_json_schema"

    def test_reconstruct_command_line_with_context(self):
        with click.Context(types_to_json_schema) as ctx:
            ctx.params = {
                "target": "app.models:User",
                "schema_version": "draft-07",
                "with_options": ("strict_type_info", "plain_definition_keys"),
                "verbose": True,
                "indent": None,
            }
            result = reconstruct_command_line(types_to_json_schema)
        assert result == (
            "types_to_json_schema app.models:User --schema-version draft-07"
            " --option strict_type_info --option plain_definition_keys --verbose"
        )

    def test_import_target(self):
        assert import_target("types_to_json_schema.markers:Title") is Title

    def test_import_nested_target(self):
        assert import_target("types_to_json_schema.options:Option.STRICT_TYPE_INFO") is Option.STRICT_TYPE_INFO

    @pytest.mark.parametrize(
        "target",
        [
            "types_to_json_schema.markers",
            ":Title",
            "types_to_json_schema.markers:",
            "no_such_module_for_schemas:Thing",
            "types_to_json_schema.markers:NoSuchMarker",
        ],
    )
    def test_import_target_errors(self, target):
        with pytest.raises(click.BadParameter):
            import_target(target)


if __name__ == "__main__":
    pytest.main([__file__])
