#!/usr/bin/env python3

import json

import pytest
from click.testing import CliRunner

from types_to_json_schema.types_to_json_schema import types_to_json_schema

TARGET = "types_to_json_schema.markers:Title"

TITLE_SCHEMA = {
    "type": "object",
    "properties": {"value": {"type": "string"}},
    "required": ["value"],
}


class TestCommandLine:
    """Runs the command through Click's test runner"""

    def setup_method(self):
        self.runner = CliRunner()

    def test_schema_on_stdout(self):
        result = self.runner.invoke(types_to_json_schema, [TARGET, "-p", "plain_json"])
        assert result.exit_code == 0, result.output
        schema = json.loads(result.stdout)
        assert schema.pop("$schema") == "https://json-schema.org/draft/2020-12/schema"
        assert schema == TITLE_SCHEMA

    def test_schema_to_file(self, tmp_path):
        output = tmp_path / "title.schema.json"
        result = self.runner.invoke(types_to_json_schema, [TARGET, str(output), "-p", "plain_json", "-x", "schema_version_indicator"])
        assert result.exit_code == 0, result.output
        text = output.read_text()
        assert text.endswith("}\n")
        assert json.loads(text) == TITLE_SCHEMA

    def test_generation_comment(self):
        result = self.runner.invoke(
            types_to_json_schema, [TARGET, "-p", "plain_json", "-s", "draft-07", "--add-generation-comment"]
        )
        assert result.exit_code == 0, result.output
        schema = json.loads(result.stdout)
        assert list(schema)[:2] == ["$schema", "$comment"]
        assert schema["$schema"] == "http://json-schema.org/draft-07/schema#"
        assert schema["$comment"].startswith(f"Generated by types_to_json_schema {TARGET}")
        assert "--schema-version draft-07" in schema["$comment"]

    def test_no_generation_comment_in_draft_6(self):
        result = self.runner.invoke(
            types_to_json_schema, [TARGET, "-p", "plain_json", "-s", "draft-06", "--add-generation-comment"]
        )
        assert result.exit_code == 0, result.output
        schema = json.loads(result.stdout)
        assert "$comment" not in schema
        assert schema["$schema"] == "http://json-schema.org/draft-06/schema#"

    def test_config_file(self, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(
            json.dumps({"preset": "plain_json", "without_options": ["schema_version_indicator"], "indent": 4})
        )
        result = self.runner.invoke(types_to_json_schema, [TARGET, "-c", str(config)])
        assert result.exit_code == 0, result.output
        assert '\n    "type": "object"' in result.stdout
        assert json.loads(result.stdout) == TITLE_SCHEMA

    def test_cli_overrides_config_file(self, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"preset": "plain_json", "schema_version": "2019-09"}))
        result = self.runner.invoke(types_to_json_schema, [TARGET, "-c", str(config), "-s", "draft-07"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["$schema"] == "http://json-schema.org/draft-07/schema#"

    @pytest.mark.parametrize(
        "arguments",
        [
            ["no_such_module_for_schemas:Thing"],
            ["types_to_json_schema.markers"],
            [TARGET, "-o", "bogus"],
            [TARGET, "-s", "draft-03"],
            [TARGET, "--name-template", "{{ name"],
        ],
    )
    def test_usage_errors(self, arguments):
        result = self.runner.invoke(types_to_json_schema, arguments)
        assert result.exit_code == 2

    def test_unknown_setting_in_config_file(self, tmp_path):
        config = tmp_path / "settings.json"
        config.write_text(json.dumps({"colour": "blue"}))
        result = self.runner.invoke(types_to_json_schema, [TARGET, "-c", str(config)])
        assert result.exit_code == 2
        assert "Unknown setting: colour" in result.output


if __name__ == "__main__":
    pytest.main([__file__])
