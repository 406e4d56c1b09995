import json
import logging

import click

from .cli_utils import import_target, reconstruct_command_line
from .config import GeneratorSettings
from .errors import SchemaGenerationError
from .generator import SchemaGenerator
from .keywords import SchemaKeyword, SchemaVersion
from .options import FULL_DOCUMENTATION, PLAIN_JSON, PYTHON_OBJECT

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--schema-version",
    "-s",
    default=None,
    type=click.Choice([version.value for version in SchemaVersion]),
    help="Targeted JSON Schema draft (overrides config file)",
)
@click.option(
    "--preset",
    "-p",
    default=None,
    type=click.Choice([preset.name for preset in (FULL_DOCUMENTATION, PLAIN_JSON, PYTHON_OBJECT)]),
    help="Option preset (overrides config file)",
)
@click.option("--option", "-o", "with_options", multiple=True, help="Enable an option, e.g. strict_type_info")
@click.option("--without-option", "-x", "without_options", multiple=True, help="Disable an option of the preset")
@click.option("--name-template", default=None, type=str, help="Jinja2 template for definition names")
@click.option("--indent", default=None, type=int, help="Indentation of the written JSON")
@click.option(
    "--add-generation-comment",
    is_flag=True,
    default=False,
    help="Add a $comment with the command line that produced the schema",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log traversal decisions")
@click.argument("target", type=str)
@click.argument("output", default=None, required=False, type=click.Path(resolve_path=True))
def types_to_json_schema(
    config,
    schema_version,
    preset,
    with_options,
    without_options,
    name_template,
    indent,
    add_generation_comment,
    verbose,
    target,
    output,
):
    """Generate the JSON Schema of TARGET (`package.module:QualifiedName`)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if config is not None:
            with open(config) as f:
                settings = GeneratorSettings.from_dict(json.load(f))
        else:
            settings = GeneratorSettings()

        # CLI values override the config file
        if schema_version is not None:
            settings.schema_version = schema_version
        if preset is not None:
            settings.preset = preset
        settings.with_options = [*settings.with_options, *with_options]
        settings.without_options = [*settings.without_options, *without_options]
        if name_template is not None:
            settings.definition_name_template = name_template
        if indent is not None:
            settings.indent = indent
        if add_generation_comment:
            settings.add_generation_comment = True
        settings.validate()
        generator_config = settings.to_config_builder().build()
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    target_type = import_target(target)
    try:
        schema = SchemaGenerator(generator_config).generate_schema(target_type)
    except SchemaGenerationError as e:
        raise click.ClickException(str(e)) from e

    if settings.add_generation_comment:
        schema = _with_generation_comment(schema, settings.version, reconstruct_command_line(types_to_json_schema))

    out = json.dumps(schema, indent=settings.indent)
    if output is None:
        click.echo(out)
    else:
        with open(output, "w") as f:
            f.write(out + "\n")


def _with_generation_comment(schema: dict, version: SchemaVersion, command_line: str) -> dict:
    if version is SchemaVersion.DRAFT_6:
        logger.warning("%s does not support $comment, skipping the generation comment", version.value)
        return schema
    schema_tag = SchemaKeyword.TAG_SCHEMA.for_version(version)
    result = {}
    if schema_tag in schema:
        result[schema_tag] = schema[schema_tag]
    result[SchemaKeyword.TAG_COMMENT.for_version(version)] = f"Generated by {command_line}"
    for key, value in schema.items():
        result.setdefault(key, value)
    return result
