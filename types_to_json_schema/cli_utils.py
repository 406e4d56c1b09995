"""
CLI utilities for command line reconstruction and target lookup.
"""

import importlib
import os
import sys
from pathlib import Path

import click

COMMAND_NAME = "types_to_json_schema"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    # Try to get current Click context for parameter values
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        return COMMAND_NAME

    if not cli_args:
        return COMMAND_NAME

    arguments = []
    options = []

    for param in click_command.params:
        if param.name not in cli_args:
            continue
        value = cli_args[param.name]
        if not value:
            continue

        if isinstance(param, click.Argument):
            arguments.append(_format_value(value))
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
            elif isinstance(value, (list, tuple)):
                # repeatable options
                for entry in value:
                    options.extend([flag, _format_value(entry)])
            else:
                options.extend([flag, _format_value(value)])

    return " ".join([COMMAND_NAME, *arguments, *options])


def _format_value(value) -> str:
    # File paths are shortened to their name
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        if path_obj.is_absolute() and path_obj.exists():
            return path_obj.name
    return str(value)


def import_target(target: str):
    """
    Import the object named by a `package.module:QualifiedName` string.

    Args:
        target: Module path and qualified name, separated by a colon

    Returns:
        The referenced object (usually a class)

    Raises:
        click.BadParameter: If the string is malformed or the object cannot be found
    """
    module_name, separator, qualified_name = target.partition(":")
    if not separator or not module_name or not qualified_name:
        raise click.BadParameter(f"expected 'package.module:QualifiedName', got {target!r}", param_hint="TARGET")
    # modules of the working directory are importable as well
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import module {module_name!r}: {e}", param_hint="TARGET") from e
    for attribute in qualified_name.split("."):
        try:
            obj = getattr(obj, attribute)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name!r} has no attribute {qualified_name!r}", param_hint="TARGET") from e
    return obj
