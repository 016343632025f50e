"""
Converts a plain text file into a structured document, turning markdown
shorthand into headings, list items, quotes, code blocks and rules, and
prints the resulting block outline.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from .autoformat import convert_from_markdown_string
from .config import ConfigError, build_config
from .exceptions import AutoformatError, LineTooLongError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    read_text_file,
)
from .nodes import create_horizontal_rule_node
from .outline import document_to_dict, render_outline

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="md-autoformat")
@click.option("--max-restarts", type=int, help="Give up after this many sweep restarts")
@click.option(
    "--horizontal-rules/--no-horizontal-rules",
    default=None,
    help="Turn ---, *** and ___ lines into horizontal rules",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["outline", "json", "text"]),
    help="Output format (text is an alias for outline)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log rewrites and restarts to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    max_restarts: int | None = None,
    horizontal_rules: bool | None = None,
    output_format: str | None = None,
    verbose: bool = False,
):
    """
    Entry point for autoformatting a text file.

    Args:
        filepath: Path to the text or Markdown file to process.
        max_restarts: Override for the sweep restart cap.
        horizontal_rules: Override for horizontal rule conversion.
        output_format: Override for the output format.
        verbose: Emit debug logging on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path or configuration overrides are invalid.
        click.ClickException: If the file breaks size or line limits, cannot be
            decoded, or autoformatting fails.

    Examples:
        md-autoformat notes.md --format json
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            filepath.parent,
            max_restarts=max_restarts,
            horizontal_rules=horizontal_rules,
            output_format=output_format,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(filepath), max_file_size, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        text = read_text_file(filepath, max_line_length)
    except UnicodeDecodeError as error:
        raise click.ClickException(f"Invalid UTF-8 sequence in {filepath}: {error}") from error
    except LineTooLongError as error:
        raise click.ClickException(
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        ) from error
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        document = convert_from_markdown_string(
            text,
            create_horizontal_rule_node=(
                create_horizontal_rule_node if config.horizontal_rules else None
            ),
            max_restarts=config.max_restarts,
        )
    except AutoformatError as error:
        raise click.ClickException(f"{filepath}: {error}") from error

    if document is None:
        click.echo(f"{filepath} is empty; nothing to import.", err=True)
        return

    if config.output_format == "json":
        click.echo(json.dumps(document_to_dict(document), indent=2))
    else:
        for line in render_outline(document):
            click.echo(line)


if __name__ == "__main__":
    cli()
