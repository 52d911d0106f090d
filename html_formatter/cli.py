"""
Beautifies or minifies an HTML file.
The result is printed to stdout, or written back to the file with `--in-place`.
"""

from __future__ import annotations

import codecs
import logging

import click

from . import __version__
from .config import ConfigError, build_config
from .exceptions import FormatterError
from .filesystem import get_max_file_size, read_document, resolve_document, write_document
from .formatter import beautify, minify

__all__ = ["cli"]

logger = logging.getLogger(__name__)


def _unescape(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    # Lets users type "\t" or "\r\n" on the command line.
    if value is None:
        return None
    try:
        return codecs.decode(value, "unicode_escape")
    except UnicodeDecodeError as error:
        raise click.BadParameter(str(error)) from error


@click.command()
@click.version_option(version=__version__)
@click.option("--minify", "minify_output", is_flag=True, help="Minify instead of beautify")
@click.option("--tab", callback=_unescape, help="Indentation string, e.g. '\\t'")
@click.option("--line-break", callback=_unescape, help="Line break string, e.g. '\\r\\n'")
@click.option("--in-place", is_flag=True, help="Rewrite the file instead of printing")
@click.option("--verbose", is_flag=True, help="Log every formatting step to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    minify_output: bool = False,
    tab: str | None = None,
    line_break: str | None = None,
    in_place: bool = False,
    verbose: bool = False,
):
    """
    Entry point for beautifying or minifying an HTML file.

    Args:
        filepath: Path to the HTML file to process.
        minify_output: Minify the document instead of indenting it.
        tab: Override for the indentation string.
        line_break: Override for the line break string.
        in_place: Write the result back to `filepath`.
        verbose: Enable DEBUG logging on stderr.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is not a supported HTML file or the
            configuration is invalid.
        click.ClickException: If the file is too large, cannot be read or
            written, or the content cannot be indented.

    Examples:
        html-formatter index.html --tab "\\t" --in-place
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        path = resolve_document(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(path.parent, tab=tab, line_break=line_break)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size()
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        html, snapshot = read_document(path, max_file_size)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    logger.debug("Read %d characters from %s", len(html), path)

    try:
        result = minify(html, config) if minify_output else beautify(html, config)
    except FormatterError as error:
        raise click.ClickException(str(error)) from error

    if not in_place:
        click.echo(result)
        return

    try:
        write_document(path, result + config.line_break, snapshot)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
