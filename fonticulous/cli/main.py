"""
Main CLI entry point for fonticulous.
"""

import sys
from pathlib import Path

import click

from fonticulous import __version__
from fonticulous.config.tables import VARIATION_TABLES
from fonticulous.utils.logging import set_verbosity


def parse_subset(subset: str | None) -> set[str] | None:
    """Split a comma-separated glyph list."""
    if not subset:
        return None
    return {name.strip() for name in subset.split(",") if name.strip()}


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", count=True, help="Increase logging (-v info, -vv debug).")
def cli(verbose):
    """OpenType Font Variations codec tools."""
    set_verbosity(verbose)


@cli.command()
@click.argument("font", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-s",
    "--subset",
    type=str,
    default=None,
    help="Only list the given glyphs (comma-separated names).",
)
@click.option(
    "--table",
    "tables",
    type=click.Choice(VARIATION_TABLES),
    multiple=True,
    help="Table to describe; repeat for several. Defaults to all.",
)
def inspect(font, subset, tables):
    """Summarize the variation tables of FONT."""
    from fonticulous.operations.inspect import describe_font
    from fonticulous.otvar.errors import VariationDataError
    from fonticulous.utils.logging import logger

    try:
        lines = describe_font(font, parse_subset(subset), list(tables) or None)
    except VariationDataError as e:
        logger.error(f"Failed to decode {font.name}: {e}")
        sys.exit(1)

    for line in lines:
        click.echo(line)


@cli.command()
@click.argument(
    "fonts",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "-s",
    "--subset",
    type=str,
    default=None,
    help="Only compare the given glyphs with fontTools (comma-separated names).",
)
def verify(fonts, subset):
    """Round-trip the variation tables of each FONT (or each .ttf in a directory)."""
    from fonticulous.core.font_io import iter_fonts
    from fonticulous.operations.verify import verify_font
    from fonticulous.utils.logging import logger

    paths = []
    for path in fonts:
        if path.is_dir():
            found = list(iter_fonts(path))
            if not found:
                logger.warning(f"No .ttf files in {path}")
            paths.extend(found)
        else:
            paths.append(path)

    glyphs = parse_subset(subset)
    results = [verify_font(font, glyphs) for font in paths]
    if not all(results):
        sys.exit(1)


if __name__ == "__main__":
    cli()
