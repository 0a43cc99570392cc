"""Command line for packing and unpacking CTCE8 configuration files."""

import json
import logging
from pathlib import Path

import click

from . import __version__
from .errors import ContainerError
from .models.file_formats import import_cfg, pack_file, unpack_file


def _fail(exc: ContainerError) -> None:
    click.echo(f"error [{exc.code}]: {exc}", err=True)
    raise SystemExit(1)


@click.group()
@click.version_option(__version__, prog_name="ctce8-cfg")
@click.option("-v", "--verbose", is_flag=True, help="Log codec details.")
def main(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("pack")
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("model")
def pack_cmd(input: Path, output: Path, model: str):
    """Package the XML file INPUT into the CFG file OUTPUT for device MODEL."""
    try:
        path = pack_file(input, output, model)
    except ContainerError as e:
        _fail(e)
    click.echo(f"{path}: {path.stat().st_size} bytes, model {model!r}")


@main.command("unpack")
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
def unpack_cmd(input: Path, output: Path):
    """Unpack the CFG file INPUT into the XML file OUTPUT."""
    try:
        result = unpack_file(input, output)
    except ContainerError as e:
        _fail(e)
    click.echo(f"{output}: {len(result.document)} bytes, model {result.device_model!r}")


@main.command("info")
@click.argument("input", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def info_cmd(input: Path):
    """Validate the CFG file INPUT and print its structure as JSON."""
    try:
        result = import_cfg(input)
    except ContainerError as e:
        _fail(e)
    click.echo(json.dumps(result.to_dict(), sort_keys=True))


if __name__ == "__main__":
    main()
