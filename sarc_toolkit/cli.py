"""SARC Toolkit CLI."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .compression.yaz0 import DEFAULT_LEVEL


def _unwrap(path: Path):
    """Read a file and strip its Yaz0 layers. Returns (data, layer_count)."""
    from .compression import decompress, is_compressed

    data = path.read_bytes()
    layers = 0
    while is_compressed(data):
        data = decompress(data)
        layers += 1
    return data, layers


def _load(path: Path):
    from .sarc import read_archive

    return read_archive(_unwrap(path)[0])


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """SARC Toolkit - Inspect, repack and compress SARC archives.

    \b
    SARC: container of named (or hash-identified) files
    Yaz0: LZ77-style compression wrapped around archives (.szs)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def info(archive: Path):
    """Show header details of a SARC (optionally Yaz0-compressed)."""
    from .sarc import SARCReader

    click.echo(f"Opening: {archive}")

    try:
        raw, layers = _unwrap(archive)
        reader = SARCReader(raw)
        arc = reader.read()

        click.echo(f"Yaz0 layers: {layers}")
        click.echo(f"Endianness:  {arc.endianness.name.lower()}")
        click.echo(f"Hash key:    0x{arc.hash_key:X}")
        click.echo(f"Files:       {len(reader.nodes)}")
        click.echo(f"Data offset: 0x{reader.header.data_offset:X}")
        click.echo(f"Size:        {len(raw)} bytes")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command(name="list")
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def list_files(archive: Path):
    """List files in a SARC with size, hash and alignment."""
    from .formats import required_alignment
    from .sarc import calc_hash

    try:
        arc = _load(archive)

        click.echo(f"Files in archive ({len(arc)}):")
        for path, entry in arc.walk():
            name_hash = calc_hash(path, arc.hash_key) if entry.has_name else entry.name_hash
            click.echo(
                f"  {path}  {entry.size} bytes  hash=0x{name_hash:08X}  "
                f"align=0x{required_alignment(entry.data):X}"
            )

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: <input>.szs)",
)
@click.option(
    "-l",
    "--level",
    type=click.IntRange(0, 9),
    default=DEFAULT_LEVEL,
    show_default=True,
    help="Compression level (0 = store only)",
)
def compress(input_file: Path, output: Optional[Path], level: int):
    """Yaz0-compress a single file."""
    from .compression import compress as yaz0_compress

    if output is None:
        output = input_file.with_suffix(".szs")

    try:
        data = input_file.read_bytes()
        result = yaz0_compress(data, level)
        output.write_bytes(result)
        click.echo(f"Created: {output} ({len(data)} -> {len(result)} bytes)")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: extension guessed from content)",
)
def decompress(input_file: Path, output: Optional[Path]):
    """Remove every Yaz0 layer from a single file."""
    from .compression import decompress_all, is_compressed
    from .formats import guess_extension

    data = input_file.read_bytes()
    if not is_compressed(data):
        click.echo(f"Error: {input_file} is not Yaz0-compressed", err=True)
        sys.exit(1)

    try:
        result = decompress_all(data)
        if output is None:
            output = input_file.with_suffix(guess_extension(result))
            if output == input_file:
                output = input_file.with_name(f"{input_file.stem}_decompressed{output.suffix}")

        output.write_bytes(result)
        click.echo(f"Created: {output} ({len(result)} bytes)")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: overwrite input)",
)
@click.option(
    "--endian",
    type=click.Choice(["big", "little"]),
    help="Byte order of the output (default: keep)",
)
@click.option(
    "--hash-key",
    type=click.IntRange(0, 0xFFFFFFFF),
    help="Name hash multiplier (default: keep)",
)
@click.option(
    "--yaz0/--no-yaz0",
    default=True,
    help="Yaz0-compress the output",
)
@click.option(
    "-l",
    "--level",
    type=click.IntRange(0, 9),
    default=DEFAULT_LEVEL,
    show_default=True,
    help="Compression level",
)
def repack(
    input_file: Path,
    output: Optional[Path],
    endian: Optional[str],
    hash_key: Optional[int],
    yaz0: bool,
    level: int,
):
    """Load a SARC and write it back out.

    Useful to switch byte order, change the hash key or re-compress.
    """
    from .compression import compress as yaz0_compress
    from .sarc import write_archive
    from .utils.binary import Endianness

    if output is None:
        output = input_file

    try:
        arc = _load(input_file)
        if endian is not None:
            arc.endianness = Endianness.BIG if endian == "big" else Endianness.LITTLE
        if hash_key is not None:
            arc.hash_key = hash_key

        data, alignment = write_archive(arc)
        if yaz0:
            data = yaz0_compress(data, level)

        output.write_bytes(data)
        click.echo(f"Files:     {len(arc)}")
        click.echo(f"Alignment: 0x{alignment:X}")
        click.echo(f"Created:   {output}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
