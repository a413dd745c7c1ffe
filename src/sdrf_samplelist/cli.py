#!/usr/bin/env python3
"""
SDRF sample list CLI - Write SDRF sample metadata into the sampleList of an mzML file.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, Tuple

import click

from sdrf_samplelist import __version__
from sdrf_samplelist.config import DEFAULT_IDENTITY_COLUMNS
from sdrf_samplelist.exceptions import SampleListError
from sdrf_samplelist.utils.logging import get_logger, setup_logging

logger = get_logger("cli")


def _fail(message: str) -> None:
    click.secho(message, fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="sdrf-samplelist")
def cli():
    """SDRF sample list - Annotate mzML files with SDRF sample metadata."""
    pass


@cli.command("annotate")
@click.option(
    "--sdrf-file",
    "-s",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the SDRF file",
)
@click.option(
    "--input",
    "-i",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="mzML file to annotate (default: read from stdin)",
)
@click.option(
    "--output",
    "-o",
    "output_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the annotated mzML (default: stdout)",
)
@click.option(
    "--data-file",
    "-f",
    default=None,
    help="Data file to select SDRF rows for (default: first sourceFile in the mzML)",
)
@click.option(
    "--group-by",
    "-g",
    multiple=True,
    help="Column identifying a sample; repeat for several "
         f"(default: {', '.join(DEFAULT_IDENTITY_COLUMNS)})",
)
@click.option(
    "--allow-empty",
    is_flag=True,
    help="Write an empty sampleList instead of failing when the data file is not in the SDRF",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG)",
)
def annotate(
    sdrf_file: Path,
    input_file: Optional[Path],
    output_file: Optional[Path],
    data_file: Optional[str],
    group_by: Tuple[str, ...],
    allow_empty: bool,
    verbose: int,
):
    """
    Add the SDRF samples of one raw file to an mzML sampleList.

    Reads mzML from stdin (or --input) and writes it to stdout (or --output),
    with the sampleList replaced by the SDRF rows whose comment[data file]
    matches the mzML source file.

    \b
    Examples:
      ThermoRawFileParser -i=run1.raw -f=2 -o=- | sdrf-samplelist annotate -s exp.sdrf.tsv > run1.mzML
      sdrf-samplelist annotate -s exp.sdrf.tsv -i run1.mzML -o run1.annotated.mzML
      sdrf-samplelist annotate -s exp.sdrf.tsv -i run1.mzML -f run1.raw -g "assay name"
    """
    setup_logging(verbose)

    from sdrf_samplelist.core.annotator import SampleListAnnotator

    annotator = SampleListAnnotator(
        sdrf_file=sdrf_file,
        data_file=data_file,
        identity_columns=list(group_by) if group_by else None,
        allow_empty=allow_empty,
    )

    instream = open(input_file, "rb") if input_file else click.get_binary_stream("stdin")
    tmp_path = None
    try:
        if output_file is None:
            result = annotator.annotate(instream, click.get_binary_stream("stdout"))
        else:
            # Write next to the target and move into place only on success
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=output_file.parent, prefix=f".{output_file.name}.", delete=False
            ) as tmp:
                tmp_path = Path(tmp.name)
                result = annotator.annotate(instream, tmp)
            os.replace(tmp_path, output_file)
            tmp_path = None
    except SampleListError as e:
        _fail(f"{e.kind}: {e}")
    except ValueError as e:
        _fail(f"Error: {e}")
    finally:
        if input_file:
            instream.close()
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()

    logger.info(f"Annotated {result.data_file} with {result.num_samples} samples")


@cli.command("info")
@click.option(
    "--sdrf-file",
    "-s",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to SDRF file",
)
@click.option(
    "--data-file",
    "-f",
    default=None,
    help="Show the samples that would be written for this data file",
)
@click.option(
    "--group-by",
    "-g",
    multiple=True,
    help="Column identifying a sample; repeat for several",
)
def info(sdrf_file: Path, data_file: Optional[str], group_by: Tuple[str, ...]):
    """
    Display information about an SDRF file.

    \b
    Example:
      sdrf-samplelist info -s exp.sdrf.tsv
      sdrf-samplelist info -s exp.sdrf.tsv -f run1.raw
    """
    from sdrf_samplelist.core.annotator import SampleListAnnotator
    from sdrf_samplelist.model import CVParam
    from sdrf_samplelist.sdrf.reader import SDRFReader

    reader = SDRFReader(sdrf_file)
    try:
        table = reader.read()
    except SampleListError as e:
        _fail(f"{e.kind}: {e}")

    click.echo(f"SDRF File: {sdrf_file}")
    click.echo(f"Rows: {len(table)}")
    click.echo(f"Columns: {len(table.columns)}")

    data_files = reader.get_data_files()
    if data_files:
        click.echo(f"Data files referenced: {len(data_files)}")
        for f in data_files[:5]:
            click.echo(f"  - {f}")
        if len(data_files) > 5:
            click.echo(f"  ... and {len(data_files) - 5} more")

    if not data_file:
        return

    annotator = SampleListAnnotator(
        table=table,
        identity_columns=list(group_by) if group_by else None,
    )
    try:
        sample_list = annotator.build_sample_list(data_file)
    except SampleListError as e:
        _fail(f"{e.kind}: {e}")

    click.echo()
    click.echo(f"Samples for {data_file}: {sample_list.count}")
    click.echo("-" * 40)
    for sample in sample_list:
        click.echo(f"  {sample.id}: {sample.name}")
        for param in sample.params:
            if isinstance(param, CVParam):
                click.echo(f"    [{param.accession}] {param.name} = {param.value}")
            else:
                click.echo(f"    {param.name} = {param.value}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
