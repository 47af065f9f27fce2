"""Main CLI entry point for project-zip."""

from __future__ import annotations

import zipfile
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import click

from .config import ExportConfig
from .errors import ArchiveError
from .exporters.text import TextExporter
from .exporters.zip import ZipExporter, slugify, suggest_filename
from .manifest import ManifestGenerator, archive_metadata
from .planner import ExportTarget, Planner, iter_directory_files
from .timestamps import DOS_EPOCH


@click.group()
def cli():
    """Project Zip: package generated projects into stored ZIP archives."""
    pass


def archive_name(display_name: str, reproducible: bool) -> str:
    if reproducible:
        return f"{slugify(display_name)}.zip"
    return suggest_filename(display_name)


def process_target(
    target: ExportTarget,
    dist: Path,
    default_timestamp: Optional[datetime],
    manifest: ManifestGenerator,
    reproducible: bool = False,
) -> Path:
    """
    Exports a single project.

    1. Resolves the project's entries (directory walk and inline file tree).
    2. Builds the archive on a builder owned by this task.
    3. Writes it to 'dist' and records it in the manifest.
    """
    click.echo(f"Exporting {target.name}...")

    entries = Planner.entries(target)
    zip_exporter = ZipExporter(timestamp=target.timestamp or default_timestamp)

    dest_zip = dist / (target.output or archive_name(target.display_name, reproducible))
    data = zip_exporter.export(entries, dest_zip)
    manifest.add_artifact(target.name, dest_zip, archive_metadata(data, len(entries)))
    return dest_zip


@cli.command()
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=Path("project_zip.yaml"),
    help="Path to the export config YAML.",
)
@click.option(
    "--dist",
    type=click.Path(path_type=Path),
    default=Path("dist"),
    help="Output directory for archives.",
)
@click.option(
    "--reproducible",
    is_flag=True,
    help="Stamp entries with 1980-01-01 and drop the time from archive names.",
)
@click.option(
    "-j", "--concurrency", type=int, default=1, help="Number of parallel exports."
)
def export(config: Path, dist: Path, reproducible: bool, concurrency: int):
    """Exports every project defined in the configuration as a ZIP archive."""
    export_cfg = ExportConfig.from_yaml(config)
    targets = Planner(export_cfg).plan()

    default_timestamp = DOS_EPOCH if reproducible else None
    manifest = ManifestGenerator(dist)

    dist.mkdir(parents=True, exist_ok=True)

    click.echo(f"Found {len(targets)} export tasks. Parallelism: {concurrency}")

    # Each task builds its own archive; only the manifest is shared.
    failures = 0
    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        futures = {
            executor.submit(
                process_target,
                target,
                dist,
                default_timestamp,
                manifest,
                reproducible,
            ): target
            for target in targets
        }
        for future in as_completed(futures):
            target = futures[future]
            try:
                future.result()
            except (ArchiveError, OSError) as e:
                failures += 1
                click.echo(f"Export failed for {target.name}: {e}", err=True)

    manifest.save()
    if failures:
        click.echo(f"\n{failures} of {len(targets)} exports failed.", err=True)
        raise SystemExit(1)
    click.echo("\nExport complete!")


@cli.command()
@click.argument("src_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Archive path. Defaults to a name derived from the directory.",
)
@click.option("--name", help="Project name used for the suggested archive name.")
@click.option("--exclude", multiple=True, help="Glob pattern of paths to skip.")
@click.option("--reproducible", is_flag=True, help="Stamp entries with 1980-01-01.")
def pack(
    src_dir: Path,
    output: Optional[Path],
    name: Optional[str],
    exclude: Tuple[str, ...],
    reproducible: bool,
):
    """Packages a single directory into a ZIP archive."""
    display_name = name or src_dir.resolve().name
    dest_zip = output or Path(archive_name(display_name, reproducible))
    zip_exporter = ZipExporter(timestamp=DOS_EPOCH if reproducible else None)

    try:
        entries = list(iter_directory_files(src_dir, list(exclude)))
        zip_exporter.export(entries, dest_zip)
    except (ArchiveError, OSError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Packed {len(entries)} files.")


@cli.command()
@click.argument("src_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the text here instead of stdout.",
)
@click.option("--exclude", multiple=True, help="Glob pattern of paths to skip.")
def flatten(src_dir: Path, output: Optional[Path], exclude: Tuple[str, ...]):
    """Prints every non-empty file of a directory under '// ===== path =====' banners."""
    text = TextExporter().render(iter_directory_files(src_dir, list(exclude)))
    if output:
        output.write_text(text, encoding="utf-8")
        click.echo(f"Wrote {output}")
    else:
        click.echo(text, nl=False)


@cli.command()
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def verify(archive: Path):
    """Checks every entry's CRC-32 with a standard ZIP reader and lists the entries."""
    try:
        with zipfile.ZipFile(archive) as zf:
            bad = zf.testzip()
            infos = zf.infolist()
    except zipfile.BadZipFile as e:
        raise click.ClickException(f"{archive} is not a valid ZIP archive: {e}") from e

    if bad is not None:
        raise click.ClickException(f"CRC mismatch in {archive}: {bad}")

    for info in infos:
        stamp = datetime(*info.date_time).isoformat(sep=" ")
        click.echo(f"{info.file_size:>10}  {stamp}  {info.filename}")
    click.echo(f"{len(infos)} entries OK")


def main():
    cli()


if __name__ == "__main__":
    main()
