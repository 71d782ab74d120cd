"""
Command line interface for building VEP cache archives.

Usage:
    vep-cache build --species homo_sapiens --assembly GRCh38 --release 104
    vep-cache urls --assembly GRCh37 --release 90
    vep-cache version

Every option falls back to its environment variable (ENSEMBL_RELEASE,
VEP_SPECIES, GENOME_ASSEMBLY, VEP_CACHE_DIR, ENSEMBL_BASE_URL).
"""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from vep_cache import __version__
from vep_cache._core.config import BuildConfig
from vep_cache._core.errors import BuildStepError, MissingToolError
from vep_cache.build import build_cache
from vep_cache.ensembl.naming import (
    output_file_name,
    remote_cache_url,
    remote_index_urls,
    remote_sequence_url,
)

console = Console()

ENV_VARS = {
    "VEP_SPECIES": "species",
    "GENOME_ASSEMBLY": "assembly",
    "ENSEMBL_RELEASE": "release",
    "VEP_CACHE_DIR": "work_dir",
    "ENSEMBL_BASE_URL": "base_url",
}

app = typer.Typer(
    name="vep-cache",
    help="Download Ensembl VEP cache files and repackage them as a single archive",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

SpeciesOption = typer.Option(
    None, "--species", "-s", help="Species name (default: $VEP_SPECIES or homo_sapiens)"
)
AssemblyOption = typer.Option(
    None, "--assembly", "-a", help="Genome assembly (default: $GENOME_ASSEMBLY or GRCh38)"
)
ReleaseOption = typer.Option(
    None, "--release", "-r", help="Ensembl release (default: $ENSEMBL_RELEASE or 104)"
)
WorkDirOption = typer.Option(
    None, "--work-dir", "-w", help="Working directory (default: $VEP_CACHE_DIR or vep_cache)"
)
BaseUrlOption = typer.Option(
    None, "--base-url", help="Ensembl file server root (default: $ENSEMBL_BASE_URL)"
)


def configure_logging(verbosity: int) -> None:
    """Configure loguru logging based on verbosity level.

    Parameters
    ----------
    verbosity
        0 for WARNING, 1 for INFO, 2 or more for DEBUG.
    """
    logger.remove()

    if verbosity <= 0:
        level = "WARNING"
    elif verbosity == 1:
        level = "INFO"
    else:
        level = "DEBUG"

    logger.add(
        sys.stderr,
        level=level,
        format="<level>{level: <8}</level> | {message}",
    )


def resolve_config(
    species: str | None = None,
    assembly: str | None = None,
    release: int | None = None,
    work_dir: Path | None = None,
    base_url: str | None = None,
    threads: int | None = None,
) -> BuildConfig:
    """Environment config with any command line values applied on top."""
    overrides = {
        "species": species,
        "assembly": assembly,
        "release": release,
        "work_dir": work_dir,
        "base_url": base_url,
        "threads": threads,
    }
    # Options win over the environment, so an overridden variable is never parsed.
    environ = {
        k: v for k, v in os.environ.items() if overrides.get(ENV_VARS.get(k)) is None
    }
    try:
        config = BuildConfig.from_env(environ)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    return dataclasses.replace(
        config, **{k: v for k, v in overrides.items() if v is not None}
    )


@app.command("build")
def build(
    species: str | None = SpeciesOption,
    assembly: str | None = AssemblyOption,
    release: int | None = ReleaseOption,
    work_dir: Path | None = WorkDirOption,
    base_url: str | None = BaseUrlOption,
    threads: int | None = typer.Option(
        None, "--threads", "-t", min=1, help="bgzip threads (default: all cores)"
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="More logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    """Download, merge and repackage a VEP cache."""
    configure_logging(0 if quiet else 1 + verbose)
    config = resolve_config(species, assembly, release, work_dir, base_url, threads)

    try:
        result = build_cache(config)
    except BuildStepError as e:
        if isinstance(e.cause, MissingToolError):
            console.print(f"[red]ERROR:[/red] {e.cause.tool} is not installed.")
            console.print(e.cause.hint)
        else:
            console.print(f"[red]ERROR:[/red] step '{e.step}' failed: {e.cause}")
        raise typer.Exit(e.exit_code) from e

    output = result.output.resolve()
    if result.verified:
        console.print(f"[green]Successfully created cache file at {output}[/green]")
    else:
        console.print(f"[red]ERROR:[/red] Something went wrong when creating {output} !")


@app.command("urls")
def urls(
    species: str | None = SpeciesOption,
    assembly: str | None = AssemblyOption,
    release: int | None = ReleaseOption,
    work_dir: Path | None = WorkDirOption,
    base_url: str | None = BaseUrlOption,
) -> None:
    """Show what would be downloaded and where the archive would go."""
    config = resolve_config(species, assembly, release, work_dir, base_url)
    typer.echo(remote_sequence_url(config))
    for url in remote_index_urls(config):
        typer.echo(url)
    typer.echo(remote_cache_url(config))
    output = config.work_dir / output_file_name(
        config.species, config.assembly, config.release
    )
    typer.echo(str(output))


@app.command("version")
def version() -> None:
    """Show the version."""
    typer.echo(f"vep-cache {__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
