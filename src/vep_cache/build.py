from __future__ import annotations

import gzip
import os
import shutil
import tarfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from vep_cache._core.cache import retrieve_file
from vep_cache._core.config import BuildConfig
from vep_cache._core.errors import BuildStepError, MissingToolError
from vep_cache._core.tools import TOOL_HINTS, SystemTools, Tools
from vep_cache.ensembl.naming import (
    cache_file_name,
    cache_subdir,
    output_file_name,
    remote_cache_url,
    remote_index_urls,
    remote_sequence_url,
    sequence_file_name,
)

Fetcher = Callable[[str, Path], Path]

# Order matters: the first missing tool is the one reported.
LOCAL_INDEX_TOOLS = ("samtools", "bgzip")


@dataclass
class BuildContext:
    """State shared by the pipeline steps of one build."""

    config: BuildConfig
    fetch: Fetcher
    tools: Tools
    verified: bool = False

    @property
    def work_dir(self) -> Path:
        return self.config.work_dir

    @property
    def sequence_file(self) -> str:
        return sequence_file_name(self.config.species, self.config.assembly)

    @property
    def cache_archive(self) -> Path:
        c = self.config
        return self.work_dir / cache_file_name(c.species, c.release, c.assembly)

    @property
    def species_dir(self) -> Path:
        return self.work_dir / self.config.species

    @property
    def output(self) -> Path:
        c = self.config
        return self.work_dir / output_file_name(c.species, c.assembly, c.release)


@dataclass(frozen=True)
class Step:
    name: str
    run: Callable[[BuildContext], None]


@dataclass
class BuildResult:
    output: Path
    verified: bool
    steps: list[str] = field(default_factory=list)


def check_tools(ctx: BuildContext) -> None:
    """Fail early if the local-index tools are needed but missing."""
    if not ctx.config.needs_local_index:
        return
    for tool in LOCAL_INDEX_TOOLS:
        if not ctx.tools.is_available(tool):
            raise MissingToolError(tool, TOOL_HINTS[tool])


def decompress_file(path: Path) -> Path:
    """Gunzip path next to itself and remove the compressed file."""
    target = path.with_suffix("")
    with gzip.open(path, "rb") as src, open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    path.unlink()
    return target


def acquire_sequence(ctx: BuildContext) -> None:
    """Put the block-compressed FASTA and its .fai and .gzi indexes in the work dir."""
    sequence_url = remote_sequence_url(ctx.config)
    if not ctx.config.needs_local_index:
        logger.info(f"Downloading {sequence_url} and its index files ...")
        for url in [sequence_url, *remote_index_urls(ctx.config)]:
            ctx.fetch(url, ctx.work_dir)
        return

    logger.info(f"Downloading {sequence_url}")
    compressed = ctx.fetch(sequence_url, ctx.work_dir)
    logger.info("Decompressing fasta file...")
    fasta = decompress_file(compressed)
    logger.info("Block compressing fasta file and creating .gzi index...")
    ctx.tools.run(
        ["bgzip", "--index", "--threads", str(ctx.config.num_threads), str(fasta)],
        "bgzip",
    )
    logger.info("Creating .fai index...")
    ctx.tools.run(
        ["samtools", "faidx", str(ctx.work_dir / ctx.sequence_file)], "samtools faidx"
    )


def acquire_cache(ctx: BuildContext) -> None:
    url = remote_cache_url(ctx.config)
    logger.info(f"Downloading {url} ...")
    ctx.fetch(url, ctx.work_dir)


def extract_cache(ctx: BuildContext) -> None:
    logger.info("Decompressing cache files ...")
    with tarfile.open(ctx.cache_archive, "r:gz") as tar:
        tar.extractall(ctx.work_dir, filter="data")


def merge_sequence(ctx: BuildContext) -> None:
    """Move the FASTA file and every companion index into the cache tree."""
    c = ctx.config
    dest = ctx.work_dir / cache_subdir(c.species, c.release, c.assembly)
    dest.mkdir(parents=True, exist_ok=True)
    logger.info("Moving fasta files to the cache structure ...")
    for path in sorted(ctx.work_dir.glob(f"{ctx.sequence_file}*")):
        if path.is_file():
            logger.debug(f"Moving {path.name} to {dest}")
            shutil.move(path, dest / path.name)


def package_cache(ctx: BuildContext) -> None:
    logger.info("Creating single tar.gz file for the whole cache ...")
    with tarfile.open(ctx.output, "w:gz") as tar:
        tar.add(ctx.species_dir, arcname=ctx.config.species)


def is_readable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.R_OK)


def verify_and_cleanup(ctx: BuildContext) -> None:
    """Remove the extracted tree and the upstream archive once the output is readable."""
    ctx.verified = is_readable(ctx.output)
    if not ctx.verified:
        logger.error(f"Something went wrong when creating {ctx.output} !")
        return
    logger.info("Cleaning up ...")
    shutil.rmtree(ctx.species_dir)
    ctx.cache_archive.unlink(missing_ok=True)


STEPS = [
    Step("check-tools", check_tools),
    Step("sequence", acquire_sequence),
    Step("cache", acquire_cache),
    Step("extract", extract_cache),
    Step("merge", merge_sequence),
    Step("package", package_cache),
    Step("verify", verify_and_cleanup),
]


def build_cache(
    config: BuildConfig,
    fetch: Fetcher | None = None,
    tools: Tools | None = None,
) -> BuildResult:
    """Download a VEP cache and its FASTA and repackage them as one archive.

    Parameters
    ----------
    config
        What to build and where.
    fetch
        Called as ``fetch(url, directory)`` for every download. Uses pooch if None.
    tools
        Access to bgzip and samtools. Uses the tools on PATH if None.

    Returns
    -------
    The output path and whether it was verified readable.

    Raises
    ------
    BuildStepError
        For the first step that fails, wrapping its exception.

    Usage
    -----
    >>> vc.build_cache(vc.BuildConfig(species="mus_musculus", assembly="GRCm39", release=110))
    """
    ctx = BuildContext(
        config=config,
        fetch=fetch if fetch is not None else retrieve_file,
        tools=tools if tools is not None else SystemTools(),
    )
    ctx.work_dir.mkdir(parents=True, exist_ok=True)
    result = BuildResult(output=ctx.output, verified=False)
    for step in STEPS:
        logger.debug(f"Starting step '{step.name}'")
        try:
            step.run(ctx)
        except Exception as err:
            logger.error(f"Step '{step.name}' failed: {err}")
            raise BuildStepError(step.name, err) from err
        result.steps.append(step.name)
    result.verified = ctx.verified
    if result.verified:
        logger.info(f"Successfully created cache file at {ctx.output.resolve()}")
    return result
