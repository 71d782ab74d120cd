"""File names and download locations on the Ensembl file server."""

from __future__ import annotations

from typing import Final

from vep_cache._core.config import BuildConfig

SEQUENCE_FILE_TEMPLATE: Final = "{species}.{assembly}.dna.toplevel.fa.gz"
CACHE_FILE_TEMPLATE: Final = "{species}_vep_{release}_{assembly}.tar.gz"
OUTPUT_FILE_TEMPLATE: Final = "vep_cache_{species}_{assembly}_{release}.tar.gz"

RELEASE_URL_TEMPLATE: Final = "{base}/release-{release}"
GRCH37_RELEASE_URL_TEMPLATE: Final = "{base}/grch37/release-{release}"

INDEX_SUFFIXES: Final = (".fai", ".gzi")

# The cache directory was renamed from "VEP" to "vep" after release 95.
LAST_UPPERCASE_VEP_RELEASE: Final = 95


def sequence_file_name(species: str, assembly: str) -> str:
    """Name of the toplevel FASTA file, e.g. ``Homo_sapiens.GRCh38.dna.toplevel.fa.gz``.

    Unlike the cache archive, the species is capitalised and the release
    is not part of the name.
    """
    return SEQUENCE_FILE_TEMPLATE.format(
        species=species[:1].upper() + species[1:], assembly=assembly
    )


def cache_file_name(species: str, release: int, assembly: str) -> str:
    """Name of the upstream cache archive, e.g. ``homo_sapiens_vep_104_GRCh38.tar.gz``."""
    return CACHE_FILE_TEMPLATE.format(
        species=species, release=release, assembly=assembly
    )


def output_file_name(species: str, assembly: str, release: int) -> str:
    """Name of the repackaged archive, e.g. ``vep_cache_homo_sapiens_GRCh38_104.tar.gz``."""
    return OUTPUT_FILE_TEMPLATE.format(
        species=species, assembly=assembly, release=release
    )


def cache_subdir(species: str, release: int, assembly: str) -> str:
    """Directory inside the cache tree that holds the sequence files."""
    return f"{species}/{release}_{assembly}"


def _release_url(config: BuildConfig) -> str:
    return RELEASE_URL_TEMPLATE.format(
        base=config.base_url.rstrip("/"), release=config.release
    )


def remote_sequence_url(config: BuildConfig) -> str:
    """URL of the FASTA file.

    GRCh37 lives in its own tree and only has plain gzipped FASTA under
    ``dna``; everything else is fetched block-compressed from ``dna_index``.
    """
    fasta = sequence_file_name(config.species, config.assembly)
    if config.needs_local_index:
        base = GRCH37_RELEASE_URL_TEMPLATE.format(
            base=config.base_url.rstrip("/"), release=config.release
        )
        return f"{base}/fasta/{config.species}/dna/{fasta}"
    return f"{_release_url(config)}/fasta/{config.species}/dna_index/{fasta}"


def remote_index_urls(config: BuildConfig) -> list[str]:
    """URLs of the prebuilt ``.fai`` and ``.gzi`` indexes, empty if built locally."""
    if config.needs_local_index:
        return []
    sequence_url = remote_sequence_url(config)
    return [sequence_url + suffix for suffix in INDEX_SUFFIXES]


def remote_cache_url(config: BuildConfig) -> str:
    """URL of the cache archive."""
    vep_dir = "VEP" if config.release <= LAST_UPPERCASE_VEP_RELEASE else "vep"
    cache_file = cache_file_name(config.species, config.release, config.assembly)
    return f"{_release_url(config)}/variation/{vep_dir}/{cache_file}"
