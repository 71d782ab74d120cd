from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SPECIES = "homo_sapiens"
DEFAULT_ASSEMBLY = "GRCh38"
DEFAULT_RELEASE = 104
DEFAULT_WORK_DIR = "vep_cache"
DEFAULT_BASE_URL = "ftp://ftp.ensembl.org/pub"

# Upstream publishes no .fai/.gzi for this pair, so the indexes are built locally.
LOCAL_INDEX_GENOMES = frozenset({("homo_sapiens", "GRCh37")})


@dataclass(frozen=True)
class BuildConfig:
    """Settings for a single cache build.

    Parameters
    ----------
    species
        Ensembl species name, e.g. ``homo_sapiens`` or ``mus_musculus``.
    assembly
        Genome assembly, e.g. ``GRCh38``, ``GRCh37`` or ``GRCm38``.
    release
        Ensembl release number.
    work_dir
        Directory holding every downloaded, intermediate and output file.
    base_url
        Root of the Ensembl file server.
    threads
        Threads for block compression. All CPU cores if None.
    """

    species: str = DEFAULT_SPECIES
    assembly: str = DEFAULT_ASSEMBLY
    release: int = DEFAULT_RELEASE
    work_dir: Path = Path(DEFAULT_WORK_DIR)
    base_url: str = DEFAULT_BASE_URL
    threads: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildConfig:
        """Build a config from ``ENSEMBL_RELEASE``, ``VEP_SPECIES``,
        ``GENOME_ASSEMBLY``, ``VEP_CACHE_DIR`` and ``ENSEMBL_BASE_URL``.

        Usage
        -----
        >>> BuildConfig.from_env({"GENOME_ASSEMBLY": "GRCh37", "ENSEMBL_RELEASE": "90"})
        """
        if environ is None:
            environ = os.environ
        release = environ.get("ENSEMBL_RELEASE") or str(DEFAULT_RELEASE)
        try:
            release = int(release)
        except ValueError as err:
            raise ValueError(
                f"ENSEMBL_RELEASE must be an integer, got {release!r}"
            ) from err
        return cls(
            species=environ.get("VEP_SPECIES") or DEFAULT_SPECIES,
            assembly=environ.get("GENOME_ASSEMBLY") or DEFAULT_ASSEMBLY,
            release=release,
            work_dir=Path(environ.get("VEP_CACHE_DIR") or DEFAULT_WORK_DIR),
            base_url=environ.get("ENSEMBL_BASE_URL") or DEFAULT_BASE_URL,
        )

    @property
    def needs_local_index(self) -> bool:
        """Whether the sequence indexes have to be built locally."""
        return (self.species, self.assembly) in LOCAL_INDEX_GENOMES

    @property
    def num_threads(self) -> int:
        if self.threads is not None:
            return max(1, self.threads)
        return os.cpu_count() or 1
