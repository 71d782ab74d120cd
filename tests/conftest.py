import gzip
import io
import tarfile
from pathlib import Path

import pytest

from vep_cache.ensembl import cache_file_name

FASTA = b">1\nACGTACGTNN\n"


def write_cache_archive(path: Path, species: str, release: int, assembly: str):
    """Write a minimal VEP cache tarball with a single region file."""
    member = f"{species}/{release}_{assembly}/1/1-1000000.gz"
    payload = gzip.compress(b"cache data\n")
    with tarfile.open(path, "w:gz") as tar:
        info = tarfile.TarInfo(member)
        info.size = len(payload)
        tar.addfile(info, io.BytesIO(payload))


class FakeFetcher:
    """Records every download and writes plausible content instead."""

    def __init__(self):
        self.urls = []

    def __call__(self, url, directory):
        self.urls.append(url)
        name = url.rsplit("/", 1)[-1]
        path = Path(directory) / name
        if name.endswith(".tar.gz"):
            species, rest = name.split("_vep_")
            release, assembly = rest.removesuffix(".tar.gz").split("_", 1)
            assert name == cache_file_name(species, int(release), assembly)
            write_cache_archive(path, species, int(release), assembly)
        elif name.endswith(".gz"):
            path.write_bytes(gzip.compress(FASTA))
        else:
            path.write_text(f"index for {name}\n")
        return path


class FakeTools:
    """Stands in for bgzip and samtools, creating the files they would."""

    def __init__(self, available=("samtools", "bgzip")):
        self.available = set(available)
        self.calls = []

    def is_available(self, name):
        return name in self.available

    def run(self, cmd, step_name):
        self.calls.append(list(cmd))
        if cmd[0] == "bgzip":
            fasta = Path(cmd[-1])
            compressed = fasta.with_name(fasta.name + ".gz")
            compressed.write_bytes(gzip.compress(fasta.read_bytes()))
            Path(f"{compressed}.gzi").write_bytes(b"\x00")
            fasta.unlink()
        elif cmd[:2] == ["samtools", "faidx"]:
            Path(f"{cmd[-1]}.fai").write_text("1\t10\t3\t10\t11\n")

    def tool_calls(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def tools():
    return FakeTools()


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path / "vep_cache"
