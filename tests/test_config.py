from pathlib import Path

import pytest

from vep_cache import BuildConfig


def test_defaults():
    config = BuildConfig.from_env({})
    assert config.species == "homo_sapiens"
    assert config.assembly == "GRCh38"
    assert config.release == 104
    assert config.work_dir == Path("vep_cache")
    assert config.base_url == "ftp://ftp.ensembl.org/pub"
    assert not config.needs_local_index


def test_environment_overrides():
    config = BuildConfig.from_env(
        {
            "VEP_SPECIES": "mus_musculus",
            "GENOME_ASSEMBLY": "GRCm38",
            "ENSEMBL_RELEASE": "102",
            "VEP_CACHE_DIR": "/data/vep",
        }
    )
    assert config == BuildConfig(
        species="mus_musculus",
        assembly="GRCm38",
        release=102,
        work_dir=Path("/data/vep"),
    )


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("GENOME_ASSEMBLY", "GRCh37")
    monkeypatch.setenv("ENSEMBL_RELEASE", "90")
    config = BuildConfig.from_env()
    assert config.release == 90
    assert config.needs_local_index


def test_invalid_release():
    with pytest.raises(ValueError, match=r"ENSEMBL_RELEASE"):
        BuildConfig.from_env({"ENSEMBL_RELEASE": "latest"})


def test_config_is_immutable():
    config = BuildConfig()
    with pytest.raises(AttributeError):
        config.release = 90


def test_num_threads():
    assert BuildConfig().num_threads >= 1
    assert BuildConfig(threads=4).num_threads == 4
    assert BuildConfig(threads=0).num_threads == 1


def test_empty_values_use_defaults():
    config = BuildConfig.from_env(
        {
            "VEP_SPECIES": "",
            "GENOME_ASSEMBLY": "",
            "ENSEMBL_RELEASE": "",
            "VEP_CACHE_DIR": "",
            "ENSEMBL_BASE_URL": "",
        }
    )
    assert config == BuildConfig()
