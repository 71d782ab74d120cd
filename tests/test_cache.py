from ftplib import error_perm

import pytest
import requests
from loguru import logger

from vep_cache._core import cache
from vep_cache._core.errors import RemoteFileNotFoundError

URL = "ftp://ftp.ensembl.org/pub/release-104/variation/vep/homo_sapiens_vep_104_GRCh38.tar.gz"


def _http_error(status_code):
    response = requests.Response()
    response.status_code = status_code
    return requests.HTTPError(response=response)


def test_retrieve_uses_remote_name(tmp_path, monkeypatch):
    calls = {}

    def fake_retrieve(**kwargs):
        calls.update(kwargs)
        return str(kwargs["path"] / kwargs["fname"])

    monkeypatch.setattr(cache.pooch, "retrieve", fake_retrieve)
    path = cache.retrieve_file(URL, tmp_path)

    assert path == tmp_path / "homo_sapiens_vep_104_GRCh38.tar.gz"
    assert calls["url"] == URL
    assert calls["known_hash"] is None


@pytest.mark.parametrize(
    "error", [_http_error(404), error_perm("550 Failed to open file.")]
)
def test_missing_remote_file(tmp_path, monkeypatch, error):
    def fake_retrieve(**kwargs):
        raise error

    monkeypatch.setattr(cache.pooch, "retrieve", fake_retrieve)
    with pytest.raises(RemoteFileNotFoundError, match=r"homo_sapiens_vep_104"):
        cache.retrieve_file(URL, tmp_path)
    # still a ValueError, like other lookups of unknown releases
    with pytest.raises(ValueError):
        cache.retrieve_file(URL, tmp_path)


@pytest.mark.parametrize(
    "error", [_http_error(500), error_perm("530 Login incorrect.")]
)
def test_other_errors_propagate(tmp_path, monkeypatch, error):
    def fake_retrieve(**kwargs):
        raise error

    monkeypatch.setattr(cache.pooch, "retrieve", fake_retrieve)
    with pytest.raises(type(error)):
        cache.retrieve_file(URL, tmp_path)


def test_retrieve_leaves_progress_messages_to_caller(tmp_path, monkeypatch):
    records = []
    handler_id = logger.add(lambda m: records.append(m.record["message"]), level="INFO")
    monkeypatch.setattr(
        cache.pooch, "retrieve", lambda **kwargs: str(kwargs["path"] / kwargs["fname"])
    )
    try:
        cache.retrieve_file(URL, tmp_path)
    finally:
        logger.remove(handler_id)
    assert records == []
