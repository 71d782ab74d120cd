from __future__ import annotations

from ftplib import error_perm
from pathlib import Path

import pooch
from loguru import logger
from requests.exceptions import HTTPError

from vep_cache._core.errors import RemoteFileNotFoundError


def retrieve_file(url: str, directory: Path) -> Path:
    """Download the file at url into directory, keeping its remote name.

    Files already present in directory are not downloaded again.
    """
    fname = url.rsplit("/", 1)[-1]
    logger.debug(f"Fetching {fname} into {directory}")
    try:
        path = pooch.retrieve(
            url=url,
            known_hash=None,
            fname=fname,
            path=directory,
            progressbar=True,
        )
    except HTTPError as err:
        if err.response is not None and err.response.status_code == 404:
            raise RemoteFileNotFoundError(url) from err
        raise
    except error_perm as err:
        # FTP 550: file unavailable
        if str(err).startswith("550"):
            raise RemoteFileNotFoundError(url) from err
        raise
    return Path(path)
