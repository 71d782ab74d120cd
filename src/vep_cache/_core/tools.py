from __future__ import annotations

import shutil
import subprocess
from typing import Any, Protocol

from loguru import logger

# Installation hints shown when a tool is missing.
TOOL_HINTS = {
    "samtools": (
        "samtools is needed to create the .fai index. It can be installed with "
        "'sudo apt-get install samtools' or downloaded from "
        "http://www.htslib.org/download/"
    ),
    "bgzip": (
        "bgzip is needed to create the .gzi index. It can be installed with "
        "'sudo apt-get install tabix'"
    ),
}


class Tools(Protocol):
    """Access to external command-line tools."""

    def is_available(self, name: str) -> bool: ...

    def run(self, cmd: list[str], step_name: str) -> Any: ...


class SystemTools:
    """Tools found on PATH and run with :mod:`subprocess`."""

    def is_available(self, name: str) -> bool:
        return shutil.which(name) is not None

    def run(self, cmd: list[str], step_name: str) -> subprocess.CompletedProcess[str]:
        """
        Run cmd, logging its output. Raises CalledProcessError on a non-zero
        exit status.
        """
        cmd_str = " ".join(cmd)
        logger.info(f"Running {step_name} command: {cmd_str}")
        try:
            process = subprocess.run(  # noqa: S603
                cmd,
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"{step_name} failed with return code {e.returncode}")
            logger.error(f"STDERR: {e.stderr}")
            raise
        logger.debug(f"{step_name} completed successfully.")
        if process.stdout:
            logger.info(f"{step_name} STDOUT:\n{process.stdout.strip()}")
        if process.stderr:
            logger.info(f"{step_name} STDERR:\n{process.stderr.strip()}")
        return process
