from __future__ import annotations

import subprocess


class VepCacheError(Exception):
    """Base class for errors raised while building a VEP cache."""


class MissingToolError(VepCacheError):
    """A command-line tool required for the build is not on PATH."""

    def __init__(self, tool: str, hint: str):
        self.tool = tool
        self.hint = hint
        super().__init__(f"{tool} is not installed. {hint}")


class RemoteFileNotFoundError(VepCacheError, ValueError):
    """The upstream server does not have the requested file."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"No file found at {url}. Check the species, assembly and release."
        )


class BuildStepError(VepCacheError):
    """A pipeline step failed; wraps the original exception."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"Step '{step}' failed: {cause}")

    @property
    def exit_code(self) -> int:
        if isinstance(self.cause, subprocess.CalledProcessError):
            code = self.cause.returncode
            # killed by a signal: report it the way a shell does
            if code < 0:
                return 128 - code
            return code or 1
        return 1
