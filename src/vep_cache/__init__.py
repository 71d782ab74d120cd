from importlib.metadata import version

from . import ensembl
from ._core.config import BuildConfig
from .build import build_cache

__all__ = ["BuildConfig", "build_cache", "ensembl"]

__version__ = version("vep-cache")
