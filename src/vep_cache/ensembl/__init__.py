from .naming import (
    cache_file_name,
    cache_subdir,
    output_file_name,
    remote_cache_url,
    remote_index_urls,
    remote_sequence_url,
    sequence_file_name,
)

__all__ = [
    "cache_file_name",
    "cache_subdir",
    "output_file_name",
    "remote_cache_url",
    "remote_index_urls",
    "remote_sequence_url",
    "sequence_file_name",
]
