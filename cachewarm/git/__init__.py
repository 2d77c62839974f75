"""Git helpers."""

from .clone import RepositoryFetcher, default_clone_dir

__all__ = ["RepositoryFetcher", "default_clone_dir"]
