"""Warm a local dependency cache from a cloned source repository."""

__version__ = "0.1.0"
