"""Dependency cache warming through the external cache tool."""

from __future__ import annotations

import os
import shutil
from typing import Iterable

from .logging import get_logger
from .process import (
    FailurePolicy,
    ProcessResult,
    Runner,
    check_result,
    run_command,
)

DEFAULT_CACHE_TOOL = "deno"


def default_cache_tool() -> str:
    """Return the cache tool executable, preferring the one found on PATH."""
    return shutil.which(DEFAULT_CACHE_TOOL) or DEFAULT_CACHE_TOOL


class CacheWarmer:
    """Runs ``<tool> cache <files...>`` so the tool fetches every import."""

    def __init__(
        self,
        tool: str | None = None,
        runner: Runner | None = None,
        *,
        policy: FailurePolicy = FailurePolicy.IGNORE,
        timeout: float | None = None,
    ) -> None:
        self.tool = tool or default_cache_tool()
        self._runner = runner or run_command
        self.policy = policy
        self.timeout = timeout
        self.logger = get_logger("warmer")

    def cache(self, *files: str | os.PathLike[str]) -> ProcessResult:
        if not files:
            raise ValueError("At least one file is required to warm the cache")
        command = [self.tool, "cache", *(os.fspath(file) for file in files)]
        self.logger.debug("Running %s", " ".join(command))
        returncode = self._run(command)
        return check_result(ProcessResult(command, returncode), self.policy, self.logger)

    def _run(self, args: Iterable[str]) -> int:
        return self._runner(args, suppress_stdout=True, timeout=self.timeout)


__all__ = ["CacheWarmer", "DEFAULT_CACHE_TOOL", "default_cache_tool"]
