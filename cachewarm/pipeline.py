"""Clone, enumerate, generate and cache, in that order."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import WarmConfig
from .enumerator import find_files
from .git.clone import RepositoryFetcher
from .logging import get_logger
from .manifest import generate_imports, write_lines
from .process import ProcessResult
from .warmer import CacheWarmer


@dataclass
class PipelineReport:
    """What a pipeline run did."""

    clone: ProcessResult
    entries: int
    manifest: Path
    cache: Optional[ProcessResult]

    @property
    def returncode(self) -> int:
        if self.cache is None:
            return 0
        return self.cache.returncode


class Pipeline:
    """Runs the four stages strictly in sequence for one repository."""

    def __init__(
        self,
        config: WarmConfig | None = None,
        fetcher: RepositoryFetcher | None = None,
        warmer: CacheWarmer | None = None,
    ) -> None:
        self.config = config or WarmConfig()
        self.fetcher = fetcher or RepositoryFetcher(
            policy=self.config.failure_policy, timeout=self.config.timeout
        )
        self.warmer = warmer or CacheWarmer(
            self.config.cache_tool,
            policy=self.config.failure_policy,
            timeout=self.config.timeout,
        )
        self.logger = get_logger("pipeline")

    def run(self, *, dry_run: bool = False) -> PipelineReport:
        config = self.config

        self.logger.info("Cloning %s", config.repo_url)
        clone = self.fetcher.clone(config.repo_url, config.repo_dir, config.clone_args)

        self.logger.info("Generating the imports file")
        entries = find_files(config.files_glob, config.repo_dir, config.exclude)
        imports = generate_imports(entries, config.deps_url, config.repo_dir)
        written = write_lines(imports, config.deps_file)
        self.logger.debug("%d imports written to %s", written, config.deps_file)

        cache: Optional[ProcessResult] = None
        if dry_run:
            self.logger.info("Skipping the cache step (dry-run)")
        else:
            self.logger.info("Caching the dependencies")
            cache = self.warmer.cache(config.deps_file)

        self.logger.info("--- DONE ---")
        return PipelineReport(
            clone=clone,
            entries=written,
            manifest=config.deps_file,
            cache=cache,
        )


__all__ = ["Pipeline", "PipelineReport"]
