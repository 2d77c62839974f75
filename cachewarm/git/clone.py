"""Shallow cloning of the source repository."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from ..logging import get_logger
from ..process import (
    FailurePolicy,
    ProcessResult,
    Runner,
    check_result,
    run_command,
)


def default_clone_dir(repo_url: str) -> str:
    """Return the directory name ``git clone`` would pick for ``repo_url``."""
    return repo_url[repo_url.rfind("/") + 1 :]


class RepositoryFetcher:
    """Clones a remote repository with the ``git`` command line client.

    The target directory is used as given. A directory left over from an
    earlier run makes ``git`` fail; what happens next is decided by the
    failure policy, nothing is cleaned up here.
    """

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        policy: FailurePolicy = FailurePolicy.IGNORE,
        timeout: float | None = None,
    ) -> None:
        self._runner = runner or run_command
        self.policy = policy
        self.timeout = timeout
        self.logger = get_logger("git.clone")

    def clone(
        self,
        repo_url: str,
        repo_dir: str | Path | None = None,
        args: Sequence[str] = (),
    ) -> ProcessResult:
        """Clone ``repo_url`` into ``repo_dir`` passing ``args`` to ``git clone``."""
        if not repo_url:
            raise ValueError("Repository URL must not be empty")
        target = str(repo_dir) if repo_dir is not None else default_clone_dir(repo_url)
        command = ["git", "clone", *args, "--", repo_url, target]
        self.logger.debug("Running %s", " ".join(command))
        returncode = self._run(command)
        return check_result(ProcessResult(command, returncode), self.policy, self.logger)

    def _run(self, args: Iterable[str]) -> int:
        return self._runner(args, timeout=self.timeout)


__all__ = ["RepositoryFetcher", "default_clone_dir"]
