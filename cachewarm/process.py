"""External process invocation and the subprocess failure policy."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence

Runner = Callable[..., int]


class FailurePolicy(str, Enum):
    """What a non-zero exit from an external tool does to the run."""

    IGNORE = "ignore"
    RAISE = "raise"


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a blocking external command."""

    args: Sequence[str]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command(self) -> str:
        return " ".join(self.args)


class ProcessFailedError(RuntimeError):
    """Raised under ``FailurePolicy.RAISE`` when a command exits non-zero."""

    def __init__(self, result: ProcessResult) -> None:
        super().__init__(f"`{result.command}` exited with status {result.returncode}")
        self.result = result


def run_command(
    args: Iterable[str],
    *,
    suppress_stdout: bool = False,
    timeout: float | None = None,
) -> int:
    """Run ``args`` to completion with inherited stdio and return the exit status.

    stderr is always inherited. stdout is inherited unless ``suppress_stdout``
    is set, in which case it is discarded.
    """
    completed = subprocess.run(
        list(args),
        check=False,
        stdout=subprocess.DEVNULL if suppress_stdout else None,
        timeout=timeout,
    )
    return completed.returncode


def check_result(
    result: ProcessResult,
    policy: FailurePolicy,
    logger: logging.Logger,
) -> ProcessResult:
    """Apply ``policy`` to ``result`` and hand the result back unchanged."""
    logger.debug("`%s` exited with status %d", result.command, result.returncode)
    if result.ok:
        return result
    if policy is FailurePolicy.RAISE:
        raise ProcessFailedError(result)
    logger.warning(
        "`%s` exited with status %d; continuing", result.command, result.returncode
    )
    return result


__all__ = [
    "FailurePolicy",
    "ProcessFailedError",
    "ProcessResult",
    "Runner",
    "check_result",
    "run_command",
]
