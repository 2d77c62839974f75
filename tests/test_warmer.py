"""Tests for cachewarm.warmer."""

from __future__ import annotations

from pathlib import Path

import pytest

from cachewarm import warmer
from cachewarm.process import FailurePolicy, ProcessFailedError
from cachewarm.warmer import CacheWarmer, default_cache_tool
from tests._fixtures.runners import RecordingRunner


def test_cache_runs_tool_with_files() -> None:
    runner = RecordingRunner()
    cache_warmer = CacheWarmer("/opt/deno/bin/deno", runner=runner)

    result = cache_warmer.cache(Path("temp/imports.ts"), "extra.ts")

    assert runner.commands == [["/opt/deno/bin/deno", "cache", "temp/imports.ts", "extra.ts"]]
    assert runner.calls[0]["suppress_stdout"] is True
    assert result.ok


def test_cache_failure_is_ignored_by_default() -> None:
    runner = RecordingRunner({"cache": 1})

    result = CacheWarmer("deno", runner=runner).cache("imports.ts")

    assert result.returncode == 1


def test_cache_failure_raises_when_strict() -> None:
    runner = RecordingRunner({"cache": 1})
    cache_warmer = CacheWarmer("deno", runner=runner, policy=FailurePolicy.RAISE)

    with pytest.raises(ProcessFailedError):
        cache_warmer.cache("imports.ts")


def test_cache_requires_files() -> None:
    with pytest.raises(ValueError):
        CacheWarmer("deno", runner=RecordingRunner()).cache()


def test_default_cache_tool_prefers_path_lookup(monkeypatch) -> None:
    monkeypatch.setattr(warmer.shutil, "which", lambda name: f"/usr/local/bin/{name}")
    assert default_cache_tool() == "/usr/local/bin/deno"

    monkeypatch.setattr(warmer.shutil, "which", lambda name: None)
    assert default_cache_tool() == "deno"
    assert CacheWarmer(runner=RecordingRunner()).tool == "deno"
