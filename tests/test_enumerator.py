"""Tests for cachewarm.enumerator."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cachewarm.enumerator import ExcludeRule, build_exclude_rules, find_files
from tests._fixtures.tree_builder import TreeBuilder


def test_find_files_applies_glob_and_exclusions(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("a/x.ts", "a/.git/y.ts", "b.md")

    assert tree_builder.find("**/*.ts", exclude=[".git/"]) == ["a/x.ts"]


def test_find_files_yields_absolute_paths(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("mod/a.ts")

    (path,) = list(find_files("**/*.ts", tree_builder.root))

    assert path.is_absolute()
    assert path == tree_builder.root / "mod" / "a.ts"


def test_find_files_never_yields_directories(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("dir.ts/inner.txt", "real.ts")

    assert tree_builder.find("**/*.ts") == ["real.ts"]


def test_find_files_is_case_insensitive(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("Mod/UPPER.TS")

    assert tree_builder.find("**/*.ts") == ["Mod/UPPER.TS"]


def test_find_files_orders_entries_stably(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("b/2.ts", "a/1.ts", "a/0.ts", "c.ts", "b/1.ts")

    first = tree_builder.find("**/*.ts")
    second = tree_builder.find("**/*.ts")

    assert first == ["c.ts", "a/0.ts", "a/1.ts", "b/1.ts", "b/2.ts"]
    assert first == second


def test_find_files_returns_empty_for_no_matches(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("README.md")

    assert tree_builder.find("**/*.ts") == []


def test_find_files_is_lazy_and_single_pass(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("a/1.ts", "a/2.ts")

    entries = find_files("**/*.ts", tree_builder.root)
    assert next(entries).name == "1.ts"
    assert [entry.name for entry in entries] == ["2.ts"]
    assert list(entries) == []


def test_find_files_rejects_missing_root(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        list(find_files("**/*.ts", missing))

    assert str(missing) in str(excinfo.value)


def test_find_files_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.ts"
    target.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        list(find_files("**/*.ts", target))


def test_unused_exclusion_leaves_matches_unchanged(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("a/x.ts", "b/y.ts")

    assert tree_builder.find("**/*.ts", exclude=["nope/"]) == tree_builder.find("**/*.ts")


def test_anchored_exclusion_only_applies_at_root(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("docs/a.ts", "src/docs/b.ts")

    assert tree_builder.find("**/*.ts", exclude=["/docs/"]) == ["src/docs/b.ts"]
    assert tree_builder.find("**/*.ts", exclude=["docs/"]) == []


def test_absolute_exclusion_under_root_is_anchored(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("vendor/a.ts", "src/vendor/b.ts")
    absolute = f"{tree_builder.root.as_posix()}/vendor/"

    assert tree_builder.find("**/*.ts", exclude=[absolute]) == ["src/vendor/b.ts"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_find_files_does_not_follow_symlinks(tree_builder: TreeBuilder, tmp_path: Path) -> None:
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "linked.ts").write_text("", encoding="utf-8")
    tree_builder.touch("own/a.ts")
    try:
        os.symlink(outside, tree_builder.root / "link", target_is_directory=True)
        os.symlink(outside / "linked.ts", tree_builder.root / "own" / "file-link.ts")
    except OSError:
        pytest.skip("symlinks not permitted")

    assert tree_builder.find("**/*.ts") == ["own/a.ts"]


def test_exclude_rule_matches_at_segment_boundaries() -> None:
    rule = ExcludeRule(prefix=".git/", anchored=False)

    assert rule.matches(".git/HEAD")
    assert rule.matches("a/.git/y.ts")
    assert not rule.matches("a/x.git/y.ts")


def test_build_exclude_rules_normalises_prefixes(tmp_path: Path) -> None:
    rules = build_exclude_rules(["./out/", "/dist/", "node_modules\\", ""], tmp_path)

    assert rules == [
        ExcludeRule(prefix="out/", anchored=True),
        ExcludeRule(prefix="dist/", anchored=True),
        ExcludeRule(prefix="node_modules/", anchored=False),
    ]


def test_exclusions_ignore_case(tree_builder: TreeBuilder) -> None:
    tree_builder.touch("a/x.ts", "a/.GIT/y.ts", "Vendor/z.ts")

    assert tree_builder.find("**/*.ts", exclude=[".git/", "/VENDOR/"]) == ["a/x.ts"]


def test_exclude_rule_compares_casefolded() -> None:
    assert ExcludeRule(prefix="Node_Modules/", anchored=False).matches("pkg/node_modules/a.ts")
    assert build_exclude_rules(["/Dist/"], Path("/tmp/repo")) == [
        ExcludeRule(prefix="dist/", anchored=True)
    ]
