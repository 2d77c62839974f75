"""Filesystem walking with glob inclusion and prefix exclusion."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .globbing import compile_glob
from .logging import get_logger

_logger = get_logger("enumerator")


@dataclass(frozen=True)
class ExcludeRule:
    """A path prefix that removes matching entries from the walk.

    Unanchored prefixes match at any segment boundary, so ``.git/`` covers
    ``a/.git/y.ts`` as well as ``.git/HEAD``. A leading ``/`` anchors the
    prefix to the walk root. Comparison ignores case, like the include glob.
    """

    prefix: str
    anchored: bool

    def matches(self, rel_path: str) -> bool:
        if not self.prefix:
            return False
        prefix = self.prefix.casefold()
        target = rel_path.casefold()
        if target.startswith(prefix):
            return True
        if self.anchored:
            return False
        return f"/{prefix}" in f"/{target}"


def build_exclude_rules(exclude: Iterable[str], root: Path) -> List[ExcludeRule]:
    """Normalise raw exclusion prefixes against ``root``.

    Prefixes are stored casefolded.
    """
    root_posix = (root.as_posix().rstrip("/") + "/").casefold()
    rules: List[ExcludeRule] = []
    for raw in exclude:
        prefix = raw.replace("\\", "/").casefold()
        anchored = False
        if prefix.startswith(root_posix):
            prefix = prefix[len(root_posix) :]
            anchored = True
        elif prefix.startswith("/"):
            prefix = prefix.lstrip("/")
            anchored = True
        elif prefix.startswith("./"):
            prefix = prefix[2:]
            anchored = True
        if prefix:
            rules.append(ExcludeRule(prefix=prefix, anchored=anchored))
    return rules


def _is_excluded(rel_path: str, rules: Sequence[ExcludeRule]) -> bool:
    return any(rule.matches(rel_path) for rule in rules)


def _raise_walk_error(error: OSError) -> None:
    raise error


def find_files(
    pattern: str,
    root: str | Path,
    exclude: Iterable[str] = (),
) -> Iterator[Path]:
    """Yield absolute paths of files under ``root`` matching ``pattern``.

    Matching is case-insensitive and runs against the ``/``-separated path
    relative to ``root``. Directories are never yielded and symbolic links are
    not followed. Directory entries are visited in sorted order. The returned
    iterator walks the tree as it is consumed; call again for a second pass.
    """
    root_path = Path(os.path.abspath(os.path.expanduser(os.fspath(root))))
    if not root_path.exists():
        raise FileNotFoundError(f"Repository path not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Repository path is not a directory: {root}")

    absolute_pattern = Path(pattern).is_absolute()
    regex = compile_glob(pattern.replace("\\", "/"))
    rules = build_exclude_rules(exclude, root_path)

    matched = 0
    for dirpath, dirnames, filenames in os.walk(
        root_path, onerror=_raise_walk_error, followlinks=False
    ):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root_path).as_posix() if current_dir != root_path else ""

        kept_dirs = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_excluded(f"{rel_path}/", rules):
                _logger.debug("Pruned %s", rel_path)
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            path = current_dir / filename
            if path.is_symlink():
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, rules):
                continue
            target = path.as_posix() if absolute_pattern else rel_path
            if regex.fullmatch(target) is None:
                continue
            matched += 1
            yield path

    _logger.debug("Matched %d files under %s", matched, root_path)


__all__ = ["ExcludeRule", "build_exclude_rules", "find_files"]
