"""Import manifest generation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator

from .logging import get_logger

_logger = get_logger("manifest")


def import_line(url: str, fragment: str) -> str:
    return f'import "{url}/{fragment}";\n'


def generate_imports(
    entries: Iterable[str | os.PathLike[str]],
    url: str,
    root: str | os.PathLike[str],
) -> Iterator[str]:
    """Yield one import statement per entry, relative to ``root``.

    The absolute root followed by the platform separator is stripped from the
    start of each entry. An entry outside ``root`` keeps its full path.
    """
    root_prefix = f"{os.path.abspath(os.path.expanduser(os.fspath(root)))}{os.sep}"
    for entry in entries:
        path = os.fspath(entry)
        fragment = path[len(root_prefix) :] if path.startswith(root_prefix) else path
        yield import_line(url, fragment)


def write_lines(lines: Iterable[str], file: str | Path) -> int:
    """Replace the contents of ``file`` with ``lines`` and return how many were written."""
    path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        for line in lines:
            handle.write(line)
            count += 1
    _logger.debug("Wrote %d lines to %s", count, path)
    return count


__all__ = ["generate_imports", "import_line", "write_lines"]
