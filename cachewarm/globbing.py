"""Glob pattern translation with globstar and extended syntax.

Patterns are matched against ``/``-separated paths. Supported syntax:

* ``*`` and ``?`` match within a single path segment.
* ``**`` as a whole segment matches any number of segments, including none.
* ``[abc]``, ``[a-z]``, ``[!abc]`` and POSIX classes such as ``[[:digit:]]``.
* ``{a,b}`` brace alternatives, which may nest.
* ``?(a|b)``, ``*(a|b)``, ``+(a|b)``, ``@(a|b)`` and ``!(a|b)`` groups.
* ``\\x`` escapes the next character.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Tuple

_SEGMENT_CHAR = "[^/]"
_GLOBSTAR_DIRS = "(?:[^/]*/)*"

_EXTGLOB_QUANTIFIERS = {
    "?": "?",
    "*": "*",
    "+": "+",
    "@": "",
}

_POSIX_CLASSES = {
    "alnum": "a-zA-Z0-9",
    "alpha": "a-zA-Z",
    "ascii": "\\x00-\\x7f",
    "blank": " \\t",
    "cntrl": "\\x00-\\x1f\\x7f",
    "digit": "0-9",
    "graph": "\\x21-\\x7e",
    "lower": "a-z",
    "print": "\\x20-\\x7e",
    "punct": "!-/:-@\\[-`{-~",
    "space": " \\t\\r\\n\\v\\f",
    "upper": "A-Z",
    "word": "\\w",
    "xdigit": "0-9A-Fa-f",
}


def translate(pattern: str) -> str:
    """Return a regular expression source equivalent to ``pattern``.

    Brace groups are expanded first, so every alternative is translated as a
    whole pattern of its own.
    """
    bodies = [_translate(expanded, 0, "")[0] for expanded in expand_braces(pattern)]
    if len(bodies) == 1:
        return bodies[0]
    return "(?:" + "|".join(bodies) + ")"


def expand_braces(pattern: str) -> List[str]:
    """Return ``pattern`` with every ``{a,b}`` group expanded, in order."""
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            split = _split_braces(pattern, index)
            if split is not None:
                alternatives, end = split
                prefix, suffix = pattern[:index], pattern[end:]
                expanded: List[str] = []
                for alternative in alternatives:
                    expanded.extend(expand_braces(prefix + alternative + suffix))
                return expanded
        index += 1
    return [pattern]


@lru_cache(maxsize=64)
def compile_glob(pattern: str, *, case_insensitive: bool = True) -> re.Pattern[str]:
    flags = re.IGNORECASE if case_insensitive else 0
    return re.compile(translate(pattern), flags)


def glob_matches(path: str, pattern: str, *, case_insensitive: bool = True) -> bool:
    """Return True when the whole of ``path`` matches ``pattern``."""
    normalized = path.replace("\\", "/")
    regex = compile_glob(pattern, case_insensitive=case_insensitive)
    return regex.fullmatch(normalized) is not None


# ----------------------------------------------------------------------
# Internals


def _translate(pattern: str, index: int, terminators: str) -> Tuple[str, int]:
    parts: List[str] = []
    length = len(pattern)
    while index < length:
        char = pattern[index]
        if char in terminators:
            break
        at_segment_start = index == 0 or pattern[index - 1] == "/"

        if char == "\\" and index + 1 < length:
            parts.append(re.escape(pattern[index + 1]))
            index += 2
            continue

        if index + 1 < length and pattern[index + 1] == "(" and (
            char in _EXTGLOB_QUANTIFIERS or char == "!"
        ):
            alternatives, end = _translate_group(pattern, index + 2, "|", ")")
            if alternatives is not None:
                group = "|".join(alternatives)
                if char == "!":
                    if not terminators:
                        rest, end = _translate(pattern, end, terminators)
                        parts.append(f"(?!(?:{group}){rest}$){_SEGMENT_CHAR}*{rest}")
                        index = end
                        continue
                    parts.append(f"(?:(?!(?:{group})(?:/|$)){_SEGMENT_CHAR}*)")
                else:
                    parts.append(f"(?:{group}){_EXTGLOB_QUANTIFIERS[char]}")
                index = end
                continue

        if char == "*":
            if (
                at_segment_start
                and pattern.startswith("**", index)
                and not terminators
            ):
                after = index + 2
                if after == length:
                    parts.append(".*")
                    index = after
                    continue
                if pattern[after] == "/":
                    parts.append(_GLOBSTAR_DIRS)
                    index = after + 1
                    continue
            while index < length and pattern[index] == "*":
                index += 1
            parts.append(f"{_SEGMENT_CHAR}*")
            continue

        if char == "?":
            parts.append(_SEGMENT_CHAR)
            index += 1
            continue

        if char == "[":
            klass, end = _translate_class(pattern, index)
            if klass is not None:
                parts.append(klass)
                index = end
                continue

        parts.append(re.escape(char))
        index += 1
    return "".join(parts), index


def _translate_group(
    pattern: str, start: int, separator: str, closer: str
) -> Tuple[Optional[List[str]], int]:
    alternatives: List[str] = []
    index = start
    while True:
        body, index = _translate(pattern, index, separator + closer)
        alternatives.append(body)
        if index >= len(pattern):
            return None, start
        if pattern[index] == closer:
            return alternatives, index + 1
        index += 1


def _split_braces(pattern: str, start: int) -> Optional[Tuple[List[str], int]]:
    pieces: List[str] = []
    depth = 0
    piece_start = start + 1
    index = start
    while index < len(pattern):
        char = pattern[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                pieces.append(pattern[piece_start:index])
                return pieces, index + 1
        elif char == "," and depth == 1:
            pieces.append(pattern[piece_start:index])
            piece_start = index + 1
        index += 1
    return None


def _translate_class(pattern: str, start: int) -> Tuple[Optional[str], int]:
    index = start + 1
    negate = False
    if index < len(pattern) and pattern[index] in "!^":
        negate = True
        index += 1

    members: List[str] = []
    first = True
    while index < len(pattern):
        char = pattern[index]
        if char == "]" and not first:
            body = "".join(members)
            if negate:
                return f"[^/{body}]", index + 1
            return f"[{body}]", index + 1
        first = False
        if char == "/":
            return None, start
        if pattern.startswith("[:", index):
            end = pattern.find(":]", index + 2)
            name = pattern[index + 2 : end] if end != -1 else ""
            if name in _POSIX_CLASSES:
                members.append(_POSIX_CLASSES[name])
                index = end + 2
                continue
        if char == "\\" and index + 1 < len(pattern):
            members.append(re.escape(pattern[index + 1]))
            index += 2
            continue
        if char in "\\^[]&~|":
            members.append("\\" + char)
        else:
            members.append(char)
        index += 1
    return None, start


__all__ = ["compile_glob", "expand_braces", "glob_matches", "translate"]
