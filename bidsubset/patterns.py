"""
Glob compilation and matching for dataset-relative paths.

Public surface
--------------
* ``compile_patterns`` – turn a :class:`~bidsubset.models.FilterSpec` into
  a :class:`PatternSet`.
* ``PatternSet.matches`` – *any*-match of a relative path against the set.
* ``translate`` – glob → regular-expression body (exposed for tests).

Glob syntax
-----------
``[abc]``, ``[a-z]`` and ``[!abc]`` are character classes; ``{a,b}`` is an
alternation; ``\\x`` escapes ``x``, inside a class too.  ``*``, ``?`` and
character classes never match a ``/``.
A segment made only of ``**`` spans any number of directories.  The
translation is done segment-aware by hand because :mod:`fnmatch` lets ``*``
run across path separators.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Iterable

from .errors import PatternError
from .models import TOP_LEVEL_FILES, FilterSpec

_GLOB_SPECIALS = set("*?[]{}\\,")
_CLASS_SPECIALS = set("\\]^-[")


# --------------------------------------------------------------------------- #
# 1.  Glob → regex                                                            #
# --------------------------------------------------------------------------- #
def _class_literal(c: str) -> str:
    return "\\" + c if c in _CLASS_SPECIALS else c


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate the ``[...]`` class opening at *start*.

    ``\\x`` inside the class is the literal ``x`` (so ``[\\!a]`` is not
    negated and ``[a\\-z]`` is not a range).  No class ever matches ``/``.

    Returns:
        Regex fragment and the index just past the closing bracket.

    Raises:
        PatternError: Class is never closed.
    """
    i = start + 1
    n = len(pattern)
    negate = i < n and pattern[i] in "!^"
    if negate:
        i += 1
    members: list[str] = []
    # A ']' right after the opening bracket is a literal member.
    if i < n and pattern[i] == "]":
        members.append(r"\]")
        i += 1
    while i < n and pattern[i] != "]":
        c = pattern[i]
        if c == "\\" and i + 1 < n:
            members.append(_class_literal(pattern[i + 1]))
            i += 2
            continue
        if c == "-" and members and i + 1 < n and pattern[i + 1] != "]":
            members.append("-")
        else:
            members.append(_class_literal(c))
        i += 1
    if i >= n:
        raise PatternError(pattern, "unclosed character class")
    body = "".join(members)
    if negate:
        return f"[^/{body}]", i + 1
    # Ranges such as [.-0] cover '/', hence the lookahead.
    return f"(?!/)[{body}]", i + 1


def translate(pattern: str) -> str:
    """Return the regex body equivalent to the glob *pattern*.

    The result is unanchored; callers wrap it for a full match.

    Raises:
        PatternError: *pattern* is not valid glob syntax.
    """
    out: list[str] = []
    in_brace = False
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 >= n:
                raise PatternError(pattern, "dangling escape at end of pattern")
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if c == "*":
            j = i
            while j < n and pattern[j] == "*":
                j += 1
            seg_start = i == 0 or pattern[i - 1] == "/"
            seg_end = j == n or pattern[j] == "/"
            if j - i >= 2 and seg_start and seg_end:
                if j == n:
                    # Trailing "**": everything below this point.
                    out.append(".*")
                else:
                    # "**/": zero or more whole directories.
                    out.append("(?:[^/]+/)*")
                    j += 1
            else:
                out.append("[^/]*")
            i = j
            continue
        if c == "?":
            out.append("[^/]")
        elif c == "[":
            frag, i = _translate_class(pattern, i)
            out.append(frag)
            continue
        elif c == "{":
            if in_brace:
                raise PatternError(pattern, "nested alternation is not supported")
            in_brace = True
            out.append("(?:")
        elif c == "," and in_brace:
            out.append("|")
        elif c == "}":
            if not in_brace:
                raise PatternError(pattern, "unmatched '}'")
            in_brace = False
            out.append(")")
        else:
            out.append(re.escape(c))
        i += 1

    if in_brace:
        raise PatternError(pattern, "unclosed alternation")
    return "".join(out)


def escape(literal: str) -> str:
    """Backslash-escape every glob metacharacter in *literal*."""
    return "".join("\\" + c if c in _GLOB_SPECIALS else c for c in literal)


# --------------------------------------------------------------------------- #
# 2.  Compiled patterns                                                       #
# --------------------------------------------------------------------------- #
@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A glob together with its anchored regular expression."""

    glob: str
    regex: re.Pattern

    @classmethod
    def compile(cls, glob: str, *, case_insensitive: bool = False) -> "CompiledPattern":
        flags = re.IGNORECASE if case_insensitive else 0
        try:
            regex = re.compile(rf"(?s:{translate(glob)})\Z", flags)
        except re.error as exc:
            raise PatternError(glob, str(exc)) from exc
        return cls(glob=glob, regex=regex)

    def matches(self, rel_path: str) -> bool:
        return self.regex.match(rel_path) is not None


@dataclass(frozen=True, slots=True)
class PatternSet:
    """Read-only collection of compiled globs with any-match semantics."""

    patterns: tuple[CompiledPattern, ...]

    @property
    def globs(self) -> tuple[str, ...]:
        return tuple(p.glob for p in self.patterns)

    def matches(self, rel_path: str | PurePath) -> bool:
        """Return ``True`` when *rel_path* satisfies at least one pattern.

        Args:
            rel_path: Path relative to the dataset root.  ``PurePath``
                objects are compared in their POSIX form so Windows
                separators never defeat a match.
        """
        if isinstance(rel_path, PurePath):
            rel_path = rel_path.as_posix()
        return any(p.matches(rel_path) for p in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


def _check_fragments(fragments: Iterable[str]) -> None:
    """Validate each fragment alone so errors quote what the user typed."""
    for frag in fragments:
        CompiledPattern.compile(frag)


def compile_patterns(spec: FilterSpec) -> PatternSet:
    """Build the pattern set for *spec*.

    Produces ``sub-{subject}/{datatype}/{file}`` and
    ``sub-{subject}/ses-{session}/{datatype}/{file}``, plus the literal
    top-level metadata filenames unless ``spec.exclude_top_level`` is set.

    Raises:
        PatternError: A fragment is not valid glob syntax.
    """
    _check_fragments((spec.subject, spec.session, spec.datatype, spec.file))

    globs = [
        f"sub-{spec.subject}/{spec.datatype}/{spec.file}",
        f"sub-{spec.subject}/ses-{spec.session}/{spec.datatype}/{spec.file}",
    ]
    if not spec.exclude_top_level:
        globs.extend(escape(name) for name in TOP_LEVEL_FILES)

    compiled = tuple(
        CompiledPattern.compile(g, case_insensitive=spec.case_insensitive)
        for g in globs
    )
    return PatternSet(patterns=compiled)


__all__ = [
    "CompiledPattern",
    "PatternSet",
    "compile_patterns",
    "escape",
    "translate",
]
