"""Sorted-sequence set algebra and plugin name pattern compilation."""

from __future__ import annotations

from assemble_core.name_pattern import (
    NamePattern,
    compare_bare_names,
    compile_pattern,
    glob_to_regex,
)
from assemble_core.sorted_algebra import compare, contains_all, retain

__all__ = [
    "NamePattern",
    "compare",
    "compare_bare_names",
    "compile_pattern",
    "contains_all",
    "glob_to_regex",
    "retain",
]
