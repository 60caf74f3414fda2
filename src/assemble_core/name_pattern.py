from __future__ import annotations

import re
from dataclasses import dataclass

VERSION_SEPARATOR = ":"
NAME_WILDCARD = "[^:]*"


@dataclass(frozen=True)
class NamePattern:
    """Compiled wildcard rule for ``name`` or ``name:version`` strings."""

    source: str
    regex: re.Pattern[str]

    @property
    def expression(self) -> str:
        return self.regex.pattern

    def matches(self, qualified_name: str) -> bool:
        return self.regex.fullmatch(qualified_name) is not None


def glob_to_regex(pattern: str) -> str:
    """Rewrite a ``*``/``?`` glob into a regular expression.

    Backslashes are escaped before anything else so later substitutions are
    not escaped twice.
    """
    return (
        pattern.replace("\\", "\\\\")
        .replace(".", "\\.")
        .replace("^", "\\^")
        .replace("$", "\\$")
        .replace("*", ".*")
        .replace("/", "\\/")
        .replace("?", ".")
    )


def _has_numeric_version_marker(regex: str) -> bool:
    # The last character is never inspected; a trailing ':' is handled by the caller.
    for index in range(len(regex) - 2, -1, -1):
        if regex[index] == VERSION_SEPARATOR:
            return regex[index + 1].isdigit()
    return False


def _compile(pattern: str, expression: str) -> re.Pattern[str]:
    try:
        return re.compile(expression)
    except re.error as exc:
        raise ValueError(f"invalid name pattern {pattern!r}: {exc}") from exc


def compile_pattern(pattern: str) -> NamePattern:
    """Compile a plugin name pattern.

    A bare name such as ``foo`` matches ``foo`` and every ``foo:<version>``.
    A ``*`` inside the name never spans the ``:`` separator, while a trailing
    ``*`` extends the name and still admits a version suffix. Patterns whose
    last ``:`` is followed by a digit (``foo:1.*``) select versions by prefix.
    A pattern ending in ``?`` is taken literally with no version suffix.
    """
    if not pattern:
        raise ValueError("Empty pattern")

    last_char = pattern[-1]
    trailing_star = last_char == "*"
    if trailing_star:
        pattern_body = pattern[:-1]
    else:
        pattern_body = pattern

    regex = "^" + glob_to_regex(pattern_body).replace(".*", NAME_WILDCARD)

    if last_char == "?":
        expression = regex
    elif (
        _has_numeric_version_marker(regex)
        or len(regex) == 1
        or regex.endswith(VERSION_SEPARATOR)
    ):
        expression = regex + ".*"
    else:
        name = regex + NAME_WILDCARD if trailing_star else regex
        expression = f"({name}$|{name}{VERSION_SEPARATOR}.*)"

    return NamePattern(source=pattern, regex=_compile(pattern, expression))


def split_qualified_name(qualified_name: str) -> tuple[str, str | None]:
    name, separator, version = qualified_name.partition(VERSION_SEPARATOR)
    if not separator:
        return name, None
    return name, version


def compare_bare_names(left: str, right: str) -> int:
    """Three-way comparison of the names in front of any ``:version`` suffix."""
    left_name = bare_name(left)
    right_name = bare_name(right)
    if left_name < right_name:
        return -1
    if left_name > right_name:
        return 1
    return 0


def bare_name(qualified_name: str) -> str:
    return split_qualified_name(qualified_name)[0]
