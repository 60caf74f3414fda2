from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

CLASS_SUFFIX = ".class"
FILE_SCHEME_PREFIX = "file:"
JAR_FILE_SCHEME_PREFIX = "jar:file:"


class UnsupportedSchemeError(ValueError):
    pass


class VisitResult(str, Enum):
    CONTINUE = "continue"
    TERMINATE = "terminate"
    SKIP_SUBTREE = "skip_subtree"
    SKIP_SIBLINGS = "skip_siblings"


def class_name_to_resource(class_name: str) -> str:
    return class_name.replace(".", "/") + CLASS_SUFFIX


def resource_to_class_name(resource: str) -> str:
    if not resource.endswith(CLASS_SUFFIX):
        raise ValueError(f"not a class resource: {resource!r}")
    return resource[: -len(CLASS_SUFFIX)].replace("/", ".")


def classpath_to_files(classpath: str | None) -> list[Path] | None:
    if classpath is None:
        return None
    return [Path(entry).absolute() for entry in classpath.split(os.pathsep)]


def to_url(path: str | Path) -> str:
    """Return a ``file:`` URL for ``path``; directories end with ``/``."""
    absolute = Path(path).absolute()
    location = absolute.as_posix()
    if absolute.is_dir() and not location.endswith("/"):
        location += "/"
    return FILE_SCHEME_PREFIX + location


def to_urls(paths: Iterable[str | Path]) -> list[str]:
    return [to_url(path) for path in paths]


def get_source_location(url: str, resource_path: str) -> Path:
    """Return the jar or classpath root that ``url`` loads ``resource_path`` from."""
    if not url.endswith(resource_path):
        raise ValueError(f'{url} does not end with "{resource_path}"')

    if url.startswith(JAR_FILE_SCHEME_PREFIX):
        return Path(url[len(JAR_FILE_SCHEME_PREFIX) : url.rindex("!")])

    if url.startswith(FILE_SCHEME_PREFIX):
        location = urlparse(url[: len(url) - len(resource_path)]).path
        return Path(location)

    scheme = url.split(":", 1)[0] if ":" in url else ""
    raise UnsupportedSchemeError(f"Unsupported protocol: {scheme}")


def get_name(path: str) -> str:
    """Return the last name in ``path``, ignoring one trailing separator."""
    if not path:
        raise ValueError("Empty path")
    if path.endswith(os.sep):
        path = path[:-1]
    return path.rsplit(os.sep, 1)[-1]


def _children(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(directory.iterdir())


def walk_dir(directory: Path, predicate: Callable[[Path], bool]) -> bool:
    """Apply ``predicate`` depth-first, children before their parent.

    Stops and returns False as soon as the predicate does.
    """
    for child in _children(directory):
        if not walk_dir(child, predicate):
            return False
    return predicate(directory)


def recurse_dir(
    directory: Path,
    visitor: Callable[[Path], VisitResult],
) -> VisitResult:
    for child in _children(directory):
        result = recurse_dir(child, visitor)
        if result is VisitResult.SKIP_SIBLINGS:
            break
        if result is VisitResult.TERMINATE:
            return result
        if result is VisitResult.SKIP_SUBTREE:
            return VisitResult.SKIP_SIBLINGS
    return visitor(directory)
