from __future__ import annotations

import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import BinaryIO, TypeVar

from assemble_archive.classpath import CLASS_SUFFIX, walk_dir
from assemble_core.logging import get_logger

logger = get_logger("assemble.archive")

T = TypeVar("T")
DEFAULT_BUFFER_SIZE = 65536
EXCLUDED_PREFIXES = ("META-INF/", "module-info")
JAR_SUFFIX = ".jar"


def _find_entry(archive: zipfile.ZipFile, name: str) -> zipfile.ZipInfo | None:
    for info in archive.infolist():
        if info.filename == name:
            return info
    return None


def has_file_in_jar(jar_path: str | Path, name: str) -> bool:
    with zipfile.ZipFile(jar_path) as archive:
        return _find_entry(archive, name) is not None


def read_file_from_jar(jar_path: str | Path, name: str) -> str | None:
    with zipfile.ZipFile(jar_path) as archive:
        info = _find_entry(archive, name)
        if info is None:
            return None
        with archive.open(info) as stream:
            return read_bytes(stream).decode("utf-8")


def read_bytes(source: str | Path | BinaryIO) -> bytes:
    if isinstance(source, (str, Path)):
        with open(source, "rb") as stream:
            return read_bytes(stream)

    chunks: list[bytes] = []
    while True:
        chunk = source.read(DEFAULT_BUFFER_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def is_class_entry(name: str) -> bool:
    return name.endswith(CLASS_SUFFIX) and not name.startswith(EXCLUDED_PREFIXES)


def for_each_class(
    locations: Iterable[str | Path],
    consumer: Callable[[str, T], None],
    arg: T,
) -> None:
    """Report every class resource under jar files or classpath directories.

    Names passed to ``consumer`` are ``/``-separated resource paths relative
    to the jar root or the directory.
    """
    for location in locations:
        path = Path(location)
        if path.suffix == JAR_SUFFIX:
            with zipfile.ZipFile(path) as archive:
                for info in archive.infolist():
                    if not info.is_dir() and is_class_entry(info.filename):
                        consumer(info.filename, arg)
            continue

        if not path.is_dir():
            logger.debug("classpath_location_skipped", location=str(path))
            continue

        def _visit(candidate: Path, root: Path = path) -> bool:
            if candidate.is_dir():
                return True
            name = candidate.relative_to(root).as_posix()
            if is_class_entry(name):
                consumer(name, arg)
            return True

        walk_dir(path, _visit)
