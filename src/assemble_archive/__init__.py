"""Jar, classpath and resource-name helpers feeding sorted name lists to the core."""

from __future__ import annotations

from assemble_archive.classpath import (
    UnsupportedSchemeError,
    VisitResult,
    class_name_to_resource,
    classpath_to_files,
    get_name,
    get_source_location,
    recurse_dir,
    resource_to_class_name,
    to_url,
    to_urls,
    walk_dir,
)
from assemble_archive.jar import (
    for_each_class,
    has_file_in_jar,
    read_bytes,
    read_file_from_jar,
)

__all__ = [
    "UnsupportedSchemeError",
    "VisitResult",
    "class_name_to_resource",
    "classpath_to_files",
    "for_each_class",
    "get_name",
    "get_source_location",
    "has_file_in_jar",
    "read_bytes",
    "read_file_from_jar",
    "recurse_dir",
    "resource_to_class_name",
    "to_url",
    "to_urls",
    "walk_dir",
]
