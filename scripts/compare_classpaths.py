from __future__ import annotations

import argparse
import json
import sys
import zipfile

from assemble_archive.classpath import classpath_to_files, resource_to_class_name
from assemble_archive.jar import for_each_class
from assemble_core.formatting import to_indented_string
from assemble_core.sorted_algebra import contains_all, retain


def fail(message: str) -> None:
    print(f"compare-classpaths: {message}", file=sys.stderr)
    raise SystemExit(1)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "List the classes shared by two classpaths and check whether the "
            "first provides every class of the second."
        ),
    )
    parser.add_argument("base", help="Classpath that should provide the classes.")
    parser.add_argument("required", help="Classpath whose classes must be provided.")
    parser.add_argument("--json", action="store_true", help="Emit a JSON report.")
    return parser.parse_args(argv)


def list_class_names(classpath: str) -> list[str]:
    """Return the sorted, de-duplicated class names found on ``classpath``."""
    names: set[str] = set()
    for_each_class(
        classpath_to_files(classpath) or [],
        lambda resource, sink: sink.add(resource_to_class_name(resource)),
        names,
    )
    return sorted(names)


def compare_classpaths(base: str, required: str) -> dict[str, object]:
    base_names = list_class_names(base)
    required_names = list_class_names(required)
    shared = retain(base_names, required_names)
    return {
        "base_count": len(base_names),
        "required_count": len(required_names),
        "shared": shared,
        "complete": contains_all(base_names, required_names),
    }


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        report = compare_classpaths(args.base, args.required)
    except (OSError, zipfile.BadZipFile) as exc:
        fail(str(exc))

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(to_indented_string(report["shared"]))

    if not report["complete"]:
        fail("base classpath does not provide every required class")


if __name__ == "__main__":
    main()
