from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from assemble_config.plugin_rules import (
    RulesConfig,
    get_rules_config,
    load_rules_config,
    missing_required,
)
from assemble_config.properties import PropertiesLoader, absorb_properties


def fail(message: str) -> None:
    print(f"select-plugins: {message}", file=sys.stderr)
    raise SystemExit(1)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Filter plugin names (name or name:version) through enable/disable "
            "rules and check that required plugins remain enabled."
        ),
    )
    parser.add_argument("plugins", nargs="*", help="Plugin names to filter.")
    parser.add_argument(
        "--plugins-file",
        type=Path,
        default=None,
        help="File with one plugin name per line.",
    )
    parser.add_argument(
        "--rules-config",
        type=Path,
        default=None,
        help="Rules JSON. Defaults to ASSEMBLE_RULES_CONFIG_PATH or config/rules/default.json.",
    )
    parser.add_argument(
        "--defaults",
        type=Path,
        default=None,
        help="Default properties file.",
    )
    parser.add_argument(
        "--properties",
        type=Path,
        default=os.getenv("ASSEMBLE_PROPERTIES_PATH"),
        help="User properties file layered over --defaults.",
    )
    parser.add_argument(
        "--command",
        default="",
        help=(
            "Command line whose -Dkey=value options override properties files. "
            "Pass it as --command=\"-Dkey=value ...\" when it starts with -D."
        ),
    )
    parser.add_argument(
        "--require",
        action="append",
        default=[],
        help="Bare plugin name that must remain enabled (repeatable).",
    )
    parser.add_argument("--json", action="store_true", help="Emit a JSON report.")
    return parser.parse_args(argv)


def read_plugin_names(plugins: list[str], plugins_file: Path | None) -> list[str]:
    names = [name.strip() for name in plugins if name.strip()]
    if plugins_file is not None:
        for line in plugins_file.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                names.append(stripped)
    return names


def collect_properties(
    *,
    command: str,
    defaults: Path | None,
    user_properties: Path | None,
) -> dict[str, str]:
    properties: dict[str, str] = {}
    if defaults is not None:
        PropertiesLoader().load(defaults, user_properties, target=properties)
    elif user_properties is not None:
        PropertiesLoader().load(user_properties, target=properties)

    # Command line keys go last so their rules win over overlapping file rules.
    for key, value in absorb_properties(command).items():
        properties.pop(key, None)
        properties[key] = value
    return properties


def select_plugins(
    names: list[str],
    *,
    config: RulesConfig,
    properties: dict[str, str],
    required: list[str],
) -> dict[str, list[str]]:
    rule_set = config.rule_set(properties)
    enabled = rule_set.select_enabled(names)
    missing = missing_required(enabled, required or config.required_plugins)
    return {"enabled": enabled, "missing_required": missing}


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        config = (
            load_rules_config(args.rules_config)
            if args.rules_config is not None
            else get_rules_config()
        )
        properties = collect_properties(
            command=args.command,
            defaults=args.defaults,
            user_properties=args.properties,
        )
        names = read_plugin_names(args.plugins, args.plugins_file)
        report = select_plugins(
            names,
            config=config,
            properties=properties,
            required=args.require,
        )
    except (ValueError, OSError) as exc:
        fail(str(exc))

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        for name in report["enabled"]:
            print(name)

    if report["missing_required"]:
        fail("missing required plugins: " + ", ".join(report["missing_required"]))


if __name__ == "__main__":
    main()
