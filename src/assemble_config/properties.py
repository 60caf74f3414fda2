from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, MutableMapping
from pathlib import Path
from threading import Lock

from assemble_core.logging import get_logger

logger = get_logger("assemble.config")

COMMENT_PREFIXES = ("#", "!")
COMMAND_OPTION_SPLIT = re.compile(r"\s+-")


class ConfigError(ValueError):
    pass


def parse_properties(
    lines: Iterable[str],
    properties: dict[str, str] | None = None,
) -> dict[str, str]:
    """Parse ``key=value`` lines into ``properties``.

    Blank lines and ``#``/``!`` comments are skipped. A line without ``=`` is a
    key with an empty value. Lines with an empty key are ignored.
    """
    if properties is None:
        properties = {}
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue

        key, separator, value = line.partition("=")
        if not separator:
            properties[line] = ""
            continue
        key = key.strip()
        if not key:
            continue
        properties[key] = value.strip()
    return properties


def read_properties_file(
    path: Path,
    properties: dict[str, str] | None = None,
) -> dict[str, str]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"unable to read properties file {path}: {exc}") from exc
    return parse_properties(text.splitlines(), properties)


class PropertiesLoader:
    """Loads default and user properties exactly once per instance.

    Values already present in the target mapping win over file values.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._properties: dict[str, str] | None = None

    @property
    def loaded(self) -> bool:
        return self._properties is not None

    def load(
        self,
        default_path: Path,
        user_path: Path | None = None,
        target: MutableMapping[str, str] | None = None,
    ) -> dict[str, str]:
        with self._lock:
            if self._properties is not None:
                return self._properties

            properties = read_properties_file(default_path)
            if user_path is not None:
                read_properties_file(user_path, properties)

            if target is not None:
                for key, value in properties.items():
                    if key not in target:
                        target[key] = value

            logger.info(
                "properties_loaded",
                default_path=str(default_path),
                user_path=str(user_path) if user_path is not None else None,
                count=len(properties),
            )
            self._properties = properties
            return properties

    def reset(self) -> None:
        with self._lock:
            self._properties = None


def absorb_properties(
    command: str,
    target: MutableMapping[str, str] | None = None,
) -> MutableMapping[str, str]:
    """Collect ``-Dkey=value`` options from a command line into ``target``.

    Options without a key, such as a bare ``-D`` or ``-D=x``, are ignored.
    """
    if target is None:
        target = {}
    for part in COMMAND_OPTION_SPLIT.split(" " + command.strip()):
        if not part.startswith("D"):
            continue
        key, separator, value = part[1:].partition("=")
        if not key:
            continue
        target[key] = value if separator else ""
    return target


def is_property_enabled(
    properties: Mapping[str, str],
    key: str,
    deprecated_key: str | None = None,
) -> bool:
    """Return True when ``key`` is set to anything other than ``"false"``.

    ``deprecated_key`` is consulted only when ``key`` is absent.
    """
    value = properties.get(key)
    if value is not None:
        return value != "false"

    if deprecated_key is None:
        return False

    value = properties.get(deprecated_key)
    if value is None:
        return False

    logger.warning(
        "deprecated_property_key",
        deprecated_key=deprecated_key,
        replacement_key=key,
    )
    return value != "false"
