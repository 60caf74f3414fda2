from __future__ import annotations

from pathlib import Path

import pytest

from assemble_config import properties as properties_module
from assemble_config.properties import (
    ConfigError,
    PropertiesLoader,
    absorb_properties,
    is_property_enabled,
    parse_properties,
)


class _RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict[str, object]]] = []

    def info(self, event: str, **kwargs: object) -> None:
        self.events.append(("info", event, kwargs))

    def warning(self, event: str, **kwargs: object) -> None:
        self.events.append(("warning", event, kwargs))


@pytest.fixture
def recording_logger(monkeypatch: pytest.MonkeyPatch) -> _RecordingLogger:
    recorder = _RecordingLogger()
    monkeypatch.setattr(properties_module, "logger", recorder)
    return recorder


def test_parse_properties_skips_comments_and_blank_keys() -> None:
    parsed = parse_properties(
        [
            "# comment",
            "! another comment",
            "",
            "   ",
            "  key = value  ",
            "flag",
            "=orphan",
            " = blank",
            "url=http://host/path?a=b",
        ]
    )
    assert parsed == {"key": "value", "flag": "", "url": "http://host/path?a=b"}


def test_parse_properties_later_keys_override() -> None:
    target = {"key": "old"}
    parsed = parse_properties(["key=new"], target)
    assert parsed is target
    assert target == {"key": "new"}


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_loader_merges_user_over_defaults_and_keeps_existing(
    tmp_path: Path, recording_logger: _RecordingLogger
) -> None:
    defaults = _write(tmp_path / "default.properties", "a=1\nb=1\nc=1\n")
    user = _write(tmp_path / "user.properties", "b=2\n")
    target = {"c": "cli"}

    loader = PropertiesLoader()
    loaded = loader.load(defaults, user, target=target)

    assert loaded == {"a": "1", "b": "2", "c": "1"}
    assert target == {"a": "1", "b": "2", "c": "cli"}
    assert loader.loaded
    assert recording_logger.events[0][1] == "properties_loaded"
    assert recording_logger.events[0][2]["count"] == 3


def test_loader_is_one_shot_until_reset(
    tmp_path: Path, recording_logger: _RecordingLogger
) -> None:
    defaults = _write(tmp_path / "default.properties", "a=1\n")
    loader = PropertiesLoader()
    first = loader.load(defaults)

    _write(defaults, "a=2\n")
    assert loader.load(defaults) is first
    assert first == {"a": "1"}

    loader.reset()
    assert not loader.loaded
    assert loader.load(defaults) == {"a": "2"}


def test_loader_missing_file_raises_config_error(tmp_path: Path) -> None:
    loader = PropertiesLoader()
    with pytest.raises(ConfigError, match="unable to read properties file"):
        loader.load(tmp_path / "missing.properties")
    assert not loader.loaded


def test_absorb_properties_collects_system_options() -> None:
    absorbed = absorb_properties(
        "java -Dfoo=bar -Dflag -Xmx1g -jar app.jar -Dx=a=b"
    )
    assert absorbed == {"foo": "bar", "flag": "", "x": "a=b"}


def test_absorb_properties_accepts_leading_option_and_target() -> None:
    target = {"existing": "1"}
    result = absorb_properties("-Dfoo=1", target)
    assert result is target
    assert target == {"existing": "1", "foo": "1"}


def test_absorb_properties_ignores_options_without_key() -> None:
    assert absorb_properties("java -D -D=x -Dfoo=1 -jar app.jar") == {"foo": "1"}


def test_is_property_enabled() -> None:
    properties = {"on": "true", "blank": "", "off": "false"}
    assert is_property_enabled(properties, "on")
    assert is_property_enabled(properties, "blank")
    assert not is_property_enabled(properties, "off")
    assert not is_property_enabled(properties, "absent")
    assert not is_property_enabled(properties, "absent", "also-absent")


def test_is_property_enabled_warns_on_deprecated_key(
    recording_logger: _RecordingLogger,
) -> None:
    properties = {"old.key": "true"}
    assert is_property_enabled(properties, "new.key", "old.key")
    assert recording_logger.events == [
        (
            "warning",
            "deprecated_property_key",
            {"deprecated_key": "old.key", "replacement_key": "new.key"},
        )
    ]


def test_current_key_wins_over_deprecated_key(
    recording_logger: _RecordingLogger,
) -> None:
    properties = {"new.key": "false", "old.key": "true"}
    assert not is_property_enabled(properties, "new.key", "old.key")
    assert recording_logger.events == []
