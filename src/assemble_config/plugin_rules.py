from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
)

from assemble_config.properties import ConfigError, is_property_enabled
from assemble_core.logging import get_logger
from assemble_core.name_pattern import (
    NamePattern,
    bare_name,
    compare_bare_names,
    compile_pattern,
)
from assemble_core.sorted_algebra import contains_all, retain

logger = get_logger("assemble.plugin_rules")

PLUGIN_RULE_PREFIX = "sa.instrumentation.plugin."
PLUGIN_RULE_SUFFIX = ".enable"
PLUGINS_ENABLE_KEY = "sa.instrumentation.plugins.enable"


def _bare_name_sort_key(qualified_name: str) -> tuple[str, str]:
    return bare_name(qualified_name), qualified_name


class PluginRule(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str = Field(min_length=1)
    enabled: bool = True

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str) -> str:
        compile_pattern(value)
        return value


class PluginRuleSet(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_enabled: bool = True
    rules: list[PluginRule] = Field(default_factory=list)

    _compiled: list[tuple[PluginRule, NamePattern]] = PrivateAttr(default_factory=list)

    def model_post_init(self, __context: Any) -> None:
        self._compiled = [(rule, compile_pattern(rule.pattern)) for rule in self.rules]

    def is_enabled(self, qualified_name: str) -> bool:
        """The last declared rule matching ``qualified_name`` decides."""
        for rule, pattern in reversed(self._compiled):
            if pattern.matches(qualified_name):
                return rule.enabled
        return self.default_enabled

    def select_enabled(self, qualified_names: Iterable[str]) -> list[str]:
        selected: list[str] = []
        for name in sorted(set(qualified_names), key=_bare_name_sort_key):
            if self.is_enabled(name):
                selected.append(name)
            else:
                logger.debug("plugin_disabled", plugin=name)
        return selected

    def extended(self, other: PluginRuleSet) -> PluginRuleSet:
        """Return a rule set where ``other`` takes precedence over this one."""
        return PluginRuleSet(
            default_enabled=other.default_enabled,
            rules=[*self.rules, *other.rules],
        )


def rules_from_properties(properties: Mapping[str, str]) -> PluginRuleSet:
    """Build rules from ``sa.instrumentation.plugin.<pattern>.enable`` keys.

    Rules keep the mapping's insertion order, so later keys win on overlap.
    ``sa.instrumentation.plugins.enable`` sets the default for unmatched names.
    """
    default_enabled = PLUGINS_ENABLE_KEY not in properties or is_property_enabled(
        properties, PLUGINS_ENABLE_KEY
    )

    rules: list[PluginRule] = []
    for key, value in properties.items():
        if not key.startswith(PLUGIN_RULE_PREFIX) or not key.endswith(PLUGIN_RULE_SUFFIX):
            continue
        pattern = key[len(PLUGIN_RULE_PREFIX) : -len(PLUGIN_RULE_SUFFIX)]
        if not pattern:
            logger.warning("plugin_rule_without_pattern", key=key)
            continue
        try:
            rules.append(PluginRule(pattern=pattern, enabled=value != "false"))
        except ValidationError as exc:
            raise ConfigError(f"invalid plugin rule {key!r}: {exc}") from exc

    return PluginRuleSet(default_enabled=default_enabled, rules=rules)


def missing_required(available: Iterable[str], required: Iterable[str]) -> list[str]:
    """Return the bare plugin names in ``required`` absent from ``available``.

    ``available`` may hold qualified names; versions are ignored. Every
    required name must be bare, otherwise ``ValueError`` is raised.
    """
    required_sorted = sorted(set(required))
    for name in required_sorted:
        if not name or ":" in name:
            raise ValueError(f"required plugin must be a bare name: {name!r}")

    available_sorted = sorted(set(available), key=_bare_name_sort_key)
    if contains_all(available_sorted, required_sorted, comparator=compare_bare_names):
        return []

    present = set(retain(sorted({bare_name(name) for name in available_sorted}), required_sorted))
    return [name for name in required_sorted if name not in present]


class RulesConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = Field(min_length=1)
    default_enabled: bool = True
    rules: list[PluginRule] = Field(default_factory=list)
    required_plugins: list[str] = Field(default_factory=list)

    @field_validator("required_plugins")
    @classmethod
    def _required_are_bare_names(cls, value: list[str]) -> list[str]:
        normalized: list[str] = []
        for name in value:
            stripped = name.strip()
            if not stripped or ":" in stripped:
                raise ValueError(f"required plugin must be a bare name: {name!r}")
            normalized.append(stripped)
        return normalized

    def rule_set(self, properties: Mapping[str, str] | None = None) -> PluginRuleSet:
        """Combine file rules with property rules; properties win."""
        base = PluginRuleSet(default_enabled=self.default_enabled, rules=self.rules)
        if not properties:
            return base
        overrides = rules_from_properties(properties)
        if PLUGINS_ENABLE_KEY not in properties:
            overrides = PluginRuleSet(default_enabled=self.default_enabled, rules=overrides.rules)
        return base.extended(overrides)


def _default_config_path() -> Path:
    module_path = Path(__file__).resolve()
    candidates = [
        Path.cwd() / "config" / "rules" / "default.json",
        module_path.parents[2] / "config" / "rules" / "default.json",
        module_path.parents[1] / "config" / "rules" / "default.json",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def load_rules_config(path: Path) -> RulesConfig:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"unable to read rules config {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"rules config {path} is not valid JSON: {exc}") from exc
    try:
        return RulesConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid rules config {path}: {exc}") from exc


def reset_rules_config_cache() -> None:
    get_rules_config.cache_clear()


@lru_cache(maxsize=1)
def get_rules_config() -> RulesConfig:
    path = Path(
        os.getenv("ASSEMBLE_RULES_CONFIG_PATH", str(_default_config_path()))
    )
    config = load_rules_config(path)
    logger.info("rules_config_loaded", path=str(path), version=config.version)
    return config
