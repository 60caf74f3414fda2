"""Configuration boundary: properties files, command-line overrides and plugin rules."""

from __future__ import annotations

from assemble_config.plugin_rules import (
    PluginRule,
    PluginRuleSet,
    RulesConfig,
    get_rules_config,
    missing_required,
    reset_rules_config_cache,
    rules_from_properties,
)
from assemble_config.properties import (
    ConfigError,
    PropertiesLoader,
    absorb_properties,
    is_property_enabled,
    parse_properties,
)

__all__ = [
    "ConfigError",
    "PluginRule",
    "PluginRuleSet",
    "PropertiesLoader",
    "RulesConfig",
    "absorb_properties",
    "get_rules_config",
    "is_property_enabled",
    "missing_required",
    "parse_properties",
    "reset_rules_config_cache",
    "rules_from_properties",
]
