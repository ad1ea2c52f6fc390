"""Versioned plugin configuration loader.

Config format::

    {
      "config_version": 1,
      "plugins": [
        {"entrypoint": "anydiff.plugins.reference:LifecycleTracePlugin",
         "options": {"output_path": "trace.ndjson"}},
        "mypackage.hooks:AuditPlugin"
      ]
    }

An entry is either an object (``entrypoint``, optional ``options`` and
``enabled``) or a bare ``"module:attribute"`` string.
"""

from __future__ import annotations

import importlib
import json
import logging
from pathlib import Path
from typing import Any

from anydiff.plugins.base import PLUGIN_API_VERSION, PLUGIN_CONFIG_VERSION
from anydiff.plugins.exceptions import PluginConfigError, PluginLoadError
from anydiff.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

_ENTRY_KEYS = frozenset({"entrypoint", "options", "enabled"})


def load_plugin_manager_from_file(path: str | Path) -> PluginManager:
    """Build a plugin manager from a JSON config file."""
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise PluginConfigError(f"Invalid plugin config JSON ({config_path}): {error}") from error
    return build_plugin_manager(raw, source=str(config_path))


def build_plugin_manager(raw: Any, *, source: str = "<memory>") -> PluginManager:
    """Build a plugin manager from an already-parsed config payload."""
    if not isinstance(raw, dict):
        raise PluginConfigError(f"Plugin config must be a JSON object ({source}).")

    version = raw.get("config_version")
    if version != PLUGIN_CONFIG_VERSION:
        raise PluginConfigError(
            f"Unsupported plugin config version {version!r}; "
            f"expected {PLUGIN_CONFIG_VERSION} ({source})."
        )

    entries = raw.get("plugins", [])
    if not isinstance(entries, list):
        raise PluginConfigError(f"Plugin config key 'plugins' must be a JSON array ({source}).")

    plugins: list[object] = []
    for position, entry in enumerate(entries, start=1):
        plugin = _load_entry(entry, position=position)
        if plugin is None:
            continue
        logger.debug("loaded plugin %s from %s", getattr(plugin, "name", plugin), source)
        plugins.append(plugin)
    return PluginManager(plugins=tuple(plugins))


def _load_entry(entry: Any, *, position: int) -> object | None:
    if isinstance(entry, str):
        entry = {"entrypoint": entry}
    if not isinstance(entry, dict):
        raise PluginConfigError(
            f"Plugin entry #{position} must be a JSON object or an entrypoint string."
        )

    unknown = sorted(set(entry) - _ENTRY_KEYS)
    if unknown:
        raise PluginConfigError(
            f"Plugin entry #{position} contains unsupported keys: {', '.join(unknown)}"
        )

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise PluginConfigError(f"Plugin entry #{position} key 'enabled' must be boolean.")
    if not enabled:
        return None

    entrypoint = entry.get("entrypoint")
    if not isinstance(entrypoint, str) or ":" not in entrypoint:
        raise PluginConfigError(
            f"Plugin entry #{position} key 'entrypoint' must be 'module:attribute'."
        )

    options = entry.get("options", {})
    if not isinstance(options, dict):
        raise PluginConfigError(f"Plugin entry #{position} key 'options' must be a JSON object.")

    target = _resolve_entrypoint(entrypoint, position=position)
    plugin = _build_plugin(target, entrypoint=entrypoint, options=options, position=position)
    _check_api_version(plugin, entrypoint=entrypoint, position=position)
    return plugin


def _resolve_entrypoint(entrypoint: str, *, position: int) -> object:
    module_name, _, attribute = entrypoint.partition(":")
    try:
        module = importlib.import_module(module_name)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{position} failed to import module '{module_name}': {error}"
        ) from error

    target = getattr(module, attribute, None)
    if target is None:
        raise PluginLoadError(
            f"Plugin entry #{position} could not find '{attribute}' in '{module_name}'."
        )
    return target


def _build_plugin(
    target: object,
    *,
    entrypoint: str,
    options: dict[str, Any],
    position: int,
) -> object:
    if not callable(target):
        if options:
            raise PluginLoadError(
                f"Plugin entry #{position} '{entrypoint}' is an instance and cannot take options."
            )
        return target

    try:
        return target(**options)
    except Exception as error:
        raise PluginLoadError(
            f"Plugin entry #{position} failed to build '{entrypoint}' "
            f"with options {sorted(options)}: {error}"
        ) from error


def _check_api_version(plugin: object, *, entrypoint: str, position: int) -> None:
    declared = str(getattr(plugin, "api_version", PLUGIN_API_VERSION))
    expected_major = PLUGIN_API_VERSION.partition(".")[0]
    if declared.partition(".")[0] != expected_major:
        raise PluginLoadError(
            f"Plugin entry #{position} '{entrypoint}' declares unsupported api_version "
            f"{declared!r}; supported major version is {expected_major}."
        )
