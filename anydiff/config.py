"""Versioned JSON config for comparison settings."""

from __future__ import annotations

from dataclasses import dataclass, replace
import json
from pathlib import Path
from typing import Any

from anydiff.core.exceptions import DiffConfigError
from anydiff.core.options import ComparisonOptions, parse_options
from anydiff.diff.engine import DEFAULT_MAX_DEPTH

DIFF_CONFIG_VERSION = 1

_SUPPORTED_KEYS = frozenset(
    {"config_version", "max_depth", "allow_type_mismatch", "options", "ignore"}
)


@dataclass(frozen=True, slots=True)
class DiffConfig:
    """Settings for one ``compute_diff`` call."""

    max_depth: int = DEFAULT_MAX_DEPTH
    allow_type_mismatch: bool = False
    options: ComparisonOptions = ComparisonOptions.ALL
    ignore: tuple[str, ...] = ()

    def with_overrides(
        self,
        *,
        max_depth: int | None = None,
        allow_type_mismatch: bool | None = None,
        options: ComparisonOptions | None = None,
        ignore: tuple[str, ...] = (),
    ) -> "DiffConfig":
        """Return a copy; ``None`` keeps the current value, ``ignore`` extends it."""
        return replace(
            self,
            max_depth=self.max_depth if max_depth is None else max_depth,
            allow_type_mismatch=(
                self.allow_type_mismatch if allow_type_mismatch is None else allow_type_mismatch
            ),
            options=self.options if options is None else options,
            ignore=self.ignore + tuple(name for name in ignore if name not in self.ignore),
        )


def load_diff_config(path: str | Path) -> DiffConfig:
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise DiffConfigError(f"Invalid diff config JSON ({config_path}): {error}") from error
    return parse_diff_config(raw)


def parse_diff_config(raw: Any) -> DiffConfig:
    if not isinstance(raw, dict):
        raise DiffConfigError("Diff config must be a JSON object.")

    unknown = sorted(set(raw) - _SUPPORTED_KEYS)
    if unknown:
        raise DiffConfigError(f"Diff config contains unsupported keys: {', '.join(unknown)}")

    version = raw.get("config_version")
    if version != DIFF_CONFIG_VERSION:
        raise DiffConfigError(
            f"Unsupported diff config version {version!r}; expected {DIFF_CONFIG_VERSION}."
        )

    max_depth = raw.get("max_depth", DEFAULT_MAX_DEPTH)
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
        raise DiffConfigError("Diff config key 'max_depth' must be a non-negative integer.")

    allow_type_mismatch = raw.get("allow_type_mismatch", False)
    if not isinstance(allow_type_mismatch, bool):
        raise DiffConfigError("Diff config key 'allow_type_mismatch' must be boolean.")

    options_raw = raw.get("options", ["all"])
    if not isinstance(options_raw, list) or not all(isinstance(item, str) for item in options_raw):
        raise DiffConfigError("Diff config key 'options' must be an array of strings.")
    try:
        options = parse_options(options_raw)
    except ValueError as error:
        raise DiffConfigError(str(error)) from error

    ignore = raw.get("ignore", [])
    if not isinstance(ignore, list) or not all(isinstance(item, str) for item in ignore):
        raise DiffConfigError("Diff config key 'ignore' must be an array of strings.")

    return DiffConfig(
        max_depth=max_depth,
        allow_type_mismatch=allow_type_mismatch,
        options=options,
        ignore=tuple(ignore),
    )
