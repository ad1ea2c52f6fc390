from dataclasses import dataclass
import json
from importlib.metadata import PackageNotFoundError, version as package_version
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import typer

from anydiff.config import DiffConfig, load_diff_config
from anydiff.core.exceptions import DiffConfigError, InvalidComparisonError
from anydiff.core.options import option_names, parse_options
from anydiff.diff import compute_diff, render_diff_summary, render_differences
from anydiff.plugins import PluginError

app = typer.Typer(help="AnyDiff CLI")


@dataclass(slots=True)
class _OutputOptions:
    quiet: bool = False
    stable_json: bool = True


_OUTPUT_OPTIONS = _OutputOptions()


def _resolve_cli_version() -> str:
    try:
        return package_version("anydiff")
    except PackageNotFoundError:
        from anydiff import __version__ as local_version

        return local_version


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(_resolve_cli_version())
    raise typer.Exit()


@app.callback()
def app_options(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show AnyDiff version and exit.",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Suppress non-error text output.",
    ),
    stable_json: bool = typer.Option(
        True,
        "--stable-json/--pretty-json",
        help="Emit stable compact JSON (or pretty JSON).",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level for diagnostics written to stderr.",
    ),
) -> None:
    """Global output controls for all CLI commands."""
    _OUTPUT_OPTIONS.quiet = quiet
    _OUTPUT_OPTIONS.stable_json = stable_json
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _echo(message: str, *, err: bool = False) -> None:
    if _OUTPUT_OPTIONS.quiet and not err:
        return
    typer.echo(message, err=err)


def _echo_json(payload: dict[str, Any]) -> None:
    if _OUTPUT_OPTIONS.stable_json:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
            default=_json_default,
        )
    else:
        rendered = json.dumps(
            payload,
            ensure_ascii=True,
            sort_keys=True,
            indent=2,
            default=_json_default,
        )
    typer.echo(rendered)


def _json_default(value: Any) -> Any:
    if isinstance(value, SimpleNamespace):
        return vars(value)
    return repr(value)


def _load_document(path: Path) -> Any:
    """JSON objects become namespaces so their keys are compared as members."""
    return json.loads(
        path.read_text(encoding="utf-8"),
        object_hook=lambda payload: SimpleNamespace(**payload),
    )


def _resolve_config(
    config_path: Path | None,
    *,
    max_depth: int | None,
    allow_type_mismatch: bool | None,
    option: list[str] | None,
    ignore: list[str] | None,
) -> DiffConfig:
    base = load_diff_config(config_path) if config_path is not None else DiffConfig()
    try:
        options = parse_options(option) if option else None
    except ValueError as error:
        raise DiffConfigError(str(error)) from error
    return base.with_overrides(
        max_depth=max_depth,
        allow_type_mismatch=allow_type_mismatch,
        options=options,
        ignore=tuple(ignore or ()),
    )


@app.command()
def compare(
    left: Path = typer.Argument(..., help="Path to left JSON document."),
    right: Path = typer.Argument(..., help="Path to right JSON document."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Path to JSON diff config (max_depth, options, ignore).",
    ),
    max_depth: int | None = typer.Option(
        None,
        "--max-depth",
        min=0,
        help="Maximum recursion depth (0 disables the limit).",
    ),
    allow_type_mismatch: bool | None = typer.Option(
        None,
        "--allow-type-mismatch/--strict-types",
        help="Allow comparing values of different types.",
    ),
    option: list[str] | None = typer.Option(
        None,
        "--option",
        help="Member category to compare: properties, fields, collections or all. Repeatable.",
    ),
    ignore: list[str] | None = typer.Option(
        None,
        "--ignore",
        help="Member name or full dotted path to ignore. Repeatable.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Emit machine-readable diff output.",
    ),
    max_items: int = typer.Option(
        8,
        "--max-items",
        help="Maximum number of differences to print in text mode.",
    ),
    fail_on_diff: bool = typer.Option(
        False,
        "--fail-on-diff",
        help="Exit with code 1 when differences are found.",
    ),
) -> None:
    """Compare two JSON documents member by member."""
    try:
        settings = _resolve_config(
            config,
            max_depth=max_depth,
            allow_type_mismatch=allow_type_mismatch,
            option=option,
            ignore=ignore,
        )
        left_value = _load_document(left)
        right_value = _load_document(right)
        differences = compute_diff(
            left_value,
            right_value,
            max_depth=settings.max_depth,
            allow_type_mismatch=settings.allow_type_mismatch,
            options=settings.options,
            ignore=settings.ignore,
        )
    except (
        DiffConfigError,
        InvalidComparisonError,
        PluginError,
        OSError,
        UnicodeDecodeError,
        json.JSONDecodeError,
    ) as error:
        message = f"compare failed: {error}"
        if json_output:
            _echo_json(
                {
                    "status": "error",
                    "exit_code": 1,
                    "message": message,
                    "left_path": str(left),
                    "right_path": str(right),
                }
            )
        else:
            _echo(message, err=True)
        raise typer.Exit(code=1) from error

    exit_code = 1 if fail_on_diff and differences else 0
    if json_output:
        _echo_json(
            {
                "status": "ok",
                "exit_code": exit_code,
                "identical": not differences,
                "left_path": str(left),
                "right_path": str(right),
                "max_depth": settings.max_depth,
                "options": option_names(settings.options),
                "ignore": list(settings.ignore),
                "differences": [difference.to_dict() for difference in differences],
            }
        )
    else:
        _echo(render_diff_summary(differences))
        if differences:
            _echo(render_differences(differences, max_items=max_items))

    if exit_code != 0:
        raise typer.Exit(code=exit_code)


def main() -> None:
    app()
