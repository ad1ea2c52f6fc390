"""Runtime plugin manager with fault-isolated hook dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import warnings

from anydiff.plugins.base import DiffEndEvent, DiffStartEvent

logger = logging.getLogger(__name__)

DiffEvent = DiffStartEvent | DiffEndEvent


@dataclass(frozen=True, slots=True)
class PluginDiagnostic:
    """A hook failure, tied to the comparison that triggered it."""

    plugin_name: str
    hook: str
    error_type: str
    message: str
    left_type: str | None = None
    right_type: str | None = None

    @property
    def comparison(self) -> str:
        return f"{self.left_type or 'None'} vs {self.right_type or 'None'}"

    def to_dict(self) -> dict[str, str | None]:
        return {
            "plugin_name": self.plugin_name,
            "hook": self.hook,
            "error_type": self.error_type,
            "message": self.message,
            "left_type": self.left_type,
            "right_type": self.right_type,
        }


@dataclass(slots=True)
class PluginManager:
    """Runs comparison hooks on every plugin; a failing plugin never fails the diff."""

    plugins: tuple[object, ...] = ()
    diagnostics: list[PluginDiagnostic] = field(default_factory=list)

    def clear_diagnostics(self) -> None:
        self.diagnostics.clear()

    def failures_for(self, hook: str) -> list[PluginDiagnostic]:
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.hook == hook]

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._dispatch("on_diff_start", event)

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._dispatch("on_diff_end", event)

    def _dispatch(self, hook: str, event: DiffEvent) -> None:
        for plugin in self.plugins:
            callback = getattr(plugin, hook, None)
            if callback is None:
                continue
            try:
                callback(event)
            except Exception as error:
                self._record_failure(plugin, hook, event, error)

    def _record_failure(
        self,
        plugin: object,
        hook: str,
        event: DiffEvent,
        error: Exception,
    ) -> None:
        diagnostic = PluginDiagnostic(
            plugin_name=_plugin_name(plugin),
            hook=hook,
            error_type=error.__class__.__name__,
            message=str(error),
            left_type=event.left_type,
            right_type=event.right_type,
        )
        self.diagnostics.append(diagnostic)
        logger.debug("plugin %s failed in %s", diagnostic.plugin_name, hook, exc_info=error)
        warnings.warn(
            (
                f"AnyDiff plugin failure: plugin={diagnostic.plugin_name} hook={hook} "
                f"comparison={diagnostic.comparison} "
                f"error={diagnostic.error_type}: {diagnostic.message}"
            ),
            RuntimeWarning,
            stacklevel=3,
        )


def _plugin_name(plugin: object) -> str:
    return str(getattr(plugin, "name", type(plugin).__name__))
