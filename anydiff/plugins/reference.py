"""Reference lifecycle plugin implementation."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path

from anydiff.plugins.base import DiffEndEvent, DiffStartEvent, LifecyclePlugin


@dataclass(slots=True)
class LifecycleTracePlugin(LifecyclePlugin):
    """Appends one NDJSON record per comparison hook."""

    output_path: str = "anydiff-trace.ndjson"
    name: str = "lifecycle-trace"

    def on_diff_start(self, event: DiffStartEvent) -> None:
        self._append("on_diff_start", event.to_dict())

    def on_diff_end(self, event: DiffEndEvent) -> None:
        self._append("on_diff_end", event.to_dict())

    def _append(self, hook: str, event: dict) -> None:
        path = Path(self.output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        record = json.dumps(
            {"hook": hook, "plugin": self.name, "event": event},
            ensure_ascii=True,
            sort_keys=True,
            separators=(",", ":"),
        )
        with path.open("a", encoding="utf-8") as handle:
            handle.write(record + "\n")
