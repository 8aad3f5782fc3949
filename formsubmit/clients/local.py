from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from formsubmit.domain.models import FormContext, ModelExportOptions

T = TypeVar("T")


@dataclass(frozen=True)
class DirectExecutionContext:
    def call_with(self, form_context: FormContext, fn: Callable[[], T]) -> T:
        del form_context
        return fn()


@dataclass(frozen=True)
class FileSystemResourceResolver:
    """Template store backed by a directory; repository paths map below `root`."""

    root: Path

    def exists(self, path: str) -> bool:
        relative = path.strip().lstrip("/")
        if not relative:
            return False
        base = self.root.resolve()
        candidate = (base / relative).resolve()
        # Paths escaping the store root never exist.
        if not candidate.is_relative_to(base):
            return False
        return candidate.is_file()


@dataclass(frozen=True)
class StaticModelTransformer:
    """Form model built from the container path and request options only."""

    def export_model(self, *, form_context: FormContext, options: ModelExportOptions) -> dict[str, object]:
        return {
            "formContainerPath": options.form_container_path,
            "includeFragmentJson": options.include_fragment_json,
            "locale": options.locale,
            "properties": dict(form_context.properties),
        }
