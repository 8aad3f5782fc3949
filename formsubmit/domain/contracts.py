from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar, runtime_checkable

import httpx
from lxml import etree

from formsubmit.domain.models import FormContext, ModelExportOptions, OutputDocument, PdfOutputOptions

T = TypeVar("T")


@runtime_checkable
class ModelTransformer(Protocol):
    """Exports the structured form model used to drive the DoR merge.

    Implementations are shared across submissions and must be reentrant.
    """

    def export_model(self, *, form_context: FormContext, options: ModelExportOptions) -> dict[str, object]: ...


@runtime_checkable
class DorMerger(Protocol):
    def merge_for_dor(
        self,
        *,
        destination: etree._ElementTree,
        source: etree._ElementTree,
        model: dict[str, object],
    ) -> str: ...


@runtime_checkable
class ResourceResolver(Protocol):
    """Read-only view of the template store."""

    def exists(self, path: str) -> bool: ...


@runtime_checkable
class ExecutionContext(Protocol):
    """Runs a call under the identity the surrounding system provides."""

    def call_with(self, form_context: FormContext, fn: Callable[[], T]) -> T: ...


@runtime_checkable
class PdfOutputService(Protocol):
    def generate_pdf_output(
        self,
        *,
        template_ref: str,
        data: bytes,
        options: PdfOutputOptions,
    ) -> OutputDocument | None: ...


@runtime_checkable
class HttpClientFactory(Protocol):
    """Hands out one client per dispatch; the caller owns and closes it."""

    def new_client(self) -> httpx.Client: ...
