from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import io
from typing import TypeVar

import httpx
from lxml import etree

from formsubmit.domain.models import FormContext, ModelExportOptions, OutputDocument, PdfOutputOptions

T = TypeVar("T")


@dataclass
class InMemoryResourceResolver:
    paths: set[str] = field(default_factory=set)
    lookups: list[str] = field(default_factory=list)

    def exists(self, path: str) -> bool:
        self.lookups.append(path)
        return path in self.paths


@dataclass
class StubModelTransformer:
    calls: list[ModelExportOptions] = field(default_factory=list)

    def export_model(self, *, form_context: FormContext, options: ModelExportOptions) -> dict[str, object]:
        self.calls.append(options)
        return {"formContainerPath": form_context.path, "locale": options.locale}


@dataclass
class StubDorMerger:
    calls: int = 0

    def merge_for_dor(
        self,
        *,
        destination: etree._ElementTree,
        source: etree._ElementTree,
        model: dict[str, object],
    ) -> str:
        self.calls += 1
        return etree.tostring(source, encoding="unicode")


@dataclass
class StubPdfOutputService:
    content: bytes | None = b"%PDF-1.7 stub"
    # "missing" returns no document at all, "no_stream" a document without a body.
    mode: str = "ok"
    calls: list[tuple[str, bytes, PdfOutputOptions]] = field(default_factory=list)

    def generate_pdf_output(
        self,
        *,
        template_ref: str,
        data: bytes,
        options: PdfOutputOptions,
    ) -> OutputDocument | None:
        self.calls.append((template_ref, data, options))
        if self.mode == "missing":
            return None
        if self.mode == "no_stream" or self.content is None:
            return OutputDocument(stream=None)
        return OutputDocument(stream=io.BytesIO(self.content))


@dataclass
class RecordingExecutionContext:
    contexts: list[str] = field(default_factory=list)

    def call_with(self, form_context: FormContext, fn: Callable[[], T]) -> T:
        self.contexts.append(form_context.path)
        return fn()


@dataclass
class MockTransportClientFactory:
    """Builds httpx clients over a MockTransport and keeps them for inspection."""

    handler: Callable[[httpx.Request], httpx.Response]
    clients: list[httpx.Client] = field(default_factory=list)
    requests: list[httpx.Request] = field(default_factory=list)

    def new_client(self) -> httpx.Client:
        def _record(request: httpx.Request) -> httpx.Response:
            request.read()
            self.requests.append(request)
            return self.handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_record))
        self.clients.append(client)
        return client
