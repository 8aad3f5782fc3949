from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import BinaryIO

# Result keys at the external boundary. Downstream callers read these names.
FORM_SUBMISSION_COMPLETE = "formSubmissionComplete"
ERROR_KEY = "error"

# Form container property keys.
DOR_TYPE_PROPERTY = "dorType"
DOR_TEMPLATE_REF_PROPERTY = "dorTemplateRef"
POST_URL_PROPERTY = "postUrl"

DOR_TYPE_SELECT = "select"


@dataclass(frozen=True)
class FormContext:
    """Form container the submission was made against.

    `language` is the base language declared by the enclosing page; it may be
    absent, in which case template resolution falls back to the default locale.
    """

    path: str
    language: str | None = None
    properties: Mapping[str, str] = field(default_factory=dict)

    @property
    def dor_type(self) -> str | None:
        return self.properties.get(DOR_TYPE_PROPERTY)

    @property
    def dor_template_ref(self) -> str | None:
        return self.properties.get(DOR_TEMPLATE_REF_PROPERTY)

    @property
    def post_url(self) -> str | None:
        return self.properties.get(POST_URL_PROPERTY)

    @property
    def dor_enabled(self) -> bool:
        dor_type = (self.dor_type or "").strip()
        return dor_type.lower() == DOR_TYPE_SELECT


@dataclass(frozen=True)
class SubmissionRequest:
    form_context: FormContext | None
    data: str
    locale: str = ""
    submission_id: str | None = None


@dataclass(frozen=True)
class FileAttachment:
    file_name: str
    content_type: str
    content: bytes


@dataclass(frozen=True)
class ModelExportOptions:
    form_container_path: str
    include_fragment_json: bool
    locale: str


@dataclass(frozen=True)
class PdfOutputOptions:
    content_root: str


@dataclass(frozen=True)
class OutputDocument:
    # Renderers may hand back a document without a readable body.
    stream: BinaryIO | None


@dataclass(frozen=True)
class SubmissionResult:
    form_submission_complete: bool
    error: str | None = None
    status_code: int | None = None
    attachment_included: bool = False
    trace: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {FORM_SUBMISSION_COMPLETE: self.form_submission_complete}
        if self.error is not None:
            payload[ERROR_KEY] = self.error
        return payload
