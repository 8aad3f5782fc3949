from __future__ import annotations

from pydantic import BaseModel, Field

FORM_PATH_PATTERN = r"^/[^\s]*$"
LOCALE_PATTERN = r"^$|^[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]{2,8})*$"


class ErrorResponse(BaseModel):
    detail: str


class HealthResponse(BaseModel):
    status: str
    service: str


class ReadyResponse(BaseModel):
    status: str
    service: str
    forms_registered: int = Field(ge=0)


class SubmitFormRequest(BaseModel):
    form_path: str = Field(min_length=1, max_length=1024, pattern=FORM_PATH_PATTERN)
    locale: str = Field(default="", max_length=35, pattern=LOCALE_PATTERN)
    # Raw submitted form data, normally the XML produced by the form runtime.
    data: str = ""
    submission_id: str | None = Field(default=None, min_length=1, max_length=128)


class SubmitFormResponse(BaseModel):
    # Key names are part of the external result contract.
    formSubmissionComplete: bool
    error: str | None = None
