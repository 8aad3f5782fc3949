from __future__ import annotations

import asyncio

from formsubmit.api.handlers.deps import ApiDeps
from formsubmit.api.schemas import SubmitFormResponse
from formsubmit.domain.errors import DomainValidationError
from formsubmit.domain.models import SubmissionRequest

COMPONENT_ID = "api.submit_form"


async def submit_form_handler(
    *,
    form_path: str,
    locale: str,
    data: str,
    submission_id: str | None,
    api_deps: ApiDeps,
) -> SubmitFormResponse:
    form_context = api_deps.forms.get(form_path)
    if form_context is None:
        raise DomainValidationError(f"form is not registered: {form_path}")

    request = SubmissionRequest(
        form_context=form_context,
        data=data,
        locale=locale,
        submission_id=submission_id,
    )
    # Submission runs synchronously start to finish on a worker thread.
    result = await asyncio.to_thread(api_deps.orchestrator.submit, request)
    return SubmitFormResponse.model_validate(result.to_dict())
