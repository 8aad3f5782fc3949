from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from typing import Literal

from formsubmit.domain.contracts import ExecutionContext, ResourceResolver
from formsubmit.domain.error_taxonomy import ErrorCode, classify_error, resolve_step_error
from formsubmit.domain.errors import DomainInvariantError, DomainValidationError, DorDataError
from formsubmit.domain.ids import new_submission_id
from formsubmit.domain.lifecycle import SubmitState, is_allowed_transition
from formsubmit.domain.locales import DEFAULT_LOCALE, language_subtag
from formsubmit.domain.models import FileAttachment, FormContext, SubmissionRequest, SubmissionResult
from formsubmit.domain.use_cases.dispatch import SubmissionDispatcher
from formsubmit.domain.use_cases.process_dor_data import DorDataProcessor
from formsubmit.domain.use_cases.render_document import DocumentRenderer
from formsubmit.domain.use_cases.resolve_template import TemplateResolver

COMPONENT_ID = "domain.submit.orchestrate"
SERVICE_NAME = "DOR_REST_SUBMIT"

DOR_PDF_PREFIX = "dor_"
PDF_EXTENSION = ".pdf"
PDF_CONTENT_TYPE = "application/pdf"

RenderFailurePolicy = Literal["continue", "abort"]
RENDER_FAILURE_POLICIES: tuple[RenderFailurePolicy, ...] = ("continue", "abort")

logger = logging.getLogger("formsubmit")


@dataclass
class _StateTrace:
    # Lives for exactly one submit() call.
    state: SubmitState = SubmitState.START
    visited: list[SubmitState] = field(default_factory=lambda: [SubmitState.START])

    def move(self, to_state: SubmitState) -> None:
        if not is_allowed_transition(from_state=self.state, to_state=to_state):
            raise DomainInvariantError(f"invalid submit transition: {self.state} -> {to_state}")
        self.state = to_state
        self.visited.append(to_state)

    def fail(self) -> None:
        if self.state not in (SubmitState.FAILURE, SubmitState.DONE):
            self.move(SubmitState.FAILURE)
        if self.state is SubmitState.FAILURE:
            self.move(SubmitState.DONE)

    def as_tuple(self) -> tuple[str, ...]:
        return tuple(state.value for state in self.visited)


def dor_file_name(locale: str | None, *, default_locale: str = DEFAULT_LOCALE) -> str:
    return f"{DOR_PDF_PREFIX}{language_subtag(locale) or default_locale}{PDF_EXTENSION}"


@dataclass(frozen=True)
class SubmitOrchestrator:
    """Runs one form submission: optional DoR rendering, then the REST dispatch.

    submit() never raises. Every outcome, including unexpected exceptions from
    collaborators, is reported as a SubmissionResult.
    """

    resolver: TemplateResolver
    processor: DorDataProcessor
    renderer: DocumentRenderer
    dispatcher: SubmissionDispatcher
    resources: ResourceResolver
    execution_context: ExecutionContext
    render_failure_policy: RenderFailurePolicy = "continue"
    default_locale: str = DEFAULT_LOCALE

    def __post_init__(self) -> None:
        if self.render_failure_policy not in RENDER_FAILURE_POLICIES:
            raise ValueError(f"unsupported render failure policy: {self.render_failure_policy}")

    def submit(self, request: SubmissionRequest) -> SubmissionResult:
        trace = _StateTrace()
        submission_id = request.submission_id or new_submission_id()
        form_path = request.form_context.path if request.form_context is not None else "<form container is null>"
        log_extra = {"service": SERVICE_NAME, "submission_id": submission_id, "form_path": form_path}
        step = "resolve"

        try:
            trace.move(SubmitState.DOR_DECISION)
            form_context = request.form_context
            if form_context is None:
                raise DomainValidationError("form container is not available for submission")

            template_ref = self._decide_template(request=request, form_context=form_context)

            attachment: FileAttachment | None = None
            if template_ref is not None:
                trace.move(SubmitState.RENDER)
                step = "process"
                merged = self.processor.process(data=request.data, locale=request.locale, form_context=form_context)
                step = "render"
                attachment = self._render_attachment(
                    request=request,
                    form_context=form_context,
                    template_ref=template_ref,
                    merged=merged,
                    log_extra=log_extra,
                )
                if attachment is not None:
                    trace.move(SubmitState.ATTACH)

            trace.move(SubmitState.DISPATCH)
            step = "dispatch"
            result = self.dispatcher.dispatch(
                post_url=form_context.post_url,
                data=request.data,
                attachment=attachment,
                form_path=form_path,
            )
            trace.move(SubmitState.DONE)
        except Exception as exc:
            error_code = _error_code_for(step=step, exc=exc)
            logger.exception(
                "failed to submit form",
                extra={**log_extra, "error_code": error_code},
            )
            trace.fail()
            return SubmissionResult(
                form_submission_complete=False,
                error=str(exc) or exc.__class__.__name__,
                trace=trace.as_tuple(),
            )

        logger.info(
            "form submission finished, complete=%s",
            result.form_submission_complete,
            extra=log_extra,
        )
        return replace(result, trace=trace.as_tuple())

    def _decide_template(self, *, request: SubmissionRequest, form_context: FormContext) -> str | None:
        if not form_context.dor_enabled:
            return None
        template_ref = form_context.dor_template_ref
        if template_ref is None or not template_ref.strip():
            return None
        return self.execution_context.call_with(
            form_context,
            lambda: self.resolver.resolve(
                default_template_ref=template_ref,
                locale=request.locale,
                form_context=form_context,
                exists=self.resources.exists,
            ),
        )

    def _render_attachment(
        self,
        *,
        request: SubmissionRequest,
        form_context: FormContext,
        template_ref: str,
        merged: str,
        log_extra: dict[str, str],
    ) -> FileAttachment | None:
        if not merged:
            logger.info("no DoR content to render, skipping attachment", extra=log_extra)
            return None

        try:
            content = self.execution_context.call_with(
                form_context,
                lambda: self.renderer.render(template_ref=template_ref, data=merged),
            )
        except Exception:
            error_code = resolve_step_error(step="render", code="rendering_failed")
            if self.render_failure_policy == "abort" or classify_error(error_code) == "fatal":
                raise
            logger.exception(
                "DoR rendering failed, submitting without attachment",
                extra={**log_extra, "error_code": error_code},
            )
            return None

        if content is None:
            return None
        return FileAttachment(
            file_name=dor_file_name(request.locale, default_locale=self.default_locale),
            content_type=PDF_CONTENT_TYPE,
            content=content,
        )


def _error_code_for(*, step: str, exc: Exception) -> ErrorCode:
    if isinstance(exc, DorDataError):
        code = "dor_data_invalid"
    elif step == "process":
        code = "model_transform_failed"
    elif step == "render":
        code = "rendering_failed"
    else:
        code = "internal_error"
    return resolve_step_error(step=step, code=code)
