import httpx
import pytest

from formsubmit.clients.stub import StubModelTransformer, StubPdfOutputService
from formsubmit.domain.models import FormContext, ModelExportOptions, SubmissionRequest
from formsubmit.domain.use_cases.submit import SubmitOrchestrator, dor_file_name
from tests.unit.submit_harness import (
    FORM_PATH,
    SAMPLE_DATA,
    TEMPLATE_EN,
    TEMPLATE_FR,
    build_harness,
    form_context,
    parse_multipart,
)


def _request(context: FormContext | None, *, data: str = SAMPLE_DATA, locale: str = "en") -> SubmissionRequest:
    return SubmissionRequest(form_context=context, data=data, locale=locale, submission_id="sub_test")


@pytest.mark.unit
def test_dor_rendered_attached_and_dispatched() -> None:
    harness = build_harness(templates={TEMPLATE_EN}, status_code=200)

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert result.attachment_included is True
    assert result.trace == ("start", "dor_decision", "render", "attach", "dispatch", "done")
    [attachment] = parse_multipart(harness.clients.requests[0]).named("attachments")
    assert attachment.filename == "dor_en.pdf"
    assert attachment.content_type == "application/pdf"
    assert attachment.payload == b"%PDF-1.7 stub"


@pytest.mark.unit
def test_blank_post_url_completes_without_http_call() -> None:
    harness = build_harness()

    result = harness.orchestrator.submit(_request(form_context(post_url="")))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert harness.clients.clients == []


@pytest.mark.unit
def test_remote_rejection_is_reported_as_request_failed() -> None:
    harness = build_harness(status_code=503)

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": False, "error": "request failed"}


@pytest.mark.unit
def test_missing_template_skips_rendering_but_still_dispatches() -> None:
    harness = build_harness(templates=set())

    result = harness.orchestrator.submit(_request(form_context(), locale="fr"))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert harness.output.calls == []
    assert harness.resources.lookups == [TEMPLATE_FR, TEMPLATE_EN]
    assert len(harness.clients.requests) == 1
    assert parse_multipart(harness.clients.requests[0]).named("attachments") == []
    assert result.trace == ("start", "dor_decision", "dispatch", "done")


@pytest.mark.unit
@pytest.mark.parametrize("locale", ["en", "fr", "de"])
def test_missing_template_without_post_url_is_complete(locale: str) -> None:
    harness = build_harness(templates=set())

    result = harness.orchestrator.submit(_request(form_context(post_url=None), locale=locale))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert harness.output.calls == []


@pytest.mark.unit
def test_empty_data_skips_rendering_and_dispatches_empty_fields() -> None:
    harness = build_harness()

    result = harness.orchestrator.submit(_request(form_context(), data=""))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert harness.transformer.calls == []
    assert harness.output.calls == []
    body = parse_multipart(harness.clients.requests[0])
    assert [part.payload for part in body.named("data")] == [b""]
    assert [part.payload for part in body.named("dataXml")] == [b""]
    assert body.named("attachments") == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "context",
    [
        form_context(dor_type="none"),
        form_context(dor_type=None),
        form_context(template_ref=""),
        form_context(template_ref=None),
    ],
)
def test_no_rendering_unless_dor_type_select_and_template_configured(context: FormContext) -> None:
    harness = build_harness()

    result = harness.orchestrator.submit(_request(context))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert harness.resources.lookups == []
    assert harness.transformer.calls == []
    assert harness.output.calls == []


@pytest.mark.unit
@pytest.mark.parametrize("dor_type", ["select", "SELECT", "Select"])
def test_dor_type_match_is_case_insensitive(dor_type: str) -> None:
    harness = build_harness()

    harness.orchestrator.submit(_request(form_context(dor_type=dor_type)))

    assert len(harness.output.calls) == 1


@pytest.mark.unit
def test_localized_template_is_rendered_and_named_after_language() -> None:
    harness = build_harness(templates={TEMPLATE_FR})

    result = harness.orchestrator.submit(_request(form_context(), locale="fr-CA"))

    assert result.form_submission_complete is True
    assert harness.output.calls[0][0] == TEMPLATE_FR
    assert harness.transformer.calls == [
        ModelExportOptions(form_container_path=FORM_PATH, include_fragment_json=True, locale="fr-CA")
    ]
    [attachment] = parse_multipart(harness.clients.requests[0]).named("attachments")
    assert attachment.filename == "dor_fr.pdf"


@pytest.mark.unit
def test_resolution_and_rendering_run_inside_execution_context() -> None:
    harness = build_harness()

    harness.orchestrator.submit(_request(form_context()))

    assert harness.execution_context.contexts == [FORM_PATH, FORM_PATH]


@pytest.mark.unit
def test_repeated_submissions_give_identical_results() -> None:
    harness = build_harness(status_code=200)
    request = _request(form_context())

    first = harness.orchestrator.submit(request)
    second = harness.orchestrator.submit(request)

    assert first == second
    assert first.to_dict() == {"formSubmissionComplete": True}
    assert len(harness.clients.clients) == 2
    assert all(client.is_closed for client in harness.clients.clients)


@pytest.mark.unit
def test_renderer_without_output_dispatches_without_attachment() -> None:
    harness = build_harness(output=StubPdfOutputService(mode="missing"))

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert result.attachment_included is False
    assert parse_multipart(harness.clients.requests[0]).named("attachments") == []


class _ExplodingOutputService(StubPdfOutputService):
    def generate_pdf_output(self, *, template_ref, data, options):  # type: ignore[no-untyped-def]
        raise RuntimeError("renderer crashed")


@pytest.mark.unit
def test_render_exception_is_contained_by_default() -> None:
    harness = build_harness(output=_ExplodingOutputService())

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": True}
    assert len(harness.clients.requests) == 1
    assert parse_multipart(harness.clients.requests[0]).named("attachments") == []


@pytest.mark.unit
def test_render_exception_aborts_under_abort_policy() -> None:
    harness = build_harness(output=_ExplodingOutputService(), render_failure_policy="abort")

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": False, "error": "renderer crashed"}
    assert harness.clients.requests == []
    assert result.trace[-2:] == ("failure", "done")


@pytest.mark.unit
def test_malformed_xml_fails_submission_with_message() -> None:
    harness = build_harness()

    result = harness.orchestrator.submit(_request(form_context(), data="<data><broken></data>"))

    assert result.form_submission_complete is False
    assert result.error is not None
    assert "well-formed" in result.error
    assert "Traceback" not in result.error
    assert harness.clients.requests == []
    assert result.trace == ("start", "dor_decision", "render", "failure", "done")


@pytest.mark.unit
def test_transformer_exception_fails_submission() -> None:
    class _FailingTransformer(StubModelTransformer):
        def export_model(self, *, form_context: FormContext, options: ModelExportOptions) -> dict[str, object]:
            raise RuntimeError("model export failed")

    harness = build_harness(transformer=_FailingTransformer())

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": False, "error": "model export failed"}


@pytest.mark.unit
def test_missing_form_context_fails_without_raising() -> None:
    harness = build_harness()

    result = harness.orchestrator.submit(_request(None))

    assert result.form_submission_complete is False
    assert result.error
    assert harness.clients.clients == []


@pytest.mark.unit
def test_unexpected_transport_exception_is_reported_as_request_failed() -> None:
    def _explode(request: httpx.Request) -> httpx.Response:
        raise ValueError("unexpected transport state")

    harness = build_harness(handler=_explode)

    result = harness.orchestrator.submit(_request(form_context()))

    assert result.to_dict() == {"formSubmissionComplete": False, "error": "request failed"}
    assert result.trace == ("start", "dor_decision", "render", "attach", "dispatch", "done")
    assert harness.clients.clients[0].is_closed


@pytest.mark.unit
def test_unknown_render_failure_policy_is_rejected() -> None:
    harness = build_harness()

    with pytest.raises(ValueError, match="render failure policy"):
        SubmitOrchestrator(
            resolver=harness.orchestrator.resolver,
            processor=harness.orchestrator.processor,
            renderer=harness.orchestrator.renderer,
            dispatcher=harness.orchestrator.dispatcher,
            resources=harness.resources,
            execution_context=harness.execution_context,
            render_failure_policy="retry",  # type: ignore[arg-type]
        )


@pytest.mark.unit
@pytest.mark.parametrize(("locale", "expected"), [("fr-CA", "dor_fr.pdf"), ("", "dor_en.pdf"), ("AF", "dor_af.pdf")])
def test_dor_file_name_uses_language_subtag(locale: str, expected: str) -> None:
    assert dor_file_name(locale) == expected


@pytest.mark.unit
def test_malformed_post_url_fails_with_request_failed() -> None:
    harness = build_harness()

    result = harness.orchestrator.submit(_request(form_context(post_url="http://[::1")))

    assert result.to_dict() == {"formSubmissionComplete": False, "error": "request failed"}
    assert harness.clients.requests == []
