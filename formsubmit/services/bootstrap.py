from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import cast

from formsubmit.api.handlers.deps import ApiDeps
from formsubmit.clients.dor_merge import XmlDorMerger
from formsubmit.clients.http import HttpxClientFactory
from formsubmit.clients.local import DirectExecutionContext, FileSystemResourceResolver, StaticModelTransformer
from formsubmit.clients.pdf_output import ReportlabPdfOutputService
from formsubmit.domain.contracts import (
    DorMerger,
    ExecutionContext,
    HttpClientFactory,
    ModelTransformer,
    PdfOutputService,
    ResourceResolver,
)
from formsubmit.domain.form_config import FormRegistry, load_form_registry
from formsubmit.domain.use_cases.dispatch import SubmissionDispatcher
from formsubmit.domain.use_cases.process_dor_data import DorDataProcessor
from formsubmit.domain.use_cases.render_document import DocumentRenderer
from formsubmit.domain.use_cases.resolve_template import TemplateResolver
from formsubmit.domain.use_cases.submit import RenderFailurePolicy, SubmitOrchestrator
from formsubmit.settings import SubmitSettings, submit_settings_from_env


@dataclass
class RuntimeContainer:
    settings: SubmitSettings
    forms: FormRegistry
    resources: ResourceResolver
    transformer: ModelTransformer
    merger: DorMerger
    output_service: PdfOutputService
    client_factory: HttpClientFactory
    execution_context: ExecutionContext
    orchestrator: SubmitOrchestrator
    api_deps: ApiDeps


def build_orchestrator(
    *,
    settings: SubmitSettings,
    resources: ResourceResolver,
    transformer: ModelTransformer,
    merger: DorMerger,
    output_service: PdfOutputService,
    client_factory: HttpClientFactory,
    execution_context: ExecutionContext,
) -> SubmitOrchestrator:
    return SubmitOrchestrator(
        resolver=TemplateResolver(default_locale=settings.default_locale),
        processor=DorDataProcessor(
            transformer=transformer,
            merger=merger,
            default_locale=settings.default_locale,
        ),
        renderer=DocumentRenderer(
            output_service=output_service,
            content_root_protocol=settings.content_root_protocol,
        ),
        dispatcher=SubmissionDispatcher(client_factory=client_factory),
        resources=resources,
        execution_context=execution_context,
        render_failure_policy=cast(RenderFailurePolicy, settings.render_failure_policy),
        default_locale=settings.default_locale,
    )


def build_runtime_container(settings: SubmitSettings | None = None) -> RuntimeContainer:
    settings = settings or submit_settings_from_env()
    forms = load_form_registry(file_path=settings.forms_config_path)
    resources = FileSystemResourceResolver(root=Path(settings.template_root))
    transformer = StaticModelTransformer()
    merger = XmlDorMerger()
    output_service = ReportlabPdfOutputService()
    client_factory = HttpxClientFactory(timeout_seconds=settings.request_timeout_seconds)
    execution_context = DirectExecutionContext()

    orchestrator = build_orchestrator(
        settings=settings,
        resources=resources,
        transformer=transformer,
        merger=merger,
        output_service=output_service,
        client_factory=client_factory,
        execution_context=execution_context,
    )
    return RuntimeContainer(
        settings=settings,
        forms=forms,
        resources=resources,
        transformer=transformer,
        merger=merger,
        output_service=output_service,
        client_factory=client_factory,
        execution_context=execution_context,
        orchestrator=orchestrator,
        api_deps=ApiDeps(orchestrator=orchestrator, forms=forms),
    )
