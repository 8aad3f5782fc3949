from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, HTTPException

from formsubmit.api.handlers.deps import ApiDeps
from formsubmit.api.handlers.submissions import submit_form_handler
from formsubmit.api.schemas import (
    ErrorResponse,
    HealthResponse,
    ReadyResponse,
    SubmitFormRequest,
    SubmitFormResponse,
)
from formsubmit.domain.errors import DomainValidationError
from formsubmit.domain.use_cases.submit import SERVICE_NAME


def build_app(run_id: str, api_deps: ApiDeps | None = None) -> FastAPI:
    logger = logging.getLogger("runtime")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        del app
        logger.info("service started", extra={"service": SERVICE_NAME, "run_id": run_id})
        yield
        logger.info("service stopped", extra={"service": SERVICE_NAME, "run_id": run_id})

    app = FastAPI(title="formsubmit", version="0.1.0", lifespan=lifespan)

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service=SERVICE_NAME)

    @app.get("/ready", response_model=ReadyResponse, tags=["System"])
    async def ready() -> ReadyResponse:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        return ReadyResponse(status="ready", service=SERVICE_NAME, forms_registered=len(api_deps.forms))

    @app.post(
        "/submissions",
        response_model=SubmitFormResponse,
        response_model_exclude_none=True,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
        tags=["Submissions"],
    )
    async def submit_form(request: SubmitFormRequest) -> SubmitFormResponse:
        if api_deps is None:
            raise HTTPException(status_code=503, detail="api dependencies are not available")
        try:
            return await submit_form_handler(
                form_path=request.form_path,
                locale=request.locale,
                data=request.data,
                submission_id=request.submission_id,
                api_deps=api_deps,
            )
        except DomainValidationError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    return app
