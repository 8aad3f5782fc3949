from __future__ import annotations

import argparse
from dataclasses import replace
import logging
import os
import sys
import uuid

import uvicorn

from formsubmit.api.http_app import build_app
from formsubmit.domain.errors import FormConfigError
from formsubmit.domain.use_cases.submit import SERVICE_NAME
from formsubmit.logging_setup import configure_logging
from formsubmit.services.bootstrap import build_runtime_container
from formsubmit.settings import submit_settings_from_env

DEFAULT_PORT = 8000


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Form submission service")
    parser.add_argument("--host", default=os.getenv("APP_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--forms-config", default=None, help="Path to the form registry YAML")
    parser.add_argument(
        "--dry-run-startup",
        action="store_true",
        help="Validate startup and exit",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable code reload (dev mode)",
    )
    return parser.parse_args(argv)


def create_runtime_app() -> object:
    configure_logging()
    container = build_runtime_container()
    return build_app(run_id=str(uuid.uuid4()), api_deps=container.api_deps)


def run(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    configure_logging()
    run_id = str(uuid.uuid4())
    logger = logging.getLogger("runtime")

    settings = submit_settings_from_env()
    if args.forms_config:
        settings = replace(settings, forms_config_path=args.forms_config)

    try:
        container = build_runtime_container(settings)
    except FormConfigError as exc:
        sys.stderr.write(f"ERROR: {exc}\n")
        return 2

    logger.info(
        "runtime initialized",
        extra={"service": SERVICE_NAME, "run_id": run_id},
    )

    if args.dry_run_startup:
        logger.info(
            "dry-run startup complete",
            extra={"service": SERVICE_NAME, "run_id": run_id},
        )
        return 0

    if args.reload:
        os.environ["FORMSUBMIT_FORMS_CONFIG"] = settings.forms_config_path
        uvicorn.run(
            "formsubmit.main:create_runtime_app",
            host=args.host,
            port=args.port,
            log_level="warning",
            reload=True,
            factory=True,
        )
    else:
        app = build_app(run_id=run_id, api_deps=container.api_deps)
        uvicorn.run(app, host=args.host, port=args.port, log_level="warning")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
