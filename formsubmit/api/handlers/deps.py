from __future__ import annotations

from dataclasses import dataclass

from formsubmit.domain.form_config import FormRegistry
from formsubmit.domain.use_cases.submit import SubmitOrchestrator


@dataclass(frozen=True)
class ApiDeps:
    orchestrator: SubmitOrchestrator
    forms: FormRegistry
