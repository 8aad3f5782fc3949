from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

# Canonical error vocabulary for all submission steps.
ErrorCode = Literal[
    "template_not_found",
    "template_lookup_failed",
    "dor_data_invalid",
    "model_transform_failed",
    "rendering_failed",
    "transport_failed",
    "remote_rejected",
    "internal_error",
]

# contained: step failure is logged and the pipeline continues with less work.
# fatal: step failure turns the whole submission into a failure result.
Containment = Literal["contained", "fatal"]

CANONICAL_ERROR_CODES: tuple[ErrorCode, ...] = (
    "template_not_found",
    "template_lookup_failed",
    "dor_data_invalid",
    "model_transform_failed",
    "rendering_failed",
    "transport_failed",
    "remote_rejected",
    "internal_error",
)

CONTAINED_ERROR_CODES: frozenset[ErrorCode] = frozenset(
    {
        "template_not_found",
        "template_lookup_failed",
        "rendering_failed",
        "transport_failed",
        "remote_rejected",
    }
)

# Step-specific allowlist. Codes outside the map collapse to internal_error.
STEP_ERROR_MAP: Mapping[str, frozenset[ErrorCode]] = {
    "resolve": frozenset({"template_not_found", "template_lookup_failed", "internal_error"}),
    "process": frozenset({"dor_data_invalid", "model_transform_failed", "internal_error"}),
    "render": frozenset({"rendering_failed", "internal_error"}),
    "dispatch": frozenset({"transport_failed", "remote_rejected", "internal_error"}),
}


def is_canonical_error_code(code: str) -> bool:
    return code in CANONICAL_ERROR_CODES


def classify_error(code: ErrorCode) -> Containment:
    if code in CONTAINED_ERROR_CODES:
        return "contained"
    return "fatal"


def resolve_step_error(*, step: str, code: str) -> ErrorCode:
    allowed = STEP_ERROR_MAP.get(step, frozenset({"internal_error"}))
    if code in allowed and is_canonical_error_code(code):
        return code
    return "internal_error"
