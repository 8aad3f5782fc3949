from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

DEFAULT_FORMS_CONFIG = str(Path(__file__).parent / "config" / "forms.v1.yaml")
DEFAULT_TEMPLATE_ROOT = "templates"


@dataclass(frozen=True)
class SubmitSettings:
    request_timeout_seconds: float = 30.0
    default_locale: str = "en"
    content_root_protocol: str = "crx://"
    render_failure_policy: str = "continue"
    forms_config_path: str = DEFAULT_FORMS_CONFIG
    template_root: str = DEFAULT_TEMPLATE_ROOT


def submit_settings_from_env() -> SubmitSettings:
    return SubmitSettings(
        request_timeout_seconds=_env_float("FORMSUBMIT_REQUEST_TIMEOUT_SECONDS", 30.0),
        default_locale=_env_str("FORMSUBMIT_DEFAULT_LOCALE", "en"),
        content_root_protocol=_env_str("FORMSUBMIT_CONTENT_ROOT_PROTOCOL", "crx://"),
        render_failure_policy=_env_choice("FORMSUBMIT_RENDER_FAILURE_POLICY", ("continue", "abort"), "continue"),
        forms_config_path=_env_str("FORMSUBMIT_FORMS_CONFIG", DEFAULT_FORMS_CONFIG),
        template_root=_env_str("FORMSUBMIT_TEMPLATE_ROOT", DEFAULT_TEMPLATE_ROOT),
    )


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default

    try:
        parsed = float(value)
    except ValueError:
        return default

    return parsed if parsed > 0 else default


def _env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    value = _env_str(name, default).lower()
    return value if value in choices else default
