from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from types import MappingProxyType

import yaml

from formsubmit.domain.errors import FormConfigError
from formsubmit.domain.models import (
    DOR_TEMPLATE_REF_PROPERTY,
    DOR_TYPE_PROPERTY,
    POST_URL_PROPERTY,
    FormContext,
)

REGISTRY_VERSION = "forms:v1"
KNOWN_PROPERTIES = (DOR_TYPE_PROPERTY, DOR_TEMPLATE_REF_PROPERTY, POST_URL_PROPERTY)
LANGUAGE_RE = re.compile(r"^[a-z]{2}(?:[-_][A-Za-z]{2})?$")


@dataclass(frozen=True)
class FormRegistry:
    version: str
    forms: MappingProxyType[str, FormContext]

    def get(self, form_path: str) -> FormContext | None:
        return self.forms.get(form_path)

    def __len__(self) -> int:
        return len(self.forms)


def load_form_registry(*, file_path: str | Path) -> FormRegistry:
    try:
        data = yaml.safe_load(Path(file_path).read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise FormConfigError(f"cannot read form registry {file_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise FormConfigError("form registry must be a YAML object")
    return parse_form_registry(data)


def parse_form_registry(data: dict[str, object]) -> FormRegistry:
    version = _required_str(data, "version")
    if version != REGISTRY_VERSION:
        raise FormConfigError(f"unsupported form registry version: {version}")

    forms_raw = data.get("forms")
    if not isinstance(forms_raw, list):
        raise FormConfigError("forms is required and must be a list")

    forms: dict[str, FormContext] = {}
    for index, item in enumerate(forms_raw):
        if not isinstance(item, dict):
            raise FormConfigError(f"forms[{index}] must be an object")
        context = _parse_form(item)
        if context.path in forms:
            raise FormConfigError(f"duplicate form path: {context.path}")
        forms[context.path] = context

    return FormRegistry(version=version, forms=MappingProxyType(forms))


def _parse_form(item: dict[str, object]) -> FormContext:
    path = _required_str(item, "path")
    language = _optional_str(item, "language")
    if language is not None and not LANGUAGE_RE.match(language):
        raise FormConfigError(f"{path}: language must be ISO code, e.g. 'en' or 'fr-CA'")

    properties_raw = item.get("properties", {})
    if not isinstance(properties_raw, dict):
        raise FormConfigError(f"{path}: properties must be an object")
    properties: dict[str, str] = {}
    for key in KNOWN_PROPERTIES:
        value = _optional_str(properties_raw, key)
        if value is not None:
            properties[key] = value

    return FormContext(path=path, language=language, properties=MappingProxyType(properties))


def _required_str(data: dict[str, object], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise FormConfigError(f"{key} is required and must be non-empty string")
    return value


def _optional_str(data: dict[str, object], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FormConfigError(f"{key} must be string or null")
    return value
