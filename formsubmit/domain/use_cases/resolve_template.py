from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging

from formsubmit.domain.locales import DEFAULT_LOCALE, localize_template_ref
from formsubmit.domain.models import FormContext

COMPONENT_ID = "domain.dor.resolve_template"

logger = logging.getLogger("formsubmit")


@dataclass(frozen=True)
class TemplateResolver:
    default_locale: str = DEFAULT_LOCALE

    def resolve(
        self,
        *,
        default_template_ref: str | None,
        locale: str | None,
        form_context: FormContext | None,
        exists: Callable[[str], bool],
    ) -> str | None:
        """Pick the localized template if the store has it, else the default one.

        Returns None when nothing usable exists; lookup errors are logged and
        reported as "no template" so the caller can skip rendering.
        """
        if default_template_ref is None or not default_template_ref.strip() or form_context is None:
            logger.debug("invalid parameters for template reference processing")
            return None

        try:
            base_locale = (form_context.language or "").strip() or self.default_locale
            localized_ref = localize_template_ref(
                template_ref=default_template_ref,
                base_locale=base_locale,
                locale=locale,
            )

            if exists(localized_ref):
                logger.debug("localized template found: %s", localized_ref, extra={"form_path": form_context.path})
                return localized_ref
            if localized_ref == default_template_ref:
                logger.warning(
                    "no template found for path: %s",
                    default_template_ref,
                    extra={"form_path": form_context.path, "error_code": "template_not_found"},
                )
                return None
            if exists(default_template_ref):
                logger.debug("default template found: %s", default_template_ref, extra={"form_path": form_context.path})
                return default_template_ref
            logger.warning(
                "no template found for paths: %s or %s",
                localized_ref,
                default_template_ref,
                extra={"form_path": form_context.path, "error_code": "template_not_found"},
            )
            return None
        except Exception:
            logger.exception(
                "error checking template existence for path: %s",
                default_template_ref,
                extra={"form_path": form_context.path, "error_code": "template_lookup_failed"},
            )
            return None
