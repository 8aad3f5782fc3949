from __future__ import annotations

from dataclasses import dataclass
import logging

from formsubmit.domain.contracts import PdfOutputService
from formsubmit.domain.models import PdfOutputOptions

COMPONENT_ID = "domain.dor.render_document"
DEFAULT_CONTENT_ROOT_PROTOCOL = "crx://"

logger = logging.getLogger("formsubmit")


def content_root_for(template_ref: str, *, protocol: str = DEFAULT_CONTENT_ROOT_PROTOCOL) -> str:
    """Folder holding the template, so relative references inside it resolve.

    "/content/dam/forms/tpl_en.xdp" -> "crx:///content/dam/forms"
    """
    name_start = template_ref.rfind("/") + 1
    dot = template_ref.rfind(".")
    stem = template_ref[:dot] if dot >= name_start else template_ref
    parent = stem.rpartition("/")[0]
    return f"{protocol}{parent}"


@dataclass(frozen=True)
class DocumentRenderer:
    output_service: PdfOutputService
    content_root_protocol: str = DEFAULT_CONTENT_ROOT_PROTOCOL

    def render(self, *, template_ref: str | None, data: str) -> bytes | None:
        if not template_ref:
            logger.error("no template present")
            return None

        options = PdfOutputOptions(content_root=content_root_for(template_ref, protocol=self.content_root_protocol))
        document = self.output_service.generate_pdf_output(
            template_ref=template_ref,
            data=data.encode("utf-8"),
            options=options,
        )
        if document is None or document.stream is None:
            logger.error("failed to generate PDF from template %s", template_ref, extra={"error_code": "rendering_failed"})
            return None

        stream = document.stream
        try:
            content = stream.read()
        except OSError:
            logger.exception(
                "failed to read rendered document for %s",
                template_ref,
                extra={"error_code": "rendering_failed"},
            )
            return None
        finally:
            stream.close()

        if not content:
            logger.error("renderer returned an empty document for %s", template_ref, extra={"error_code": "rendering_failed"})
            return None
        return content
