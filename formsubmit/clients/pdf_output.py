from __future__ import annotations

from dataclasses import dataclass
import io
from pathlib import PurePosixPath

from lxml import etree
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from formsubmit.domain.errors import RenderingError
from formsubmit.domain.models import OutputDocument, PdfOutputOptions
from formsubmit.domain.use_cases.process_dor_data import build_safe_parser


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _field_rows(data: bytes) -> list[tuple[str, str]]:
    try:
        root = etree.fromstring(data, parser=build_safe_parser())
    except etree.XMLSyntaxError as exc:
        raise RenderingError(f"DoR data cannot be rendered: {exc}") from exc
    rows: list[tuple[str, str]] = []
    for element in root.iter():
        if not isinstance(element.tag, str) or len(element):
            continue
        value = (element.text or "").strip()
        if value:
            rows.append((etree.QName(element).localname, value))
    return rows


@dataclass(frozen=True)
class ReportlabPdfOutputService:
    """Renders merged DoR data as a field/value listing titled after the template."""

    font_size: int = 10

    def generate_pdf_output(
        self,
        *,
        template_ref: str,
        data: bytes,
        options: PdfOutputOptions,
    ) -> OutputDocument | None:
        buffer = io.BytesIO()
        margin = 25 * mm
        title = PurePosixPath(template_ref).stem
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=margin,
            rightMargin=margin,
            topMargin=margin,
            bottomMargin=margin,
            title=title[:180],
            subject=options.content_root,
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "DorTitle",
            parent=styles["Heading1"],
            fontName="Helvetica-Bold",
            fontSize=14,
            leading=18,
            spaceAfter=10,
            alignment=TA_LEFT,
        )
        body_style = ParagraphStyle(
            "DorBody",
            parent=styles["Normal"],
            fontName="Helvetica",
            fontSize=self.font_size,
            leading=self.font_size + 3,
            spaceAfter=6,
            alignment=TA_LEFT,
        )

        story = [Paragraph(_escape(title), title_style), Spacer(1, 6)]
        for name, value in _field_rows(data):
            story.append(Paragraph(f"<b>{_escape(name)}</b>: {_escape(value)}", body_style))

        doc.build(story)
        return OutputDocument(stream=io.BytesIO(buffer.getvalue()))
