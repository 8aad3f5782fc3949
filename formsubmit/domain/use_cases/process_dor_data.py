from __future__ import annotations

from dataclasses import dataclass
import logging

from lxml import etree

from formsubmit.domain.contracts import DorMerger, ModelTransformer
from formsubmit.domain.errors import DorDataError
from formsubmit.domain.locales import DEFAULT_LOCALE
from formsubmit.domain.models import FormContext, ModelExportOptions

COMPONENT_ID = "domain.dor.process_data"

logger = logging.getLogger("formsubmit")


def build_safe_parser() -> etree.XMLParser:
    # Submitted XML is untrusted: no entity expansion, no DTD fetches, no network.
    return etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        no_network=True,
        dtd_validation=False,
        huge_tree=False,
    )


def parse_submitted_xml(data: str) -> etree._ElementTree:
    try:
        root = etree.fromstring(data.encode("utf-8"), parser=build_safe_parser())
    except etree.XMLSyntaxError as exc:
        raise DorDataError(f"submitted data is not well-formed XML: {exc}") from exc
    return etree.ElementTree(root)


@dataclass(frozen=True)
class DorDataProcessor:
    transformer: ModelTransformer
    merger: DorMerger
    default_locale: str = DEFAULT_LOCALE

    def process(self, *, data: str | None, locale: str | None, form_context: FormContext) -> str:
        """Build the merge-ready XML the renderer consumes.

        Blank data yields "" (nothing to render). Parser, transformer and merge
        failures propagate to the caller.
        """
        if data is None or not data.strip():
            logger.warning("empty data provided for DoR processing", extra={"form_path": form_context.path})
            return ""

        source = parse_submitted_xml(data)
        destination = etree.ElementTree()

        options = ModelExportOptions(
            form_container_path=form_context.path,
            include_fragment_json=True,
            locale=(locale or "").strip() or self.default_locale,
        )
        model = self.transformer.export_model(form_context=form_context, options=options)
        return self.merger.merge_for_dor(destination=destination, source=source, model=model)
