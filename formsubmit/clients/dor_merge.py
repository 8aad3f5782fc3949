from __future__ import annotations

import copy
from dataclasses import dataclass

from lxml import etree

DOR_ROOT_TAG = "afData"
BOUND_DATA_TAG = "afBoundData"
UNBOUND_DATA_TAG = "afUnboundData"


@dataclass(frozen=True)
class XmlDorMerger:
    """Wraps submitted data in the bound/unbound envelope the renderer reads.

    Submitted XML that already carries the envelope is copied as is.
    """

    def merge_for_dor(
        self,
        *,
        destination: etree._ElementTree,
        source: etree._ElementTree,
        model: dict[str, object],
    ) -> str:
        source_root = source.getroot()
        if source_root.tag == DOR_ROOT_TAG:
            root = copy.deepcopy(source_root)
        else:
            root = etree.Element(DOR_ROOT_TAG)
            etree.SubElement(root, UNBOUND_DATA_TAG)
            bound = etree.SubElement(root, BOUND_DATA_TAG)
            bound.append(copy.deepcopy(source_root))

        locale = model.get("locale")
        if isinstance(locale, str) and locale:
            root.set("locale", locale)
        destination._setroot(root)
        return etree.tostring(destination, encoding="unicode")
