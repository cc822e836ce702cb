"""MODS metadata parsing for a single catalog record.

The catalog serves each record as a ``modsCollection`` document when the
detail page is requested with ``inXML=true``. Elements are matched by local
name so the MODS and SLiMS namespaces do not need to be spelled out.
"""

import xml.etree.ElementTree as ET
from typing import Optional

from .errors import ParseError
from .models import DocumentRecord, MetadataFields


def _local(tag) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _child(elem: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if elem is None:
        return None
    for c in elem:
        if _local(c.tag) == name:
            return c
    return None


def _text(elem: Optional[ET.Element]) -> Optional[str]:
    if elem is None:
        return None
    return elem.text or ""


def normalize_attachment_name(path: str) -> str:
    return path.replace("/", "").replace("\\", "")


def parse_metadata(data: bytes) -> MetadataFields:
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ParseError("metadata", e) from e

    mods = root if _local(root.tag) == "mods" else _child(root, "mods")

    document = None
    item = _child(_child(mods, "slims_digitals"), "slims_digital_item")
    if item is not None and item.get("path") is not None:
        document = normalize_attachment_name(item.get("path"))

    return MetadataFields(
        title=_text(_child(_child(mods, "titleInfo"), "title")),
        author=_text(_child(_child(mods, "name"), "namePart")),
        date_time=_text(_child(_child(mods, "recordInfo"), "recordCreationDate")),
        abstract=_text(_child(mods, "note")),
        document=document,
    )


def extract_record(data: bytes, document_id: str) -> DocumentRecord:
    return parse_metadata(data).to_record(document_id)
