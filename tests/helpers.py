"""Fake catalog server and payload builders shared by the tests."""

import threading
from typing import Callable, Dict, List, Optional, Union

import httpx


DETAIL = "https://etd.unsyiah.ac.id/index.php?p=show_detail&amp;id={id}"
ABSTRACT = "https://etd.unsyiah.ac.id/index.php?p=fstream&amp;fid={id}"


def listing_html(ids: List[str]) -> bytes:
    rows = "".join(
        f'<tr><td><a href="{DETAIL.format(id=i)}">Thesis {i}</a> '
        f'<a href="{ABSTRACT.format(id=i)}">Abstract</a></td></tr>'
        for i in ids
    )
    return (
        "<html><body>"
        '<div class="nav"><a href="/index.php?p=show_detail&amp;id=999">Featured</a></div>'
        f'<table class="zebra-table">{rows}</table>'
        "</body></html>"
    ).encode()


def mods_xml(title="A Thesis", author="Someone", date="2019-05-01 10:00:00",
             abstract="Summary.", path: Optional[str] = None) -> bytes:
    digitals = ""
    if path is not None:
        digitals = (
            "<slims_digitals>"
            f'<slims_digital_item id="1" path="{path}" mimetype="application/pdf">PDF</slims_digital_item>'
            "</slims_digitals>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<modsCollection xmlns="http://www.loc.gov/mods/v3" '
        'xmlns:slims="http://slims.web.id">'
        '<mods version="3.3" ID="1">'
        f"<titleInfo><title>{title}</title></titleInfo>"
        f'<name type="personal"><namePart>{author}</namePart></name>'
        f"<note>{abstract}</note>"
        f"<recordInfo><recordCreationDate>{date}</recordCreationDate></recordInfo>"
        f"{digitals}"
        "</mods></modsCollection>"
    ).encode()


Payload = Union[bytes, int]


class FakeCatalog:
    """In-memory catalog answering listing, metadata and repository requests."""

    def __init__(self):
        self.pages: Dict[int, List[str]] = {}
        self.metadata: Dict[str, Payload] = {}
        self.attachments: Dict[str, Payload] = {}
        self.on_metadata: Optional[Callable[[str], None]] = None
        self.listing_requests: List[int] = []
        self.metadata_requests: List[str] = []
        self.attachment_requests: List[str] = []
        self.listing_failures: Dict[int, int] = {}
        self._lock = threading.Lock()

    def _respond(self, payload: Optional[Payload]) -> httpx.Response:
        if payload is None:
            return httpx.Response(404)
        if isinstance(payload, int):
            return httpx.Response(payload)
        return httpx.Response(200, content=payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = request.url
        if url.path.startswith("/repository/"):
            name = url.path[len("/repository/"):]
            with self._lock:
                self.attachment_requests.append(name)
            return self._respond(self.attachments.get(name))
        if url.params.get("p") == "show_detail":
            doc_id = url.params["id"]
            with self._lock:
                self.metadata_requests.append(doc_id)
            if self.on_metadata:
                self.on_metadata(doc_id)
            return self._respond(self.metadata.get(doc_id))
        page = int(url.params["page"])
        if page in self.listing_failures:
            return httpx.Response(self.listing_failures[page])
        with self._lock:
            self.listing_requests.append(page)
        return httpx.Response(200, content=listing_html(self.pages.get(page, [])))
