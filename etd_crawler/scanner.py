"""Listing page scanner: turns one index page into new document ids."""

import logging
from typing import Callable, List, Optional, Set
from urllib.parse import parse_qs, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .config import SiteConfig
from .errors import ParseError

logger = logging.getLogger("etd_crawler")


class PageScanner:
    def __init__(self, site: SiteConfig):
        self.site = site
        self._catalog_host = urlsplit(site.index_url).hostname

    def document_id_from_url(self, href: str) -> Optional[str]:
        """Return the id carried by a detail link, or None for any other link.

        eg: http://etd.unsyiah.ac.id/index.php?p=show_detail&id=14278

        Absolute links must point at the catalog host. Ids that could leave
        the output directory once used as a file name are rejected.
        """
        try:
            parts = urlsplit(href)
        except ValueError:
            return None
        if parts.netloc and parts.hostname != self._catalog_host:
            return None
        query = parse_qs(parts.query)
        if self.site.detail_marker not in query.get("p", []):
            return None
        values = [v.strip() for v in query.get(self.site.id_param, []) if v.strip()]
        if not values:
            return None
        doc_id = values[0]
        if "/" in doc_id or "\\" in doc_id or doc_id in (".", ".."):
            logger.warning(f"Ignoring unsafe document id {doc_id!r} in {href}")
            return None
        return doc_id

    def scan(self, page: bytes, seen: Set[str],
             persisted: Callable[[str], bool]) -> List[str]:
        """Extract ids not yet seen this run and not already on disk.

        Every id found is added to ``seen``, including those skipped because
        ``persisted`` reports an existing record.
        """
        try:
            soup = BeautifulSoup(page, "lxml")
        except ParserRejectedMarkup as e:
            raise ParseError("listing page", e) from e

        ids = []
        # Only anchors inside table cells; abstract links live elsewhere
        for anchor in soup.select(self.site.listing_selector):
            doc_id = self.document_id_from_url(anchor.get("href", ""))
            if doc_id is None or doc_id in seen:
                continue
            seen.add(doc_id)
            if persisted(doc_id):
                logger.debug(f"Skipping {doc_id}, already saved")
                continue
            ids.append(doc_id)
        return ids
