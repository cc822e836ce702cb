"""Per-document fetch-and-persist task and the state workers share."""

import logging
import threading
from typing import Set
from urllib.parse import urlencode

from .config import SiteConfig
from .downloader import Downloader
from .errors import ParseError, StorageError, TransportError
from .metadata import extract_record
from .models import WorkerResult
from .storage import OutputStore

logger = logging.getLogger("etd_crawler")


class SuccessCounter:
    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class CrawlState:
    """Run-wide state owned by the crawler and handed to each worker.

    ``seen`` is only touched by the page loop; the counter is shared with
    worker threads; ``cancelled`` is set from the signal handler.
    """

    def __init__(self):
        self.seen: Set[str] = set()
        self.counter = SuccessCounter()
        self.cancel_event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()


class DocumentWorker:
    def __init__(self, downloader: Downloader, store: OutputStore, site: SiteConfig,
                 state: CrawlState, fetch_attachments: bool = True):
        self.downloader = downloader
        self.store = store
        self.site = site
        self.state = state
        self.fetch_attachments = fetch_attachments

    def metadata_url(self, document_id: str) -> str:
        query = urlencode({"p": self.site.detail_marker, "inXML": "true",
                           self.site.id_param: document_id})
        return f"{self.site.index_url}?{query}"

    def attachment_url(self, name: str) -> str:
        return self.site.repository_url + name

    def process(self, document_id: str) -> WorkerResult:
        """Fetch, store and count one document. Failures are logged, never raised."""
        try:
            data = self.downloader.fetch(self.metadata_url(document_id))
        except TransportError as e:
            return self._fail(document_id, f"Cannot fetch metadata for docId {document_id}: {e}")

        try:
            record = extract_record(data, document_id)
        except ParseError as e:
            return self._fail(document_id, f"Cannot parse metadata for docId {document_id}: {e}")

        # Attachment first: the record is only written once its file is on disk
        if self.fetch_attachments and record.document:
            try:
                pdf = self.downloader.fetch(self.attachment_url(record.document))
            except TransportError as e:
                return self._fail(document_id, f"Cannot fetch PDF for docId {document_id}: {e}")
            try:
                self.store.write_attachment(record.document, pdf)
            except StorageError as e:
                return self._fail(document_id, f"Cannot write {record.document}: {e}")

        try:
            self.store.write_record(record)
        except StorageError as e:
            return self._fail(document_id, f"Cannot save metadata for {document_id}: {e}")

        self.state.counter.increment()
        logger.info(f"Document {document_id} saved!")
        return WorkerResult(document_id, ok=True)

    @staticmethod
    def _fail(document_id: str, reason: str) -> WorkerResult:
        logger.error(reason)
        return WorkerResult(document_id, ok=False, reason=reason)
