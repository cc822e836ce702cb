"""Page loop: walk the listing index, dispatch workers, drain before moving on."""

import logging
import signal
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List
from urllib.parse import urlencode

from .config import AppConfig
from .downloader import Downloader
from .errors import ParseError, TransportError
from .scanner import PageScanner
from .storage import OutputStore
from .worker import CrawlState, DocumentWorker

logger = logging.getLogger("etd_crawler")


class Crawler:
    def __init__(self, config: AppConfig, downloader: Downloader, store: OutputStore):
        self.config = config
        self.downloader = downloader
        self.store = store
        self.state = CrawlState()
        self.scanner = PageScanner(config.site)
        self.worker = DocumentWorker(
            downloader, store, config.site, self.state,
            fetch_attachments=config.crawl.fetch_attachments,
        )
        self.pages_fetched = 0
        self.pages_failed = 0
        self.dispatched = 0
        self.documents_failed = 0
        self._original_handlers = {}

    @property
    def success_count(self) -> int:
        return self.state.counter.value

    def cancel(self):
        self.state.cancel_event.set()

    def install_signal_handlers(self):
        """Route SIGINT/SIGTERM to cancel(); must be called from the main thread."""
        def _handler(signum, frame):
            logger.warning("Caught in interrupt!")
            self.cancel()

        self._original_handlers = {
            signal.SIGINT: signal.signal(signal.SIGINT, _handler),
            signal.SIGTERM: signal.signal(signal.SIGTERM, _handler),
        }

    def restore_signal_handlers(self):
        for signum, handler in self._original_handlers.items():
            if handler is not None:
                signal.signal(signum, handler)
        self._original_handlers = {}

    def listing_url(self, page: int) -> str:
        params = {"embargo": str(self.config.crawl.embargo)}
        params.update(self.config.site.index_params)
        params["page"] = str(page)
        return f"{self.config.site.index_url}?{urlencode(params)}"

    def run(self) -> int:
        crawl = self.config.crawl
        logger.info(
            f"Crawling pages {crawl.start_page}-{crawl.max_page} into {self.store.output_dir} "
            f"(embargo={crawl.embargo}, ids {crawl.min_id}-{crawl.max_id}, "
            f"attachments={'on' if crawl.fetch_attachments else 'off'})"
        )

        page = crawl.start_page
        while page <= crawl.max_page:
            if self.state.cancelled:
                logger.info(f"Cancelled before page {page}")
                break

            ids = self._scan_page(page)
            if ids is not None:
                # Empty page only counts as the end once something was saved
                if not ids and self.success_count > 0:
                    logger.info("No more document in index page")
                    break
                self._dispatch(ids)
            page += 1

        logger.info(
            f"Done, {self.success_count} documents was fetched "
            f"({self.dispatched} dispatched, {self.documents_failed} failed, "
            f"{self.pages_fetched} pages read, "
            f"{self.pages_failed} pages failed)"
        )
        return self.success_count

    def _scan_page(self, page: int):
        """Return the new ids on a page, or None if the page was skipped."""
        url = self.listing_url(page)
        try:
            data = self.downloader.fetch(url)
        except TransportError as e:
            self.pages_failed += 1
            logger.warning(f"Fetch {url} error: {e}")
            return None

        try:
            ids = self.scanner.scan(data, self.state.seen, self.store.has_record)
        except ParseError as e:
            self.pages_failed += 1
            logger.warning(f"Parse {url} error: {e}")
            return None

        self.pages_fetched += 1
        logger.info(f"Page {page}: {len(ids)} new documents")
        return ids

    def _dispatch(self, ids: List[str]):
        if not ids:
            return
        self.dispatched += len(ids)
        with ThreadPoolExecutor(max_workers=len(ids), thread_name_prefix="doc") as pool:
            futures = {pool.submit(self.worker.process, doc_id): doc_id for doc_id in ids}
            logger.info("Waiting for pending routines...")
            wait(futures)
        for future, doc_id in futures.items():
            exc = future.exception()
            if exc is not None:
                self.documents_failed += 1
                logger.error(f"Worker for docId {doc_id} crashed: {exc!r}")
            elif not future.result().ok:
                self.documents_failed += 1
