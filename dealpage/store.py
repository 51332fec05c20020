import logging
import secrets
import threading

from . import config

logger = logging.getLogger(__name__)


def generate_id(length=config.ID_LENGTH):
    return secrets.token_hex((length + 1) // 2)[:length]


class PageStore:
    """Process-lifetime page table keyed by generated id. Nothing is evicted."""

    def __init__(self):
        self._pages = {}
        self._lock = threading.Lock()

    def get(self, page_id):
        with self._lock:
            return self._pages.get(page_id)

    def put(self, page_id, page):
        with self._lock:
            self._pages[page_id] = page
        logger.debug(f"Stored page {page_id} ({len(self)} total)")

    def __contains__(self, page_id):
        with self._lock:
            return page_id in self._pages

    def __len__(self):
        with self._lock:
            return len(self._pages)
