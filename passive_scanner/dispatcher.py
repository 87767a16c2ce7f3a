"""
Scan dispatcher: decides which checkers run for a response and runs them
off the interception path.

The interception hook calls handle_response(), which classifies the response
by Content-Type, submits a background scan to a worker pool and returns
immediately. Findings go through the FindingsStore; only newly inserted ones
are logged.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass
from typing import List, Optional, Set

from .findings import Finding, FindingsStore
from .http_message import ResponseView
from .scanners.header_checker import check_headers
from .scanners.library_checker import check_libraries

DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class ScanPlan:
    headers: bool = False
    libraries: bool = False

    @property
    def empty(self) -> bool:
        return not (self.headers or self.libraries)


def classify(content_type: Optional[str]) -> ScanPlan:
    """
    Pick the checkers for a response from its Content-Type.

    HTML pages get header and library checks, JavaScript files get library
    checks only, everything else is ignored.
    """
    lowered = (content_type or "").lower()
    if "text/html" in lowered:
        return ScanPlan(headers=True, libraries=True)
    if "javascript" in lowered:
        return ScanPlan(libraries=True)
    return ScanPlan()


class ScanDispatcher:
    """
    Schedules response scans on a thread pool and feeds a FindingsStore.

    Args:
        store (FindingsStore): Destination for findings
        max_workers (int): Worker threads; pending scans queue without limit
    """

    def __init__(self, store: Optional[FindingsStore] = None, max_workers: int = DEFAULT_MAX_WORKERS):
        self.store = store if store is not None else FindingsStore()
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="passive-scan")
        self._pending: Set = set()
        self._pending_lock = threading.Lock()
        self.logger = logging.getLogger(__name__)
        self.logger.debug("ScanDispatcher initialized (max_workers=%d)", max_workers)

    def handle_response(self, url: str, response: ResponseView) -> bool:
        """
        Interception hook entry point.

        Returns:
            bool: Always True, meaning "let the traffic continue unmodified".
            Scanning never delays this return.
        """
        try:
            plan = classify(response.header_value("Content-Type"))
        except Exception:
            self.logger.exception("Error classifying response %s", url)
            return True
        if plan.empty:
            return True

        future = self._executor.submit(self._scan_task, url, response, plan)
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return True

    def scan_now(self, url: str, response: ResponseView) -> List[Finding]:
        """
        Run the scan for a response on the calling thread.

        Returns:
            list of Finding that were newly inserted into the store
        """
        plan = classify(response.header_value("Content-Type"))
        if plan.empty:
            return []
        return self._scan_task(url, response, plan)

    def _scan_task(self, url: str, response: ResponseView, plan: ScanPlan) -> List[Finding]:
        try:
            return self._run_checks(url, response, plan)
        except Exception:
            self.logger.exception("Error scanning response %s", url)
            return []

    def _run_checks(self, url: str, response: ResponseView, plan: ScanPlan) -> List[Finding]:
        produced = []
        if plan.headers:
            produced.extend(check_headers(url, response))
        if plan.libraries:
            produced.extend(check_libraries(url, response))

        added = []
        for finding in produced:
            if self.store.add(finding):
                self.logger.info("Found issue: %s", finding)
                added.append(finding)
        return added

    def _forget(self, future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every scan submitted so far has finished.

        Returns:
            bool: False if the timeout expired with scans still running
        """
        with self._pending_lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
