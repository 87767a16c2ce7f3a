"""
mitmproxy addon that feeds every response through the passive scanner.

Load it into a running proxy:

    mitmdump -s passive_scanner/addon.py --set passive_report=report.json

The addon only reads flows. It never blocks or alters the traffic; scans
run on the dispatcher's worker pool.
"""
import logging
from typing import Optional

from mitmproxy import ctx, http

from passive_scanner.dispatcher import DEFAULT_MAX_WORKERS, ScanDispatcher
from passive_scanner.exceptions import PassiveScannerError
from passive_scanner.findings import FindingsStore
from passive_scanner.http_message import MitmResponse
from passive_scanner.reporting import console_listener, format_stats, write_report

logger = logging.getLogger(__name__)


class PassiveScanAddon:
    """
    Args:
        store (FindingsStore): Shared store; a fresh one is created if omitted
        dispatcher (ScanDispatcher): Dispatcher to use; built on demand
        report_path (str): Where done() writes the JSON report, if anywhere
        echo (bool): Print new findings to the console as they are found
    """

    def __init__(
        self,
        store: Optional[FindingsStore] = None,
        dispatcher: Optional[ScanDispatcher] = None,
        report_path: Optional[str] = None,
        echo: bool = True,
    ):
        self.store = store if store is not None else FindingsStore()
        self.dispatcher = dispatcher
        self.report_path = report_path
        self.echo = echo
        self._listening = False

    def load(self, loader):
        loader.add_option(
            name="passive_report",
            typespec=Optional[str],
            default=None,
            help="Write passive scan findings to this JSON file on shutdown",
        )
        loader.add_option(
            name="passive_workers",
            typespec=int,
            default=DEFAULT_MAX_WORKERS,
            help="Number of background passive scan workers",
        )

    def configure(self, updated):
        if "passive_report" in updated and ctx.options.passive_report:
            self.report_path = ctx.options.passive_report
        if self.dispatcher is None and "passive_workers" in updated:
            self.dispatcher = ScanDispatcher(self.store, max_workers=ctx.options.passive_workers)

    def running(self):
        if self.dispatcher is None:
            self.dispatcher = ScanDispatcher(self.store)
        if self.echo and not self._listening:
            self.store.add_listener(console_listener())
            self._listening = True
        logger.info("Passive scanner active (%d workers)", self.dispatcher.max_workers)

    def response(self, flow: http.HTTPFlow) -> None:
        if flow.response is None:
            return
        if self.dispatcher is None:
            self.dispatcher = ScanDispatcher(self.store)
        try:
            self.dispatcher.handle_response(flow.request.pretty_url, MitmResponse(flow.response))
        except Exception:
            # never let a scanner problem reach the proxied traffic
            logger.exception("Could not schedule scan for %s", flow.request.pretty_url)

    def done(self):
        if self.dispatcher is not None:
            self.dispatcher.shutdown(wait=True)
        logger.info("Passive scan finished. %s", format_stats(self.store))
        if self.report_path:
            try:
                path = write_report(self.store, self.report_path)
                logger.info("Report saved to: %s", path)
            except PassiveScannerError as e:
                logger.error("%s", e)


addons = [PassiveScanAddon()]
