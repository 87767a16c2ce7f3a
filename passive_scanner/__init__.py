"""
Passive Scanner - passive security checks for intercepted HTTP responses.

This library provides:
- Security header, cookie and CORS checks
- Outdated front-end library detection from script sources and banners
- Dangerous script pattern detection (eval, innerHTML, hardcoded credentials)
- A deduplicated, thread-safe findings store with change notification
- A mitmproxy addon and an offline traffic replay path

Quick Start:
    >>> from passive_scanner import FindingsStore, ScanDispatcher, HttpResponse
    >>>
    >>> store = FindingsStore()
    >>> dispatcher = ScanDispatcher(store)
    >>> response = HttpResponse([("Content-Type", "text/html")], "<html></html>")
    >>> dispatcher.handle_response("https://example.com/", response)
    >>> dispatcher.wait()
    >>> print(store.count())

Live scanning:
    $ mitmdump -s passive_scanner/addon.py
"""

from .__version__ import (
    __version__,
    __version_info__,
    __title__,
    __description__,
    __author__,
    __license__,
)
from .dispatcher import ScanDispatcher, classify
from .exceptions import (
    PassiveScannerError,
    ConfigurationError,
    ValidationError,
    ReportError,
)
from .findings import Finding, FindingsStore, Severity
from .http_message import HttpResponse, MitmResponse
from .scanners import (
    LIBRARY_SIGNATURES,
    LibrarySignature,
    check_headers,
    check_libraries,
    is_outdated,
)

__all__ = [
    # Version
    "__version__",
    "__version_info__",
    "__title__",
    "__description__",
    "__author__",
    "__license__",

    # Findings
    "Finding",
    "FindingsStore",
    "Severity",

    # Scanning
    "ScanDispatcher",
    "classify",
    "check_headers",
    "check_libraries",
    "is_outdated",
    "LIBRARY_SIGNATURES",
    "LibrarySignature",

    # Responses
    "HttpResponse",
    "MitmResponse",

    # Exceptions
    "PassiveScannerError",
    "ConfigurationError",
    "ValidationError",
    "ReportError",
]
