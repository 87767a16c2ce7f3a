"""
Unit tests for response classification and background scan dispatch.
"""

import logging
import threading

import pytest
from passive_scanner.dispatcher import ScanDispatcher, classify
from passive_scanner.findings import FindingsStore, Severity
from passive_scanner.http_message import HttpResponse


@pytest.fixture
def dispatcher():
    d = ScanDispatcher(FindingsStore(), max_workers=4)
    yield d
    d.shutdown()


def test_classify_content_types():
    """Test engine selection by Content-Type."""
    html = classify("text/html; charset=utf-8")
    assert html.headers and html.libraries

    for js_type in ("application/javascript", "application/x-javascript", "TEXT/JAVASCRIPT"):
        plan = classify(js_type)
        assert plan.libraries and not plan.headers

    assert classify("TEXT/HTML").headers
    assert classify("application/json").empty
    assert classify("").empty
    assert classify(None).empty


def test_end_to_end_html_scenario(dispatcher):
    """Test a bare HTML page with old jQuery yields six header and one library finding."""
    response = HttpResponse(
        [("Content-Type", "text/html")],
        '<html><head><script src="/js/jquery-1.11.1.min.js"></script></head></html>',
    )

    assert dispatcher.handle_response("https://site.test/", response) is True
    assert dispatcher.wait(timeout=10)

    store = dispatcher.store
    headers = [f for f in store.all() if f.category == "Headers"]
    libraries = [f for f in store.all() if f.category == "Libraries"]

    assert sorted(f.title for f in headers) == sorted([
        "Missing Clickjacking Protection",
        "Missing X-Content-Type-Options",
        "Missing HSTS Header",
        "Missing Content-Security-Policy",
        "Missing Referrer-Policy",
        "Missing Permissions-Policy",
    ])
    assert len(libraries) == 1
    assert libraries[0].title == "Outdated jQuery Library"
    assert libraries[0].severity == Severity.MEDIUM
    assert "1.11.1" in libraries[0].description
    assert "3.7.1" in libraries[0].description
    assert store.count() == 7


def test_javascript_skips_header_checks(dispatcher):
    """Test JavaScript responses only get library checks."""
    response = HttpResponse([("Content-Type", "application/x-javascript")], "eval(payload)")
    added = dispatcher.scan_now("https://site.test/app.js", response)

    assert [f.title for f in added] == ["Dangerous JavaScript Function Usage"]
    assert all(f.category != "Headers" for f in dispatcher.store.all())


def test_other_content_types_ignored(dispatcher):
    """Test non HTML/JS responses are never scanned."""
    response = HttpResponse([("Content-Type", "application/json")], '{"token": "abcdefghijklmnopqrstuvwxyz"}')

    assert dispatcher.handle_response("https://site.test/api", response) is True
    assert dispatcher.wait(timeout=10)
    assert dispatcher.scan_now("https://site.test/api", response) == []
    assert dispatcher.store.count() == 0


def test_repeated_traffic_reported_once(dispatcher):
    """Test the same response seen twice adds findings only the first time."""
    response = HttpResponse([("Content-Type", "text/html")], "")

    first = dispatcher.scan_now("http://site.test/", response)
    second = dispatcher.scan_now("http://site.test/", response)

    assert len(first) == 5
    assert second == []


def test_new_findings_logged(dispatcher, caplog):
    """Test only newly inserted findings are logged."""
    response = HttpResponse([("Content-Type", "application/javascript")], "eval(1)")

    with caplog.at_level(logging.INFO, logger="passive_scanner.dispatcher"):
        dispatcher.scan_now("https://site.test/a.js", response)
        dispatcher.scan_now("https://site.test/a.js", response)

    found = [r for r in caplog.records if r.getMessage().startswith("Found issue:")]
    assert len(found) == 1
    assert "Dangerous JavaScript Function Usage" in found[0].getMessage()


class ExplodingResponse(HttpResponse):
    @property
    def text(self):
        raise RuntimeError("body decode failed")


def test_scan_errors_are_contained(dispatcher, caplog):
    """Test a failing scan is logged and does not affect other scans."""
    bad = ExplodingResponse([("Content-Type", "application/javascript")], "")
    good = HttpResponse([("Content-Type", "application/javascript")], "eval(1)")

    with caplog.at_level(logging.ERROR, logger="passive_scanner.dispatcher"):
        assert dispatcher.handle_response("https://site.test/bad.js", bad) is True
        assert dispatcher.handle_response("https://site.test/good.js", good) is True
        assert dispatcher.wait(timeout=10)

    assert any("https://site.test/bad.js" in r.getMessage() for r in caplog.records)
    assert [f.url for f in dispatcher.store.all()] == ["https://site.test/good.js"]
    assert dispatcher.scan_now("https://site.test/bad.js", bad) == []


def test_broken_listener_keeps_whole_scan(dispatcher):
    """Test a raising listener does not cut a scan short."""
    def broken(finding):
        raise RuntimeError("listener broke")

    dispatcher.store.add_listener(broken)
    added = dispatcher.scan_now("https://site.test/", HttpResponse([("Content-Type", "text/html")], ""))

    assert len(added) == 6
    assert dispatcher.store.count() == 6


def test_handle_response_does_not_wait_for_scan():
    """Test the interception decision returns while the scan is still blocked."""
    store = FindingsStore()
    release = threading.Event()
    started = threading.Event()

    def blocking_listener(finding):
        started.set()
        release.wait(timeout=10)

    store.add_listener(blocking_listener)
    dispatcher = ScanDispatcher(store, max_workers=1)
    try:
        response = HttpResponse([("Content-Type", "application/javascript")], "eval(1)")
        assert dispatcher.handle_response("https://site.test/x.js", response) is True
        assert started.wait(timeout=10)
        assert dispatcher.wait(timeout=0.05) is False
        release.set()
        assert dispatcher.wait(timeout=10) is True
    finally:
        release.set()
        dispatcher.shutdown()

    assert store.count() == 1


def test_concurrent_scans_dedup(dispatcher):
    """Test many concurrent scans of one page yield each finding once."""
    notified = []
    lock = threading.Lock()

    def listener(finding):
        with lock:
            notified.append(finding.key)

    dispatcher.store.add_listener(listener)
    response = HttpResponse([("Content-Type", "text/html")], "<script>el.innerHTML = x</script>")

    for _ in range(50):
        dispatcher.handle_response("https://site.test/", response)
    assert dispatcher.wait(timeout=30)

    assert len(notified) == len(set(notified))
    assert dispatcher.store.count() == len(notified)
    assert dispatcher.store.count() == 7
