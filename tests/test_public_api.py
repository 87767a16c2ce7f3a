"""
Test the public API to ensure clean imports and usage.
"""

from passive_scanner import (
    __version__,
    ConfigurationError,
    FindingsStore,
    HttpResponse,
    LIBRARY_SIGNATURES,
    PassiveScannerError,
    ReportError,
    ScanDispatcher,
    ValidationError,
    check_headers,
    check_libraries,
    is_outdated,
)
from passive_scanner.cli.main import main


def test_version():
    """Test the version string is exposed."""
    assert __version__.count(".") == 2


def test_exception_hierarchy():
    """Test custom exceptions share one base."""
    for exc in (ConfigurationError, ValidationError, ReportError):
        assert issubclass(exc, PassiveScannerError)


def test_signature_table_is_read_only():
    """Test the library table cannot be modified at runtime."""
    assert "jquery" in LIBRARY_SIGNATURES
    try:
        LIBRARY_SIGNATURES["evil"] = None
    except TypeError:
        pass
    else:
        raise AssertionError("signature table accepted a new entry")
    assert LIBRARY_SIGNATURES["jquery"].latest_version == "3.7.1"


def test_callables_exported():
    """Test convenience callables are available at package level."""
    assert callable(check_headers)
    assert callable(check_libraries)
    assert is_outdated("1.0", "2.0") is True
    store = FindingsStore()
    dispatcher = ScanDispatcher(store, max_workers=1)
    try:
        dispatcher.scan_now("https://example.com/", HttpResponse([("Content-Type", "text/html")], ""))
    finally:
        dispatcher.shutdown()
    assert store.count() == 6


def test_cli_signatures(capsys):
    """Test the signatures command lists every library."""
    assert main(["signatures"]) == 0
    out = capsys.readouterr().out
    for signature in LIBRARY_SIGNATURES.values():
        assert signature.name in out


def test_cli_no_command(capsys):
    """Test running without a command prints help and fails."""
    assert main([]) == 1


def test_cli_replay(tmp_path, capsys):
    """Test replaying a traffic file writes a report."""
    traffic = tmp_path / "traffic.ndjson"
    traffic.write_text(
        '{"type": "response", "url": "https://site.test/", '
        '"headers": {"Content-Type": "text/html"}, "body": ""}\n',
        encoding="utf-8",
    )
    report = tmp_path / "report.json"

    assert main(["replay", str(traffic), "--output", str(report), "--min-severity", "high"]) == 0
    assert report.exists()
    assert "Total: 6" in capsys.readouterr().out


def test_cli_replay_missing_file(tmp_path, capsys):
    """Test a missing traffic file is reported as an error."""
    assert main(["replay", str(tmp_path / "missing.ndjson")]) == 1
    assert "Traffic file not found" in capsys.readouterr().err
