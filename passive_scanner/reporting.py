"""
Console output and JSON export of findings.
"""
import json
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from colorama import Fore, Style

from .exceptions import ReportError
from .findings import Finding, FindingsStore, Severity

SEVERITY_COLORS = {
    Severity.HIGH: Fore.RED,
    Severity.MEDIUM: Fore.YELLOW,
    Severity.LOW: Fore.CYAN,
    Severity.INFO: Fore.BLUE,
}


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Order findings HIGH first, then by URL and title for a stable listing."""
    return sorted(findings, key=lambda f: (-f.severity.rank, f.url, f.title))


def filter_findings(store: FindingsStore, severity: Optional[Severity] = None) -> List[Finding]:
    if severity is None:
        return sort_findings(store.all())
    return sort_findings(store.by_severity(severity))


def format_stats(store: FindingsStore) -> str:
    counts = store.counts_by_severity()
    parts = [f"Total: {sum(counts.values())}"]
    parts.extend(f"{severity.label}: {counts[severity]}" for severity in Severity)
    return " | ".join(parts)


def format_details(finding: Finding) -> str:
    return "\n".join([
        f"Title: {finding.title}",
        f"Severity: {finding.severity.label}",
        f"Category: {finding.category}",
        f"URL: {finding.url}",
        f"Found: {finding.formatted_time()}",
        "",
        "Description:",
        finding.description,
        "",
        "Evidence:",
        finding.evidence,
    ])


def format_finding(finding: Finding) -> str:
    color = SEVERITY_COLORS.get(finding.severity, "")
    return f"{color}[{finding.severity.label.upper()}]{Style.RESET_ALL} {finding.title} - {finding.url}"


def console_listener(min_severity: Severity = Severity.INFO, stream=None):
    """
    Build a FindingsStore listener that prints new findings as they arrive.

    Listeners run on scan worker threads, so output is serialised with a
    lock of its own.

    Args:
        min_severity (Severity): Findings below this level are not printed
        stream: Output stream, defaults to sys.stdout at call time

    Returns:
        callable: (Finding) -> None
    """
    lock = threading.Lock()

    def _print_finding(finding: Finding) -> None:
        if finding.severity < min_severity:
            return
        out = stream if stream is not None else sys.stdout
        with lock:
            print(format_finding(finding), file=out)

    return _print_finding


def build_report(store: FindingsStore) -> dict:
    findings = sort_findings(store.all())
    by_severity = store.counts_by_severity()
    return {
        "generated_at": datetime.now().isoformat(),
        "summary": {
            "total": len(findings),
            "by_severity": {severity.name: by_severity[severity] for severity in Severity},
            "by_category": store.counts_by_category(),
        },
        "findings": [finding.to_dict() for finding in findings],
    }


def write_report(store: FindingsStore, path) -> Path:
    """
    Write the current findings to a JSON report.

    Raises:
        ReportError: If the file cannot be written
    """
    report_path = Path(path)
    try:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        with report_path.open("w", encoding="utf-8") as f:
            json.dump(build_report(store), f, indent=2)
    except OSError as e:
        raise ReportError(f"Could not write report to {report_path}: {e}") from e
    return report_path
