"""
Front-end library and dangerous script pattern detection.

Three independent passes over a response body:

1. Script sources: <script src=...> filenames are matched against the
   signature table; versions found in the filename are compared with the
   latest known release.
2. Inline banners: the first "/*! Library vX.Y.Z" comment of each inline
   script block is compared the same way.
3. Vulnerable patterns: eval()/Function(), innerHTML assignment, and
   hardcoded credentials anywhere in the body.
"""
import re
from typing import List, Mapping, Optional

from ..findings import (
    CATEGORY_CODE_QUALITY,
    CATEGORY_CREDENTIALS,
    CATEGORY_LIBRARIES,
    Finding,
    Severity,
)
from ..http_message import ResponseView
from .signatures import LIBRARY_SIGNATURES, LibrarySignature
from .versions import is_outdated

SCRIPT_SRC_RE = re.compile(r"""<script[^>]*src=["']([^"']+)["'][^>]*>""", re.I)
INLINE_SCRIPT_RE = re.compile(r"<script[^>]*>(.*?)</script>", re.I | re.S)
VERSION_BANNER_RE = re.compile(r"/\*!?\s*([A-Za-z.]+)\s+v?([0-9.]+)", re.I)
INNER_HTML_RE = re.compile(r"innerHTML\s*=", re.I)
CREDENTIAL_RE = re.compile(
    r"""(api[_-]?key|apikey|secret|password|token)\s*[:=]\s*['"]([^'"]{20,})['"]""",
    re.I,
)

CREDENTIAL_EVIDENCE_LIMIT = 50


def _captured_version(match: "re.Match") -> Optional[str]:
    if match.re.groups < 1:
        return None
    return match.group(1) or None


def check_script_source(
    url: str,
    script_src: str,
    signatures: Mapping[str, LibrarySignature] = LIBRARY_SIGNATURES,
) -> List[Finding]:
    """
    Match one script filename against every signature.

    A single source may match several signatures; each match is judged on
    its own. A current version produces nothing.
    """
    findings = []

    for signature in signatures.values():
        match = signature.pattern.search(script_src)
        if not match:
            continue

        version = _captured_version(match)
        if version:
            if is_outdated(version, signature.latest_version):
                findings.append(Finding(
                    url=url,
                    title=f"Outdated {signature.name} Library",
                    description=(
                        f"The application is using {signature.name} version {version}. "
                        f"Latest version is {signature.latest_version}. "
                        "Outdated libraries may contain known vulnerabilities."
                    ),
                    severity=Severity.MEDIUM,
                    evidence=script_src,
                    category=CATEGORY_LIBRARIES,
                ))
        else:
            findings.append(Finding(
                url=url,
                title=f"{signature.name} Library Detected",
                description=(
                    f"The application is using {signature.name} but version could not be "
                    f"determined. Latest version is {signature.latest_version}."
                ),
                severity=Severity.INFO,
                evidence=script_src,
                category=CATEGORY_LIBRARIES,
            ))

    return findings


def check_inline_script(
    url: str,
    script_content: str,
    signatures: Mapping[str, LibrarySignature] = LIBRARY_SIGNATURES,
) -> List[Finding]:
    """Compare the first version banner of an inline script with the table."""
    match = VERSION_BANNER_RE.search(script_content)
    if not match:
        return []

    lib_name = match.group(1).lower()
    version = match.group(2)
    findings = []

    for key, signature in signatures.items():
        if key not in lib_name:
            continue
        if is_outdated(version, signature.latest_version):
            findings.append(Finding(
                url=url,
                title=f"Outdated {signature.name} Library (Inline)",
                description=(
                    f"Inline {signature.name} version {version} detected. "
                    f"Latest version is {signature.latest_version}."
                ),
                severity=Severity.MEDIUM,
                evidence=f"Version {version} in inline script",
                category=CATEGORY_LIBRARIES,
            ))

    return findings


def check_vulnerable_patterns(url: str, body: str) -> List[Finding]:
    findings = []

    if "eval(" in body or "Function(" in body:
        findings.append(Finding(
            url=url,
            title="Dangerous JavaScript Function Usage",
            description=(
                "The page contains usage of eval() or Function() constructor which can "
                "lead to code injection vulnerabilities."
            ),
            severity=Severity.HIGH,
            evidence="eval() or Function() detected in page",
            category=CATEGORY_CODE_QUALITY,
        ))

    if INNER_HTML_RE.search(body):
        findings.append(Finding(
            url=url,
            title="Potential DOM-based XSS",
            description=(
                "The page uses innerHTML assignment which could lead to DOM-based XSS "
                "if user input is not properly sanitized."
            ),
            severity=Severity.MEDIUM,
            evidence="innerHTML usage detected",
            category=CATEGORY_CODE_QUALITY,
        ))

    match = CREDENTIAL_RE.search(body)
    if match:
        matched = match.group(0)
        findings.append(Finding(
            url=url,
            title="Potential Exposed Credentials",
            description=(
                "The page appears to contain hardcoded API keys, secrets, or credentials "
                "in JavaScript code."
            ),
            severity=Severity.HIGH,
            evidence=f"Pattern: {matched[:CREDENTIAL_EVIDENCE_LIMIT]}...",
            category=CATEGORY_CREDENTIALS,
        ))

    return findings


def check_libraries(
    url: str,
    response: ResponseView,
    signatures: Mapping[str, LibrarySignature] = LIBRARY_SIGNATURES,
) -> List[Finding]:
    """
    Scan a response body for library references and dangerous code.

    Args:
        url (str): URL of the initiating request
        response (ResponseView): HTML page or JavaScript file
        signatures (Mapping): Library table, defaults to the built-in one

    Returns:
        list of Finding in categories Libraries, Code Quality and Credentials
    """
    body = response.text or ""
    findings = []

    for script_src in SCRIPT_SRC_RE.findall(body):
        findings.extend(check_script_source(url, script_src, signatures))

    for script_content in INLINE_SCRIPT_RE.findall(body):
        findings.extend(check_inline_script(url, script_content, signatures))

    findings.extend(check_vulnerable_patterns(url, body))
    return findings
