"""
Security header, cookie and CORS checks for a single HTTP response.

Every rule is independent: each either fires or does not, and only the two
CORS rules exclude each other. Header lookups are case-insensitive and return
the first value of a repeated header.
"""
import re
from typing import List
from urllib.parse import urlparse

from ..findings import CATEGORY_HEADERS, Finding, Severity
from ..http_message import ResponseView

SERVER_VERSION_RE = re.compile(r"\d+\.\d+")

# (header, title, description, severity, evidence)
MISSING_HEADER_RULES = [
    (
        "X-Content-Type-Options",
        "Missing X-Content-Type-Options",
        "The response does not include X-Content-Type-Options header, allowing MIME type sniffing attacks.",
        Severity.LOW,
        "No X-Content-Type-Options header found",
    ),
    (
        "Content-Security-Policy",
        "Missing Content-Security-Policy",
        "The response does not include a Content-Security-Policy header, increasing risk of XSS attacks.",
        Severity.MEDIUM,
        "No Content-Security-Policy header found",
    ),
    (
        "Referrer-Policy",
        "Missing Referrer-Policy",
        "The response does not include a Referrer-Policy header, potentially leaking sensitive information in the Referer header.",
        Severity.LOW,
        "No Referrer-Policy header found",
    ),
    (
        "Permissions-Policy",
        "Missing Permissions-Policy",
        "The response does not include a Permissions-Policy header to control browser features.",
        Severity.INFO,
        "No Permissions-Policy header found",
    ),
]


def _is_https(url: str) -> bool:
    try:
        return urlparse(str(url)).scheme.lower() == "https"
    except ValueError:
        return False


def _finding(url, title, description, severity, evidence):
    return Finding(
        url=url,
        title=title,
        description=description,
        severity=severity,
        evidence=evidence,
        category=CATEGORY_HEADERS,
    )


def check_missing_headers(url: str, response: ResponseView) -> List[Finding]:
    findings = []

    if not response.has_header("X-Frame-Options") and not response.has_header("Content-Security-Policy"):
        findings.append(_finding(
            url,
            "Missing Clickjacking Protection",
            "The response does not include X-Frame-Options or CSP frame-ancestors directive, making it vulnerable to clickjacking attacks.",
            Severity.MEDIUM,
            "No X-Frame-Options or CSP frame-ancestors header found",
        ))

    if not response.has_header("Strict-Transport-Security") and _is_https(url):
        findings.append(_finding(
            url,
            "Missing HSTS Header",
            "The HTTPS response does not include Strict-Transport-Security header, allowing potential downgrade attacks.",
            Severity.MEDIUM,
            "No Strict-Transport-Security header found on HTTPS response",
        ))

    for header, title, description, severity, evidence in MISSING_HEADER_RULES:
        if not response.has_header(header):
            findings.append(_finding(url, title, description, severity, evidence))

    return findings


def check_disclosure_headers(url: str, response: ResponseView) -> List[Finding]:
    findings = []

    server = response.header_value("Server")
    if server and SERVER_VERSION_RE.search(server):
        findings.append(_finding(
            url,
            "Server Version Disclosure",
            "The Server header reveals version information that could aid attackers.",
            Severity.LOW,
            f"Server: {server}",
        ))

    powered_by = response.header_value("X-Powered-By")
    if powered_by:
        findings.append(_finding(
            url,
            "Technology Stack Disclosure",
            "The X-Powered-By header reveals technology information that could aid attackers.",
            Severity.LOW,
            f"X-Powered-By: {powered_by}",
        ))

    return findings


def check_cookies(url: str, response: ResponseView) -> List[Finding]:
    """
    Evaluate each Set-Cookie occurrence on its own.

    A response setting several cookies yields up to three findings per cookie.
    The Secure flag is only required when the response came over HTTPS.
    """
    findings = []
    https = _is_https(url)

    for cookie in response.header_values("Set-Cookie"):
        lowered = cookie.lower()
        evidence = f"Set-Cookie: {cookie}"

        if "httponly" not in lowered:
            findings.append(_finding(
                url,
                "Cookie Without HttpOnly Flag",
                "A cookie is set without the HttpOnly flag, making it accessible to JavaScript and vulnerable to XSS attacks.",
                Severity.MEDIUM,
                evidence,
            ))

        if https and "secure" not in lowered:
            findings.append(_finding(
                url,
                "Cookie Without Secure Flag",
                "A cookie is set over HTTPS without the Secure flag, allowing it to be sent over insecure HTTP connections.",
                Severity.MEDIUM,
                evidence,
            ))

        if "samesite" not in lowered:
            findings.append(_finding(
                url,
                "Cookie Without SameSite Attribute",
                "A cookie is set without the SameSite attribute, making it vulnerable to CSRF attacks.",
                Severity.MEDIUM,
                evidence,
            ))

    return findings


def check_cors(url: str, response: ResponseView) -> List[Finding]:
    if response.header_value("Access-Control-Allow-Origin") != "*":
        return []

    credentials = response.header_value("Access-Control-Allow-Credentials") or ""
    if credentials.lower() == "true":
        return [_finding(
            url,
            "Insecure CORS Configuration",
            "The response allows any origin (*) with credentials, which is a severe security misconfiguration.",
            Severity.HIGH,
            "Access-Control-Allow-Origin: * with Access-Control-Allow-Credentials: true",
        )]

    return [_finding(
        url,
        "Permissive CORS Policy",
        "The response allows requests from any origin (*), which may be overly permissive.",
        Severity.LOW,
        "Access-Control-Allow-Origin: *",
    )]


def check_headers(url: str, response: ResponseView) -> List[Finding]:
    """
    Run every header rule against one response.

    Args:
        url (str): Absolute URL of the initiating request (scheme included)
        response (ResponseView): Response to inspect

    Returns:
        list of Finding, category "Headers"
    """
    findings = []
    findings.extend(check_missing_headers(url, response))
    findings.extend(check_disclosure_headers(url, response))
    findings.extend(check_cookies(url, response))
    findings.extend(check_cors(url, response))
    return findings
