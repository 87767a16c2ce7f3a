"""
Passive checkers run against intercepted responses.

Provides:
- Header checks (security headers, cookies, CORS, disclosure)
- Library checks (outdated libraries, dangerous patterns, credentials)
- The library signature table and version comparison they rely on
"""

from .header_checker import check_headers
from .library_checker import check_libraries
from .signatures import LIBRARY_SIGNATURES, LibrarySignature
from .versions import is_outdated

__all__ = [
    'check_headers',
    'check_libraries',
    'LIBRARY_SIGNATURES',
    'LibrarySignature',
    'is_outdated',
]
