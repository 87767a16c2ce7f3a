"""
Custom exceptions for the passive scanner library.
"""


class PassiveScannerError(Exception):
    """Base exception for all library errors."""
    pass


class ConfigurationError(PassiveScannerError):
    """Raised when configuration is invalid."""
    pass


class ValidationError(PassiveScannerError):
    """Raised when input validation fails."""
    pass


class ReportError(PassiveScannerError):
    """Raised when a findings report cannot be written."""
    pass
