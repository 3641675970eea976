"""Ziptrace error hierarchy and exceptions."""

from __future__ import annotations


class ZiptraceError(Exception):
    """Base exception for all ziptrace errors."""
    
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
    
    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigurationError(ZiptraceError):
    """Raised when tracing configuration is invalid or incomplete."""
    pass


class TransportError(ZiptraceError):
    """Raised when an encoded batch cannot be delivered to the collector."""
    pass


class EncodingError(ZiptraceError):
    """Raised when spans cannot be encoded in the configured wire format."""
    pass


class TracerSealedError(ZiptraceError):
    """Raised when a tracer builder is modified after it was built."""
    pass
