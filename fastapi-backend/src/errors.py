# src/errors.py
from __future__ import annotations


class MetricsError(Exception):
    """Base class for errors raised by the metrics backend."""


class UpstreamUnavailable(MetricsError):
    """
    An upstream provider could not be reached, answered with a non-success
    status, or returned a payload without the data we asked for.

    The message is the upstream's own message whenever one is available.
    """

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source
        self.message = message

    def __str__(self) -> str:
        return self.message


class ProviderNotConfigured(UpstreamUnavailable):
    """Required credentials or identifiers for a provider are missing."""


class InvalidSnapshot(MetricsError, ValueError):
    """A snapshot payload is not a flat JSON object."""
