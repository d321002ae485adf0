"""
Error types raised while discovering endpoints and measuring throughput.
"""

import asyncio


class MeasurementError(Exception):
    """Base class for all benchmark errors."""


class ProviderError(MeasurementError):
    """A provider page could not be fetched."""


class ExtractionError(MeasurementError):
    """An expected fragment was missing from scraped provider content."""


class ScriptNotFoundError(ExtractionError):
    def __init__(self, page_url: str):
        super().__init__(f"no script found in {page_url}")
        self.page_url = page_url


class TokenNotFoundError(ExtractionError):
    def __init__(self, script_url: str):
        super().__init__(f"no token found in {script_url}")
        self.script_url = script_url


class NoURLsFoundError(ExtractionError):
    def __init__(self, api_url: str):
        super().__init__(f"no URLs found in {api_url}")
        self.api_url = api_url


class EmptyEndpointPoolError(MeasurementError):
    """The URL source returned no endpoints to measure against."""


class DeadlineExceeded(MeasurementError):
    """The measurement window closed before the operation finished.

    Carries the number of bytes that were read before the cutoff so partial
    transfers still count towards the total.
    """

    def __init__(self, bytes_received: int = 0):
        super().__init__(f"deadline exceeded after {bytes_received} bytes")
        self.bytes_received = bytes_received


class TransportError(MeasurementError):
    """A download failed for a reason other than the deadline."""

    def __init__(self, url: str, reason: str, bytes_received: int = 0):
        super().__init__(f"download from {url} failed: {reason}")
        self.url = url
        self.bytes_received = bytes_received


def is_unexpected_error(error, deadline=None) -> bool:
    """Return True if ``error`` should abort a measurement.

    Deadline expiry is the normal end of a measurement window and is never
    unexpected. A bare ``asyncio.TimeoutError`` only counts as deadline expiry
    when ``deadline`` is given and has already expired; a timeout raised while
    the window is still open is a real failure.
    """
    if error is None:
        return False
    if isinstance(error, DeadlineExceeded):
        return False
    if isinstance(error, asyncio.TimeoutError):
        return deadline is None or not deadline.expired()
    return True
