"""
Error types raised by the OpenRouter integration.

Every failure reaching a router is an OpenRouterError carrying a
human-readable message; routers render it into the response envelope.
"""

from typing import Optional


NETWORK_ERROR_MESSAGE = "Network error occurred. Please check your internet connection and try again."
TIMEOUT_ERROR_MESSAGE = "Request timeout - OpenRouter API may be slow"
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while communicating with the API."


class OpenRouterError(Exception):
    """Base class for every failure surfaced by the OpenRouter service."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(OpenRouterError):
    """A required setting (usually the API key) is missing."""


class UpstreamHTTPError(OpenRouterError):
    """OpenRouter answered with a non-success status code."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(OpenRouterError):
    """The request never produced an HTTP response."""


class ImageExtractionError(OpenRouterError):
    """The response was received but no image could be located in it."""

    def __init__(self, message: str, text: Optional[str] = None):
        super().__init__(message)
        self.text = text


class UnsupportedCapabilityError(OpenRouterError):
    """The configured model/backend pair cannot perform the requested operation."""
