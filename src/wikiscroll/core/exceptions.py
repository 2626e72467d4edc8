# ┌───────────────────────────────────────────────────────────────┐
# │  Project: WikiScroll Edge                                     │
# │  Edge service for the WikiScroll article feed                 │
# └───────────────────────────────────────────────────────────────┘

"""
Exceptions for the WikiScroll edge service.

Components raise these internally and convert them into a FetchResult (or a
pass-through) at their boundary, so none of them reaches a client.

Usage: from wikiscroll.core.exceptions import ExternalServiceException

All exceptions inherit from WikiScrollException and can include a message and optional context.
"""

from typing import Any, Optional


class WikiScrollException(Exception):
    """
    Base exception for all WikiScroll errors.
    """

    def __init__(self, message: str, context: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.context = context


class ConfigurationException(WikiScrollException):
    """Exception raised for configuration-related errors."""

    pass


class ValidationException(WikiScrollException):
    """
    Exception raised for schema or data validation errors.
    """

    pass


class InvalidReferenceError(ValidationException):
    """Raised when an article reference has an unknown prefix or a bad page id."""

    pass


class ExternalServiceException(WikiScrollException):
    """
    Exception raised for external API/network/service failures.
    """

    pass


class CacheException(WikiScrollException):
    """Exception raised when the edge cache cannot be read or written."""

    pass
