"""Core primitives shared across the WikiScroll edge service."""
from .exceptions import (
    WikiScrollException,
    ConfigurationException,
    ValidationException,
    InvalidReferenceError,
    ExternalServiceException,
    CacheException,
)

__all__ = [
    "WikiScrollException",
    "ConfigurationException",
    "ValidationException",
    "InvalidReferenceError",
    "ExternalServiceException",
    "CacheException",
]
