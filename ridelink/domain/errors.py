"""Typed domain errors for the RideLink trip core.

Every failure that leaves a service is one of these types, so the HTTP
layer can map it to a status code without inspecting messages.

All errors inherit from RideLinkError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class RideLinkError(Exception):
    """Base error for the RideLink domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ValidationError(RideLinkError):
    """A required field is missing or malformed. Always client-caused.

    Attributes:
        field_name: Name of the offending request field, if known
    """

    field_name: str = ""


@dataclass
class AuthError(RideLinkError):
    """No authenticated caller identity could be established."""


@dataclass
class ProviderError(RideLinkError):
    """An external inference, geocoding or places call did not succeed.

    Attributes:
        provider: Short provider name (e.g. 'gemini', 'google_places')
        status: HTTP status returned by the provider, if any
        body: Upstream error body, kept for logging
    """

    provider: str = ""
    status: Optional[int] = None
    body: Any = field(default=None, repr=False)


@dataclass
class InterpretationError(RideLinkError):
    """The inference provider returned text that is not a trip payload.

    Attributes:
        snippet: Truncated prefix of the offending text
    """

    snippet: str = ""


@dataclass
class StoreError(RideLinkError):
    """The persistence layer's query or procedure call failed.

    Attributes:
        operation: RPC or table name that failed
        status: HTTP status returned by the store, if any
    """

    operation: str = ""
    status: Optional[int] = None


@dataclass
class ConfigurationError(RideLinkError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""
