"""Exceptions raised by the generation layer."""

from dataclasses import dataclass


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for generation failures surfaced to the user."""

    message: str
    code: str = "service_error"
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class ConfigurationError(ServiceError):
    """Raised before any network call when the provider credential is missing."""

    code: str = "configuration_error"


@dataclass(eq=False)
class ProviderError(ServiceError):
    """Raised when the generative-language provider call fails."""

    code: str = "provider_error"
