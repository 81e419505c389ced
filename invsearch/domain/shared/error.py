"""Error hierarchy for invsearch.

Error layers:
- InvSearchError: Base class for all invsearch errors
- DomainError: Business rule violations, validation failures
- InfrastructureError: System-level failures like network issues

Domain-level search failures do not raise: they travel as ``Failure``
envelopes. Transport failures raise ``ExternalServiceError`` from the
HTTP adapter and are turned into a visible message by the pipeline.
"""


class InvSearchError(Exception):
    """Base class for all invsearch errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(InvSearchError):
    """Base class for domain/business errors."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(InvSearchError):
    """Base class for infrastructure/system errors."""


class ExternalServiceError(InfrastructureError):
    """The inventory API is unreachable or answered with something unusable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR")
        self.status_code = status_code


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
