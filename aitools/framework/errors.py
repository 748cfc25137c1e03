from __future__ import annotations


class AitoolsError(Exception):
    """Base class for errors raised by aitools itself (not by SDKs)."""

    exit_code = 1


class ConfigurationError(AitoolsError, RuntimeError):
    """A required setting or credential is missing or invalid."""

    exit_code = 2


class ValidationError(AitoolsError, ValueError):
    """User-supplied parameters were rejected before any external call."""

    exit_code = 2


class ExternalServiceError(AitoolsError, RuntimeError):
    """A collaborator returned a response this tool cannot use."""
