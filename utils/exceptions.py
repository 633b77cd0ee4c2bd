class AppError(Exception):
    """Base exception for the project."""

class ConfigError(AppError):
    """Configuration is missing/invalid (API key, prompt files)."""

class ExternalServiceError(AppError):
    """The Gemini endpoint could not produce a usable answer."""

class TransportError(ExternalServiceError):
    """Network failure, timeout or non-2xx HTTP status."""

class ResponseShapeError(ExternalServiceError):
    """Response JSON is missing the candidate text (includes safety blocks)."""

class ValidationError(AppError):
    """Raised when a settings value cannot be parsed."""
