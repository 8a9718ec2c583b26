"""Application-level exceptions.

Routine provider failures are not exceptions; see
``fund_monitor.domain.models.result``. These are reserved for bad
configuration and lookups the caller got wrong.
"""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class ConfigurationError(AppError):
    """Raised when the application is wired with missing or unknown settings."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIGURATION_ERROR")


class RefreshInProgressError(AppError):
    """Raised when no snapshot exists yet and a refresh cycle is still running."""

    def __init__(self):
        super().__init__(
            "Portfolio refresh in progress; no snapshot available yet",
            code="REFRESH_IN_PROGRESS",
        )
