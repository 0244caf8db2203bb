from typing import Optional


class AppError(Exception):
    """Base class for all application-level errors."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationFailed(AppError):
    status_code = 400


class UnauthenticatedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class UpstreamError(AppError):
    """Base for failures of the external scoring service."""
    pass


class BadUpstreamError(UpstreamError):
    """The scoring service answered, but with something we can't use."""
    status_code = 502

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__("Invalid response from recommendation service")


class UpstreamUnavailableError(UpstreamError):
    """The scoring service could not be reached or returned a non-success status."""
    status_code = 503

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"Recommendation service unavailable: {detail}")
