"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BackendAPIError(DomainException):
    """Backend API answered with a non-success status"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendUnavailableError(BackendAPIError):
    """Backend API could not be reached or timed out"""

    pass


class MalformedResponseError(BackendAPIError):
    """Backend API returned a body that does not match its schema"""

    pass


class SessionRequired(DomainException):
    """No signed-in identity for a protected page"""

    def __init__(self, login_path: str, area: str):
        super().__init__(f"{area} session required")
        self.login_path = login_path
        self.area = area
