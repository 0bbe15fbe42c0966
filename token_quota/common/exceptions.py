"""Custom exceptions for the application."""


class AppException(Exception):
    """Base application exception."""
    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationException(AppException):
    """Raised when request input is malformed or out of range."""
    def __init__(self, message: str = "Validation Error"):
        super().__init__(message, status_code=400)


class UnauthorizedException(AppException):
    """Raised when authentication fails."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Raised when an authenticated user is not allowed to act."""
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


class NotFoundException(AppException):
    """Raised when resource is not found."""
    def __init__(self, message: str = "Not Found"):
        super().__init__(message, status_code=404)


class TokenExpiredException(UnauthorizedException):
    """Raised when a management access token has expired."""
    def __init__(self):
        super().__init__("Access token expired")


class InvalidTokenException(UnauthorizedException):
    """Raised when a management access token is invalid."""
    def __init__(self):
        super().__init__("Invalid access token")


class InternalServerException(AppException):
    """Raised when key generation or persistence fails."""
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, status_code=500)
