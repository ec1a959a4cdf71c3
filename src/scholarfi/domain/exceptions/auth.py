"""
Authentication exceptions.
"""

from scholarfi.domain.exceptions.base import ScholarFiException


class AuthenticationError(ScholarFiException):
    """Raised when an inbound caller cannot be authenticated."""

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTHENTICATION_ERROR")


class InvalidSignatureError(AuthenticationError):
    """Raised when a webhook signature does not match its payload."""

    def __init__(self, source: str = "webhook"):
        super().__init__(f"Invalid {source} signature")
        self.code = "INVALID_SIGNATURE"
        self.source = source
