from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is wrong. The message never says which."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class UnauthorizedError(AuthenticationError):
    """Raised when a protected route is called without a token."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class ForbiddenError(AccessDeniedError):
    """Raised when a presented token is invalid, expired or revoked."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DuplicateEmailError(ValidationError):
    """Raised on signup when the email is already registered."""

    def __init__(self, message: str = "Email already exists") -> None:
        super().__init__(message)


class EmailNotVerifiedError(ValidationError):
    """Raised when the identity provider reports an unverified email."""

    def __init__(self, message: str = "Email not verified") -> None:
        super().__init__(message)


class InvalidAssertionError(UserError):
    """Raised when a federated identity assertion cannot be verified."""

    def __init__(self, message: str = "Authentication error") -> None:
        super().__init__(message)


class StoreError(Exception):
    """Raised when the backing store fails.

    The message is for server logs only and is never returned to the caller.
    """


class TokenError(Exception):
    """Base class for bearer token verification failures."""


class InvalidSignatureError(TokenError):
    """Token signature does not match the configured secret."""


class ExpiredTokenError(TokenError):
    """Token is past its expiry claim."""


class MalformedTokenError(TokenError):
    """Token cannot be decoded or carries unusable claims."""
