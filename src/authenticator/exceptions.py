from typing import Optional


class AuthenticatorError(Exception):
    """Base class for every error raised by this package."""

    pass


class InvalidParameter(AuthenticatorError, ValueError):
    """A profile or call parameter is outside its legal range."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidSecretEncoding(AuthenticatorError, ValueError):
    """The secret is not valid Base32."""

    pass


class RandomSourceUnavailable(AuthenticatorError, RuntimeError):
    """The secure random source could not supply entropy. Safe to retry."""

    pass
