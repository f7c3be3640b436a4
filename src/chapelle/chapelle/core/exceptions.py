class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class PhotoRejectedError(ValidationError):
    """Raised when an uploaded photo is not an image or is too large."""


class AuthenticationError(DomainError):
    """Raised when sign-in or sign-up is refused by the identity layer."""


class EmailInUseError(AuthenticationError):
    pass


class WeakPasswordError(AuthenticationError):
    pass


class InvalidCredentialsError(AuthenticationError):
    pass


class MalformedRecordError(DomainError):
    """Raised when a stored record cannot be mapped to a domain entity."""


class StorageError(Exception):
    """Raised when the object store cannot read or write a photo."""
