class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class IdentityNotFound(DomainError):
    """No identity record matches the lookup email."""

    pass


class InvalidCode(DomainError):
    """Submitted code does not match the current one."""

    pass


class CodeExpired(DomainError):
    """Submitted code matches but its validity window is over."""

    pass


class NotAuthenticated(DomainError):
    """Missing or mismatched session token on a protected operation."""

    pass


class RateLimited(DomainError):
    """Too many authentication attempts from the same client."""

    pass


class DeliveryError(DomainError):
    """The notification transport could not send the message."""

    pass


class StoreError(DomainError):
    """The underlying persistence layer failed."""

    pass
