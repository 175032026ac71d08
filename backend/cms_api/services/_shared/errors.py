"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, token
adapters and application services.

Every error carries a stable machine-readable ``code``. The translation to
HTTP responses is handled by ``cms_api/core/errors.py``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError mentions the constraint name.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base type
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories, adapters or domain logic.
    - ``cms_api.core.errors`` later translates them to an ``APIError``.

    :param message: Client-safe summary. Defaults to ``default_message``.
    :param details: Optional structured, client-safe context.
    """

    code: str = "service_error"
    default_message: str = "Service error"

    def __init__(self, message: str | None = None, *, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


# --------------------------------------------------------------------------- #
# Authentication / session lifecycle
# --------------------------------------------------------------------------- #


class InvalidCredentials(ServiceError):
    """Unknown email or wrong password; both cases look the same to callers."""

    code = "invalid_credentials"
    default_message = "Invalid credentials"


class AccountInactive(ServiceError):
    code = "account_inactive"
    default_message = "Account is inactive"


class InvalidRefreshToken(ServiceError):
    """No live refresh record matches the presented value."""

    code = "invalid_refresh_token"
    default_message = "Invalid refresh token"


class RefreshTokenRevokedOrExpired(ServiceError):
    """The refresh record expired or predates the owner's current token version."""

    code = "refresh_token_revoked_or_expired"
    default_message = "Token has been revoked or expired"


class TokenExpired(ServiceError):
    code = "token_expired"
    default_message = "Access token has expired"


class TokenInvalid(ServiceError):
    """Bad signature, not a JWT, wrong token type, or stale token version."""

    code = "token_invalid"
    default_message = "Access token is invalid"


class TokenMalformed(ServiceError):
    code = "token_malformed"
    default_message = "Access token is missing required claims"


# --------------------------------------------------------------------------- #
# Authorization
# --------------------------------------------------------------------------- #


class AuthenticationRequired(ServiceError):
    code = "authentication_required"
    default_message = "Authentication required"


class PermissionDenied(ServiceError):
    """
    Raised when the resolved identity lacks every accepted role.

    :param required: Roles accepted by the operation.
    :param actual: Role carried by the identity.
    """

    code = "permission_denied"
    default_message = "You do not have permission to perform this action"

    def __init__(self, *, required: Iterable[str], actual: str | None) -> None:
        super().__init__(
            details={"required_roles": sorted(required), "your_role": actual},
        )


class SelfActionForbidden(ServiceError):
    code = "self_action_forbidden"
    default_message = "You cannot perform this action on your own account"


# --------------------------------------------------------------------------- #
# Persistence
# --------------------------------------------------------------------------- #


class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    code = "not_found"

    def __init__(self, entity: str, key: str | int) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found")


class UserNotFound(NotFoundError):
    code = "user_not_found"

    def __init__(self, key: str | int) -> None:
        super().__init__("User", key)


class DuplicateEmailError(ServiceError):
    """Raised when an email address is already taken by another account."""

    code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, email: str) -> None:
        super().__init__(details={"errors": {"email": ["This email is already in use."]}})
        self.email = email


class CategoryNotFound(NotFoundError):
    code = "category_not_found"

    def __init__(self, key: str | int) -> None:
        super().__init__("Category", key)


class TagNotFound(NotFoundError):
    code = "tag_not_found"

    def __init__(self, key: str | int) -> None:
        super().__init__("Tag", key)


class FieldValidationError(ServiceError):
    """
    A payload field failed a rule that needs the store to check.

    :param field: Payload key reported under ``details.errors``.
    :param message: Client-safe explanation.
    """

    code = "validation_error"
    default_message = "Validation failed"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(details={"errors": {field: [message]}})
        self.field = field


class DuplicateSlugError(FieldValidationError):
    def __init__(self, slug: str) -> None:
        super().__init__("slug", "This slug is already in use.")
        self.slug = slug


class StoreFailure(ServiceError):
    """
    I/O failure in the credential store or the refresh token store.

    The only error kind here that may signal a genuine outage. The driver
    exception is chained via ``raise ... from``.
    """

    code = "store_failure"
    default_message = "Storage backend unavailable"
