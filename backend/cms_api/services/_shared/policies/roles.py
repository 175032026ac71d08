"""Role-based authorization gate.

Fails closed: a missing identity is rejected before any role comparison.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from cms_api.services._shared.errors import AuthenticationRequired, PermissionDenied

if TYPE_CHECKING:
    from cms_api.models.user import Role
    from cms_api.services.auth.dto import Identity


def _role_name(role: Role | str) -> str:
    return str(getattr(role, "value", role)).upper()


def authorize(identity: Identity | None, required_roles: Iterable[Role | str]) -> Identity:
    """
    Allow ``identity`` iff its role is one of ``required_roles``.

    :param identity: Identity resolved from a verified access token, or ``None``.
    :param required_roles: Non-empty set of accepted roles.
    :returns: The same identity, for chaining.
    :raises AuthenticationRequired: No identity was resolved.
    :raises PermissionDenied: The identity's role is not accepted.
    :raises ValueError: ``required_roles`` is empty (programming error).
    """
    if identity is None:
        raise AuthenticationRequired()
    accepted = {_role_name(r) for r in required_roles}
    if not accepted:
        raise ValueError("authorize() needs at least one accepted role.")
    actual = _role_name(identity.role)
    if actual not in accepted:
        raise PermissionDenied(required=accepted, actual=actual)
    return identity
