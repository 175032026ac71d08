# cms_api/infra/jwt/flask_jwt_access_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTDecodeError

from cms_api.models.user import Role
from cms_api.services._shared.errors import TokenExpired, TokenInvalid, TokenMalformed
from cms_api.services._shared.ports import AccessClaims, AccessTokenCodec, TokenSubject

ACCESS_TOKEN_TYPE = "access"


def _role_value(role: object) -> str:
    return str(getattr(role, "value", role))


def _as_int(value: Any) -> int:
    """Parse an integer claim; bools and non-numeric strings are rejected."""
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer claim")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    raise ValueError(f"not an integer claim: {value!r}")


@dataclass(slots=True)
class FlaskJWTAccessTokenCodec(AccessTokenCodec):
    """
    Adapter for Flask-JWT-Extended.

    Signing key and algorithm come from ``JWT_SECRET_KEY``/``JWT_ALGORITHM``,
    read by the ``JWTManager`` bound at app creation.

    .. note::
       Requires an active Flask app context.

    :param expires: Access token lifetime.
    """

    expires: timedelta

    @property
    def expires_in(self) -> int:
        return int(self.expires.total_seconds())

    def issue(self, user: TokenSubject) -> str:
        return cast(
            str,
            create_access_token(
                identity=str(user.id),
                additional_claims={
                    "role": _role_value(user.role),
                    "tv": int(user.token_version),
                },
                expires_delta=self.expires,
            ),
        )

    def verify(self, token: str) -> AccessClaims:
        try:
            payload = cast(dict[str, Any], decode_token(token))
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except JWTDecodeError as exc:
            # Signature checked out but a library-required claim is missing
            raise TokenMalformed() from exc
        except pyjwt.InvalidTokenError as exc:
            raise TokenInvalid() from exc

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            raise TokenInvalid()

        try:
            subject_id = _as_int(payload["sub"])
            token_version = _as_int(payload["tv"])
            role = Role(str(payload["role"]).upper()).value
            expires_at = datetime.fromtimestamp(_as_int(payload["exp"]), tz=UTC)
        except (KeyError, ValueError) as exc:
            raise TokenMalformed() from exc

        iat = payload.get("iat")
        return AccessClaims(
            subject_id=subject_id,
            role=role,
            token_version=token_version,
            expires_at=expires_at,
            issued_at=datetime.fromtimestamp(int(iat), tz=UTC) if iat is not None else None,
            jti=payload.get("jti"),
        )
