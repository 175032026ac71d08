"""Centralized JSON error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from cms_api.core.logger import ensure_request_id
from cms_api.services._shared import errors as svc

log = logging.getLogger(__name__)


# Service error -> HTTP status. Lookup walks the MRO, so subclasses inherit.
SERVICE_ERROR_STATUS: dict[type[svc.ServiceError], int] = {
    svc.InvalidCredentials: HTTPStatus.UNAUTHORIZED,
    svc.AccountInactive: HTTPStatus.UNAUTHORIZED,
    svc.InvalidRefreshToken: HTTPStatus.UNAUTHORIZED,
    svc.RefreshTokenRevokedOrExpired: HTTPStatus.UNAUTHORIZED,
    svc.TokenExpired: HTTPStatus.UNAUTHORIZED,
    svc.TokenInvalid: HTTPStatus.UNAUTHORIZED,
    svc.TokenMalformed: HTTPStatus.UNAUTHORIZED,
    svc.AuthenticationRequired: HTTPStatus.UNAUTHORIZED,
    svc.PermissionDenied: HTTPStatus.FORBIDDEN,
    svc.SelfActionForbidden: HTTPStatus.FORBIDDEN,
    svc.NotFoundError: HTTPStatus.NOT_FOUND,
    svc.DuplicateEmailError: HTTPStatus.UNPROCESSABLE_ENTITY,
    svc.FieldValidationError: HTTPStatus.UNPROCESSABLE_ENTITY,
    svc.StoreFailure: HTTPStatus.INTERNAL_SERVER_ERROR,
    svc.ServiceError: HTTPStatus.BAD_REQUEST,
}


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        422: "validation_error",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _envelope(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    debug: str | None = None,
) -> dict[str, Any]:
    """
    Build the error envelope shared by every failing response.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :param debug: Raw exception text; only attached when ``ERROR_INCLUDE_DETAILS``.
    :returns: JSON-serializable dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {
        "status": int(status),
        "error": HTTPStatus(status).phrase,
        "code": code,
        "message": message,
    }
    if details:
        body["details"] = details
    body["request_id"] = ensure_request_id()
    if debug is not None and current_app.config.get("ERROR_INCLUDE_DETAILS", False):
        body["debug"] = debug
    return body


def _json_response(body: dict[str, Any]) -> tuple[Response, int]:
    return jsonify(body), body["status"]


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier, typically snake_case. Defaults to
        ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload (e.g., validation messages) included in the
        response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    @classmethod
    def from_service_error(cls, exc: svc.ServiceError) -> APIError:
        """
        Translate a domain error into its HTTP counterpart.

        :param exc: Error raised inside the service layer.
        :returns: API error carrying the mapped status and the domain ``code``.
        """
        status = next(
            (SERVICE_ERROR_STATUS[k] for k in type(exc).__mro__ if k in SERVICE_ERROR_STATUS),
            HTTPStatus.BAD_REQUEST,
        )
        return cls(exc.message, status_code=status, code=exc.code, details=exc.details)

    def to_envelope(self, debug: str | None = None) -> dict[str, Any]:
        """Serialize error metadata into the response envelope."""
        return _envelope(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
            debug=debug,
        )


def _log_api_error(err: APIError, *, exc_info: BaseException | None = None) -> None:
    # Routine 4xx outcomes stay at INFO; only 5xx reach ERROR with a traceback.
    if err.status_code >= 500:
        log.error(
            "api error code=%s status=%s",
            err.code,
            err.status_code,
            exc_info=exc_info or True,
            extra={"event": "api.error", "endpoint": request.endpoint},
        )
    else:
        log.info(
            "api error code=%s status=%s msg=%s",
            err.code,
            err.status_code,
            err.message,
            extra={"event": "api.rejected", "endpoint": request.endpoint},
        )


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error renders the same envelope shape.
    - Ensures a correlation ``request_id`` is present on every error.
    - Emits 5xx with ``exc_info`` for traceability; 4xx at INFO.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        _log_api_error(err)
        return _json_response(err.to_envelope())

    @app.errorhandler(svc.ServiceError)
    def handle_service_error(err: svc.ServiceError):
        api_err = APIError.from_service_error(err)
        cause = err.__cause__
        _log_api_error(api_err, exc_info=err if api_err.status_code >= 500 else None)
        debug = repr(cause) if cause is not None else None
        return _json_response(api_err.to_envelope(debug=debug))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        # Werkzeug may provide HTML-ish description; normalize for clients
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.info
        level("http exception code=%s status=%s", error_code, status)
        return _json_response(_envelope(status=status, code=error_code, message=message))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.info("validation failed", extra={"event": "api.validation_failed"})
        return _json_response(
            _envelope(
                status=HTTPStatus.UNPROCESSABLE_ENTITY,
                code="validation_error",
                message="Validation failed",
                details={"errors": err.normalized_messages()},
            )
        )

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("integrity error", exc_info=True)
        return _json_response(
            _envelope(
                status=HTTPStatus.CONFLICT,
                code="conflict",
                message="Resource conflict",
                debug=str(err.orig),
            )
        )

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(err: SQLAlchemyError):
        log.error("database error", exc_info=True)
        return _json_response(
            _envelope(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                code="store_failure",
                message=svc.StoreFailure.default_message,
                debug=repr(err),
            )
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("unhandled exception", exc_info=True)
        return _json_response(
            _envelope(
                status=HTTPStatus.INTERNAL_SERVER_ERROR,
                code="internal_server_error",
                message="Unexpected error",
                debug=repr(err),
            )
        )
