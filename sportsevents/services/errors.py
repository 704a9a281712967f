"""
Service-level error taxonomy.

Services raise these (all ValueError subclasses) and routes translate them
into HTTP responses using ``status_code``.
"""


class ServiceError(ValueError):
    """Base class for expected, per-call service failures."""

    status_code = 400


class Unauthorized(ServiceError):
    """No active session, or credentials rejected."""

    status_code = 401


class Forbidden(ServiceError):
    """Authenticated but not allowed to act on the resource."""

    status_code = 403


class NotFound(ServiceError):
    """Unknown id or code."""

    status_code = 404


class Conflict(ServiceError):
    """Duplicate resource, e.g. a second join request or a taken username."""

    status_code = 409


class ValidationError(ServiceError):
    """Missing required field or inconsistent input."""

    status_code = 422
