"""
Error taxonomy shared by the stores, services and routers.

Routers never build error responses by hand: they raise one of these and the
exception handlers registered in ``dashboard.main`` render the JSON envelope.
"""


class ConfigError(RuntimeError):
    """Missing or invalid configuration detected at startup."""


class DashboardError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DashboardError):
    status_code = 400


class NotFoundError(DashboardError):
    status_code = 404


class ConflictError(DashboardError):
    status_code = 409


class AuthError(DashboardError):
    status_code = 401


class ForbiddenError(DashboardError):
    status_code = 403


class UnclassifiedError(DashboardError):
    status_code = 500
