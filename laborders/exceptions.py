"""
Unified exception hierarchy.

Every business failure derives from BaseAppException and carries:
- type:        error family (validation_error / not_found / conflict / error)
- code:        business error code (PATIENT_DUPLICATE / TESTS_UNAVAILABLE / ...)
- message:     human readable description
- detail:      optional extra payload (dict / list / None)
- http_status: status the HTTP boundary should answer with

Services only raise; exception_handler renders the response.
"""


class BaseAppException(Exception):
    """Base class for all application errors. Also the generic/internal kind."""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class ValidationError(BaseAppException):
    """Malformed or out-of-range input, 400."""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400


class NotFoundError(BaseAppException):
    """Referenced id does not resolve to a live row, 404."""

    type = 'not_found'
    code = 'NOT_FOUND'
    http_status = 404


class ConflictError(BaseAppException):
    """Duplicate patient or any other business rule violation, 409."""

    type = 'conflict'
    code = 'CONFLICT'
    http_status = 409


class StoreError(BaseAppException):
    """Storage failure. The entity store raises nothing else."""

    code = 'STORE_ERROR'
