"""Exceptions raised by the service layer and mapped to HTTP responses by the controllers"""


class ServiceError(Exception):
    status_code = 500
    code = 'INTERNAL_ERROR'

    def __init__(self, message: str, code: str = None, field: str = None, details=None):
        self.message = message
        self.field = field
        self.details = details
        if code:
            self.code = code
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {
            'success': False,
            'error': self.message,
            'errorType': self.code
        }
        if self.field:
            body['field'] = self.field
        if self.details is not None:
            body['details'] = self.details
        return body


class ValidationError(ServiceError):
    status_code = 400
    code = 'VALIDATION_ERROR'


class ConflictError(ServiceError):
    status_code = 400
    code = 'CONFLICT'


class AuthError(ServiceError):
    status_code = 401
    code = 'UNAUTHORIZED'


class ForbiddenError(ServiceError):
    status_code = 403
    code = 'FORBIDDEN'


class NotFoundError(ServiceError):
    status_code = 404
    code = 'NOT_FOUND'
