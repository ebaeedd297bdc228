"""Pydantic request validation decorators"""
import logging
from functools import wraps
from typing import Type

from flask import request
from pydantic import BaseModel, ValidationError

from utils.responses import failure

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_VALUE_ERROR_PREFIX = 'Value error, '


def _error_details(error: ValidationError) -> list:
    details = []
    for err in error.errors():
        message = err['msg']
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX):]
        details.append({
            'field': '.'.join(str(part) for part in err['loc']),
            'message': message,
            'type': err['type']
        })
    return details


def _validation_failed(error: ValidationError):
    details = _error_details(error)
    message = ', '.join(
        f"{d['field']}: {d['message']}" if d['field'] else d['message'] for d in details
    )
    logger.warning(f"Validation error on {request.path}: {message}")
    return failure('Validation error', 400, message, details=details)


def validate_body(schema: Type[BaseModel]):
    """
    Validate the JSON body against a pydantic schema

    The parsed model is passed to the view as the ``payload`` keyword argument.
    """
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            data = request.get_json(silent=True)
            if data is None:
                data = {}
            if not isinstance(data, dict):
                return failure('Validation error', 400, 'Request body must be a JSON object')
            try:
                payload = schema.model_validate(data)
            except ValidationError as e:
                return _validation_failed(e)
            return f(*args, payload=payload, **kwargs)
        return decorated
    return decorator


def validate_query(schema: Type[BaseModel]):
    """Same as validate_body for the query string; empty parameters are ignored"""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            data = {key: value for key, value in request.args.items() if value != ''}
            try:
                payload = schema.model_validate(data)
            except ValidationError as e:
                return _validation_failed(e)
            return f(*args, payload=payload, **kwargs)
        return decorated
    return decorator
