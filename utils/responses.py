"""JSON response helpers shared by the controllers"""
import logging
from typing import Any

from flask import jsonify

from config.app_config import AppConfig
from service.exceptions import ServiceError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def success(data: Any = None, message: str = None, status: int = 200, **extra):
    """{success: true, data?, message?} plus any extra top-level keys"""
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return jsonify(body), status


def failure(error: str, status: int, message: str = None, **extra):
    body = {'success': False, 'error': error}
    if message:
        body['message'] = message
    body.update(extra)
    return jsonify(body), status


def service_error(e: ServiceError):
    """Map a service exception to its status code"""
    if e.status_code >= 500:
        logger.error(f"Service error ({e.code}): {e.message}")
    else:
        logger.warning(f"{e.code}: {e.message}")
    body = e.to_dict()
    body['message'] = e.message
    return jsonify(body), e.status_code


def server_error(e: Exception, error: str = 'Internal server error'):
    """500 with the exception text exposed only in development"""
    logger.error(f"{error}: {str(e)}")
    message = str(e) if AppConfig.is_development() else 'Internal server error'
    return failure(error, 500, message)
