"""Bearer-token decorators for Flask views"""
import logging
from functools import wraps
from typing import Optional

from flask import g, request

from service.auth_service import decode_token
from service.exceptions import AuthError
from utils.responses import failure

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _bearer_token() -> Optional[str]:
    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return None
    return header[len('Bearer '):].strip()


def _authenticate():
    """
    Decode the request's bearer token into g.user

    Returns:
        None on success, otherwise the 401 response to send
    """
    token = _bearer_token()
    if token is None:
        return failure('Access denied. No token provided.', 401)
    if not token:
        return failure('Access denied. Invalid token format.', 401)

    try:
        g.user = decode_token(token)
    except AuthError as e:
        logger.warning(f"Rejected token on {request.path}: {e.message}")
        return failure(e.message, 401)
    return None


def login_required(f):
    """Any signed-in account (user or admin)"""
    @wraps(f)
    def decorated(*args, **kwargs):
        rejected = _authenticate()
        if rejected:
            return rejected
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        rejected = _authenticate()
        if rejected:
            return rejected
        if g.user.get('role') != 'admin':
            return failure('Access denied. Admin privileges required.', 403)
        return f(*args, **kwargs)
    return decorated


def optional_auth(f):
    """Set g.user when a valid token is sent; carry on anonymously otherwise"""
    @wraps(f)
    def decorated(*args, **kwargs):
        g.user = None
        token = _bearer_token()
        if token:
            try:
                g.user = decode_token(token)
            except AuthError:
                g.user = None
        return f(*args, **kwargs)
    return decorated


def current_user() -> Optional[dict]:
    return g.get('user')


def is_admin() -> bool:
    user = current_user()
    return bool(user) and user.get('role') == 'admin'
