"""User profile controller"""
from flask import Blueprint, g
from service.user_service import UserService
from service.exceptions import ServiceError
from models.user import ProfileUpdate
from middleware.auth import login_required
from middleware.validation import validate_body
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

user_bp = Blueprint('user', __name__, url_prefix='/api/users')
user_service = UserService()


@user_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    try:
        return success({'user': user_service.get_profile(g.user['id'])})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch user profile')


@user_bp.route('/profile', methods=['PUT'])
@login_required
@validate_body(ProfileUpdate)
def update_profile(payload: ProfileUpdate):
    try:
        user = user_service.update_profile(g.user['id'], payload.model_dump(exclude_unset=True))
        return success({'user': user}, 'Profile updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update user profile')
