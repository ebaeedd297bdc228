"""User account controller: registration, login, password reset, profile and saved properties"""
from flask import Blueprint, g
from service.auth_service import AuthService
from service.user_service import UserService
from service.inquiry_service import InquiryService
from service.exceptions import ServiceError
from models.user import (
    RegisterRequest, LoginRequest, EmailRequest, VerifyOtpRequest,
    ResetPasswordRequest, ChangePasswordRequest, ProfileUpdate, SavePropertyRequest
)
from models.inquiry import UserInquiryCreate, InquiryReply
from middleware.auth import login_required
from middleware.validation import validate_body
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')
auth_service = AuthService()
user_service = UserService()
inquiry_service = InquiryService()


@auth_bp.route('/register', methods=['POST'])
@validate_body(RegisterRequest)
def register(payload: RegisterRequest):
    """Create an unverified account and email a verification code"""
    try:
        result = auth_service.register(
            payload.firstName, payload.lastName, payload.email, payload.password, payload.phone
        )
        return success(
            result,
            'Registration successful. Please check your email for the verification code.',
            201
        )
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Registration failed')


@auth_bp.route('/verify-email', methods=['POST'])
@validate_body(VerifyOtpRequest)
def verify_email(payload: VerifyOtpRequest):
    try:
        result = auth_service.verify_email(payload.email, payload.otp)
        return success(result, 'Email verified successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Email verification failed')


@auth_bp.route('/resend-verification', methods=['POST'])
@validate_body(EmailRequest)
def resend_verification(payload: EmailRequest):
    try:
        result = auth_service.resend_verification(payload.email)
        return success(result, 'Verification code sent')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to resend verification code')


@auth_bp.route('/login', methods=['POST'])
@validate_body(LoginRequest)
def login(payload: LoginRequest):
    try:
        result = auth_service.login(payload.email, payload.password)
        return success(result, 'Login successful')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Login failed')


@auth_bp.route('/forgot-password', methods=['POST'])
@validate_body(EmailRequest)
def forgot_password(payload: EmailRequest):
    try:
        result = auth_service.forgot_password(payload.email)
        return success(message=result['message'])
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to process password reset request')


@auth_bp.route('/verify-reset-otp', methods=['POST'])
@validate_body(VerifyOtpRequest)
def verify_reset_otp(payload: VerifyOtpRequest):
    try:
        result = auth_service.verify_reset_otp(payload.email, payload.otp)
        return success(result, 'OTP verified successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'OTP verification failed')


@auth_bp.route('/reset-password', methods=['POST'])
@validate_body(ResetPasswordRequest)
def reset_password(payload: ResetPasswordRequest):
    try:
        auth_service.reset_password(payload.resetToken, payload.newPassword)
        return success(message='Password reset successful. You can now log in with your new password.')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Password reset failed')


@auth_bp.route('/verify-token', methods=['GET'])
@login_required
def verify_token():
    try:
        result = auth_service.verify_user_token(g.user)
        return success(result, 'Token is valid')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Token verification failed')


@auth_bp.route('/profile', methods=['GET'])
@login_required
def get_profile():
    try:
        return success({'user': user_service.get_profile(g.user['id'])})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch profile')


@auth_bp.route('/profile', methods=['PUT'])
@login_required
@validate_body(ProfileUpdate)
def update_profile(payload: ProfileUpdate):
    try:
        user = user_service.update_profile(g.user['id'], payload.model_dump(exclude_unset=True))
        return success({'user': user}, 'Profile updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update profile')


@auth_bp.route('/change-password', methods=['POST'])
@login_required
@validate_body(ChangePasswordRequest)
def change_password(payload: ChangePasswordRequest):
    try:
        auth_service.change_password(g.user['id'], payload.currentPassword, payload.newPassword)
        return success(message='Password changed successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to change password')


@auth_bp.route('/statistics', methods=['GET'])
@login_required
def get_statistics():
    try:
        return success(user_service.get_statistics(g.user['id']))
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch statistics')


# Saved properties

@auth_bp.route('/save-property', methods=['POST'])
@login_required
@validate_body(SavePropertyRequest)
def save_property(payload: SavePropertyRequest):
    try:
        user_service.save_property(g.user['id'], payload.propertyId)
        return success({'propertyId': payload.propertyId}, 'Property saved successfully', 201)
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to save property')


@auth_bp.route('/unsave-property/<property_id>', methods=['DELETE'])
@login_required
def unsave_property(property_id: str):
    try:
        user_service.unsave_property(g.user['id'], property_id)
        return success({'propertyId': property_id}, 'Property removed from saved list')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to remove saved property')


@auth_bp.route('/saved-properties', methods=['GET'])
@login_required
def get_saved_properties():
    try:
        saved = user_service.get_saved_properties(g.user['id'])
        return success({'savedProperties': saved, 'total': len(saved)})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch saved properties')


@auth_bp.route('/is-property-saved/<property_id>', methods=['GET'])
@login_required
def is_property_saved(property_id: str):
    try:
        return success({'isSaved': user_service.is_property_saved(g.user['id'], property_id)})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to check saved property')


@auth_bp.route('/cleanup-saved-properties', methods=['POST'])
@login_required
def cleanup_saved_properties():
    try:
        cleaned = user_service.cleanup_saved_properties(g.user['id'])
        return success({'cleaned': cleaned}, f'Cleaned up {cleaned} invalid saved properties')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to clean up saved properties')


# Inquiries made by the signed-in user

@auth_bp.route('/create-inquiry', methods=['POST'])
@login_required
@validate_body(UserInquiryCreate)
def create_inquiry(payload: UserInquiryCreate):
    try:
        inquiry = inquiry_service.create_user_inquiry(g.user['id'], payload.model_dump())
        return success({'inquiry': inquiry.to_response()}, 'Inquiry submitted successfully', 201)
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to create inquiry')


@auth_bp.route('/my-inquiries', methods=['GET'])
@login_required
def get_my_inquiries():
    try:
        inquiries = inquiry_service.get_user_inquiries(g.user['id'], g.user.get('email'))
        return success({
            'inquiries': [i.to_response() for i in inquiries],
            'total': len(inquiries)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch inquiries')


@auth_bp.route('/reply-to-inquiry/<inquiry_id>', methods=['POST'])
@login_required
@validate_body(InquiryReply)
def reply_to_inquiry(inquiry_id: str, payload: InquiryReply):
    try:
        inquiry, message_id = inquiry_service.reply(inquiry_id, g.user['id'], payload.message)
        return success({
            'inquiryId': inquiry.id,
            'messageId': message_id,
            'status': inquiry.status,
            'messageCount': inquiry.messageCount
        }, 'Reply sent successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to send reply')
