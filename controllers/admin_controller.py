"""Admin controller: account, listings, inquiries, users, settings, reviews and dashboard"""
from flask import Blueprint, request
from service.auth_service import AuthService
from service.property_service import PropertyService
from service.inquiry_service import InquiryService
from service.user_service import UserService
from service.review_service import ReviewService
from service.settings_service import SettingsService
from service.image_service import ImageService
from service.exceptions import ServiceError, ValidationError
from config.cloudinary_config import CloudinaryConfig
from models.user import (
    LoginRequest, EmailRequest, VerifyOtpRequest, ResetPasswordRequest,
    AdminProfileUpdate, UserStatusUpdate
)
from models.property import PropertyCreate, PropertyUpdate, PropertyStatusUpdate
from models.inquiry import InquiryRespond, InquiryStatusUpdate, InquiryNoteCreate
from models.review import ReviewReject
from models.site_settings import SiteSettingsUpdate, NotificationSettings
from middleware.auth import admin_required
from middleware.validation import validate_body
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')
auth_service = AuthService()
property_service = PropertyService()
inquiry_service = InquiryService()
user_service = UserService()
review_service = ReviewService()
settings_service = SettingsService()


# ----------------------------------------------------------------------
# Account
# ----------------------------------------------------------------------

@admin_bp.route('/login', methods=['POST'])
@validate_body(LoginRequest)
def login(payload: LoginRequest):
    try:
        result = auth_service.admin_login(payload.email, payload.password)
        return success(result, 'Login successful')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Login failed')


@admin_bp.route('/logout', methods=['POST'])
def logout():
    # Tokens are stateless; the dashboard drops its copy
    return success(message='Logout successful')


@admin_bp.route('/profile', methods=['GET'])
@admin_required
def get_profile():
    try:
        return success({'user': auth_service.get_admin_profile()})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch profile')


@admin_bp.route('/profile', methods=['PUT'])
@admin_required
@validate_body(AdminProfileUpdate)
def update_profile(payload: AdminProfileUpdate):
    try:
        user = auth_service.update_admin_profile(
            name=payload.name,
            email=payload.email,
            current_password=payload.currentPassword,
            new_password=payload.newPassword
        )
        return success({'user': user}, 'Profile updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update profile')


@admin_bp.route('/forgot-password', methods=['POST'])
@validate_body(EmailRequest)
def forgot_password(payload: EmailRequest):
    try:
        result = auth_service.admin_forgot_password(payload.email)
        return success(message=result['message'])
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to process password reset request')


@admin_bp.route('/verify-otp', methods=['POST'])
@validate_body(VerifyOtpRequest)
def verify_otp(payload: VerifyOtpRequest):
    try:
        result = auth_service.admin_verify_otp(payload.email, payload.otp)
        return success(result, 'OTP verified successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'OTP verification failed')


@admin_bp.route('/reset-password', methods=['POST'])
@validate_body(ResetPasswordRequest)
def reset_password(payload: ResetPasswordRequest):
    try:
        auth_service.admin_reset_password(payload.resetToken, payload.newPassword)
        return success(message='Password reset successful')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Password reset failed')


@admin_bp.route('/otp-status/<email>', methods=['GET'])
def otp_status(email: str):
    try:
        return success(auth_service.admin_otp_status(email))
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch OTP status')


# ----------------------------------------------------------------------
# Properties
# ----------------------------------------------------------------------

@admin_bp.route('/properties', methods=['GET'])
@admin_required
def list_properties():
    """All listings regardless of status"""
    try:
        properties, pagination = property_service.get_properties(
            page=request.args.get('page', 1),
            limit=request.args.get('limit', 20),
            status=request.args.get('status'),
            type=request.args.get('type')
        )
        return success({
            'properties': [p.to_response() for p in properties],
            'pagination': pagination
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch properties')


@admin_bp.route('/properties', methods=['POST'])
@admin_required
@validate_body(PropertyCreate)
def create_property(payload: PropertyCreate):
    try:
        property_obj = property_service.create_property(payload.model_dump())
        logger.info(f"Property created successfully: {property_obj.title}")
        return success({'property': property_obj.to_response()}, 'Property created successfully', 201)
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to create property')


@admin_bp.route('/properties/<property_id>', methods=['GET'])
@admin_required
def get_property(property_id: str):
    try:
        property_obj = property_service.get_property_by_id(property_id)
        return success({'property': property_obj.to_response()})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch property')


@admin_bp.route('/properties/<property_id>', methods=['PUT'])
@admin_required
@validate_body(PropertyUpdate)
def update_property(property_id: str, payload: PropertyUpdate):
    try:
        property_obj = property_service.update_property(property_id, payload.model_dump(exclude_unset=True))
        return success({'property': property_obj.to_response()}, 'Property updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update property')


@admin_bp.route('/properties/<property_id>', methods=['DELETE'])
@admin_required
def delete_property(property_id: str):
    try:
        property_service.delete_property(property_id)
        return success(message='Property deleted successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to delete property')


@admin_bp.route('/properties/<property_id>/status', methods=['PATCH'])
@admin_required
@validate_body(PropertyStatusUpdate)
def update_property_status(property_id: str, payload: PropertyStatusUpdate):
    try:
        property_obj = property_service.update_property_status(property_id, payload.status)
        return success({'property': property_obj.to_response()}, f'Property status updated to {payload.status}')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update property status')


@admin_bp.route('/properties/<property_id>/images', methods=['POST'])
@admin_required
def add_property_images(property_id: str):
    """Attach images sent as multipart files ("images") or as a JSON list of URLs"""
    try:
        property_service.get_property_by_id(property_id)

        files = request.files.getlist('images')
        if files:
            uploads = [ImageService.upload_file(f, CloudinaryConfig.PROPERTY_FOLDER) for f in files]
            urls = [upload['url'] for upload in uploads]
        else:
            data = request.get_json(silent=True) or {}
            urls = data.get('images') or []
            if not isinstance(urls, list) or not all(isinstance(u, str) and u for u in urls):
                raise ValidationError('images must be a list of image URLs', field='images')

        if not urls:
            raise ValidationError('No images provided', field='images')

        property_obj = property_service.add_images(property_id, urls)
        return success({'property': property_obj.to_response(), 'added': urls}, 'Images added successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to add images')


@admin_bp.route('/properties/upload-image-base64', methods=['POST'])
@admin_required
def upload_property_image_base64():
    try:
        data = request.get_json(silent=True) or {}
        result = ImageService.upload_base64(
            data.get('image'),
            data.get('fileName'),
            CloudinaryConfig.PROPERTY_FOLDER
        )
        return success(result, 'Image uploaded successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to upload image')


# ----------------------------------------------------------------------
# Inquiries
# ----------------------------------------------------------------------

@admin_bp.route('/inquiries', methods=['GET'])
@admin_required
def list_inquiries():
    try:
        inquiries, pagination = inquiry_service.list_inquiries(
            status=request.args.get('status'),
            page=request.args.get('page', 1),
            limit=request.args.get('limit', 20)
        )
        return success({
            'inquiries': [i.to_response() for i in inquiries],
            'pagination': pagination
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch inquiries')


@admin_bp.route('/inquiries/stats', methods=['GET'])
@admin_required
def inquiry_stats():
    try:
        return success(inquiry_service.get_stats())
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch inquiry statistics')


@admin_bp.route('/inquiries/<inquiry_id>', methods=['GET'])
@admin_required
def get_inquiry(inquiry_id: str):
    try:
        return success({'inquiry': inquiry_service.get_inquiry(inquiry_id).to_response()})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch inquiry')


@admin_bp.route('/inquiries/<inquiry_id>/respond', methods=['PUT'])
@admin_required
@validate_body(InquiryRespond)
def respond_to_inquiry(inquiry_id: str, payload: InquiryRespond):
    try:
        inquiry = inquiry_service.respond(inquiry_id, payload.response, payload.status)
        return success({'inquiry': inquiry.to_response()}, 'Response sent successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to respond to inquiry')


@admin_bp.route('/inquiries/<inquiry_id>/status', methods=['PUT', 'PATCH'])
@admin_required
@validate_body(InquiryStatusUpdate)
def update_inquiry_status(inquiry_id: str, payload: InquiryStatusUpdate):
    try:
        inquiry = inquiry_service.update_status(inquiry_id, payload.status)
        return success({'inquiry': inquiry.to_response()}, 'Inquiry status updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update inquiry status')


@admin_bp.route('/inquiries/<inquiry_id>/notes', methods=['POST'])
@admin_required
@validate_body(InquiryNoteCreate)
def add_inquiry_note(inquiry_id: str, payload: InquiryNoteCreate):
    try:
        inquiry = inquiry_service.add_note(inquiry_id, payload.note)
        return success({'inquiry': inquiry.to_response()}, 'Note added successfully', 201)
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to add note')


# ----------------------------------------------------------------------
# Users
# ----------------------------------------------------------------------

@admin_bp.route('/users', methods=['GET'])
@admin_required
def list_users():
    try:
        users, pagination = user_service.list_users(
            role=request.args.get('role'),
            status=request.args.get('status'),
            search=request.args.get('search'),
            page=request.args.get('page', 1),
            limit=request.args.get('limit', 20)
        )
        return success({'users': users, 'pagination': pagination})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch users')


@admin_bp.route('/users/stats', methods=['GET'])
@admin_required
def user_stats():
    try:
        return success(user_service.get_user_stats())
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch user statistics')


@admin_bp.route('/users/<user_id>', methods=['GET'])
@admin_required
def get_user(user_id: str):
    try:
        return success(user_service.get_user_details(user_id))
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch user')


@admin_bp.route('/users/<user_id>/status', methods=['PUT', 'PATCH'])
@admin_required
@validate_body(UserStatusUpdate)
def update_user_status(user_id: str, payload: UserStatusUpdate):
    try:
        result = user_service.set_status(user_id, payload.status)
        action = 'activated' if payload.status == 'active' else 'deactivated'
        return success(result, f'User {action} successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update user status')


@admin_bp.route('/users/<user_id>', methods=['DELETE'])
@admin_required
def delete_user(user_id: str):
    try:
        user_service.delete_user(user_id)
        return success(message='User deleted successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to delete user')


# ----------------------------------------------------------------------
# Settings
# ----------------------------------------------------------------------

@admin_bp.route('/settings', methods=['GET'])
@admin_required
def get_settings():
    try:
        return success(settings_service.get_settings().to_dict())
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch settings')


@admin_bp.route('/settings', methods=['PUT'])
@admin_required
@validate_body(SiteSettingsUpdate)
def update_settings(payload: SiteSettingsUpdate):
    try:
        settings = settings_service.update_settings(payload.model_dump(exclude_unset=True))
        return success(settings.to_dict(), 'Settings updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update settings')


@admin_bp.route('/settings/notifications', methods=['PUT'])
@admin_required
@validate_body(NotificationSettings)
def update_notification_settings(payload: NotificationSettings):
    try:
        settings = settings_service.update_notifications(payload)
        return success(settings.notifications.model_dump(), 'Notification settings updated successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update notification settings')


# ----------------------------------------------------------------------
# Reviews
# ----------------------------------------------------------------------

@admin_bp.route('/reviews', methods=['GET'])
@admin_required
def list_reviews():
    try:
        return success(review_service.list_for_admin(request.args.get('status')))
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch reviews')


@admin_bp.route('/reviews/<review_id>/approve', methods=['PUT'])
@admin_required
def approve_review(review_id: str):
    try:
        review = review_service.approve(review_id)
        return success({'review': review.to_response()}, 'Review approved successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to approve review')


@admin_bp.route('/reviews/<review_id>/reject', methods=['PUT'])
@admin_required
@validate_body(ReviewReject)
def reject_review(review_id: str, payload: ReviewReject):
    try:
        review = review_service.reject(review_id, payload.reason)
        return success({'review': review.to_response()}, 'Review rejected successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to reject review')


@admin_bp.route('/reviews/<review_id>', methods=['DELETE'])
@admin_required
def delete_review(review_id: str):
    try:
        review_service.delete(review_id)
        return success(message='Review deleted successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to delete review')


# ----------------------------------------------------------------------
# Dashboard
# ----------------------------------------------------------------------

@admin_bp.route('/analytics/dashboard', methods=['GET'])
@admin_required
def dashboard():
    """Counts for the dashboard cards plus the five newest inquiries"""
    try:
        recent, _ = inquiry_service.list_inquiries(page=1, limit=5)
        reviews = review_service.list_for_admin()
        return success({
            'properties': property_service.get_stats(),
            'inquiries': inquiry_service.get_stats(),
            'users': user_service.get_user_stats(),
            'reviews': reviews['counts'],
            'recentInquiries': [i.to_summary() for i in recent]
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch dashboard data')
