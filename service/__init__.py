"""Service layer exports"""

from service.auth_service import AuthService
from service.property_service import PropertyService
from service.inquiry_service import InquiryService
from service.review_service import ReviewService
from service.user_service import UserService
from service.settings_service import SettingsService
from service.image_service import ImageService
from service.email_service import EmailService
from service.otp_service import OTPService
from service.reset_token_service import ResetTokenService

__all__ = [
    'AuthService',
    'PropertyService',
    'InquiryService',
    'ReviewService',
    'UserService',
    'SettingsService',
    'ImageService',
    'EmailService',
    'OTPService',
    'ResetTokenService'
]
