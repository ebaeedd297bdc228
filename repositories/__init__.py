"""Repository layer for database operations"""

from repositories.base_repository import BaseRepository
from repositories.property_repository import PropertyRepository
from repositories.inquiry_repository import InquiryRepository
from repositories.review_repository import ReviewRepository
from repositories.user_repository import UserRepository, SavedPropertyRepository, AdminRepository
from repositories.settings_repository import SettingsRepository

__all__ = [
    'BaseRepository',
    'PropertyRepository',
    'InquiryRepository',
    'ReviewRepository',
    'UserRepository',
    'SavedPropertyRepository',
    'AdminRepository',
    'SettingsRepository',
]
