"""Service layer for user profiles, saved properties and admin user management"""
import logging
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any, Tuple

from models.user import User
from repositories.inquiry_repository import InquiryRepository
from repositories.property_repository import PropertyRepository
from repositories.user_repository import UserRepository, SavedPropertyRepository
from service.exceptions import ConflictError, NotFoundError, ValidationError
from utils.pagination import paginate

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _listing_dict(user: User) -> Dict[str, Any]:
    data = user.public_dict()
    data['name'] = user.full_name
    data['joinedAt'] = data['createdAt']
    return data


class UserService:

    def __init__(self):
        self.repository = UserRepository()
        self.saved_repository = SavedPropertyRepository()
        self.property_repository = PropertyRepository()
        self.inquiry_repository = InquiryRepository()

    def get_user(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')
        return user

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        return self.get_user(user_id).public_dict()

    def update_profile(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge a profile update into the stored user

        Args:
            user_id: User ID
            data: ProfileUpdate fields that were sent; nested profile and
                preferences are merged into the current values

        Returns:
            Updated public user dictionary
        """
        user = self.get_user(user_id)
        updates: Dict[str, Any] = {}

        for field in ('firstName', 'lastName', 'phone'):
            if field in data:
                updates[field] = data[field]

        if data.get('profile') is not None:
            profile = user.profile.model_dump()
            incoming = dict(data['profile'])
            preferences = incoming.pop('preferences', None)
            profile.update(incoming)
            if preferences:
                profile['preferences'] = {**profile.get('preferences', {}), **preferences}
            updates['profile'] = profile

        updates['updatedAt'] = datetime.utcnow().isoformat()
        self.repository.update_fields(user_id, updates)
        logger.info(f"Profile updated for user: {user.email}")
        return self.get_profile(user_id)

    def get_statistics(self, user_id: str) -> Dict[str, int]:
        """Saved and inquiry counts; malformed saved records are cleaned up on the way"""
        self.cleanup_saved_properties(user_id)
        return {
            'totalSaved': self.saved_repository.count_by_user(user_id),
            'totalInquiries': len(self.inquiry_repository.get_inquiries_by_user(user_id))
        }

    # ------------------------------------------------------------------
    # Saved properties
    # ------------------------------------------------------------------

    def save_property(self, user_id: str, property_id: str) -> None:
        property_id = (property_id or '').strip()
        if not property_id:
            raise ValidationError('Valid Property ID is required', field='propertyId')

        if self.saved_repository.find(user_id, property_id):
            raise ConflictError('Property already saved', code='ALREADY_SAVED')

        if not self.property_repository.exists(property_id):
            raise NotFoundError('Property not found', code='PROPERTY_NOT_FOUND')

        self.saved_repository.save(user_id, property_id)
        logger.info(f"Property {property_id} saved by user {user_id}")

    def unsave_property(self, user_id: str, property_id: str) -> None:
        property_id = (property_id or '').strip()
        if not property_id:
            raise ValidationError('Valid Property ID is required', field='propertyId')

        saved = self.saved_repository.find(user_id, property_id)
        if not saved:
            raise NotFoundError('Saved property not found', code='SAVED_PROPERTY_NOT_FOUND')

        self.saved_repository.delete(saved.id)
        logger.info(f"Property {property_id} unsaved by user {user_id}")

    def get_saved_properties(self, user_id: str) -> List[Dict[str, Any]]:
        """Saved entries with their property details, newest first. Missing properties are skipped"""
        results = []
        for saved in self.saved_repository.get_by_user(user_id):
            if not saved.has_valid_property():
                logger.warning(f"Skipping saved property with invalid propertyId: {saved.id}")
                continue

            property_model = self.property_repository.get_property(saved.propertyId)
            if not property_model:
                logger.warning(f"Property not found for saved property: {saved.propertyId}")
                continue

            results.append({
                'id': saved.id,
                'propertyId': saved.propertyId,
                'savedAt': saved.savedAt,
                'property': property_model.to_response()
            })

        results.sort(key=lambda s: s['savedAt'], reverse=True)
        return results

    def is_property_saved(self, user_id: str, property_id: str) -> bool:
        return self.saved_repository.find(user_id, property_id) is not None

    def cleanup_saved_properties(self, user_id: str) -> int:
        """Delete saved records whose propertyId is missing or blank"""
        invalid = [s.id for s in self.saved_repository.get_by_user(user_id) if not s.has_valid_property()]
        cleaned = self.saved_repository.batch_delete(invalid)
        if cleaned:
            logger.info(f"Cleaned up {cleaned} invalid saved properties for user {user_id}")
        return cleaned

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def list_users(self, role: str = None, status: str = None, search: str = None,
                   page: int = 1, limit: int = 20) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        users = self.repository.get_all_users()

        if role and role != 'all':
            users = [u for u in users if u.role == role]

        if search and search.strip():
            term = search.strip().lower()
            users = [
                u for u in users
                if term in u.full_name.lower()
                or term in u.email.lower()
                or (u.phone and term in u.phone)
            ]

        rows = [_listing_dict(u) for u in users]
        if status and status != 'all':
            rows = [row for row in rows if row['status'] == status]

        return paginate(rows, page, limit)

    def get_user_details(self, user_id: str) -> Dict[str, Any]:
        user = self.get_user(user_id)
        return {
            'user': _listing_dict(user),
            'stats': {
                'totalInquiries': len(self.inquiry_repository.get_inquiries_by_user(user_id)),
                'totalSavedProperties': len(self.saved_repository.get_by_user(user_id))
            }
        }

    def set_status(self, user_id: str, status: str) -> Dict[str, Any]:
        """Activate or deactivate an account; "active" maps to verified"""
        if status not in ('active', 'inactive'):
            raise ValidationError('Invalid status. Must be either "active" or "inactive"', field='status')

        self.get_user(user_id)
        self.repository.update_fields(user_id, {
            'verified': status == 'active',
            'updatedAt': datetime.utcnow().isoformat()
        })
        logger.info(f"User {user_id} set to {status}")
        return {'userId': user_id, 'status': status}

    def delete_user(self, user_id: str) -> None:
        self.get_user(user_id)
        saved_ids = [s.id for s in self.saved_repository.get_by_user(user_id)]
        self.saved_repository.batch_delete(saved_ids)
        self.repository.delete_user(user_id)
        logger.info(f"User deleted: {user_id}")

    def get_user_stats(self, now: datetime = None) -> Dict[str, int]:
        users = self.repository.list_all()
        now = now or datetime.utcnow()
        start_of_month = datetime(now.year, now.month, 1)
        start_of_week = datetime(now.year, now.month, now.day) - timedelta(days=(now.weekday() + 1) % 7)
        return {
            'total': len(users),
            'active': sum(1 for u in users if u.verified),
            'inactive': sum(1 for u in users if not u.verified),
            'thisMonth': sum(1 for u in users if u.createdAt >= start_of_month),
            'thisWeek': sum(1 for u in users if u.createdAt >= start_of_week)
        }
