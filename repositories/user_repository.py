"""Repositories for users, saved properties and the admin account"""
from typing import Dict, Any, List, Optional
from models.user import User, SavedProperty, AdminAccount
from repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for registered users"""

    def __init__(self):
        super().__init__('users')

    def to_model(self, data: Dict[str, Any]) -> User:
        return User.from_dict(data)

    def to_dict(self, model: User) -> Dict[str, Any]:
        return model.to_dict()

    def create_user(self, user: User) -> User:
        return self.add(user)

    def get_user(self, user_id: str) -> Optional[User]:
        return self.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Find a user by email address

        Args:
            email: Email as entered at registration

        Returns:
            First matching User or None
        """
        users = self.query('email', '==', email)
        return users[0] if users else None

    def get_all_users(self) -> List[User]:
        return sorted(self.list_all(), key=lambda u: u.createdAt, reverse=True)

    def delete_user(self, user_id: str) -> bool:
        return self.delete(user_id)


class SavedPropertyRepository(BaseRepository[SavedProperty]):
    """Repository for a user's bookmarked listings"""

    def __init__(self):
        super().__init__('savedProperties')

    def to_model(self, data: Dict[str, Any]) -> SavedProperty:
        return SavedProperty.from_dict(data)

    def to_dict(self, model: SavedProperty) -> Dict[str, Any]:
        return model.to_dict()

    def get_by_user(self, user_id: str) -> List[SavedProperty]:
        return self.query('userId', '==', user_id)

    def find(self, user_id: str, property_id: str) -> Optional[SavedProperty]:
        matches = self.query_all([('userId', '==', user_id), ('propertyId', '==', property_id)])
        return matches[0] if matches else None

    def save(self, user_id: str, property_id: str) -> SavedProperty:
        return self.add(SavedProperty(userId=user_id, propertyId=property_id))

    def count_by_user(self, user_id: str) -> int:
        return len([s for s in self.get_by_user(user_id) if s.has_valid_property()])


class AdminRepository(BaseRepository[AdminAccount]):
    """Repository for the admin account document"""

    def __init__(self):
        super().__init__('admins')

    def to_model(self, data: Dict[str, Any]) -> AdminAccount:
        return AdminAccount.from_dict(data)

    def to_dict(self, model: AdminAccount) -> Dict[str, Any]:
        return model.to_dict()

    def get_by_email(self, email: str) -> Optional[AdminAccount]:
        admins = self.query('email', '==', email)
        return admins[0] if admins else None
