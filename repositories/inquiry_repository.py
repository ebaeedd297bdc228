"""Repository for Inquiry model"""
from typing import Dict, Any, List, Optional
from models.inquiry import Inquiry
from repositories.base_repository import BaseRepository


def _newest_first(inquiries: List[Inquiry]) -> List[Inquiry]:
    return sorted(inquiries, key=lambda i: i.createdAt, reverse=True)


class InquiryRepository(BaseRepository[Inquiry]):
    """Repository for managing inquiries"""

    def __init__(self):
        super().__init__('inquiries')

    def to_model(self, data: Dict[str, Any]) -> Inquiry:
        """Convert Firestore document to Inquiry model"""
        return Inquiry.from_dict(data)

    def to_dict(self, model: Inquiry) -> Dict[str, Any]:
        """Convert Inquiry model to Firestore document"""
        return model.to_dict()

    def create_inquiry(self, inquiry_model: Inquiry) -> Inquiry:
        """
        Create a new inquiry

        Args:
            inquiry_model: Inquiry model instance

        Returns:
            Created Inquiry model with `id` set
        """
        return self.add(inquiry_model)

    def get_inquiry(self, inquiry_id: str) -> Optional[Inquiry]:
        """
        Get inquiry by ID

        Args:
            inquiry_id: Inquiry ID string

        Returns:
            Inquiry model or None
        """
        return self.get(inquiry_id)

    def get_all_inquiries(self, status: str = None) -> List[Inquiry]:
        """All inquiries, newest first, optionally limited to one status"""
        if status:
            return _newest_first(self.query('status', '==', status))
        return _newest_first(self.list_all())

    def get_inquiries_by_property(self, property_id: str) -> List[Inquiry]:
        """
        Get all inquiries for a property

        Args:
            property_id: Property ID

        Returns:
            Inquiries, newest first
        """
        return _newest_first(self.query('propertyId', '==', property_id))

    def get_inquiries_by_user(self, user_id: str) -> List[Inquiry]:
        return _newest_first(self.query('userId', '==', user_id))

    def get_inquiries_by_email(self, email: str) -> List[Inquiry]:
        return _newest_first(self.query('email', '==', email))

    def update_inquiry(self, inquiry_id: str, inquiry_model: Inquiry) -> Inquiry:
        """
        Update an existing inquiry

        Args:
            inquiry_id: Inquiry ID
            inquiry_model: Updated Inquiry model

        Returns:
            Updated Inquiry model
        """
        return self.update(inquiry_id, inquiry_model)

    def delete_inquiry(self, inquiry_id: str) -> bool:
        return self.delete(inquiry_id)
