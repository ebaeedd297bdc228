"""Service layer for Inquiry entity"""
import logging
from datetime import datetime, timedelta
from typing import Optional, List, Dict, Any, Tuple

from models.inquiry import Inquiry, InquiryNote, INQUIRY_STATUSES
from repositories.inquiry_repository import InquiryRepository
from repositories.property_repository import PropertyRepository
from repositories.user_repository import UserRepository
from service.exceptions import ForbiddenError, NotFoundError, ValidationError
from utils.pagination import paginate

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ADMIN_SENDER_NAME = 'Admin Team'


class InquiryService:
    """Business logic for property inquiries and their message threads"""

    def __init__(self):
        self.repository = InquiryRepository()
        self.property_repository = PropertyRepository()
        self.user_repository = UserRepository()

    def _get_property_or_404(self, property_id: str):
        property_model = self.property_repository.get_property(property_id)
        if not property_model:
            raise NotFoundError('Property not found', code='PROPERTY_NOT_FOUND')
        return property_model

    def get_inquiry(self, inquiry_id: str) -> Inquiry:
        inquiry = self.repository.get_inquiry(inquiry_id)
        if not inquiry:
            raise NotFoundError('Inquiry not found', code='INQUIRY_NOT_FOUND')
        return inquiry

    def create_inquiry(self, data: Dict[str, Any]) -> Inquiry:
        """
        Create an inquiry from the public contact form

        Args:
            data: Validated InquiryCreate fields

        Returns:
            Created Inquiry
        """
        property_model = self._get_property_or_404(data['propertyId'])

        inquiry = Inquiry(
            propertyId=property_model.id,
            propertyTitle=property_model.title,
            propertyLocation=property_model.location,
            propertyPrice=property_model.price,
            name=data['name'],
            email=data['email'],
            phone=data.get('phone'),
            inquiryType=data.get('inquiryType') or 'information'
        )
        inquiry.add_message('user', data['name'], data['message'])

        created = self.repository.create_inquiry(inquiry)
        logger.info(f"New inquiry {created.id} for property {created.propertyId} from {created.email}")
        return created

    def create_user_inquiry(self, user_id: str, data: Dict[str, Any]) -> Inquiry:
        """Create an inquiry for a signed-in user; contact details come from the account"""
        user = self.user_repository.get_user(user_id)
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')

        property_model = self._get_property_or_404(data['propertyId'])

        inquiry = Inquiry(
            propertyId=property_model.id,
            propertyTitle=property_model.title,
            propertyLocation=property_model.location,
            propertyPrice=property_model.price,
            userId=user.id,
            name=user.full_name,
            email=user.email,
            phone=user.phone,
            inquiryType=data.get('inquiryType') or 'general',
            contactPreference=data.get('contactPreference') or 'both'
        )
        inquiry.add_message('user', user.full_name, data['message'])

        created = self.repository.create_inquiry(inquiry)
        logger.info(f"New inquiry {created.id} for property {created.propertyId} from user {user_id}")
        return created

    def list_inquiries(self, status: str = None, page: int = 1,
                       limit: int = 20) -> Tuple[List[Inquiry], Dict[str, Any]]:
        """Admin listing, newest first"""
        inquiries = self.repository.get_all_inquiries(status if status and status != 'all' else None)
        return paginate(inquiries, page, limit)

    def get_all_inquiries(self) -> List[Inquiry]:
        return self.repository.get_all_inquiries()

    def get_user_inquiries(self, user_id: Optional[str] = None, email: Optional[str] = None) -> List[Inquiry]:
        """Inquiries made by a user id, plus any submitted anonymously with the same email"""
        found: Dict[str, Inquiry] = {}
        if user_id:
            for inquiry in self.repository.get_inquiries_by_user(user_id):
                found[inquiry.id] = inquiry
        if email:
            for inquiry in self.repository.get_inquiries_by_email(email):
                found[inquiry.id] = inquiry
        return sorted(found.values(), key=lambda i: i.createdAt, reverse=True)

    def can_access(self, inquiry: Inquiry, user: Dict[str, Any]) -> bool:
        if user.get('role') == 'admin':
            return True
        if inquiry.userId and inquiry.userId == user.get('id'):
            return True
        return bool(user.get('email')) and inquiry.email == user.get('email')

    def get_inquiry_for(self, inquiry_id: str, user: Dict[str, Any]) -> Inquiry:
        inquiry = self.get_inquiry(inquiry_id)
        if not self.can_access(inquiry, user):
            raise ForbiddenError('Access denied', code='ACCESS_DENIED')
        return inquiry

    def get_property_inquiries(self, property_id: str, is_admin: bool) -> Dict[str, Any]:
        """Admins get every inquiry; everyone else gets a count and the three most recent summaries"""
        inquiries = self.repository.get_inquiries_by_property(property_id)
        if is_admin:
            return {
                'inquiries': [i.to_response() for i in inquiries],
                'total': len(inquiries)
            }
        return {
            'totalInquiries': len(inquiries),
            'recentInquiries': [i.to_summary() for i in inquiries[:3]]
        }

    def respond(self, inquiry_id: str, response: str, status: str = 'responded') -> Inquiry:
        """
        Append an admin message to the thread

        Args:
            inquiry_id: Inquiry ID
            response: Admin message text
            status: New status, "responded" by default

        Returns:
            Updated Inquiry
        """
        if status not in INQUIRY_STATUSES:
            raise ValidationError(f"status must be one of {INQUIRY_STATUSES}", field='status')
        if not response or not response.strip():
            raise ValidationError('Response message is required', field='response')

        inquiry = self.get_inquiry(inquiry_id)
        entry = inquiry.add_message('admin', ADMIN_SENDER_NAME, response.strip())
        inquiry.status = status
        inquiry.adminResponse = entry.message
        inquiry.adminResponseAt = entry.timestamp

        self.repository.update_inquiry(inquiry_id, inquiry)
        logger.info(f"Admin responded to inquiry {inquiry_id} (status: {status})")
        return inquiry

    def reply(self, inquiry_id: str, user_id: str, message: str) -> Tuple[Inquiry, int]:
        """
        Append a user message; only the inquiry's owner may reply

        Returns:
            Tuple of (updated Inquiry, new message id)
        """
        if not message or not message.strip():
            raise ValidationError('Message is required', field='message')

        inquiry = self.get_inquiry(inquiry_id)
        if inquiry.userId != user_id:
            raise ForbiddenError('Access denied', code='ACCESS_DENIED')

        user = self.user_repository.get_user(user_id)
        sender_name = user.full_name if user else inquiry.name

        entry = inquiry.add_message('user', sender_name, message.strip())
        inquiry.status = 'user-replied'

        self.repository.update_inquiry(inquiry_id, inquiry)
        logger.info(f"User replied to inquiry {inquiry_id}")
        return inquiry, entry.id

    def update_status(self, inquiry_id: str, status: str) -> Inquiry:
        if status not in INQUIRY_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(INQUIRY_STATUSES)}", field='status')

        inquiry = self.get_inquiry(inquiry_id)
        inquiry.status = status
        inquiry.updatedAt = datetime.utcnow()
        self.repository.update_fields(inquiry_id, {
            'status': status,
            'updatedAt': inquiry.updatedAt.isoformat()
        })
        logger.info(f"Inquiry {inquiry_id} status changed to {status}")
        return inquiry

    def add_note(self, inquiry_id: str, note: str) -> Inquiry:
        inquiry = self.get_inquiry(inquiry_id)
        inquiry.notes.append(InquiryNote(note=note, createdAt=datetime.utcnow().isoformat()))
        inquiry.updatedAt = datetime.utcnow()
        self.repository.update_inquiry(inquiry_id, inquiry)
        return inquiry

    def get_stats(self, now: datetime = None) -> Dict[str, Any]:
        """Counts per status plus inquiries created this month and this week (weeks start on Sunday)"""
        inquiries = self.repository.list_all()
        now = now or datetime.utcnow()
        start_of_month = datetime(now.year, now.month, 1)
        days_since_sunday = (now.weekday() + 1) % 7
        start_of_week = datetime(now.year, now.month, now.day) - timedelta(days=days_since_sunday)

        stats: Dict[str, Any] = {'total': len(inquiries)}
        for status in INQUIRY_STATUSES:
            stats[status] = sum(1 for i in inquiries if i.status == status)
        stats['thisMonth'] = sum(1 for i in inquiries if i.createdAt >= start_of_month)
        stats['thisWeek'] = sum(1 for i in inquiries if i.createdAt >= start_of_week)
        return stats
