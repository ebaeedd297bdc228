from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional, Dict, Any, List
from datetime import datetime


INQUIRY_STATUSES = ["pending", "responded", "user-replied", "resolved", "closed"]
INQUIRY_TYPES = ["viewing", "purchase", "rent", "information", "general", "pricing", "availability"]
CONTACT_PREFERENCES = ["email", "phone", "both"]

PHONE_PATTERN = r'^\+?[1-9]\d{1,14}$'


class InquiryMessage(BaseModel):
    """One entry of an inquiry conversation thread"""
    id: int
    sender: str = Field(..., description="user or admin")
    senderName: str
    message: str
    timestamp: str
    isRead: bool = False


class InquiryNote(BaseModel):
    note: str
    createdAt: str


class Inquiry(BaseModel):
    """Inquiry model for property inquiries"""
    id: Optional[str] = Field(None, description="Firestore document ID")
    propertyId: str = Field(..., description="Property ID being inquired about")
    propertyTitle: Optional[str] = None
    propertyLocation: Optional[str] = None
    propertyPrice: Optional[float] = None
    userId: Optional[str] = Field(None, description="Set when a signed-in user submitted it")
    name: str
    email: str
    phone: Optional[str] = None
    inquiryType: str = Field("information", description="viewing, purchase, rent, information, ...")
    contactPreference: str = "both"
    status: str = Field("pending", description="pending, responded, user-replied, resolved, closed")
    messages: List[InquiryMessage] = Field(default_factory=list)
    messageCount: int = 0
    lastMessageAt: Optional[str] = None
    lastMessageBy: Optional[str] = None
    adminResponse: Optional[str] = None
    adminResponseAt: Optional[str] = None
    notes: List[InquiryNote] = Field(default_factory=list)
    createdAt: datetime = Field(default_factory=datetime.utcnow)
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

    def add_message(self, sender: str, sender_name: str, message: str) -> InquiryMessage:
        """Append a message to the thread and refresh the thread summary fields"""
        now = datetime.utcnow().isoformat()
        entry = InquiryMessage(
            id=len(self.messages) + 1,
            sender=sender,
            senderName=sender_name,
            message=message,
            timestamp=now
        )
        self.messages.append(entry)
        self.messageCount = len(self.messages)
        self.lastMessageAt = now
        self.lastMessageBy = sender
        self.updatedAt = datetime.utcnow()
        return entry

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for Firestore"""
        data = self.model_dump(exclude={'id'})
        data['createdAt'] = self.createdAt.isoformat()
        data['updatedAt'] = self.updatedAt.isoformat()
        return data

    def to_response(self) -> Dict[str, Any]:
        data = self.to_dict()
        data['id'] = self.id
        return data

    def to_summary(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'inquiryType': self.inquiryType,
            'status': self.status,
            'createdAt': self.createdAt.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Inquiry':
        """Create from Firestore dictionary"""
        if isinstance(data.get('createdAt'), str):
            data['createdAt'] = datetime.fromisoformat(data['createdAt'])
        if isinstance(data.get('updatedAt'), str):
            data['updatedAt'] = datetime.fromisoformat(data['updatedAt'])
        return cls(**data)


class InquiryCreate(BaseModel):
    """Public inquiry form"""
    propertyId: str = Field(..., min_length=1)
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    message: str = Field(..., min_length=10, max_length=1000)
    inquiryType: str = "information"

    @field_validator('inquiryType')
    @classmethod
    def validate_inquiry_type(cls, v):
        if v not in INQUIRY_TYPES:
            raise ValueError(f'inquiryType must be one of {INQUIRY_TYPES}')
        return v


class UserInquiryCreate(BaseModel):
    """Inquiry submitted by a signed-in user; contact details come from the account"""
    propertyId: str = Field(..., min_length=1)
    message: str = Field(..., min_length=10, max_length=1000)
    inquiryType: str = "general"
    contactPreference: str = "both"

    @field_validator('inquiryType')
    @classmethod
    def validate_inquiry_type(cls, v):
        if v not in INQUIRY_TYPES:
            raise ValueError(f'inquiryType must be one of {INQUIRY_TYPES}')
        return v

    @field_validator('contactPreference')
    @classmethod
    def validate_contact_preference(cls, v):
        if v not in CONTACT_PREFERENCES:
            raise ValueError(f'contactPreference must be one of {CONTACT_PREFERENCES}')
        return v


class InquiryReply(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)

    @field_validator('message')
    @classmethod
    def strip_message(cls, v):
        if not v.strip():
            raise ValueError('Message is required')
        return v.strip()


class InquiryRespond(BaseModel):
    response: str = Field(..., min_length=1, max_length=2000)
    status: str = "responded"

    @field_validator('response')
    @classmethod
    def strip_response(cls, v):
        if not v.strip():
            raise ValueError('Response message is required')
        return v.strip()

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in INQUIRY_STATUSES:
            raise ValueError(f'status must be one of {INQUIRY_STATUSES}')
        return v


class InquiryStatusUpdate(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in INQUIRY_STATUSES:
            raise ValueError(f'status must be one of {INQUIRY_STATUSES}')
        return v


class InquiryNoteCreate(BaseModel):
    note: str = Field(..., min_length=1, max_length=1000)
