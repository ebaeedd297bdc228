from pydantic import BaseModel, Field, EmailStr, ValidationInfo, field_validator
from typing import Optional, Dict, Any
from datetime import datetime


SETTINGS_DOCUMENT_ID = "site"


def _check_url(v: Optional[str]) -> Optional[str]:
    if v in (None, ''):
        return v
    if not (v.startswith('http://') or v.startswith('https://')):
        raise ValueError('must be a valid URL')
    return v


class SocialMedia(BaseModel):
    facebook: str = ""
    twitter: str = ""
    instagram: str = ""
    linkedin: str = ""

    @field_validator('facebook', 'twitter', 'instagram', 'linkedin')
    @classmethod
    def validate_url(cls, v):
        return _check_url(v)


class BusinessHours(BaseModel):
    monday: str = "9:00 AM - 6:00 PM"
    tuesday: str = "9:00 AM - 6:00 PM"
    wednesday: str = "9:00 AM - 6:00 PM"
    thursday: str = "9:00 AM - 6:00 PM"
    friday: str = "9:00 AM - 6:00 PM"
    saturday: str = "10:00 AM - 4:00 PM"
    sunday: str = "Closed"


class NotificationSettings(BaseModel):
    """All five toggles are required on update"""
    newInquiries: bool
    newUsers: bool
    propertyStatusChanges: bool
    emailNotifications: bool
    smsNotifications: bool


def default_notifications() -> NotificationSettings:
    return NotificationSettings(
        newInquiries=True,
        newUsers=True,
        propertyStatusChanges=False,
        emailNotifications=True,
        smsNotifications=False
    )


class SiteSettings(BaseModel):
    """Singleton settings document for the agency website"""
    siteName: str = "Gujarat Estate Agency"
    siteDescription: str = "Premium Real Estate Services in Gujarat"
    contactEmail: str = "info@gujaratestate.com"
    contactPhone: str = "+91 98765 43210"
    address: str = "Ahmedabad, Gujarat, India"
    socialMedia: SocialMedia = Field(default_factory=SocialMedia)
    businessHours: BusinessHours = Field(default_factory=BusinessHours)
    notifications: NotificationSettings = Field(default_factory=default_notifications)
    updatedAt: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump()
        data['updatedAt'] = self.updatedAt.isoformat() if self.updatedAt else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SiteSettings':
        if isinstance(data.get('updatedAt'), str):
            data['updatedAt'] = datetime.fromisoformat(data['updatedAt'])
        return cls(**data)


class SiteSettingsUpdate(BaseModel):
    siteName: Optional[str] = Field(None, min_length=1, max_length=100)
    siteDescription: Optional[str] = Field(None, max_length=500)
    contactEmail: Optional[EmailStr] = None
    contactPhone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=200)
    socialMedia: Optional[SocialMedia] = None
    businessHours: Optional[BusinessHours] = None
    notifications: Optional[NotificationSettings] = None

    @field_validator('*', mode='before')
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v
