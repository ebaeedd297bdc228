import re
from pydantic import BaseModel, Field, EmailStr, ValidationInfo, field_validator, model_validator
from typing import Optional, Dict, Any
from datetime import datetime


USER_PHONE_PATTERN = r'^\+?[0-9]{10,15}$'
USER_STATUSES = ["active", "inactive"]


class Preferences(BaseModel):
    notifications: bool = True
    newsletter: bool = True
    emailAlerts: Optional[bool] = None


class Profile(BaseModel):
    avatar: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    preferences: Preferences = Field(default_factory=Preferences)


class User(BaseModel):
    """Registered site user. `password` holds the bcrypt hash"""
    id: Optional[str] = Field(None, description="Firestore document ID")
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    password: str
    role: str = "user"
    verified: bool = False
    lastLogin: Optional[str] = None
    profile: Profile = Field(default_factory=Profile)
    createdAt: datetime = Field(default_factory=datetime.utcnow)
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.firstName} {self.lastName}".strip()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for Firestore"""
        data = self.model_dump(exclude={'id'}, exclude_none=False)
        data['createdAt'] = self.createdAt.isoformat()
        data['updatedAt'] = self.updatedAt.isoformat()
        return data

    def public_dict(self) -> Dict[str, Any]:
        """User fields safe to return to clients"""
        data = self.to_dict()
        data.pop('password', None)
        data['id'] = self.id
        data['status'] = 'active' if self.verified else 'inactive'
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        """Create from Firestore dictionary"""
        if isinstance(data.get('createdAt'), str):
            data['createdAt'] = datetime.fromisoformat(data['createdAt'])
        if isinstance(data.get('updatedAt'), str):
            data['updatedAt'] = datetime.fromisoformat(data['updatedAt'])
        if data.get('profile') is None:
            data['profile'] = {}
        return cls(**data)


class SavedProperty(BaseModel):
    id: Optional[str] = None
    userId: str
    propertyId: Optional[str] = None
    savedAt: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    def has_valid_property(self) -> bool:
        return isinstance(self.propertyId, str) and self.propertyId.strip() != ''

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude={'id'})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SavedProperty':
        propertyId = data.get('propertyId')
        if propertyId is not None and not isinstance(propertyId, str):
            data['propertyId'] = None
        return cls(**data)


class AdminAccount(BaseModel):
    """The single admin account, seeded from configuration on first use"""
    id: str
    email: str
    name: str
    password: str
    role: str = "admin"
    lastLogin: Optional[str] = None
    createdAt: datetime = Field(default_factory=datetime.utcnow)
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(exclude={'id'})
        data['createdAt'] = self.createdAt.isoformat()
        data['updatedAt'] = self.updatedAt.isoformat()
        return data

    def public_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'lastLogin': self.lastLogin
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AdminAccount':
        if isinstance(data.get('createdAt'), str):
            data['createdAt'] = datetime.fromisoformat(data['createdAt'])
        if isinstance(data.get('updatedAt'), str):
            data['updatedAt'] = datetime.fromisoformat(data['updatedAt'])
        return cls(**data)


# Request schemas

class RegisterRequest(BaseModel):
    firstName: str = Field(..., min_length=2, max_length=50)
    lastName: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirmPassword: str
    phone: Optional[str] = None

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        if v is None or v == '':
            return None
        if not re.match(USER_PHONE_PATTERN, v):
            raise ValueError('Phone number must be 10 to 15 digits')
        return v

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirmPassword:
            raise ValueError('Passwords do not match')
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class EmailRequest(BaseModel):
    email: EmailStr


class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=6, max_length=6)


class ResetPasswordRequest(BaseModel):
    resetToken: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=6)
    confirmPassword: str

    @model_validator(mode='after')
    def passwords_match(self):
        if self.newPassword != self.confirmPassword:
            raise ValueError('Passwords do not match')
        return self


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(..., min_length=1)
    newPassword: str = Field(..., min_length=6)
    confirmPassword: str

    @model_validator(mode='after')
    def passwords_match(self):
        if self.newPassword != self.confirmPassword:
            raise ValueError('Passwords do not match')
        return self


class PreferencesUpdate(BaseModel):
    notifications: Optional[bool] = None
    newsletter: Optional[bool] = None
    emailAlerts: Optional[bool] = None


class ProfileFieldsUpdate(BaseModel):
    avatar: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    preferences: Optional[PreferencesUpdate] = None


class ProfileUpdate(BaseModel):
    firstName: Optional[str] = Field(None, min_length=2, max_length=50)
    lastName: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = None
    profile: Optional[ProfileFieldsUpdate] = None

    @field_validator('firstName', 'lastName', mode='before')
    @classmethod
    def names_not_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        if v is None or v == '':
            return v
        if not re.match(USER_PHONE_PATTERN, v):
            raise ValueError('Phone number must be 10 to 15 digits')
        return v


class AdminProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = Field(None, min_length=6)

    @model_validator(mode='after')
    def current_password_for_change(self):
        if self.newPassword and not self.currentPassword:
            raise ValueError('Current password is required to set a new password')
        return self


class SavePropertyRequest(BaseModel):
    propertyId: str

    @field_validator('propertyId')
    @classmethod
    def validate_property_id(cls, v):
        if not v.strip():
            raise ValueError('Valid Property ID is required')
        return v.strip()


class UserStatusUpdate(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        if v not in USER_STATUSES:
            raise ValueError(f'status must be one of {USER_STATUSES}')
        return v
