from pydantic import BaseModel, Field, EmailStr, ValidationInfo, field_validator
from typing import List, Optional, Dict, Any
from datetime import datetime


LISTING_TYPES = ["Sale", "Rent"]
PROPERTY_TYPES = ["apartment", "villa", "house", "commercial", "plot"]
PROPERTY_STATUSES = ["active", "pending", "sold", "inactive"]


def _check_choice(value: Optional[str], choices: List[str], field: str) -> Optional[str]:
    if value is None:
        return value
    if value not in choices:
        raise ValueError(f'{field} must be one of {choices}')
    return value


class Agent(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: EmailStr


class Property(BaseModel):
    """Property listing as stored in the properties collection"""
    id: Optional[str] = Field(None, description="Firestore document ID")
    propertyIndex: Optional[int] = Field(None, description="Sequential listing number")
    propertyId: Optional[str] = Field(None, description="Display code, e.g. PROP-00012")

    # Basic Information
    title: str
    description: str
    price: float
    location: str
    type: str = Field(..., description="Sale or Rent")
    propertyType: str = Field(..., description="apartment, villa, house, commercial, plot")

    # Specifications
    beds: int = 0
    baths: int = 0
    area: float = 0

    status: str = Field("active", description="active, pending, sold, inactive")

    images: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    agent: Optional[Agent] = None

    # Lower-cased shadow fields used by search
    titleLower: str = ""
    locationLower: str = ""
    searchKeywords: List[str] = Field(default_factory=list)

    createdAt: datetime = Field(default_factory=datetime.utcnow)
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for Firestore"""
        data = self.model_dump(exclude={'id'}, mode='json')
        data['createdAt'] = self.createdAt.isoformat()
        data['updatedAt'] = self.updatedAt.isoformat()
        return data

    def to_response(self) -> Dict[str, Any]:
        data = self.to_dict()
        data['id'] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Property':
        """Create from Firestore dictionary"""
        if isinstance(data.get('createdAt'), str):
            data['createdAt'] = datetime.fromisoformat(data['createdAt'])
        if isinstance(data.get('updatedAt'), str):
            data['updatedAt'] = datetime.fromisoformat(data['updatedAt'])
        return cls(**data)


class PropertyCreate(BaseModel):
    """Payload accepted when an admin creates a listing"""
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    price: float = Field(..., gt=0)
    location: str = Field(..., min_length=3, max_length=200)
    type: str
    propertyType: str
    beds: int = Field(..., ge=0, le=20)
    baths: int = Field(..., ge=0, le=20)
    area: float = Field(..., gt=0)
    amenities: List[str] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    agent: Optional[Agent] = None
    status: str = "active"

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, LISTING_TYPES, 'type')

    @field_validator('propertyType')
    @classmethod
    def validate_property_type(cls, v):
        return _check_choice(v, PROPERTY_TYPES, 'propertyType')

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_choice(v, PROPERTY_STATUSES, 'status')


class PropertyUpdate(BaseModel):
    """Partial update; only the fields sent are applied"""
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, min_length=10, max_length=2000)
    price: Optional[float] = Field(None, gt=0)
    location: Optional[str] = Field(None, min_length=3, max_length=200)
    type: Optional[str] = None
    propertyType: Optional[str] = None
    beds: Optional[int] = Field(None, ge=0, le=20)
    baths: Optional[int] = Field(None, ge=0, le=20)
    area: Optional[float] = Field(None, gt=0)
    amenities: Optional[List[str]] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    agent: Optional[Agent] = None
    status: Optional[str] = None

    @field_validator('*', mode='before')
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, LISTING_TYPES, 'type')

    @field_validator('propertyType')
    @classmethod
    def validate_property_type(cls, v):
        return _check_choice(v, PROPERTY_TYPES, 'propertyType')

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_choice(v, PROPERTY_STATUSES, 'status')


class PropertyStatusUpdate(BaseModel):
    status: str

    @field_validator('status')
    @classmethod
    def validate_status(cls, v):
        return _check_choice(v, PROPERTY_STATUSES, 'status')


class PropertySearchQuery(BaseModel):
    """Query string accepted by the public listing and search endpoints"""
    search: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = None
    propertyType: Optional[str] = None
    minPrice: Optional[float] = Field(None, gt=0)
    maxPrice: Optional[float] = Field(None, gt=0)
    beds: Optional[str] = None
    location: Optional[str] = Field(None, max_length=100)
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        return _check_choice(v, LISTING_TYPES + ['all'], 'type')

    @field_validator('propertyType')
    @classmethod
    def validate_property_type(cls, v):
        return _check_choice(v, PROPERTY_TYPES + ['all'], 'propertyType')

    @field_validator('beds')
    @classmethod
    def validate_beds(cls, v):
        if v is None or v in ('all', '4+'):
            return v
        if not v.isdigit() or int(v) > 20:
            raise ValueError("beds must be a number between 0 and 20, 'all' or '4+'")
        return v
