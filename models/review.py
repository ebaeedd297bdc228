from pydantic import BaseModel, Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime


REVIEW_STATUSES = ["pending", "approved", "rejected"]
MIN_COMMENT_LENGTH = 10


def _check_comment(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if len(v) < MIN_COMMENT_LENGTH:
        raise ValueError(f'Comment must be at least {MIN_COMMENT_LENGTH} characters long')
    return v


class Review(BaseModel):
    """Customer review, visible publicly once approved"""
    id: Optional[str] = Field(None, description="Firestore document ID")
    userId: str
    userName: str
    userEmail: str
    rating: int = Field(..., ge=1, le=5)
    comment: str
    propertyId: Optional[str] = None
    status: str = Field("pending", description="pending, approved, rejected")
    approvedAt: Optional[str] = None
    rejectedAt: Optional[str] = None
    rejectionReason: Optional[str] = None
    createdAt: datetime = Field(default_factory=datetime.utcnow)
    updatedAt: datetime = Field(default_factory=datetime.utcnow)

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

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Review':
        """Create from Firestore dictionary"""
        if isinstance(data.get('createdAt'), str):
            data['createdAt'] = datetime.fromisoformat(data['createdAt'])
        if isinstance(data.get('updatedAt'), str):
            data['updatedAt'] = datetime.fromisoformat(data['updatedAt'])
        return cls(**data)


class ReviewSubmit(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating must be between 1 and 5")
    comment: str
    propertyId: Optional[str] = None

    @field_validator('comment')
    @classmethod
    def validate_comment(cls, v):
        return _check_comment(v)


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None

    @field_validator('comment')
    @classmethod
    def validate_comment(cls, v):
        return _check_comment(v)


class ReviewReject(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)
