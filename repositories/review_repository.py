"""Repository for Review model"""
from typing import Dict, Any, List, Optional
from models.review import Review
from repositories.base_repository import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    """Repository for managing customer reviews"""

    def __init__(self):
        super().__init__('reviews')

    def to_model(self, data: Dict[str, Any]) -> Review:
        return Review.from_dict(data)

    def to_dict(self, model: Review) -> Dict[str, Any]:
        return model.to_dict()

    def create_review(self, review: Review) -> Review:
        return self.add(review)

    def get_review(self, review_id: str) -> Optional[Review]:
        return self.get(review_id)

    def get_reviews(self, status: str = None) -> List[Review]:
        """
        Get reviews, newest first

        Args:
            status: Optional status filter (pending, approved, rejected)

        Returns:
            List of Review models
        """
        reviews = self.query('status', '==', status) if status else self.list_all()
        return sorted(reviews, key=lambda r: r.createdAt, reverse=True)

    def get_reviews_by_user(self, user_id: str) -> List[Review]:
        return sorted(self.query('userId', '==', user_id), key=lambda r: r.createdAt, reverse=True)

    def update_review(self, review_id: str, review: Review) -> Review:
        return self.update(review_id, review)

    def delete_review(self, review_id: str) -> bool:
        return self.delete(review_id)
