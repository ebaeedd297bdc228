"""Service layer for customer reviews and their moderation"""
import logging
from datetime import datetime
from typing import Optional, List, Dict, Any

from models.review import Review, REVIEW_STATUSES
from repositories.review_repository import ReviewRepository
from repositories.user_repository import UserRepository
from service.exceptions import ForbiddenError, NotFoundError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class ReviewService:

    def __init__(self):
        self.repository = ReviewRepository()
        self.user_repository = UserRepository()

    def _get_or_404(self, review_id: str) -> Review:
        review = self.repository.get_review(review_id)
        if not review:
            raise NotFoundError('Review not found', code='REVIEW_NOT_FOUND')
        return review

    def _get_owned(self, review_id: str, user_id: str, action: str) -> Review:
        review = self._get_or_404(review_id)
        if review.userId != user_id:
            raise ForbiddenError(f'You can only {action} your own reviews', code='ACCESS_DENIED')
        return review

    def get_approved_reviews(self) -> List[Review]:
        return self.repository.get_reviews('approved')

    def get_user_reviews(self, user_id: str) -> List[Review]:
        return self.repository.get_reviews_by_user(user_id)

    def submit_review(self, user_id: str, rating: int, comment: str, property_id: Optional[str] = None) -> Review:
        """
        Submit a review for moderation

        Args:
            user_id: Reviewing user
            rating: 1 to 5
            comment: Review text, already validated
            property_id: Optional listing the review is about

        Returns:
            Created Review with status "pending"
        """
        user = self.user_repository.get_user(user_id)
        if not user:
            raise NotFoundError('User not found', code='USER_NOT_FOUND')

        review = Review(
            userId=user_id,
            userName=user.full_name,
            userEmail=user.email,
            rating=rating,
            comment=comment.strip(),
            propertyId=property_id or None
        )
        created = self.repository.create_review(review)
        logger.info(f"Review {created.id} submitted by user {user_id}")
        return created

    def update_review(self, review_id: str, user_id: str, rating: Optional[int] = None,
                      comment: Optional[str] = None) -> Review:
        """Edit an own review. The edited review goes back to moderation"""
        review = self._get_owned(review_id, user_id, 'edit')

        if rating is not None:
            review.rating = rating
        if comment is not None:
            review.comment = comment.strip()
        review.status = 'pending'
        review.updatedAt = datetime.utcnow()

        self.repository.update_review(review_id, review)
        logger.info(f"Review {review_id} edited by user {user_id}, back to pending")
        return review

    def delete_own_review(self, review_id: str, user_id: str) -> None:
        self._get_owned(review_id, user_id, 'delete')
        self.repository.delete_review(review_id)
        logger.info(f"Review {review_id} deleted by user {user_id}")

    def list_for_admin(self, status: Optional[str] = None) -> Dict[str, Any]:
        """All reviews (optionally one status) with counts for every status"""
        all_reviews = self.repository.get_reviews()
        counts = {s: sum(1 for r in all_reviews if r.status == s) for s in REVIEW_STATUSES}
        counts['total'] = len(all_reviews)

        reviews = all_reviews
        if status and status != 'all':
            reviews = [r for r in all_reviews if r.status == status]

        return {
            'reviews': [r.to_response() for r in reviews],
            'counts': counts
        }

    def approve(self, review_id: str) -> Review:
        review = self._get_or_404(review_id)
        now = datetime.utcnow()
        review.status = 'approved'
        review.approvedAt = now.isoformat()
        review.updatedAt = now
        self.repository.update_fields(review_id, {
            'status': 'approved',
            'approvedAt': review.approvedAt,
            'updatedAt': now.isoformat()
        })
        logger.info(f"Review approved: {review_id}")
        return review

    def reject(self, review_id: str, reason: Optional[str] = None) -> Review:
        review = self._get_or_404(review_id)
        now = datetime.utcnow()
        review.status = 'rejected'
        review.rejectedAt = now.isoformat()
        review.rejectionReason = reason or None
        review.updatedAt = now
        self.repository.update_fields(review_id, {
            'status': 'rejected',
            'rejectedAt': review.rejectedAt,
            'rejectionReason': review.rejectionReason,
            'updatedAt': now.isoformat()
        })
        logger.info(f"Review rejected: {review_id}")
        return review

    def delete(self, review_id: str) -> None:
        self._get_or_404(review_id)
        self.repository.delete_review(review_id)
        logger.info(f"Review deleted by admin: {review_id}")
