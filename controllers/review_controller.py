"""Review controller for customer reviews"""
from flask import Blueprint, g
from service.review_service import ReviewService
from service.exceptions import ServiceError
from models.review import ReviewSubmit, ReviewUpdate
from middleware.auth import login_required
from middleware.validation import validate_body
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

review_bp = Blueprint('review', __name__, url_prefix='/api/reviews')
review_service = ReviewService()


@review_bp.route('/approved', methods=['GET'])
def get_approved_reviews():
    """Approved reviews for the public site, newest first"""
    try:
        reviews = review_service.get_approved_reviews()
        return success({
            'reviews': [r.to_response() for r in reviews],
            'total': len(reviews)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch reviews')


@review_bp.route('/my-reviews', methods=['GET'])
@login_required
def get_my_reviews():
    try:
        reviews = review_service.get_user_reviews(g.user['id'])
        return success({
            'reviews': [r.to_response() for r in reviews],
            'total': len(reviews)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch your reviews')


@review_bp.route('/submit', methods=['POST'])
@login_required
@validate_body(ReviewSubmit)
def submit_review(payload: ReviewSubmit):
    try:
        review = review_service.submit_review(g.user['id'], payload.rating, payload.comment, payload.propertyId)
        return success(
            {'review': review.to_response()},
            'Review submitted successfully. It will be visible after approval.',
            201
        )
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to submit review')


@review_bp.route('/<review_id>', methods=['PUT'])
@login_required
@validate_body(ReviewUpdate)
def update_review(review_id: str, payload: ReviewUpdate):
    try:
        review = review_service.update_review(review_id, g.user['id'], payload.rating, payload.comment)
        return success(
            {'review': review.to_response()},
            'Review updated successfully. It will be visible after re-approval.'
        )
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to update review')


@review_bp.route('/<review_id>', methods=['DELETE'])
@login_required
def delete_review(review_id: str):
    try:
        review_service.delete_own_review(review_id, g.user['id'])
        return success(message='Review deleted successfully')
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to delete review')
