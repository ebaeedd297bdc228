"""Inquiry controller for the public inquiry endpoints"""
from flask import Blueprint, g
from service.inquiry_service import InquiryService
from service.exceptions import ServiceError, AuthError
from models.inquiry import InquiryCreate
from middleware.auth import optional_auth, is_admin
from middleware.validation import validate_body
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

inquiry_bp = Blueprint('inquiry', __name__, url_prefix='/api/inquiries')
inquiry_service = InquiryService()


@inquiry_bp.route('', methods=['POST'])
@validate_body(InquiryCreate)
def create_inquiry(payload: InquiryCreate):
    """Create a new inquiry for a property from the contact form"""
    try:
        inquiry = inquiry_service.create_inquiry(payload.model_dump())
        return success(
            {'inquiry': inquiry.to_response()},
            'Inquiry submitted successfully. We will get back to you soon!',
            201
        )
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to submit inquiry')


@inquiry_bp.route('', methods=['GET'])
@optional_auth
def list_inquiries():
    """Admin sees every inquiry, a user sees their own, anonymous callers get an empty list"""
    try:
        if not g.user:
            inquiries = []
        elif is_admin():
            inquiries = inquiry_service.get_all_inquiries()
        else:
            inquiries = inquiry_service.get_user_inquiries(g.user.get('id'), g.user.get('email'))

        return success({
            'inquiries': [i.to_response() for i in inquiries],
            'total': len(inquiries)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch inquiries')


@inquiry_bp.route('/<inquiry_id>', methods=['GET'])
@optional_auth
def get_inquiry(inquiry_id: str):
    try:
        if not g.user:
            raise AuthError('Access denied. No token provided.', code='NO_TOKEN')
        inquiry = inquiry_service.get_inquiry_for(inquiry_id, g.user)
        return success({'inquiry': inquiry.to_response()})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch inquiry')


@inquiry_bp.route('/property/<property_id>', methods=['GET'])
@optional_auth
def get_property_inquiries(property_id: str):
    try:
        return success(inquiry_service.get_property_inquiries(property_id, is_admin()))
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch property inquiries')
