"""Property controller for the public listing endpoints"""
from flask import Blueprint, request
from service.property_service import PropertyService
from service.exceptions import ServiceError, NotFoundError
from models.property import PropertySearchQuery
from middleware.auth import optional_auth, is_admin
from middleware.validation import validate_query
from utils.pagination import clamp_limit
from utils.responses import success, service_error, server_error
import logging

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

property_bp = Blueprint('property', __name__, url_prefix='/api/properties')
property_service = PropertyService()


@property_bp.route('', methods=['GET'])
@validate_query(PropertySearchQuery)
def list_properties(payload: PropertySearchQuery):
    """Active listings filtered by the query string, then paged"""
    try:
        properties, pagination = property_service.list_public(payload.model_dump(exclude_none=True))
        return success({
            'properties': [p.to_response() for p in properties],
            'pagination': pagination
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch properties')


@property_bp.route('/search', methods=['GET'])
@validate_query(PropertySearchQuery)
def search_properties(payload: PropertySearchQuery):
    try:
        filters = payload.model_dump(exclude_none=True)
        term = filters.pop('search', None)
        properties = property_service.search_properties(term, filters)
        return success({
            'properties': [p.to_response() for p in properties],
            'searchTerm': term,
            'totalResults': len(properties)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Search failed')


@property_bp.route('/featured', methods=['GET'])
def get_featured_properties():
    try:
        properties = property_service.get_featured(clamp_limit(request.args.get('limit'), 6))
        return success({
            'properties': [p.to_response() for p in properties],
            'total': len(properties)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch featured properties')


@property_bp.route('/by-city/<city>', methods=['GET'])
def get_properties_by_city(city: str):
    try:
        properties = property_service.get_by_city(city, clamp_limit(request.args.get('limit'), 10))
        return success({
            'properties': [p.to_response() for p in properties],
            'city': city,
            'total': len(properties)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch properties by city')


@property_bp.route('/by-price-range/<price_range>', methods=['GET'])
def get_properties_by_price_range(price_range: str):
    """price_range is "min-max" or "min+" """
    try:
        properties = property_service.get_by_price_range(price_range, clamp_limit(request.args.get('limit'), 10))
        return success({
            'properties': [p.to_response() for p in properties],
            'priceRange': price_range,
            'total': len(properties)
        })
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch properties by price range')


@property_bp.route('/<property_id>', methods=['GET'])
@optional_auth
def get_property(property_id: str):
    """Get property by ID. Listings that are not active are only visible to the admin"""
    try:
        property_obj = property_service.get_property_by_id(property_id)
        if property_obj.status != 'active' and not is_admin():
            raise NotFoundError('Property not found', code='PROPERTY_NOT_FOUND')
        return success({'property': property_obj.to_response()})
    except ServiceError as e:
        return service_error(e)
    except Exception as e:
        return server_error(e, 'Failed to fetch property')
