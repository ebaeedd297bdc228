"""Service layer for Property entity"""
import logging
import re
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple

from models.property import Property, PROPERTY_STATUSES
from repositories.property_repository import PropertyRepository
from service.exceptions import NotFoundError, ValidationError
from utils.pagination import paginate, clamp_limit

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

_TOKEN_SPLIT = re.compile(r'[\s,]+')
_PRICE_RANGE = re.compile(r'^(\d+(?:\.\d+)?)(?:-(\d+(?:\.\d+)?)|\+)$')


def format_property_id(index: int) -> str:
    """PROP-00001 style display code"""
    return f"PROP-{index:05d}"


def build_search_keywords(prop: Property) -> List[str]:
    """Unique lower-cased tokens from title, location, description, amenities and features"""
    text = " ".join([
        prop.title,
        prop.location,
        prop.description,
        " ".join(prop.amenities),
        " ".join(prop.features),
    ]).lower()
    seen = []
    for token in _TOKEN_SPLIT.split(text):
        if token and token not in seen:
            seen.append(token)
    return seen


def apply_shadow_fields(prop: Property) -> Property:
    prop.titleLower = prop.title.lower()
    prop.locationLower = prop.location.lower()
    prop.searchKeywords = build_search_keywords(prop)
    return prop


def parse_price_range(price_range: str) -> Tuple[float, Optional[float]]:
    """
    Parse "min-max" or "min+"

    Raises:
        ValidationError: when the range is malformed or min > max
    """
    match = _PRICE_RANGE.match(price_range.strip())
    if not match:
        raise ValidationError("Price range must look like '1000000-5000000' or '5000000+'", field='range')
    low = float(match.group(1))
    high = float(match.group(2)) if match.group(2) else None
    if high is not None and low > high:
        raise ValidationError("Minimum price cannot exceed maximum price", field='range')
    return low, high


class PropertyService:
    """Business logic for property management"""

    def __init__(self):
        self.repository = PropertyRepository()

    def create_property(self, data: Dict[str, Any]) -> Property:
        """
        Create a new listing

        Args:
            data: Validated PropertyCreate fields

        Returns:
            Created Property with id, propertyIndex and propertyId set
        """
        index = self.repository.get_next_index()
        now = datetime.utcnow()
        property_model = Property(
            **data,
            propertyIndex=index,
            propertyId=format_property_id(index),
            createdAt=now,
            updatedAt=now
        )
        apply_shadow_fields(property_model)

        created = self.repository.create_property(property_model)
        logger.info(f"Property created: {created.propertyId} ({created.id})")
        return created

    def get_property_by_id(self, property_id: str) -> Property:
        """
        Get property by ID

        Raises:
            NotFoundError: no property with this ID
        """
        property_model = self.repository.get_property(property_id)
        if not property_model:
            raise NotFoundError('Property not found', code='PROPERTY_NOT_FOUND')
        return property_model

    def get_properties(self, page: int = 1, limit: int = 20, status: str = None,
                       type: str = None) -> Tuple[List[Property], Dict[str, Any]]:
        """All listings newest first, optionally filtered by status and type, then paged"""
        if status and status != 'all':
            properties = self.repository.get_properties_by_status(status)
        else:
            properties = self.repository.get_all_properties()

        if type and type != 'all':
            properties = [p for p in properties if p.type.lower() == type.lower()]

        return paginate(properties, page, limit)

    def update_property(self, property_id: str, data: Dict[str, Any]) -> Property:
        """
        Apply a partial update

        Args:
            property_id: Property document ID
            data: Only the fields being changed

        Returns:
            Updated Property
        """
        property_model = self.get_property_by_id(property_id)

        merged = property_model.model_dump()
        merged.update(data)
        merged['updatedAt'] = datetime.utcnow()
        updated = Property(**merged)
        apply_shadow_fields(updated)

        self.repository.update_property(property_id, updated)
        logger.info(f"Property updated: {property_id}")
        return updated

    def update_property_status(self, property_id: str, status: str) -> Property:
        if status not in PROPERTY_STATUSES:
            raise ValidationError(f"status must be one of {PROPERTY_STATUSES}", field='status')

        property_model = self.get_property_by_id(property_id)
        property_model.status = status
        property_model.updatedAt = datetime.utcnow()

        self.repository.update_fields(property_id, {
            'status': status,
            'updatedAt': property_model.updatedAt.isoformat()
        })
        logger.info(f"Property {property_id} status changed to {status}")
        return property_model

    def delete_property(self, property_id: str) -> None:
        self.get_property_by_id(property_id)
        self.repository.delete_property(property_id)
        logger.info(f"Property deleted: {property_id}")

    def add_images(self, property_id: str, urls: List[str]) -> Property:
        property_model = self.get_property_by_id(property_id)
        property_model.images.extend(url for url in urls if url not in property_model.images)
        property_model.updatedAt = datetime.utcnow()

        self.repository.update_fields(property_id, {
            'images': property_model.images,
            'updatedAt': property_model.updatedAt.isoformat()
        })
        logger.info(f"Added {len(urls)} images to property {property_id}")
        return property_model

    def list_public(self, filters: Dict[str, Any]) -> Tuple[List[Property], Dict[str, Any]]:
        """
        Active listings for the public site

        Args:
            filters: type, propertyType, minPrice, maxPrice, beds, location, page, limit

        Returns:
            Tuple of (page of properties, pagination info)
        """
        criteria = {key: value for key, value in filters.items() if key not in ('page', 'limit', 'search')}
        criteria['status'] = 'active'
        if filters.get('search'):
            criteria['keyword'] = filters['search']
        properties = self.repository.search_properties(criteria)
        return paginate(properties, filters.get('page', 1), filters.get('limit', 20))

    def search_properties(self, term: Optional[str], filters: Dict[str, Any] = None) -> List[Property]:
        """
        Token search over active listings. Every whitespace or comma separated
        token must appear in the title, description, location, amenities or features.
        """
        criteria = dict(filters or {})
        criteria.pop('page', None)
        criteria.pop('limit', None)
        criteria.pop('search', None)
        criteria['status'] = 'active'
        if term:
            criteria['keyword'] = term

        results = self.repository.search_properties(criteria)
        logger.info(f"Search '{term}' returned {len(results)} properties")
        return results

    def get_featured(self, limit: int = 6) -> List[Property]:
        return self.repository.get_properties_by_status('active')[:clamp_limit(limit, 6)]

    def get_by_city(self, city: str, limit: int = 10) -> List[Property]:
        results = self.repository.search_properties({'status': 'active', 'city': city})
        return results[:clamp_limit(limit, 10)]

    def get_by_price_range(self, price_range: str, limit: int = 10) -> List[Property]:
        low, high = parse_price_range(price_range)
        criteria = {'status': 'active', 'minPrice': low}
        if high is not None:
            criteria['maxPrice'] = high
        results = self.repository.search_properties(criteria)
        return results[:clamp_limit(limit, 10)]

    def get_stats(self) -> Dict[str, Any]:
        properties = self.repository.list_all()
        stats = {status: 0 for status in PROPERTY_STATUSES}
        for prop in properties:
            stats[prop.status] = stats.get(prop.status, 0) + 1
        stats['total'] = len(properties)
        stats['forSale'] = sum(1 for p in properties if p.type == 'Sale')
        stats['forRent'] = sum(1 for p in properties if p.type == 'Rent')
        return stats
