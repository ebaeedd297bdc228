import pytest

from service.exceptions import NotFoundError, ValidationError
from service.property_service import PropertyService, parse_price_range, format_property_id


@pytest.fixture
def service():
    return PropertyService()


def test_create_assigns_sequential_codes(make_property):
    first = make_property()
    second = make_property(title='Shop in CG Road')

    assert first.id and second.id and first.id != second.id
    assert (first.propertyIndex, first.propertyId) == (1, 'PROP-00001')
    assert (second.propertyIndex, second.propertyId) == (2, 'PROP-00002')


def test_create_fills_search_shadow_fields(make_property):
    prop = make_property()
    assert prop.titleLower == 'modern 3bhk apartment'
    assert prop.locationLower == 'satellite, ahmedabad'
    assert 'satellite' in prop.searchKeywords
    assert 'gym' in prop.searchKeywords


def test_status_update_persists(service, make_property):
    prop = make_property()
    service.update_property_status(prop.id, 'sold')

    assert service.get_property_by_id(prop.id).status == 'sold'


def test_status_update_rejects_unknown_status(service, make_property):
    prop = make_property()
    with pytest.raises(ValidationError):
        service.update_property_status(prop.id, 'archived')


def test_missing_property_raises_not_found(service):
    with pytest.raises(NotFoundError):
        service.get_property_by_id('missing')
    with pytest.raises(NotFoundError):
        service.update_property_status('missing', 'sold')
    with pytest.raises(NotFoundError):
        service.delete_property('missing')


def test_partial_update_rebuilds_shadow_fields(service, make_property):
    prop = make_property()
    updated = service.update_property(prop.id, {'title': 'Penthouse With Terrace', 'price': 9900000})

    stored = service.get_property_by_id(prop.id)
    assert stored.title == 'Penthouse With Terrace'
    assert stored.titleLower == 'penthouse with terrace'
    assert stored.price == 9900000
    assert stored.location == prop.location
    assert stored.updatedAt >= prop.updatedAt
    assert updated.propertyId == prop.propertyId


def test_delete(service, make_property):
    prop = make_property()
    service.delete_property(prop.id)
    with pytest.raises(NotFoundError):
        service.get_property_by_id(prop.id)


def test_public_listing_hides_inactive(service, make_property):
    active = make_property()
    make_property(status='inactive')
    make_property(status='sold')

    properties, pagination = service.list_public({'page': 1, 'limit': 20})
    assert [p.id for p in properties] == [active.id]
    assert pagination['total'] == 1


def test_public_listing_filters(service, make_property):
    rent = make_property(type='Rent', price=25000, beds=2, location='Vastrapur, Ahmedabad')
    make_property(type='Sale', price=9000000, beds=4, propertyType='villa', location='Alkapuri, Vadodara')
    make_property(type='Sale', price=4000000, beds=1, location='Adajan, Surat')

    def ids(filters):
        properties, _ = service.list_public(filters)
        return {p.id for p in properties}

    assert ids({'type': 'rent'}) == {rent.id}
    assert len(ids({'type': 'all'})) == 3
    assert len(ids({'propertyType': 'villa'})) == 1
    assert len(ids({'minPrice': 1000000, 'maxPrice': 5000000})) == 1
    assert len(ids({'beds': '4+'})) == 1
    assert ids({'beds': '2'}) == {rent.id}
    assert len(ids({'location': 'AHMEDABAD'})) == 1


def test_public_listing_paginates(service, make_property):
    for i in range(5):
        make_property(title=f'Listing number {i}')

    page, info = service.list_public({'page': 2, 'limit': 2})
    assert len(page) == 2
    assert info['totalPages'] == 3
    assert info['hasNext'] is True


def test_search_requires_every_token(service, make_property):
    pool = make_property(title='Garden Villa', amenities=['Swimming Pool'], location='Bopal, Ahmedabad')
    make_property(title='City Flat', amenities=['Lift'], location='Bopal, Ahmedabad')
    make_property(title='Pool House', status='inactive')

    assert [p.id for p in service.search_properties('pool, bopal')] == [pool.id]
    assert len(service.search_properties('bopal')) == 2
    assert service.search_properties('bopal mumbai') == []


def test_featured_and_city(service, make_property):
    for _ in range(8):
        make_property()
    make_property(location='Alkapuri, Vadodara')

    assert len(service.get_featured()) == 6
    assert len(service.get_by_city('vadodara')) == 1
    assert len(service.get_by_city('ahmedabad', limit=3)) == 3


def test_price_range(service, make_property):
    make_property(price=3000000)
    make_property(price=6000000)
    make_property(price=15000000)

    assert len(service.get_by_price_range('5000000-10000000')) == 1
    assert len(service.get_by_price_range('5000000+')) == 2


@pytest.mark.parametrize('value,expected', [
    ('100-200', (100.0, 200.0)),
    ('5000000+', (5000000.0, None)),
    ('0-1', (0.0, 1.0)),
])
def test_parse_price_range(value, expected):
    assert parse_price_range(value) == expected


@pytest.mark.parametrize('value', ['abc', '200-100', '100-', '-100', '10+20'])
def test_parse_price_range_rejects(value):
    with pytest.raises(ValidationError):
        parse_price_range(value)


def test_stats(service, make_property):
    make_property()
    make_property(type='Rent', status='sold')
    stats = service.get_stats()
    assert stats['total'] == 2
    assert stats['active'] == 1
    assert stats['sold'] == 1
    assert stats['forRent'] == 1


def test_format_property_id():
    assert format_property_id(42) == 'PROP-00042'
