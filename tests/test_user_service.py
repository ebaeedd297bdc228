from datetime import datetime, timedelta

import pytest

from models.user import User
from repositories.user_repository import UserRepository, SavedPropertyRepository
from service.exceptions import ConflictError, NotFoundError, ValidationError
from service.user_service import UserService


@pytest.fixture
def service():
    return UserService()


def add_user(email, created_at, verified=True):
    return UserRepository().create_user(User(
        firstName='Test', lastName=email.split('@')[0], email=email,
        password='x', verified=verified, createdAt=created_at
    ))


def test_user_stats_windows(service):
    now = datetime(2024, 6, 19, 15, 0)  # a Wednesday
    add_user('a@example.com', datetime(2024, 6, 18))
    add_user('b@example.com', datetime(2024, 6, 3), verified=False)
    add_user('c@example.com', datetime(2024, 5, 30))

    stats = service.get_user_stats(now=now)
    assert stats == {'total': 3, 'active': 2, 'inactive': 1, 'thisMonth': 2, 'thisWeek': 1}


def test_week_starts_on_sunday(service):
    sunday = datetime(2024, 6, 16, 9, 0)
    add_user('a@example.com', sunday)
    add_user('b@example.com', sunday - timedelta(minutes=10 * 60))

    assert service.get_user_stats(now=sunday + timedelta(hours=1))['thisWeek'] == 1


def test_list_users_newest_first_and_paged(service):
    add_user('old@example.com', datetime(2024, 1, 1))
    add_user('new@example.com', datetime(2024, 3, 1))

    users, pagination = service.list_users(limit=1)
    assert [u['email'] for u in users] == ['new@example.com']
    assert pagination['totalPages'] == 2
    assert users[0]['joinedAt'] == users[0]['createdAt']


def test_save_property_rules(service, make_user, make_property):
    user, _ = make_user()
    prop = make_property()

    with pytest.raises(ValidationError):
        service.save_property(user.id, '   ')
    with pytest.raises(NotFoundError):
        service.save_property(user.id, 'missing')

    service.save_property(user.id, prop.id)
    with pytest.raises(ConflictError):
        service.save_property(user.id, prop.id)
    assert service.is_property_saved(user.id, prop.id)

    with pytest.raises(NotFoundError):
        service.unsave_property(user.id, 'missing')


def test_saved_properties_skip_deleted_listings(service, make_user, make_property, fake_db):
    user, _ = make_user()
    kept = make_property()
    gone = make_property(title='Plot near GIFT City')
    service.save_property(user.id, kept.id)
    service.save_property(user.id, gone.id)
    fake_db.collection('properties').document(gone.id).delete()

    saved = service.get_saved_properties(user.id)
    assert [s['propertyId'] for s in saved] == [kept.id]


def test_delete_user_removes_saved_properties(service, make_user, make_property):
    user, _ = make_user()
    service.save_property(user.id, make_property().id)

    service.delete_user(user.id)
    assert SavedPropertyRepository().get_by_user(user.id) == []
    with pytest.raises(NotFoundError):
        service.get_user(user.id)


def test_set_status_rejects_unknown(service, make_user):
    user, _ = make_user(verified=False)
    with pytest.raises(ValidationError):
        service.set_status(user.id, 'suspended')
    assert service.set_status(user.id, 'active') == {'userId': user.id, 'status': 'active'}
    assert service.get_user(user.id).verified is True
