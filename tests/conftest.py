"""Shared fixtures: an in-memory Firestore client, stubbed email and fresh OTP stores"""
import copy
import os
import uuid

import pytest

os.environ.setdefault('FLASK_ENV', 'testing')
os.environ.setdefault('JWT_SECRET', 'test-secret')
os.environ.setdefault('ADMIN_EMAIL', 'admin@gujaratestate.com')
os.environ.setdefault('ADMIN_PASSWORD', 'admin123')
os.environ.setdefault('OTP_STORE', 'memory')

from config import firebase_config  # noqa: E402


# ----------------------------------------------------------------------
# In-memory Firestore
# ----------------------------------------------------------------------

def _deep_merge(target, updates):
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = value


def _matches(data, field, op, value):
    actual = data.get(field)
    if op == '==':
        return actual == value
    if op == '!=':
        return actual != value
    if op == 'in':
        return actual in value
    if op == 'array_contains':
        return isinstance(actual, list) and value in actual
    if actual is None:
        return False
    if op == '<':
        return actual < value
    if op == '<=':
        return actual <= value
    if op == '>':
        return actual > value
    if op == '>=':
        return actual >= value
    raise ValueError(f"Unsupported operator: {op}")


class FakeSnapshot:
    def __init__(self, doc_id, data, reference):
        self.id = doc_id
        self._data = copy.deepcopy(data) if data is not None else None
        self.reference = reference

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, docs, doc_id):
        self._docs = docs
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self.id, self._docs.get(self.id), self)

    def set(self, data, merge=False):
        if merge and self.id in self._docs:
            _deep_merge(self._docs[self.id], copy.deepcopy(data))
        else:
            self._docs[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._docs:
            raise KeyError(f"No document to update: {self.id}")
        _deep_merge(self._docs[self.id], copy.deepcopy(data))

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, docs, filters=()):
        self._docs = docs
        self._filters = list(filters)

    def where(self, field_path=None, op_string=None, value=None):
        return FakeQuery(self._docs, self._filters + [(field_path, op_string, value)])

    def stream(self):
        for doc_id, data in list(self._docs.items()):
            if all(_matches(data, f, op, v) for f, op, v in self._filters):
                yield FakeSnapshot(doc_id, data, FakeDocument(self._docs, doc_id))


class FakeCollection(FakeQuery):
    def __init__(self, docs):
        super().__init__(docs)

    def document(self, doc_id=None):
        return FakeDocument(self._docs, doc_id or uuid.uuid4().hex[:20])


class FakeBatch:
    def __init__(self):
        self._ops = []

    def set(self, ref, data, merge=False):
        self._ops.append(lambda: ref.set(data, merge=merge))

    def update(self, ref, data):
        self._ops.append(lambda: ref.update(data))

    def delete(self, ref):
        self._ops.append(ref.delete)

    def commit(self):
        for op in self._ops:
            op()
        self._ops = []


class FakeFirestore:
    def __init__(self):
        self.data = {}

    def collection(self, name):
        return FakeCollection(self.data.setdefault(name, {}))

    def batch(self):
        return FakeBatch()

    def clear(self):
        self.data.clear()


FAKE_DB = FakeFirestore()
firebase_config.set_db(FAKE_DB)

from app import app as flask_app  # noqa: E402
from config.app_config import AppConfig  # noqa: E402
from models.user import User  # noqa: E402
from repositories.user_repository import UserRepository  # noqa: E402
from service import otp_service as otp_module  # noqa: E402
from service import reset_token_service as reset_module  # noqa: E402
from service.auth_service import generate_token, hash_password  # noqa: E402
from service.email_service import EmailService, set_email_service  # noqa: E402
from service.property_service import PropertyService  # noqa: E402


class RecordingEmailService(EmailService):
    """Keeps every code instead of sending it"""

    def __init__(self):
        super().__init__(transports=[])
        self.codes = []
        self.confirmations = []

    def _send_code(self, to_email, otp, subject, heading, intro, name):
        self.codes.append({'to': to_email, 'otp': otp, 'subject': subject})
        return True

    def send_password_change_confirmation(self, to_email, name='User'):
        self.confirmations.append(to_email)
        return True

    def last_code(self, to_email):
        for sent in reversed(self.codes):
            if sent['to'] == to_email:
                return sent['otp']
        return None


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------

@pytest.fixture(autouse=True)
def fake_db():
    FAKE_DB.clear()
    yield FAKE_DB
    FAKE_DB.clear()


@pytest.fixture(autouse=True)
def outbox():
    recorder = RecordingEmailService()
    set_email_service(recorder)
    yield recorder
    set_email_service(None)


@pytest.fixture(autouse=True)
def otp_service(monkeypatch):
    service = otp_module.OTPService(store=otp_module.MemoryCodeStore(), start_sweeper=False)
    monkeypatch.setattr(otp_module, '_otp_service', service)
    monkeypatch.setattr(reset_module, '_reset_token_service',
                        reset_module.ResetTokenService(store=otp_module.MemoryCodeStore()))
    yield service
    service.stop()


@pytest.fixture
def app():
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers():
    token = generate_token({
        'id': AppConfig.ADMIN_ID,
        'email': AppConfig.ADMIN_EMAIL,
        'role': 'admin',
        'name': AppConfig.ADMIN_NAME
    })
    return bearer(token)


@pytest.fixture
def make_user():
    """Create a verified user directly in the store and return (user, auth headers)"""
    repository = UserRepository()

    def _make(email='asha@example.com', first_name='Asha', last_name='Patel',
              password='secret123', verified=True):
        user = repository.create_user(User(
            firstName=first_name,
            lastName=last_name,
            email=email,
            phone='+919876543210',
            password=hash_password(password),
            verified=verified
        ))
        token = generate_token({'id': user.id, 'email': user.email, 'role': 'user', 'verified': verified})
        return user, bearer(token)

    return _make


@pytest.fixture
def make_property():
    service = PropertyService()

    def _make(**overrides):
        data = {
            'title': 'Modern 3BHK Apartment',
            'description': 'Spacious apartment with a city view and covered parking.',
            'price': 7500000,
            'location': 'Satellite, Ahmedabad',
            'type': 'Sale',
            'propertyType': 'apartment',
            'beds': 3,
            'baths': 2,
            'area': 1650,
            'amenities': ['Gym', 'Swimming Pool'],
            'features': ['Corner unit'],
            'images': [],
            'status': 'active'
        }
        data.update(overrides)
        return service.create_property(data)

    return _make
