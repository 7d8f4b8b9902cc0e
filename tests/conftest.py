import base64
from urllib.parse import urlencode

import pytest

from gymdesk.app import create_app
from gymdesk.client.api import GymApiClient
from gymdesk.utils.session import issue_admin_token, issue_member_token

SESSION_SECRET = 'test-session-secret'
ADMIN_PIN = '4321'


# -------------------------------------------------------------------
# Flask app fixture: fresh SQLite file per test
# -------------------------------------------------------------------
@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'DATABASE_PATH': str(tmp_path / 'gymdesk_test.db'),
        'SESSION_SECRET': SESSION_SECRET,
        'ADMIN_PIN': ADMIN_PIN,
        'ADMIN_PIN_HASH': None,
        'BCRYPT_LOG_ROUNDS': 4,
        'GYM_COOKIE_SECURE': False,
        'SEED_DEMO_DATA': False,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    test_client = app.test_client()
    resp = test_client.post('/api/auth/login', json={'pin': ADMIN_PIN})
    assert resp.status_code == 200
    return test_client


@pytest.fixture
def make_member(admin_client):
    """Create a member through the API and return its id."""
    def _make(**overrides):
        payload = {
            'name': 'Asha Rao',
            'phone': '9876543210',
            'planType': 'Monthly',
            'amount': 1500,
            'startDate': '2024-01-10',
            'expiry': '2099-02-10',
            'dob': '1995-06-15',
        }
        payload.update(overrides)
        resp = admin_client.post('/api/members', json=payload)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()['id']
    return _make


@pytest.fixture
def member_client(app, make_member):
    """Logged-in member portal client; the member id is on ``.member_id``."""
    member_id = make_member(name='Portal Member', phone='9000011111', dob='1990-03-01')
    test_client = app.test_client()
    resp = test_client.post('/api/auth/login', json={'phone': '9000011111', 'password': '90000111111990'})
    assert resp.status_code == 200, resp.get_json()
    test_client.member_id = member_id
    return test_client


# -------------------------------------------------------------------
# Token helpers
# -------------------------------------------------------------------
def cookie_header(token):
    return {'Cookie': f'gym_session={token}'}


def admin_token(issued_at=None, secret=SESSION_SECRET):
    return issue_admin_token(secret, issued_at=issued_at)


def member_token(member_id, name='Someone', issued_at=None, secret=SESSION_SECRET):
    return issue_member_token(member_id, name, secret, issued_at=issued_at)


def unsigned_token(payload):
    return base64.b64encode(payload.encode('utf-8')).decode('ascii')


@pytest.fixture
def tokens():
    class Tokens:
        admin = staticmethod(admin_token)
        member = staticmethod(member_token)
        unsigned = staticmethod(unsigned_token)
        header = staticmethod(cookie_header)
    return Tokens


# -------------------------------------------------------------------
# GymApiClient over the Flask test client
# -------------------------------------------------------------------
class FlaskResponseAdapter:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.content = response.data

    def json(self):
        return self._response.get_json()


class FlaskTestSession:
    """Stands in for requests.Session, routing calls into a Flask test client."""

    def __init__(self, test_client):
        self.test_client = test_client
        self.calls = []

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append((method, url, params, json))
        path = url
        if params:
            path = f"{url}?{urlencode(params)}"
        response = self.test_client.open(path, method=method, json=json)
        return FlaskResponseAdapter(response)


@pytest.fixture
def api_client(app):
    return GymApiClient(session=FlaskTestSession(app.test_client()))
