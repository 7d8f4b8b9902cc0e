"""HTTP client for the GymDesk JSON API."""
import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

MEMBER_FIELDS = ('name', 'phone', 'planType', 'amount', 'startDate', 'expiry',
                 'photo', 'height', 'dob', 'trainerId')
TRAINER_FIELDS = ('name', 'specialty', 'phone')
MACHINE_FIELDS = ('name', 'status', 'lastMaintenance', 'nextMaintenance')
FINANCE_FIELDS = ('type', 'amount', 'date', 'category', 'description', 'memberId')


class ApiClientError(Exception):
    """A failed API call. ``status`` is None when no response was received."""

    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self):
        if self.status is None:
            return self.message
        return f"{self.status}: {self.message}"


def pick(data, fields):
    """Subset of ``data`` limited to ``fields``, dropping None values."""
    return {key: data[key] for key in fields if data.get(key) is not None}


class GymApiClient:
    """
    Thin wrapper over a ``requests.Session``. The session cookie set by login
    is kept on the session, so one client is one logged-in user.
    """

    def __init__(self, base_url='', session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def _request(self, method, path, params=None, json=None):
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiClientError(None, f"Network error: {e}")

        try:
            data = resp.json() if resp.content else None
        except ValueError:
            data = None

        if resp.status_code >= 400:
            message = data.get('error') if isinstance(data, dict) else None
            raise ApiClientError(resp.status_code, message or f"HTTP {resp.status_code}")
        return data

    # -------------------- Auth --------------------

    def login_owner(self, pin):
        return self._request('POST', '/api/auth/login', json={'pin': pin})

    def login_member(self, phone, password):
        return self._request('POST', '/api/auth/login', json={'phone': phone, 'password': password})

    def logout(self):
        return self._request('POST', '/api/auth/logout')

    def verify(self):
        return self._request('GET', '/api/auth/verify')

    # -------------------- Collections --------------------

    def list_members(self):
        return self._request('GET', '/api/members')

    def add_member(self, member):
        return self._request('POST', '/api/members', json=pick(member, MEMBER_FIELDS))['id']

    def update_member(self, member_id, changes):
        payload = {key: value for key, value in changes.items() if key != 'id'}
        return self._request('PUT', '/api/members', params={'id': member_id}, json=payload)

    def delete_member(self, member_id):
        return self._request('DELETE', '/api/members', params={'id': member_id})

    def list_trainers(self):
        return self._request('GET', '/api/trainers')

    def add_trainer(self, trainer):
        return self._request('POST', '/api/trainers', json=pick(trainer, TRAINER_FIELDS))['id']

    def update_trainer(self, trainer_id, changes):
        return self._request('PUT', '/api/trainers', params={'id': trainer_id},
                             json=pick(changes, TRAINER_FIELDS))

    def delete_trainer(self, trainer_id):
        return self._request('DELETE', '/api/trainers', params={'id': trainer_id})

    def list_machines(self):
        return self._request('GET', '/api/machines')

    def add_machine(self, machine):
        return self._request('POST', '/api/machines', json=pick(machine, MACHINE_FIELDS))['id']

    def update_machine(self, machine_id, changes):
        return self._request('PUT', '/api/machines', params={'id': machine_id},
                             json=pick(changes, MACHINE_FIELDS))

    def delete_machine(self, machine_id):
        return self._request('DELETE', '/api/machines', params={'id': machine_id})

    def list_finances(self):
        return self._request('GET', '/api/finances')

    def add_finance(self, transaction):
        return self._request('POST', '/api/finances', json=pick(transaction, FINANCE_FIELDS))['id']

    def delete_finance(self, finance_id):
        return self._request('DELETE', '/api/finances', params={'id': finance_id})

    # -------------------- Admin --------------------

    def dashboard(self):
        return self._request('GET', '/api/dashboard')

    def reset(self):
        return self._request('POST', '/api/reset')
