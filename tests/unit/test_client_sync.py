# tests/unit/test_client_sync.py
import json
from datetime import date

import pytest

from gymdesk.client import store
from gymdesk.client.api import ApiClientError
from gymdesk.client.sync import Notifier, OptimisticStore

TODAY = date(2024, 6, 15)


class FakeApi:
    """In-memory API; methods listed in ``failing`` raise ApiClientError."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []
        self._next_id = 100

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.failing:
            raise ApiClientError(None, 'Network error: connection refused')
        self._next_id += 1
        return self._next_id

    def __getattr__(self, name):
        if name.startswith('list_'):
            return lambda: []
        return lambda *args: self._call(name, *args)


def _seeded(api):
    sync = OptimisticStore(api, today=TODAY)
    sync.dispatch(store.load({
        'members': [{'id': 1, 'name': 'Asha', 'trainerId': 10, 'expiry': '2024-07-01', 'status': 'active'}],
        'trainers': [{'id': 10, 'name': 'Coach'}, {'id': 11, 'name': 'Free'}],
        'machines': [{'id': 20, 'name': 'Rower', 'status': 'Operational'}],
        'transactions': [{'id': 30, 'type': 'Expense', 'amount': 50, 'date': '2024-06-01'}],
    }))
    return sync


def _dump(state):
    return json.dumps(state._asdict(), sort_keys=True).encode('utf-8')


def test_failed_member_add_restores_exact_state():
    sync = _seeded(FakeApi(failing={'add_member'}))
    before = _dump(sync.state)

    result = sync.add_member({'name': 'New', 'phone': '1', 'planType': 'Monthly', 'amount': 999})

    assert result is None
    assert _dump(sync.state) == before
    assert sync.notifier.messages[-1]['level'] == 'error'
    assert 'Adding member failed' in sync.notifier.messages[-1]['message']


def test_member_add_reconciles_ids_and_records_income():
    api = FakeApi()
    sync = _seeded(api)

    member_id = sync.add_member({'name': 'New', 'phone': '1', 'planType': 'Monthly', 'amount': 999})

    assert member_id == 101
    assert sync.state.members[0]['id'] == 101
    assert sync.state.members[0]['status'] == 'active'
    income = sync.state.transactions[0]
    assert income['id'] == 102
    assert income['amount'] == 999.0
    assert income['category'] == 'New Membership'
    assert income['memberId'] == 101
    assert income['description'] == 'member:101'
    assert income['date'] == '2024-06-15'
    assert all(m['id'] > 0 for m in sync.state.members)


def test_member_add_without_amount_records_nothing():
    sync = _seeded(FakeApi())
    sync.add_member({'name': 'Free', 'phone': '2', 'planType': 'Monthly', 'amount': 0})
    assert len(sync.state.transactions) == 1


def test_failed_income_keeps_member_but_drops_transaction():
    sync = _seeded(FakeApi(failing={'add_finance'}))
    member_id = sync.add_member({'name': 'New', 'phone': '1', 'planType': 'Monthly', 'amount': 999})
    assert member_id is not None
    assert sync.state.members[0]['id'] == member_id
    assert [t['id'] for t in sync.state.transactions] == [30]
    assert sync.notifier.messages


@pytest.mark.parametrize('method, args, collection', [
    ('update_member', (1, {'name': 'Renamed'}), 'members'),
    ('delete_member', (1,), 'members'),
    ('update_trainer', (11, {'name': 'X'}), 'trainers'),
    ('delete_machine', (20,), 'machines'),
    ('delete_transaction', (30,), 'transactions'),
])
def test_failed_mutations_roll_back(method, args, collection):
    api_method = method.replace('transaction', 'finance')
    sync = _seeded(FakeApi(failing={api_method}))
    before = sync.state
    assert getattr(sync, method)(*args) is False
    assert sync.state == before
    assert getattr(sync.state, collection) == getattr(before, collection)


def test_successful_update_is_kept():
    sync = _seeded(FakeApi())
    assert sync.update_machine(20, {'status': 'Broken'}) is True
    assert sync.state.machines[0]['status'] == 'Broken'


def test_renew_member_updates_and_records_income():
    sync = _seeded(FakeApi())
    assert sync.renew_member(1, '2024-10-01', amount=3000, plan_type='Quarterly') is True
    member = sync.state.members[0]
    assert member['expiry'] == '2024-10-01'
    assert member['planType'] == 'Quarterly'
    assert member['status'] == 'active'
    assert sync.state.transactions[0]['category'] == 'Renewal'


def test_trainer_with_members_cannot_be_deleted():
    api = FakeApi()
    sync = _seeded(api)
    assert sync.delete_trainer(10) is False
    assert api.calls == []
    assert sync.notifier.messages[-1]['level'] == 'warning'
    assert sync.delete_trainer(11) is True
    assert [t['id'] for t in sync.state.trainers] == [10]


def test_reset_all_clears_only_after_server_success():
    failing = _seeded(FakeApi(failing={'reset'}))
    before = failing.state
    assert failing.reset_all() is False
    assert failing.state == before

    ok = _seeded(FakeApi())
    assert ok.reset_all() is True
    assert ok.state == store.EMPTY_STATE


def test_temp_ids_are_negative_and_unique():
    sync = OptimisticStore(FakeApi())
    ids = {sync.next_temp_id() for _ in range(5)}
    assert len(ids) == 5
    assert all(i < 0 for i in ids)


def test_notifier_fans_out_and_survives_bad_subscriber():
    notifier = Notifier()
    seen = []

    def broken(entry):
        raise RuntimeError("boom")

    notifier.subscribe(broken)
    notifier.subscribe(seen.append)
    notifier.notify("Saving failed")
    assert seen == [{'level': 'error', 'message': 'Saving failed'}]
    assert notifier.messages == seen


def test_member_add_derives_expiry_from_plan():
    api = FakeApi()
    sync = _seeded(api)

    sync.add_member({'name': 'New', 'phone': '1', 'planType': 'Monthly', 'amount': 0,
                     'startDate': '2024-01-31'})

    assert sync.state.members[0]['expiry'] == '2024-02-29'
    sent = next(call for call in api.calls if call[0] == 'add_member')[1]
    assert sent['expiry'] == '2024-02-29'


def test_member_add_keeps_custom_plan_without_expiry():
    sync = _seeded(FakeApi())
    sync.add_member({'name': 'New', 'phone': '1', 'planType': 'Custom', 'amount': 0,
                     'startDate': '2024-01-31'})
    assert 'expiry' not in sync.state.members[0]


def test_load_drops_members_lapsed_over_ninety_days():
    api = FakeApi()
    api.list_members = lambda: [
        {'id': 1, 'name': 'Current', 'expiry': '2024-07-01', 'status': 'active'},
        {'id': 2, 'name': 'Recent', 'expiry': '2024-03-20', 'status': 'expired'},
        {'id': 3, 'name': 'Gone', 'expiry': '2024-03-16', 'status': 'expired'},
        {'id': 4, 'name': 'Paused', 'expiry': '2023-01-01', 'status': 'inactive'},
    ]
    sync = OptimisticStore(api, today=TODAY)

    assert sync.load() is True
    assert [m['id'] for m in sync.state.members] == [1, 2]
