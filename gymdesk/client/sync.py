"""Optimistic synchronisation between client state and the API.

Every mutation follows the same steps: snapshot the state, apply the change
locally, call the API, then either reconcile (swap a temporary id for the
server id) or restore the snapshot and post a notification.
"""
import itertools
import logging
from datetime import date, timedelta

from gymdesk.client import store
from gymdesk.client.api import ApiClientError
from gymdesk.utils.helpers import expiry_for_plan, member_link_tag, parse_date

logger = logging.getLogger(__name__)

# Members lapsed longer than this are dropped from the loaded state
PRUNE_AFTER_DAYS = 90


class Notifier:
    """Collects user-facing messages and fans them out to subscribers."""

    def __init__(self):
        self.messages = []
        self._subscribers = []

    def subscribe(self, callback):
        self._subscribers.append(callback)

    def notify(self, message, level='error'):
        entry = {'level': level, 'message': message}
        self.messages.append(entry)
        for callback in list(self._subscribers):
            try:
                callback(entry)
            except Exception:
                logger.exception("Notification subscriber failed")


class OptimisticStore:
    def __init__(self, api, notifier=None, today=None):
        self.api = api
        self.notifier = notifier or Notifier()
        self._today = today
        self._state = store.EMPTY_STATE
        self._temp_ids = itertools.count(-1, -1)

    @property
    def state(self):
        return self._state

    def dispatch(self, action):
        self._state = store.reduce(self._state, action)
        return self._state

    def today_date(self):
        return self._today or date.today()

    def today(self):
        return self.today_date().isoformat()

    def next_temp_id(self):
        """Temporary ids are negative so they can never clash with server ids."""
        return next(self._temp_ids)

    def _fail(self, snapshot, what, error):
        self.dispatch(store.restore(snapshot))
        logger.warning("%s failed: %s", what, error)
        self.notifier.notify(f"{what} failed: {error.message}")

    def _apply(self, action, call, what):
        """Apply ``action`` locally, run ``call``; roll back if it raises."""
        snapshot = self._state
        self.dispatch(action)
        try:
            call()
        except ApiClientError as e:
            self._fail(snapshot, what, e)
            return False
        return True

    def _add(self, collection, item, create, what):
        """Optimistic insert; returns the server id or None on failure."""
        snapshot = self._state
        temp_id = self.next_temp_id()
        self.dispatch(store.add(collection, {**item, 'id': temp_id}))
        try:
            server_id = create(item)
        except ApiClientError as e:
            self._fail(snapshot, what, e)
            return None
        self.dispatch(store.replace_id(collection, temp_id, server_id))
        return server_id

    # -------------------- Loading --------------------

    def load(self):
        """Fetch every collection; members lapsed over PRUNE_AFTER_DAYS are left out."""
        try:
            collections = {
                'members': self.api.list_members(),
                'trainers': self.api.list_trainers(),
                'machines': self.api.list_machines(),
                'transactions': self.api.list_finances(),
            }
        except ApiClientError as e:
            logger.warning("Loading data failed: %s", e)
            self.notifier.notify(f"Loading data failed: {e.message}")
            return False
        prune_before = self.today_date() - timedelta(days=PRUNE_AFTER_DAYS)
        self.dispatch(store.load(collections, prune_before=prune_before))
        return True

    # -------------------- Members --------------------

    def _record_income(self, amount, category, member_id):
        """Optimistically add a membership payment linked to ``member_id``."""
        transaction = {
            'type': 'Income',
            'amount': float(amount),
            'date': self.today(),
            'category': category,
            'description': member_link_tag(member_id),
            'memberId': member_id,
        }
        return self._add('transactions', transaction, self.api.add_finance, f"Recording {category.lower()}")

    def add_member(self, member):
        """Add a member; a non-zero amount is also recorded as income.

        Without an explicit expiry, a Monthly/Quarterly/Yearly plan gets the
        same expiry the server will store.
        """
        member = {**member, 'status': 'active'}
        if not member.get('expiry'):
            start = parse_date(member.get('startDate'))
            expiry = expiry_for_plan(start, member.get('planType'))
            if expiry is not None:
                member['expiry'] = expiry.isoformat()
        member_id = self._add('members', member, self.api.add_member, 'Adding member')
        if member_id is not None and member.get('amount'):
            self._record_income(member['amount'], 'New Membership', member_id)
        return member_id

    def update_member(self, member_id, changes):
        changes = {**changes, 'id': member_id}
        return self._apply(
            store.update('members', changes),
            lambda: self.api.update_member(member_id, changes),
            'Updating member',
        )

    def delete_member(self, member_id):
        return self._apply(
            store.remove('members', member_id),
            lambda: self.api.delete_member(member_id),
            'Deleting member',
        )

    def renew_member(self, member_id, new_expiry, amount=None, plan_type=None):
        changes = {'expiry': new_expiry, 'status': 'active'}
        if plan_type:
            changes['planType'] = plan_type
        if not self.update_member(member_id, changes):
            return False
        if amount:
            self._record_income(amount, 'Renewal', member_id)
        return True

    # -------------------- Transactions --------------------

    def add_transaction(self, transaction):
        return self._add('transactions', transaction, self.api.add_finance, 'Adding transaction')

    def delete_transaction(self, transaction_id):
        return self._apply(
            store.remove('transactions', transaction_id),
            lambda: self.api.delete_finance(transaction_id),
            'Deleting transaction',
        )

    # -------------------- Trainers --------------------

    def add_trainer(self, trainer):
        return self._add('trainers', trainer, self.api.add_trainer, 'Adding trainer')

    def update_trainer(self, trainer_id, changes):
        return self._apply(
            store.update('trainers', {**changes, 'id': trainer_id}),
            lambda: self.api.update_trainer(trainer_id, changes),
            'Updating trainer',
        )

    def delete_trainer(self, trainer_id):
        assigned = sum(1 for m in self._state.members if m.get('trainerId') == trainer_id)
        if assigned:
            self.notifier.notify(
                f"Cannot delete trainer: {assigned} member(s) still assigned", level='warning'
            )
            return False
        return self._apply(
            store.remove('trainers', trainer_id),
            lambda: self.api.delete_trainer(trainer_id),
            'Deleting trainer',
        )

    # -------------------- Machines --------------------

    def add_machine(self, machine):
        return self._add('machines', machine, self.api.add_machine, 'Adding machine')

    def update_machine(self, machine_id, changes):
        return self._apply(
            store.update('machines', {**changes, 'id': machine_id}),
            lambda: self.api.update_machine(machine_id, changes),
            'Updating machine',
        )

    def delete_machine(self, machine_id):
        return self._apply(
            store.remove('machines', machine_id),
            lambda: self.api.delete_machine(machine_id),
            'Deleting machine',
        )

    # -------------------- Reset --------------------

    def reset_all(self):
        """Wipe the server, then local state. Local state is kept if the wipe fails."""
        try:
            self.api.reset()
        except ApiClientError as e:
            logger.warning("Reset failed: %s", e)
            self.notifier.notify(f"Reset failed: {e.message}")
            return False
        self.dispatch(store.clear())
        return True
