"""Client-side state container.

State is an immutable ``GymState`` of four tuples of dicts. The only way to
change it is ``reduce(state, action)``, which returns a new state and never
touches the old one, so any earlier state can serve as a rollback snapshot.
"""
from collections import namedtuple

from gymdesk.utils.helpers import parse_date

GymState = namedtuple('GymState', ['members', 'trainers', 'machines', 'transactions'])

EMPTY_STATE = GymState(members=(), trainers=(), machines=(), transactions=())

COLLECTIONS = GymState._fields

# Action types
LOAD = 'load'
ADD = 'add'
UPDATE = 'update'
REMOVE = 'remove'
REPLACE_ID = 'replace_id'
RESTORE = 'restore'
CLEAR = 'clear'

# New members and transactions go on top, trainers and machines at the end
PREPEND = ('members', 'transactions')

Action = namedtuple('Action', ['type', 'collection', 'payload'])


def load(collections, prune_before=None):
    """
    ``collections`` maps collection name to a list of rows. With
    ``prune_before`` (a date), members that are not active and expired
    before that date are left out.
    """
    return Action(LOAD, None, (collections, prune_before))


def add(collection, item):
    return Action(ADD, collection, item)


def update(collection, changes):
    """``changes`` must carry the ``id`` of the row to update."""
    return Action(UPDATE, collection, changes)


def remove(collection, item_id):
    return Action(REMOVE, collection, item_id)


def replace_id(collection, temp_id, server_id):
    return Action(REPLACE_ID, collection, (temp_id, server_id))


def restore(snapshot):
    return Action(RESTORE, None, snapshot)


def clear():
    return Action(CLEAR, None, None)


def _keep_member(member, prune_before):
    if prune_before is None or member.get('status') == 'active':
        return True
    expiry = parse_date(member.get('expiry'))
    return expiry is None or expiry >= prune_before


def _check_collection(name):
    if name not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {name}")


def _reduce_collection(rows, action):
    if action.type == ADD:
        item = dict(action.payload)
        if action.collection in PREPEND:
            return (item,) + rows
        return rows + (item,)

    if action.type == UPDATE:
        changes = action.payload
        return tuple(
            {**row, **changes} if row.get('id') == changes['id'] else row
            for row in rows
        )

    if action.type == REMOVE:
        return tuple(row for row in rows if row.get('id') != action.payload)

    if action.type == REPLACE_ID:
        temp_id, server_id = action.payload
        return tuple(
            {**row, 'id': server_id} if row.get('id') == temp_id else row
            for row in rows
        )

    raise ValueError(f"Unknown action type: {action.type}")


def reduce(state, action):
    """Apply one action and return the resulting state."""
    if action.type == RESTORE:
        return action.payload
    if action.type == CLEAR:
        return EMPTY_STATE
    if action.type == LOAD:
        collections, prune_before = action.payload
        loaded = {}
        for name, rows in collections.items():
            _check_collection(name)
            if name == 'members':
                rows = [m for m in rows if _keep_member(m, prune_before)]
            loaded[name] = tuple(dict(row) for row in rows)
        return state._replace(**loaded)

    _check_collection(action.collection)
    rows = getattr(state, action.collection)
    return state._replace(**{action.collection: _reduce_collection(rows, action)})
