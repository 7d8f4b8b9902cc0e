from gymdesk.models.database import current_db_path, execute_query, fetch_one
from gymdesk.utils.helpers import today_iso

METRICS = ('weight', 'body_fat', 'chest', 'biceps_l', 'biceps_r', 'waist', 'thigh', 'calves')


class Measurement:
    """One body-measurement reading. Rows are only ever appended."""

    def __init__(self, id=None, member_id=None, date=None, created_at=None, **metrics):
        self.id = id
        self.member_id = member_id
        self.date = date
        self.created_at = created_at
        for name in METRICS:
            setattr(self, name, metrics.get(name))

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], member_id=row['member_id'], date=row['date'],
            created_at=row['created_at'], **{name: row[name] for name in METRICS}
        )

    @classmethod
    def get_by_member(cls, member_id):
        query = 'SELECT * FROM measurements WHERE member_id = ? ORDER BY date DESC, id DESC'
        rows = execute_query(query, (member_id,), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def first_and_latest_weight(cls, member_id):
        """(first, latest) recorded weight for a member; None where absent."""
        base = '''
            SELECT weight FROM measurements
            WHERE member_id = ? AND weight IS NOT NULL
            ORDER BY date {order}, id {order}
            LIMIT 1
        '''
        db_path = current_db_path()
        first = fetch_one(base.format(order='ASC'), (member_id,), db_path)
        latest = fetch_one(base.format(order='DESC'), (member_id,), db_path)
        return (first[0] if first else None, latest[0] if latest else None)

    def save(self):
        on_date = self.date.isoformat() if hasattr(self.date, 'isoformat') else (self.date or today_iso())
        columns = ', '.join(METRICS)
        placeholders = ', '.join('?' for _ in METRICS)
        query = f'''
            INSERT INTO measurements (member_id, date, {columns})
            VALUES (?, ?, {placeholders})
        '''
        params = (self.member_id, on_date) + tuple(getattr(self, name) for name in METRICS)
        self.id = execute_query(query, params, current_db_path())
        self.date = on_date
        return self.id

    def to_dict(self):
        return {
            'id': self.id,
            'memberId': self.member_id,
            'date': self.date,
            'weight': self.weight,
            'bodyFat': self.body_fat,
            'chest': self.chest,
            'bicepsL': self.biceps_l,
            'bicepsR': self.biceps_r,
            'waist': self.waist,
            'thigh': self.thigh,
            'calves': self.calves,
        }
