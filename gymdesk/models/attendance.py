from gymdesk.models.database import current_db_path, execute_query, fetch_scalar
from gymdesk.utils.helpers import today_iso


class Attendance:
    def __init__(self, id=None, member_id=None, date=None, status='present', created_at=None):
        self.id = id
        self.member_id = member_id
        self.date = date
        self.status = status
        self.created_at = created_at

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], member_id=row['member_id'], date=row['date'],
            status=row['status'], created_at=row['created_at']
        )

    @classmethod
    def get_roster(cls, on_date=None):
        """
        Every member who is active today (stored status active and not past
        expiry) with their attendance for ``on_date``. ``status`` is None
        when nothing was recorded that day.
        """
        on_date = on_date or today_iso()
        query = '''
            SELECT m.id AS member_id, a.status, a.date, m.name, m.photo
            FROM members m
            LEFT JOIN attendance a ON m.id = a.member_id AND a.date = ?
            WHERE m.status = 'active'
              AND (m.expiry_date IS NULL OR m.expiry_date >= ?)
            ORDER BY m.name COLLATE NOCASE, m.id
        '''
        rows = execute_query(query, (on_date, today_iso()), current_db_path(), fetch=True)
        return [
            {
                'member_id': r['member_id'],
                'status': r['status'],
                'date': r['date'],
                'name': r['name'],
                'photo': r['photo'],
            }
            for r in rows
        ]

    @classmethod
    def mark(cls, member_id, status, on_date=None):
        """Record one status per member per day; a second mark overwrites the first."""
        on_date = on_date or today_iso()
        query = '''
            INSERT INTO attendance (member_id, date, status) VALUES (?, ?, ?)
            ON CONFLICT (member_id, date) DO UPDATE SET status = excluded.status
        '''
        execute_query(query, (member_id, on_date, status), current_db_path())

    @classmethod
    def get_member_history(cls, member_id, limit=90):
        query = '''
            SELECT * FROM attendance
            WHERE member_id = ?
            ORDER BY date DESC
            LIMIT ?
        '''
        rows = execute_query(query, (member_id, limit), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def count_present(cls, member_id):
        return fetch_scalar(
            "SELECT COUNT(*) FROM attendance WHERE member_id = ? AND status = 'present'",
            (member_id,), current_db_path()
        )

    def to_dict(self):
        return {'id': self.id, 'date': self.date, 'status': self.status}
