from gymdesk.models.database import current_db_path, execute_query, fetch_one
from gymdesk.utils.helpers import member_link_tag, today_iso


class Finance:
    """Income or expense entry. Membership payments carry ``member_id``."""

    def __init__(self, id=None, type=None, amount=None, date=None, category=None,
                 description=None, member_id=None, created_at=None):
        self.id = id
        self.type = type
        self.amount = amount
        self.date = date
        self.category = category
        self.description = description
        self.member_id = member_id
        self.created_at = created_at

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], type=row['type'], amount=row['amount'], date=row['date'],
            category=row['category'], description=row['description'],
            member_id=row['member_id'], created_at=row['created_at']
        )

    @classmethod
    def get_all(cls):
        """Every entry, newest date first."""
        query = 'SELECT * FROM finances ORDER BY date DESC, id DESC'
        rows = execute_query(query, (), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def get_by_id(cls, finance_id):
        row = fetch_one('SELECT * FROM finances WHERE id = ?', (finance_id,), current_db_path())
        return cls._from_row(row)

    @classmethod
    def get_member_payments(cls, member_id):
        """
        Entries linked to a member, either through ``member_id`` or, for rows
        written before the column existed, a ``member:<id>`` tag in the
        description that is not followed by another digit.
        """
        tag = member_link_tag(member_id)
        query = '''
            SELECT * FROM finances
            WHERE member_id = ?
               OR (member_id IS NULL AND (
                       description GLOB ? OR description GLOB ?
                   ))
            ORDER BY date DESC, id DESC
        '''
        params = (member_id, f'*{tag}', f'*{tag}[^0-9]*')
        rows = execute_query(query, params, current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    def save(self):
        query = '''
            INSERT INTO finances (type, amount, date, category, description, member_id)
            VALUES (?, ?, ?, ?, ?, ?)
        '''
        on_date = self.date.isoformat() if hasattr(self.date, 'isoformat') else (self.date or today_iso())
        params = (self.type, self.amount, on_date, self.category, self.description, self.member_id)
        self.id = execute_query(query, params, current_db_path())
        self.date = on_date
        return self.id

    @classmethod
    def delete(cls, finance_id):
        if cls.get_by_id(finance_id) is None:
            return False
        execute_query('DELETE FROM finances WHERE id = ?', (finance_id,), current_db_path())
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'amount': self.amount,
            'date': self.date,
            'category': self.category,
            'description': self.description,
            'memberId': self.member_id,
        }
