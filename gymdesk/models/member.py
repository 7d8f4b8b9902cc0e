from gymdesk.models.database import (
    current_db_path, execute_query, execute_transaction, fetch_one
)
from gymdesk.utils.helpers import today_iso


def _to_str_date(d):
    """Serialize a date or string to 'YYYY-MM-DD' or None."""
    if d is None:
        return None
    if hasattr(d, 'isoformat'):
        return d.isoformat()
    return str(d)


# A stored 'active' member past expiry reads as 'expired'. Bind today's date.
EFFECTIVE_STATUS = '''
    CASE
        WHEN m.status = 'active' AND m.expiry_date IS NOT NULL AND m.expiry_date < ?
        THEN 'expired'
        ELSE m.status
    END
'''

MEMBER_COLUMNS = f'''
    m.id, m.name, m.phone, m.photo, m.height, m.plan_type, m.amount,
    m.start_date, m.expiry_date, m.dob, m.trainer_id,
    {EFFECTIVE_STATUS} AS status, m.created_at
'''


class Member:
    """
    Gym member. ``status`` on instances loaded from the database is the
    effective status (see EFFECTIVE_STATUS), not necessarily the stored one.
    """

    def __init__(self, id=None, name=None, phone=None, photo=None, height=None,
                 plan_type=None, amount=None, start_date=None, expiry_date=None,
                 dob=None, trainer_id=None, status='active', created_at=None,
                 trainer_name=None):
        self.id = id
        self.name = name
        self.phone = phone
        self.photo = photo
        self.height = height
        self.plan_type = plan_type
        self.amount = amount
        self.start_date = _to_str_date(start_date)
        self.expiry_date = _to_str_date(expiry_date)
        self.dob = _to_str_date(dob)
        self.trainer_id = trainer_id
        self.status = status
        self.created_at = created_at
        self.trainer_name = trainer_name

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        keys = row.keys()
        return cls(
            id=row['id'], name=row['name'], phone=row['phone'], photo=row['photo'],
            height=row['height'], plan_type=row['plan_type'], amount=row['amount'],
            start_date=row['start_date'], expiry_date=row['expiry_date'], dob=row['dob'],
            trainer_id=row['trainer_id'], status=row['status'], created_at=row['created_at'],
            trainer_name=row['trainer_name'] if 'trainer_name' in keys else None,
        )

    # -------------------- Fetchers --------------------

    @classmethod
    def get_all(cls, on_date=None):
        """All members, active first, then soonest expiry (no expiry last)."""
        on_date = on_date or today_iso()
        query = f'''
            SELECT * FROM (
                SELECT {MEMBER_COLUMNS}
                FROM members m
            )
            ORDER BY status = 'active' DESC,
                     expiry_date IS NULL,
                     expiry_date ASC,
                     id ASC
        '''
        rows = execute_query(query, (on_date,), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def get_by_id(cls, member_id, on_date=None):
        """Get a single member by ID with the assigned trainer's name."""
        on_date = on_date or today_iso()
        query = f'''
            SELECT {MEMBER_COLUMNS}, t.name AS trainer_name
            FROM members m
            LEFT JOIN trainers t ON m.trainer_id = t.id
            WHERE m.id = ?
        '''
        return cls._from_row(fetch_one(query, (on_date, member_id), current_db_path()))

    @classmethod
    def get_by_phone(cls, phone, on_date=None):
        on_date = on_date or today_iso()
        query = f'SELECT {MEMBER_COLUMNS} FROM members m WHERE m.phone = ? LIMIT 1'
        return cls._from_row(fetch_one(query, (on_date, phone), current_db_path()))

    @classmethod
    def exists(cls, member_id):
        row = fetch_one('SELECT 1 FROM members WHERE id = ?', (member_id,), current_db_path())
        return row is not None

    # -------------------- Persistence --------------------

    def save(self):
        """Insert a new member. Returns the new id."""
        query = '''
            INSERT INTO members (
                name, phone, photo, height, plan_type, amount,
                start_date, expiry_date, dob, trainer_id, status
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        '''
        params = (
            self.name, self.phone, self.photo, self.height, self.plan_type, self.amount,
            self.start_date, self.expiry_date, self.dob, self.trainer_id, self.status or 'active'
        )
        self.id = execute_query(query, params, current_db_path())
        return self.id

    @classmethod
    def update(cls, member_id, fields):
        """
        Partial update: keys missing from ``fields`` (or None) keep their
        stored value. Returns True when the member exists.
        """
        query = '''
            UPDATE members SET
                name = COALESCE(?, name),
                phone = COALESCE(?, phone),
                photo = COALESCE(?, photo),
                height = COALESCE(?, height),
                plan_type = COALESCE(?, plan_type),
                amount = COALESCE(?, amount),
                start_date = COALESCE(?, start_date),
                expiry_date = COALESCE(?, expiry_date),
                dob = COALESCE(?, dob),
                trainer_id = COALESCE(?, trainer_id),
                status = COALESCE(?, status)
            WHERE id = ?
        '''
        params = (
            fields.get('name'), fields.get('phone'), fields.get('photo'), fields.get('height'),
            fields.get('plan_type'), fields.get('amount'),
            _to_str_date(fields.get('start_date')), _to_str_date(fields.get('expiry_date')),
            _to_str_date(fields.get('dob')), fields.get('trainer_id'), fields.get('status'),
            member_id,
        )
        changed = execute_transaction([(query, params)], current_db_path())
        return changed > 0

    @classmethod
    def delete(cls, member_id):
        """Delete a member together with everything that hangs off it."""
        statements = [
            ('DELETE FROM chat_messages WHERE member_id = ?', (member_id,)),
            ('DELETE FROM workout_plans WHERE member_id = ?', (member_id,)),
            ('DELETE FROM diet_plans WHERE member_id = ?', (member_id,)),
            ('DELETE FROM attendance WHERE member_id = ?', (member_id,)),
            ('DELETE FROM measurements WHERE member_id = ?', (member_id,)),
            ('UPDATE finances SET member_id = NULL WHERE member_id = ?', (member_id,)),
        ]
        if not cls.exists(member_id):
            return False
        statements.append(('DELETE FROM members WHERE id = ?', (member_id,)))
        execute_transaction(statements, current_db_path())
        return True

    # -------------------- Serialization --------------------

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'photo': self.photo,
            'height': self.height,
            'planType': self.plan_type,
            'amount': self.amount,
            'startDate': self.start_date,
            'expiry': self.expiry_date,
            'dob': self.dob,
            'trainerId': self.trainer_id,
            'status': self.status,
        }

    def to_profile_dict(self):
        data = self.to_dict()
        data['trainerName'] = self.trainer_name
        return data

    def __repr__(self):
        return f"<Member id={self.id} name={self.name} status={self.status}>"
