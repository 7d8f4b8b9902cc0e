import json

from gymdesk.models.database import current_db_path, execute_query
from gymdesk.schemas import WEEK_DAYS

DAY_ORDER = 'CASE day ' + ' '.join(
    f"WHEN '{day}' THEN {position}" for position, day in enumerate(WEEK_DAYS, start=1)
) + ' END'


def _decode_exercises(raw):
    """Stored exercises are JSON lists; older rows may hold free text."""
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return raw
    return value if isinstance(value, list) else raw


class WorkoutPlan:
    def __init__(self, id=None, member_id=None, day=None, exercises=None,
                 created_at=None, updated_at=None):
        self.id = id
        self.member_id = member_id
        self.day = day
        self.exercises = exercises
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], member_id=row['member_id'], day=row['day'],
            exercises=_decode_exercises(row['exercises']),
            created_at=row['created_at'], updated_at=row['updated_at']
        )

    @classmethod
    def get_by_member(cls, member_id):
        """Plans for a member, Monday first."""
        query = f'SELECT * FROM workout_plans WHERE member_id = ? ORDER BY {DAY_ORDER}'
        rows = execute_query(query, (member_id,), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def upsert(cls, member_id, day, exercises_text):
        if not exercises_text:
            execute_query(
                'DELETE FROM workout_plans WHERE member_id = ? AND day = ?',
                (member_id, day), current_db_path()
            )
            return
        query = '''
            INSERT INTO workout_plans (member_id, day, exercises) VALUES (?, ?, ?)
            ON CONFLICT (member_id, day) DO UPDATE SET
                exercises = excluded.exercises,
                updated_at = CURRENT_TIMESTAMP
        '''
        execute_query(query, (member_id, day, exercises_text), current_db_path())

    @classmethod
    def delete(cls, plan_id=None, member_id=None):
        if plan_id is not None:
            execute_query('DELETE FROM workout_plans WHERE id = ?', (plan_id,), current_db_path())
        elif member_id is not None:
            execute_query('DELETE FROM workout_plans WHERE member_id = ?', (member_id,), current_db_path())

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'day': self.day,
            'exercises': self.exercises,
            'created_at': self.created_at,
        }
