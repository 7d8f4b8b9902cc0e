from gymdesk.models.database import current_db_path, execute_query
from gymdesk.schemas import MEAL_TYPES

MEAL_ORDER = 'CASE meal_type ' + ' '.join(
    f"WHEN '{meal}' THEN {position}" for position, meal in enumerate(MEAL_TYPES, start=1)
) + ' END'


class DietPlan:
    """One meal slot of a member's diet plan; (member_id, meal_type) is unique."""

    def __init__(self, id=None, member_id=None, meal_type=None, items=None,
                 created_at=None, updated_at=None):
        self.id = id
        self.member_id = member_id
        self.meal_type = meal_type
        self.items = items
        self.created_at = created_at
        self.updated_at = updated_at

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], member_id=row['member_id'], meal_type=row['meal_type'],
            items=row['items'], created_at=row['created_at'], updated_at=row['updated_at']
        )

    @classmethod
    def get_by_member(cls, member_id):
        query = f'SELECT * FROM diet_plans WHERE member_id = ? ORDER BY {MEAL_ORDER}'
        rows = execute_query(query, (member_id,), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def upsert(cls, member_id, meal_type, items):
        """Set the items for one meal. Empty ``items`` clears the meal instead."""
        if not items:
            execute_query(
                'DELETE FROM diet_plans WHERE member_id = ? AND meal_type = ?',
                (member_id, meal_type), current_db_path()
            )
            return
        query = '''
            INSERT INTO diet_plans (member_id, meal_type, items) VALUES (?, ?, ?)
            ON CONFLICT (member_id, meal_type) DO UPDATE SET
                items = excluded.items,
                updated_at = CURRENT_TIMESTAMP
        '''
        execute_query(query, (member_id, meal_type, items), current_db_path())

    @classmethod
    def delete(cls, plan_id=None, member_id=None):
        if plan_id is not None:
            execute_query('DELETE FROM diet_plans WHERE id = ?', (plan_id,), current_db_path())
        elif member_id is not None:
            execute_query('DELETE FROM diet_plans WHERE member_id = ?', (member_id,), current_db_path())

    def to_dict(self):
        return {
            'id': self.id,
            'member_id': self.member_id,
            'meal_type': self.meal_type,
            'items': self.items,
            'created_at': self.created_at,
        }
