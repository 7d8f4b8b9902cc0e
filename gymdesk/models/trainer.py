from gymdesk.models.database import current_db_path, execute_query, fetch_one


class Trainer:
    def __init__(self, id=None, name=None, specialty=None, phone=None, created_at=None):
        self.id = id
        self.name = name
        self.specialty = specialty
        self.phone = phone
        self.created_at = created_at

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], name=row['name'], specialty=row['specialty'],
            phone=row['phone'], created_at=row['created_at']
        )

    @classmethod
    def get_all(cls):
        query = 'SELECT * FROM trainers ORDER BY name COLLATE NOCASE, id'
        results = execute_query(query, (), current_db_path(), fetch=True)
        return [cls._from_row(row) for row in results]

    @classmethod
    def get_by_id(cls, trainer_id):
        row = fetch_one('SELECT * FROM trainers WHERE id = ?', (trainer_id,), current_db_path())
        return cls._from_row(row)

    def save(self):
        """Save trainer to database"""
        if self.id:
            query = '''
                UPDATE trainers SET name = ?, specialty = ?, phone = ?
                WHERE id = ?
            '''
            execute_query(query, (self.name, self.specialty, self.phone, self.id), current_db_path())
            return self.id

        query = 'INSERT INTO trainers (name, specialty, phone) VALUES (?, ?, ?)'
        self.id = execute_query(query, (self.name, self.specialty, self.phone), current_db_path())
        return self.id

    @classmethod
    def delete(cls, trainer_id):
        """Delete a trainer. Assigned members keep their row with no trainer."""
        if cls.get_by_id(trainer_id) is None:
            return False
        execute_query('DELETE FROM trainers WHERE id = ?', (trainer_id,), current_db_path())
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'specialty': self.specialty,
            'phone': self.phone,
        }
