from gymdesk.models.database import current_db_path, execute_query, fetch_one


class Machine:
    def __init__(self, id=None, name=None, status='Operational',
                 last_maintenance=None, next_maintenance=None, created_at=None):
        self.id = id
        self.name = name
        self.status = status
        self.last_maintenance = last_maintenance
        self.next_maintenance = next_maintenance
        self.created_at = created_at

    # ---------------------------
    # Row mapping helper
    # ---------------------------
    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'],
            name=row['name'],
            status=row['status'] or 'Operational',
            last_maintenance=row['last_maintenance'],
            next_maintenance=row['next_maintenance'],
            created_at=row['created_at'],
        )

    # ---------------------------
    # Fetch Queries
    # ---------------------------
    @classmethod
    def get_all(cls):
        query = 'SELECT * FROM machines ORDER BY name COLLATE NOCASE, id'
        results = execute_query(query, (), current_db_path(), fetch=True)
        return [cls._from_row(row) for row in results]

    @classmethod
    def get_by_id(cls, machine_id):
        row = fetch_one('SELECT * FROM machines WHERE id = ?', (machine_id,), current_db_path())
        return cls._from_row(row)

    # ---------------------------
    # Save / Update / Delete
    # ---------------------------
    def save(self):
        last = self.last_maintenance.isoformat() if hasattr(self.last_maintenance, 'isoformat') \
            else self.last_maintenance
        nxt = self.next_maintenance.isoformat() if hasattr(self.next_maintenance, 'isoformat') \
            else self.next_maintenance

        if self.id:  # update
            query = '''
                UPDATE machines
                SET name = ?, status = ?, last_maintenance = ?, next_maintenance = ?
                WHERE id = ?
            '''
            execute_query(query, (self.name, self.status, last, nxt, self.id), current_db_path())
            return self.id

        query = '''
            INSERT INTO machines (name, status, last_maintenance, next_maintenance)
            VALUES (?, ?, ?, ?)
        '''
        self.id = execute_query(query, (self.name, self.status, last, nxt), current_db_path())
        return self.id

    @classmethod
    def delete(cls, machine_id):
        if cls.get_by_id(machine_id) is None:
            return False
        execute_query('DELETE FROM machines WHERE id = ?', (machine_id,), current_db_path())
        return True

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'status': self.status,
            'lastMaintenance': self.last_maintenance,
            'nextMaintenance': self.next_maintenance,
        }
