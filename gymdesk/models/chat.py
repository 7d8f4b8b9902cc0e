from gymdesk.models.database import current_db_path, execute_query


class ChatMessage:
    def __init__(self, id=None, member_id=None, sender=None, message=None, created_at=None):
        self.id = id
        self.member_id = member_id
        self.sender = sender
        self.message = message
        self.created_at = created_at

    @classmethod
    def _from_row(cls, row):
        if not row:
            return None
        return cls(
            id=row['id'], member_id=row['member_id'], sender=row['sender'],
            message=row['message'], created_at=row['created_at']
        )

    @classmethod
    def get_conversation(cls, member_id):
        """A member's messages, oldest first."""
        query = '''
            SELECT * FROM chat_messages
            WHERE member_id = ?
            ORDER BY created_at ASC, id ASC
        '''
        rows = execute_query(query, (member_id,), current_db_path(), fetch=True)
        return [cls._from_row(r) for r in rows]

    @classmethod
    def get_conversation_list(cls):
        """Latest message of every member who has chatted, most recent first."""
        query = '''
            SELECT cm.member_id, m.name, m.photo, cm.message AS last_message,
                   cm.created_at AS last_time, cm.sender,
                   (SELECT COUNT(*) FROM chat_messages c2
                    WHERE c2.member_id = cm.member_id) AS total_messages
            FROM chat_messages cm
            JOIN members m ON m.id = cm.member_id
            WHERE cm.id IN (SELECT MAX(id) FROM chat_messages GROUP BY member_id)
            ORDER BY cm.created_at DESC, cm.id DESC
        '''
        rows = execute_query(query, (), current_db_path(), fetch=True)
        return [dict(r) for r in rows]

    def save(self):
        query = 'INSERT INTO chat_messages (member_id, sender, message) VALUES (?, ?, ?)'
        self.id = execute_query(query, (self.member_id, self.sender, self.message), current_db_path())
        return self.id

    def to_dict(self):
        return {
            'id': self.id,
            'sender': self.sender,
            'message': self.message,
            'created_at': self.created_at,
        }
