from gymdesk.models.database import current_db_path, execute_query, fetch_scalar


class RateLimit:
    """Attempt log used to throttle endpoints per client IP."""

    @classmethod
    def recent_attempts(cls, ip, endpoint, window_minutes):
        query = '''
            SELECT COUNT(*) FROM rate_limits
            WHERE ip = ? AND endpoint = ? AND attempted_at > DATETIME('now', ?)
        '''
        return fetch_scalar(query, (ip, endpoint, f'-{int(window_minutes)} minutes'), current_db_path())

    @classmethod
    def record_attempt(cls, ip, endpoint, window_minutes):
        """Log an attempt and drop entries well outside the window."""
        db_path = current_db_path()
        execute_query('INSERT INTO rate_limits (ip, endpoint) VALUES (?, ?)', (ip, endpoint), db_path)
        execute_query(
            "DELETE FROM rate_limits WHERE attempted_at < DATETIME('now', ?)",
            (f'-{int(window_minutes) * 2} minutes',), db_path
        )

    @classmethod
    def hit(cls, ip, endpoint, limit, window_minutes):
        """Record an attempt unless the limit is already reached.

        Returns False when the caller is over the limit.
        """
        if cls.recent_attempts(ip, endpoint, window_minutes) >= limit:
            return False
        cls.record_attempt(ip, endpoint, window_minutes)
        return True
