import sqlite3
from datetime import date, timedelta
from flask import current_app, has_app_context

DEFAULT_DB_PATH = 'gymdesk.db'

# Children first, so a wipe never trips a foreign key.
RESET_ORDER = (
    'chat_messages',
    'workout_plans',
    'diet_plans',
    'attendance',
    'measurements',
    'finances',
    'members',
    'trainers',
    'machines',
    'rate_limits',
)


def get_db_connection(db_path=DEFAULT_DB_PATH):
    """Get database connection with row factory and FK enabled"""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def current_db_path():
    return current_app.config.get('DATABASE_PATH', DEFAULT_DB_PATH)


def _log_db_error(error, query, params):
    if has_app_context():
        current_app.logger.error(f"DB Error: {error} | Query: {query} | Params: {params}")


def execute_query(query, params=(), db_path=DEFAULT_DB_PATH, fetch=False):
    """Execute a database query with optional parameters.

    With ``fetch`` the rows are returned, otherwise the statement is committed
    and ``lastrowid`` is returned.
    """
    conn = get_db_connection(db_path)
    try:
        cursor = conn.execute(query, params)
        if fetch:
            return cursor.fetchall()
        conn.commit()
        return cursor.lastrowid
    except Exception as e:
        _log_db_error(e, query, params)
        raise
    finally:
        conn.close()


def fetch_one(query, params=(), db_path=DEFAULT_DB_PATH):
    rows = execute_query(query, params, db_path, fetch=True)
    return rows[0] if rows else None


def fetch_scalar(query, params=(), db_path=DEFAULT_DB_PATH, default=0):
    row = fetch_one(query, params, db_path)
    if row is None or row[0] is None:
        return default
    return row[0]


def execute_transaction(statements, db_path=DEFAULT_DB_PATH):
    """Run several (query, params) pairs atomically; returns total rowcount."""
    conn = get_db_connection(db_path)
    total = 0
    query, params = None, None
    try:
        for query, params in statements:
            total += conn.execute(query, params).rowcount
        conn.commit()
        return total
    except Exception as e:
        conn.rollback()
        _log_db_error(e, query, params)
        raise
    finally:
        conn.close()


def init_db(db_path=DEFAULT_DB_PATH, seed=False):
    """Initialize database with all required tables"""
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS trainers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            specialty TEXT,
            phone TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS members (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            phone TEXT NOT NULL,
            photo TEXT,             -- data URI
            height REAL,
            plan_type TEXT,
            amount REAL,
            start_date DATE,
            expiry_date DATE,
            dob DATE,
            trainer_id INTEGER,
            status TEXT DEFAULT 'active' CHECK (status IN ('active', 'expired', 'inactive')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (trainer_id) REFERENCES trainers (id) ON DELETE SET NULL
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS attendance (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            member_id INTEGER NOT NULL,
            date DATE NOT NULL,
            status TEXT NOT NULL DEFAULT 'present' CHECK (status IN ('present', 'absent')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (member_id, date),
            FOREIGN KEY (member_id) REFERENCES members (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS finances (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            type TEXT NOT NULL CHECK (type IN ('Income', 'Expense')),
            amount REAL NOT NULL,
            date DATE NOT NULL,
            category TEXT,
            description TEXT,
            member_id INTEGER,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (member_id) REFERENCES members (id) ON DELETE SET NULL
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS measurements (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            member_id INTEGER NOT NULL,
            date DATE NOT NULL,
            weight REAL,
            body_fat REAL,
            chest REAL,
            biceps_l REAL,
            biceps_r REAL,
            waist REAL,
            thigh REAL,
            calves REAL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (member_id) REFERENCES members (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS diet_plans (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            member_id INTEGER NOT NULL,
            meal_type TEXT NOT NULL,
            items TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (member_id, meal_type),
            FOREIGN KEY (member_id) REFERENCES members (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS workout_plans (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            member_id INTEGER NOT NULL,
            day TEXT NOT NULL,
            exercises TEXT NOT NULL, -- JSON list or free text
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (member_id, day),
            FOREIGN KEY (member_id) REFERENCES members (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS chat_messages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            member_id INTEGER NOT NULL,
            sender TEXT NOT NULL CHECK (sender IN ('owner', 'member')),
            message TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (member_id) REFERENCES members (id) ON DELETE CASCADE
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS machines (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            status TEXT DEFAULT 'Operational'
                CHECK (status IN ('Operational', 'Under Maintenance', 'Broken')),
            last_maintenance DATE,
            next_maintenance DATE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    cursor.execute('''
        CREATE TABLE IF NOT EXISTS rate_limits (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            ip TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            attempted_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')
    cursor.execute(
        'CREATE INDEX IF NOT EXISTS idx_rate_limits_ip ON rate_limits (ip, endpoint, attempted_at)'
    )

    # Older databases had finances without a member link.
    cursor.execute("PRAGMA table_info(finances)")
    columns = [column[1] for column in cursor.fetchall()]
    if 'member_id' not in columns:
        cursor.execute("ALTER TABLE finances ADD COLUMN member_id INTEGER REFERENCES members (id)")

    if seed:
        insert_default_data(cursor)

    conn.commit()
    conn.close()


UNIQUE_KEYS = (
    # table, index name, key columns
    ('attendance', 'ux_attendance_member_date', ('member_id', 'date')),
    ('diet_plans', 'ux_diet_member_meal', ('member_id', 'meal_type')),
    ('workout_plans', 'ux_workout_member_day', ('member_id', 'day')),
)


def ensure_unique_keys(db_path=DEFAULT_DB_PATH):
    """Collapse duplicate plan/attendance rows and add the unique indexes.

    Databases created before the upsert rewrite could hold several rows per
    key; the newest row (highest id) wins. Returns {table: rows_removed}.
    """
    conn = sqlite3.connect(db_path)
    removed = {}
    try:
        for table, index_name, columns in UNIQUE_KEYS:
            key = ', '.join(columns)
            cursor = conn.execute(
                f'DELETE FROM {table} WHERE id NOT IN '
                f'(SELECT MAX(id) FROM {table} GROUP BY {key})'
            )
            removed[table] = cursor.rowcount
            conn.execute(f'CREATE UNIQUE INDEX IF NOT EXISTS {index_name} ON {table} ({key})')
        conn.commit()
    finally:
        conn.close()
    return removed


def missing_unique_keys(db_path=DEFAULT_DB_PATH):
    """Tables whose upsert key has no unique index (unmigrated databases)."""
    conn = sqlite3.connect(db_path)
    missing = []
    try:
        for table, _, columns in UNIQUE_KEYS:
            indexed = set()
            for index in conn.execute(f'PRAGMA index_list({table})').fetchall():
                # index_list rows: seq, name, unique, origin, partial
                if not index[2]:
                    continue
                info = conn.execute(f'PRAGMA index_info("{index[1]}")').fetchall()
                indexed.add(tuple(column[2] for column in info))
            if tuple(columns) not in indexed:
                missing.append(table)
    finally:
        conn.close()
    return missing


def reset_all_data(db_path=DEFAULT_DB_PATH):
    """Delete every row of every table; returns the number of rows removed."""
    return execute_transaction(
        [(f'DELETE FROM {table}', ()) for table in RESET_ORDER], db_path
    )


def insert_default_data(cursor):
    """Insert sample trainers and machines into an empty database"""

    cursor.execute('SELECT COUNT(*) FROM trainers')
    if cursor.fetchone()[0] == 0:
        trainers = [
            ('Ravi Kumar', 'Strength Training, Weight Loss', '+919000000002'),
            ('Sneha Reddy', 'Yoga, Flexibility, Cardio', '+919000000003'),
        ]
        cursor.executemany(
            'INSERT INTO trainers (name, specialty, phone) VALUES (?, ?, ?)', trainers
        )

    cursor.execute('SELECT COUNT(*) FROM machines')
    if cursor.fetchone()[0] == 0:
        today = date.today()
        machines = [
            ('Treadmill Pro X1', 'Operational', today - timedelta(days=30), today + timedelta(days=60)),
            ('Bench Press Station', 'Operational', today - timedelta(days=45), today + timedelta(days=45)),
            ('Leg Press Machine', 'Operational', today - timedelta(days=10), today + timedelta(days=80)),
            ('Rowing Machine', 'Under Maintenance', today - timedelta(days=2), today + timedelta(days=5)),
        ]
        cursor.executemany(
            'INSERT INTO machines (name, status, last_maintenance, next_maintenance) VALUES (?, ?, ?, ?)',
            [(name, status, last.isoformat(), nxt.isoformat()) for name, status, last, nxt in machines]
        )
