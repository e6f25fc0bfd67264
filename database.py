import sqlite3
import os
import time

# Use a DB file located next to this module so the application uses a consistent
# database file regardless of the current working directory.
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DB_NAME = os.environ.get("SHOPPING_DB", os.path.join(BASE_DIR, "shopping.db"))

class DatabaseManager:
    def __init__(self, db_name=DB_NAME):
        self.db_name = db_name
        self.check_schema()

    def connect(self):
        # Wait for locks instead of failing straight away.
        conn = sqlite3.connect(self.db_name, timeout=30)
        conn.row_factory = sqlite3.Row
        return conn

    def check_schema(self):
        conn = self.connect()
        try:
            c = conn.cursor()
            c.execute('PRAGMA busy_timeout = 30000')

            # Products, keyed by name
            c.execute('''CREATE TABLE IF NOT EXISTS products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                count INTEGER NOT NULL CHECK (count >= 0)
            )''')

            conn.commit()
        finally:
            conn.close()


def commit_with_retry(conn, retries=6, initial_delay=0.5):
    """Attempt to commit, retrying on `sqlite3.OperationalError: database is locked`.

    Retries use exponential backoff (initial_delay * 2**attempt).
    """
    last_exc = None
    for attempt in range(retries):
        try:
            conn.commit()
            return
        except sqlite3.OperationalError as e:
            last_exc = e
            msg = str(e).lower()
            if 'locked' in msg or 'busy' in msg:
                time.sleep(initial_delay * (2 ** attempt))
                continue
            raise
    # If we exhausted retries, re-raise last exception
    raise last_exc
