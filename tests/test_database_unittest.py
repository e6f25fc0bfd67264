import os
import sqlite3
import tempfile
import unittest
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from database import DatabaseManager, commit_with_retry


class DatabaseTests(unittest.TestCase):
    def setUp(self):
        tf = tempfile.NamedTemporaryFile(delete=False)
        tf.close()
        self.db_path = tf.name

    def tearDown(self):
        try:
            os.unlink(self.db_path)
        except OSError:
            pass

    def test_check_schema_creates_tables(self):
        mgr = DatabaseManager(db_name=self.db_path)
        conn = mgr.connect()
        cur = conn.cursor()
        cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
        names = {r[0] for r in cur.fetchall()}
        self.assertIn('products', names)
        conn.close()

    def test_check_schema_is_repeatable(self):
        DatabaseManager(db_name=self.db_path)
        DatabaseManager(db_name=self.db_path)

    def test_negative_count_rejected(self):
        mgr = DatabaseManager(db_name=self.db_path)
        conn = mgr.connect()
        with self.assertRaises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO products (name, count) VALUES (?, ?)", ('x', -1))
        conn.close()


class CommitWithRetryTests(unittest.TestCase):
    def test_raises_after_retries(self):
        class LockedConn:
            calls = 0

            def commit(self):
                LockedConn.calls += 1
                raise sqlite3.OperationalError('database is locked')

        with self.assertRaises(sqlite3.OperationalError):
            commit_with_retry(LockedConn(), retries=2, initial_delay=0)
        self.assertEqual(LockedConn.calls, 2)

    def test_retries_then_succeeds(self):
        class FlakyConn:
            def __init__(self):
                self.calls = 0

            def commit(self):
                self.calls += 1
                if self.calls == 1:
                    raise sqlite3.OperationalError('database is busy')

        conn = FlakyConn()
        commit_with_retry(conn, retries=3, initial_delay=0)
        self.assertEqual(conn.calls, 2)

    def test_other_errors_not_retried(self):
        class BrokenConn:
            def __init__(self):
                self.calls = 0

            def commit(self):
                self.calls += 1
                raise sqlite3.OperationalError('disk I/O error')

        conn = BrokenConn()
        with self.assertRaises(sqlite3.OperationalError):
            commit_with_retry(conn, retries=3, initial_delay=0)
        self.assertEqual(conn.calls, 1)


if __name__ == '__main__':
    unittest.main()
