import logging
import os
import sqlite3
from datetime import datetime, timezone

from api.errors import PersistenceError
from core.media import AuthenticatedUser, FileRecord


class DatabaseHandler:
    def __init__(self, db_path):
        self.db_path = db_path
        self.logger = logging.getLogger("RELAY_DB")

    def get_connection(self):
        # Explicit transactions only; timeout lets concurrent writers queue on the lock
        return sqlite3.connect(self.db_path, timeout=30, isolation_level=None)

    def init_schema(self):
        """Creates the users, user_files and file_records tables."""
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)

        conn = self.get_connection()
        try:
            # TABLE 1: USERS (profile from the auth token)
            conn.execute('''
                CREATE TABLE IF NOT EXISTS users (
                    email TEXT PRIMARY KEY,
                    uid TEXT,
                    name TEXT,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            ''')

            # TABLE 2: USER_FILES (one aggregate per user)
            conn.execute('''
                CREATE TABLE IF NOT EXISTS user_files (
                    email TEXT PRIMARY KEY,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            ''')

            # TABLE 3: FILE_RECORDS (append-only)
            conn.execute('''
                CREATE TABLE IF NOT EXISTS file_records (
                    record_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    file_url TEXT NOT NULL,
                    score REAL,
                    is_deepfake INTEGER NOT NULL,
                    created_at TIMESTAMP NOT NULL,
                    FOREIGN KEY(email) REFERENCES user_files(email)
                )
            ''')

            conn.execute('''
                CREATE INDEX IF NOT EXISTS idx_file_records_email
                ON file_records(email)
            ''')
            # Not unique: the same account may sign in under a changed email
            conn.execute('''
                CREATE INDEX IF NOT EXISTS idx_users_uid
                ON users(uid)
            ''')
        finally:
            conn.close()
        self.logger.info("Database schema initialized.")

    def append_file_record(self, user: AuthenticatedUser, record: FileRecord):
        """Upsert the user and their aggregate, then append one record, atomically."""
        now = datetime.now(timezone.utc).isoformat()
        conn = self.get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            conn.execute('''
                INSERT INTO users (email, uid, name, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(email) DO UPDATE SET
                    uid = excluded.uid,
                    name = excluded.name,
                    updated_at = excluded.updated_at
            ''', (user.email, user.uid or None, user.name, now, now))
            conn.execute('''
                INSERT INTO user_files (email, created_at, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(email) DO UPDATE SET updated_at = excluded.updated_at
            ''', (user.email, now, now))
            conn.execute('''
                INSERT INTO file_records (email, file_name, file_url, score, is_deepfake, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', (user.email, record.file_name, record.file_url, record.score,
                  int(record.is_deepfake), record.created_at.isoformat()))
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            self.logger.error(f"Failed to save file record for {user.email}: {e}")
            raise PersistenceError() from e
        finally:
            conn.close()

    def get_user_files(self, email):
        """Return the user's records in insertion order, or None if they have no aggregate."""
        conn = self.get_connection()
        try:
            exists = conn.execute(
                "SELECT 1 FROM user_files WHERE email = ?", (email,)
            ).fetchone()
            if exists is None:
                return None
            rows = conn.execute('''
                SELECT file_name, file_url, score, is_deepfake, created_at
                FROM file_records
                WHERE email = ?
                ORDER BY record_id
            ''', (email,)).fetchall()
        finally:
            conn.close()

        return [
            FileRecord(
                file_name=name,
                file_url=url,
                score=score,
                is_deepfake=bool(is_deepfake),
                created_at=datetime.fromisoformat(created_at),
            )
            for name, url, score, is_deepfake, created_at in rows
        ]

    def get_user(self, email):
        conn = self.get_connection()
        conn.row_factory = sqlite3.Row
        try:
            row = conn.execute(
                "SELECT email, uid, name, created_at, updated_at FROM users WHERE email = ?",
                (email,),
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()
