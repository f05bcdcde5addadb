# bearer_auth/authenticators/sqlite_store.py
import sqlite3
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..util.clock import Clock, SystemClock
from .errors import AuthenticatorStoreError, DuplicateAuthenticatorError
from .models import BearerTokenAuthenticator, shorten_id
from .storage_interfaces import AbstractAuthenticatorStore

logger = logging.getLogger(__name__)


class SQLiteAuthenticatorStore(AbstractAuthenticatorStore):
    """
    SQLite implementation for storing bearer token authenticators.

    Authenticators are stored as JSON next to their expiration date as a POSIX
    timestamp. An expired row is dropped when it is looked up, and every expired
    row is swept whenever a new authenticator is added.
    """

    def __init__(self, db_path: str, clock: Optional[Clock] = None):
        self.db_path = db_path
        self._clock = clock or SystemClock()
        self._conn: Optional[sqlite3.Connection] = None

    async def initialize(self) -> None:
        """Open the database connection and ensure the schema exists."""
        if self._conn is not None:
            return
        try:
            if self.db_path != ":memory:":
                db_file = Path(self.db_path).resolve()
                # Ensure the database directory structure exists
                db_file.parent.mkdir(parents=True, exist_ok=True)
                target = str(db_file)
            else:
                target = self.db_path

            logger.info(f"Attempting to connect to SQLite DB at: {target}")
            # Enable thread-safe access for async/FastAPI compatibility
            self._conn = sqlite3.connect(target, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute('''
            CREATE TABLE IF NOT EXISTS bearer_token_authenticators (
                id TEXT PRIMARY KEY,
                authenticator_data TEXT NOT NULL,
                expires_at REAL NOT NULL
            )
            ''')
            self._conn.commit()
            logger.info("SQLiteAuthenticatorStore initialized, ensured 'bearer_token_authenticators' table exists.")
        except sqlite3.Error as e:
            logger.error(f"Error connecting to SQLite database at {self.db_path}: {e}", exc_info=True)
            raise

    async def teardown(self) -> None:
        if self._conn is not None:
            logger.info("Closing SQLite DB connection.")
            self._conn.close()
            self._conn = None

    def _get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("SQLiteAuthenticatorStore not initialized. Call initialize() first.")
        return self._conn

    async def _execute_query(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        """Execute a SQL statement with proper error handling and transaction management."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params)
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"SQLite error executing query '{query}': {e}", exc_info=True)
            conn.rollback()
            raise
        return cursor

    async def _fetchone(self, query: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        """Execute a SELECT query and return a single row."""
        cursor = self._get_connection().cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"SQLite error during fetchone for query '{query}': {e}", exc_info=True)
            raise

    def _row_to_authenticator(self, row: sqlite3.Row) -> BearerTokenAuthenticator:
        try:
            return BearerTokenAuthenticator.model_validate_json(row["authenticator_data"])
        except ValidationError as e:
            logger.error(f"Error converting row to BearerTokenAuthenticator for {shorten_id(row['id'])}: {e}")
            raise AuthenticatorStoreError(f"Stored authenticator {shorten_id(row['id'])} is corrupt.") from e

    async def find(self, authenticator_id: str) -> Optional[BearerTokenAuthenticator]:
        row = await self._fetchone(
            "SELECT * FROM bearer_token_authenticators WHERE id = ?", (authenticator_id,)
        )
        if not row:
            return None
        authenticator = self._row_to_authenticator(row)
        if authenticator.is_expired(self._clock.now()):
            await self.remove(authenticator_id)
            logger.debug(f"Reaped expired authenticator {shorten_id(authenticator_id)}.")
            return None
        return authenticator

    async def remove_expired(self) -> int:
        """Delete every row whose expiration date has passed and return how many were deleted."""
        cursor = await self._execute_query(
            "DELETE FROM bearer_token_authenticators WHERE expires_at <= ?",
            (self._clock.now().timestamp(),)
        )
        if cursor.rowcount:
            logger.debug(f"Swept {cursor.rowcount} expired authenticators from SQLite.")
        return cursor.rowcount

    async def add(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        await self.remove_expired()
        query = '''
            INSERT INTO bearer_token_authenticators (id, authenticator_data, expires_at)
            VALUES (?, ?, ?)
        '''
        params = (
            authenticator.id,
            authenticator.model_dump_json(),
            authenticator.expiration_date.timestamp(),
        )
        try:
            await self._execute_query(query, params)
        except sqlite3.IntegrityError as e:
            raise DuplicateAuthenticatorError(authenticator.id) from e
        logger.debug(f"Saved authenticator {shorten_id(authenticator.id)} to SQLite.")
        return authenticator

    async def update(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        query = '''
            INSERT INTO bearer_token_authenticators (id, authenticator_data, expires_at)
            VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                authenticator_data=excluded.authenticator_data,
                expires_at=excluded.expires_at
        '''
        params = (
            authenticator.id,
            authenticator.model_dump_json(),
            authenticator.expiration_date.timestamp(),
        )
        await self._execute_query(query, params)
        logger.debug(f"Updated authenticator {shorten_id(authenticator.id)} in SQLite.")
        return authenticator

    async def remove(self, authenticator_id: str) -> None:
        await self._execute_query(
            "DELETE FROM bearer_token_authenticators WHERE id = ?", (authenticator_id,)
        )
        logger.debug(f"Deleted authenticator {shorten_id(authenticator_id)} from SQLite.")
