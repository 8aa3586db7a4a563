"""
Encrypted credential store.

A vault is a SQLite file. Passwords are encrypted with Fernet under a key
derived from the master password (PBKDF2-HMAC-SHA256, salt kept in ``meta``).
The ``verifier`` meta entry is checked on open, so a wrong master password is
rejected before any record is touched.
"""
import logging
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone

from cryptography.fernet import Fernet, InvalidToken

from . import crypto
from . import db
from .config import MIN_MASTER_LENGTH
from .errors import AuthenticationError, NotFoundError, ValidationError, VaultIOError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Record:
    service: str
    username: str
    password: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def check_master_length(master_password: str):
    if len(master_password) < MIN_MASTER_LENGTH:
        raise ValidationError(f"Master password must be at least {MIN_MASTER_LENGTH} characters.")


class Vault:

    def __init__(self, conn: sqlite3.Connection, fernet: Fernet, path: str):
        self.conn = conn
        self.fernet = fernet
        self.path = path

    @classmethod
    def open(cls, path: str, master_password: str, kdf_iters: int | None = None) -> "Vault":
        """Open the vault at ``path``, creating it on first use.

        Raises AuthenticationError when the master password does not match,
        VaultIOError when the file cannot be read or written.
        """
        if not master_password:
            raise ValidationError("Master password cannot be empty.")
        if not os.path.exists(path):
            check_master_length(master_password)
        try:
            conn = db.connect(path)
        except (OSError, sqlite3.Error) as e:
            raise VaultIOError(f"Unable to open vault '{path}': {e}") from e

        try:
            db.init_db(conn, kdf_iters or crypto.DEFAULT_KDF_ITERS)
            if not crypto.has_verifier(conn):
                check_master_length(master_password)
                f = crypto.get_fernet(conn, master_password)
                crypto.set_verifier(conn, f)
                logger.info("Created new vault at %s", path)
            else:
                f = crypto.get_fernet(conn, master_password)
                if not crypto.check_verifier(conn, f):
                    logger.info("Rejected master password for vault %s", path)
                    raise AuthenticationError()
        except sqlite3.Error as e:
            conn.close()
            raise VaultIOError(f"Unable to read vault '{path}': {e}") from e
        except Exception:
            conn.close()
            raise

        logger.debug("Opened vault %s", path)
        return cls(conn, f, path)

    def close(self):
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _decrypt(self, token: bytes) -> str:
        try:
            return self.fernet.decrypt(token).decode("utf-8")
        except InvalidToken as e:
            raise AuthenticationError("Decryption failed. Wrong master password.") from e

    def insert_record(self, service: str, username: str | None, password: str):
        enc = self.fernet.encrypt(password.encode("utf-8"))
        now = _now()
        try:
            with self.conn:
                self.conn.execute("""
                    INSERT INTO credentials(service, username, password, created_at, updated_at)
                    VALUES(?,?,?,?,?)
                    ON CONFLICT(service, username)
                    DO UPDATE SET password=excluded.password, updated_at=excluded.updated_at;
                """, (service, username or "", enc, now, now))
        except sqlite3.Error as e:
            raise VaultIOError(f"Unable to save entry: {e}") from e
        logger.info("Saved entry service=%s username=%s", service, username or "")

    def list_records(self) -> list[Record]:
        try:
            rows = self.conn.execute(
                "SELECT service, username, password FROM credentials ORDER BY id;"
            ).fetchall()
        except sqlite3.Error as e:
            raise VaultIOError(f"Unable to read entries: {e}") from e
        return [Record(service, username, self._decrypt(token)) for service, username, token in rows]

    def find_record(self, service: str, username: str | None) -> Record:
        try:
            row = self.conn.execute("""
                SELECT password FROM credentials
                 WHERE service=? AND username=?
                 LIMIT 1;
            """, (service, username or "")).fetchone()
        except sqlite3.Error as e:
            raise VaultIOError(f"Unable to read entry: {e}") from e
        if not row:
            raise NotFoundError(service, username)
        return Record(service, username or "", self._decrypt(row[0]))

    def delete_record(self, service: str, username: str | None):
        try:
            with self.conn:
                cur = self.conn.execute(
                    "DELETE FROM credentials WHERE service=? AND username=?;",
                    (service, username or ""),
                )
        except sqlite3.Error as e:
            raise VaultIOError(f"Unable to delete entry: {e}") from e
        if cur.rowcount == 0:
            raise NotFoundError(service, username)
        logger.info("Deleted entry service=%s username=%s", service, username or "")

    def rekey(self, new_master_password: str):
        """Re-encrypt every record under ``new_master_password`` in one transaction."""
        check_master_length(new_master_password)
        try:
            rows = self.conn.execute("SELECT id, password FROM credentials;").fetchall()
            plain = [(row_id, self._decrypt(token)) for row_id, token in rows]

            salt = crypto.new_salt()
            key = crypto.derive_key(new_master_password, salt, crypto.stored_kdf_iters(self.conn))
            new_fernet = Fernet(key)
            now = _now()

            with self.conn:
                db.set_meta(self.conn, "salt", salt, commit=False)
                crypto.set_verifier(self.conn, new_fernet, commit=False)
                for row_id, password in plain:
                    self.conn.execute(
                        "UPDATE credentials SET password=?, updated_at=? WHERE id=?;",
                        (new_fernet.encrypt(password.encode("utf-8")), now, row_id),
                    )
        except sqlite3.Error as e:
            raise VaultIOError(f"Unable to re-encrypt vault: {e}") from e

        self.fernet = new_fernet
        logger.info("Re-keyed vault %s (%d entries)", self.path, len(plain))
