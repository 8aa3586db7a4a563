import os, sqlite3

SCHEMA = """
    CREATE TABLE IF NOT EXISTS meta (
        key TEXT PRIMARY KEY,
        value BLOB
    );
    CREATE TABLE IF NOT EXISTS credentials (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        service TEXT NOT NULL,
        username TEXT NOT NULL DEFAULT '',
        password BLOB NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE(service, username)
    );
"""


def connect(db_path: str) -> sqlite3.Connection:
    parent = os.path.dirname(os.path.abspath(db_path))
    os.makedirs(parent, exist_ok=True)
    return sqlite3.connect(db_path)


def init_db(conn: sqlite3.Connection, kdf_iters: int):
    conn.executescript(SCHEMA)
    if get_meta(conn, "salt") is None:
        with conn:
            conn.executemany(
                "INSERT OR REPLACE INTO meta(key, value) VALUES(?, ?);",
                [("salt", os.urandom(16)),
                 ("kdf_iters", str(kdf_iters).encode()),
                 ("verifier", b"")],
            )


def get_meta(conn: sqlite3.Connection, key: str):
    row = conn.execute("SELECT value FROM meta WHERE key=?;", (key,)).fetchone()
    return row[0] if row else None


def set_meta(conn: sqlite3.Connection, key: str, value: bytes, commit: bool = True):
    conn.execute("INSERT OR REPLACE INTO meta(key, value) VALUES(?, ?);", (key, value))
    if commit:
        conn.commit()
