from __future__ import annotations
from contextlib import contextmanager
from typing import Optional, Dict, Any
import json, sqlite3, os, threading
from finid_core.storage.provider import StorageProvider
from finid_core.utils import now_ts


class SQLiteStorage(StorageProvider):
    """
    SQLite backend in WAL mode with one connection per thread.

    transaction() takes the database write lock up front (BEGIN IMMEDIATE)
    and holds it until COMMIT/ROLLBACK; the nesting depth is tracked per
    thread. Connections of other threads only read committed rows.
    Needs a file path; ":memory:" would give every thread its own database.
    """

    def __init__(self, path="db/finid_state.db", timeout: float = 5.0):
        # If no directory, default to current working directory
        dir_path = os.path.dirname(path) or "."
        os.makedirs(dir_path, exist_ok=True)
        self.path = path
        self.timeout = timeout
        self._local = threading.local()
        self._conns = []
        self._conns_lock = threading.Lock()

        self._init()

    @property
    def db(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            # isolation_level=None: statements outside transaction() autocommit
            conn = sqlite3.connect(self.path, timeout=self.timeout,
                                   isolation_level=None, check_same_thread=False)
            self._local.conn = conn
            self._local.depth = 0
            with self._conns_lock:
                self._conns.append(conn)
        return conn

    def _init(self) -> None:
        c = self.db.cursor()

        # persistent for the database file; later connections inherit it
        c.execute("PRAGMA journal_mode=WAL")
        c.execute("""CREATE TABLE IF NOT EXISTS records(
            ns TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            PRIMARY KEY (ns, key)
        )""")
        c.execute("""CREATE TABLE IF NOT EXISTS audit(
            ts TEXT,
            event_type TEXT,
            payload TEXT
        )""")
        c.execute("""CREATE TABLE IF NOT EXISTS replay_guard(
            msg_id TEXT PRIMARY KEY
        )""")

    @contextmanager
    def transaction(self):
        conn = self.db
        if self._local.depth:
            self._local.depth += 1
            try:
                yield
            finally:
                self._local.depth -= 1
            return

        conn.execute("BEGIN IMMEDIATE")
        self._local.depth = 1
        try:
            yield
        except Exception:
            conn.execute("ROLLBACK")
            raise
        else:
            conn.execute("COMMIT")
        finally:
            self._local.depth = 0

    def get(self, ns: str, key: str) -> Optional[Dict[str, Any]]:
        cur = self.db.execute("SELECT value FROM records WHERE ns=? AND key=?", (ns, key))
        row = cur.fetchone()
        if not row: return None
        return json.loads(row[0])

    def put(self, ns: str, key: str, value: Dict[str, Any]) -> None:
        self.db.execute(
            "INSERT INTO records(ns,key,value,updated_at) VALUES(?,?,?,?) "
            "ON CONFLICT(ns,key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
            (ns, key, json.dumps(value, separators=(",", ":"), sort_keys=True), now_ts())
        )

    def log_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        self.db.execute("INSERT INTO audit(ts,event_type,payload) VALUES(?,?,?)",
                        (now_ts(), event_type, json.dumps(payload, separators=(",", ":"), sort_keys=True)))

    def list_events(self, event_type: Optional[str] = None):
        if event_type:
            cur = self.db.execute("SELECT ts,event_type,payload FROM audit WHERE event_type=? ORDER BY rowid", (event_type,))
        else:
            cur = self.db.execute("SELECT ts,event_type,payload FROM audit ORDER BY rowid")
        return [
            {"ts": ts, "event_type": et, "payload": json.loads(payload)}
            for ts, et, payload in cur.fetchall()
        ]

    def seen_msg(self, msg_id: str) -> bool:
        cur = self.db.execute("SELECT 1 FROM replay_guard WHERE msg_id=?", (msg_id,))
        return cur.fetchone() is not None

    def mark_msg(self, msg_id: str) -> None:
        self.db.execute("INSERT OR IGNORE INTO replay_guard(msg_id) VALUES(?)", (msg_id,))

    def close(self):
        with self._conns_lock:
            for conn in self._conns:
                conn.close()
            self._conns = []
        self._local = threading.local()
