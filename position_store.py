"""
Key-value stores for the dashboard position
SQLite-backed storage for the saved index/filter and a URL query param adapter
"""

import sqlite3
from contextlib import closing
from datetime import datetime
from typing import Dict, MutableMapping, Optional, Protocol

INDEX_KEY = "cold-calling-display:current-index"
FILTER_KEY = "cold-calling-display:industry-filter"
INDUSTRY_PARAM = "industry"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed store, handy in tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class SqliteStore:
    """Persists values in a single ``kv_state`` table."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._init_db()

    def _init_db(self):
        with closing(sqlite3.connect(self.db_path)) as conn:
            c = conn.cursor()
            c.execute('''CREATE TABLE IF NOT EXISTS kv_state
                         (key TEXT PRIMARY KEY,
                          value TEXT,
                          last_updated TEXT)''')
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        with closing(sqlite3.connect(self.db_path)) as conn:
            c = conn.cursor()
            c.execute("SELECT value FROM kv_state WHERE key=?", (key,))
            result = c.fetchone()
        return result[0] if result else None

    def set(self, key: str, value: str) -> None:
        with closing(sqlite3.connect(self.db_path)) as conn:
            c = conn.cursor()
            c.execute("""INSERT OR REPLACE INTO kv_state
                         (key, value, last_updated)
                         VALUES (?, ?, ?)""",
                      (key, str(value), datetime.now().isoformat()))
            conn.commit()

    def remove(self, key: str) -> None:
        with closing(sqlite3.connect(self.db_path)) as conn:
            c = conn.cursor()
            c.execute("DELETE FROM kv_state WHERE key=?", (key,))
            conn.commit()


class QueryParamStore:
    """Wraps a mapping of URL query params (``st.query_params`` or a dict)."""

    def __init__(self, params: MutableMapping):
        self.params = params

    def get(self, key: str) -> Optional[str]:
        value = self.params.get(key)
        # older Streamlit query param APIs hand back lists
        if isinstance(value, list):
            value = value[0] if value else None
        return value

    def set(self, key: str, value: str) -> None:
        if self.params.get(key) != value:
            self.params[key] = value

    def remove(self, key: str) -> None:
        if key in self.params:
            del self.params[key]
