import os
import sqlite3

from ...internal.utils.formats import asbool
from ...settings import config
from ..dbapi import FetchTracedCursor
from ..dbapi import TracedConnection
from ..dbapi import TracedCursor


config._add(
    "sqlite3",
    dict(
        trace_fetch_methods=asbool(os.getenv("DBTRACE_SQLITE3_TRACE_FETCH_METHODS", default=False)),
    ),
)


def connect(database, *args, **kwargs):
    """Open a traced ``sqlite3`` connection.

    Accepts the arguments of ``sqlite3.connect`` plus ``describes``, the
    description used to pick the configuration of the connection.
    """
    describes = kwargs.pop("describes", None)
    conn = sqlite3.connect(database, *args, **kwargs)
    if describes is None:
        describes = {"adapter": "sqlite3", "database": _database_name(database)}
    return TracedSQLite(conn, describes=describes)


def _database_name(database):
    if isinstance(database, bytes):
        return os.fsdecode(database)
    if isinstance(database, os.PathLike):
        return os.fspath(database)
    return database


class TracedSQLiteCursor(TracedCursor):
    def executemany(self, *args, **kwargs):
        # DEV: SQLite3 Cursor.execute always returns back the cursor instance
        super(TracedSQLiteCursor, self).executemany(*args, **kwargs)
        return self

    def execute(self, *args, **kwargs):
        # DEV: SQLite3 Cursor.execute always returns back the cursor instance
        super(TracedSQLiteCursor, self).execute(*args, **kwargs)
        return self


class TracedSQLiteFetchCursor(TracedSQLiteCursor, FetchTracedCursor):
    pass


class TracedSQLite(TracedConnection):
    def __init__(self, conn, describes=None, pin=None, cursor_cls=None):
        if not cursor_cls:
            # Do not trace `fetch*` methods by default
            cursor_cls = TracedSQLiteFetchCursor if config.sqlite3.trace_fetch_methods else TracedSQLiteCursor

        super(TracedSQLite, self).__init__(
            conn, describes=describes, cfg=config.sqlite3, cursor_cls=cursor_cls, pin=pin
        )

    def execute(self, *args, **kwargs):
        # sqlite has a few extra sugar functions
        return self.cursor().execute(*args, **kwargs)

    def executemany(self, *args, **kwargs):
        return self.cursor().executemany(*args, **kwargs)

    def backup(self, target, *args, **kwargs):
        # sqlite3 checks the type of `target`, it cannot be a wrapped connection
        # https://github.com/python/cpython/blob/4652093e1b816b78e9a585d671a807ce66427417/Modules/_sqlite/connection.c#L1897-L1899
        if isinstance(target, TracedConnection):
            target = target.__wrapped__
        return self.__wrapped__.backup(target, *args, **kwargs)
