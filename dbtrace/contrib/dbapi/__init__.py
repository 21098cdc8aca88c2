"""
Generic dbapi tracing code.
"""
import os

import wrapt

from ...ext import db
from ...ext import sql
from ...internal.logger import get_logger
from ...internal.utils.formats import asbool
from ...pin import Pin
from ...settings import config
from ..database import attach_pin
from ..trace_utils import query_span
from ..trace_utils import trace_query


log = get_logger(__name__)

config._add(
    "dbapi2",
    dict(
        trace_fetch_methods=asbool(os.getenv("DBTRACE_DBAPI2_TRACE_FETCH_METHODS", default=False)),
    ),
)


class TracedCursor(wrapt.ObjectProxy):
    """TracedCursor wraps a dbapi cursor and traces its queries."""

    def __init__(self, cursor, pin, cfg):
        super(TracedCursor, self).__init__(cursor)
        pin.clone().onto(self)
        self._self_config = cfg
        self._self_dbtrace_name = cfg.span_name
        self._self_last_execute_operation = None

    def _trace_method(self, method, name, resource, extra_tags, *args, **kwargs):
        """
        Internal function to trace the call to the underlying cursor method
        :param method: The callable to be wrapped
        :param name: The name of the resulting span.
        :param resource: The sql query.
        :param extra_tags: A dict of tags to store into the span's meta
        :param args: The args that will be passed as positional args to the wrapped method
        :param kwargs: The args that will be passed as kwargs to the wrapped method
        :return: The result of the wrapped method invocation
        """
        with query_span(Pin.get_from(self), name, resource, extra_tags) as s:
            try:
                return method(*args, **kwargs)
            finally:
                if s is not None:
                    self._set_rowcount(s)

    def _set_rowcount(self, span):
        try:
            row_count = self.__wrapped__.rowcount
            if isinstance(row_count, int) and row_count >= 0:
                span.set_metric(db.ROWCOUNT, row_count)
        except Exception:
            log.debug("unable to get the row count of %r", self.__wrapped__, exc_info=True)

    def executemany(self, query, *args, **kwargs):
        """Wraps the cursor.executemany method"""
        self._self_last_execute_operation = query
        return self._trace_method(
            self.__wrapped__.executemany,
            self._self_dbtrace_name,
            query,
            {sql.EXECUTEMANY: "true"},
            query,
            *args,
            **kwargs
        )

    def execute(self, query, *args, **kwargs):
        """Wraps the cursor.execute method"""
        self._self_last_execute_operation = query
        return self._trace_method(self.__wrapped__.execute, self._self_dbtrace_name, query, {}, query, *args, **kwargs)

    def callproc(self, proc, *args):
        """Wraps the cursor.callproc method"""
        self._self_last_execute_operation = proc
        return self._trace_method(self.__wrapped__.callproc, self._self_dbtrace_name, proc, {}, proc, *args)

    def __enter__(self):
        # previous versions of the dbapi didn't support context managers. let's
        # reference the func that would be called to ensure that errors
        # messages will be the same.
        self.__wrapped__.__enter__

        # and finally, yield the traced cursor.
        return self


class FetchTracedCursor(TracedCursor):
    """
    Sub-class of :class:`TracedCursor` that also instruments `fetchone`, `fetchall`, and `fetchmany` methods.

    We do not trace these functions by default since they can get very noisy (e.g. `fetchone` with 100k rows).
    """

    def fetchone(self, *args, **kwargs):
        """Wraps the cursor.fetchone method"""
        span_name = "{}.{}".format(self._self_dbtrace_name, "fetchone")
        return self._trace_method(
            self.__wrapped__.fetchone, span_name, self._self_last_execute_operation, {}, *args, **kwargs
        )

    def fetchall(self, *args, **kwargs):
        """Wraps the cursor.fetchall method"""
        span_name = "{}.{}".format(self._self_dbtrace_name, "fetchall")
        return self._trace_method(
            self.__wrapped__.fetchall, span_name, self._self_last_execute_operation, {}, *args, **kwargs
        )

    def fetchmany(self, *args, **kwargs):
        """Wraps the cursor.fetchmany method"""
        span_name = "{}.{}".format(self._self_dbtrace_name, "fetchmany")
        # We want to trace the information about how many rows were requested. Note that this number may be larger
        # the number of rows actually returned if less then requested are available from the query.
        if "size" in kwargs:
            extra_tags = {db.FETCH_SIZE: kwargs.get("size")}
        elif len(args) == 1 and isinstance(args[0], int):
            extra_tags = {db.FETCH_SIZE: args[0]}
        else:
            default_array_size = getattr(self.__wrapped__, "arraysize", None)
            extra_tags = {db.FETCH_SIZE: default_array_size} if default_array_size else {}

        return self._trace_method(
            self.__wrapped__.fetchmany, span_name, self._self_last_execute_operation, extra_tags, *args, **kwargs
        )


class TracedConnection(wrapt.ObjectProxy):
    """TracedConnection wraps a Connection with tracing code.

    The configuration of the connection is resolved once, here, from
    ``describes`` (a key, a URL or a mapping of connection options) against
    the databases registered on ``cfg``.
    """

    def __init__(self, conn, describes=None, cfg=None, cursor_cls=None, pin=None):
        super(TracedConnection, self).__init__(conn)
        cfg = cfg if cfg is not None else config.dbapi2
        name = _get_vendor(conn)
        self._self_dbtrace_name = "{}.connection".format(name)
        self._self_config = cfg

        if not cursor_cls:
            # Do not trace `fetch*` methods by default
            cursor_cls = FetchTracedCursor if cfg.get("trace_fetch_methods") else TracedCursor
        self._self_cursor_cls = cursor_cls

        if pin is not None:
            pin.onto(self)
        else:
            attach_pin(self, describes, cfg, adapter=_get_adapter(conn))

    def _trace_method(self, method, name, extra_tags, *args, **kwargs):
        pin = Pin.get_from(self)
        return trace_query(pin, name, name, extra_tags, method, *args, **kwargs)

    def cursor(self, *args, **kwargs):
        cursor = self.__wrapped__.cursor(*args, **kwargs)
        pin = Pin.get_from(self)
        if not pin:
            return cursor
        return self._self_cursor_cls(cursor, pin, self._self_config)

    def commit(self, *args, **kwargs):
        span_name = "{}.{}".format(self._self_dbtrace_name, "commit")
        return self._trace_method(self.__wrapped__.commit, span_name, {}, *args, **kwargs)

    def rollback(self, *args, **kwargs):
        span_name = "{}.{}".format(self._self_dbtrace_name, "rollback")
        return self._trace_method(self.__wrapped__.rollback, span_name, {}, *args, **kwargs)


def _get_vendor(conn):
    """Return the vendor (e.g postgres, mysql) of the given
    database.
    """
    try:
        name = _get_module_name(conn)
    except Exception:
        log.debug("couldn't parse module name", exc_info=True)
        name = "sql"
    return sql.normalize_vendor(name)


def _get_adapter(conn):
    try:
        return _get_module_name(conn)
    except Exception:
        log.debug("couldn't parse module name", exc_info=True)
        return None


def _get_module_name(conn):
    return conn.__class__.__module__.split(".")[0]
