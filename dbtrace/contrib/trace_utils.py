"""
This module contains utility functions for writing database integrations.

Tracing always fails open: when the span can't be opened, tagged or finished
the query still runs, and the errors raised by the query reach the caller
unchanged.
"""
from contextlib import contextmanager
import sys
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from ..constants import SPAN_KIND
from ..ext import SpanKind
from ..ext import SpanTypes
from ..ext import db
from ..ext import net
from ..internal.logger import get_logger
from ..pin import Pin  # noqa:F401


log = get_logger(__name__)

UNKNOWN_RESOURCE = "<unknown query>"


def query_resource(query):
    # type: (Any) -> str
    """Return the text used as the resource of a query span.

    Statement objects are represented by their ``sql``, ``text`` or
    ``statement`` attribute when it is a string, else by ``str()``. This
    never raises.
    """
    if query is None:
        return UNKNOWN_RESOURCE
    try:
        if isinstance(query, str):
            resource = query
        elif isinstance(query, (bytes, bytearray)):
            resource = bytes(query).decode("utf-8", errors="replace")
        else:
            resource = None
            for name in ("sql", "text", "statement"):
                value = getattr(query, name, None)
                if isinstance(value, str):
                    resource = value
                    break
            if resource is None:
                resource = str(query)
    except Exception:
        log.debug("unable to get the text of query %r", type(query), exc_info=True)
        return UNKNOWN_RESOURCE
    return resource or UNKNOWN_RESOURCE


def _connection_tags(descriptor):
    # type: (Any) -> Dict[str, Any]
    fields = getattr(descriptor, "fields", None)
    if not fields:
        return {}
    tags = {}
    if fields.get("host"):
        tags[net.TARGET_HOST] = fields["host"]
    if isinstance(fields.get("port"), int):
        tags[net.TARGET_PORT] = fields["port"]
    if fields.get("database"):
        tags[db.NAME] = fields["database"]
    return tags


def _start_query_span(pin, span_name, query, extra_tags):
    integration = pin._config.get("integration")
    span = pin.tracer.trace(
        span_name,
        service=pin.service,
        resource=query_resource(query),
        span_type=SpanTypes.SQL.value,
    )
    try:
        span.set_tag(SPAN_KIND, SpanKind.CLIENT.value)
        if pin.app:
            span.set_tag(db.SYSTEM, pin.app)
            if integration:
                span.set_tag("%s.db.vendor" % integration, pin.app)
        span.set_tags(_connection_tags(pin._config.get("descriptor")))
        span.set_tags(pin.tags)
        span.set_tags(extra_tags)
    except Exception:
        # the span still bounds the query, only some of its tags are missing
        log.debug("failed to tag span %r", span, exc_info=True)
    return span


@contextmanager
def query_span(pin, span_name, query, extra_tags=None):
    # type: (Optional[Pin], str, Any, Optional[Dict[str, Any]]) -> Any
    """Bound the body of the ``with`` statement by a query span.

    Yields the span, or ``None`` when the connection is not traced::

        with query_span(pin, 'db.query', sql) as span:
            result = cursor.execute(sql)
    """
    span = None
    try:
        if pin is not None and pin.enabled():
            span = _start_query_span(pin, span_name, query, extra_tags)
    except Exception:
        log.debug("failed to open a span for query %r", query, exc_info=True)
        span = None

    try:
        yield span
    except BaseException:
        if span is not None:
            try:
                span.set_exc_info(*sys.exc_info())
            except Exception:
                log.debug("failed to record the query error on span %r", span, exc_info=True)
        raise
    finally:
        if span is not None:
            try:
                span.finish()
            except Exception:
                log.debug("failed to finish span %r", span, exc_info=True)


def trace_query(pin, span_name, query, extra_tags, method, *args, **kwargs):
    """Call ``method(*args, **kwargs)`` inside a query span and return its result."""
    with query_span(pin, span_name, query, extra_tags):
        return method(*args, **kwargs)
