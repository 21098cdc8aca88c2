import sys
import time
import traceback
from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

from .constants import ERROR_MSG
from .constants import ERROR_STACK
from .constants import ERROR_TYPE
from .constants import MAX_STACK_FRAMES
from .internal.logger import get_logger
from .internal.utils.formats import stringify


log = get_logger(__name__)


class Span(object):
    """A single traced unit of work, e.g. one query.

    A span is opened by :meth:`dbtrace.tracer.Tracer.trace` and must be finished
    with :meth:`finish` (or by using it as a context manager). Finishing is
    idempotent: the span is handed to the tracer only the first time.
    """

    __slots__ = [
        "name",
        "service",
        "resource",
        "span_type",
        "meta",
        "metrics",
        "error",
        "start",
        "duration",
        "_tracer",
        "_on_finish",
    ]

    def __init__(
        self,
        name,  # type: str
        service=None,  # type: Optional[str]
        resource=None,  # type: Optional[str]
        span_type=None,  # type: Optional[str]
        start=None,  # type: Optional[float]
        on_finish=None,
    ):
        # type: (...) -> None
        self.name = name
        self.service = service
        self.resource = resource or name
        self.span_type = span_type
        self.meta = {}  # type: Dict[str, str]
        self.metrics = {}  # type: Dict[str, float]
        self.error = 0
        self.start = start if start is not None else time.time()
        self.duration = None  # type: Optional[float]
        self._on_finish = on_finish

    @property
    def finished(self):
        # type: () -> bool
        return self.duration is not None

    def finish(self, finish_time=None):
        # type: (Optional[float]) -> None
        """Mark the end time of the span and submit it to the tracer.
        If the span is already finished, this is a no-op.
        """
        if self.finished:
            return

        ft = finish_time if finish_time is not None else time.time()
        self.duration = max(ft - self.start, 0.0)

        if self._on_finish is not None:
            try:
                self._on_finish(self)
            except Exception:
                log.debug("error recording finished span %r", self, exc_info=True)

    def set_tag(self, key, value=None):
        # type: (str, Any) -> None
        """Set a tag key/value pair on the span. ``None`` values are ignored."""
        if value is None:
            return
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self.meta[key] = stringify(value)
        else:
            self.set_metric(key, value)

    def set_tags(self, tags):
        # type: (Optional[Dict[str, Any]]) -> None
        """Set a dictionary of tags on the span."""
        if tags:
            for k, v in tags.items():
                self.set_tag(k, v)

    def get_tag(self, key):
        # type: (str) -> Optional[str]
        return self.meta.get(key)

    def set_metric(self, key, value):
        # type: (str, Any) -> None
        try:
            value = float(value)
        except (TypeError, ValueError):
            log.debug("ignoring not number metric %s:%s", key, value)
            return
        self.metrics[key] = value

    def get_metric(self, key):
        # type: (str) -> Optional[float]
        return self.metrics.get(key)

    def set_exc_info(self, exc_type, exc_val, exc_tb):
        """Tag the span with an error tuple as from `sys.exc_info()`."""
        if not (exc_type and exc_val):
            return

        self.error = 1

        tb = "".join(traceback.format_exception(exc_type, exc_val, exc_tb, limit=MAX_STACK_FRAMES))
        exc_type_str = "%s.%s" % (exc_type.__module__, exc_type.__name__)

        self.meta[ERROR_MSG] = str(exc_val)
        self.meta[ERROR_TYPE] = exc_type_str
        self.meta[ERROR_STACK] = tb

    def set_traceback(self):
        """If the current stack has an exception, tag the span with the relevant error info."""
        self.set_exc_info(*sys.exc_info())

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type:
                self.set_exc_info(exc_type, exc_val, exc_tb)
            self.finish()
        except Exception:
            log.exception("error closing trace")

    def __repr__(self):
        return "<Span(name=%s,service=%s,resource=%s,error=%s)>" % (
            self.name,
            self.service,
            self.resource,
            self.error,
        )
