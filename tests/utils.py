import contextlib
import os
import threading
import unittest

import wrapt

import dbtrace
from dbtrace.span import Span
from dbtrace.tracer import Tracer
from dbtrace.writer import BaseWriter


@contextlib.contextmanager
def override_env(env):
    """
    Temporarily override ``os.environ`` with provided values::

        >>> with override_env(dict(DBTRACE_SQLITE3_SERVICE='users-db')):
            # Your test
    """
    # Copy the full original environment
    original = dict(os.environ)

    os.environ.update(env)
    try:
        yield
    finally:
        # Full clear the environment out and reset back to the original
        os.environ.clear()
        os.environ.update(original)


@contextlib.contextmanager
def override_config(integration, values):
    """
    Temporarily override an integration configuration value::

        >>> with override_config('sqlite3', dict(trace_fetch_methods=True)):
            # Your test
    """
    options = getattr(dbtrace.config, integration)

    original = dict((key, options.get(key)) for key in values.keys())

    options.update(values)
    try:
        yield
    finally:
        options.update(original)


class DummyWriter(BaseWriter):
    """DummyWriter is a small fake writer used for tests."""

    def __init__(self):
        self._lock = threading.Lock()
        self.spans = []

    def write(self, spans):
        with self._lock:
            self.spans += spans

    def pop(self):
        with self._lock:
            s = self.spans
            self.spans = []
            return s


class DummyTracer(Tracer):
    """
    DummyTracer is a tracer which uses the DummyWriter by default
    """

    def __init__(self):
        super(DummyTracer, self).__init__(writer=DummyWriter(), enabled=True)

    def pop(self):
        return self.writer.pop()


class TestSpanContainer(object):
    def _ensure_test_spans(self, spans):
        return [span if isinstance(span, TestSpan) else TestSpan(span) for span in spans]

    @property
    def spans(self):
        return self._ensure_test_spans(self.get_spans())

    def get_spans(self):
        raise NotImplementedError

    def assert_span_count(self, count):
        assert len(self.spans) == count, "Span count {0} != {1}".format(len(self.spans), count)

    def assert_has_spans(self):
        assert len(self.spans), "No spans found"

    def assert_has_no_spans(self):
        assert len(self.spans) == 0, "Span count {0}".format(len(self.spans))

    def filter_spans(self, *args, **kwargs):
        """
        Helper to filter current spans by provided parameters
        """
        for span in self.spans:
            if span.matches(*args, **kwargs):
                yield span

    def find_span(self, *args, **kwargs):
        span = next(self.filter_spans(*args, **kwargs), None)
        assert span is not None, "No span found for filter {0!r} {1!r}, have {2} spans".format(
            args, kwargs, len(self.spans)
        )
        return span


class TestSpan(object):
    """Wraps a :class:`dbtrace.span.Span` to add assertion helpers."""

    __test__ = False

    def __init__(self, span):
        if isinstance(span, TestSpan):
            span = span._span

        # DEV: Use `object.__setattr__` to by-pass this class's `__setattr__`
        object.__setattr__(self, "_span", span)

    def __getattr__(self, key):
        return getattr(self._span, key)

    def __setattr__(self, key, value):
        """Pass through all assignment to the base :class:`dbtrace.span.Span`"""
        return setattr(self._span, key, value)

    def __eq__(self, other):
        if isinstance(other, TestSpan):
            return other._span == self._span
        elif isinstance(other, Span):
            return other == self._span
        return other == self

    def __repr__(self):
        return repr(self._span)

    def matches(self, **kwargs):
        for name, value in kwargs.items():
            if getattr(self, name) != value:
                return False

        return True

    def assert_matches(self, **kwargs):
        for name, value in kwargs.items():
            if name == "meta":
                self.assert_meta(value)
            elif name == "metrics":
                self.assert_metrics(value)
            else:
                assert hasattr(self, name), "{0!r} does not have property {1!r}".format(self, name)
                assert getattr(self, name) == value, "{0!r} property {1}: {2!r} != {3!r}".format(
                    self, name, getattr(self, name), value
                )

    def assert_meta(self, meta, exact=False):
        if exact:
            assert self.meta == meta
        else:
            for key, value in meta.items():
                assert key in self.meta, "{0} meta does not have property {1!r}".format(self, key)
                assert self.meta[key] == value, "{0} meta property {1!r}: {2!r} != {3!r}".format(
                    self, key, self.meta[key], value
                )

    def assert_metrics(self, metrics, exact=False):
        if exact:
            assert self.metrics == metrics
        else:
            for key, value in metrics.items():
                assert key in self.metrics, "{0} metrics does not have property {1!r}".format(self, key)
                assert self.metrics[key] == value, "{0} metrics property {1!r}: {2!r} != {3!r}".format(
                    self, key, self.metrics[key], value
                )


class BaseTestCase(unittest.TestCase):
    """
    BaseTestCase extends ``unittest.TestCase`` to provide some useful helpers/assertions
    """

    def assert_is_wrapped(self, obj):
        self.assertTrue(isinstance(obj, wrapt.ObjectProxy))

    def assert_is_not_wrapped(self, obj):
        self.assertFalse(isinstance(obj, wrapt.ObjectProxy))

    override_config = staticmethod(override_config)
    override_env = staticmethod(override_env)


class TracerTestCase(TestSpanContainer, BaseTestCase):
    """
    TracerTestCase is a base test case for when you need access to a dummy tracer and span assertions
    """

    def setUp(self):
        """Before each test case, setup a dummy tracer to use"""
        self.tracer = DummyTracer()

        super(TracerTestCase, self).setUp()

    def tearDown(self):
        """After each test case, reset and remove the dummy tracer"""
        super(TracerTestCase, self).tearDown()

        self.reset()
        delattr(self, "tracer")

    def get_spans(self):
        """Required subclass method for TestSpanContainer"""
        return self.tracer.writer.spans

    def pop_spans(self):
        return self.tracer.pop()

    def reset(self):
        """Helper to reset the existing list of spans created"""
        self.tracer.writer.pop()

    @contextlib.contextmanager
    def override_global_tracer(self, tracer=None):
        original = dbtrace.tracer
        tracer = tracer or self.tracer
        dbtrace.tracer = tracer
        try:
            yield
        finally:
            dbtrace.tracer = original
