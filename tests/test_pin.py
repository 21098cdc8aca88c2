from unittest import TestCase

import pytest
import wrapt

import dbtrace
from dbtrace import Pin
from tests.utils import DummyTracer


class PinTestCase(TestCase):
    """TestCase for the `Pin` object that is attached to a traced connection."""

    def setUp(self):
        # define a simple class object
        class Obj(object):
            pass

        self.Obj = Obj

    def test_pin(self):
        # ensure a Pin can be attached to an instance
        obj = self.Obj()
        pin = Pin(service="users-db")
        pin.onto(obj)

        got = Pin.get_from(obj)
        assert got.service == pin.service
        assert got is pin

    def test_pin_proxy(self):
        # ensure a Pin is stored on the proxy and not on the wrapped object
        obj = self.Obj()
        proxy = wrapt.ObjectProxy(obj)
        pin = Pin(service="users-db")
        pin.onto(proxy)

        assert Pin.get_from(proxy) is pin
        assert Pin.get_from(obj) is None

    def test_pin_find(self):
        # ensure Pin will find the first available pin

        # Override service
        obj_a = self.Obj()
        pin = Pin(service="service-a")
        pin.onto(obj_a)

        # Override service
        obj_b = self.Obj()
        pin = Pin(service="service-b")
        pin.onto(obj_b)

        # No Pin set
        obj_c = self.Obj()

        # We find the first pin (obj_b)
        pin = Pin._find(obj_c, obj_b, obj_a)
        assert pin is not None
        assert pin.service == "service-b"

        # We find the first pin (obj_a)
        pin = Pin._find(obj_a, obj_b, obj_c)
        assert pin is not None
        assert pin.service == "service-a"

        # We don't find a pin if none is there
        pin = Pin._find(obj_c, obj_c, obj_c)
        assert pin is None

    def test_cant_pin_with_slots(self):
        # ensure a Pin can't be attached if the __slots__ is defined
        class Obj(object):
            __slots__ = ["value"]

        obj = Obj()
        obj.value = 1

        Pin(service="users-db").onto(obj)
        got = Pin.get_from(obj)
        assert got is None

    def test_cant_modify(self):
        # ensure a Pin is immutable once initialized
        pin = Pin(service="users-db")
        with pytest.raises(AttributeError):
            pin.service = "orders-db"
        with pytest.raises(AttributeError):
            pin.app = "mysql"

    def test_copy(self):
        # ensure a Pin is copied when using the clone methods
        p1 = Pin(service="users-db", app="sqlite", tags={"key": "value"})
        p2 = p1.clone(service="orders-db")
        # values are the same
        assert p1.service == "users-db"
        assert p2.service == "orders-db"
        assert p1.app == "sqlite"
        assert p2.app == "sqlite"
        # but it's a copy
        assert p1.tags is not p2.tags
        assert p1._config is not p2._config
        # of almost everything
        assert p1.tracer is p2.tracer

    def test_tracer(self):
        # ensure a Pin without tracer uses the global one, looked up when needed
        pin = Pin(service="users-db")
        assert pin.tracer is dbtrace.tracer

        tracer = DummyTracer()
        pin = Pin(service="users-db", tracer=tracer)
        assert pin.tracer is tracer
        assert pin.clone().tracer is tracer
        assert pin.enabled()

        tracer.enabled = False
        assert not pin.enabled()

    def test_none(self):
        # ensure get_from returns None if a Pin is not available
        assert Pin.get_from(None) is None

    def test_repr(self):
        # ensure the service name is in the string representation of the Pin
        pin = Pin(service="users-db")
        assert "users-db" in str(pin)

    def test_override(self):
        # ensure Override works for an instance object
        class A(object):
            pass

        Pin(service="users-db", app="sqlite").onto(A)
        a = A()
        Pin.override(a, app="mysql")
        assert Pin.get_from(a).app == "mysql"
        assert Pin.get_from(a).service == "users-db"

        b = A()
        assert Pin.get_from(b).app == "sqlite"
        assert Pin.get_from(b).service == "users-db"

    def test_override_missing(self):
        # ensure overriding an instance doesn't override the Class
        class A(object):
            pass

        a = A()
        assert Pin.get_from(a) is None
        Pin.override(a, service="users-db")
        assert Pin.get_from(a).service == "users-db"

        b = A()
        assert Pin.get_from(b) is None

    def test_remove_from(self):
        obj = self.Obj()
        pin = Pin(service="users-db")
        pin.onto(obj)
        pin.remove_from(obj)
        assert Pin.get_from(obj) is None

        # removing a missing pin is a no-op
        pin.remove_from(obj)

    def test_pin_config(self):
        # ensure `Pin` has a configuration object that can be modified
        obj = self.Obj()
        Pin.override(obj, service="users-db")
        pin = Pin.get_from(obj)
        assert pin._config is not None
        pin._config["integration"] = "sqlite3"
        assert pin._config["integration"] == "sqlite3"

    def test_pin_config_is_a_copy(self):
        # ensure that when a `Pin` is cloned, the config is a copy
        obj = self.Obj()
        Pin.override(obj, service="users-db")
        p1 = Pin.get_from(obj)
        assert p1._config is not None
        p1._config["integration"] = "sqlite3"

        Pin.override(obj, service="orders-db")
        p2 = Pin.get_from(obj)
        assert p2._config is not None
        p2._config["integration"] = "dbapi2"

        assert p1._config["integration"] == "sqlite3"
        assert p2._config["integration"] == "dbapi2"

    def test_pin_does_not_override_global(self):
        # ensure that when a `Pin` is created from a class, the specific
        # instance doesn't override the global one
        class A(object):
            pass

        Pin.override(A, service="users-db")
        global_pin = Pin.get_from(A)
        global_pin._config["integration"] = "sqlite3"

        a = A()
        pin = Pin.get_from(a)
        assert pin is not None
        assert pin._config["integration"] == "sqlite3"
        pin._config["integration"] = "dbapi2"

        assert global_pin._config["integration"] == "sqlite3"
        assert pin._config["integration"] == "dbapi2"
