from typing import Any  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Optional  # noqa:F401

import wrapt

import dbtrace

from .internal.logger import get_logger


log = get_logger(__name__)


# To set attributes on wrapt proxy objects use this prefix:
# http://wrapt.readthedocs.io/en/latest/wrappers.html
_DBTRACE_PIN_NAME = "_dbtrace_pin"
_DBTRACE_PIN_PROXY_NAME = "_self_" + _DBTRACE_PIN_NAME


class Pin(object):
    """Pin (a.k.a Patch INfo) is a small class which is used to
    set tracing metadata on a particular traced connection.
    This is useful if you wanted to, say, trace two different
    database clusters.

        >>> conn = dbtrace.contrib.sqlite3.connect('/tmp/user.db')
        >>> # Override a pin for a specific connection
        >>> Pin.override(conn, service='user-db')

    A pin is immutable once built: use :meth:`override` or :meth:`clone`
    to change the values attached to an object.
    """

    __slots__ = ["app", "tags", "_tracer", "_target", "_config", "_initialized"]

    def __init__(
        self,
        service=None,  # type: Optional[str]
        app=None,  # type: Optional[str]
        tags=None,  # type: Optional[Dict[str, str]]
        tracer=None,
        _config=None,  # type: Optional[Dict[str, Any]]
    ):
        # type: (...) -> None
        self.app = app
        self.tags = tags
        self._tracer = tracer
        self._target = None  # type: Optional[int]
        # keep the configuration attribute internal because the
        # public API to access it is not the Pin class
        self._config = _config or {}  # type: Dict[str, Any]
        self._config["service_name"] = service
        self._initialized = True

    @property
    def service(self):
        # type: () -> Optional[str]
        return self._config["service_name"]

    def __setattr__(self, name, value):
        if getattr(self, "_initialized", False) and name != "_target":
            raise AttributeError("can't mutate a pin, use override() or clone() instead")
        super(Pin, self).__setattr__(name, value)

    @property
    def tracer(self):
        """The tracer of this pin, or the global tracer when none was given."""
        return self._tracer or dbtrace.tracer

    def __repr__(self):
        return "Pin(service=%s, app=%s, tags=%s, tracer=%s)" % (self.service, self.app, self.tags, self.tracer)

    @staticmethod
    def _find(*objs):
        # type: (Any) -> Optional[Pin]
        """
        Return the first :class:`dbtrace.pin.Pin` found on any of the provided objects or `None` if none were found

            >>> pin = Pin._find(cursor, conn)
        """
        for obj in objs:
            pin = Pin.get_from(obj)
            if pin:
                return pin
        return None

    @staticmethod
    def get_from(obj):
        # type: (Any) -> Optional[Pin]
        """Return the pin associated with the given object. If a pin is attached to
        `obj` but the instance is not the owner of the pin, a new pin is cloned and
        attached. This ensures that a pin inherited from a class is a copy for the new
        instance, avoiding that a specific instance overrides other pins values.

            >>> pin = Pin.get_from(conn)
        """
        if obj is None:
            return None

        pin_name = _DBTRACE_PIN_PROXY_NAME if isinstance(obj, wrapt.ObjectProxy) else _DBTRACE_PIN_NAME
        pin = getattr(obj, pin_name, None)
        # detect if the PIN has been inherited from a class
        if pin is not None and pin._target != id(obj):
            pin = pin.clone()
            pin.onto(obj)
        return pin

    @classmethod
    def override(
        cls,
        obj,  # type: Any
        service=None,  # type: Optional[str]
        app=None,  # type: Optional[str]
        tags=None,  # type: Optional[Dict[str, str]]
        tracer=None,
    ):
        # type: (...) -> None
        """Override an object with the given attributes.

        That's the recommended way to customize an already instrumented client, without
        losing existing attributes.

            >>> conn = dbtrace.contrib.sqlite3.connect('/tmp/user.db')
            >>> Pin.override(conn, service='user-db')
        """
        if not obj:
            return

        pin = cls.get_from(obj)
        if pin is None:
            pin = Pin(service=service, app=app, tags=tags, tracer=tracer)
        else:
            pin = pin.clone(service=service, app=app, tags=tags, tracer=tracer)

        pin.onto(obj)

    def enabled(self):
        # type: () -> bool
        """Return true if this pin's tracer is enabled."""
        return bool(self.tracer) and self.tracer.enabled

    def onto(self, obj):
        # type: (Any) -> None
        """Patch this pin onto the given object."""
        try:
            pin_name = _DBTRACE_PIN_PROXY_NAME if isinstance(obj, wrapt.ObjectProxy) else _DBTRACE_PIN_NAME

            # set the target reference; any get_from, clones and retarget the new PIN
            self._target = id(obj)
            return setattr(obj, pin_name, self)
        except AttributeError:
            log.debug("can't pin onto object. skipping", exc_info=True)

    def remove_from(self, obj):
        # type: (Any) -> None
        try:
            pin_name = _DBTRACE_PIN_PROXY_NAME if isinstance(obj, wrapt.ObjectProxy) else _DBTRACE_PIN_NAME

            pin = Pin.get_from(obj)
            if pin is not None:
                delattr(obj, pin_name)
        except AttributeError:
            log.debug("can't remove pin from object. skipping", exc_info=True)

    def clone(
        self,
        service=None,  # type: Optional[str]
        app=None,  # type: Optional[str]
        tags=None,  # type: Optional[Dict[str, str]]
        tracer=None,
    ):
        # type: (...) -> Pin
        """Return a clone of the pin with the given attributes replaced."""
        # do a shallow copy of Pin dicts
        if not tags and self.tags:
            tags = self.tags.copy()

        # we use a copy instead of a deepcopy because we expect configurations
        # to have only a root level dictionary without nested objects.
        config = self._config.copy()

        return Pin(
            service=service or self.service,
            app=app or self.app,
            tags=tags,
            tracer=tracer or self._tracer,
            _config=config,
        )
