"""
Runtime support shared by every generated null type.

What lives here
- NullObject: the base class of every generated type. It pins the semantics a
  null object never gives up, whatever dispatch mode is compiled on top:
  • falsy: bool(null) is False.
  • equality: two instances of the same generated type are equal (and hash alike);
    null objects carry no state worth comparing.
  • stable string form: repr(null) == "<null>" (or "<null:Reference>" for
    mimicry/impersonation) and a dim rendering in rich.
  • copy.copy/copy.deepcopy return the instance itself.
- NullType: the metaclass. It owns construction, so lifecycle rules are enforced
  before any instance exists:
  • Null(...)          public constructor; arguments are ignored. Rejected in singleton mode.
  • Null.instance()    singleton accessor; rejected in plain mode.
  • Null.get()         lifecycle-agnostic accessor; always returns a usable instance.
  • Null.conversions   Maybe/Just/Null/Actual bound to the type.
  The accessors are data descriptors on the metaclass, so a mimicked method
  called `get` or `instance` can never shadow them on the class.
- Singleton holders: one lock-guarded slot per singleton type, kept in a
  module-level registry rather than on the class.
"""
import functools
import threading
import weakref
from types import MethodType

from rich.text import Text

from .conversions import Conversions
from .faults import IllegalAccessorError, IllegalConstructionError
from .utils import rename, whence


class _Holder:
    """Lazily filled, lock-guarded slot for the only instance of a singleton type."""
    __slots__ = ("lock", "instance")

    def __init__(self):
        self.lock = threading.Lock()
        self.instance = None

    def acquire(self, factory):
        # Double-checked: the fast path never touches the lock once filled.
        if (instance := self.instance) is not None:
            return instance
        with self.lock:
            if self.instance is None:
                self.instance = factory()
            return self.instance


_holders = weakref.WeakKeyDictionary()


class NullObject:
    """
    Base class of every generated null type.

    Carries no state; subclasses only add the optional `_origin` slot when the
    type is traceable.
    """
    __slots__ = ()

    def __init__(self, *args, **kwargs):
        pass

    def __eq__(self, other):
        if type(other) is type(self):
            return True
        return NotImplemented

    def __ne__(self, other):
        if type(other) is type(self):
            return False
        return NotImplemented

    def __hash__(self):
        return hash(type(self))

    def __bool__(self):
        return False

    def __repr__(self):
        if (reference := type(self).__descriptor__.reference) is None:
            return "<null>"
        return f"<null:{reference.__qualname__}>"

    def __str__(self):
        return repr(self)

    def __format__(self, spec):
        return format(str(self), spec)

    def __rich__(self):
        """
        Rich protocol hook: render a dim token for human-friendly output.
        """
        return Text(repr(self), style="dim")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


class NullType(type):
    """
    Metaclass of generated null types.

    Every class built with it must carry a compiled `__descriptor__`
    (see nihil.compiler.TypeDescriptor).
    """

    def __call__(cls, *args, **kwargs):
        if cls.__descriptor__.singleton:
            raise IllegalConstructionError(
                f"{cls.__name__} is a singleton and cannot be constructed",
                type=cls,
                hint=f"use {cls.__name__}.instance() or {cls.__name__}.get()",
            )
        return cls.__materialize()

    def __materialize(cls):
        # The one real construction path: every accessor funnels through here.
        self = super().__call__()
        if cls.__descriptor__.traceable:
            object.__setattr__(self, "_origin", whence())
        return self

    @rename("instance")
    def __instance(cls):
        if not cls.__descriptor__.singleton:
            raise IllegalAccessorError(
                f"{cls.__name__} is not a singleton and has no shared instance",
                type=cls,
                hint=f"use {cls.__name__}() or {cls.__name__}.get()",
            )
        return _holders[cls].acquire(cls.__materialize)

    @rename("get")
    def __get(cls):
        if cls.__descriptor__.singleton:
            return cls.__instance()
        return cls.__materialize()

    @property
    def instance(cls):
        """Singleton accessor (lazily creates and caches the only instance)."""
        return MethodType(NullType.__instance, cls)

    @property
    def get(cls):
        """Lifecycle-agnostic accessor."""
        return MethodType(NullType.__get, cls)

    @property
    def conversions(cls):
        """Maybe/Just/Null/Actual bound to this type."""
        return Conversions(cls)

    def __repr__(cls):
        return f"<null-type {cls.__qualname__!r} ({cls.__descriptor__.dispatch.value}, {cls.__descriptor__.lifecycle.value})>"


@functools.cache
def metaclass_for(meta, /):
    """
    Return a metaclass deriving from both NullType and `meta`.

    `meta` is the metaclass of the impersonated reference (`type` otherwise).
    Plain classes use NullType directly; custom metaclasses (ABCMeta for
    instance) get one cached NullType/meta combination shared by every
    reference they build.
    """
    if issubclass(NullType, meta):
        return NullType
    return type(f"NullType[{meta.__name__}]", (NullType, meta), {"__module__": __name__})


def register(cls, /):
    """Attach a singleton holder to a freshly emitted singleton type."""
    _holders[cls] = _Holder()
    return cls


__all__ = (
    "NullObject",
    "NullType",
)
