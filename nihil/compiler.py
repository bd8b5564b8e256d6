"""
Nihil type compiler: traits in, null class out.

Two steps
- resolve(traits, overrides, ...) → TypeDescriptor
  Folds the ordered trait selections into one immutable descriptor. Within a
  concern the last selection wins; mimic/impersonate enumerate the reference
  interface here, once.
- emit(descriptor) → class
  Builds an explicit dispatch table (name → method) and installs it in the
  class namespace, then adds the per-type `__getattr__` fallback policy.

Precedence for any message name
  1. inline override (Builder.define)
  2. conversion method, when explicit/implicit conversions are enabled
  3. dispatch behaviour:
     • strict       unknown names raise UnknownMethodError
     • black-hole   unknown names answer the instance itself
     • mimic        names of the reference interface answer `returns`, others are rejected
     • impersonate  as mimic, and the class subclasses the reference; reference
                    members outside the mimicked interface are shadowed

Black-hole exemptions
- EXEMPTIONS lists the methods that keep normal null semantics and are never
  swallowed: equality, hashing, string conversion, formatting and truthiness.
  Builder.exempt() extends the set per type; exempt public names are rejected
  like in strict mode. Dunder names probed through attribute lookup
  (e.g. `__length_hint__`, `__array__`) are never swallowed either.
"""
import inspect
import logging
from collections import namedtuple
from enum import Enum
from fractions import Fraction
from types import MappingProxyType

from .faults import UnknownMethodError
from .objects import NullObject, metaclass_for, register
from .traits import Concern, PREDICATE
from .utils import Unset, members, rename, whence

log = logging.getLogger("nihil.compiler")


class Dispatch(Enum):
    STRICT = "strict"
    BLACK_HOLE = "black-hole"
    MIMIC = "mimic"
    IMPERSONATE = "impersonate"


class Lifecycle(Enum):
    PLAIN = "plain"
    SINGLETON = "singleton"


EXEMPTIONS = frozenset({
    "__eq__",
    "__ne__",
    "__hash__",
    "__str__",
    "__repr__",
    "__bool__",
    "__format__",
})

# Operator protocol methods a black hole answers with itself.
SWALLOWED = (
    "__call__",
    "__getitem__",
    "__setitem__",
    "__delitem__",
    "__enter__",
    "__exit__",
    "__neg__",
    "__pos__",
    "__abs__",
    "__invert__",
) + tuple(
    f"__{prefix}{operator}__"
    for operator in ("add", "sub", "mul", "matmul", "truediv", "floordiv", "mod", "divmod", "pow",
                     "lshift", "rshift", "and", "xor", "or")
    for prefix in ("", "r", "i")
    if (prefix, operator) != ("i", "divmod")
)

EXPLICIT = MappingProxyType({
    "__str__": str,
    "__int__": int,
    "__float__": float,
    "__complex__": complex,
    "__bytes__": bytes,
    "to_str": str,
    "to_int": int,
    "to_float": float,
    "to_complex": complex,
    "to_fraction": Fraction,
    "to_list": list,
    "to_dict": dict,
    "to_tuple": tuple,
})

IMPLICIT = MappingProxyType({
    "__iter__": lambda: iter(()),
    "__len__": int,
    "__contains__": bool,
    "__index__": int,
    "keys": tuple,
})

# Null answers for protocol members of an impersonated reference.
PROTOCOLS = MappingProxyType({
    "__len__": int,
    "__iter__": lambda: iter(()),
    "__reversed__": lambda: iter(()),
    "__contains__": bool,
    "__length_hint__": int,
})


class TypeDescriptor(namedtuple("TypeDescriptor", (
    "name",
    "lifecycle",
    "dispatch",
    "reference",
    "allowed",
    "properties",
    "returns",
    "conversions",
    "overrides",
    "traceable",
    "exemptions",
    "predicates",
    "pebble",
    "equivalents",
))):
    """
    Immutable result of compiling a builder.

    Fields
    - name: class name of the generated type.
    - lifecycle / dispatch: resolved modes (Lifecycle, Dispatch).
    - reference: mimicked/impersonated class, None otherwise.
    - allowed / properties: frozensets of the reference interface (None unless mimicking).
    - returns: value answered by mimicked members.
    - conversions: frozenset of synthesized conversion method names.
    - overrides: read-only mapping name → body.
    - traceable: whether construction captures an Origin.
    - exemptions: names a black hole never swallows.
    - predicates: Unset, or the value `is_*`/`has_*` messages answer.
    - pebble: logger recording received messages, or None.
    - equivalents: values treated as absent by the conversion helpers (None always is).
    """
    __slots__ = ()

    @property
    def singleton(self):
        return self.lifecycle is Lifecycle.SINGLETON

    def __rich_repr__(self):
        yield "name", self.name
        yield "lifecycle", self.lifecycle.value
        yield "dispatch", self.dispatch.value
        yield "reference", self.reference, None
        yield "allowed", self.allowed, None
        yield "conversions", self.conversions, frozenset()
        yield "overrides", tuple(self.overrides), ()
        yield "traceable", self.traceable, False


def resolve(traits, overrides, /, *, name="NullObject", exemptions=(), equivalents=()):
    """
    Fold ordered trait selections into a TypeDescriptor.

    Parameters
    - traits: Iterable[Trait], in selection order.
    - overrides: Mapping[str, Callable], copied.
    - name: class name to emit.
    - exemptions: extra names a black hole never swallows.
    - equivalents: extra values the conversion helpers treat as absent.
    """
    selected = {}
    for trait in traits:
        selected[trait.concern] = trait

    dispatch = Dispatch.STRICT
    reference = allowed = properties = returns = None
    if (trait := selected.get(Concern.DISPATCH)) is not None:
        dispatch = Dispatch(trait.name.replace("_", "-"))
        if dispatch in (Dispatch.MIMIC, Dispatch.IMPERSONATE):
            target = trait.options["reference"]
            allowed, properties = members(target, include_super=trait.options["include_super"])
            reference = target if isinstance(target, type) else type(target)
            returns = trait.options["returns"]

    lifecycle = Lifecycle.PLAIN
    if (trait := selected.get(Concern.LIFECYCLE)) is not None:
        lifecycle = Lifecycle(trait.name)

    conversions = set()
    if Concern.EXPLICIT in selected:
        conversions.update(EXPLICIT)
    if Concern.IMPLICIT in selected:
        conversions.update(IMPLICIT)

    predicates = Unset
    if (trait := selected.get(Concern.PREDICATES)) is not None:
        predicates = trait.options["value"]

    pebble = None
    if (trait := selected.get(Concern.PEBBLE)) is not None:
        pebble = trait.options["logger"]

    return TypeDescriptor(
        name=name,
        lifecycle=lifecycle,
        dispatch=dispatch,
        reference=reference,
        allowed=allowed,
        properties=properties,
        returns=returns,
        conversions=frozenset(conversions),
        overrides=MappingProxyType(dict(overrides)),
        traceable=Concern.TRACE in selected,
        exemptions=EXEMPTIONS | frozenset(exemptions),
        predicates=predicates,
        pebble=pebble,
        equivalents=tuple(equivalents),
    )


def _record(logger, name, args=None, kwargs=None):
    if not logger.isEnabledFor(logging.INFO):
        return
    origin = whence()
    if args is None:
        logger.info("%s from %s:%s", name, origin.file, origin.line)
        return
    signature = ", ".join([*map(repr, args), *(f"{key}={value!r}" for key, value in kwargs.items())])
    logger.info("%s(%s) from %s:%s", name, signature, origin.file, origin.line)


def _respond(descriptor, name, produce, /):
    """
    Synthesize the method `name` answering produce(self).

    Every synthesized member funnels through here so pebble recording stays
    in one place.
    """
    pebble = descriptor.pebble

    def method(self, *args, **kwargs):
        if pebble is not None:
            _record(pebble, name, args, kwargs)
        return produce(self)

    return rename(method, f"{descriptor.name}.{name}")


def _answer(descriptor, name, /):
    """Value a mimicked or predicate member answers."""
    if descriptor.predicates is not Unset and PREDICATE.fullmatch(name):
        return descriptor.predicates
    return descriptor.returns


def _dispatch_table(descriptor, /):
    """
    Build the explicit name → member table for the dispatch mode.
    """
    table = {}

    match descriptor.dispatch:
        case Dispatch.BLACK_HOLE:
            for name in SWALLOWED:
                if name not in descriptor.exemptions:
                    table[name] = _respond(descriptor, name, lambda self: self)
            table["__iter__"] = _respond(descriptor, "__iter__", lambda self: iter(()))

            def __setattr__(self, name, value):
                pass

            def __delattr__(self, name):
                pass

            table["__setattr__"] = rename(__setattr__, f"{descriptor.name}.__setattr__")
            table["__delattr__"] = rename(__delattr__, f"{descriptor.name}.__delattr__")

        case Dispatch.MIMIC | Dispatch.IMPERSONATE:
            for name in descriptor.allowed:
                table[name] = _respond(descriptor, name, lambda self, value=_answer(descriptor, name): value)
            for name in descriptor.properties:
                table[name] = property(rename(
                    lambda self, value=_answer(descriptor, name): value,
                    f"{descriptor.name}.{name}",
                ))

    if descriptor.dispatch is Dispatch.IMPERSONATE:
        table |= _withhold(descriptor, table)

    return table


def _unknown(instance, name, /):
    raise UnknownMethodError(
        f"undefined method {name!r} for {instance!r}",
        name=name,
        obj=instance,
        type=type(instance),
        hint="define it on the builder, or select black_hole() to absorb unknown messages",
    )


class _Withheld:
    """
    Hides a member inherited from an impersonated reference.

    Instance lookups fail like any name outside the mimicked interface. Class
    lookups return the descriptor itself, so ABCMeta and typing still see a
    concrete member.
    """
    __slots__ = ("name",)

    def __init__(self, name, /):
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        _unknown(instance, self.name)

    def __repr__(self):
        return f"<withheld {self.name!r}>"


# Reference members the runtime relies on; never withheld.
MACHINERY = frozenset({
    "__new__",
    "__init__",
    "__init_subclass__",
    "__subclasshook__",
    "__class_getitem__",
    "__getattribute__",
    "__getattr__",
    "__setattr__",
    "__delattr__",
    "__del__",
    "__set_name__",
    "__reduce__",
    "__reduce_ex__",
    "__getnewargs__",
    "__getnewargs_ex__",
    "__getstate__",
    "__sizeof__",
    "__dir__",
})


def _lookup(reference, name, /):
    """First `name` entry along the MRO of `reference` (None when absent)."""
    for klass in reference.__mro__:
        if name in vars(klass):
            return vars(klass)[name]
    return None


def _withhold(descriptor, table, /):
    """
    Shadow every member of the impersonated reference outside `table`.

    Protocol dunders answer neutral values; anything else fails like an
    unknown name. Python-level construction, attribute hooks and finalizers
    of the reference are replaced so none of its code runs on a null instance.
    """
    reference = descriptor.reference
    shadows = {}

    for klass in reference.__mro__[:-1]:
        for name, value in vars(klass).items():
            if name in table or name in shadows or name in MACHINERY or name in vars(NullObject):
                continue
            if name.startswith("_") and not callable(value) and not isinstance(value, property | classmethod | staticmethod):
                # class state: `__slots__`, `__dict__`, `_abc_impl`, `_is_protocol`, ...
                continue
            if name in PROTOCOLS:
                shadows[name] = _respond(descriptor, name, lambda self, produce=PROTOCOLS[name]: produce())
            else:
                shadows[name] = _Withheld(name)

    if isinstance(_lookup(reference, "__new__"), staticmethod):
        allocator = next(
            klass for klass in reference.__mro__
            if "__new__" in vars(klass) and not isinstance(vars(klass)["__new__"], staticmethod)
        )

        def __new__(cls, *args, **kwargs):
            return allocator.__new__(cls)

        shadows["__new__"] = rename(__new__, f"{descriptor.name}.__new__")

    for name in ("__getattribute__", "__setattr__", "__delattr__"):
        if inspect.isfunction(_lookup(reference, name)):
            shadows[name] = getattr(object, name)

    if _lookup(reference, "__del__") is not None:
        def __del__(self):
            pass

        shadows["__del__"] = rename(__del__, f"{descriptor.name}.__del__")

    return shadows


def _fallback(descriptor, /):
    """
    Build the `__getattr__` fallback: reject (strict, mimic, impersonate) or
    absorb (black-hole).
    """
    exemptions = descriptor.exemptions

    def reject(self, name):
        _unknown(self, name)

    if descriptor.dispatch is not Dispatch.BLACK_HOLE:
        return rename(reject, f"{descriptor.name}.__getattr__")

    pebble = descriptor.pebble

    def absorb(self, name):
        if name in exemptions or (name.startswith("__") and name.endswith("__")):
            reject(self, name)
        if descriptor.predicates is not Unset and PREDICATE.fullmatch(name):
            return _respond(descriptor, name, lambda _: descriptor.predicates).__get__(self)
        if pebble is not None:
            _record(pebble, name)
        return self

    return rename(absorb, f"{descriptor.name}.__getattr__")


def emit(descriptor, /):
    """
    Build the null class described by `descriptor`.

    Namespace layering follows the precedence order: dispatch table first,
    conversions over it, overrides over everything.
    """
    bases = (NullObject,)
    if descriptor.dispatch is Dispatch.IMPERSONATE:
        bases += (descriptor.reference,)

    namespace = {
        "__module__": "dynamic-factory::nihil",
        "__qualname__": descriptor.name,
        "__doc__": f"Null object type ({descriptor.dispatch.value}, {descriptor.lifecycle.value}).",
        "__slots__": ("_origin",) if descriptor.traceable else (),
        "__descriptor__": descriptor,
    }
    if descriptor.traceable and any(base.__itemsize__ for base in bases):
        # Variable-size bases (int, tuple, bytes) reject non-empty slots: the origin lives in __dict__.
        del namespace["__slots__"]

    namespace |= _dispatch_table(descriptor)

    for name in descriptor.conversions:
        produce = EXPLICIT.get(name) or IMPLICIT[name]
        # The implicit iterator wins over the black hole's own.
        namespace[name] = _respond(descriptor, name, lambda self, produce=produce: produce())

    namespace["__getattr__"] = _fallback(descriptor)

    if descriptor.traceable:
        namespace["__file__"] = property(rename(lambda self: self._origin.file, "__file__"))
        namespace["__line__"] = property(rename(lambda self: self._origin.line, "__line__"))

    namespace |= descriptor.overrides

    cls = metaclass_for(type(bases[-1]))(descriptor.name, bases, namespace)
    if descriptor.singleton:
        register(cls)

    log.debug(
        "compiled %s: dispatch=%s lifecycle=%s conversions=%d overrides=%s",
        descriptor.name,
        descriptor.dispatch.value,
        descriptor.lifecycle.value,
        len(descriptor.conversions),
        ", ".join(descriptor.overrides) or "-",
    )
    return cls


__all__ = (
    "Dispatch",
    "Lifecycle",
    "TypeDescriptor",
    "EXEMPTIONS",
    "resolve",
    "emit",
)
