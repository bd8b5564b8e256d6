"""
Small helpers shared by the trait catalog, the compiler and generated types.

- Unset / coalesce: a "not provided" marker that never collides with None.
- rename: stable names for synthesized stubs, so tracebacks read well.
- members: the public interface of a class (or example object) for mimicry.
- whence / Origin: the first call site outside this package.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> members(list)[0] >= {"append", "pop"}
    True
"""
import builtins
import functools
import inspect
from collections import namedtuple
from typing import final


@final
class UnsetType:
    """
    Type of the `Unset` marker.

    `Null()` and `Null(None)` mean different things to the conversion helpers,
    so "no argument" cannot be spelled None. The marker is falsy, prints as
    "Unset", survives copying and has exactly one instance.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


Unset = UnsetType()


def coalesce(object, default=None, /):
    """`default` when `object` is Unset, `object` otherwise (None, 0 and "" included)."""
    if object is Unset:
        return default
    return object


def rename(target, name=Unset, /):
    """
    Set `__qualname__` to `name` and `__name__` to its last dotted part.

    rename(function, "Owner.method") renames in place and returns the function;
    rename("method") returns a decorator doing the same.
    """
    if name is Unset:
        if not isinstance(target, str):
            raise TypeError("@rename() expects the new name")

        def decorator(function):
            return rename(function, target)

        return decorator

    if not builtins.callable(target):
        raise TypeError(f"rename() cannot rename {type(target).__name__!r} objects")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        target.__qualname__ = name
        target.__name__ = name.rpartition(".")[2]
    except (AttributeError, TypeError):
        raise TypeError(f"rename() cannot rename builtin {target!r}") from None
    return target


def members(reference, /, include_super=True):
    """
    Enumerate the public interface of a class or of an example object.

    Parameters
    - reference: type | object
      A class, or an example instance whose class (plus any callables stored
      directly on the instance) describes the interface.
    - include_super: bool
      When False, only names declared in the class body itself are considered.

    Returns
    - (methods, properties): two frozensets of public names. Names starting
      with an underscore are never part of the interface.
    """
    cls = reference if isinstance(reference, type) else type(reference)
    namespaces = [vars(klass) for klass in (cls.__mro__ if include_super else (cls,))]

    methods = set()
    properties = set()
    for namespace in namespaces:
        for name, value in namespace.items():
            if name.startswith("_") or name in methods or name in properties:
                continue
            if isinstance(value, property):
                properties.add(name)
            elif callable(value) or isinstance(value, (classmethod, staticmethod)):
                methods.add(name)

    # Example objects may carry per-instance callables (e.g. assigned handlers).
    if not isinstance(reference, type):
        for name, value in getattr(reference, "__dict__", {}).items():
            if not name.startswith("_") and callable(value):
                methods.add(name)

    return frozenset(methods), frozenset(properties - methods)


Origin = namedtuple("Origin", ("file", "line"))
Origin.__doc__ = "Source location (file, line) of the call site that produced a null object."


def whence():
    """
    Return the Origin of the innermost frame that does not belong to this package.

    Frames whose module lives under the `nihil` package (builder, compiler,
    metaclass and synthesized stubs alike) are skipped, so the result always
    points at user code.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_globals.get("__name__", "").partition(".")[0] == __package__:
            frame = frame.f_back
        if frame is None:
            return Origin(None, None)
        return Origin(frame.f_code.co_filename, frame.f_lineno)
    finally:
        del frame


__all__ = (
    "coalesce",
    "rename",
    "members",
    "whence",
    "UnsetType",
    "Origin",
    "Unset",
)
