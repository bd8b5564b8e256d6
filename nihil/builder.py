r"""
Nihil builder: configure traits, compile a null type.

Overview
- Builder
  A mutable configuration session. Each trait of the catalog has one method;
  `define` adds inline method overrides; `compile` hands everything to the
  type compiler and returns a fresh class. Compiling never resets the builder
  and later configuration never touches classes compiled earlier.

- build(configure)
  Top-level entry point: runs `configure(builder)` and compiles the result.
  Also usable as a decorator, in which case the class is named after the
  decorated function.

Conflict resolution (read this once)
- Traits are grouped by concern (dispatch, lifecycle, tracing, conversions,
  predicates, pebble). Within one concern the LAST selection wins; there is no
  error for conflicting selections. `black_hole()` followed by `mimic(T)` is a
  mimic type; `singleton()` followed by `plain()` is a plain type.
- Repeating a selection has no extra effect except that its parameters replace
  the previous ones (`mimic(A)` then `mimic(B)` mimics B).
- Overrides always beat synthesized members; the last `define` of a name wins.

Quick example:
    >>> from nihil import build
    >>> @build
    ... def NullLogger(config):
    ...     config.mimic(logging.Logger)
    ...     config.singleton()
    ...     config.define("__repr__", lambda self: "<silent logger>")
    ...
    >>> NullLogger.get().info("dropped")   # None
    >>> NullLogger()                       # IllegalConstructionError
"""
import builtins

from . import traits
from .compiler import emit, resolve
from .utils import Unset, coalesce


def _validate(name, method, /):
    if not isinstance(name, str) or not name.isidentifier():
        raise ValueError(f"{method}() name must be an identifier, got {name!r}")


class Builder:
    """
    Mutable configuration session for one null type.

    Every trait method returns the builder, so calls chain:
        Builder().black_hole().singleton().traceable().compile("Nothing")
    """

    def __init__(self):
        self._traits = []
        self._overrides = {}
        self._exemptions = set()
        self._equivalents = []

    @property
    def traits(self):
        """Selected traits, in selection order."""
        return tuple(self._traits)

    @property
    def overrides(self):
        return dict(self._overrides)

    def select(self, trait, /):
        """Record a catalog trait (see nihil.traits)."""
        if not isinstance(trait, traits.Trait):
            raise TypeError("select() argument must be a trait")
        self._traits.append(trait)
        return self

    # --- dispatch ---

    def strict(self):
        return self.select(traits.strict())

    def black_hole(self):
        return self.select(traits.black_hole())

    def mimic(self, reference, /, *, include_super=True, returns=None):
        return self.select(traits.mimic(reference, include_super=include_super, returns=returns))

    def impersonate(self, reference, /, *, include_super=True, returns=None):
        return self.select(traits.impersonate(reference, include_super=include_super, returns=returns))

    # --- lifecycle ---

    def plain(self):
        return self.select(traits.plain())

    def singleton(self):
        return self.select(traits.singleton())

    # --- everything else ---

    def traceable(self):
        return self.select(traits.traceable())

    def explicit_conversions(self):
        return self.select(traits.explicit_conversions())

    def implicit_conversions(self):
        return self.select(traits.implicit_conversions())

    def predicates_return(self, value, /):
        return self.select(traits.predicates_return(value))

    def pebble(self, logger=None, /):
        return self.select(traits.pebble(logger))

    def exempt(self, *names):
        """Names a black hole must never swallow, on top of the defaults."""
        for name in names:
            if not isinstance(name, str) or not name.isidentifier():
                raise ValueError(f"exempt() names must be identifiers, got {name!r}")
        self._exemptions.update(names)
        return self

    def null_equivalents(self, *values):
        """Values the conversion helpers treat as absent, besides None."""
        self._equivalents.extend(values)
        return self

    def define(self, name, body=Unset, /):
        """
        Override (or add) a method.

        Forms
        - define("name", callable) -> builder
        - @define / @define("name") -> decorator returning the function unchanged

        The body is installed as an ordinary method: it receives the null
        instance as its first argument.
        """
        if builtins.callable(name) and body is Unset:
            self.define(name.__name__, name)
            return name
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"define() name must be an identifier, got {name!r}")
        if body is Unset:
            def decorator(function):
                self.define(name, function)
                return function
            return decorator
        if not builtins.callable(body) and not isinstance(body, (staticmethod, classmethod, property)):
            raise TypeError("define() body must be callable")
        self._overrides[name] = body
        return self

    def describe(self, name="NullObject", /):
        """Resolve the current configuration into a TypeDescriptor without emitting a class."""
        _validate(name, "describe")
        return self._resolve(name)

    def compile(self, name="NullObject", /):
        _validate(name, "compile")
        return emit(self._resolve(name))

    def _resolve(self, name, /):
        return resolve(
            self._traits,
            self._overrides,
            name=name,
            exemptions=self._exemptions,
            equivalents=self._equivalents,
        )

    def __repr__(self):
        return f"Builder({', '.join(trait.name for trait in self._traits)})"


def build(configure=None, /, *, name=Unset):
    """
    Build a null type from a configuration callable.

    Forms
    - build(lambda config: config.black_hole(), name="Nothing") -> class
    - build(name="Nothing") -> the default strict, plain class
    - @build -> class named after the decorated function

    The configuration callable receives a fresh Builder; its return value is
    ignored.
    """
    builder = Builder()
    if configure is not None:
        if not callable(configure):
            raise TypeError("build() argument must be callable")
        configure(builder)
    default = getattr(configure, "__name__", "")
    name = coalesce(name, default if default.isidentifier() else "NullObject")
    _validate(name, "build")
    return builder.compile(name)


__all__ = (
    "Builder",
    "build",
)
