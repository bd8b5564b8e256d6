"""
Nihil trait catalog.

A trait is an immutable selection of one behavior a null type can have. The
catalog is fixed: every trait belongs to exactly one Concern, and within a
concern only the most recent selection is honoured when a builder compiles
("last selection wins", never an error).

Concerns and their traits
- DISPATCH:    strict (default), black_hole, mimic(T), impersonate(T)
- LIFECYCLE:   plain (default), singleton
- TRACE:       traceable
- EXPLICIT:    explicit_conversions
- IMPLICIT:    implicit_conversions
- PREDICATES:  predicates_return(value)
- PEBBLE:      pebble(logger)

Selecting the same trait twice has no further effect except that the second
call's parameters replace the first's. Mixing mimic(A) and impersonate(B)
keeps whichever came last, parameters included.

Example
    >>> from nihil import traits
    >>> traits.mimic(list)
    Trait(name='mimic', concern=<Concern.DISPATCH: 'dispatch'>, options=...)
"""
import logging
import re
from collections import namedtuple
from enum import Enum
from types import MappingProxyType


class Concern(Enum):
    """Groups of mutually exclusive traits."""
    DISPATCH = "dispatch"
    LIFECYCLE = "lifecycle"
    TRACE = "trace"
    EXPLICIT = "explicit"
    IMPLICIT = "implicit"
    PREDICATES = "predicates"
    PEBBLE = "pebble"


class Trait(namedtuple("Trait", ("name", "concern", "options"))):
    """
    One trait selection: catalog name, concern and read-only parameters.

    Instances are produced by the factories of this module; build them by hand
    only through `Trait.of(name, **options)` so the concern stays consistent
    with the catalog.
    """
    __slots__ = ()

    @classmethod
    def of(cls, name, /, **options):
        try:
            concern = CATALOG[name]
        except KeyError:
            raise ValueError(f"unknown trait {name!r} (choose from {', '.join(CATALOG)})") from None
        return cls(name, concern, MappingProxyType(options))

    def __rich_repr__(self):
        yield self.name
        yield from self.options.items()


CATALOG = MappingProxyType({
    "strict": Concern.DISPATCH,
    "black_hole": Concern.DISPATCH,
    "mimic": Concern.DISPATCH,
    "impersonate": Concern.DISPATCH,
    "plain": Concern.LIFECYCLE,
    "singleton": Concern.LIFECYCLE,
    "traceable": Concern.TRACE,
    "explicit_conversions": Concern.EXPLICIT,
    "implicit_conversions": Concern.IMPLICIT,
    "predicates_return": Concern.PREDICATES,
    "pebble": Concern.PEBBLE,
})

# Method names treated as predicates by predicates_return().
PREDICATE = re.compile(r"(?:is|has)_\w+")


def strict():
    return Trait.of("strict")


def black_hole():
    return Trait.of("black_hole")


def mimic(reference, /, *, include_super=True, returns=None):
    """
    Restrict the null type to the public interface of `reference`.

    `reference` is a class, or an example object whose class (and per-instance
    callables) define the interface. Mimicked methods return `returns`.
    """
    if not isinstance(include_super, bool):
        raise TypeError("mimic() include_super must be a bool")
    return Trait.of("mimic", reference=reference, include_super=include_super, returns=returns)


def impersonate(reference, /, *, include_super=True, returns=None):
    """
    Like mimic(), but the generated class also subclasses `reference`.
    """
    if not isinstance(reference, type):
        raise TypeError("impersonate() argument must be a class")
    if not isinstance(include_super, bool):
        raise TypeError("impersonate() include_super must be a bool")
    return Trait.of("impersonate", reference=reference, include_super=include_super, returns=returns)


def plain():
    return Trait.of("plain")


def singleton():
    return Trait.of("singleton")


def traceable():
    return Trait.of("traceable")


def explicit_conversions():
    return Trait.of("explicit_conversions")


def implicit_conversions():
    return Trait.of("implicit_conversions")


def predicates_return(value, /):
    """Make every `is_*`/`has_*` message answer `value`."""
    return Trait.of("predicates_return", value=value)


def pebble(logger=None, /):
    """
    Record every message the null object receives.

    `logger` defaults to the "nihil.pebble" logger; records are emitted at INFO.
    """
    if logger is None:
        logger = logging.getLogger("nihil.pebble")
    if not isinstance(logger, logging.Logger | logging.LoggerAdapter):
        raise TypeError("pebble() argument must be a logging.Logger")
    return Trait.of("pebble", logger=logger)


__all__ = (
    "Concern",
    "Trait",
    "CATALOG",
    "PREDICATE",
    "strict",
    "black_hole",
    "mimic",
    "impersonate",
    "plain",
    "singleton",
    "traceable",
    "explicit_conversions",
    "implicit_conversions",
    "predicates_return",
    "pebble",
)
