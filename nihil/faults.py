"""
Faults raised by generated null types.

Every fault carries a stable FaultCode, a lowercased one-sentence message and
read-only diagnostic options (`hint`, `type`, `name`, `value`, ...). Faults
render through rich as

    [ nihil — 13101 | Unknown Method ]
    undefined method 'missing' for <null>
     → define it on the builder, or select black_hole() to absorb unknown messages

Each concrete fault also derives from the builtin exception callers already
catch: UnknownMethodError is an AttributeError (so `hasattr` and
`getattr(null, name, default)` behave), the lifecycle faults are TypeErrors and
InvalidArgumentError is a ValueError.

Faults are raised at the call site and never caught inside this package.

The host application may tune rendering from its __main__ module:
- __prog__:   program name shown in the header (default "nihil").
- __styles__: rich styles keyed by "program", "code", "title", "message",
              "arrow" and "hint".
- __codes__:  FaultCode → label shown instead of the number.
- __docs__:   FaultCode → short documentation, see getdoc().
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .utils import Unset

STYLES = MappingProxyType({
    "program": "bold #E6E6F0",
    "code": "bold #FFB000",
    "title": "bold #FF5F5F",
    "message": "#D0D0D0",
    "arrow": "dim #87D787",
    "hint": "italic #87D787",
})


def _host():
    return __import__("__main__")


class FaultCode(IntEnum):
    """
    stable fault identifiers, by domain.

    - 131xx dispatch:   UNKNOWN_METHOD
    - 132xx lifecycle:  ILLEGAL_CONSTRUCTION, ILLEGAL_ACCESSOR
    - 133xx conversion: INVALID_ARGUMENT
    """
    UNKNOWN_METHOD = 13101

    ILLEGAL_CONSTRUCTION = 13201
    ILLEGAL_ACCESSOR = 13202

    INVALID_ARGUMENT = 13301

    def normalize(self):
        """label for this code: the host's __codes__ entry, else the number."""
        labels = getattr(_host(), "__codes__", None) or {}
        return str(labels.get(self, self.value))


class NullException(Exception):
    """
    base of every nihil fault.

    - message: what went wrong, lowercased.
    - options: read-only diagnostic context; `hint` is rendered below the message.
    """
    code = Unset
    title = "null fault"

    def __init__(self, message=Unset, /, **options):
        if message is not Unset and not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        host = _host()
        styles = {**STYLES, **(getattr(host, "__styles__", None) or {})}
        code = "?" if self.code is Unset else self.code.normalize()

        lines = [
            Text.assemble(
                "[ ",
                (getattr(host, "__prog__", "nihil"), styles["program"]),
                " — ",
                (code, styles["code"]),
                " | ",
                (self.title.title(), styles["title"]),
                " ]",
            ),
            Text(str(self.message) if self.message is not Unset else "", styles["message"]),
        ]
        if hint := self.options.get("hint"):
            lines.append(Text.assemble((" → ", styles["arrow"]), (str(hint), styles["hint"])))
        return Group(*lines)

    def __replace__(self, /, **changes):
        return type(self)(self.message, **(dict(self.options) | changes))


class UnknownMethodError(NullException, AttributeError):
    """
    a message outside the allowed set of a strict, mimic or impersonate type,
    or a name exempted from a black hole.
    """
    code = FaultCode.UNKNOWN_METHOD
    title = "unknown method"

    def __init__(self, message=Unset, /, **options):
        super().__init__(message, **options)
        # AttributeError protocol: lets tracebacks suggest close names.
        self.name = options.get("name")
        self.obj = options.get("obj")


class IllegalConstructionError(NullException, TypeError):
    """the public constructor was called on a singleton null type."""
    code = FaultCode.ILLEGAL_CONSTRUCTION
    title = "illegal construction"


class IllegalAccessorError(NullException, TypeError):
    """the singleton accessor was called on a plain null type."""
    code = FaultCode.ILLEGAL_ACCESSOR
    title = "illegal accessor"


class InvalidArgumentError(NullException, ValueError):
    """Just() or Null() received a value they must reject (kept as `value`)."""
    code = FaultCode.INVALID_ARGUMENT
    title = "invalid argument"

    @property
    def value(self):
        return self.options.get("value")


def getdoc(code, /):
    """documentation the host registered for `code` in __docs__, or None."""
    if not isinstance(code, FaultCode):
        raise TypeError(f"getdoc() expects a FaultCode, got {type(code).__name__!r}")
    return (getattr(_host(), "__docs__", None) or {}).get(code)


__all__ = (
    "NullException",
    "UnknownMethodError",
    "IllegalConstructionError",
    "IllegalAccessorError",
    "InvalidArgumentError",
    "FaultCode",
    "getdoc",
)
