"""
Conversion helpers between absent values and null objects.

Each generated type exposes its own namespace of the four helpers:

    >>> Maybe, Just, Null, Actual = NullObject.conversions
    >>> Maybe(None)         # <null>
    >>> Maybe(42)           # 42
    >>> Just(42)            # 42
    >>> Null()              # <null>
    >>> Actual(Null())      # None

"Absent" means None plus any value registered with Builder.null_equivalents().
Maybe, Just and Actual also take a zero-argument `thunk`, evaluated once in
place of the positional value. Every null instance is obtained through the
type's lifecycle-agnostic `get()` accessor, so the helpers work the same for
plain and singleton types.
"""
from .faults import InvalidArgumentError
from .utils import Unset


class Conversions:
    """
    Maybe/Just/Null/Actual bound to one generated null type.

    Unpacks in that order: `Maybe, Just, Null, Actual = cls.conversions`.
    """
    __slots__ = ("type",)

    def __init__(self, type, /):
        self.type = type

    def __iter__(self):
        yield self.Maybe
        yield self.Just
        yield self.Null
        yield self.Actual

    def __repr__(self):
        return f"conversions({self.type.__qualname__})"

    def absent(self, object, /):
        """
        True when `object` is None or one of the type's null equivalents.

        Equivalents match by identity, or by equality with a value of the very
        same type, so objects whose `==` raises or broadcasts (arrays) are
        never compared against unrelated equivalents.
        """
        if object is None:
            return True
        return any(
            object is value or (type(object) is type(value) and object == value)
            for value in self.type.__descriptor__.equivalents
        )

    def nullish(self, object, /):
        """True when `object` is absent or already an instance of the type."""
        return isinstance(object, self.type) or self.absent(object)

    @staticmethod
    def _evaluate(object, thunk, function, /):
        if thunk is Unset:
            return object
        if not callable(thunk):
            raise TypeError(f"{function}() thunk must be callable")
        return thunk()

    def Maybe(self, object=None, /, *, thunk=Unset):
        object = self._evaluate(object, thunk, "Maybe")
        if isinstance(object, self.type):
            return object
        if self.absent(object):
            return self.type.get()
        return object

    def Just(self, object=None, /, *, thunk=Unset):
        object = self._evaluate(object, thunk, "Just")
        if self.nullish(object):
            raise InvalidArgumentError(
                f"Just() rejects {object!r}: a present value is required",
                value=object,
                hint="use Maybe() when the value may be absent",
            )
        return object

    def Null(self, object=Unset, /):
        if object is Unset or self.nullish(object):
            return self.type.get()
        raise InvalidArgumentError(
            f"Null() rejects {object!r}: only absent values or null objects convert to null",
            value=object,
            hint="use Maybe() to keep present values",
        )

    def Actual(self, object=None, /, *, thunk=Unset):
        object = self._evaluate(object, thunk, "Actual")
        if self.nullish(object):
            return None
        return object


__all__ = ("Conversions",)
