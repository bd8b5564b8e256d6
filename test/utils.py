"""
Utility tests (sentinel, coalesce, rename, members, whence).
"""
import copy
import inspect
import unittest
from unittest import TestCase

from nihil.utils import Origin, Unset, UnsetType, coalesce, members, rename, whence


class SentinelTest(TestCase):

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsyAndPrintable(self) -> None:
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):
                pass

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        function = rename(lambda: None, "Owner.method")
        self.assertEqual(function.__qualname__, "Owner.method")
        self.assertEqual(function.__name__, "method")

    def testNameDefaultsToUnset(self) -> None:
        self.assertEqual(rename.__defaults__, (Unset,))
        self.assertIs(rename.__defaults__[0], Unset)

    def testDecoratorForm(self) -> None:
        @rename("work")
        def function():
            pass

        self.assertEqual(function.__name__, "work")

    def testRejectsInvalidArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename(len, "length")
        with self.assertRaises(TypeError):
            rename()


class MembersTest(TestCase):

    def testMethodsAndProperties(self) -> None:
        class Shape:
            sides = 0

            def area(self):
                pass

            @staticmethod
            def unit():
                pass

            @property
            def name(self):
                pass

            def _private(self):
                pass

        methods, properties = members(Shape)
        self.assertEqual(methods, frozenset({"area", "unit"}))
        self.assertEqual(properties, frozenset({"name"}))

    def testOverriddenPropertyBecomesMethod(self) -> None:
        class Base:
            @property
            def value(self):
                pass

        class Derived(Base):
            def value(self):
                pass

        methods, properties = members(Derived)
        self.assertEqual(methods, frozenset({"value"}))
        self.assertEqual(properties, frozenset())


class WhenceTest(TestCase):

    def testPointsAtCaller(self) -> None:
        origin, expected = whence(), inspect.currentframe().f_lineno
        self.assertIsInstance(origin, Origin)
        self.assertEqual(origin.file, __file__)
        self.assertEqual(origin.line, expected)


if __name__ == '__main__':
    unittest.main()
