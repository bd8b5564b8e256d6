"""
Builder behavioral tests (trait accumulation, conflict resolution, overrides).

Scope
- Validate that traits accumulate in order and resolve per concern by last selection.
- Validate idempotent re-selection and parameter replacement.
- Validate inline overrides (function and decorator forms) and their precedence.
- Validate the build() entry point, naming, and configuration errors.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (build, Builder, traits).
"""
import unittest
from unittest import TestCase

from nihil import Builder, Dispatch, Lifecycle, NullType, UnknownMethodError, build, traits


class Duck:
    def quack(self):
        return "quack"


class Goose:
    def honk(self):
        return "honk"


class TestTraitAccumulation(TestCase):
    """Behavioral tests for trait selection and per-concern resolution."""

    def testDefaultsAreStrictAndPlain(self):
        descriptor = Builder().describe()
        self.assertIs(descriptor.dispatch, Dispatch.STRICT)
        self.assertIs(descriptor.lifecycle, Lifecycle.PLAIN)
        self.assertFalse(descriptor.traceable)
        self.assertEqual(descriptor.conversions, frozenset())
        self.assertEqual(dict(descriptor.overrides), {})

    def testTraitsAccumulateInOrder(self):
        builder = Builder().black_hole().singleton().traceable()
        self.assertEqual([trait.name for trait in builder.traits], ["black_hole", "singleton", "traceable"])

    def testLastDispatchSelectionWins(self):
        descriptor = Builder().black_hole().mimic(Duck).describe()
        self.assertIs(descriptor.dispatch, Dispatch.MIMIC)
        self.assertIs(descriptor.reference, Duck)

        descriptor = Builder().mimic(Duck).black_hole().describe()
        self.assertIs(descriptor.dispatch, Dispatch.BLACK_HOLE)
        self.assertIsNone(descriptor.reference)

    def testLastLifecycleSelectionWins(self):
        self.assertIs(Builder().singleton().plain().describe().lifecycle, Lifecycle.PLAIN)
        self.assertIs(Builder().plain().singleton().describe().lifecycle, Lifecycle.SINGLETON)

    def testStrictResetsDispatch(self):
        cls = Builder().black_hole().strict().compile()
        with self.assertRaises(UnknownMethodError):
            cls().anything

    def testRepeatedSelectionReplacesParameters(self):
        descriptor = Builder().mimic(Duck).mimic(Goose).describe()
        self.assertIs(descriptor.reference, Goose)
        self.assertEqual(descriptor.allowed, frozenset({"honk"}))

    def testRepeatedSelectionIsIdempotent(self):
        once = Builder().singleton().traceable().describe()
        twice = Builder().singleton().singleton().traceable().traceable().describe()
        self.assertEqual(once.lifecycle, twice.lifecycle)
        self.assertEqual(once.traceable, twice.traceable)

    def testConversionsCombine(self):
        descriptor = Builder().explicit_conversions().implicit_conversions().describe()
        self.assertIn("to_str", descriptor.conversions)
        self.assertIn("__iter__", descriptor.conversions)

    def testSelectAcceptsCatalogTraits(self):
        descriptor = Builder().select(traits.black_hole()).select(traits.singleton()).describe()
        self.assertIs(descriptor.dispatch, Dispatch.BLACK_HOLE)
        self.assertIs(descriptor.lifecycle, Lifecycle.SINGLETON)

    def testSelectRejectsNonTraits(self):
        with self.assertRaises(TypeError):
            Builder().select("black_hole")

    def testUnknownTraitName(self):
        with self.assertRaises(ValueError):
            traits.Trait.of("white_hole")

    def testExemptionsExtendDefaults(self):
        descriptor = Builder().exempt("close").describe()
        self.assertIn("close", descriptor.exemptions)
        self.assertIn("__eq__", descriptor.exemptions)

    def testExemptRejectsNonIdentifiers(self):
        with self.assertRaises(ValueError):
            Builder().exempt("not a name")

    def testImpersonateRequiresClass(self):
        with self.assertRaises(TypeError):
            Builder().impersonate(Duck())

    def testPebbleRequiresLogger(self):
        with self.assertRaises(TypeError):
            Builder().pebble(print)


class TestOverrides(TestCase):
    """Behavioral tests for inline method overrides."""

    def testDefineAddsMethod(self):
        cls = Builder().define("answer", lambda self: 42).compile()
        self.assertEqual(cls().answer(), 42)

    def testDefineReceivesInstance(self):
        cls = Builder().define("me", lambda self: self).compile()
        null = cls()
        self.assertIs(null.me(), null)

    def testDefineDecoratorForms(self):
        builder = Builder()

        @builder.define
        def first(self):
            return 1

        @builder.define("second")
        def anything(self):
            return 2

        null = builder.compile()()
        self.assertEqual(null.first(), 1)
        self.assertEqual(null.second(), 2)
        # The decorator returns the function unchanged.
        self.assertEqual(first(None), 1)

    def testLastDefineWins(self):
        cls = Builder().define("value", lambda self: 1).define("value", lambda self: 2).compile()
        self.assertEqual(cls().value(), 2)

    def testOverrideBeatsMimicry(self):
        cls = Builder().mimic(Duck).define("quack", lambda self: "override").compile()
        self.assertEqual(cls().quack(), "override")

    def testOverrideBeatsConversion(self):
        cls = Builder().explicit_conversions().define("to_int", lambda self: 7).compile()
        null = cls()
        self.assertEqual(null.to_int(), 7)
        self.assertEqual(int(null), 0)

    def testOverrideBeatsBaseSemantics(self):
        cls = Builder().black_hole().define("__repr__", lambda self: "nothing").compile()
        self.assertEqual(repr(cls()), "nothing")

    def testDefineValidatesArguments(self):
        with self.assertRaises(ValueError):
            Builder().define("not a name", lambda self: None)
        with self.assertRaises(TypeError):
            Builder().define("value", 42)


class TestBuild(TestCase):
    """Behavioral tests for the build() entry point."""

    def testBuildWithCallable(self):
        cls = build(lambda config: config.black_hole(), name="Nothing")
        self.assertIsInstance(cls, NullType)
        self.assertEqual(cls.__name__, "Nothing")
        null = cls()
        self.assertIs(null.a().b().c(), null)

    def testBuildDecoratorNamesType(self):
        @build
        def NullDuck(config):
            config.mimic(Duck)

        self.assertEqual(NullDuck.__name__, "NullDuck")
        self.assertIsNone(NullDuck().quack())

    def testBuildLambdaDefaultsName(self):
        self.assertEqual(build(lambda config: None).__name__, "NullObject")

    def testBuildWithoutConfiguration(self):
        cls = build()
        self.assertIs(cls.__descriptor__.dispatch, Dispatch.STRICT)

    def testBuildRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            build(42)

    def testCompileRejectsBadName(self):
        with self.assertRaises(ValueError):
            Builder().compile("bad name")

    def testNameErrorsNameTheCaller(self):
        with self.assertRaisesRegex(ValueError, r"^describe\(\) name"):
            Builder().describe("bad name")
        with self.assertRaisesRegex(ValueError, r"^compile\(\) name"):
            Builder().compile("1st")
        with self.assertRaisesRegex(ValueError, r"^build\(\) name"):
            build(name="null-object")

    def testLaterConfigurationDoesNotAffectCompiledTypes(self):
        builder = Builder().mimic(Duck)
        first = builder.compile("First")
        builder.black_hole().define("quack", lambda self: "changed")
        second = builder.compile("Second")

        self.assertIs(first.__descriptor__.dispatch, Dispatch.MIMIC)
        self.assertIsNone(first().quack())
        with self.assertRaises(UnknownMethodError):
            first().waddle()
        self.assertEqual(second().quack(), "changed")
        self.assertIsInstance(second().waddle(), second)

    def testEachCompileYieldsDistinctType(self):
        builder = Builder()
        self.assertIsNot(builder.compile(), builder.compile())


if __name__ == '__main__':
    unittest.main()
