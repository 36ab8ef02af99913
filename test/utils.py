"""
Tests for the internal helpers (Unset sentinel, coalesce, rename, mirror, ordinal).
"""
import copy
import unittest
from unittest import TestCase

from bosun.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testNotEqualToNoneOrFalse(self) -> None:
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testUnionWithTypes(self) -> None:
        """
        Unset participates in isinstance unions on either side.
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", Unset | str)
        self.assertNotIsInstance(3, str | Unset)

    def testCopyPreservesSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce, rename, mirror and ordinal.
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRenameFunctionForm(self) -> None:
        def f():
            pass

        self.assertIs(rename(f, "do_work"), f)
        self.assertEqual((f.__name__, f.__qualname__), ("do_work", "do_work"))

    def testRenameDecoratorForm(self) -> None:
        @rename("do_work")
        def f():
            pass

        self.assertEqual(f.__name__, "do_work")

    def testRenameArity(self) -> None:
        with self.assertRaises(TypeError):
            rename()

    def testMirrorFreezesContainers(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a"]
                self._table = {"k": "v"}

        holder = Holder()
        self.assertEqual(holder.items, ("a",))
        with self.assertRaises(TypeError):
            holder.table["k"] = "w"
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(112), "112th")
        self.assertEqual(ordinal(23), "23rd")


if __name__ == '__main__':
    unittest.main()
