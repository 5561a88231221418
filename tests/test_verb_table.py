from __future__ import annotations

import importlib.util
import unittest


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for verb tests")
class MonadicVerbTests(unittest.TestCase):
    def test_identity_returns_the_same_object(self) -> None:
        from jinc_jax.values import vector
        from jinc_jax.verbs import apply_monad

        value = vector([1, 2])
        self.assertIs(apply_monad("+", value), value)

    def test_size_of_scalar_is_one(self) -> None:
        from jinc_jax.values import scalar, to_python
        from jinc_jax.verbs import size

        self.assertEqual(to_python(size(scalar(7))), 1)

    def test_size_reads_only_leading_axis(self) -> None:
        from jinc_jax.values import plain, to_python
        from jinc_jax.verbs import size

        out = size(plain((2, 3, 4), list(range(24))))
        self.assertEqual(out.shape, ())
        self.assertEqual(to_python(out), 2)

    def test_iota(self) -> None:
        from jinc_jax.values import scalar, to_python
        from jinc_jax.verbs import iota

        self.assertEqual(to_python(iota(scalar(4))), [0, 1, 2, 3])
        empty = iota(scalar(0))
        self.assertEqual(empty.shape, (0,))
        self.assertEqual(to_python(empty), [])

    def test_iota_requires_plain_scalar(self) -> None:
        from jinc_jax.errors import JShapeError, JTypeError
        from jinc_jax.values import box, scalar, vector
        from jinc_jax.verbs import iota

        with self.assertRaises(JShapeError):
            iota(vector([1, 2]))
        with self.assertRaises(JTypeError):
            iota(box(scalar(3)))

    def test_box_nests_without_flattening(self) -> None:
        from jinc_jax.values import ValueKind, scalar, value_info
        from jinc_jax.verbs import box_value

        once = box_value(scalar(1))
        twice = box_value(once)
        self.assertEqual(twice.kind, ValueKind.BOXED)
        self.assertEqual(twice.rank, 0)
        self.assertIs(twice.data[0], once)
        self.assertEqual(value_info(twice).depth, 2)

    def test_shape_of(self) -> None:
        from jinc_jax.values import plain, scalar, to_python
        from jinc_jax.verbs import shape_of

        self.assertEqual(to_python(shape_of(plain((2, 3), range(6)))), [2, 3])
        scalar_shape = shape_of(scalar(5))
        self.assertEqual(scalar_shape.shape, (0,))
        self.assertEqual(to_python(scalar_shape), [])


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for verb tests")
class DyadicVerbTests(unittest.TestCase):
    def test_plus_elementwise(self) -> None:
        from jinc_jax.values import plain, to_python
        from jinc_jax.verbs import plus

        out = plus(plain((2, 2), [1, 2, 3, 4]), plain((2, 2), [5, 5, 5, 5]))
        self.assertEqual(out.shape, (2, 2))
        self.assertEqual(to_python(out), [[6, 7], [8, 9]])

    def test_plus_rejects_mismatched_shapes(self) -> None:
        from jinc_jax.errors import JShapeError
        from jinc_jax.values import scalar, vector
        from jinc_jax.verbs import plus

        with self.assertRaises(JShapeError):
            plus(scalar(1), vector([1, 2]))
        with self.assertRaises(JShapeError):
            plus(vector([1, 2, 3]), vector([1, 2]))

    def test_plus_rejects_boxes(self) -> None:
        from jinc_jax.errors import JTypeError
        from jinc_jax.values import box, scalar
        from jinc_jax.verbs import plus

        with self.assertRaises(JTypeError):
            plus(box(scalar(1)), box(scalar(2)))

    def test_from_selects_leading_axis_cell(self) -> None:
        from jinc_jax.values import plain, scalar, to_python
        from jinc_jax.verbs import from_

        cube = plain((2, 2, 3), range(12))
        cell = from_(scalar(1), cube)
        self.assertEqual(cell.shape, (2, 3))
        self.assertEqual(to_python(cell), [[6, 7, 8], [9, 10, 11]])

        item = from_(scalar(2), plain((4,), [9, 8, 7, 6]))
        self.assertEqual(item.shape, ())
        self.assertEqual(to_python(item), 7)

    def test_from_bounds_and_rank(self) -> None:
        from jinc_jax.errors import JShapeError
        from jinc_jax.values import scalar, vector
        from jinc_jax.verbs import from_

        with self.assertRaises(JShapeError):
            from_(scalar(3), vector([1, 2, 3]))
        with self.assertRaises(JShapeError):
            from_(scalar(0), scalar(4))
        with self.assertRaises(JShapeError):
            from_(vector([0]), vector([1, 2]))

    def test_from_on_boxed_vector_returns_capsule(self) -> None:
        from jinc_jax.values import ValueKind, boxed, scalar, vector
        from jinc_jax.verbs import from_

        first, second = vector([1]), vector([2, 2])
        out = from_(scalar(1), boxed((2,), [first, second]))
        self.assertEqual(out.kind, ValueKind.BOXED)
        self.assertEqual(out.shape, ())
        self.assertIs(out.data[0], second)

    def test_reshape_tiles_cyclically(self) -> None:
        from jinc_jax.values import to_python, vector
        from jinc_jax.verbs import reshape

        out = reshape(vector([2, 3]), vector([0, 1]))
        self.assertEqual(out.shape, (2, 3))
        self.assertEqual(out.elements(), [0, 1, 0, 1, 0, 1])
        self.assertEqual(to_python(out), [[0, 1, 0], [1, 0, 1]])

    def test_reshape_truncates_longer_source(self) -> None:
        from jinc_jax.values import scalar, to_python, vector
        from jinc_jax.verbs import reshape

        out = reshape(scalar(3), vector([4, 5, 6, 7, 8]))
        self.assertEqual(out.shape, (3,))
        self.assertEqual(to_python(out), [4, 5, 6])

    def test_reshape_scalar_count_gives_vector(self) -> None:
        from jinc_jax.values import scalar, to_python
        from jinc_jax.verbs import reshape

        out = reshape(scalar(4), scalar(9))
        self.assertEqual(out.shape, (4,))
        self.assertEqual(to_python(out), [9, 9, 9, 9])

    def test_reshape_with_empty_shape_vector_gives_scalar(self) -> None:
        from jinc_jax.values import scalar, to_python, vector
        from jinc_jax.verbs import reshape

        out = reshape(vector([]), vector([6, 7]))
        self.assertEqual(out.shape, ())
        self.assertEqual(to_python(out), 6)

    def test_reshape_boxes(self) -> None:
        from jinc_jax.values import ValueKind, box, scalar
        from jinc_jax.verbs import reshape

        inner = scalar(1)
        out = reshape(scalar(3), box(inner))
        self.assertEqual(out.kind, ValueKind.BOXED)
        self.assertEqual(out.shape, (3,))
        self.assertTrue(all(item is inner for item in out.data))

    def test_reshape_failures(self) -> None:
        from jinc_jax.errors import JShapeError
        from jinc_jax.values import scalar, vector
        from jinc_jax.verbs import reshape

        with self.assertRaises(JShapeError):
            reshape(vector([1, 1, 1, 1]), scalar(0))
        with self.assertRaises(JShapeError):
            reshape(scalar(2), vector([]))

    def test_reshape_empty_target_from_empty_source(self) -> None:
        from jinc_jax.values import scalar, vector
        from jinc_jax.verbs import reshape

        out = reshape(scalar(0), vector([]))
        self.assertEqual(out.shape, (0,))

    def test_catenate_flattens_both_sides(self) -> None:
        from jinc_jax.values import plain, scalar, to_python
        from jinc_jax.verbs import catenate

        out = catenate(plain((2, 2), [1, 2, 3, 4]), scalar(9))
        self.assertEqual(out.shape, (5,))
        self.assertEqual(to_python(out), [1, 2, 3, 4, 9])

    def test_catenate_boxes(self) -> None:
        from jinc_jax.values import ValueKind, box, scalar, vector
        from jinc_jax.verbs import catenate

        left, right = scalar(1), vector([2, 3])
        out = catenate(box(left), box(right))
        self.assertEqual(out.kind, ValueKind.BOXED)
        self.assertEqual(out.shape, (2,))
        self.assertIs(out.data[0], left)
        self.assertIs(out.data[1], right)

    def test_catenate_rejects_mixed_kinds(self) -> None:
        from jinc_jax.errors import JTypeError
        from jinc_jax.values import box, scalar
        from jinc_jax.verbs import catenate

        with self.assertRaises(JTypeError):
            catenate(scalar(1), box(scalar(2)))

    def test_operands_are_not_mutated(self) -> None:
        from jinc_jax.values import to_python, vector
        from jinc_jax.verbs import catenate, plus, reshape

        left, right = vector([1, 2]), vector([3, 4])
        plus(left, right)
        catenate(left, right)
        reshape(vector([4]), right)
        self.assertEqual(to_python(left), [1, 2])
        self.assertEqual(to_python(right), [3, 4])


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for verb tests")
class VerbTableTests(unittest.TestCase):
    def test_table_covers_every_glyph(self) -> None:
        from jinc_jax.lexer import VERB_GLYPHS
        from jinc_jax.verbs import VERBS

        self.assertEqual(set(VERBS), set(VERB_GLYPHS))
        for symbol, verb in VERBS.items():
            self.assertEqual(verb.symbol, symbol)

    def test_unimplemented_valences_raise(self) -> None:
        from jinc_jax.errors import JUnsupportedError
        from jinc_jax.values import scalar
        from jinc_jax.verbs import apply_dyad, apply_monad

        with self.assertRaises(JUnsupportedError):
            apply_dyad("~", scalar(1), scalar(2))
        with self.assertRaises(JUnsupportedError):
            apply_dyad("<", scalar(1), scalar(2))
        with self.assertRaises(JUnsupportedError):
            apply_monad(",", scalar(1))

    def test_unknown_glyph_raises(self) -> None:
        from jinc_jax.errors import JUnsupportedError
        from jinc_jax.values import scalar
        from jinc_jax.verbs import apply_monad

        with self.assertRaises(JUnsupportedError):
            apply_monad("*", scalar(1))


if __name__ == "__main__":
    unittest.main()
