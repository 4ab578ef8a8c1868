"""
Unit tests for the parity check matrix module
"""

import pickle
import unittest
import numpy as np
from scipy.sparse import csr_matrix
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from believer.check import CheckView
from believer.parity_check_matrix import ParityCheckMatrix


class TestConstruction(unittest.TestCase):
    """Test cases for building parity check matrices"""

    def test_checks_are_sorted_on_construction(self):
        matrix = ParityCheckMatrix(4, [[1, 0], [0, 2, 1], [1, 2, 3]])
        self.assertEqual(matrix.get_check(0), [0, 1])
        self.assertEqual(matrix.get_check(1), [0, 1, 2])
        self.assertEqual(matrix.get_check(2), [1, 2, 3])

    def test_empty_checks_are_removed_on_construction(self):
        matrix = ParityCheckMatrix(3, [[], [0, 1], [], [1, 2]])
        self.assertEqual(matrix.get_check(0), [0, 1])
        self.assertEqual(matrix.get_check(1), [1, 2])
        self.assertEqual(matrix.n_checks, 2)
        np.testing.assert_array_equal(matrix.check_ranges, [0, 2, 4])

    def test_out_of_bounds_checks_are_rejected(self):
        with self.assertRaises(ValueError):
            ParityCheckMatrix(5, [[0, 1, 5], [2, 3, 4]])
        with self.assertRaises(ValueError):
            ParityCheckMatrix(5, [[-1, 2]])

    def test_duplicated_bits_cancel(self):
        matrix = ParityCheckMatrix(4, [[0, 1, 1, 2], [3, 3], [2, 2, 2]])
        self.assertEqual(matrix, ParityCheckMatrix(4, [[0, 2], [2]]))

    def test_accepts_any_iterable(self):
        matrix = ParityCheckMatrix(4, ({2, 0}, (3, 1), np.array([1, 2])))
        self.assertEqual(matrix, ParityCheckMatrix(4, [[0, 2], [1, 3], [1, 2]]))

    def test_empty_matrix(self):
        matrix = ParityCheckMatrix()
        self.assertEqual(matrix.n_bits, 0)
        self.assertEqual(matrix.n_checks, 0)
        self.assertEqual(matrix.n_edges, 0)
        self.assertEqual(matrix.rank(), 0)

    def test_bits_without_checks(self):
        matrix = ParityCheckMatrix(5)
        self.assertEqual(matrix.n_bits, 5)
        self.assertEqual(matrix.n_checks, 0)
        np.testing.assert_array_equal(matrix.bit_degrees(), np.zeros(5))

    def test_identity(self):
        for n in range(6):
            matrix = ParityCheckMatrix.identity(n)
            self.assertEqual(matrix.n_checks, n)
            np.testing.assert_array_equal(matrix.check_degrees(), np.ones(n))
            self.assertEqual(matrix.rank(), n)
        self.assertEqual(ParityCheckMatrix.identity(3), ParityCheckMatrix(3, [[0], [1], [2]]))

    def test_storage_is_read_only(self):
        matrix = ParityCheckMatrix(3, [[0, 1], [1, 2]])
        with self.assertRaises(ValueError):
            matrix.bit_indices[0] = 2
        with self.assertRaises(ValueError):
            matrix.check_ranges[1] = 0

    def test_from_flat_validates_storage(self):
        with self.assertRaises(ValueError):
            ParityCheckMatrix.from_flat(3, [0, 1], [1, 2])
        with self.assertRaises(ValueError):
            ParityCheckMatrix.from_flat(3, [0, 1, 2], [0, 2, 1, 3])
        with self.assertRaises(ValueError):
            ParityCheckMatrix.from_flat(3, [0, 3], [0, 2])
        with self.assertRaises(ValueError):
            ParityCheckMatrix.from_flat(3, [1, 0], [0, 2])

    def test_from_flat_keeps_empty_checks(self):
        matrix = ParityCheckMatrix.from_flat(3, [0, 1, 0, 2], [0, 2, 2, 4])
        self.assertEqual(matrix.n_checks, 3)
        self.assertEqual(len(matrix.get_check(1)), 0)
        self.assertEqual(matrix.get_check(2), [0, 2])


class TestQueries(unittest.TestCase):
    """Test cases for getters and iterators"""

    def setUp(self):
        """Set up test fixtures"""
        self.matrix = ParityCheckMatrix(7, [[0, 1, 2, 5], [1, 3, 4], [2, 4, 5], [0, 5]])

    def test_counts(self):
        self.assertEqual(self.matrix.n_bits, 7)
        self.assertEqual(self.matrix.n_checks, 4)
        self.assertEqual(self.matrix.n_edges, 12)

    def test_bit_degrees(self):
        np.testing.assert_array_equal(self.matrix.bit_degrees(), [2, 2, 2, 1, 2, 3, 0])

    def test_check_degrees(self):
        np.testing.assert_array_equal(self.matrix.check_degrees(), [4, 3, 3, 2])

    def test_get_check(self):
        check = self.matrix.get_check(1)
        self.assertIsInstance(check, CheckView)
        self.assertEqual(list(check), [1, 3, 4])
        self.assertIn(3, check)
        self.assertNotIn(2, check)
        self.assertIsNone(self.matrix.get_check(4))
        self.assertIsNone(self.matrix.get_check(-1))

    def test_checks_iter(self):
        checks = [list(check) for check in self.matrix.checks_iter()]
        self.assertEqual(checks, [[0, 1, 2, 5], [1, 3, 4], [2, 4, 5], [0, 5]])

    def test_edges_iter(self):
        matrix = ParityCheckMatrix(3, [[0, 1], [1, 2]])
        self.assertEqual(list(matrix.edges_iter()), [(0, 0), (0, 1), (1, 1), (1, 2)])

    def test_str(self):
        matrix = ParityCheckMatrix(3, [[0, 1], [1, 2]])
        self.assertEqual(str(matrix), "[ 0 1 ][ 1 2 ]")

    def test_pickle(self):
        copy = pickle.loads(pickle.dumps(self.matrix))
        self.assertEqual(copy, self.matrix)
        self.assertFalse(copy.bit_indices.flags.writeable)


class TestSyndrome(unittest.TestCase):
    """Test cases for syndromes and codewords"""

    def setUp(self):
        """Set up test fixtures"""
        self.matrix = ParityCheckMatrix(3, [[0, 1], [1, 2]])

    def test_syndrome(self):
        message = [0, 1, 1]
        self.assertEqual(self.matrix.get_check(0).compute_syndrome(message), 1)
        self.assertEqual(self.matrix.get_check(1).compute_syndrome(message), 0)
        np.testing.assert_array_equal(self.matrix.get_syndrome_of(message), [1, 0])

    def test_has_codeword(self):
        self.assertFalse(self.matrix.has_codeword([0, 1, 1]))
        self.assertTrue(self.matrix.has_codeword([0, 0, 0]))
        self.assertTrue(self.matrix.has_codeword([1, 1, 1]))

    def test_syndrome_matches_dense_product(self):
        rng = np.random.default_rng(7)
        matrix = ParityCheckMatrix(20, [rng.choice(20, size=5, replace=False) for _ in range(12)])
        dense = matrix.to_csr().toarray().astype(int)
        for _ in range(10):
            message = rng.integers(0, 2, size=20)
            np.testing.assert_array_equal(matrix.get_syndrome_of(message), dense @ message % 2)

    def test_message_length_mismatch(self):
        with self.assertRaises(ValueError):
            self.matrix.get_syndrome_of([0, 1])


class TestProjections(unittest.TestCase):
    """Test cases for keep and without"""

    def setUp(self):
        """Set up test fixtures"""
        self.matrix = ParityCheckMatrix(5, [[0, 1, 2], [2, 3, 4], [0, 2, 4], [1, 3]])

    def test_keep(self):
        expected = ParityCheckMatrix(5, [[0, 1], [4], [0, 4], [1]])
        self.assertEqual(self.matrix.keep([0, 1, 4]), expected)
        self.assertEqual(self.matrix.keep([4, 1, 0, 1]), expected)

    def test_keep_drops_emptied_checks(self):
        kept = self.matrix.keep([3])
        self.assertEqual(kept, ParityCheckMatrix(5, [[3], [3]]))
        self.assertEqual(self.matrix.keep([]).n_checks, 0)

    def test_without(self):
        expected = ParityCheckMatrix(5, [[1], [3, 4], [4], [1, 3]])
        self.assertEqual(self.matrix.without([0, 2]), expected)

    def test_without_uses_all_bits(self):
        matrix = ParityCheckMatrix(12, [[0, 10], [5, 11], [3, 9]])
        self.assertEqual(matrix.without([10]), ParityCheckMatrix(12, [[0], [5, 11], [3, 9]]))

    def test_projections_are_complementary(self):
        bits = [1, 4]
        complement = [0, 2, 3]
        self.assertEqual(self.matrix.without(bits), self.matrix.keep(complement))


class TestScipyInterop(unittest.TestCase):
    """Test cases for conversion to and from scipy sparse matrices"""

    def test_to_csr(self):
        matrix = ParityCheckMatrix(3, [[0, 1], [1, 2]])
        csr = matrix.to_csr()
        self.assertIsInstance(csr, csr_matrix)
        self.assertEqual(csr.shape, (2, 3))
        np.testing.assert_array_equal(csr.toarray(), [[1, 1, 0], [0, 1, 1]])

    def test_round_trip(self):
        matrix = ParityCheckMatrix(7, [[0, 1, 2, 4], [0, 1, 3, 5], [0, 2, 3, 6]])
        self.assertEqual(ParityCheckMatrix.from_csr(matrix.to_csr()), matrix)

    def test_from_dense_reduces_modulo_two(self):
        dense = np.array([[1, 2, 3], [0, 0, 0], [0, 1, 1]])
        matrix = ParityCheckMatrix.from_csr(dense)
        self.assertEqual(matrix, ParityCheckMatrix(3, [[0, 2], [1, 2]]))


if __name__ == "__main__":
    unittest.main()
