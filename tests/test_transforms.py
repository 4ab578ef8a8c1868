"""
Unit tests for transpose and concatenation
"""

import unittest
import numpy as np
from scipy.sparse import block_diag, hstack
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from believer.parity_check_matrix import ParityCheckMatrix


class TestTranspose(unittest.TestCase):
    """Test cases for Transposer"""

    def test_transpose(self):
        matrix = ParityCheckMatrix(4, [[0, 1, 2], [1, 3], [0, 2, 3]])
        expected = ParityCheckMatrix(3, [[0, 2], [0, 1], [0, 2], [1, 2]])
        self.assertEqual(matrix.transpose(), expected)

    def test_shape_is_swapped(self):
        matrix = ParityCheckMatrix(5, [[0, 1], [1, 2]])
        transposed = matrix.transpose()
        self.assertEqual(transposed.n_bits, 2)
        self.assertEqual(transposed.n_checks, 5)
        # Bits 3 and 4 belong to no check.
        np.testing.assert_array_equal(transposed.check_degrees(), [1, 2, 1, 0, 0])

    def test_involution(self):
        rng = np.random.default_rng(3)
        for _ in range(10):
            n_bits = int(rng.integers(1, 15))
            checks = [
                rng.choice(n_bits, size=int(rng.integers(1, n_bits + 1)), replace=False)
                for _ in range(int(rng.integers(1, 10)))
            ]
            matrix = ParityCheckMatrix(n_bits, checks)
            self.assertEqual(matrix.transpose().transpose(), matrix)

    def test_matches_scipy(self):
        matrix = ParityCheckMatrix(6, [[0, 3, 5], [1, 2], [2, 4, 5], [0, 1]])
        np.testing.assert_array_equal(
            matrix.transpose().to_csr().toarray(), matrix.to_csr().T.toarray()
        )

    def test_empty_matrix(self):
        self.assertEqual(ParityCheckMatrix().transpose(), ParityCheckMatrix())


class TestConcatenation(unittest.TestCase):
    """Test cases for Concatener"""

    def setUp(self):
        """Set up test fixtures"""
        self.left = ParityCheckMatrix(3, [[0, 1], [1, 2]])
        self.right = ParityCheckMatrix(4, [[1, 2, 3], [0, 1], [2, 3]])

    def test_horizontal(self):
        expected = ParityCheckMatrix(7, [[0, 1, 4, 5, 6], [1, 2, 3, 4], [5, 6]])
        self.assertEqual(self.left.horizontal_concat(self.right), expected)

    def test_horizontal_with_fewer_right_checks(self):
        right = ParityCheckMatrix(2, [[0, 1]])
        expected = ParityCheckMatrix(5, [[0, 1, 3, 4], [1, 2]])
        self.assertEqual(self.left.horizontal_concat(right), expected)

    def test_horizontal_matches_scipy(self):
        right = ParityCheckMatrix(4, [[0, 3], [1, 2, 3]])
        concat = self.left.horizontal_concat(right)
        self.assertEqual(concat.n_checks, self.left.n_checks)
        np.testing.assert_array_equal(
            concat.to_csr().toarray(),
            hstack([self.left.to_csr(), right.to_csr()]).toarray(),
        )

    def test_diagonal(self):
        expected = ParityCheckMatrix(7, [[0, 1], [1, 2], [4, 5, 6], [3, 4], [5, 6]])
        self.assertEqual(self.left.diagonal_concat(self.right), expected)

    def test_diagonal_matches_scipy(self):
        concat = self.left.diagonal_concat(self.right)
        np.testing.assert_array_equal(
            concat.to_csr().toarray(),
            block_diag([self.left.to_csr(), self.right.to_csr()]).toarray(),
        )

    def test_diagonal_rank_is_additive(self):
        concat = self.left.diagonal_concat(self.right)
        self.assertEqual(concat.rank(), self.left.rank() + self.right.rank())

    def test_inputs_are_unchanged(self):
        before = ParityCheckMatrix(3, [[0, 1], [1, 2]])
        self.left.horizontal_concat(self.right)
        self.left.diagonal_concat(self.right)
        self.left.transpose()
        self.assertEqual(self.left, before)


if __name__ == "__main__":
    unittest.main()
