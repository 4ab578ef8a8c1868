"""
Structural transformations of parity check matrices.

Both helpers work on the flat storage directly and build their output with
``from_flat`` of the input's class, so empty checks produced by a transform
are kept as rows.
"""

import numpy as np


def _check_of_each_edge(matrix, n_checks: int) -> np.ndarray:
    degrees = np.zeros(n_checks, dtype=np.int64)
    degrees[: matrix.n_checks] = matrix.check_degrees()
    return np.repeat(np.arange(n_checks), degrees)


class Transposer:
    """
    Swaps the roles of bits and checks.

    Bit ``b`` belongs to check ``c`` of the transposed matrix iff check ``b``
    of the original contains bit ``c``. A bit touched by no check becomes
    an empty check, so the output has exactly ``n_bits`` checks.
    """

    def __init__(self, matrix):
        self._matrix = matrix

    def get_transposed_matrix(self):
        matrix = self._matrix
        checks = _check_of_each_edge(matrix, matrix.n_checks)
        # Stable sort keeps the checks of each bit in increasing order.
        order = np.argsort(matrix.bit_indices, kind="stable")
        check_ranges = np.zeros(matrix.n_bits + 1, dtype=np.int64)
        np.cumsum(matrix.bit_degrees(), out=check_ranges[1:])
        return type(matrix).from_flat(matrix.n_checks, checks[order], check_ranges)


class Concatener:
    """
    Concatenates two matrices, horizontally or block diagonally.

    Bits of the right operand are shifted by the number of bits of the left
    operand in both cases.
    """

    def __init__(self, left, right):
        self._left = left
        self._right = right

    def concat_horizontally(self):
        """
        Join check ``i`` of the left operand with check ``i`` of the right one.

        If one operand has fewer checks, its missing checks count as empty.
        """
        left, right = self._left, self._right
        n_checks = max(left.n_checks, right.n_checks)

        left_degrees = np.zeros(n_checks, dtype=np.int64)
        left_degrees[: left.n_checks] = left.check_degrees()
        right_degrees = np.zeros(n_checks, dtype=np.int64)
        right_degrees[: right.n_checks] = right.check_degrees()

        check_ranges = np.zeros(n_checks + 1, dtype=np.int64)
        np.cumsum(left_degrees + right_degrees, out=check_ranges[1:])

        bit_indices = np.empty(check_ranges[-1], dtype=np.int64)

        # Position of an edge = start of its output check + offset in its input check.
        left_checks = _check_of_each_edge(left, n_checks)
        left_offsets = np.arange(left.n_edges) - left.check_ranges[left_checks]
        bit_indices[check_ranges[left_checks] + left_offsets] = left.bit_indices

        right_checks = _check_of_each_edge(right, n_checks)
        right_offsets = np.arange(right.n_edges) - right.check_ranges[right_checks]
        positions = check_ranges[right_checks] + left_degrees[right_checks] + right_offsets
        bit_indices[positions] = right.bit_indices + left.n_bits

        return type(left).from_flat(left.n_bits + right.n_bits, bit_indices, check_ranges)

    def concat_diagonally(self):
        """Stack the checks of the left operand above the shifted right ones."""
        left, right = self._left, self._right
        bit_indices = np.concatenate((left.bit_indices, right.bit_indices + left.n_bits))
        check_ranges = np.concatenate((left.check_ranges, right.check_ranges[1:] + left.n_edges))
        return type(left).from_flat(left.n_bits + right.n_bits, bit_indices, check_ranges)
