"""
Rank Computation Module

GF2 rank of a sparse parity check matrix by Gaussian elimination on sorted
index sets. A dense ``n_checks x n_bits`` array is never built.

The scratch buffers live in a :class:`RankWorkspace` owned by the caller so
that millions of rank computations (one per decoded error) reuse the same
memory. A workspace must never be shared by two computations running at the
same time.
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


class RankWorkspace:
    """
    Reusable scratch buffers for :class:`Ranker`.

    Parameters
    ----------
    n_bits : int, default=0
        Number of bits of the matrices this workspace will serve.

    Attributes
    ----------
    pivots : dict
        Pivot rows keyed by their leading column. Empty between calls.
    sum_vec : ndarray
        uint8 marking buffer of length ``n_bits``. All zeros between calls.
    """

    def __init__(self, n_bits: int = 0):
        self.pivots = {}
        self.sum_vec = np.zeros(n_bits, dtype=np.uint8)

    @property
    def n_bits(self) -> int:
        return int(self.sum_vec.size)

    def reserve(self, n_bits: int):
        """Grow the marking buffer to at least ``n_bits`` entries."""
        if n_bits > self.sum_vec.size:
            logger.debug("Growing rank workspace from %d to %d bits", self.sum_vec.size, n_bits)
            self.sum_vec = np.zeros(n_bits, dtype=np.uint8)

    def is_clean(self) -> bool:
        return not self.pivots and not self.sum_vec.any()

    def clear(self):
        """Drop the pivots and zero the marking buffer."""
        self.pivots.clear()
        self.sum_vec.fill(0)


def xor_sorted(row: np.ndarray, other: np.ndarray, sum_vec: np.ndarray) -> np.ndarray:
    """
    Symmetric difference of two sorted, duplicate free index arrays.

    ``sum_vec`` is used as a marking buffer and is all zeros again on return.
    """
    sum_vec[row] ^= 1
    sum_vec[other] ^= 1
    touched = np.union1d(row, other)
    result = touched[sum_vec[touched] == 1]
    sum_vec[touched] = 0
    return result


class Ranker:
    """
    Computes the GF2 rank of a parity check matrix.

    Each check is reduced against the pivot sharing its leading (smallest)
    column until it either vanishes (it was dependent) or its leading column
    has no pivot yet, in which case it becomes the pivot for that column.

    Parameters
    ----------
    matrix : ParityCheckMatrix
        The matrix to rank. Checks are rows, bits are columns.
    """

    def __init__(self, matrix):
        self._matrix = matrix

    def rank(self, workspace: RankWorkspace) -> int:
        """
        Return the rank, leaving ``workspace`` ready for the next call.

        Raises
        ------
        RuntimeError
            If ``workspace`` still holds state from another computation.
        """
        if not workspace.is_clean():
            raise RuntimeError("rank workspace is already in use")
        workspace.reserve(self._matrix.n_bits)

        bit_indices = self._matrix.bit_indices
        check_ranges = self._matrix.check_ranges
        try:
            for start, end in zip(check_ranges[:-1], check_ranges[1:]):
                self._insert(bit_indices[start:end], workspace)
            return len(workspace.pivots)
        finally:
            workspace.clear()

    @staticmethod
    def _insert(row: np.ndarray, workspace: RankWorkspace):
        pivots = workspace.pivots
        while row.size:
            leading = int(row[0])
            pivot = pivots.get(leading)
            if pivot is None:
                pivots[leading] = row
                return
            row = xor_sorted(row, pivot, workspace.sum_vec)
