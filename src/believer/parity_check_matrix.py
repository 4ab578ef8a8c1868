"""
Parity Check Matrix Module

Sparse GF2 parity check matrix stored as a flat array of bit indices
delimited by an offset table (the CSR layout without the data array).
"""

from typing import Iterable, Iterator, Optional, Tuple

import numpy as np
from scipy.sparse import csr_matrix

from .check import CheckView
from .ranker import Ranker, RankWorkspace
from .transforms import Concatener, Transposer


INDEX_DTYPE = np.int64


def _as_index_array(bits) -> np.ndarray:
    if isinstance(bits, np.ndarray):
        return bits.astype(INDEX_DTYPE, copy=False).ravel()
    return np.fromiter(bits, dtype=INDEX_DTYPE)


def _flatten_checks(checks, n_bits: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sort every check and pack them into (bit_indices, check_ranges).

    A bit listed an even number of times in the same check cancels out.
    Checks left without any bit are not recorded.
    """
    rows = []
    for check in checks:
        row = _as_index_array(check)
        if row.size and (row.min() < 0 or row.max() >= n_bits):
            raise ValueError("some checks are out of bounds")
        values, counts = np.unique(row, return_counts=True)
        row = values[counts % 2 == 1]
        if row.size:
            rows.append(row)

    if not rows:
        return np.zeros(0, dtype=INDEX_DTYPE), np.zeros(1, dtype=INDEX_DTYPE)

    bit_indices = np.concatenate(rows)
    check_ranges = np.zeros(len(rows) + 1, dtype=INDEX_DTYPE)
    np.cumsum([row.size for row in rows], out=check_ranges[1:])
    return bit_indices, check_ranges


class ParityCheckMatrix:
    """
    A sparse parity check matrix over GF2.

    Checks are the rows and bits are the columns. The matrix is immutable:
    every transformation returns a new instance.

    Parameters
    ----------
    n_bits : int, default=0
        Number of bits (columns).
    checks : iterable of iterables of int, optional
        Bit positions of each check. Positions are sorted on construction
        and checks without any bit are dropped.

    Raises
    ------
    ValueError
        If a check references a bit outside ``range(n_bits)``.

    Examples
    --------
    >>> matrix = ParityCheckMatrix(3, [[0, 1], [1, 2]])
    >>> matrix.get_syndrome_of([0, 1, 1]).tolist()
    [1, 0]
    """

    __slots__ = ("_n_bits", "_bit_indices", "_check_ranges")

    def __init__(self, n_bits: int = 0, checks: Optional[Iterable[Iterable[int]]] = None):
        if n_bits < 0:
            raise ValueError("n_bits must be >= 0")
        if checks is None:
            checks = ()
        bit_indices, check_ranges = _flatten_checks(checks, int(n_bits))
        self._set_storage(int(n_bits), bit_indices, check_ranges)

    def _set_storage(self, n_bits, bit_indices, check_ranges):
        bit_indices.flags.writeable = False
        check_ranges.flags.writeable = False
        self._n_bits = n_bits
        self._bit_indices = bit_indices
        self._check_ranges = check_ranges

    @classmethod
    def from_flat(cls, n_bits: int, bit_indices, check_ranges) -> "ParityCheckMatrix":
        """
        Build a matrix directly from its flat storage.

        Unlike the check list constructor, empty checks are kept as given.

        Parameters
        ----------
        n_bits : int
            Number of bits.
        bit_indices : array_like
            Bit positions of all checks concatenated, each check sorted.
        check_ranges : array_like
            Offsets of length ``n_checks + 1`` into ``bit_indices``.
        """
        bit_indices = np.array(bit_indices, dtype=INDEX_DTYPE).ravel()
        check_ranges = np.array(check_ranges, dtype=INDEX_DTYPE).ravel()
        if check_ranges.size == 0:
            check_ranges = np.zeros(1, dtype=INDEX_DTYPE)

        if check_ranges[0] != 0 or check_ranges[-1] != bit_indices.size:
            raise ValueError("check ranges must start at 0 and end at the number of edges")
        if np.any(np.diff(check_ranges) < 0):
            raise ValueError("check ranges must be non-decreasing")
        if bit_indices.size and (bit_indices.min() < 0 or bit_indices.max() >= n_bits):
            raise ValueError("some checks are out of bounds")

        # Bits must be strictly increasing inside each check.
        steps = np.diff(bit_indices)
        inside = np.ones(steps.size, dtype=bool)
        starts = check_ranges[1:-1]
        starts = starts[(starts > 0) & (starts < bit_indices.size)]
        inside[starts - 1] = False
        if np.any(steps[inside] <= 0):
            raise ValueError("bits of each check must be sorted and distinct")

        matrix = cls.__new__(cls)
        matrix._set_storage(int(n_bits), bit_indices, check_ranges)
        return matrix

    @classmethod
    def identity(cls, n_bits: int) -> "ParityCheckMatrix":
        """The ``n_bits`` identity matrix: check ``i`` is ``{i}``."""
        return cls.from_flat(
            n_bits,
            np.arange(n_bits, dtype=INDEX_DTYPE),
            np.arange(n_bits + 1, dtype=INDEX_DTYPE),
        )

    @classmethod
    def from_csr(cls, matrix) -> "ParityCheckMatrix":
        """
        Convert a scipy sparse (or dense) 0/1 matrix.

        Entries are reduced modulo 2 and empty rows are dropped, as with
        the check list constructor.
        """
        csr = csr_matrix(matrix).astype(INDEX_DTYPE)
        csr.sum_duplicates()
        csr.data %= 2
        csr.eliminate_zeros()
        csr.sort_indices()
        check_ranges = np.unique(csr.indptr)
        return cls.from_flat(csr.shape[1], csr.indices, check_ranges)

    def to_csr(self) -> csr_matrix:
        """Return the matrix as a ``(n_checks, n_bits)`` uint8 csr_matrix."""
        data = np.ones(self.n_edges, dtype=np.uint8)
        return csr_matrix(
            (data, self._bit_indices.copy(), self._check_ranges.copy()),
            shape=(self.n_checks, self.n_bits),
        )

    # ***** Getters *****

    @property
    def n_bits(self) -> int:
        return self._n_bits

    @property
    def n_checks(self) -> int:
        return int(self._check_ranges.size - 1)

    @property
    def n_edges(self) -> int:
        return int(self._bit_indices.size)

    @property
    def bit_indices(self) -> np.ndarray:
        """Flat read-only array of the bits of every check."""
        return self._bit_indices

    @property
    def check_ranges(self) -> np.ndarray:
        """Read-only offsets delimiting each check in :attr:`bit_indices`."""
        return self._check_ranges

    def bit_degrees(self) -> np.ndarray:
        """Number of checks touching each bit."""
        return np.bincount(self._bit_indices, minlength=self._n_bits)

    def check_degrees(self) -> np.ndarray:
        """Number of bits in each check."""
        return np.diff(self._check_ranges)

    def get_check(self, check: int) -> Optional[CheckView]:
        """
        Return a view over ``check``, or None if it is out of range.
        """
        if not 0 <= check < self.n_checks:
            return None
        start, end = self._check_ranges[check], self._check_ranges[check + 1]
        return CheckView(self._bit_indices[start:end])

    def checks_iter(self) -> Iterator[CheckView]:
        """Yield a view over each check, in order."""
        for start, end in zip(self._check_ranges[:-1], self._check_ranges[1:]):
            yield CheckView(self._bit_indices[start:end])

    def edges_iter(self) -> Iterator[Tuple[int, int]]:
        """Yield every ``(check, bit)`` edge, ordered by check then bit."""
        checks = np.repeat(np.arange(self.n_checks), self.check_degrees())
        for check, bit in zip(checks.tolist(), self._bit_indices.tolist()):
            yield check, bit

    # ***** Syndromes *****

    def get_syndrome_of(self, message) -> np.ndarray:
        """
        Compute the syndrome of ``message``.

        Parameters
        ----------
        message : array_like
            GF2 values (0/1) of length ``n_bits``.

        Returns
        -------
        ndarray
            uint8 array of length ``n_checks``.
        """
        values = np.asarray(message, dtype=np.uint8).ravel()
        if values.size != self._n_bits:
            raise ValueError(
                f"message has {values.size} values but the matrix has {self._n_bits} bits"
            )
        cumulative = np.zeros(self.n_edges + 1, dtype=INDEX_DTYPE)
        np.cumsum(values[self._bit_indices] & 1, out=cumulative[1:])
        weights = cumulative[self._check_ranges[1:]] - cumulative[self._check_ranges[:-1]]
        return (weights % 2).astype(np.uint8)

    def has_codeword(self, message) -> bool:
        """True if every check of ``message`` is satisfied."""
        return not np.any(self.get_syndrome_of(message))

    # ***** Rank *****

    def rank(self) -> int:
        """
        GF2 rank of the matrix.

        Allocates a fresh workspace; use :meth:`rank_with` in loops.
        """
        return self.rank_with(RankWorkspace(self._n_bits))

    def rank_with(self, workspace: RankWorkspace) -> int:
        """GF2 rank of the matrix using a caller owned scratch workspace."""
        return Ranker(self).rank(workspace)

    # ***** Transformations *****

    def transpose(self) -> "ParityCheckMatrix":
        """Swap the roles of bits and checks."""
        return Transposer(self).get_transposed_matrix()

    def horizontal_concat(self, other: "ParityCheckMatrix") -> "ParityCheckMatrix":
        """
        Concatenate ``other`` on the right of ``self``.

        Check ``i`` of the result is check ``i`` of ``self`` joined with
        check ``i`` of ``other`` shifted by ``self.n_bits``.
        """
        return Concatener(self, other).concat_horizontally()

    def diagonal_concat(self, other: "ParityCheckMatrix") -> "ParityCheckMatrix":
        """Block diagonal concatenation of ``self`` and ``other``."""
        return Concatener(self, other).concat_diagonally()

    def keep(self, bits) -> "ParityCheckMatrix":
        """
        Restrict every check to the given ``bits``.

        The number of bits is unchanged and checks left empty are dropped.

        Examples
        --------
        >>> matrix = ParityCheckMatrix(5, [[0, 1, 2], [2, 3, 4], [0, 2, 4], [1, 3]])
        >>> matrix.keep([0, 1, 4]) == ParityCheckMatrix(5, [[0, 1], [4], [0, 4], [1]])
        True
        """
        mask = np.zeros(self._n_bits, dtype=bool)
        bits = _as_index_array(bits)
        mask[bits[(bits >= 0) & (bits < self._n_bits)]] = True
        return self._restricted_to(mask)

    def without(self, bits) -> "ParityCheckMatrix":
        """
        Remove the given ``bits`` from every check.

        The complement is taken over all ``n_bits`` bits of the matrix.
        """
        mask = np.ones(self._n_bits, dtype=bool)
        bits = _as_index_array(bits)
        mask[bits[(bits >= 0) & (bits < self._n_bits)]] = False
        return self._restricted_to(mask)

    def _restricted_to(self, mask: np.ndarray) -> "ParityCheckMatrix":
        kept = mask[self._bit_indices]
        cumulative = np.zeros(self.n_edges + 1, dtype=INDEX_DTYPE)
        np.cumsum(kept, out=cumulative[1:])
        # Offsets are non-decreasing, so unique() collapses the empty checks.
        check_ranges = np.unique(cumulative[self._check_ranges])
        return self.from_flat(self._n_bits, self._bit_indices[kept], check_ranges)

    # ***** Dunder *****

    def __eq__(self, other):
        if not isinstance(other, ParityCheckMatrix):
            return NotImplemented
        return (
            self._n_bits == other._n_bits
            and np.array_equal(self._check_ranges, other._check_ranges)
            and np.array_equal(self._bit_indices, other._bit_indices)
        )

    __hash__ = None

    def __getstate__(self):
        return self._n_bits, self._bit_indices, self._check_ranges

    def __setstate__(self, state):
        n_bits, bit_indices, check_ranges = state
        self._set_storage(n_bits, np.array(bit_indices), np.array(check_ranges))

    def __repr__(self):
        return (
            f"ParityCheckMatrix(n_bits={self.n_bits}, "
            f"n_checks={self.n_checks}, n_edges={self.n_edges})"
        )

    def __str__(self):
        return "".join(
            "[ " + "".join(f"{bit} " for bit in check) + "]" for check in self.checks_iter()
        )
