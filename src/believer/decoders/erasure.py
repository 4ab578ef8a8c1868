"""
Erasure Decoder Module

Decoder for the classical erasure channel. An erasure can be corrected iff
the erased columns of the parity check matrix are linearly independent,
that is, the rank of the matrix restricted to the erased bits equals the
number of erased bits.
"""

import logging
from enum import Enum

import numpy as np

from ..parity_check_matrix import ParityCheckMatrix
from ..ranker import RankWorkspace
from .base import Decoder, DecodingResult

logger = logging.getLogger(__name__)


class ErasureResult(DecodingResult, Enum):
    """Outcome of an erasure decoding."""

    SUCCESS = "success"
    FAILURE = "failure"

    def is_success(self) -> bool:
        return self is ErasureResult.SUCCESS


class ErasureDecoder(Decoder):
    """
    Decoder for the classical erasure channel.

    Parameters
    ----------
    erasure_prob : float
        Probability that each bit is erased, independently.

    Raises
    ------
    ValueError
        If ``erasure_prob`` is not between 0 and 1.

    Examples
    --------
    >>> code = ParityCheckMatrix(3, [[0, 1], [1, 2]])
    >>> decoder = ErasureDecoder(0.25).bind(code)
    >>> decoder.decode([0, 1])
    <ErasureResult.SUCCESS: 'success'>
    """

    def __init__(self, erasure_prob: float):
        self.erasure_prob = erasure_prob
        self._code = ParityCheckMatrix()
        self._workspace = None

    def __repr__(self):
        return f"ErasureDecoder(erasure_prob={self.erasure_prob}, code={self._code!r})"

    @property
    def erasure_prob(self) -> float:
        return self._erasure_prob

    @erasure_prob.setter
    def erasure_prob(self, value: float):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"invalid erasure probability {value!r}, expected a value in [0, 1]")
        self._erasure_prob = float(value)

    @property
    def code(self) -> ParityCheckMatrix:
        return self._code

    def bind(self, code: ParityCheckMatrix) -> "ErasureDecoder":
        self._workspace = RankWorkspace(code.n_bits)
        self._code = code
        logger.debug("Bound %r", self)
        return self

    def release(self) -> ParityCheckMatrix:
        code = self._code
        self._code = ParityCheckMatrix()
        self._workspace = None
        return code

    def decode(self, error) -> ErasureResult:
        """
        Decide whether the erased bits can be recovered.

        Parameters
        ----------
        error : iterable of int
            Erased bit positions, in any order. Repeated positions count once.
        """
        if self._workspace is None:
            raise RuntimeError("decoder is not bound to a code")
        if isinstance(error, np.ndarray):
            erased = np.unique(error.astype(np.int64, copy=False))
        else:
            erased = np.unique(np.fromiter(error, dtype=np.int64))
        erased_rank = self._code.keep(erased).rank_with(self._workspace)
        if erased_rank == erased.size:
            return ErasureResult.SUCCESS
        return ErasureResult.FAILURE

    def sample_error(self, rng) -> np.ndarray:
        """
        Erase each bit with probability ``erasure_prob``.

        One uniform draw is consumed per bit, in bit order.

        Returns
        -------
        ndarray
            Sorted positions of the erased bits.
        """
        draws = rng.random(self._code.n_bits)
        return np.flatnonzero(draws < self.erasure_prob)
