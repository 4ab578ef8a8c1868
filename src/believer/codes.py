"""
Code Construction Module

Canonical parity check matrix families: cyclic permutations, circulants and
the generalized bicycle combination, plus the Bivariate Bicycle blocks that
feed it. Target for the defaults: the [[144, 12, 12]] 'Gross Code'.
"""

from typing import Sequence, Tuple

import numpy as np

from .parity_check_matrix import ParityCheckMatrix


def permutation_matrix(l: int) -> ParityCheckMatrix:
    """
    Single cyclic shift on ``l`` bits: check ``i`` is ``{(i - 1) mod l}``.
    """
    if l < 1:
        raise ValueError("l must be >= 1")
    return ParityCheckMatrix.from_flat(l, np.roll(np.arange(l), 1), np.arange(l + 1))


def circulant_right(indices: Sequence[int], l: int) -> ParityCheckMatrix:
    """
    Circulant matrix whose check ``i`` is ``{(j + i) mod l for j in indices}``.
    """
    checks = [[(j + i) % l for j in indices] for i in range(l)]
    return ParityCheckMatrix(l, checks)


def circulant_down(indices: Sequence[int], l: int) -> ParityCheckMatrix:
    """
    Circulant matrix whose check ``i`` is ``{(l - j + i) mod l for j in indices}``.
    """
    checks = [[(l - j + i) % l for j in indices] for i in range(l)]
    return ParityCheckMatrix(l, checks)


def generalized_bicycle(a: ParityCheckMatrix, b: ParityCheckMatrix) -> ParityCheckMatrix:
    """
    Combine ``a`` and ``b`` into ``diag([a | b], [b^T | a^T])``.

    The caller is responsible for ``a`` and ``b`` commuting; nothing is
    checked here.
    """
    hx = a.horizontal_concat(b)
    hz = b.transpose().horizontal_concat(a.transpose())
    return hx.diagonal_concat(hz)


class BivariateBicycleCode:
    """
    Generates the parity check blocks of a Bivariate Bicycle Code.

    The blocks ``A`` and ``B`` are sums of cyclic shifts on an ``L x M``
    torus; ``Hx = [A | B]`` and ``Hz = [B^T | A^T]``.

    Parameters
    ----------
    L : int, default=12
        First dimension parameter for the torus geometry
    M : int, default=6
        Second dimension parameter for the torus geometry
    poly_a : sequence of (int, int), optional
        Shifts ``(du, dv)`` of A. Defaults to ``x^3 + y + y^2``.
    poly_b : sequence of (int, int), optional
        Shifts ``(du, dv)`` of B. Defaults to ``y^3 + x + x^2``.

    Attributes
    ----------
    N : int
        Total number of bits (2 * L * M)
    """

    def __init__(self, L=12, M=6, poly_a=None, poly_b=None):
        if L < 1 or M < 1:
            raise ValueError("L and M must be >= 1")
        self.L = L
        self.M = M
        self.N = 2 * L * M
        # Powers of x shift the L dimension, powers of y the M dimension.
        self.poly_a = list(poly_a) if poly_a is not None else [(3, 0), (0, 1), (0, 2)]
        self.poly_b = list(poly_b) if poly_b is not None else [(0, 3), (1, 0), (2, 0)]

    def cyclic_matrix(self, shifts) -> ParityCheckMatrix:
        """
        Sum of cyclic shift blocks of shape ``(L*M, L*M)``.

        Parameters
        ----------
        shifts : list of tuples
            ``(du, dv)`` shift pairs. Coinciding shifts cancel over GF2.
        """
        size = self.L * self.M
        # Basis: u * M + v
        checks = []
        for u in range(self.L):
            for v in range(self.M):
                checks.append(
                    [((u + du) % self.L) * self.M + (v + dv) % self.M for du, dv in shifts]
                )
        return ParityCheckMatrix(size, checks)

    def get_blocks(self) -> Tuple[ParityCheckMatrix, ParityCheckMatrix]:
        """Return the ``(A, B)`` blocks."""
        return self.cyclic_matrix(self.poly_a), self.cyclic_matrix(self.poly_b)

    def get_matrices(self) -> Tuple[ParityCheckMatrix, ParityCheckMatrix]:
        """
        Return ``(Hx, Hz)``, each of shape ``(L*M, N)``.
        """
        a, b = self.get_blocks()
        hx = a.horizontal_concat(b)
        hz = b.transpose().horizontal_concat(a.transpose())
        return hx, hz

    def get_matrix(self) -> ParityCheckMatrix:
        """Return ``Hx`` and ``Hz`` stacked block diagonally on ``2 * N`` bits."""
        return generalized_bicycle(*self.get_blocks())
