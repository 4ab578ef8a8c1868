"""
Check Views

A check is a sorted set of bit positions whose values must XOR to zero.
A :class:`CheckView` borrows one slice of a parity check matrix storage.
"""

import numpy as np


class CheckView:
    """
    Read-only view over the bits of a single check.

    Parameters
    ----------
    bits : ndarray
        Sorted slice of the flat bit index storage of a
        :class:`~believer.parity_check_matrix.ParityCheckMatrix`.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: np.ndarray):
        view = bits.view()
        view.flags.writeable = False
        self._bits = view

    def __len__(self) -> int:
        return int(self._bits.size)

    def __iter__(self):
        return (int(bit) for bit in self._bits)

    def __getitem__(self, index):
        return int(self._bits[index])

    def __contains__(self, bit) -> bool:
        position = np.searchsorted(self._bits, bit)
        return bool(position < self._bits.size and self._bits[position] == bit)

    def __eq__(self, other):
        if isinstance(other, CheckView):
            return np.array_equal(self._bits, other._bits)
        try:
            return np.array_equal(self._bits, np.asarray(other))
        except (TypeError, ValueError):
            return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"CheckView({self._bits.tolist()})"

    @property
    def n_bits(self) -> int:
        """Degree of the check."""
        return len(self)

    def as_array(self) -> np.ndarray:
        """Return the underlying read-only index array."""
        return self._bits

    def compute_syndrome(self, message) -> int:
        """
        XOR of the message values at the positions of this check.

        Parameters
        ----------
        message : array_like
            GF2 values (0/1) indexed by bit position.

        Returns
        -------
        int
            0 if the check is satisfied, 1 otherwise.
        """
        values = np.asarray(message, dtype=np.uint8)
        return int(np.bitwise_xor.reduce(values[self._bits] & 1, initial=0))
