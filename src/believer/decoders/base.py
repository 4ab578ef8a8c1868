"""
Decoder Interface Module

Every decoding strategy binds to a parity check matrix and exposes the same
four operations, so the simulator never depends on a concrete decoder.
"""

from abc import ABC, abstractmethod


class DecodingResult:
    """
    Outcome of a single decoding.

    Strategies define their own outcome types (often an ``Enum``) and only
    need to implement :meth:`is_success`.
    """

    def is_success(self) -> bool:
        """Whether the decoding succeeded. Subclasses must override this."""
        raise NotImplementedError

    def is_failure(self) -> bool:
        return not self.is_success()


class Decoder(ABC):
    """
    Base interface for decoders.

    A decoder is created unbound, configured against a code with
    :meth:`bind` and detached with :meth:`release`. Decoders own their
    scratch buffers, so one instance must not be used by two concurrent
    simulations.
    """

    @abstractmethod
    def bind(self, code) -> "Decoder":
        """
        Configure the decoder for ``code`` and return it.

        Parameters
        ----------
        code : ParityCheckMatrix
            The parity check matrix to decode against.
        """

    @abstractmethod
    def release(self):
        """Return the bound code and reset the decoder to its unbound state."""

    @abstractmethod
    def decode(self, error) -> DecodingResult:
        """Decode ``error``. Deterministic and total over the error domain."""

    @abstractmethod
    def sample_error(self, rng):
        """
        Draw an error from the decoder's noise model.

        Parameters
        ----------
        rng : numpy.random.Generator
            The only source of randomness used.
        """

    @property
    @abstractmethod
    def code(self):
        """The bound parity check matrix."""

    def decode_random_error(self, rng) -> DecodingResult:
        """Decode an error drawn with ``rng``."""
        return self.decode(self.sample_error(rng))
