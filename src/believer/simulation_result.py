"""
Simulation Result Module

Success and failure counts of a simulation, with the rates derived from them.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class SimulationResult:
    """
    Counts of successful and failed decodings.

    Results combine by adding their counts, which is associative and
    commutative, so partial results can be merged in any order.

    Parameters
    ----------
    n_successes : int, default=0
        Number of successful decodings
    n_failures : int, default=0
        Number of failed decodings

    Examples
    --------
    >>> result = SimulationResult(n_successes=9, n_failures=16)
    >>> result.failure_rate()
    0.64
    """

    n_successes: int = 0
    n_failures: int = 0

    def __post_init__(self):
        if self.n_successes < 0 or self.n_failures < 0:
            raise ValueError("counts must be non-negative")

    @classmethod
    def worst_result(cls) -> "SimulationResult":
        """A result with failure rate 1."""
        return cls(n_successes=0, n_failures=1)

    # ***** Updaters *****

    def add_decoding_result(self, result) -> "SimulationResult":
        """Return a copy of ``self`` counting one more decoding ``result``."""
        if result.is_success():
            return SimulationResult(self.n_successes + 1, self.n_failures)
        return SimulationResult(self.n_successes, self.n_failures + 1)

    def combine(self, other: "SimulationResult") -> "SimulationResult":
        return SimulationResult(
            self.n_successes + other.n_successes,
            self.n_failures + other.n_failures,
        )

    def __add__(self, other):
        if not isinstance(other, SimulationResult):
            return NotImplemented
        return self.combine(other)

    def __radd__(self, other):
        # Lets sum() start from 0.
        if other == 0:
            return self
        return self.__add__(other)

    # ***** Checkers *****

    def has_both_outcomes(self) -> bool:
        """True once at least one success and one failure were counted."""
        return self.n_successes > 0 and self.n_failures > 0

    def is_better_than(self, other: "SimulationResult") -> bool:
        return self.failure_rate() < other.failure_rate()

    # ***** Getters *****

    @property
    def n_iterations(self) -> int:
        """Total number of decodings."""
        return self.n_successes + self.n_failures

    def failure_rate(self) -> float:
        return self.n_failures / self.n_iterations

    def success_rate(self) -> float:
        return self.n_successes / self.n_iterations

    def effective_success_rate(self, dimension: int) -> float:
        """
        Success rate per bit of ``dimension`` unprotected bits with the
        same overall success rate.

        Examples
        --------
        >>> SimulationResult(9, 16).effective_success_rate(2)
        0.6
        """
        if dimension < 1:
            raise ValueError("dimension must be >= 1")
        return self.success_rate() ** (1.0 / dimension)

    def effective_failure_rate(self, dimension: int) -> float:
        """``1 - effective_success_rate(dimension)``."""
        return 1.0 - self.effective_success_rate(dimension)

    def as_dict(self) -> Dict[str, float]:
        """Counts and rates, ready for a CSV row or JSON."""
        return {
            "successes": int(self.n_successes),
            "failures": int(self.n_failures),
            "iterations": int(self.n_iterations),
            "failure_rate": float(self.failure_rate()),
        }
