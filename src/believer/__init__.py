"""
believer: sparse parity check matrices and decoding simulations

Sparse GF2 parity check matrices, an erasure decoder and a reproducible
Monte Carlo simulator for estimating failure rates of linear codes.
"""

__version__ = "0.1.0"

from .check import CheckView
from .parity_check_matrix import ParityCheckMatrix
from .ranker import Ranker, RankWorkspace
from .codes import (
    BivariateBicycleCode,
    circulant_down,
    circulant_right,
    generalized_bicycle,
    permutation_matrix,
)
from .decoders import Decoder, DecodingResult, ErasureDecoder, ErasureResult
from .simulation_result import SimulationResult
from .simulator import (
    NEventsSimulator,
    SimulationConfig,
    SimulationTimeoutError,
    run_erasure_sweep,
    simulate,
)

__all__ = [
    "CheckView",
    "ParityCheckMatrix",
    "Ranker",
    "RankWorkspace",
    "BivariateBicycleCode",
    "circulant_down",
    "circulant_right",
    "generalized_bicycle",
    "permutation_matrix",
    "Decoder",
    "DecodingResult",
    "ErasureDecoder",
    "ErasureResult",
    "SimulationResult",
    "NEventsSimulator",
    "SimulationConfig",
    "SimulationTimeoutError",
    "run_erasure_sweep",
    "simulate",
]
