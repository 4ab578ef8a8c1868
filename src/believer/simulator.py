"""
Monte Carlo Simulator

Reproducible failure rate estimation for any :class:`~believer.decoders.Decoder`.

A master generator first draws one seed per event stream. Stream ``i`` then
uses only a generator seeded with seed ``i`` and decodes random errors until
it has seen at least one success and one failure. Streams are independent,
so the combined result is the same whether they run in this process or
spread over any number of worker processes.
"""

import logging
import multiprocessing
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .decoders import Decoder, ErasureDecoder
from .parity_check_matrix import ParityCheckMatrix
from .simulation_result import SimulationResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_TRIALS_PER_STREAM = 1_000_000

_SEED_HIGH = np.iinfo(np.int64).max


class SimulationTimeoutError(RuntimeError):
    """
    A stream did not observe both a success and a failure within its trial cap.

    Attributes
    ----------
    stream_index : int
        Index of the stream that gave up
    seed : int
        Seed of that stream
    partial_result : SimulationResult
        Counts observed by the stream before giving up
    """

    def __init__(self, stream_index: int, seed: int, partial_result: SimulationResult):
        super().__init__(stream_index, seed, partial_result)
        self.stream_index = stream_index
        self.seed = seed
        self.partial_result = partial_result

    def __str__(self):
        return (
            f"stream {self.stream_index} (seed {self.seed}) did not observe both a success "
            f"and a failure within {self.partial_result.n_iterations} trials"
        )


@dataclass
class SimulationConfig:
    """
    Configuration for the Monte Carlo simulator.

    Parameters
    ----------
    num_cores : int or None, default=1
        Number of worker processes. 1 runs every stream in the calling
        process; None uses all cores but one.
    max_trials_per_stream : int or None, default=1_000_000
        Decodings allowed per stream before raising
        :class:`SimulationTimeoutError`. None removes the cap.
    """
    num_cores: Optional[int] = 1
    max_trials_per_stream: Optional[int] = DEFAULT_MAX_TRIALS_PER_STREAM


def make_random_seeds(n_events: int, seed) -> np.ndarray:
    """
    Draw the per-stream seed table from a master seed.

    Parameters
    ----------
    n_events : int
        Number of streams
    seed : int or numpy.random.Generator
        Master seed, or the master generator itself.
    """
    rng = np.random.default_rng(seed)
    return rng.integers(0, _SEED_HIGH, size=n_events, dtype=np.int64)


def simulate_stream(
    decoder: Decoder,
    stream_index: int,
    seed: int,
    max_trials: Optional[int] = DEFAULT_MAX_TRIALS_PER_STREAM,
) -> SimulationResult:
    """
    Decode random errors until both outcomes have been observed.

    Parameters
    ----------
    decoder : Decoder
        Bound decoder. Its scratch buffers are used exclusively by this call.
    stream_index : int
        Index of the stream, for error reporting
    seed : int
        Seed of the stream generator
    max_trials : int or None
        Cap on the number of decodings

    Returns
    -------
    SimulationResult
        Counts of this stream, with both counts nonzero.
    """
    rng = np.random.default_rng(seed)
    result = SimulationResult()
    while not result.has_both_outcomes():
        if max_trials is not None and result.n_iterations >= max_trials:
            raise SimulationTimeoutError(stream_index, seed, result)
        result = result.add_decoding_result(decoder.decode_random_error(rng))
    return result


# ==========================
# Prepared (persistent) worker path
#   - decoder pickled once per worker
#   - every worker owns its decoder and scratch buffers
# ==========================
_PREPARED = {}


def _prepared_worker_init(decoder: Decoder):
    """
    Initializer for multiprocessing workers.
    Stores the worker's private copy of the decoder.
    """
    _PREPARED["decoder"] = decoder


def _run_stream(decoder: Decoder, args: Tuple) -> SimulationResult:
    """
    Simulate one stream described by (stream_index, seed, max_trials, erasure_prob).
    A non-None erasure_prob is set on the decoder first.
    """
    stream_index, seed, max_trials, erasure_prob = args
    if erasure_prob is not None:
        decoder.erasure_prob = erasure_prob
    return simulate_stream(decoder, stream_index, seed, max_trials)


def _prepared_worker_simulation(args: Tuple) -> SimulationResult:
    """
    Worker simulation of a single stream.
    Args: (stream_index, seed, max_trials, erasure_prob)
    """
    return _run_stream(_PREPARED["decoder"], args)


class NEventsSimulator:
    """
    Runs ``n_events`` independent event streams against a decoder.

    Parameters
    ----------
    decoder : Decoder
        Decoder already bound to a code
    config : SimulationConfig, optional
        Simulation configuration. If None, uses default settings.
    """

    def __init__(self, decoder: Decoder, config: SimulationConfig = None):
        self.decoder = decoder
        self.config = config or SimulationConfig()
        self.num_cores = self.config.num_cores or max(1, multiprocessing.cpu_count() - 1)

    def make_prepared_pool(self):
        """
        Create a multiprocessing pool whose workers each hold a private copy
        of the decoder.
        """
        logger.debug("Starting %d workers for %r", self.num_cores, self.decoder)
        return multiprocessing.Pool(
            self.num_cores,
            initializer=_prepared_worker_init,
            initargs=(self.decoder,),
        )

    def simulate_until_n_events_are_found(
        self, n_events: int, seed, pool=None, erasure_prob: Optional[float] = None
    ) -> SimulationResult:
        """
        Run ``n_events`` streams and combine their counts.

        Parameters
        ----------
        n_events : int
            Number of streams, each contributing at least one success and
            one failure.
        seed : int or numpy.random.Generator
            Master seed of the per-stream seed table
        pool : multiprocessing.Pool, optional
            Pool from :meth:`make_prepared_pool`. It is left open.
        erasure_prob : float, optional
            New erasure probability for an :class:`~believer.decoders.ErasureDecoder`,
            applied to this simulator's decoder and to every worker copy, so
            that one prepared pool can serve several rates.

        Returns
        -------
        SimulationResult
            Combined counts, both nonzero.
        """
        if n_events < 1:
            raise ValueError("n_events must be >= 1")
        if erasure_prob is not None:
            if not isinstance(self.decoder, ErasureDecoder):
                raise TypeError(f"{type(self.decoder).__name__} has no erasure probability")
            self.decoder.erasure_prob = erasure_prob

        seeds = make_random_seeds(n_events, seed)
        max_trials = self.config.max_trials_per_stream
        args = [(i, int(s), max_trials, erasure_prob) for i, s in enumerate(seeds)]

        start_time = time.time()
        if pool is None and self.num_cores == 1:
            stream_results = [_run_stream(self.decoder, a) for a in args]
        else:
            created_pool = pool is None
            if created_pool:
                pool = self.make_prepared_pool()
            try:
                stream_results = pool.map(_prepared_worker_simulation, args)
            finally:
                if created_pool:
                    pool.close()
                    pool.join()

        result = sum(stream_results, SimulationResult())
        logger.info(
            "Simulated %d events: %d successes, %d failures in %.2fs",
            n_events,
            result.n_successes,
            result.n_failures,
            time.time() - start_time,
        )
        return result


def simulate(
    decoder: Decoder,
    n_events: int,
    seed,
    num_cores: Optional[int] = 1,
    max_trials_per_stream: Optional[int] = DEFAULT_MAX_TRIALS_PER_STREAM,
) -> SimulationResult:
    """
    Estimate the outcome statistics of ``decoder``.

    Examples
    --------
    >>> code = ParityCheckMatrix(3, [[0, 1], [1, 2]])
    >>> result = simulate(ErasureDecoder(0.5).bind(code), n_events=10, seed=123)
    >>> result.has_both_outcomes()
    True
    """
    config = SimulationConfig(num_cores=num_cores, max_trials_per_stream=max_trials_per_stream)
    return NEventsSimulator(decoder, config).simulate_until_n_events_are_found(n_events, seed)


def run_erasure_sweep(
    code: ParityCheckMatrix,
    erasure_rates: List[float],
    n_events: int,
    seed: int = 0,
    config: SimulationConfig = None,
    verbose: bool = True,
) -> Dict[float, Dict[str, float]]:
    """
    Simulate an erasure decoder on ``code`` for several erasure rates.

    Every rate uses the same master seed, so a point can be reproduced on
    its own.

    Parameters
    ----------
    code : ParityCheckMatrix
        The code to simulate
    erasure_rates : list of float
        Erasure probabilities to test, strictly between 0 and 1 in practice
        (0 and 1 never produce both outcomes).
    n_events : int
        Streams per erasure rate
    seed : int, default=0
        Master seed
    config : SimulationConfig, optional
        Simulation configuration
    verbose : bool, default=True
        Whether to print progress information

    Returns
    -------
    dict
        {p: {"successes", "failures", "iterations", "failure_rate",
        "effective_failure_rate", "seconds"}}
    """
    dimension = code.n_bits - code.rank()
    if verbose:
        print(f"Code: n={code.n_bits}, checks={code.n_checks}, k={dimension}")
        print(f"{'Erasure Rate':<15} | {'Trials':<10} | {'Failures':<10} | {'FER':<10} | {'Time (s)':<10}")
        print("-" * 70)

    results = {}
    if not erasure_rates:
        return results

    simulator = NEventsSimulator(ErasureDecoder(erasure_rates[0]).bind(code), config)
    # One set of workers for the whole sweep; each rate travels with the stream args.
    pool = simulator.make_prepared_pool() if simulator.num_cores > 1 else None
    try:
        for p in erasure_rates:
            start_time = time.time()
            result = simulator.simulate_until_n_events_are_found(n_events, seed, pool=pool, erasure_prob=p)
            elapsed = time.time() - start_time

            row = result.as_dict()
            row["effective_failure_rate"] = (
                float(result.effective_failure_rate(dimension)) if dimension > 0 else float("nan")
            )
            row["seconds"] = float(elapsed)
            results[p] = row

            if verbose:
                print(f"{p:<15.4f} | {result.n_iterations:<10} | {result.n_failures:<10} | "
                      f"{row['failure_rate']:<10.5f} | {elapsed:<10.2f}")
    finally:
        if pool is not None:
            pool.close()
            pool.join()

    return results
