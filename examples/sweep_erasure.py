#!/usr/bin/env python3
"""
Erasure sweep runner.

Simulates the erasure decoder on a code for a range of erasure rates and saves:
- results CSV: one row per p
- metadata JSON: run configuration
- optionally, a PNG of failure rate vs p

Examples:
  python examples/sweep_erasure.py --code hamming -n 2000
  python examples/sweep_erasure.py --code gross --p-min 0.30 --p-max 0.50 --p-step 0.02 --cores 8 --plot
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import sys

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from believer import BivariateBicycleCode, ParityCheckMatrix, SimulationConfig, run_erasure_sweep


def frange(start: float, stop: float, step: float) -> List[float]:
    if step <= 0:
        raise ValueError("--p-step must be > 0")
    vals = []
    x = start
    while x <= stop + 1e-12:
        vals.append(round(x, 10))
        x += step
    return vals


def build_code(name: str) -> ParityCheckMatrix:
    if name == "repetition":
        return ParityCheckMatrix(3, [[0, 1], [1, 2]])
    if name == "hamming":
        return ParityCheckMatrix(7, [[0, 1, 2, 4], [0, 1, 3, 5], [0, 2, 3, 6]])
    if name == "gross":
        hx, _ = BivariateBicycleCode(L=12, M=6).get_matrices()
        return hx
    raise ValueError(f"Unknown code '{name}'")


def plot(results, path: Path, title: str):
    import matplotlib.pyplot as plt

    ps = sorted(results)
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(ps, [results[p]["failure_rate"] for p in ps], marker="o", label="failure rate")
    ax.plot(ps, [results[p]["effective_failure_rate"] for p in ps], marker="s", label="effective (per bit)")
    ax.set_xlabel("erasure probability p")
    ax.set_ylabel("rate")
    ax.set_yscale("log")
    ax.set_title(title)
    ax.grid(True, which="both", alpha=0.3)
    ax.legend()
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Erasure decoder sweep.")
    parser.add_argument("--code", choices=["repetition", "hamming", "gross"], default="hamming")
    parser.add_argument("-n", "--n-events", type=int, default=1000, help="Streams per p (default: 1000)")
    parser.add_argument("--seed", type=int, default=0, help="Master seed (default: 0)")
    parser.add_argument("--p-min", type=float, default=0.05)
    parser.add_argument("--p-max", type=float, default=0.50)
    parser.add_argument("--p-step", type=float, default=0.05)
    parser.add_argument("--cores", type=int, default=1, help="Worker processes (0 = all but one)")
    parser.add_argument("--max-trials", type=int, default=1_000_000, help="Trial cap per stream (0 = no cap)")
    parser.add_argument("--plot", action="store_true", help="Also save a PNG plot")
    parser.add_argument("--tag", type=str, default="", help="Tag for output filenames")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def make_config(args: argparse.Namespace) -> SimulationConfig:
    """0 means "all cores but one" for --cores and "no cap" for --max-trials."""
    return SimulationConfig(num_cores=args.cores or None, max_trials_per_stream=args.max_trials or None)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    code = build_code(args.code)
    ps = frange(args.p_min, args.p_max, args.p_step)
    config = make_config(args)

    results = run_erasure_sweep(code, ps, n_events=args.n_events, seed=args.seed, config=config)

    out_dir = Path("results")
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    stem = f"erasure_{args.code}_{stamp}" + (f"_{args.tag}" if args.tag else "")
    csv_path = out_dir / f"{stem}.csv"
    json_path = out_dir / f"{stem}.json"

    fieldnames = ["p", "successes", "failures", "iterations", "failure_rate", "effective_failure_rate", "seconds"]
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        for p, row in results.items():
            w.writerow({"p": p, **row})

    meta = {
        "timestamp_utc": stamp,
        "code": args.code,
        "n_bits": code.n_bits,
        "n_checks": code.n_checks,
        "dimension": code.n_bits - code.rank(),
        "n_events": args.n_events,
        "seed": args.seed,
        "p_grid": ps,
        "num_cores": config.num_cores,
        "max_trials_per_stream": config.max_trials_per_stream,
    }
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2, sort_keys=True)

    print(f"\nSaved CSV: {csv_path}")
    print(f"Saved JSON: {json_path}")

    if args.plot:
        png_path = out_dir / f"{stem}.png"
        plot(results, png_path, f"Erasure decoding, {args.code} code")
        print(f"Saved plot: {png_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
