"""
Quick performance sweep of the layout engine
"""

import argparse
import time

import numpy as np
import polars as pl

from core import LayoutEngine, summarize_sweep, sweep_layouts
from logging_config import setup_logging
from models import LayoutEngineConfig


def time_single_layouts(engine: LayoutEngine, card_counts, widths, heights) -> np.ndarray:
    """Wall time in ms of every uncached computation"""
    timings = []
    for width in widths:
        for height in heights:
            for count in card_counts:
                start_time = time.perf_counter()
                engine.compute_for_viewport(count, width, height)
                timings.append((time.perf_counter() - start_time) * 1000)
    return np.array(timings)


def quick_benchmark(max_cards: int = 50, steps: int = 12):
    print("=== LAYOUT ENGINE BENCHMARK ===")

    widths = np.linspace(200, 4000, steps).round().tolist()
    heights = np.linspace(200, 4000, steps).round().tolist()
    card_counts = range(0, max_cards + 1)

    engine = LayoutEngine(LayoutEngineConfig(cache_enabled=False))
    print(f"\n1. Timing {len(widths) * len(heights) * (max_cards + 1):,} uncached layouts...")
    timings = time_single_layouts(engine, card_counts, widths, heights)
    print(f"   Mean: {timings.mean():.3f} ms")
    print(f"   p95:  {np.percentile(timings, 95):.3f} ms")
    print(f"   Max:  {timings.max():.3f} ms")

    print("\n2. Sweep report...")
    cached_engine = LayoutEngine()
    frame = sweep_layouts(cached_engine, card_counts, widths, heights)
    with pl.Config(tbl_rows=20):
        print(summarize_sweep(frame))

    invalid = frame.filter(~pl.col("is_valid"))
    print(f"\n   Invalid layouts: {invalid.height}")
    print(f"   Cache: {cached_engine.cache_stats()}")
    return frame


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Layout engine performance sweep")
    parser.add_argument("--max-cards", type=int, default=50)
    parser.add_argument("--steps", type=int, default=12)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    setup_logging(level=args.log_level, enable_file_logging=False)
    quick_benchmark(args.max_cards, args.steps)
