#!/usr/bin/env python3
"""SymbolEngine Benchmark — recognition latency against the template store.

Measures how long one recognition call takes on the current hardware using
synthetic noisy strokes. No pointer device required.

Usage:
    python examples/benchmark.py
    python examples/benchmark.py --iterations 2000 --variants 4
"""

from __future__ import annotations

import argparse
import gc
import math
import sys
import time
from pathlib import Path

import numpy as np

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from symbol_engine.recognizer import Recognizer
from symbol_engine.templates import TemplateStore


def generate_candidates(n: int, rng: np.random.Generator) -> list[np.ndarray]:
    """Noisy, randomly rotated and scaled circles and triangles."""
    circle = np.column_stack([np.cos(np.linspace(0, 2 * math.pi, 40)),
                              np.sin(np.linspace(0, 2 * math.pi, 40))])
    triangle = np.array([[0.0, -1.0], [-0.8, 0.8], [0.8, 0.8], [0.0, -1.0]])

    candidates = []
    for i in range(n):
        base = circle if i % 2 == 0 else triangle
        theta = rng.uniform(-0.5, 0.5)
        rot = np.array([[math.cos(theta), -math.sin(theta)], [math.sin(theta), math.cos(theta)]])
        pts = base @ rot.T * rng.uniform(20, 200) + rng.uniform(0, 500, size=2)
        candidates.append(pts + rng.normal(0, 1.5, size=pts.shape))
    return candidates


def benchmark(recognizer: Recognizer, candidates: list[np.ndarray]) -> dict:
    for pts in candidates[:10]:
        recognizer.recognize(pts)

    gc.collect()
    times = []
    names = []
    for pts in candidates:
        t0 = time.perf_counter()
        result = recognizer.recognize(pts)
        times.append((time.perf_counter() - t0) * 1000)
        names.append(result.name)

    arr = np.array(times)
    return {
        "mean_ms": float(arr.mean()),
        "p50_ms": float(np.percentile(arr, 50)),
        "p95_ms": float(np.percentile(arr, 95)),
        "max_ms": float(arr.max()),
        "throughput": len(times) / (arr.sum() / 1000),
        "names": names,
    }


def main():
    parser = argparse.ArgumentParser(description="SymbolEngine recognition benchmark")
    parser.add_argument("--iterations", type=int, default=500)
    parser.add_argument("--variants", type=int, default=1, help="Copies of each default template")
    parser.add_argument("--points", type=int, default=64, help="Resample count")
    args = parser.parse_args()

    store = TemplateStore(resample_points=args.points)
    for _ in range(args.variants):
        store.add_defaults()
    recognizer = Recognizer(store)

    rng = np.random.default_rng(0)
    candidates = generate_candidates(args.iterations, rng)

    print(f"Templates: {len(store)} | Resample points: {args.points} | Iterations: {args.iterations}")
    stats = benchmark(recognizer, candidates)
    expected = ["circle" if i % 2 == 0 else "triangle" for i in range(len(candidates))]
    accuracy = sum(a == b for a, b in zip(stats["names"], expected)) / len(expected)

    print(f"  mean  {stats['mean_ms']:.3f} ms")
    print(f"  p50   {stats['p50_ms']:.3f} ms")
    print(f"  p95   {stats['p95_ms']:.3f} ms")
    print(f"  max   {stats['max_ms']:.3f} ms")
    print(f"  {stats['throughput']:.0f} recognitions/s, accuracy {accuracy:.1%}")


if __name__ == "__main__":
    main()
