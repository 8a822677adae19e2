#!/usr/bin/env python3
"""
Selecto Performance Benchmarks

Measures the cost of the selecto primitives on their hot paths and prints the
results as rich tables:

- Cache hits: memoize() called with unchanged selector outputs
- Recomputes: memoize() called with a new output every time
- Serial short-circuit: long serial() pipeline fed the same input
- Serial full run: long serial() pipeline fed a new input every time
- Keyed fan-out: memoize_as() spread over many keys

Usage:
    python scripts/benchmark.py              # Run all benchmarks
    python scripts/benchmark.py --config     # Show current benchmark configuration
    python scripts/benchmark.py --quiet      # Only print the final table

Configuration:
    Adjust the constants at the top of the file to change benchmark parameters.
"""

import argparse
import sys
import time
from typing import Any, Callable, Dict

# Add the project root to the Python path
sys.path.insert(0, ".")

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from selecto import memoize, memoize_as, serial

# Configuration constants - adjust these to change benchmark behavior
TIME_LIMIT_SECONDS = 1.0  # Stop scaling once a run takes this long
STARTING_N = 1000  # Starting number of calls per run
SCALE_FACTOR = 1.5  # How much to multiply N by each iteration
CHAIN_LENGTH = 50  # Stages in the serial pipeline benchmarks
KEY_COUNT = 1000  # Distinct keys in the keyed fan-out benchmark


def _run_adaptive_benchmark(operation: Callable[[int], Any]) -> Dict[str, float]:
    """Scale the workload until a single run reaches TIME_LIMIT_SECONDS."""
    n = STARTING_N

    while True:
        start_time = time.perf_counter()
        operation(n)
        operation_time = time.perf_counter() - start_time

        if operation_time >= TIME_LIMIT_SECONDS:
            return {
                "max_n": n,
                "operation_time": operation_time,
                "operations_per_second": n / operation_time,
            }
        n = int(n * SCALE_FACTOR)


def _cache_hits(n: int) -> None:
    total = memoize(lambda s: s["a"], lambda s: s["b"], lambda a, b: a + b)
    state = {"a": 1, "b": 2}
    for _ in range(n):
        total(state)


def _recomputes(n: int) -> None:
    total = memoize(lambda s: s["a"], lambda s: s["b"], lambda a, b: a + b)
    for i in range(n):
        total({"a": i, "b": 2})


def _build_chain():
    stages = [lambda s: s["value"]] + [
        (lambda x, i=i: x + i) for i in range(CHAIN_LENGTH - 1)
    ]
    return serial(*stages)


def _serial_short_circuit(n: int) -> None:
    pipeline = _build_chain()
    state = {"value": 1}
    for _ in range(n):
        pipeline(state)


def _serial_full_run(n: int) -> None:
    pipeline = _build_chain()
    for i in range(n):
        pipeline({"value": i})


def _keyed_fanout(n: int) -> None:
    per_key = memoize_as(lambda s, key: s[key % len(s)], lambda value, key: value * key)
    state = tuple(range(64))
    for i in range(n):
        per_key(i % KEY_COUNT)(state)


BENCHMARKS = [
    ("Cache hits", "calls", _cache_hits),
    ("Recomputes", "calls", _recomputes),
    ("Serial short-circuit", f"calls ({CHAIN_LENGTH} stages)", _serial_short_circuit),
    ("Serial full run", f"calls ({CHAIN_LENGTH} stages)", _serial_full_run),
    ("Keyed fan-out", f"calls ({KEY_COUNT} keys)", _keyed_fanout),
]


class SelectoBenchmark:
    """Rich-formatted display for selecto performance benchmarking."""

    def __init__(self, quiet: bool = False):
        self.console = Console()
        self.quiet = quiet
        self.results: Dict[str, Dict[str, float]] = {}

    def run_benchmarks(self) -> None:
        start_time = time.time()
        if not self.quiet:
            self._display_header()

        for name, unit, operation in BENCHMARKS:
            if not self.quiet:
                self.console.print(f"[yellow]Running {name} benchmark...[/yellow]")
            result = _run_adaptive_benchmark(operation)
            result["unit"] = unit
            self.results[name] = result
            if not self.quiet:
                self._display_benchmark_progress(name, result)

        self._display_final_results(start_time)

    def _display_header(self) -> None:
        header = Panel(
            Align.center("Selecto Performance Benchmark Suite"),
            title="Selecto Benchmarks",
            border_style="blue",
        )
        self.console.print(header)
        self.console.print()

    def _display_benchmark_progress(self, name: str, result: Dict[str, Any]) -> None:
        latency_us = (result["operation_time"] / max(result["max_n"], 1)) * 1e6
        self.console.print(
            f"[green]✓[/green] {name}: {result['operations_per_second']:,.0f} ops/sec "
            f"({latency_us:.2f}μs per call)"
        )

    def _display_final_results(self, start_time: float) -> None:
        elapsed = time.time() - start_time

        table = Table(title="Final Benchmark Results")
        table.add_column("Benchmark", style="cyan", no_wrap=True)
        table.add_column("Max Workload", style="magenta")
        table.add_column("Performance", style="green", justify="right")
        table.add_column("Latency", style="yellow", justify="right")

        for name, result in self.results.items():
            latency_us = (result["operation_time"] / max(result["max_n"], 1)) * 1e6
            table.add_row(
                name,
                f"{result['max_n']:,} {result['unit']}",
                f"{result['operations_per_second'] / 1000:.1f}K ops/sec",
                f"{latency_us:.2f}μs",
            )

        self.console.print()
        self.console.print(table)

        hits = self.results.get("Cache hits", {}).get("operations_per_second", 0)
        misses = self.results.get("Recomputes", {}).get("operations_per_second", 0)
        if hits and misses:
            self.console.print()
            self.console.print(
                Panel(
                    f"Cache hits run {hits / misses:.1f}x faster than recomputes",
                    title="Summary",
                    border_style="green",
                )
            )

        self.console.print()
        self.console.print(f"[dim]Benchmark completed in {elapsed:.2f} seconds[/dim]")


def print_config() -> None:
    """Print the current benchmark configuration."""
    print("Selecto Benchmark Configuration:")
    print(f"  TIME_LIMIT_SECONDS: {TIME_LIMIT_SECONDS}")
    print(f"  STARTING_N: {STARTING_N}")
    print(f"  SCALE_FACTOR: {SCALE_FACTOR}")
    print(f"  CHAIN_LENGTH: {CHAIN_LENGTH}")
    print(f"  KEY_COUNT: {KEY_COUNT}")


def main():
    """Main entry point for the benchmark script."""
    parser = argparse.ArgumentParser(description="Selecto Performance Benchmarks")
    parser.add_argument(
        "--config", action="store_true", help="Show current benchmark configuration"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output, show only final results",
    )

    args = parser.parse_args()

    if args.config:
        print_config()
        return

    if not args.quiet:
        print_config()
        print()

    SelectoBenchmark(quiet=args.quiet).run_benchmarks()


if __name__ == "__main__":
    main()
