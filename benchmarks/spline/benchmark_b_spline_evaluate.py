"""Benchmark B-spline evaluation.

Compares the scalar evaluation (Cox-de Boor recursion per point, O(n * 2^p)
per control point) with the batched tensor evaluation (one pass per degree
level over all points) across degrees.
"""

import time

import torch

from torchbsplines import b_spline_evaluate, b_spline_regular


def benchmark_evaluate(
    degree: int,
    n_points: int = 1000,
    n_iterations: int = 10,
    batched: bool = True,
) -> float:
    """Benchmark evaluation of a 12 control point B-spline.

    Parameters
    ----------
    degree : int
        Degree of the B-spline.
    n_points : int
        Number of evaluation points.
    n_iterations : int
        Number of iterations for timing.
    batched : bool
        Use b_spline_evaluate on a tensor instead of BSpline.evaluate per point.

    Returns
    -------
    float
        Average time per evaluation of all points in milliseconds.
    """
    spline = b_spline_regular(degree, 12).with_control_points(
        torch.randn(12, dtype=torch.float64)
    )
    x = torch.rand(n_points, 1, dtype=torch.float64)
    xs = x.flatten().tolist()

    def run():
        if batched:
            return b_spline_evaluate(spline, x)
        return [spline.evaluate(v) for v in xs]

    # Warmup
    for _ in range(3):
        _ = run()

    # Benchmark
    start = time.perf_counter()
    for _ in range(n_iterations):
        _ = run()

    elapsed = time.perf_counter() - start
    return elapsed / n_iterations * 1000  # ms


def main():
    """Run evaluation benchmarks across degrees."""
    degrees = [0, 1, 2, 3, 5, 7]

    print("B-spline Evaluation Benchmark (1000 points)")
    print("=" * 50)
    print(f"{'Degree':>8} {'Scalar (ms)':>16} {'Batched (ms)':>16}")
    print("-" * 50)

    for degree in degrees:
        ms_scalar = benchmark_evaluate(degree, batched=False, n_iterations=3)
        ms_batched = benchmark_evaluate(degree, batched=True)
        print(f"{degree:>8} {ms_scalar:>16.4f} {ms_batched:>16.4f}")

    print()
    print("Notes:")
    print("- Scalar: recursive basis per control point and point")
    print("- Batched: one tensor pass per degree level")


if __name__ == "__main__":
    main()
