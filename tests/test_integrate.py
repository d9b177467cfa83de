"""
Tests for sampling and chunked trapezoid integration.
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from wkb_solver.numerics.integrate import (
    SampledPoint,
    SampledPoints,
    chunk_slices,
    cumulative_integrate,
    evaluate_function_between,
    index_to_range,
    integrate,
    parallel_map,
)


def square(x):
    return x ** 2


@pytest.mark.unit
class TestEvaluateFunctionBetween:
    """Test uniform sampling."""

    def test_exact_five_points(self):
        """x² on [-2, 2] with 5 samples gives the exact grid values."""
        points = evaluate_function_between(square, -2.0, 2.0, 5)

        assert list(points) == [
            SampledPoint(-2.0, 4.0),
            SampledPoint(-1.0, 1.0),
            SampledPoint(0.0, 0.0),
            SampledPoint(1.0, 1.0),
            SampledPoint(2.0, 4.0),
        ]

    def test_length_and_endpoints(self):
        points = evaluate_function_between(np.sin, 0.0, 3.0, 2345, chunk_size=100)

        assert len(points) == 2345
        assert points[0].x == 0.0
        assert points[-1].x == 3.0
        assert_allclose(points.y, np.sin(points.x))

    def test_constant_function_is_broadcast(self):
        """Functions returning a scalar still produce one value per sample."""
        points = evaluate_function_between(lambda x: 2.0, 0.0, 1.0, 10, chunk_size=3)

        assert_allclose(points.y, np.full(10, 2.0))

    def test_map_values(self):
        points = evaluate_function_between(lambda x: 1j * x, 0.0, 1.0, 11)
        density = points.map_values(lambda y: np.abs(y) ** 2)

        assert_allclose(density.y, points.x ** 2)


@pytest.mark.unit
class TestIntegrate:
    """Test the chunked composite trapezoid rule."""

    @pytest.mark.parametrize("a,b", [(-3.0, 5.0), (0.0, 1.0), (-10.0, -2.0), (4.0, -1.0)])
    def test_square(self, a, b):
        """∫x² = (b³ − a³)/3 with 64000 samples in 1000-point chunks."""
        points = evaluate_function_between(square, a, b, 64000)
        result = integrate(points, 1000)

        assert_allclose(result, (b ** 3 - a ** 3) / 3.0, atol=1e-5)

    def test_empty_interval(self):
        points = evaluate_function_between(square, 2.0, 2.0, 100)

        assert integrate(points, 7) == 0.0

    def test_fewer_than_two_points(self):
        assert integrate(SampledPoints(x=np.array([1.0]), y=np.array([3.0]))) == 0.0
        assert integrate([]) == 0.0

    def test_chunk_size_invariance(self):
        points = evaluate_function_between(np.exp, -1.0, 2.0, 10001)
        reference = integrate(points, 10001)

        for chunk_size in [1, 2, 7, 1000, 3333, 20000]:
            assert_allclose(integrate(points, chunk_size), reference, rtol=1e-10)

    def test_worker_count_invariance(self):
        points = evaluate_function_between(np.cos, 0.0, 5.0, 5000)

        single = integrate(points, 100, max_workers=1)
        many = integrate(points, 100, max_workers=8)

        assert_allclose(single, many, rtol=1e-12)

    def test_sequence_of_pairs(self):
        pairs = [(0.0, 0.0), (1.0, 1.0), (2.0, 0.0)]

        assert_allclose(integrate(pairs, 1), 1.0)

    def test_complex_integrand(self):
        """∫₀^π e^{ix} dx = 2i."""
        points = evaluate_function_between(lambda x: np.exp(1j * x), 0.0, np.pi, 20001)

        assert_allclose(integrate(points, 512), 2j, atol=1e-7)


@pytest.mark.unit
class TestCumulativeIntegrate:
    """Test the running trapezoid integral."""

    def test_starts_at_zero(self):
        points = evaluate_function_between(square, 0.0, 1.0, 50)

        assert cumulative_integrate(points, 7)[0] == 0.0

    def test_last_value_matches_integrate(self):
        points = evaluate_function_between(np.exp, -1.0, 1.0, 4001)

        running = cumulative_integrate(points, 333)

        assert_allclose(running[-1], integrate(points, 333), rtol=1e-10)

    def test_constant_gives_linear(self):
        points = evaluate_function_between(lambda x: 3.0, -1.0, 4.0, 101)

        assert_allclose(cumulative_integrate(points, 10), 3.0 * (points.x + 1.0), atol=1e-10)

    def test_chunk_size_invariance(self):
        points = evaluate_function_between(np.sin, 0.0, 4.0, 3001)
        reference = cumulative_integrate(points, 3001)

        for chunk_size in [1, 5, 64, 1000]:
            assert_allclose(cumulative_integrate(points, chunk_size), reference, atol=1e-10)

    def test_square_antiderivative(self):
        points = evaluate_function_between(square, 0.0, 2.0, 20001)

        assert_allclose(cumulative_integrate(points, 1000), points.x ** 3 / 3.0, atol=1e-7)


@pytest.mark.unit
class TestHelpers:
    """Test small helpers."""

    def test_index_to_range(self):
        assert index_to_range(0.0, 0.0, 10.0, -1.0, 1.0) == -1.0
        assert index_to_range(5.0, 0.0, 10.0, -1.0, 1.0) == 0.0
        assert index_to_range(10.0, 0.0, 10.0, -1.0, 1.0) == 1.0

    def test_chunk_slices_cover_range(self):
        slices = chunk_slices(10, 3)

        assert [(s.start, s.stop) for s in slices] == [(0, 3), (3, 6), (6, 9), (9, 10)]

    def test_parallel_map_preserves_order(self):
        result = parallel_map(lambda i: i * i, list(range(50)), max_workers=4)

        assert result == [i * i for i in range(50)]
