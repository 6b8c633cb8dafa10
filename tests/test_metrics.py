import math

import numpy as np
import pytest

from blobs.metrics import centroid, is_finite, kinetic_energy, mean_edge_length, mean_radius, summary
from blobs.ring import Ring, new_ring


def test_fresh_ring_metrics():
    ring = new_ring(4, 10.0, (0.0, 0.0))
    assert centroid(ring) == pytest.approx([0.0, 0.0], abs=1e-12)
    assert mean_radius(ring) == pytest.approx(10.0)
    assert mean_edge_length(ring) == pytest.approx(10.0 * math.sqrt(2))
    # every particle starts with speed equal to the radius
    assert kinetic_energy(ring) == pytest.approx(0.5 * 100.0)


def test_empty_ring_metrics():
    ring = new_ring(0, 10.0, (0.0, 0.0))
    assert math.isnan(mean_radius(ring))
    assert kinetic_energy(ring) == 0.0
    data = summary(ring)
    assert data["vertex_count"] == 0
    assert data["centroid"] is None


def test_is_finite_detects_nan():
    ring = Ring(np.array([[0.0, np.nan]]), np.zeros((1, 2)))
    assert not is_finite(ring)
    assert is_finite(new_ring(3, 1.0, (0.0, 0.0)))
