"""Read-only diagnostics for rings (used by the API, sweep and checks)."""

import numpy as np

from .ring import Ring


def centroid(ring: Ring):
    if len(ring) == 0:
        return np.array([np.nan, np.nan])
    return ring.positions.mean(axis=0)

def mean_radius(ring: Ring) -> float:
    # Mean distance of the particles from their centroid
    if len(ring) == 0:
        return float("nan")
    d = ring.positions - centroid(ring)
    return float(np.sqrt((d*d).sum(axis=1)).mean())

def mean_edge_length(ring: Ring) -> float:
    # Includes the closing edge (N-1, 0); a single particle has one zero-length edge
    if len(ring) == 0:
        return float("nan")
    diff = ring.positions - np.roll(ring.positions, -1, axis=0)
    return float(np.sqrt((diff*diff).sum(axis=1)).mean())

def kinetic_energy(ring: Ring) -> float:
    # 0.5 * mean(|v|^2) with m=1
    if len(ring) == 0:
        return 0.0
    V = ring.velocities
    return 0.5 * float((V*V).sum(axis=1).mean())

def is_finite(ring: Ring) -> bool:
    return bool(np.isfinite(ring.positions).all() and np.isfinite(ring.velocities).all())

def summary(ring: Ring) -> dict:
    c = centroid(ring)
    return {
        "vertex_count": len(ring),
        "centroid": [float(c[0]), float(c[1])] if len(ring) else None,
        "mean_radius": mean_radius(ring) if len(ring) else None,
        "mean_edge_length": mean_edge_length(ring) if len(ring) else None,
        "kinetic_energy": kinetic_energy(ring),
        "finite": is_finite(ring),
    }
