"""Particle ring physics: per-tick force model and integration."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .ring import Ring

logger = logging.getLogger(__name__)


# ============================================================================
# Force parameters
# ============================================================================

@dataclass
class RingParams:
    """Constants of the ring force model."""
    edge_length: float = 0.5   # ideal length of every ring edge
    repulsion: float = 1.0     # scale of the inverse-distance pair repulsion
    cohesion: float = 1.0      # constant pull toward the blob's own centroid
    centering: float = 0.25    # constant pull toward the canvas center


DEFAULT_PARAMS = RingParams()


def normalize(vectors: np.ndarray) -> np.ndarray:
    """
    Return unit vectors along the last axis.

    Zero-length vectors map to the zero vector, so degenerate geometry
    (coincident particles, zero-length edges, a particle sitting exactly on its
    attraction point) contributes no force instead of NaN.
    """
    norms = np.linalg.norm(vectors, axis=-1, keepdims=True)
    safe = np.where(norms > 0.0, norms, 1.0)
    return np.where(norms > 0.0, vectors / safe, 0.0)


# ============================================================================
# Individual force terms
# ============================================================================

def pairwise_repulsion(positions: np.ndarray, strength: float = 1.0) -> np.ndarray:
    """
    Impulse matrix of shape (N, N, 2); entry [a, b] is the impulse on a from b.

    Each impulse is diff.normalized() / |diff| with diff = p[a] - p[b], i.e. a
    vector of magnitude 1/|diff| pointing from b toward a. The matrix is exactly
    antisymmetric, and the diagonal and coincident pairs are zero.
    """
    diff = positions[:, None, :] - positions[None, :, :]
    dist2 = np.sum(diff * diff, axis=-1, keepdims=True)
    safe = np.where(dist2 > 0.0, dist2, 1.0)
    return np.where(dist2 > 0.0, strength * diff / safe, 0.0)


def repulsion_impulses(positions: np.ndarray, strength: float = 1.0) -> np.ndarray:
    """Net repulsion velocity change of every particle, shape (N, 2)."""
    if positions.shape[0] < 2:
        return np.zeros_like(positions)
    return pairwise_repulsion(positions, strength).sum(axis=1)


def tension_deltas(positions: np.ndarray, edge_length: float = 0.5) -> np.ndarray:
    """
    Per-edge spring deltas, shape (N, 2); row i belongs to edge (i, i+1 mod N).

    The spring pulls each edge vector toward the same direction at length
    `edge_length`: delta = normalize(diff) * edge_length - diff.
    """
    diff = positions - np.roll(positions, -1, axis=0)
    return normalize(diff) * edge_length - diff


def tension_impulses(positions: np.ndarray, edge_length: float = 0.5) -> np.ndarray:
    """Net tension velocity change of every particle, shape (N, 2)."""
    delta = tension_deltas(positions, edge_length)
    # particle i gains its own edge delta and loses the delta of edge (i-1, i)
    return delta - np.roll(delta, 1, axis=0)


def attraction_pulls(positions: np.ndarray, target: Sequence[float], strength: float) -> np.ndarray:
    """Distance-independent pull of magnitude `strength` toward `target`."""
    target = np.asarray(target, dtype=float).reshape(1, 2)
    return normalize(target - positions) * strength


def centroid(positions: np.ndarray) -> np.ndarray:
    """Arithmetic mean position; requires at least one particle."""
    return positions.mean(axis=0)


# ============================================================================
# Tick
# ============================================================================

def advance(
    ring: Ring,
    dt: float,
    canvas_center: Sequence[float],
    params: Optional[RingParams] = None,
) -> None:
    """
    Advance `ring` by one tick of `dt` seconds, in place.

    1. centroid of the pre-integration positions
    2. positions += velocities * dt (velocities from the previous tick)
    3. pairwise inverse-distance repulsion
    4. ring tension toward edge_length
    5. constant pull toward the centroid from step 1
    6. weaker constant pull toward canvas_center

    Forces 3-6 are evaluated at the moved positions. There is no damping and no
    speed limit. An empty ring is left untouched.
    """
    if not math.isfinite(dt) or dt <= 0.0:
        raise ValueError(f"Time step must be a positive finite number, got {dt}")
    params = params or DEFAULT_PARAMS

    if len(ring) == 0:
        logger.debug("advance() on empty ring, nothing to do")
        return

    midpoint = centroid(ring.positions)

    ring.positions += ring.velocities * dt
    positions = ring.positions

    dv = repulsion_impulses(positions, params.repulsion)
    dv += tension_impulses(positions, params.edge_length)
    dv += attraction_pulls(positions, midpoint, params.cohesion)
    dv += attraction_pulls(positions, canvas_center, params.centering)

    ring.velocities += dv
