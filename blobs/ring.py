"""Particle ring data model: the closed polygon behind one blob outline."""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np


@dataclass
class Particle:
    """A 2D point with position and velocity (canvas units, units/second)."""
    position: np.ndarray
    velocity: np.ndarray

    def __post_init__(self) -> None:
        self.position = np.array(self.position, dtype=float).reshape(2)
        self.velocity = np.array(self.velocity, dtype=float).reshape(2)


class Ring:
    """
    Ordered, cyclically connected particles.

    Particle i is adjacent to particles i-1 and i+1 (mod N); the same order is
    the draw order of the closed outline. State is held as two (N, 2) float
    arrays so the force model can work on whole rings at once.
    """

    def __init__(self, positions: np.ndarray, velocities: np.ndarray):
        positions = np.array(positions, dtype=float).reshape(-1, 2)
        velocities = np.array(velocities, dtype=float).reshape(-1, 2)
        if positions.shape != velocities.shape:
            raise ValueError(
                f"Position shape {positions.shape} doesn't match "
                f"velocity shape {velocities.shape}"
            )
        self.positions = positions
        self.velocities = velocities

    @classmethod
    def from_particles(cls, particles: Iterable[Particle]) -> "Ring":
        particles = list(particles)
        if not particles:
            return cls(np.zeros((0, 2)), np.zeros((0, 2)))
        return cls(
            np.stack([p.position for p in particles]),
            np.stack([p.velocity for p in particles]),
        )

    def __len__(self) -> int:
        return self.positions.shape[0]

    @property
    def particles(self) -> List[Particle]:
        """Snapshot copies of the particles in ring order."""
        return [
            Particle(self.positions[i].copy(), self.velocities[i].copy())
            for i in range(len(self))
        ]

    def copy(self) -> "Ring":
        return Ring(self.positions.copy(), self.velocities.copy())

    def __repr__(self) -> str:
        return f"Ring(n={len(self)})"


def new_ring(vertex_count: int, radius: float, center: Sequence[float]) -> Ring:
    """
    Place `vertex_count` particles evenly on a circle around `center`.

    The first particle sits at angle -pi/2 (top of the circle) and each next one
    is 2*pi/vertex_count further along. Every particle starts with velocity equal
    to minus its offset from the center, so the blob begins by collapsing inward.

    A vertex count of zero yields an empty ring; `advance` leaves it untouched
    and `to_path` renders it as an empty string.

    Raises:
        TypeError: vertex_count is not an integer
        ValueError: vertex_count or radius is negative, or radius is not finite
    """
    if isinstance(vertex_count, bool) or not isinstance(vertex_count, numbers.Integral):
        raise TypeError(f"Vertex count must be an integer, got {vertex_count!r}")
    if vertex_count < 0:
        raise ValueError(f"Vertex count must be non-negative, got {vertex_count}")
    if not math.isfinite(radius) or radius < 0:
        raise ValueError(f"Radius must be a non-negative finite number, got {radius}")

    center = np.array(center, dtype=float).reshape(2)
    n = int(vertex_count)
    if n == 0:
        return Ring(np.zeros((0, 2)), np.zeros((0, 2)))

    angles = -math.pi / 2 + np.arange(n) * (2 * math.pi / n)
    offsets = radius * np.column_stack((np.cos(angles), np.sin(angles)))
    return Ring(center + offsets, -offsets)
