"""Outline path serialization for rings."""
from __future__ import annotations

from typing import Sequence

from .ring import Ring


def format_point(point: Sequence[float]) -> str:
    """Two coordinates separated by a single space, default float text."""
    return f"{float(point[0])!r} {float(point[1])!r}"


def to_path(ring: Ring) -> str:
    """
    Serialize the ring outline as an SVG path description.

    A move-to the first particle is followed by every other particle in ring
    order and finally the first particle again, so a ring of N particles
    yields N + 1 coordinate pairs (pairs after "M" are implicit line-tos).
    An empty ring yields an empty string.
    """
    if len(ring) == 0:
        return ""
    points = [format_point(p) for p in ring.positions]
    points.append(points[0])
    return "M " + " ".join(points)
