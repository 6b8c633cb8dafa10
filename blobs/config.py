"""Scene configuration for the blob ring animation."""
from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import List, Optional, Tuple

MAX_VERTICES = 1000  # per blob

@dataclass
class SceneConfig:
    """Configuration for a scene of independently animated blobs."""

    # Canvas
    width: float = 1000.0
    height: float = 1000.0

    # Blobs
    n_blobs: int = 40
    vertex_step: int = 10  # entry i gets i * vertex_step vertices
    vertex_counts: Optional[List[int]] = None  # explicit override of the mapping above
    radius: float = 100.0

    # Styling
    fill_saturation: int = 80
    fill_lightness: int = 50
    fill_alpha: float = 0.05
    stroke: str = "rgba(0,0,0,0.01)"

    # Timing
    tick_interval: float = 0.01  # Time between ticks of one blob
    frame_interval: float = 0.03  # Time between WebSocket frames

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if self.vertex_counts is not None:
            self.vertex_counts = list(self.vertex_counts)
            bad = [c for c in self.vertex_counts
                   if isinstance(c, bool) or not isinstance(c, numbers.Integral)]
            if bad:
                raise TypeError(f"Vertex counts must be integers, got {bad}")
            self.vertex_counts = [int(c) for c in self.vertex_counts]
            if any(c < 0 for c in self.vertex_counts):
                raise ValueError(f"Vertex counts must be non-negative, got {self.vertex_counts}")
            self.n_blobs = len(self.vertex_counts)
        if self.n_blobs < 0:
            raise ValueError(f"Blob count must be non-negative, got {self.n_blobs}")
        if self.vertex_step < 0:
            raise ValueError(f"Vertex step must be non-negative, got {self.vertex_step}")
        largest = max(self.blob_vertex_counts(), default=0)
        if largest > MAX_VERTICES:
            # repulsion works on (N, N, 2) arrays every tick
            raise ValueError(f"Blob with {largest} vertices exceeds the limit of {MAX_VERTICES}")
        if self.radius < 0:
            raise ValueError(f"Radius must be non-negative, got {self.radius}")
        if self.tick_interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {self.tick_interval}")
        if self.frame_interval <= 0:
            raise ValueError(f"Frame interval must be positive, got {self.frame_interval}")

    @property
    def canvas_center(self) -> Tuple[float, float]:
        """Fixed global attraction point shared by every blob."""
        return (self.width / 2.0, self.height / 2.0)

    @property
    def dt(self) -> float:
        """Simulated seconds per tick."""
        return self.tick_interval

    def blob_vertex_counts(self) -> List[int]:
        """Vertex count of every scene entry, in entry order."""
        if self.vertex_counts is not None:
            return list(self.vertex_counts)
        return [i * self.vertex_step for i in range(self.n_blobs)]

    def as_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "n_blobs": self.n_blobs,
            "vertex_step": self.vertex_step,
            "vertex_counts": self.blob_vertex_counts(),
            "radius": self.radius,
            "fill_saturation": self.fill_saturation,
            "fill_lightness": self.fill_lightness,
            "fill_alpha": self.fill_alpha,
            "stroke": self.stroke,
            "tick_interval": self.tick_interval,
            "frame_interval": self.frame_interval,
        }


DEFAULT_CONFIG = SceneConfig()
