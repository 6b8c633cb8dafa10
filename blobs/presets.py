"""Preset scenes with different blob counts and vertex counts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .config import SceneConfig


@dataclass
class Preset:
    """A preset scene configuration."""
    name: str
    description: str
    config: SceneConfig


# ============================================================================
# Preset Definitions
# ============================================================================

# 40 blobs, blob i has i * 10 vertices (blob 0 is empty)
ORIGINAL = Preset(
    name="original",
    description="40 overlapping translucent blobs with 0, 10, ..., 390 vertices",
    config=SceneConfig(n_blobs=40, vertex_step=10),
)

# Smallest closed ring
SINGLE = Preset(
    name="single",
    description="One triangle blob",
    config=SceneConfig(vertex_counts=[3], fill_alpha=0.3, stroke="rgba(0,0,0,0.5)"),
)

# Three sizes side by side
TRIO = Preset(
    name="trio",
    description="Three blobs of 3, 12 and 48 vertices",
    config=SceneConfig(vertex_counts=[3, 12, 48], fill_alpha=0.2, stroke="rgba(0,0,0,0.2)"),
)

# Many equal blobs
DENSE = Preset(
    name="dense",
    description="8 blobs of 60 vertices each",
    config=SceneConfig(vertex_counts=[60] * 8, fill_alpha=0.1, stroke="rgba(0,0,0,0.05)"),
)


# ============================================================================
# Preset Registry
# ============================================================================

PRESETS: Dict[str, Preset] = {
    "original": ORIGINAL,
    "single": SINGLE,
    "trio": TRIO,
    "dense": DENSE,
}


def list_presets() -> List[Preset]:
    """Return list of all available presets."""
    return list(PRESETS.values())


def get_preset(name: str) -> Preset:
    """Get preset by name."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]
