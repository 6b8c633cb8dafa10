"""Scene of independently animated blobs, each driven by its own tick task."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from . import metrics
from .config import SceneConfig
from .path import to_path
from .ring import Ring, new_ring
from .simulation import RingParams, advance

logger = logging.getLogger(__name__)

LOG_EVERY_N_TICKS = 1000


@dataclass(frozen=True)
class BlobStyle:
    """Visual style of one blob, fixed at creation."""
    hue: int
    fill: str
    stroke: str

    @classmethod
    def for_index(cls, index: int, count: int, config: SceneConfig) -> "BlobStyle":
        # Integer division: low indices of large scenes share hues
        hue = (index * 360) // count if count else 0
        fill = (
            f"hsla({hue},{config.fill_saturation}%,"
            f"{config.fill_lightness}%,{config.fill_alpha})"
        )
        return cls(hue=hue, fill=fill, stroke=config.stroke)


@dataclass
class SceneEntry:
    """One blob: its ring, style and the latest serialized outline."""
    index: int
    ring: Ring
    style: BlobStyle
    path: str = ""
    ticks: int = 0
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "vertex_count": len(self.ring),
            "hue": self.style.hue,
            "fill": self.style.fill,
            "stroke": self.style.stroke,
            "ticks": self.ticks,
            "path": self.path,
        }


class Scene:
    """
    A fixed collection of blobs created once from a SceneConfig.

    Each entry is advanced independently. `step()` ticks everything
    synchronously (viewers, scripts); `start()` launches one asyncio task per
    entry that sleeps one tick interval and then ticks its entry under the
    entry lock, and `stop()` cancels them.
    """

    def __init__(self, config: SceneConfig, params: Optional[RingParams] = None):
        self.config = config
        self.params = params or RingParams()
        self.entries: List[SceneEntry] = []
        self._tasks: List[asyncio.Task] = []
        self._build()

    def _build(self) -> None:
        counts = self.config.blob_vertex_counts()
        center = self.config.canvas_center
        self.entries = []
        for i, count in enumerate(counts):
            ring = new_ring(count, self.config.radius, center)
            entry = SceneEntry(
                index=i,
                ring=ring,
                style=BlobStyle.for_index(i, len(counts), self.config),
            )
            entry.path = to_path(ring)
            self.entries.append(entry)
        logger.info(
            "Built scene: %d blobs, %d particles total",
            len(self.entries), sum(counts),
        )

    def __len__(self) -> int:
        return len(self.entries)

    def entry(self, index: int) -> SceneEntry:
        if not 0 <= index < len(self.entries):
            raise IndexError(f"Blob index {index} out of range (0..{len(self.entries) - 1})")
        return self.entries[index]

    # ------------------------------------------------------------------
    # Ticking
    # ------------------------------------------------------------------

    def tick(self, index: int) -> str:
        """Advance one entry by one tick and refresh its path."""
        entry = self.entry(index)
        advance(entry.ring, self.config.dt, self.config.canvas_center, self.params)
        entry.path = to_path(entry.ring)
        entry.ticks += 1
        if entry.ticks % LOG_EVERY_N_TICKS == 0:
            logger.debug(
                "Blob %d: tick %d, kinetic energy %.3f",
                index, entry.ticks, metrics.kinetic_energy(entry.ring),
            )
        return entry.path

    def step(self) -> None:
        """Tick every entry once."""
        for entry in self.entries:
            self.tick(entry.index)

    async def tick_async(self, index: int) -> str:
        entry = self.entry(index)
        async with entry.lock:
            return self.tick(index)

    def reset(self) -> None:
        """Rebuild all rings at their initial conditions."""
        counts = self.config.blob_vertex_counts()
        for entry, count in zip(self.entries, counts):
            entry.ring = new_ring(count, self.config.radius, self.config.canvas_center)
            entry.path = to_path(entry.ring)
            entry.ticks = 0
        logger.info("Scene reset")

    # ------------------------------------------------------------------
    # Tick tasks
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        """Launch one tick task per entry on the running event loop."""
        if self.running:
            return
        # locks belong to the loop that runs the tasks
        for entry in self.entries:
            entry.lock = asyncio.Lock()
        self._tasks = [
            asyncio.create_task(self._tick_loop(entry.index), name=f"blob-{entry.index}")
            for entry in self.entries
        ]
        logger.info("Started %d tick tasks (interval %.3fs)", len(self._tasks), self.config.tick_interval)

    async def stop(self) -> None:
        """Cancel all tick tasks and wait for them to finish."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for task, result in zip(tasks, results):
            if isinstance(result, Exception):
                logger.error("Tick task %s had failed: %r", task.get_name(), result)
        if tasks:
            logger.info("Stopped %d tick tasks", len(tasks))

    async def _tick_loop(self, index: int) -> None:
        interval = self.config.tick_interval
        while True:
            await asyncio.sleep(interval)
            try:
                await self.tick_async(index)
            except Exception:
                logger.exception("Tick of blob %d failed", index)
                raise

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def paths(self) -> List[str]:
        return [entry.path for entry in self.entries]

    def snapshot(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.entries]

    async def snapshot_async(self) -> List[Dict[str, Any]]:
        """Snapshot taken entry by entry under each entry's lock."""
        out = []
        for entry in self.entries:
            async with entry.lock:
                out.append(entry.to_dict())
        return out

    def get_state(self) -> dict:
        """Get current state for API/visualization."""
        return {
            "width": self.config.width,
            "height": self.config.height,
            "blobs": self.snapshot(),
        }

    def to_svg(self) -> str:
        """Render the whole scene as a standalone SVG document."""
        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{self.config.width:g}px" height="{self.config.height:g}px">'
        ]
        for entry in self.entries:
            lines.append(
                f'  <path d="{entry.path}" stroke="{entry.style.stroke}" fill="{entry.style.fill}"/>'
            )
        lines.append("</svg>")
        return "\n".join(lines)
