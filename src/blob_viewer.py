#!/usr/bin/env python3
"""
Blob Viewer — pygame window for a live scene

Every frame ticks all blobs once and draws each ring as a translucent filled
polygon with a faint outline, in entry order (later blobs on top).

Close the window to quit.
"""

import argparse
import colorsys
import re

import pygame

from blobs.presets import get_preset, list_presets
from blobs.scene import Scene, SceneEntry

BACKGROUND = (255, 255, 255)

_RGBA = re.compile(r"rgba\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*\)")


def fill_color(entry: SceneEntry, saturation: int, lightness: int, alpha: float):
    """RGBA tuple for the blob's hsla fill."""
    r, g, b = colorsys.hls_to_rgb(entry.style.hue / 360.0, lightness / 100.0, saturation / 100.0)
    return (int(r * 255), int(g * 255), int(b * 255), int(round(alpha * 255)))


def stroke_color(stroke: str):
    """RGBA tuple for an 'rgba(r,g,b,a)' stroke; opaque black otherwise."""
    m = _RGBA.fullmatch(stroke.replace(" ", ""))
    if m is None:
        return (0, 0, 0, 255)
    r, g, b, a = (float(v) for v in m.groups())
    return (int(r), int(g), int(b), int(round(a * 255)))


class BlobViewer:
    """Main viewer loop"""

    def __init__(self, scene: Scene, fps: int = 100):
        self.scene = scene
        self.fps = fps
        config = scene.config

        pygame.init()
        self.screen = pygame.display.set_mode((int(config.width), int(config.height)))
        pygame.display.set_caption("Blob Rings")
        self.clock = pygame.time.Clock()

        # Colors are fixed per entry
        self.fills = [
            fill_color(e, config.fill_saturation, config.fill_lightness, config.fill_alpha)
            for e in scene.entries
        ]
        self.strokes = [stroke_color(e.style.stroke) for e in scene.entries]

    def draw(self):
        self.screen.fill(BACKGROUND)
        for entry, fill, stroke in zip(self.scene.entries, self.fills, self.strokes):
            if len(entry.ring) < 3:
                # pygame polygons need three vertices
                continue
            points = [(float(x), float(y)) for x, y in entry.ring.positions]
            layer = pygame.Surface(self.screen.get_size(), pygame.SRCALPHA)
            pygame.draw.polygon(layer, fill, points)
            pygame.draw.polygon(layer, stroke, points, width=1)
            self.screen.blit(layer, (0, 0))

    def run(self):
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False

            self.scene.step()
            self.draw()
            pygame.display.flip()
            self.clock.tick(self.fps)

        pygame.quit()


def main():
    parser = argparse.ArgumentParser(description="Blob ring viewer")
    parser.add_argument("--preset", type=str, default="original",
                        choices=[p.name for p in list_presets()])
    parser.add_argument("--fps", type=int, default=100,
                        help="frames (and ticks) per second")
    args = parser.parse_args()

    preset = get_preset(args.preset)
    print(f"Starting viewer with preset '{preset.name}': {preset.description}")
    viewer = BlobViewer(Scene(preset.config), fps=args.fps)
    viewer.run()


if __name__ == "__main__":
    main()
