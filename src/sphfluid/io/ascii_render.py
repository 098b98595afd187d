"""
Terminal renderer: draws the position snapshot as a character grid over the
bounds box. Usable directly as a FluidSimulation sink.
"""

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np

from sphfluid.core.config import Bounds


def render_ascii(positions: np.ndarray, bounds: Bounds, width: int = 40, height: int = 20) -> str:
    """
    Rasterize positions into a `height` x `width` grid framed by the walls.

    Cells hold '.' for one particle, 'o' for 2-4 and '#' for more.
    Row 0 of the output is the top (max y) of the box.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be > 0")

    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
    lo = bounds.min
    span = bounds.max - lo

    counts = np.zeros((height, width), dtype=np.int64)
    if pos.shape[0]:
        u = (pos - lo[None, :]) / span[None, :]
        cols = np.clip((u[:, 0] * width).astype(np.int64), 0, width - 1)
        rows = np.clip(((1.0 - u[:, 1]) * height).astype(np.int64), 0, height - 1)
        np.add.at(counts, (rows, cols), 1)

    glyphs = np.full(counts.shape, " ", dtype="<U1")
    glyphs[counts == 1] = "."
    glyphs[(counts >= 2) & (counts <= 4)] = "o"
    glyphs[counts > 4] = "#"

    border = "+" + "-" * width + "+"
    lines = [border]
    lines.extend("|" + "".join(row) + "|" for row in glyphs)
    lines.append(border)
    return "\n".join(lines)


class AsciiRenderer:
    """Sink that writes one frame to `stream` every `every` snapshots."""

    def __init__(self, bounds: Bounds, width: int = 40, height: int = 20, every: int = 1, stream: TextIO | None = None):
        self.bounds = bounds
        self.width = int(width)
        self.height = int(height)
        self.every = max(1, int(every))
        self.stream = stream if stream is not None else sys.stdout
        self.frames_seen = 0
        self.last_frame: str | None = None

    def __call__(self, positions: np.ndarray) -> None:
        self.frames_seen += 1
        if self.frames_seen % self.every:
            return
        self.last_frame = render_ascii(positions, self.bounds, width=self.width, height=self.height)
        self.stream.write(self.last_frame + "\n")
