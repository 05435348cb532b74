"""Hex coordinates with layer membership.

Coordinates are axial ``(q, r)`` positions on a pointy-topped hex grid plus a
signed ``layer``. Negative layers are underground, all others are surface.
Refer to https://www.redblobgames.com/grids/hexagons/ for the axial system.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

import numpy as np

# fmt: off
HEX_DIRECTIONS: tuple[tuple[int, int], ...] = (
            (0, -1), (1, -1),
    (-1, 0),                (1, 0),
            (-1, 1), (0, 1),
)
# fmt: on


class LayerClass(enum.Enum):
    """Coarse classification of a layer."""

    SURFACE = "surface"
    UNDERGROUND = "underground"


def classify_layer(layer: int) -> LayerClass:
    """Classify a layer value as surface (>= 0) or underground (< 0)."""
    return LayerClass.UNDERGROUND if layer < 0 else LayerClass.SURFACE


@dataclass(frozen=True, order=True, slots=True)
class HexCoordinate:
    """Position of a location: axial hex coordinate and layer.

    Attributes:
        q: axial column
        r: axial row
        layer: signed layer, negative values are underground
    """

    q: int
    r: int
    layer: int = 0

    @property
    def planar(self) -> tuple[int, int]:
        """The (q, r) position ignoring the layer."""
        return self.q, self.r

    @property
    def layer_class(self) -> LayerClass:
        """Surface or underground, derived from the stored layer."""
        return classify_layer(self.layer)

    @property
    def is_underground(self) -> bool:  # noqa: D102
        return self.layer < 0

    def neighbor(self, direction: tuple[int, int]) -> HexCoordinate:
        """Return the coordinate one step in direction on the same layer."""
        dq, dr = direction
        return HexCoordinate(self.q + dq, self.r + dr, self.layer)

    def neighbors(self) -> list[HexCoordinate]:
        """Return the six same-layer neighbor coordinates."""
        return [self.neighbor(direction) for direction in HEX_DIRECTIONS]

    def with_layer(self, layer: int) -> HexCoordinate:
        """Return the coordinate at the same planar position on another layer."""
        return HexCoordinate(self.q, self.r, layer)

    def same_planar(self, other: HexCoordinate) -> bool:  # noqa: D102
        return self.q == other.q and self.r == other.r

    def same_layer_class(self, other: HexCoordinate) -> bool:  # noqa: D102
        return self.layer_class is other.layer_class

    def distance(self, other: HexCoordinate) -> int:
        """Planar hex distance, ignoring layers."""
        dq = self.q - other.q
        dr = self.r - other.r
        return (abs(dq) + abs(dr) + abs(dq + dr)) // 2

    def line_to(self, other: HexCoordinate) -> list[HexCoordinate]:
        """Hexes on the straight planar line from self to other, both ends included.

        The result stays on this coordinate's layer. Points exactly on a hex
        edge are nudged to one side so the line is deterministic.
        """
        steps = self.distance(other)
        if steps == 0:
            return [self]

        line = []
        for i in range(steps + 1):
            t = i / steps
            q = self.q + (other.q - self.q) * t + 1e-6
            r = self.r + (other.r - self.r) * t + 1e-6
            line.append(_round_hex(q, r, self.layer))
        return line

    def __str__(self) -> str:  # noqa: D105
        return f"({self.q}, {self.r}, {self.layer})"


def _round_hex(q: float, r: float, layer: int) -> HexCoordinate:
    s = -q - r
    rq, rr, rs = round(q), round(r), round(s)
    dq, dr, ds = abs(rq - q), abs(rr - r), abs(rs - s)
    if dq > dr and dq > ds:
        rq = -rr - rs
    elif dr > ds:
        rr = -rq - rs
    return HexCoordinate(rq, rr, layer)


def hex_to_pixel(q: int, r: int, size: float = 1.0) -> np.ndarray:
    """Centre of an axial hex in pixel space for a pointy-topped layout."""
    x = size * (math.sqrt(3) * q + math.sqrt(3) / 2 * r)
    y = size * 1.5 * r
    return np.array([x, y])
