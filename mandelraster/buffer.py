from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from mandelraster.core import BYTES_PER_PIXEL, pixel_offset

@dataclass(frozen=True)
class PixelBuffer:
    """
    A finished frame: BGRA bytes, row-major, stride == width * 4 (no padding).
    Only complete buffers are ever constructed.
    """
    data: bytes
    width: int
    height: int

    def __post_init__(self):
        expected = self.width * self.height * BYTES_PER_PIXEL
        if len(self.data) != expected:
            raise ValueError(f"Pixel buffer is {len(self.data)} bytes, expected {expected} for {self.width}x{self.height}.")

    @property
    def stride(self) -> int:
        return self.width * BYTES_PER_PIXEL

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Return the (b, g, r, a) bytes stored for pixel (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x},{y}) outside {self.width}x{self.height}")
        i = pixel_offset(x, y, self.width)
        b, g, r, a = self.data[i:i + BYTES_PER_PIXEL]
        return b, g, r, a

    def as_array(self) -> np.ndarray:
        arr = np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, BYTES_PER_PIXEL)
        return arr

    def digest(self) -> str:
        return hashlib.sha256(self.data).hexdigest()
