from __future__ import annotations

from typing import Tuple

BYTES_PER_PIXEL = 4
CHANNEL_ORDER = "BGRA"
IN_SET_COLOR = (0, 0, 0, 255)

def pixel_to_complex(
    x: int,
    y: int,
    *,
    width: int,
    height: int,
    x_min: float,
    x_max: float,
    y_min: float,
    y_max: float,
) -> Tuple[float, float]:
    """
    Map pixel (x, y) onto the complex plane. Axes are scaled independently
    (no aspect correction) and row 0 lands on y_min.
    """
    re = x_min + (x_max - x_min) * x / width
    im = y_min + (y_max - y_min) * y / height
    return re, im

def escape_time(cx: float, cy: float, max_iterations: int) -> int:
    """
    Iterate z <- z*z + c from z = 0 until |z|^2 >= 4 or the budget runs out.
    A result equal to max_iterations means the point did not escape.
    """
    zx = 0.0
    zy = 0.0
    i = 0
    while zx * zx + zy * zy < 4.0 and i < max_iterations:
        temp = zx * zx - zy * zy + cx
        zy = 2 * zx * zy + cy
        zx = temp
        i += 1
    return i

def color_from_iteration(i: int, max_iterations: int) -> Tuple[int, int, int, int]:
    """Return (r, g, b, a) for an iteration count using a truncating linear gradient."""
    if i == max_iterations:
        return IN_SET_COLOR
    r = 255 * i // max_iterations
    g = 255 - r
    b = 255 - r // 2
    return r, g, b, 255

def pixel_offset(x: int, y: int, width: int) -> int:
    return (y * width + x) * BYTES_PER_PIXEL
