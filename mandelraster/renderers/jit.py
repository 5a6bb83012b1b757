from __future__ import annotations

from typing import Any, Dict

import numba
import numpy as np
from numba import njit, prange

from mandelraster.buffer import PixelBuffer
from mandelraster.config import FrameConfig
from mandelraster.core import BYTES_PER_PIXEL

# Compiled without fastmath so the float trajectory matches the reference
# renderer bit for bit.
@njit(parallel=True, cache=False)
def _mandelbrot_bgra(width, height, x_min, x_max, y_min, y_max, max_iterations, out):
    for y in prange(height):
        cy = y_min + (y_max - y_min) * y / height
        for x in range(width):
            cx = x_min + (x_max - x_min) * x / width
            zx = 0.0
            zy = 0.0
            i = 0
            while zx * zx + zy * zy < 4.0 and i < max_iterations:
                temp = zx * zx - zy * zy + cx
                zy = 2 * zx * zy + cy
                zx = temp
                i += 1

            if i == max_iterations:
                out[y, x, 0] = 0
                out[y, x, 1] = 0
                out[y, x, 2] = 0
            else:
                r = 255 * i // max_iterations
                out[y, x, 0] = 255 - r // 2
                out[y, x, 1] = 255 - r
                out[y, x, 2] = r
            out[y, x, 3] = 255

def render_frame_jit(cfg: FrameConfig) -> PixelBuffer:
    cfg.validate()
    out = np.empty((cfg.height, cfg.width, BYTES_PER_PIXEL), dtype=np.uint8)
    _mandelbrot_bgra(
        np.int64(cfg.width),
        np.int64(cfg.height),
        np.float64(cfg.x_min),
        np.float64(cfg.x_max),
        np.float64(cfg.y_min),
        np.float64(cfg.y_max),
        np.int64(cfg.max_iterations),
        out,
    )
    return PixelBuffer(data=out.tobytes(), width=cfg.width, height=cfg.height)

def probe_numba() -> Dict[str, Any]:
    info: Dict[str, Any] = {"version": numba.__version__, "threads": numba.get_num_threads()}
    try:
        info["threading_layer"] = numba.threading_layer()
    except ValueError:
        # Only known after the first parallel kernel has run.
        info["threading_layer"] = None
    return info
