from __future__ import annotations

import time

from mandelraster.buffer import PixelBuffer
from mandelraster.config import FrameConfig
from mandelraster.core import BYTES_PER_PIXEL, color_from_iteration, escape_time, pixel_to_complex
from mandelraster.util.logging_setup import get_logger

def render_rows(cfg: FrameConfig, y0: int, y1: int) -> bytearray:
    """
    Compute rows [y0, y1) of the frame as BGRA bytes. The returned band is
    (y1 - y0) * stride bytes and starts at byte offset y0 * stride of the frame.
    """
    width = cfg.width
    band = bytearray((y1 - y0) * cfg.stride)
    bounds = cfg.bounds()
    i = 0
    for y in range(y0, y1):
        for x in range(width):
            cx, cy = pixel_to_complex(x, y, width=width, height=cfg.height, **bounds)
            n = escape_time(cx, cy, cfg.max_iterations)
            r, g, b, a = color_from_iteration(n, cfg.max_iterations)
            band[i] = b
            band[i + 1] = g
            band[i + 2] = r
            band[i + 3] = a
            i += BYTES_PER_PIXEL
    return band

def render_frame_reference(cfg: FrameConfig) -> PixelBuffer:
    logger = get_logger()
    cfg.validate()
    start = time.perf_counter()
    data = render_rows(cfg, 0, cfg.height)
    logger.debug("Reference render %sx%s done in %.3fs", cfg.width, cfg.height, time.perf_counter() - start)
    return PixelBuffer(data=bytes(data), width=cfg.width, height=cfg.height)
