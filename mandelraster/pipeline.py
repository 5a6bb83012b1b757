from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional

from mandelraster.buffer import PixelBuffer
from mandelraster.config import FrameConfig
from mandelraster.renderers.jit import probe_numba, render_frame_jit
from mandelraster.renderers.process_pool import render_frame_processes
from mandelraster.renderers.reference import render_frame_reference
from mandelraster.util.logging_setup import get_logger

RENDERERS = ("reference", "processes", "jit")

def choose_renderer(renderer: str) -> str:
    if renderer in RENDERERS:
        return renderer
    if renderer != "auto":
        raise ValueError(f"renderer must be one of: auto, {', '.join(RENDERERS)}")
    return "jit"

def renderer_info(resolved: str, *, workers: Optional[int] = None, band_height: Optional[int] = None) -> Dict[str, Any]:
    info: Dict[str, Any] = {"resolved": resolved}
    if resolved == "processes":
        info.update({"workers": workers or os.cpu_count(), "band_height": band_height})
    elif resolved == "jit":
        info.update({"numba": probe_numba()})
    return info

def render_frame(
    cfg: FrameConfig,
    *,
    renderer: str = "auto",
    workers: Optional[int] = None,
    band_height: int = 32,
    log_queue=None,
    log_level: int = logging.INFO,
    progress: bool = False,
) -> PixelBuffer:
    """
    Validate the frame configuration, then compute the whole frame with the
    selected renderer. The buffer is returned only once every pixel is written.
    """
    logger = get_logger()
    cfg.validate()
    resolved = choose_renderer(renderer)

    logger.info("Render start size=%sx%s re=%s..%s im=%s..%s max_iterations=%s renderer=%s",
                cfg.width, cfg.height, cfg.x_min, cfg.x_max, cfg.y_min, cfg.y_max, cfg.max_iterations, resolved)
    start = time.perf_counter()

    if resolved == "reference":
        buf = render_frame_reference(cfg)
    elif resolved == "processes":
        buf = render_frame_processes(
            cfg, workers=workers, band_height=band_height,
            log_queue=log_queue, log_level=log_level, progress=progress,
        )
    else:
        buf = render_frame_jit(cfg)

    logger.info("Render complete renderer=%s bytes=%s elapsed=%.3fs", resolved, len(buf.data), time.perf_counter() - start)
    return buf
