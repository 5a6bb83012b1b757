from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Tuple

from tqdm import tqdm

from mandelraster.buffer import PixelBuffer
from mandelraster.config import FrameConfig
from mandelraster.renderers.reference import render_rows
from mandelraster.util.logging_setup import get_logger, logging_initialiser

_G = {}

def _init_worker(cfg: FrameConfig, log_queue, log_level: int) -> None:
    _G["cfg"] = cfg
    logging_initialiser(log_queue, log_level)

def _render_band(y0_y1: Tuple[int, int]) -> Tuple[int, bytes]:
    y0, y1 = y0_y1
    band = render_rows(_G["cfg"], y0, y1)
    get_logger().debug("Rendered rows %s..%s", y0, y1)
    return y0, bytes(band)

def split_bands(height: int, band_height: int) -> List[Tuple[int, int]]:
    if height <= 0 or band_height <= 0:
        raise ValueError("height and band_height must be positive.")
    bands: List[Tuple[int, int]] = []
    y = 0
    while y < height:
        y1 = min(height, y + band_height)
        bands.append((y, y1))
        y = y1
    return bands

def render_frame_processes(
    cfg: FrameConfig,
    *,
    workers: Optional[int] = None,
    band_height: int = 32,
    log_queue=None,
    log_level: int = logging.INFO,
    progress: bool = False,
) -> PixelBuffer:
    """
    Render the frame in row bands on a process pool. Bands are disjoint, so
    each result is copied into its own slice of the frame without locking.
    """
    cfg.validate()
    logger = get_logger()
    bands = split_bands(cfg.height, band_height)
    workers = workers or os.cpu_count() or 1
    buf = bytearray(cfg.buffer_size)
    stride = cfg.stride

    logger.debug("Process render bands=%s workers=%s band_height=%s", len(bands), workers, band_height)

    with ProcessPoolExecutor(
        max_workers=min(workers, len(bands)),
        initializer=_init_worker,
        initargs=(cfg, log_queue, log_level),
    ) as pool:
        results = pool.map(_render_band, bands)
        for y0, band in tqdm(results, total=len(bands), unit="band", disable=not progress):
            buf[y0 * stride:y0 * stride + len(band)] = band

    return PixelBuffer(data=bytes(buf), width=cfg.width, height=cfg.height)
