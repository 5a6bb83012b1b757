from __future__ import annotations

import os

from mandelraster.buffer import PixelBuffer
from mandelraster.core import BYTES_PER_PIXEL
from mandelraster.util.logging_setup import get_logger

def write_raw(buffer: PixelBuffer, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "wb") as f:
        f.write(buffer.data)
    get_logger().info("Raw BGRA buffer written: %s (%s bytes, stride=%s)", path, len(buffer.data), buffer.stride)
    return path

def read_raw(path: str, width: int, height: int) -> PixelBuffer:
    with open(path, "rb") as f:
        data = f.read()
    expected = width * height * BYTES_PER_PIXEL
    if len(data) != expected:
        raise ValueError(f"{path} holds {len(data)} bytes, expected {expected} for {width}x{height}.")
    return PixelBuffer(data=data, width=width, height=height)
