from __future__ import annotations

import os

from PIL import Image

from mandelraster.buffer import PixelBuffer
from mandelraster.core import CHANNEL_ORDER
from mandelraster.util.logging_setup import get_logger

def to_image(buffer: PixelBuffer) -> Image.Image:
    return Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data, "raw", CHANNEL_ORDER, buffer.stride)

def save_image(buffer: PixelBuffer, path: str) -> str:
    """Write the frame to `path`; the format follows the file extension."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    to_image(buffer).save(path)
    get_logger().info("Image written: %s (%sx%s)", path, buffer.width, buffer.height)
    return path
