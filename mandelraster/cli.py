from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, Optional

from mandelraster.config import RENDERER_CHOICES, frame_config, load_config, normalise_config
from mandelraster.core import color_from_iteration, escape_time, pixel_to_complex
from mandelraster.pipeline import choose_renderer, render_frame, renderer_info
from mandelraster.sinks.image import save_image
from mandelraster.sinks.raw import write_raw
from mandelraster.util.logging_setup import configure_root_logging, create_log_queue, get_logger, start_queue_listener
from mandelraster.util.manifest import build_manifest, write_manifest

_FRAME_OVERRIDES = ("width", "height", "x_min", "x_max", "y_min", "y_max", "max_iterations")

def _add_frame_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    p.add_argument("--width", type=int, default=None, help="Output width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Output height in pixels.")
    p.add_argument("--x-min", dest="x_min", type=float, default=None, help="Left edge of the viewport (real axis).")
    p.add_argument("--x-max", dest="x_max", type=float, default=None, help="Right edge of the viewport (real axis).")
    p.add_argument("--y-min", dest="y_min", type=float, default=None, help="Imaginary value of pixel row 0.")
    p.add_argument("--y-max", dest="y_max", type=float, default=None, help="Imaginary upper bound of the viewport.")
    p.add_argument("--max-iterations", dest="max_iterations", type=int, default=None, help="Iteration budget per pixel.")

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mandelraster", description="Render a single Mandelbrot frame as a BGRA pixel buffer.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default="", help="Log file path (rotating). Empty disables file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render one frame and hand it to the image sink.")
    _add_frame_options(r)
    r.add_argument("--renderer", type=str, default=None, choices=RENDERER_CHOICES, help="Frame generator to use.")
    r.add_argument("--workers", type=int, default=None, help="Process count for the 'processes' renderer.")
    r.add_argument("--band-height", dest="band_height", type=int, default=None, help="Rows per band for the 'processes' renderer.")
    r.add_argument("--output", type=str, default=None, help="Image path (PNG unless the extension says otherwise).")
    r.add_argument("--raw", type=str, default=None, help="Also write the raw BGRA buffer to this path.")
    r.add_argument("--manifest", type=str, default="artifacts/run.json", help="Run manifest path. Empty disables it.")
    r.add_argument("--progress", action="store_true", default=None, help="Show band progress.")

    i = sub.add_parser("inspect", help="Show the complex point, iteration count and colour of one pixel.")
    i.add_argument("x", type=int, help="Pixel column.")
    i.add_argument("y", type=int, help="Pixel row.")
    _add_frame_options(i)

    return p

def _resolve_config(args: argparse.Namespace, keys) -> Dict[str, Any]:
    cfg = load_config(args.config)
    for k in keys:
        v = getattr(args, k, None)
        if v is not None:
            cfg[k] = v
    return normalise_config(cfg)

def _render(args: argparse.Namespace, queue, log_level: int) -> int:
    logger = get_logger()
    cfg = _resolve_config(args, _FRAME_OVERRIDES + ("renderer", "workers", "band_height", "output", "progress"))
    frame = frame_config(cfg)

    buf = render_frame(
        frame,
        renderer=cfg["renderer"],
        workers=cfg["workers"],
        band_height=cfg["band_height"],
        log_queue=queue,
        log_level=log_level,
        progress=cfg["progress"],
    )

    save_image(buf, cfg["output"])
    if args.raw:
        write_raw(buf, args.raw)

    if args.manifest:
        resolved = choose_renderer(cfg["renderer"])
        rinfo = renderer_info(resolved, workers=cfg["workers"], band_height=cfg["band_height"])
        manifest = build_manifest(config=cfg, renderer_info=rinfo, buffer_digest=buf.digest(), buffer_size=len(buf.data))
        write_manifest(args.manifest, manifest)
        logger.info("Run manifest written: %s", args.manifest)
    return 0

def _inspect(args: argparse.Namespace) -> int:
    frame = frame_config(_resolve_config(args, _FRAME_OVERRIDES))
    if not (0 <= args.x < frame.width and 0 <= args.y < frame.height):
        raise ValueError(f"pixel ({args.x},{args.y}) outside {frame.width}x{frame.height}")
    cx, cy = pixel_to_complex(args.x, args.y, width=frame.width, height=frame.height, **frame.bounds())
    n = escape_time(cx, cy, frame.max_iterations)
    r, g, b, a = color_from_iteration(n, frame.max_iterations)
    status = "in-set" if n == frame.max_iterations else "escaped"
    print(f"pixel=({args.x},{args.y}) c=({cx!r},{cy!r}) iterations={n}/{frame.max_iterations} {status} rgba=({r},{g},{b},{a})")
    return 0

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    listener_logger = configure_root_logging(level=log_level, console=True, log_file=log_file)

    queue = create_log_queue()
    listener = start_queue_listener(queue, listener_logger)

    logger = get_logger()

    try:
        if args.cmd == "render":
            return _render(args, queue, log_level)
        if args.cmd == "inspect":
            return _inspect(args)
        raise RuntimeError("Unknown command.")
    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 2
    finally:
        listener.stop()
