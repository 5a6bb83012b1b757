import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from mandelraster.core import BYTES_PER_PIXEL

RENDERER_CHOICES = ("auto", "reference", "processes", "jit")

DEFAULTS: Dict[str, Any] = {
    "width": 1920,
    "height": 1080,
    "x_min": -2.5,
    "x_max": 1.0,
    "y_min": -1.0,
    "y_max": 1.0,
    "max_iterations": 100,
    "renderer": "auto",
    "workers": None,
    "band_height": 32,
    "output": "mandelbrot.png",
    "progress": False,
}

# Key spellings used by the original desktop program.
_LEGACY_KEYS = {
    "maxIterations": "max_iterations",
    "xmin": "x_min",
    "xmax": "x_max",
    "ymin": "y_min",
    "ymax": "y_max",
}

@dataclass(frozen=True)
class FrameConfig:
    width: int
    height: int
    x_min: float
    x_max: float
    y_min: float
    y_max: float
    max_iterations: int

    @property
    def stride(self) -> int:
        return self.width * BYTES_PER_PIXEL

    @property
    def buffer_size(self) -> int:
        return self.stride * self.height

    def bounds(self) -> Dict[str, float]:
        return {"x_min": self.x_min, "x_max": self.x_max, "y_min": self.y_min, "y_max": self.y_max}

    def validate(self) -> "FrameConfig":
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"width/height must be positive, got {self.width}x{self.height}.")
        for name, value in self.bounds().items():
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}.")
        if self.x_min >= self.x_max:
            raise ValueError(f"x_min must be < x_max, got {self.x_min} >= {self.x_max}.")
        if self.y_min >= self.y_max:
            raise ValueError(f"y_min must be < y_max, got {self.y_min} >= {self.y_max}.")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}.")
        return self

def _canonical_keys(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in cfg.items():
        out[_LEGACY_KEYS.get(k, k)] = v
    return out

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if config_path:
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
        if not isinstance(cfg, dict):
            raise ValueError("Config JSON must be an object.")
        return _canonical_keys(cfg)
    return dict(DEFAULTS)

def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(DEFAULTS)
    out.update(_canonical_keys(cfg))

    out["width"] = int(out["width"])
    out["height"] = int(out["height"])
    out["max_iterations"] = int(out["max_iterations"])
    for k in ("x_min", "x_max", "y_min", "y_max"):
        out[k] = float(out[k])

    out["renderer"] = str(out["renderer"])
    if out["renderer"] not in RENDERER_CHOICES:
        raise ValueError(f"renderer must be one of: {', '.join(RENDERER_CHOICES)}")

    if out["workers"] is not None:
        out["workers"] = int(out["workers"])
        if out["workers"] <= 0:
            raise ValueError("workers must be positive.")

    out["band_height"] = int(out["band_height"])
    if out["band_height"] <= 0:
        raise ValueError("band_height must be positive.")

    out["output"] = str(out["output"])
    out["progress"] = bool(out["progress"])

    frame_config(out)
    return out

def frame_config(cfg: Dict[str, Any]) -> FrameConfig:
    return FrameConfig(
        width=int(cfg["width"]),
        height=int(cfg["height"]),
        x_min=float(cfg["x_min"]),
        x_max=float(cfg["x_max"]),
        y_min=float(cfg["y_min"]),
        y_max=float(cfg["y_max"]),
        max_iterations=int(cfg["max_iterations"]),
    ).validate()
