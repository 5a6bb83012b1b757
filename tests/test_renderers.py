import numpy as np
import pytest

from mandelraster.buffer import PixelBuffer
from mandelraster.config import FrameConfig
from mandelraster.core import color_from_iteration, escape_time, pixel_offset, pixel_to_complex
from mandelraster.pipeline import choose_renderer, render_frame, renderer_info
from mandelraster.renderers.jit import probe_numba, render_frame_jit
from mandelraster.renderers.process_pool import render_frame_processes, split_bands
from mandelraster.renderers.reference import render_frame_reference, render_rows

SMALL = FrameConfig(width=37, height=23, x_min=-2.5, x_max=1.0, y_min=-1.0, y_max=1.0, max_iterations=60)
TINY = FrameConfig(width=4, height=2, x_min=-2.0, x_max=2.0, y_min=-1.0, y_max=1.0, max_iterations=50)

@pytest.fixture(scope="module")
def reference_small():
    return render_frame_reference(SMALL)

def test_buffer_length_and_stride(reference_small):
    assert len(reference_small.data) == 37 * 23 * 4
    assert reference_small.stride == 37 * 4
    assert reference_small.as_array().shape == (23, 37, 4)

def test_every_pixel_matches_per_pixel_pipeline(reference_small):
    bounds = SMALL.bounds()
    for y in range(SMALL.height):
        for x in range(SMALL.width):
            cx, cy = pixel_to_complex(x, y, width=SMALL.width, height=SMALL.height, **bounds)
            r, g, b, a = color_from_iteration(escape_time(cx, cy, SMALL.max_iterations), SMALL.max_iterations)
            i = pixel_offset(x, y, SMALL.width)
            assert tuple(reference_small.data[i:i + 4]) == (b, g, r, a)

def test_tiny_frame_layout():
    buf = render_frame_reference(TINY)
    # (1,1) maps to c = -1, which never escapes.
    assert buf.pixel(1, 1) == (0, 0, 0, 255)
    # (0,0) maps to c = -2 - i, which escapes on the first step.
    assert buf.pixel(0, 0) == (255 - 5 // 2, 255 - 5, 5, 255)
    assert all(buf.data[i + 3] == 255 for i in range(0, len(buf.data), 4))

def test_reference_is_deterministic(reference_small):
    assert render_frame_reference(SMALL).data == reference_small.data

def test_render_rows_is_a_slice_of_the_frame(reference_small):
    band = render_rows(SMALL, 5, 9)
    assert bytes(band) == reference_small.data[5 * SMALL.stride:9 * SMALL.stride]

@pytest.mark.parametrize("height,band_height,expected", [
    (10, 4, [(0, 4), (4, 8), (8, 10)]),
    (3, 32, [(0, 3)]),
    (4, 1, [(0, 1), (1, 2), (2, 3), (3, 4)]),
])
def test_split_bands(height, band_height, expected):
    assert split_bands(height, band_height) == expected

def test_split_bands_rejects_non_positive():
    with pytest.raises(ValueError):
        split_bands(10, 0)

@pytest.mark.parametrize("workers,band_height", [(1, 32), (2, 3), (3, 1)])
def test_process_pool_matches_reference(reference_small, workers, band_height):
    buf = render_frame_processes(SMALL, workers=workers, band_height=band_height)
    assert buf.data == reference_small.data

def test_jit_matches_reference(reference_small):
    assert render_frame_jit(SMALL).data == reference_small.data

def test_jit_matches_reference_on_zoomed_view():
    cfg = FrameConfig(width=31, height=17, x_min=-0.75, x_max=-0.73, y_min=0.1, y_max=0.12, max_iterations=300)
    assert render_frame_jit(cfg).data == render_frame_reference(cfg).data

def test_invalid_frame_rejected_before_rendering():
    bad = FrameConfig(width=0, height=10, x_min=-2.0, x_max=1.0, y_min=-1.0, y_max=1.0, max_iterations=10)
    for fn in (render_frame_reference, render_frame_jit, render_frame_processes):
        with pytest.raises(ValueError):
            fn(bad)

@pytest.mark.parametrize("renderer", ["reference", "processes", "jit", "auto"])
def test_render_frame_dispatch(reference_small, renderer):
    buf = render_frame(SMALL, renderer=renderer, workers=2, band_height=5)
    assert isinstance(buf, PixelBuffer)
    assert buf.digest() == reference_small.digest()

def test_choose_renderer():
    assert choose_renderer("auto") == "jit"
    assert choose_renderer("processes") == "processes"
    with pytest.raises(ValueError):
        choose_renderer("gpu")

def test_renderer_info():
    assert renderer_info("processes", workers=3, band_height=8) == {"resolved": "processes", "workers": 3, "band_height": 8}
    assert "numba" in renderer_info("jit")
    info = probe_numba()
    assert info["threads"] >= 1

def test_pixel_buffer_rejects_wrong_length():
    with pytest.raises(ValueError):
        PixelBuffer(data=b"\x00" * 7, width=1, height=2)

def test_pixel_buffer_array_is_read_only(reference_small):
    arr = reference_small.as_array()
    assert arr.dtype == np.uint8
    with pytest.raises(ValueError):
        arr[0, 0, 0] = 1
