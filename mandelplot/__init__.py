"""Public API for Mandelbrot rendering utilities."""

from .image import ImageWriteError, write_image
from .parallel import partition_rows, render_parallel
from .parsing import parse_bounds, parse_complex, parse_pair
from .renderer import (
    DEFAULT_LIMIT,
    escape_time,
    pixel_to_point,
    render,
    render_rows,
    shade,
)

__all__ = [
    "DEFAULT_LIMIT",
    "ImageWriteError",
    "escape_time",
    "parse_bounds",
    "parse_complex",
    "parse_pair",
    "partition_rows",
    "pixel_to_point",
    "render",
    "render_parallel",
    "render_rows",
    "shade",
    "write_image",
]
