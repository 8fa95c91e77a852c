"""Escape-time rendering of the Mandelbrot set into grayscale buffers."""

from __future__ import annotations

from typing import MutableSequence, Optional

ESCAPE_RADIUS_SQUARED = 4.0
DEFAULT_LIMIT = 255


def pixel_to_point(
    bounds: tuple[int, int],
    pixel: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
) -> complex:
    """Return the point on the complex plane under ``pixel``.

    ``bounds`` is the ``(width, height)`` of the raster and ``pixel`` a
    ``(column, row)`` inside it. Rows grow downwards while the imaginary axis
    grows upwards, hence the subtraction on the vertical axis.
    """

    span_re = lower_right.real - upper_left.real
    span_im = upper_left.imag - lower_right.imag
    column, row = pixel
    return complex(
        upper_left.real + column * span_re / bounds[0],
        upper_left.imag - row * span_im / bounds[1],
    )


def escape_time(c: complex, limit: int) -> Optional[int]:
    """Try to decide whether ``c`` is in the Mandelbrot set.

    Returns the iteration index at which ``z`` left the circle of radius two,
    or ``None`` when ``limit`` iterations were not enough to prove divergence.
    """

    if limit <= 0:
        raise ValueError(f"iteration limit must be positive, got {limit}")

    z = 0j
    for i in range(limit):
        if z.real * z.real + z.imag * z.imag > ESCAPE_RADIUS_SQUARED:
            return i
        z = z * z + c
    return None


def shade(count: Optional[int]) -> int:
    """Map an escape count to a gray level; quick escapes are bright."""

    if count is None:
        return 0
    return min(max(255 - count, 0), 255)


def _check_buffer(pixels, bounds: tuple[int, int], rows: int) -> None:
    width, height = bounds
    if width <= 0 or height <= 0:
        raise ValueError(f"bounds must be positive, got {width}x{height}")
    if len(pixels) != width * rows:
        raise ValueError(
            f"buffer holds {len(pixels)} bytes but {width}x{rows} pixels were requested"
        )


def render_rows(
    band: MutableSequence[int],
    bounds: tuple[int, int],
    rows: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = DEFAULT_LIMIT,
) -> None:
    """Render rows ``[start, stop)`` of the full raster into ``band``.

    ``band`` holds exactly ``(stop - start) * width`` bytes; points are mapped
    against the full ``bounds`` so bands line up with a whole-image render.
    """

    start, stop = rows
    if not 0 <= start <= stop <= bounds[1]:
        raise ValueError(f"row range {start}..{stop} outside 0..{bounds[1]}")
    _check_buffer(band, bounds, stop - start)
    if limit <= 0:
        raise ValueError(f"iteration limit must be positive, got {limit}")

    width = bounds[0]
    for row in range(start, stop):
        offset = (row - start) * width
        for column in range(width):
            point = pixel_to_point(bounds, (column, row), upper_left, lower_right)
            band[offset + column] = shade(escape_time(point, limit))


def render(
    pixels: MutableSequence[int],
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    limit: int = DEFAULT_LIMIT,
) -> None:
    """Render a rectangle of the Mandelbrot set into ``pixels``.

    ``pixels`` holds one grayscale byte per pixel in row-major order and must
    be exactly ``width * height`` long. Every byte is overwritten.
    """

    _check_buffer(pixels, bounds, bounds[1])
    render_rows(pixels, bounds, (0, bounds[1]), upper_left, lower_right, limit)
