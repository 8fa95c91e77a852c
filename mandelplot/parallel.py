"""Split a render into horizontal bands and run them on a worker pool."""

from __future__ import annotations

import multiprocessing
import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import TYPE_CHECKING, Iterator, Optional, Union

from .renderer import DEFAULT_LIMIT, _check_buffer, render_rows

if TYPE_CHECKING:
    import numpy as np

EXECUTORS = ("process", "thread")


def partition_rows(height: int, workers: int) -> Iterator[tuple[int, int]]:
    """Yield disjoint ``(start, stop)`` row ranges covering ``[0, height)``."""

    if workers <= 0:
        raise ValueError(f"workers must be positive, got {workers}")

    rows_per_band = height // workers + 1
    for start in range(0, height, rows_per_band):
        yield start, min(start + rows_per_band, height)


def _render_band(bounds, rows, upper_left, lower_right, limit) -> bytearray:
    band = bytearray((rows[1] - rows[0]) * bounds[0])
    render_rows(band, bounds, rows, upper_left, lower_right, limit)
    return band


def _make_executor(executor: str, workers: int) -> Executor:
    if executor == "process":
        # Spawned workers re-import the main module; keep heavy imports out of its top level.
        return ProcessPoolExecutor(max_workers=workers, mp_context=multiprocessing.get_context("spawn"))
    if executor == "thread":
        return ThreadPoolExecutor(max_workers=workers)
    raise ValueError(f"Unknown executor '{executor}'. Valid choices: {', '.join(EXECUTORS)}.")


def _byte_view(pixels) -> memoryview:
    try:
        view = memoryview(pixels)
    except TypeError as exc:
        raise ValueError(
            f"buffer must support the buffer protocol (bytearray, uint8 ndarray, memoryview), got {type(pixels).__name__}"
        ) from exc
    if view.readonly or view.ndim != 1 or view.format != "B":
        view.release()
        raise ValueError("buffer must be a writable, flat buffer of unsigned bytes")
    return view


def render_parallel(
    pixels: Union[bytearray, memoryview, np.ndarray],
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    *,
    workers: Optional[int] = None,
    executor: str = "process",
    limit: int = DEFAULT_LIMIT,
) -> None:
    """Render into ``pixels`` with one band per worker.

    ``pixels`` must expose a writable one-dimensional byte buffer, such as a
    ``bytearray``, a flat ``uint8`` ndarray or a ``memoryview`` of format ``B``.

    Thread workers write straight into slices of ``pixels``; process workers
    return their band and it is copied into place. The result is identical to
    :func:`mandelplot.renderer.render`.
    """

    _check_buffer(pixels, bounds, bounds[1])
    if limit <= 0:
        raise ValueError(f"iteration limit must be positive, got {limit}")
    workers = workers if workers is not None else (os.cpu_count() or 1)
    bands = list(partition_rows(bounds[1], workers))
    width = bounds[0]

    with _byte_view(pixels) as view, _make_executor(executor, len(bands)) as pool:
        if executor == "thread":
            futures = [
                pool.submit(
                    render_rows,
                    view[start * width:stop * width],
                    bounds,
                    (start, stop),
                    upper_left,
                    lower_right,
                    limit,
                )
                for start, stop in bands
            ]
            for future in futures:
                future.result()
        else:
            futures = [
                (start, stop, pool.submit(_render_band, bounds, (start, stop), upper_left, lower_right, limit))
                for start, stop in bands
            ]
            for start, stop, future in futures:
                view[start * width:stop * width] = future.result()
