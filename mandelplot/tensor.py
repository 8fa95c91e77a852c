"""Vectorised escape-time renderer built on TensorFlow."""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .renderer import DEFAULT_LIMIT, ESCAPE_RADIUS_SQUARED


@tf.function
def _escape_step(i: tf.Tensor, zs: tf.Tensor, cs: tf.Tensor, counts: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    """Record escapes for iteration ``i`` then advance the points still inside."""

    norm = tf.math.square(tf.math.real(zs)) + tf.math.square(tf.math.imag(zs))
    radius = tf.cast(ESCAPE_RADIUS_SQUARED, norm.dtype)
    escaping = tf.logical_and(counts < 0, norm > radius)
    counts = tf.where(escaping, i, counts)
    zs = tf.where(counts < 0, zs * zs + cs, zs)
    return zs, counts


@tf.function
def _escape_run(cs: tf.Tensor, limit: tf.Tensor) -> tf.Tensor:
    """Iterate every point until it escapes or ``limit`` is reached."""

    limit = tf.cast(limit, tf.int32)
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    counts = -tf.ones(tf.shape(cs), dtype=tf.int32)

    def cond(i: tf.Tensor, zs: tf.Tensor, counts: tf.Tensor) -> tf.Tensor:
        return tf.logical_and(tf.less(i, limit), tf.reduce_any(counts < 0))

    def body(i: tf.Tensor, zs: tf.Tensor, counts: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
        zs, counts = _escape_step(i, zs, cs, counts)
        return i + 1, zs, counts

    _, _, counts = tf.while_loop(cond, body, (i, zs, counts))
    return counts


def _sample_grid(bounds: tuple[int, int], upper_left: complex, lower_right: complex) -> tuple[np.ndarray, np.ndarray]:
    width, height = bounds
    span_re = np.float64(lower_right.real - upper_left.real)
    span_im = np.float64(upper_left.imag - lower_right.imag)
    columns = np.arange(width, dtype=np.float64)
    rows = np.arange(height, dtype=np.float64)
    re = np.float64(upper_left.real) + columns * span_re / np.float64(width)
    im = np.float64(upper_left.imag) - rows * span_im / np.float64(height)
    return re, im


def render_tensor(
    bounds: tuple[int, int],
    upper_left: complex,
    lower_right: complex,
    *,
    limit: int = DEFAULT_LIMIT,
    device: Optional[str] = None,
) -> np.ndarray:
    """Render the whole raster at once; returns a ``(height, width)`` uint8 array."""

    width, height = bounds
    if width <= 0 or height <= 0:
        raise ValueError(f"bounds must be positive, got {width}x{height}")
    if limit <= 0:
        raise ValueError(f"iteration limit must be positive, got {limit}")

    re, im = _sample_grid(bounds, upper_left, lower_right)

    with tf.device(device if device is not None else "/CPU:0"):
        X, Y = tf.meshgrid(tf.convert_to_tensor(re, dtype=tf.float64), tf.convert_to_tensor(im, dtype=tf.float64))
        cs = tf.complex(X, Y)
        counts = _escape_run(cs, tf.constant(limit, dtype=tf.int32))
        gray = tf.where(counts < 0, 0, tf.clip_by_value(255 - counts, 0, 255))

    return gray.numpy().astype(np.uint8)
