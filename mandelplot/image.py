"""Persist grayscale buffers as image files with Pillow."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import PIL.Image


class ImageWriteError(OSError):
    """Raised when an image file cannot be created or encoded."""


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_image(
    filename: Union[str, Path],
    pixels,
    bounds: tuple[int, int],
    image_format: Optional[str] = None,
) -> Path:
    """Write ``pixels``, whose dimensions are ``bounds``, to ``filename``.

    The buffer is stored as a single-channel 8-bit image. ``image_format``
    defaults to the file suffix. Returns the path written.
    """

    width, height = bounds
    if len(pixels) != width * height:
        raise ValueError(f"buffer holds {len(pixels)} bytes but bounds are {width}x{height}")

    output_path = Path(filename).expanduser()
    ext = (image_format or output_path.suffix).lower().lstrip(".")
    if not ext:
        raise ImageWriteError(f"cannot infer an image format for {output_path}")

    image = PIL.Image.frombytes("L", (width, height), bytes(pixels))
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(str(output_path), format=_pil_format_name(ext))
    except (KeyError, ValueError) as exc:
        raise ImageWriteError(f"cannot encode {output_path} as {ext}: {exc}") from exc
    except OSError as exc:
        raise ImageWriteError(f"cannot write {output_path}: {exc}") from exc
    return output_path
