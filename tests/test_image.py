import numpy as np
import PIL.Image
import pytest

from mandelplot import ImageWriteError, write_image


def _gradient(bounds):
    return bytearray(i % 256 for i in range(bounds[0] * bounds[1]))


def test_write_image_round_trip(tmp_path):
    bounds = (32, 20)
    pixels = _gradient(bounds)
    path = write_image(tmp_path / "mandel.png", pixels, bounds)

    with PIL.Image.open(path) as image:
        assert image.mode == "L"
        assert image.size == bounds
        assert image.tobytes() == bytes(pixels)


def test_write_image_numpy_buffer_and_explicit_format(tmp_path):
    bounds = (6, 4)
    pixels = np.arange(24, dtype=np.uint8)
    path = write_image(tmp_path / "nested" / "mandel", pixels, bounds, image_format="tif")

    assert path.exists()
    with PIL.Image.open(path) as image:
        assert image.format == "TIFF"
        assert image.tobytes() == pixels.tobytes()


def test_write_image_rejects_mismatched_buffer(tmp_path):
    with pytest.raises(ValueError):
        write_image(tmp_path / "mandel.png", bytearray(5), (2, 2))


def test_write_image_unknown_format(tmp_path):
    with pytest.raises(ImageWriteError):
        write_image(tmp_path / "mandel.nosuchformat", bytearray(4), (2, 2))


def test_write_image_without_format(tmp_path):
    with pytest.raises(ImageWriteError):
        write_image(tmp_path / "mandel", bytearray(4), (2, 2))


def test_write_image_to_directory(tmp_path):
    with pytest.raises(ImageWriteError) as excinfo:
        write_image(tmp_path, bytearray(4), (2, 2), image_format="png")
    assert isinstance(excinfo.value, OSError)
