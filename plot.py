import os
import sys
import time
import warnings
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import numpy as np

from argparse import ArgumentParser, RawDescriptionHelpFormatter

from mandelplot import (
    DEFAULT_LIMIT,
    ImageWriteError,
    parse_bounds,
    parse_complex,
    render_parallel,
    write_image,
)
from mandelplot.parallel import EXECUTORS

BACKENDS = ("python", "tensorflow")

_EPILOG = """\
Corners with a negative real part look like options, so put the positional
arguments after "--":

  %(prog)s -- mandel.png 1000x750 -1.20,0.35 -1,0.20
"""


@dataclass(frozen=True)
class RenderConfig:
    output_path: Path
    image_format: str
    bounds: tuple[int, int]
    upper_left: complex
    lower_right: complex
    limit: int
    backend: str
    workers: int
    executor: str


def build_parser():
    parser = ArgumentParser(
        description='Plot the Mandelbrot set as an 8-bit grayscale image.',
        epilog=_EPILOG,
        formatter_class=RawDescriptionHelpFormatter,
    )

    parser.add_argument('file', metavar='FILE',
                        help='image file to write, e.g. mandel.png')

    parser.add_argument('pixels', metavar='PIXELS',
                        help='image size as WIDTHxHEIGHT, e.g. 1000x750')

    parser.add_argument('upper_left', metavar='UPPERLEFT',
                        help='complex point at the upper-left corner as RE,IM')

    parser.add_argument('lower_right', metavar='LOWERRIGHT',
                        help='complex point at the lower-right corner as RE,IM')

    parser.add_argument('--limit', type=int,
                        dest='limit', help='maximum number of iterations per point',
                        metavar='LIMIT', default=DEFAULT_LIMIT)

    parser.add_argument('--backend', choices=BACKENDS, default='python',
                        help='"python" renders row bands on a worker pool; "tensorflow" renders the whole raster at once.')

    parser.add_argument('--workers', type=int,
                        dest='workers', help='number of row bands rendered in parallel (default: CPU count)',
                        metavar='WORKERS', default=None)

    parser.add_argument('--executor', choices=EXECUTORS, default='process',
                        help='pool used by the python backend.')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for FILE. Can be any extension supported by Pillow. Default: the extension of FILE, else "png".',
                        metavar='FORMAT', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_render_config(opt, parser: ArgumentParser) -> RenderConfig:
    bounds = parse_bounds(opt.pixels)
    if bounds is None:
        parser.error(f"error parsing image dimensions '{opt.pixels}'; expected WIDTHxHEIGHT.")

    upper_left = parse_complex(opt.upper_left)
    if upper_left is None:
        parser.error(f"error parsing upper left corner point '{opt.upper_left}'; expected RE,IM.")

    lower_right = parse_complex(opt.lower_right)
    if lower_right is None:
        parser.error(f"error parsing lower right corner point '{opt.lower_right}'; expected RE,IM.")

    if opt.limit <= 0:
        parser.error("--limit must be positive.")

    workers = opt.workers if opt.workers is not None else (os.cpu_count() or 1)
    if workers <= 0:
        parser.error("--workers must be positive.")

    explicit_format = (opt.format or "").lower().lstrip(".")

    output_path = Path(opt.file).expanduser()
    if str(opt.file).endswith(tuple(filter(None, {os.sep, os.altsep}))):
        parser.error("FILE must be a file path, not a directory.")
    if output_path.exists() and output_path.is_dir():
        parser.error("FILE must point to a file, not a directory.")

    suffix = output_path.suffix
    if suffix:
        image_format = suffix.lower().lstrip(".")
        if explicit_format and explicit_format != image_format:
            parser.error(f"FILE extension {suffix} does not match --format {explicit_format}.")
    else:
        image_format = explicit_format or "png"
        output_path = output_path.with_suffix(f".{image_format}")

    return RenderConfig(
        output_path=output_path.resolve(),
        image_format=image_format,
        bounds=bounds,
        upper_left=upper_left,
        lower_right=lower_right,
        limit=opt.limit,
        backend=opt.backend,
        workers=workers,
        executor=opt.executor,
    )


def _load_tensorflow():
    # Imported on demand; spawned band workers re-import this module.
    import tensorflow as tf

    if _suppress_messages:
        tf.get_logger().setLevel("ERROR")
        for handler in tf.get_logger().handlers:
            handler.setLevel("ERROR")
    return tf


def render_pixels(config: RenderConfig) -> np.ndarray:
    """Render ``config`` with the selected backend into a flat uint8 buffer."""

    width, height = config.bounds
    if config.backend == "tensorflow":
        tf = _load_tensorflow()
        from mandelplot.tensor import render_tensor

        log("Rendering with TensorFlow %s on /CPU:0" % tf.__version__)
        pixels = render_tensor(
            config.bounds,
            config.upper_left,
            config.lower_right,
            limit=config.limit,
        )
        return pixels.reshape(width * height)

    log("Rendering %d rows on %d %s workers" % (height, config.workers, config.executor))
    pixels = np.zeros(width * height, dtype=np.uint8)
    render_parallel(
        pixels,
        config.bounds,
        config.upper_left,
        config.lower_right,
        workers=config.workers,
        executor=config.executor,
        limit=config.limit,
    )
    return pixels


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = resolve_render_config(opt, parser)
    log("Viewport %s .. %s at %dx%d, limit %d" % (config.upper_left, config.lower_right, *config.bounds, config.limit))

    started = time.perf_counter()
    pixels = render_pixels(config)
    log("Rendered in %.2fs" % (time.perf_counter() - started))

    try:
        path = write_image(config.output_path, pixels, config.bounds, config.image_format)
    except ImageWriteError as exc:
        parser.exit(1, f"{parser.prog}: error writing image: {exc}\n")

    log("Wrote %s" % path)
    return 0


if __name__ == '__main__':
    sys.exit(main())
