"""
File-side glue around the core: upload checks, decoding, SVG rasterization,
downscaling and writing the report. Everything here runs before or after
``validate_buffer``; the core itself never touches files.
"""

import io
import json
import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .buffer import PixelBuffer
from .config import MAX_FILE_BYTES, MAX_SIDE, REPORT_NAME, SUPPORTED_SUFFIXES
from .errors import UpstreamDecodeError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def check_upload(path: PathLike, max_bytes: int = MAX_FILE_BYTES) -> Path:
    """Reject missing files, unsupported extensions and files over ``max_bytes``."""
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UpstreamDecodeError(f"unsupported file type {path.suffix or '(none)'}; use PNG, JPG or SVG")
    if not path.is_file():
        raise UpstreamDecodeError(f"file not found: {path}")
    size = path.stat().st_size
    if size > max_bytes:
        raise UpstreamDecodeError(f"file is {size} bytes, limit is {max_bytes}")
    return path


def rasterize_svg(data: bytes, max_side: int = MAX_SIDE) -> Image.Image:
    """Render SVG bytes to an RGBA image whose longer side is ``max_side``."""
    try:
        import cairosvg
    except ImportError as e:
        raise UpstreamDecodeError("SVG input needs the 'svg' extra (cairosvg)") from e
    try:
        png = cairosvg.svg2png(bytestring=data, output_width=max_side)
    except Exception as e:
        raise UpstreamDecodeError(f"could not rasterize SVG: {e}") from e
    return Image.open(io.BytesIO(png)).convert("RGBA")


def load_image(path: PathLike, max_side: int = MAX_SIDE) -> Image.Image:
    """Decode ``path`` into an RGBA Pillow image."""
    path = Path(path)
    if path.suffix.lower() == ".svg":
        return rasterize_svg(path.read_bytes(), max_side)
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError, SyntaxError) as e:
        raise UpstreamDecodeError(f"could not decode {path.name}: {e}") from e


def fit_to_max_side(img: Image.Image, max_side: int = MAX_SIDE) -> Image.Image:
    """Downscale so the longer side is at most ``max_side``; never upscales."""
    w, h = img.size
    if max(w, h) <= max_side:
        return img
    scale = max_side / max(w, h)
    size = (max(1, round(w * scale)), max(1, round(h * scale)))
    logger.info("resizing %dx%d -> %dx%d", w, h, *size)
    return img.resize(size, Image.LANCZOS)


def load_buffer(path: PathLike, max_side: int = MAX_SIDE,
                max_bytes: int = MAX_FILE_BYTES) -> PixelBuffer:
    """Check, decode and downscale an image file into a PixelBuffer."""
    path = check_upload(path, max_bytes)
    img = fit_to_max_side(load_image(path, max_side), max_side)
    return PixelBuffer.from_array(np.asarray(img))


def save_report(report: dict, path: PathLike = REPORT_NAME) -> Path:
    """Write the report dict as indented JSON and return the path written."""
    path = Path(path)
    path.write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")
    logger.info("report written to %s", path)
    return path
