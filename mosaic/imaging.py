"""
Raster I/O for mosaic-evolution.

Converts between image files and the flat RGBA byte buffers the genetic
search works on:
- ``load_target``: decode any Pillow-readable image into a target raster
- ``encode_png`` / ``save_png``: render a genome as an upscaled PNG
"""

from __future__ import annotations

import io
from pathlib import Path

import numpy as np
from loguru import logger
from PIL import Image

from mosaic.exceptions import GenomeLengthError
from mosaic.genome import CHANNELS, genome_length

# Upscale factor of the reference viewer (32x32 shown at 320x320)
DEFAULT_SCALE = 10


def load_target(path: str | Path, side: int) -> bytes:
    """
    Load an image file as a ``side x side`` RGBA target raster.

    Args:
        path: Image file readable by Pillow
        side: Side of the square raster

    Returns:
        ``side * side * 4`` bytes in row-major RGBA order
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Target image not found: {path}")

    with Image.open(path) as image:
        raster = image.convert("RGBA").resize((side, side), Image.Resampling.LANCZOS)
        data = raster.tobytes()

    logger.info(f"Loaded target {path} as {side}x{side} RGBA raster")
    return data


def to_image(genome: bytes | np.ndarray, side: int, scale: int = DEFAULT_SCALE) -> Image.Image:
    """
    Build a Pillow image from a genome, upscaled with nearest-neighbour.

    Raises:
        GenomeLengthError: If the genome is not ``side * side * 4`` bytes
    """
    if isinstance(genome, np.ndarray):
        pixels = np.ascontiguousarray(genome, dtype=np.uint8).ravel()
    else:
        pixels = np.frombuffer(genome, dtype=np.uint8)

    expected = genome_length(side)
    if pixels.shape[0] != expected:
        raise GenomeLengthError(expected, pixels.shape[0], "render")

    image = Image.fromarray(pixels.reshape(side, side, CHANNELS))
    if scale != 1:
        image = image.resize((side * scale, side * scale), Image.Resampling.NEAREST)
    return image


def encode_png(genome: bytes | np.ndarray, side: int, scale: int = DEFAULT_SCALE) -> bytes:
    """Render a genome as PNG bytes."""
    buffer = io.BytesIO()
    to_image(genome, side, scale).save(buffer, format="PNG")
    return buffer.getvalue()


def save_png(
    genome: bytes | np.ndarray,
    side: int,
    path: str | Path,
    scale: int = DEFAULT_SCALE,
) -> Path:
    """
    Write a genome to ``path`` as a PNG file.

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(genome, side, scale))

    logger.info(f"Saved {side * scale}x{side * scale} image to {path}")
    return path


__all__ = [
    "DEFAULT_SCALE",
    "load_target",
    "to_image",
    "encode_png",
    "save_png",
]
