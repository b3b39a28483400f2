"""
Fitness Evaluation Module

Scores a candidate raster against the target image:

    fitness = 1 - MSE / 255²

where MSE is the mean of squared per-byte differences over the whole RGBA
buffer. The score lies in [0, 1] and reaches 1.0 only on an exact match.
"""

from __future__ import annotations

import numpy as np

from mosaic.exceptions import GenomeLengthError

# Largest possible squared difference between two bytes
MAX_SQUARED_ERROR = 255.0 ** 2

# Raw byte buffers accepted wherever a raster is expected
RasterLike = np.ndarray | bytes | bytearray | memoryview


def as_raster(data: RasterLike) -> np.ndarray:
    """View ``data`` as a flat ``uint8`` array without copying byte buffers."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(data, dtype=np.uint8)
    return np.asarray(data, dtype=np.uint8).ravel()


def squared_error(
    genome: RasterLike,
    target: RasterLike,
    workspace: np.ndarray | None = None,
) -> int:
    """
    Sum of squared per-byte differences between two equal-length buffers.

    Args:
        genome: Candidate ``uint8`` buffer or raw bytes
        target: Reference ``uint8`` buffer or raw bytes
        workspace: Optional ``int64`` scratch of the same length, reused
            across calls to avoid allocating per evaluation

    Raises:
        GenomeLengthError: If the buffers (or the workspace) differ in length
    """
    genome = as_raster(genome)
    target = as_raster(target)

    length = genome.shape[0]
    if target.shape[0] != length:
        raise GenomeLengthError(length, target.shape[0], "fitness")

    if workspace is None:
        workspace = np.empty(length, dtype=np.int64)
    elif workspace.shape[0] != length:
        raise GenomeLengthError(length, workspace.shape[0], "fitness workspace")

    np.subtract(genome, target, out=workspace, dtype=np.int64)
    return int(np.dot(workspace, workspace))


def similarity(
    genome: RasterLike,
    target: RasterLike,
    workspace: np.ndarray | None = None,
) -> float:
    """
    Normalized similarity of ``genome`` to ``target``.

    Returns:
        ``1 - mse / 255**2``; 1.0 for an exact match and for empty buffers
    """
    total = squared_error(genome, target, workspace)
    length = len(as_raster(genome))
    if length == 0:
        return 1.0

    mse = total / length
    return 1.0 - mse / MAX_SQUARED_ERROR


__all__ = [
    "RasterLike",
    "as_raster",
    "MAX_SQUARED_ERROR",
    "squared_error",
    "similarity",
]
