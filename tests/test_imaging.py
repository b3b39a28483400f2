"""
Unit tests for raster I/O.
"""

import io

import numpy as np
import pytest
from PIL import Image

from mosaic.exceptions import GenomeLengthError
from mosaic.genome import genome_length
from mosaic.imaging import encode_png, load_target, save_png, to_image


class TestLoadTarget:
    """Test load_target."""

    def test_resized_rgba(self, target_image):
        """Test any image becomes side*side*4 bytes."""
        data = load_target(target_image, 8)

        assert isinstance(data, bytes)
        assert len(data) == genome_length(8)

    def test_alpha_added(self, tmp_path):
        """Test RGB images gain an opaque alpha channel."""
        path = tmp_path / "rgb.png"
        Image.new("RGB", (4, 4), (10, 20, 30)).save(path)

        pixels = np.frombuffer(load_target(path, 4), dtype=np.uint8).reshape(4, 4, 4)

        assert (pixels[..., 3] == 255).all()
        assert (pixels[..., :3] == [10, 20, 30]).all()

    def test_missing_file(self, tmp_path):
        """Test loading a file that does not exist."""
        with pytest.raises(FileNotFoundError):
            load_target(tmp_path / "missing.png", 4)


class TestEncode:
    """Test PNG rendering."""

    def test_nearest_neighbour_upscale(self, side, random_target):
        """Test every source pixel becomes a scale x scale block."""
        image = Image.open(io.BytesIO(encode_png(random_target, side, scale=3)))

        assert image.size == (side * 3, side * 3)
        assert image.mode == "RGBA"

        pixels = np.asarray(image)
        source = random_target.reshape(side, side, 4)
        assert (pixels[::3, ::3] == source).all()
        assert (pixels[2::3, 2::3] == source).all()

    def test_bytes_and_array_agree(self, side, random_target):
        """Test genomes may be passed as bytes or arrays."""
        assert encode_png(random_target.tobytes(), side) == encode_png(random_target, side)

    def test_unscaled(self, side, random_target):
        """Test scale 1 keeps the raster size."""
        assert to_image(random_target, side, scale=1).size == (side, side)

    def test_length_mismatch(self, side):
        """Test rendering a genome of the wrong size."""
        with pytest.raises(GenomeLengthError):
            encode_png(bytes(10), side)

    def test_save_png(self, side, random_target, tmp_path):
        """Test PNG files are written with parent directories."""
        path = save_png(random_target, side, tmp_path / "nested" / "best.png", scale=2)

        assert path.exists()
        with Image.open(path) as image:
            assert image.size == (side * 2, side * 2)
