"""Image to feature-vector conversion.

Every image, whatever its size or mode, is reduced to a 28x28 RGB thumbnail
with Lanczos resampling and flattened channel-major: all red values in
row-major raster order, then all green, then all blue. Channel values are
scaled from ``[0, 255]`` to ``[0.0, 1.0]``.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from binary_classifier.errors import ImageDecodeError
from binary_classifier.types import CHANNELS, INPUT_DIM, SIDE, FeatureVector

__all__ = ["FeatureExtractor"]


class FeatureExtractor:
    """Convert decoded RGB rasters (or image files) into FeatureVectors.

    Stateless; one instance may be shared across worker threads.
    """

    size: tuple[int, int] = (SIDE, SIDE)
    input_dim: int = INPUT_DIM

    def __call__(self, image: Image.Image) -> FeatureVector:
        """Extract features from an already-decoded image.

        Non-RGB modes (grayscale, palette, RGBA) are converted to RGB first.

        Raises:
            ImageDecodeError: If the raster cannot be converted or resized.
        """
        try:
            rgb = image if image.mode == "RGB" else image.convert("RGB")
            thumb = rgb.resize(self.size, Image.Resampling.LANCZOS)
        except (OSError, ValueError) as e:
            raise ImageDecodeError(f"Failed to resize image: {e}") from e

        # (H, W, C) uint8 -> (C, H, W) -> flat, so each channel is contiguous
        pixels = np.asarray(thumb, dtype=np.uint8)
        planar = pixels.transpose(2, 0, 1).reshape(CHANNELS * SIDE * SIDE)
        features = planar.astype(np.float32) / np.float32(255.0)
        features.flags.writeable = False
        return features

    def from_path(self, path: Path) -> FeatureVector:
        """Decode an image file and extract its features.

        Raises:
            ImageDecodeError: If the file cannot be opened, decoded or resized.
        """
        try:
            with Image.open(path) as img:
                img.load()
                return self(img)
        except ImageDecodeError as e:
            e.path = path
            raise
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(f"Failed to decode {path}: {e}", path=path) from e
