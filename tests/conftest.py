"""Shared pytest fixtures for binary_classifier tests."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from binary_classifier.data.dataset import Dataset
from binary_classifier.types import Label, LabeledExample

# Per-split image counts: (ants, bees)
SPLIT_COUNTS = {"train": (3, 2), "val": (2, 2)}


def _write_images(directory: Path, count: int, color: tuple[int, int, int]) -> None:
    directory.mkdir(parents=True)
    for i in range(count):
        # Varying sizes: the extractor must cope with arbitrary dimensions
        img = Image.new("RGB", (40 + 7 * i, 30 + 5 * i), color=color)
        img.save(directory / f"img_{i:02d}.png")


@pytest.fixture()
def tmp_dataset_dir(tmp_path: Path) -> Path:
    """Minimal ants/bees dataset in the upstream directory layout.

    Structure:
    - <root>/{train,val}/ants/*.png — reddish images (CLASS_A)
    - <root>/{train,val}/bees/*.png — bluish images (CLASS_B)

    train: 3 ants + 2 bees, val: 2 ants + 2 bees. Images have different sizes.
    """
    root = tmp_path / "dataset"
    for split, (n_ants, n_bees) in SPLIT_COUNTS.items():
        _write_images(root / split / "ants", n_ants, (200, 60, 40))
        _write_images(root / split / "bees", n_bees, (40, 80, 210))
    return root


@pytest.fixture()
def tiny_dataset() -> Dataset:
    """Linearly separable 8-dimensional dataset, two examples per label."""
    a = np.array([0.9, 0.8, 0.9, 0.7, 0.1, 0.2, 0.1, 0.0], dtype=np.float32)
    b = a[::-1].copy()
    examples = [
        LabeledExample(a, Label.CLASS_A),
        LabeledExample(b, Label.CLASS_B),
        LabeledExample(a * 0.9, Label.CLASS_A),
        LabeledExample(b * 0.9, Label.CLASS_B),
    ]
    return Dataset(examples, input_dim=8)
