"""Labeled image dataset held fully in memory as feature vectors."""

from __future__ import annotations

import concurrent.futures
import os
from collections import Counter
from collections.abc import Iterable, Iterator
from pathlib import Path

import numpy as np
from loguru import logger
from tqdm import tqdm

from binary_classifier.config import DatasetConfig
from binary_classifier.data.utils import get_files
from binary_classifier.errors import DatasetConfigError, ImageDecodeError
from binary_classifier.features.extractor import FeatureExtractor
from binary_classifier.types import INPUT_DIM, FeatureVector, Label, LabeledExample

__all__ = ["Dataset"]


class Dataset:
    """Ordered, read-only sequence of LabeledExamples.

    The order is fixed at construction time. ``from_directory`` shuffles once;
    iterating the dataset any number of times afterwards yields the same order.

    Args:
        examples: Examples in their final order.
        input_dim: Required feature-vector length for every example.

    Raises:
        ValueError: If any example's features are not a 1-D vector of
            length ``input_dim``.
    """

    def __init__(
        self, examples: Iterable[LabeledExample], input_dim: int = INPUT_DIM
    ) -> None:
        self._examples: tuple[LabeledExample, ...] = tuple(examples)
        self.input_dim = input_dim
        for i, ex in enumerate(self._examples):
            if ex.features.shape != (input_dim,):
                msg = (
                    f"Example {i} has features of shape {ex.features.shape}, "
                    f"expected ({input_dim},)"
                )
                raise ValueError(msg)

    def __len__(self) -> int:
        return len(self._examples)

    def __getitem__(self, idx: int) -> LabeledExample:
        return self._examples[idx]

    def __iter__(self) -> Iterator[LabeledExample]:
        return iter(self._examples)

    @property
    def labels(self) -> list[Label]:
        """Per-example labels in dataset order."""
        return [ex.label for ex in self._examples]

    def label_counts(self) -> dict[Label, int]:
        """Number of examples per label (both labels always present as keys)."""
        counts = Counter(ex.label for ex in self._examples)
        return {label: counts.get(label, 0) for label in Label}

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    @classmethod
    def from_directory(
        cls,
        config: DatasetConfig,
        rng: np.random.Generator | None = None,
        extractor: FeatureExtractor | None = None,
    ) -> Dataset:
        """Build a shuffled Dataset from ``config.root/{class_dirs}``.

        Every file of ``class_dirs[0]`` becomes a CLASS_A example and every
        file of ``class_dirs[1]`` a CLASS_B example. The combined sequence is
        permuted once with ``rng``.

        Both label directories are validated and listed before any image is
        decoded.

        Args:
            config: Dataset location and build options.
            rng: Random generator for the shuffle. Defaults to
                ``np.random.default_rng(config.seed)``.
            extractor: Feature extractor; a default one is created if omitted.

        Raises:
            DatasetConfigError: A directory is missing, not a directory,
                unreadable, or holds no images.
            ImageDecodeError: A file failed to decode and
                ``config.on_decode_error == "raise"``.
        """
        if rng is None:
            rng = np.random.default_rng(config.seed)
        if extractor is None:
            extractor = FeatureExtractor()

        root = Path(config.root)
        _check_dir(root, "Dataset root")

        listings: list[tuple[Label, list[Path]]] = []
        for label, dirname in zip(Label, config.class_dirs, strict=True):
            label_dir = root / dirname
            _check_dir(label_dir, f"Label directory for {label.name}")
            files = _list_images(label_dir, config.extensions)
            logger.debug(f"{label.name}: {len(files)} file(s) in {label_dir}")
            listings.append((label, files))

        num_threads = config.num_threads or min(32, (os.cpu_count() or 1) + 4)

        examples: list[LabeledExample] = []
        for label, files in listings:
            extracted = _extract_all(
                files,
                extractor,
                num_threads=num_threads,
                skip_errors=config.on_decode_error == "skip",
                desc=label.name,
            )
            if not extracted:
                msg = f"No decodable images for {label.name} under {root}"
                raise DatasetConfigError(msg)
            examples.extend(
                LabeledExample(features, label, path) for path, features in extracted
            )

        order = rng.permutation(len(examples))
        dataset = cls((examples[i] for i in order), input_dim=extractor.input_dim)

        counts = dataset.label_counts()
        logger.info(
            f"Loaded {len(dataset)} examples from {root} "
            f"({Label.CLASS_A.name}={counts[Label.CLASS_A]}, "
            f"{Label.CLASS_B.name}={counts[Label.CLASS_B]})"
        )
        return dataset


def _check_dir(path: Path, what: str) -> None:
    if not path.exists():
        raise DatasetConfigError(f"{what} does not exist: {path}")
    if not path.is_dir():
        raise DatasetConfigError(f"{what} is not a directory: {path}")


def _list_images(label_dir: Path, extensions: tuple[str, ...] | None) -> list[Path]:
    try:
        files = get_files(label_dir, extensions)
    except PermissionError as e:
        raise DatasetConfigError(f"Cannot read directory {label_dir}: {e}") from e
    if not files:
        raise DatasetConfigError(f"No image files found in {label_dir}")
    return files


def _extract_all(
    files: list[Path],
    extractor: FeatureExtractor,
    *,
    num_threads: int,
    skip_errors: bool,
    desc: str,
) -> list[tuple[Path, FeatureVector]]:
    """Extract features from every file in parallel, preserving file order."""

    def _load(path: Path) -> FeatureVector | None:
        try:
            return extractor.from_path(path)
        except ImageDecodeError as e:
            if not skip_errors:
                raise
            logger.warning(f"Skipping undecodable image {path}: {e}")
            return None

    with concurrent.futures.ThreadPoolExecutor(max_workers=num_threads) as executor:
        try:
            results = list(
                tqdm(
                    executor.map(_load, files),
                    total=len(files),
                    desc=desc,
                    unit="img",
                )
            )
        except ImageDecodeError:
            executor.shutdown(wait=False, cancel_futures=True)
            raise

    return [
        (path, features)
        for path, features in zip(files, results, strict=True)
        if features is not None
    ]
