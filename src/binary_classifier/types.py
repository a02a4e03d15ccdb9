"""Type aliases and value types shared across binary_classifier modules."""

from __future__ import annotations

from enum import IntEnum
from pathlib import Path
from typing import NamedTuple

import numpy as np
import numpy.typing as npt

# Input geometry: every image is reduced to CHANNELS x SIDE x SIDE floats.
CHANNELS = 3
SIDE = 28
INPUT_DIM = CHANNELS * SIDE * SIDE

FeatureVector = npt.NDArray[np.float32]


class Label(IntEnum):
    """The two classes a classifier separates.

    ``CLASS_B`` is the positive class: the classifier's probability output is
    P(label = CLASS_B | x).
    """

    CLASS_A = 0
    CLASS_B = 1

    @property
    def target(self) -> float:
        """Numeric training target y: 0.0 for CLASS_A, 1.0 for CLASS_B."""
        return float(self.value)


class LabeledExample(NamedTuple):
    """A feature vector paired with its ground-truth label.

    features: float32 array of shape (INPUT_DIM,), values in [0, 1].
    label: ground-truth class.
    source: image file the features came from; None for synthetic examples.
    """

    features: FeatureVector
    label: Label
    source: Path | None = None
