"""Logistic-regression classifier trained one example at a time."""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from binary_classifier.config import ClassifierConfig
from binary_classifier.data.dataset import Dataset
from binary_classifier.errors import DatasetConfigError
from binary_classifier.types import INPUT_DIM, FeatureVector, Label, LabeledExample
from binary_classifier.utils.hydra import register

# Probabilities are clamped into [EPS, 1 - EPS] before taking a logarithm.
EPS = 1e-7


@register(group="model", name="logistic", defaults=ClassifierConfig())
class LogisticClassifier:
    """Binary classifier ``p = sigmoid(w . x + b)``.

    ``p`` is the probability that ``x`` belongs to ``Label.CLASS_B``. Weights
    are float32, drawn uniformly from ``[-s, s]`` with
    ``s = sqrt(2 / input_dim)`` (or all zero with ``weight_init="zeros"``);
    the bias starts at zero.

    Parameters are updated in place by :meth:`train_step`, which performs one
    step of stochastic gradient descent on binary cross-entropy. Steps must be
    applied sequentially: each one reads the parameters left by the previous.

    Args:
        config: Frozen hyperparameters. If provided, flat kwargs are ignored.
        input_dim: Feature-vector length (used when config is None, e.g. Hydra).
        learning_rate: Step size of every update.
        weight_init: ``"uniform"`` or ``"zeros"``.
        seed: Seed for weight initialization when ``rng`` is not given.
        rng: Random generator for weight initialization.
        **kwargs: Absorbs extra Hydra-injected keys (_target_, etc.).
    """

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        *,
        input_dim: int = INPUT_DIM,
        learning_rate: float = 0.001,
        weight_init: str = "uniform",
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = ClassifierConfig(
                input_dim=input_dim,
                learning_rate=learning_rate,
                weight_init=weight_init,  # type: ignore[arg-type]
                seed=seed,
            )
        self.config = config
        self.input_dim = config.input_dim
        self.learning_rate = config.learning_rate

        if config.weight_init == "zeros":
            self._w = np.zeros(self.input_dim, dtype=np.float32)
        else:
            if rng is None:
                rng = np.random.default_rng(config.seed)
            scale = math.sqrt(2.0 / self.input_dim)
            self._w = rng.uniform(-scale, scale, size=self.input_dim).astype(
                np.float32
            )
        self._b = 0.0

    @property
    def weights(self) -> FeatureVector:
        """Read-only view of the weight vector."""
        view = self._w.view()
        view.flags.writeable = False
        return view

    @property
    def bias(self) -> float:
        return self._b

    # ------------------------------------------------------------------
    # Forward
    # ------------------------------------------------------------------

    @staticmethod
    def sigmoid(z: float) -> float:
        """Logistic function ``1 / (1 + e^-z)``, evaluated without overflow."""
        if z >= 0.0:
            return 1.0 / (1.0 + math.exp(-z))
        ez = math.exp(z)
        return ez / (1.0 + ez)

    def logit(self, x: FeatureVector) -> float:
        """Pre-activation score ``z = w . x + b``."""
        if x.shape != (self.input_dim,):
            msg = f"Expected features of shape ({self.input_dim},), got {x.shape}"
            raise ValueError(msg)
        return float(np.dot(self._w, x)) + self._b

    def forward(self, x: FeatureVector) -> float:
        """Probability that ``x`` belongs to ``Label.CLASS_B``."""
        return self.sigmoid(self.logit(x))

    def predict(self, x: FeatureVector) -> Label:
        """CLASS_B if the probability is strictly above 0.5, else CLASS_A."""
        return Label.CLASS_B if self.forward(x) > 0.5 else Label.CLASS_A

    # ------------------------------------------------------------------
    # Loss and gradients
    # ------------------------------------------------------------------

    @staticmethod
    def loss(probability: float, label: Label) -> float:
        """Binary cross-entropy ``-[y ln p + (1 - y) ln(1 - p)]``.

        ``p`` is clamped into ``[EPS, 1 - EPS]`` first, so the result is
        always finite.
        """
        p = min(max(probability, EPS), 1.0 - EPS)
        y = label.target
        return -(y * math.log(p) + (1.0 - y) * math.log(1.0 - p))

    @staticmethod
    def gradients(
        probability: float, example: LabeledExample
    ) -> tuple[FeatureVector, float]:
        """Gradients ``(dL/dw, dL/db)`` of the loss for one example.

        Through the sigmoid, ``dL/dz = p - y``; the weight gradient scales
        the feature vector by it.
        """
        dz = probability - example.label.target
        dw = example.features * np.float32(dz)
        return dw, dz

    def apply_gradients(self, dw: FeatureVector, db: float) -> None:
        """In-place update ``w -= lr * dw``, ``b -= lr * db``."""
        self._w -= np.float32(self.learning_rate) * dw
        self._b -= self.learning_rate * db

    def train_step(self, example: LabeledExample) -> float:
        """One SGD update on ``example``; returns the loss before the update."""
        p = self.forward(example.features)
        loss = self.loss(p, example.label)
        dw, db = self.gradients(p, example)
        self.apply_gradients(dw, db)
        return loss

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, dataset: Dataset) -> float:
        """Fraction of examples in ``dataset`` whose prediction matches the label.

        Raises:
            DatasetConfigError: If the dataset is empty.
        """
        if len(dataset) == 0:
            raise DatasetConfigError("Cannot evaluate accuracy on an empty dataset")
        correct = sum(1 for ex in dataset if self.predict(ex.features) == ex.label)
        return correct / len(dataset)
