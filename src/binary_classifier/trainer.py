"""Epoch loop driving per-example gradient descent on a LogisticClassifier."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from loguru import logger
from pydantic import BaseModel

from binary_classifier.callbacks.base import Callback
from binary_classifier.config import TrainerConfig
from binary_classifier.data.dataset import Dataset
from binary_classifier.errors import DatasetConfigError
from binary_classifier.models.classifier import LogisticClassifier


class TrainerState(str, Enum):
    IDLE = "idle"
    TRAINING = "training"


class EpochResult(BaseModel, frozen=True):
    """Average training loss of one epoch; accuracy only on reporting epochs."""

    epoch: int
    loss: float
    accuracy: float | None = None


class Trainer:
    """Run a fixed number of SGD epochs over a Dataset.

    Examples are visited in the dataset's stored order every epoch; nothing is
    reshuffled. On every ``eval_every``-th epoch (epoch 0 included) the average
    loss and the current accuracy are logged and recorded.

    Args:
        config: TrainerConfig frozen model. If provided, flat kwargs are ignored.
        epochs: Number of epochs (used when config is None).
        eval_every: Reporting cadence in epochs.
        callbacks: Hooks notified at fit start, after each epoch and at fit end.
        **kwargs: Absorbs extra Hydra-injected keys.
    """

    def __init__(
        self,
        config: TrainerConfig | None = None,
        *,
        epochs: int = 100,
        eval_every: int = 10,
        callbacks: Sequence[Callback] | None = None,
        **kwargs: Any,
    ) -> None:
        if config is None:
            config = TrainerConfig(epochs=epochs, eval_every=eval_every)
        self.config = config
        self.callbacks: list[Callback] = list(callbacks or [])
        self.history: list[EpochResult] = []
        self._state = TrainerState.IDLE

    @property
    def state(self) -> TrainerState:
        return self._state

    def run_epoch(self, classifier: LogisticClassifier, dataset: Dataset) -> float:
        """Apply ``train_step`` to every example in order; return the mean loss.

        Raises:
            DatasetConfigError: If the dataset is empty.
        """
        if len(dataset) == 0:
            raise DatasetConfigError("Cannot train on an empty dataset")
        total = 0.0
        for example in dataset:
            total += classifier.train_step(example)
        return total / len(dataset)

    def fit(
        self,
        classifier: LogisticClassifier,
        dataset: Dataset,
        eval_dataset: Dataset | None = None,
    ) -> list[EpochResult]:
        """Train ``classifier`` for ``config.epochs`` epochs on ``dataset``.

        Accuracy on reporting epochs is measured on ``eval_dataset`` when
        given, otherwise on ``dataset`` itself.

        Returns:
            One EpochResult per epoch, in order.

        Raises:
            DatasetConfigError: If ``dataset`` or ``eval_dataset`` is empty.
        """
        if len(dataset) == 0:
            raise DatasetConfigError("Cannot train on an empty dataset")
        if eval_dataset is not None and len(eval_dataset) == 0:
            raise DatasetConfigError("Cannot evaluate on an empty dataset")
        eval_on = eval_dataset if eval_dataset is not None else dataset

        self.history = []
        self._state = TrainerState.TRAINING
        try:
            for cb in self.callbacks:
                cb.on_fit_start(self, classifier, dataset)

            for epoch in range(self.config.epochs):
                loss = self.run_epoch(classifier, dataset)
                accuracy = None
                if epoch % self.config.eval_every == 0:
                    accuracy = classifier.evaluate(eval_on)
                    logger.info(
                        f"Epoch {epoch}: loss={loss:.4f}, accuracy={accuracy * 100:.2f}%"
                    )
                result = EpochResult(epoch=epoch, loss=loss, accuracy=accuracy)
                self.history.append(result)
                for cb in self.callbacks:
                    cb.on_epoch_end(self, result)

            for cb in self.callbacks:
                cb.on_fit_end(self, self.history)
        finally:
            self._state = TrainerState.IDLE

        return self.history
