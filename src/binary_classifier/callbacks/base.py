"""Hook interface the Trainer calls during ``fit``."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from binary_classifier.data.dataset import Dataset
    from binary_classifier.models.classifier import LogisticClassifier
    from binary_classifier.trainer import EpochResult, Trainer


class Callback:
    """Base class for training callbacks. Every hook is a no-op by default."""

    def on_fit_start(
        self, trainer: Trainer, classifier: LogisticClassifier, dataset: Dataset
    ) -> None:
        """Called once before the first epoch."""

    def on_epoch_end(self, trainer: Trainer, result: EpochResult) -> None:
        """Called after every epoch with its average loss (and accuracy, if evaluated)."""

    def on_fit_end(self, trainer: Trainer, history: list[EpochResult]) -> None:
        """Called once after the last epoch."""
