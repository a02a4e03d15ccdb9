"""Training history callback — saves loss and accuracy curve PNGs."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib
import matplotlib.pyplot as plt
from loguru import logger

from binary_classifier.callbacks.base import Callback

if TYPE_CHECKING:
    from binary_classifier.trainer import EpochResult, Trainer


class TrainingHistoryCallback(Callback):
    """Plot and save training loss and accuracy curves.

    Loss is recorded every epoch, accuracy on reporting epochs only. Plots are
    written at the end of fit:
    - ``loss_history.png``: average training loss per epoch
    - ``accuracy_history.png``: accuracy on reporting epochs

    Args:
        output_dir: Root directory for saved plots.
    """

    def __init__(self, output_dir: str = "outputs") -> None:
        self.output_dir = Path(output_dir) / "training_history"
        self.epochs: list[int] = []
        self.losses: list[float] = []
        self.eval_epochs: list[int] = []
        self.accuracies: list[float] = []

    def on_epoch_end(self, trainer: Trainer, result: EpochResult) -> None:
        self.epochs.append(result.epoch)
        self.losses.append(result.loss)
        if result.accuracy is not None:
            self.eval_epochs.append(result.epoch)
            self.accuracies.append(result.accuracy)

    def on_fit_end(self, trainer: Trainer, history: list[EpochResult]) -> None:
        if not self.epochs:
            return
        try:
            self._plot_metrics()
        except Exception as e:
            logger.error(f"Failed to plot training history: {e}")

    def _plot_metrics(self) -> None:
        matplotlib.use("Agg")
        self.output_dir.mkdir(parents=True, exist_ok=True)

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(self.epochs, self.losses, label="Train Loss")
        ax.set_title("Training Loss")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Cross-entropy")
        ax.legend()
        ax.grid(True, linestyle="--", alpha=0.7)
        fig.tight_layout()
        fig.savefig(self.output_dir / "loss_history.png", dpi=150)
        plt.close(fig)

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(self.eval_epochs, self.accuracies, label="Accuracy", marker="o")
        ax.set_title("Accuracy")
        ax.set_xlabel("Epoch")
        ax.set_ylabel("Accuracy")
        ax.set_ylim(0.0, 1.0)
        ax.legend()
        ax.grid(True, linestyle="--", alpha=0.7)
        fig.tight_layout()
        fig.savefig(self.output_dir / "accuracy_history.png", dpi=150)
        plt.close(fig)

        logger.info(f"Training history plots written to {self.output_dir}")
