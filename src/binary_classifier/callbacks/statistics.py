"""Dataset statistics callback — prints the label distribution at training start."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger
from rich import box
from rich.console import Console
from rich.table import Table

from binary_classifier.callbacks.base import Callback

if TYPE_CHECKING:
    from binary_classifier.data.dataset import Dataset
    from binary_classifier.models.classifier import LogisticClassifier
    from binary_classifier.trainer import Trainer


class DatasetStatisticsCallback(Callback):
    """Print a rich table of per-label example counts in the training dataset.

    Args:
        class_names: Display names for CLASS_A and CLASS_B (e.g. the label
            directory names). Enum member names are used when omitted.
        console: Rich console to print to; a default stdout console otherwise.
    """

    def __init__(
        self,
        class_names: Sequence[str] | None = None,
        console: Console | None = None,
    ) -> None:
        self.class_names = tuple(class_names) if class_names is not None else None
        self.console = console or Console()

    def on_fit_start(
        self, trainer: Trainer, classifier: LogisticClassifier, dataset: Dataset
    ) -> None:
        counts = dataset.label_counts()
        total = len(dataset)
        logger.info(f"Training dataset: {total} examples")

        table = Table(
            title="Dataset Class Distribution",
            header_style="bold magenta",
            box=box.SQUARE,
            show_lines=True,
        )
        table.add_column("Class Name", style="cyan")
        table.add_column("Label", justify="right")
        table.add_column("Count", justify="right", style="green")
        table.add_column("Percentage", justify="right", style="yellow")

        for label, count in counts.items():
            name = self.class_names[label] if self.class_names else label.name
            pct = count / total * 100 if total > 0 else 0.0
            table.add_row(name, str(int(label)), str(count), f"{pct:.1f}%")

        self.console.print(table)
