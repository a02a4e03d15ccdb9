"""Training callbacks for binary_classifier."""

from binary_classifier.callbacks.base import Callback
from binary_classifier.callbacks.plotting import TrainingHistoryCallback
from binary_classifier.callbacks.statistics import DatasetStatisticsCallback

__all__ = [
    "Callback",
    "DatasetStatisticsCallback",
    "TrainingHistoryCallback",
]
