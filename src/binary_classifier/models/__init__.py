"""Classification model implementations."""

from binary_classifier.models.classifier import EPS, LogisticClassifier

__all__ = [
    "EPS",
    "LogisticClassifier",
]
