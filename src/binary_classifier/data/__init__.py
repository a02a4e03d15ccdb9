"""Data pipeline for binary_classifier."""

from binary_classifier.data.dataset import Dataset
from binary_classifier.data.utils import get_files

__all__ = [
    "Dataset",
    "get_files",
]
