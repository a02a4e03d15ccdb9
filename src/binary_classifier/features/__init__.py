"""Image preprocessing into fixed-length feature vectors."""

from binary_classifier.features.extractor import FeatureExtractor

__all__ = ["FeatureExtractor"]
