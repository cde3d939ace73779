"""
SniperAI Extraction Module

Hand-built text features for the task models.
"""

from .feature_extractor import FeatureExtractor, INDICATOR_SIGNALS, extract_features

__all__ = [
    "FeatureExtractor",
    "INDICATOR_SIGNALS",
    "extract_features",
]
