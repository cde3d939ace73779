"""
SniperAI Component

On-device classifier ensemble for short texts, trained online from
user-labeled examples.

This component provides:
- Four task models (general, sentiment, intent, safety)
- Deterministic keyword-signal and token-sequence feature extraction
- Online per-example training with durable training logs
- SQLite-backed persistence of weights and logs
- An async client that keeps all tensor work on one worker thread
"""

from typing import Any, Optional

from .config import SniperAIConfig, create_config
from .core.interfaces import (
    AnalysisResult,
    ChatAnalysis,
    InferResult,
    OperationResult,
    SniperAIInterface,
    TrainingOutcome,
    TrainResult,
)
from .core.tasks import CHAT_INTENTS, ModelTask
from .errors import (
    ConfigurationError,
    ModelUnavailableError,
    PersistenceError,
    SniperAIError,
    TrainingError,
)
from .extraction.feature_extractor import FeatureExtractor, extract_features
from .integration.client import SniperAIClient

__version__ = "1.0.0"


def create_sniper_ai(config: Optional[SniperAIConfig] = None, **overrides: Any) -> SniperAIClient:
    """
    Create a SniperAI session.

    The caller owns the returned client and must terminate() it (or use it as
    an async context manager).
    """
    if config is None:
        config = create_config(**overrides)
    return SniperAIClient(config)


__all__ = [
    "SniperAIConfig",
    "create_config",
    "create_sniper_ai",
    "SniperAIClient",
    "SniperAIInterface",
    "AnalysisResult",
    "ChatAnalysis",
    "InferResult",
    "OperationResult",
    "TrainingOutcome",
    "TrainResult",
    "ModelTask",
    "CHAT_INTENTS",
    "FeatureExtractor",
    "extract_features",
    "SniperAIError",
    "ConfigurationError",
    "ModelUnavailableError",
    "PersistenceError",
    "TrainingError",
]
