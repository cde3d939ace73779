"""
SniperAI Core Module

Task table, result types, networks, artifact storage and the model registry.
"""

from .tasks import ModelTask, TaskSpec, TASK_SPECS, CHAT_INTENTS, CHAT_VOCAB, FEATURE_NAMES
from .interfaces import (
    AnalysisResult,
    ChatAnalysis,
    InferResult,
    OperationResult,
    SniperAIInterface,
    TrainingExample,
    TrainingOutcome,
    TrainResult,
)
from .artifact_store import ArtifactStore
from .task_model import TaskModel
from .model_registry import ModelRegistry, ModelState

__all__ = [
    "ModelTask",
    "TaskSpec",
    "TASK_SPECS",
    "CHAT_INTENTS",
    "CHAT_VOCAB",
    "FEATURE_NAMES",
    "AnalysisResult",
    "ChatAnalysis",
    "InferResult",
    "OperationResult",
    "SniperAIInterface",
    "TrainingExample",
    "TrainingOutcome",
    "TrainResult",
    "ArtifactStore",
    "TaskModel",
    "ModelRegistry",
    "ModelState",
]
