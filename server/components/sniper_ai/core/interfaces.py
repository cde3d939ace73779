"""
SniperAI Interfaces

Result types shared across the worker boundary, and the contract the UI layer
codes against.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Mapping, Optional, Union

Label = Union[int, float, bool, List[float]]


@dataclass
class TrainingExample:
    """One labeled example in a task's append-only training log"""
    features: List[int]
    label: Label
    text: str
    timestamp: int  # milliseconds since the epoch

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TrainingExample":
        return cls(
            features=list(data["features"]),
            label=data["label"],
            text=data.get("text", ""),
            timestamp=int(data.get("timestamp", 0)),
        )


@dataclass
class SignalExplanation:
    """An indicator signal that fired"""
    feature: str
    importance: float


@dataclass
class TokenExplanation:
    """A non-padding token of a sequence input"""
    token: str
    position: int
    value: int


Explanation = Union[SignalExplanation, TokenExplanation]


@dataclass
class InferResult:
    """Output of one task model for one text"""
    type: str
    scores: List[float]
    confidence: float
    explanation: List[Explanation] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def degraded(cls, task: str, error: str) -> "InferResult":
        return cls(type=task, scores=[], confidence=0.0, explanation=[], error=error)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TrainResult:
    """Final-epoch metrics of one online training step"""
    accuracy: float
    loss: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisResult:
    """Aggregate result of running all four task models"""
    success: bool
    general: Optional[InferResult] = None
    sentiment: Optional[InferResult] = None
    intent: Optional[InferResult] = None
    safety: Optional[InferResult] = None
    confidence: float = 0.0
    needs_training: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TrainingOutcome:
    """Result of training one text against one or more tasks"""
    success: bool
    results: Dict[str, TrainResult] = field(default_factory=dict)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChatAnalysis:
    """Intent-only analysis of a chat message"""
    success: bool
    intent: Optional[str] = None
    confidence: float = 0.0
    explanation: List[Explanation] = field(default_factory=list)
    needs_training: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OperationResult:
    """Bare success flag for operations without a payload"""
    success: bool
    error: Optional[str] = None
    accuracy: Optional[float] = None
    loss: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


class SniperAIInterface(ABC):
    """What the UI layer may call"""

    @abstractmethod
    async def initialize(self) -> None:
        """Load or create all task models"""
        pass

    @abstractmethod
    async def analyze(self, text: str) -> AnalysisResult:
        """Run every task model on the text"""
        pass

    @abstractmethod
    async def train(self, text: str, labels: Mapping[str, Label]) -> TrainingOutcome:
        """One online step per labeled task"""
        pass

    @abstractmethod
    async def reset(self) -> OperationResult:
        """Wipe persisted models and training logs, then reinitialize"""
        pass

    @abstractmethod
    def terminate(self) -> None:
        """Dispose models and end the worker session"""
        pass
