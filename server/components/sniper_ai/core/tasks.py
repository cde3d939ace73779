"""
SniperAI task table.

Each task carries its own input shape, output cardinality and loss family.
The signal list, vocabulary and intent labels are part of the models' input
contract: changing them invalidates persisted weights.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

from components.sniper_ai.errors import ConfigurationError

VOCAB_VERSION = 1
MAX_SEQUENCE_LENGTH = 50
VOCAB_SIZE = 10000
INDICATOR_LENGTH = 10

PAD_TOKEN = "<PAD>"
UNK_TOKEN = "<UNK>"

CHAT_VOCAB: Dict[str, int] = {
    PAD_TOKEN: 0,
    UNK_TOKEN: 1,
    "hello": 2,
    "hi": 3,
    "hey": 4,
    "bye": 5,
    "goodbye": 6,
    "help": 7,
    "scam": 8,
    "report": 9,
}

CHAT_INTENTS: Tuple[str, ...] = (
    "greeting",
    "farewell",
    "question",
    "report_scam",
    "request_help",
    "provide_info",
    "other",
)

SENTIMENT_LABELS: Tuple[str, ...] = ("negative", "neutral", "positive")

# Display names of the indicator slots, in slot order
FEATURE_NAMES: Tuple[str, ...] = (
    "Urgency",
    "Financial Terms",
    "Security/Login",
    "Prizes/Rewards",
    "Payment Methods",
    "Personal Info",
    "Organization Names",
    "Threats/Legal",
    "Text Style",
    "Informal Language",
)


class FeatureKind(Enum):
    INDICATORS = "indicators"
    SEQUENCE = "sequence"


class LossFamily(Enum):
    BINARY = "binary"
    CATEGORICAL = "categorical"


class ModelTask(Enum):
    """The four independent classification problems"""
    GENERAL = "general"
    SENTIMENT = "sentiment"
    INTENT = "intent"
    SAFETY = "safety"

    @classmethod
    def parse(cls, value: Union["ModelTask", str]) -> "ModelTask":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(f"Unknown model type: {value}") from None

    @property
    def spec(self) -> "TaskSpec":
        return TASK_SPECS[self]

    @property
    def model_key(self) -> str:
        return f"sniper-ai-{self.value}-model"

    @property
    def training_key(self) -> str:
        return f"sniper-ai-{self.value}-training"


@dataclass(frozen=True)
class TaskSpec:
    """Fixed shape constants for one task"""
    feature_kind: FeatureKind
    input_length: int
    output_size: int
    loss_family: LossFamily
    labels: Tuple[str, ...] = ()

    @property
    def is_binary(self) -> bool:
        return self.loss_family is LossFamily.BINARY


TASK_SPECS: Dict[ModelTask, TaskSpec] = {
    ModelTask.GENERAL: TaskSpec(FeatureKind.INDICATORS, INDICATOR_LENGTH, 1, LossFamily.BINARY),
    ModelTask.SAFETY: TaskSpec(FeatureKind.INDICATORS, INDICATOR_LENGTH, 1, LossFamily.BINARY),
    ModelTask.SENTIMENT: TaskSpec(
        FeatureKind.SEQUENCE, MAX_SEQUENCE_LENGTH, len(SENTIMENT_LABELS), LossFamily.CATEGORICAL, SENTIMENT_LABELS
    ),
    ModelTask.INTENT: TaskSpec(
        FeatureKind.SEQUENCE, MAX_SEQUENCE_LENGTH, len(CHAT_INTENTS), LossFamily.CATEGORICAL, CHAT_INTENTS
    ),
}


def validate_vocabulary(vocab: Dict[str, int], vocab_size: int = VOCAB_SIZE) -> None:
    """Reject tables the embedding layers cannot consume"""
    if vocab.get(PAD_TOKEN) != 0:
        raise ConfigurationError(f"vocabulary must map {PAD_TOKEN} to 0")
    if vocab.get(UNK_TOKEN) is None or vocab[UNK_TOKEN] == 0:
        raise ConfigurationError(f"vocabulary must reserve a non-zero id for {UNK_TOKEN}")

    ids = list(vocab.values())
    if len(set(ids)) != len(ids):
        raise ConfigurationError("vocabulary ids must be unique")
    if any(not isinstance(i, int) or i < 0 or i >= vocab_size for i in ids):
        raise ConfigurationError(f"vocabulary ids must be integers in [0, {vocab_size})")


def validate_task_table() -> None:
    missing = [task.value for task in ModelTask if task not in TASK_SPECS]
    if missing:
        raise ConfigurationError(f"no architecture spec for: {', '.join(missing)}")
    if len(FEATURE_NAMES) != INDICATOR_LENGTH:
        raise ConfigurationError("indicator names do not match the indicator vector length")


validate_task_table()
