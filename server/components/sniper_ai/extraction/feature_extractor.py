"""
Feature Extractor

Deterministic text-to-vector encoding for the SniperAI task models:
- general/safety: ten 0/1 indicator signals matched case-insensitively
- sentiment/intent: fixed-length vocabulary-id sequence, right-padded

Pure functions of (text, task, vocabulary table). Malformed text never raises.
"""

import re
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from components.sniper_ai.errors import ConfigurationError
from components.sniper_ai.core.interfaces import Explanation, SignalExplanation, TokenExplanation
from components.sniper_ai.core.tasks import (
    CHAT_VOCAB,
    FEATURE_NAMES,
    MAX_SEQUENCE_LENGTH,
    PAD_TOKEN,
    UNK_TOKEN,
    VOCAB_SIZE,
    FeatureKind,
    ModelTask,
    validate_vocabulary,
)


def _pattern(expr: str) -> Callable[[str], bool]:
    compiled = re.compile(expr, re.IGNORECASE)
    return lambda text: compiled.search(text) is not None


def _is_shouty(text: str) -> bool:
    """Fragmented by ! and ? or free of lowercase letters"""
    if len(re.split(r"[!?]", text)) > 3:
        return True
    return text == text.upper()


# Slot order is fixed; it is part of the indicator models' input contract
INDICATOR_SIGNALS: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    ("Urgency", _pattern(r"urgent|immediate|alert|warning|limited time")),
    ("Financial Terms", _pattern(r"bank|account|credit|debit|money|payment|transfer")),
    ("Security/Login", _pattern(r"password|verify|login|security|authenticate|confirm")),
    ("Prizes/Rewards", _pattern(r"win|winner|prize|lottery|reward|congratulations")),
    ("Payment Methods", _pattern(r"bitcoin|crypto|wire|western union|moneygram|gift card")),
    ("Personal Info", _pattern(r"ssn|social security|birth date|address|license|passport")),
    ("Organization Names", _pattern(r"irs|fbi|microsoft|apple|amazon|support|service")),
    ("Threats/Legal", _pattern(r"suspend|terminate|legal|arrest|police|lawsuit|court")),
    ("Text Style", _is_shouty),
    ("Informal Language", _pattern(r"\b(ur|u r|plz|pls|kindly|dear)\b")),
)

if tuple(name for name, _ in INDICATOR_SIGNALS) != FEATURE_NAMES:
    raise ConfigurationError("indicator signals are out of step with FEATURE_NAMES")


class FeatureExtractor:
    """Maps raw text to each task's fixed-length feature vector"""

    def __init__(self, vocabulary: Optional[Mapping[str, int]] = None,
                 sequence_length: int = MAX_SEQUENCE_LENGTH):
        self.vocabulary: Dict[str, int] = dict(vocabulary if vocabulary is not None else CHAT_VOCAB)
        validate_vocabulary(self.vocabulary, VOCAB_SIZE)
        self.sequence_length = sequence_length
        self._id_to_token = {idx: token for token, idx in self.vocabulary.items()}
        self._unk_id = self.vocabulary[UNK_TOKEN]

    def extract(self, text: str, task: Union[ModelTask, str]) -> List[int]:
        task = ModelTask.parse(task)
        text = text if isinstance(text, str) else ("" if text is None else str(text))

        if task.spec.feature_kind is FeatureKind.INDICATORS:
            return self.extract_indicators(text)
        return self.extract_sequence(text)

    def extract_indicators(self, text: str) -> List[int]:
        if not text:
            return [0] * len(INDICATOR_SIGNALS)
        return [int(signal(text)) for _, signal in INDICATOR_SIGNALS]

    def tokenize(self, text: str) -> List[str]:
        return text.lower().split()[: self.sequence_length]

    def extract_sequence(self, text: str) -> List[int]:
        features = [self.vocabulary[PAD_TOKEN]] * self.sequence_length
        for i, token in enumerate(self.tokenize(text)):
            features[i] = self.vocabulary.get(token, self._unk_id)
        return features

    def explain(self, features: Sequence[int], task: Union[ModelTask, str]) -> List[Explanation]:
        """Contributing features: fired signals, or non-padding tokens"""
        task = ModelTask.parse(task)

        if task.spec.feature_kind is FeatureKind.INDICATORS:
            return [
                SignalExplanation(feature=FEATURE_NAMES[index], importance=float(value))
                for index, value in enumerate(features)
                if value > 0
            ]

        return [
            TokenExplanation(token=self._id_to_token.get(value, UNK_TOKEN), position=index, value=int(value))
            for index, value in enumerate(features)
            if value > 0
        ]


_default_extractor: Optional[FeatureExtractor] = None


def extract_features(text: str, task: Union[ModelTask, str]) -> List[int]:
    """Module-level convenience over the default vocabulary"""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = FeatureExtractor()
    return _default_extractor.extract(text, task)
