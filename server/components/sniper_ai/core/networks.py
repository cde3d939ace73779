"""
Fixed per-task architectures.

Every network ends in its output activation (sigmoid or softmax), so a forward
pass yields probabilities directly.
"""

import torch
from torch import nn

from components.sniper_ai.core.tasks import (
    CHAT_INTENTS,
    INDICATOR_LENGTH,
    SENTIMENT_LABELS,
    VOCAB_SIZE,
    ModelTask,
)


class LastStepLSTM(nn.Module):
    """LSTM that returns only the final hidden state"""

    def __init__(self, input_size: int, hidden_size: int):
        super().__init__()
        self.lstm = nn.LSTM(input_size, hidden_size, batch_first=True)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        _, (hidden, _) = self.lstm(x)
        return hidden[-1]


class BiLSTMMaxPool(nn.Module):
    """Bidirectional LSTM over the whole sequence, max-pooled over time"""

    def __init__(self, input_size: int, hidden_size: int):
        super().__init__()
        self.lstm = nn.LSTM(input_size, hidden_size, batch_first=True, bidirectional=True)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        outputs, _ = self.lstm(x)
        return outputs.max(dim=1).values


def _general() -> nn.Module:
    return nn.Sequential(
        nn.Linear(INDICATOR_LENGTH, 32),
        nn.ReLU(),
        nn.Linear(32, 16),
        nn.ReLU(),
        nn.Linear(16, 1),
        nn.Sigmoid(),
    )


def _safety() -> nn.Module:
    return nn.Sequential(
        nn.Linear(INDICATOR_LENGTH, 64),
        nn.ReLU(),
        nn.Dropout(p=0.3),
        nn.Linear(64, 32),
        nn.ReLU(),
        nn.Linear(32, 1),
        nn.Sigmoid(),
    )


def _sentiment() -> nn.Module:
    return nn.Sequential(
        nn.Embedding(VOCAB_SIZE, 32),
        LastStepLSTM(32, 64),
        nn.Linear(64, len(SENTIMENT_LABELS)),
        nn.Softmax(dim=-1),
    )


def _intent() -> nn.Module:
    return nn.Sequential(
        nn.Embedding(VOCAB_SIZE, 64),
        BiLSTMMaxPool(64, 32),
        nn.Linear(64, len(CHAT_INTENTS)),
        nn.Softmax(dim=-1),
    )


_BUILDERS = {
    ModelTask.GENERAL: _general,
    ModelTask.SAFETY: _safety,
    ModelTask.SENTIMENT: _sentiment,
    ModelTask.INTENT: _intent,
}


def build_network(task: ModelTask) -> nn.Module:
    return _BUILDERS[task]()
