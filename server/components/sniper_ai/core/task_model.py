"""
TaskModel: one task's network plus its bound optimizer, loss and metric.

A model is "compiled" once an optimizer, loss and accuracy metric are bound.
Compilation is never inferred from a loaded artifact; callers compile after
every load.
"""

import copy
import io
from typing import Any, Callable, Dict, List, Optional, Sequence

import torch
from torch import nn

from components.sniper_ai.core.networks import build_network
from components.sniper_ai.core.tasks import VOCAB_VERSION, FeatureKind, LossFamily, ModelTask
from components.sniper_ai.errors import PersistenceError

_EPSILON = 1e-7


def categorical_crossentropy(probs: torch.Tensor, target: torch.Tensor) -> torch.Tensor:
    return -(target * probs.clamp_min(_EPSILON).log()).sum(dim=-1).mean()


def binary_accuracy(probs: torch.Tensor, target: torch.Tensor) -> torch.Tensor:
    return ((probs > 0.5) == (target > 0.5)).float().mean()


def categorical_accuracy(probs: torch.Tensor, target: torch.Tensor) -> torch.Tensor:
    return (probs.argmax(dim=-1) == target.argmax(dim=-1)).float().mean()


class TaskModel:
    """A task network with its training bindings"""

    def __init__(self, task: ModelTask, network: Optional[nn.Module] = None,
                 learning_rate: float = 0.001, device: str = "cpu"):
        self.task = task
        self.spec = task.spec
        self.learning_rate = learning_rate
        self.device = torch.device(device)
        self.network = (network if network is not None else build_network(task)).to(self.device)

        self.optimizer: Optional[torch.optim.Optimizer] = None
        self.loss_fn: Optional[Callable[[torch.Tensor, torch.Tensor], torch.Tensor]] = None
        self.metric_fn: Optional[Callable[[torch.Tensor, torch.Tensor], torch.Tensor]] = None

    @property
    def compiled(self) -> bool:
        return self.optimizer is not None and self.loss_fn is not None and self.metric_fn is not None

    def compile(self) -> "TaskModel":
        """Bind a fresh Adam optimizer, the task's loss family and accuracy"""
        self.optimizer = torch.optim.Adam(self.network.parameters(), lr=self.learning_rate)
        if self.spec.loss_family is LossFamily.BINARY:
            self.loss_fn = nn.BCELoss()
            self.metric_fn = binary_accuracy
        else:
            self.loss_fn = categorical_crossentropy
            self.metric_fn = categorical_accuracy
        return self

    def as_input(self, rows: Sequence[Sequence[float]]) -> torch.Tensor:
        dtype = torch.long if self.spec.feature_kind is FeatureKind.SEQUENCE else torch.float32
        return torch.tensor([list(row) for row in rows], dtype=dtype, device=self.device)

    def predict(self, features: Sequence[float]) -> List[float]:
        """Forward pass for one feature vector; no tensor outlives the call"""
        self.network.eval()
        with torch.inference_mode():
            scores = self.network(self.as_input([features]))
            return scores[0].cpu().tolist()

    def fit(self, xs: torch.Tensor, ys: torch.Tensor, epochs: int = 5,
            batch_size: int = 1, shuffle: bool = True) -> List[Dict[str, float]]:
        """Mini-batch fit loop; returns per-epoch loss and accuracy"""
        if not self.compiled:
            self.compile()

        if xs.shape[0] != ys.shape[0]:
            raise ValueError(f"{xs.shape[0]} inputs but {ys.shape[0]} targets")
        if ys.shape[-1] != self.spec.output_size:
            raise ValueError(f"target width {ys.shape[-1]} does not match output size {self.spec.output_size}")

        history = []
        count = xs.shape[0]
        self.network.train()
        try:
            for _ in range(epochs):
                order = torch.randperm(count) if shuffle else torch.arange(count)
                epoch_loss = 0.0
                epoch_acc = 0.0
                for start in range(0, count, batch_size):
                    idx = order[start:start + batch_size]
                    batch_x, batch_y = xs[idx], ys[idx]

                    self.optimizer.zero_grad()
                    probs = self.network(batch_x)
                    loss = self.loss_fn(probs, batch_y)
                    loss.backward()
                    self.optimizer.step()

                    size = batch_x.shape[0]
                    epoch_loss += loss.item() * size
                    epoch_acc += self.metric_fn(probs.detach(), batch_y).item() * size

                history.append({"loss": epoch_loss / count, "acc": epoch_acc / count})
        finally:
            self.network.eval()
        return history

    def snapshot(self) -> Dict[str, Any]:
        return {
            "network": copy.deepcopy(self.network.state_dict()),
            "optimizer": copy.deepcopy(self.optimizer.state_dict()) if self.optimizer else None,
        }

    def restore(self, snapshot: Dict[str, Any]) -> None:
        self.network.load_state_dict(snapshot["network"])
        if self.optimizer is not None and snapshot["optimizer"] is not None:
            self.optimizer.load_state_dict(snapshot["optimizer"])

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        torch.save(
            {
                "task": self.task.value,
                "vocab_version": VOCAB_VERSION,
                "state_dict": self.network.state_dict(),
            },
            buffer,
        )
        return buffer.getvalue()

    @classmethod
    def from_bytes(cls, task: ModelTask, data: bytes,
                   learning_rate: float = 0.001, device: str = "cpu") -> "TaskModel":
        """Rebuild the task architecture and load persisted weights into it"""
        try:
            payload = torch.load(io.BytesIO(data), map_location=device, weights_only=True)
        except Exception as e:
            raise PersistenceError(f"corrupt model artifact: {e}", task=task.value) from e

        if not isinstance(payload, dict) or payload.get("task") != task.value:
            raise PersistenceError("artifact belongs to a different task", task=task.value)
        if payload.get("vocab_version") != VOCAB_VERSION:
            raise PersistenceError(
                f"artifact built for vocabulary v{payload.get('vocab_version')}, expected v{VOCAB_VERSION}",
                task=task.value,
            )

        model = cls(task, learning_rate=learning_rate, device=device)
        try:
            model.network.load_state_dict(payload["state_dict"])
        except (KeyError, RuntimeError) as e:
            raise PersistenceError(f"artifact does not fit the {task.value} architecture: {e}", task=task.value) from e
        return model

    def dispose(self) -> None:
        self.optimizer = None
        self.loss_fn = None
        self.metric_fn = None
        self.network = None
