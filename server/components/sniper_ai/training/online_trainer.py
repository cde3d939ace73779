"""
SniperAI Online Trainer

Per-example incremental learning:
1. Extract features and append the labeled example to the task's log
2. Fit the task model on that single example for a fixed number of epochs
3. Persist the updated weights together with the log

The log and the weights are committed in one store transaction after the fit
succeeds. A failed fit or write restores the previous weights, optimizer
state and log, so a crash loses at most the in-flight example.
"""

import json
import time
from typing import Dict, List, Optional, Union

import torch
import torch.nn.functional as F
from loguru import logger

from components.sniper_ai.config import SniperAIConfig
from components.sniper_ai.core.artifact_store import ArtifactStore
from components.sniper_ai.core.interfaces import Label, TrainingExample, TrainResult
from components.sniper_ai.core.model_registry import ModelRegistry
from components.sniper_ai.core.tasks import ModelTask
from components.sniper_ai.errors import PersistenceError, TrainingError
from components.sniper_ai.extraction.feature_extractor import FeatureExtractor


class OnlineTrainer:
    """Single-example fit steps with per-example durability"""

    def __init__(self, registry: ModelRegistry, store: ArtifactStore,
                 config: Optional[SniperAIConfig] = None,
                 extractor: Optional[FeatureExtractor] = None):
        self.registry = registry
        self.store = store
        self.config = config or registry.config
        self.extractor = extractor or FeatureExtractor()
        self._logs: Dict[ModelTask, List[TrainingExample]] = {}

    def training_log(self, task: Union[ModelTask, str]) -> List[TrainingExample]:
        """The task's examples in submission order"""
        return list(self._load_log(ModelTask.parse(task)))

    def _load_log(self, task: ModelTask) -> List[TrainingExample]:
        if task not in self._logs:
            raw = self.store.get_text(task.training_key)
            if raw is None:
                self._logs[task] = []
            else:
                try:
                    self._logs[task] = [TrainingExample.from_dict(item) for item in json.loads(raw)]
                except (ValueError, TypeError, KeyError, AttributeError) as e:
                    logger.warning(f"⚠️ Corrupt {task.training_key}, starting a new training log: {e}")
                    self._logs[task] = []
        return self._logs[task]

    @staticmethod
    def _serialize_log(examples: List[TrainingExample]) -> str:
        return json.dumps([example.to_dict() for example in examples])

    def encode_label(self, label: Label, task: ModelTask) -> torch.Tensor:
        """Scalar target for binary tasks, one-hot row for categorical tasks"""
        spec = task.spec

        if spec.is_binary:
            if isinstance(label, (list, tuple)):
                if len(label) != 1:
                    raise TrainingError(f"binary task expects one label value, got {len(label)}", task=task.value)
                label = label[0]
            if not isinstance(label, (int, float)):
                raise TrainingError(f"binary label must be a number, got {label!r}", task=task.value)
            value = float(label)
            if not 0.0 <= value <= 1.0:
                raise TrainingError(f"binary label must lie in [0, 1], got {value}", task=task.value)
            return torch.tensor([[value]], dtype=torch.float32)

        if isinstance(label, (list, tuple)):
            if len(label) != spec.output_size:
                raise TrainingError(
                    f"expected {spec.output_size} target values, got {len(label)}", task=task.value
                )
            return torch.tensor([list(label)], dtype=torch.float32)

        if isinstance(label, bool) or not isinstance(label, (int, float)) or int(label) != label:
            raise TrainingError(f"class label must be an integer index, got {label!r}", task=task.value)
        index = int(label)
        if not 0 <= index < spec.output_size:
            raise TrainingError(
                f"class index {index} out of range for {spec.output_size} classes", task=task.value
            )
        return F.one_hot(torch.tensor([index]), spec.output_size).float()

    def train_one(self, text: str, label: Label, task: Union[ModelTask, str]) -> TrainResult:
        """
        Train one labeled example into a task model.

        Raises:
            ConfigurationError: unknown task
            TrainingError: label does not fit the task, or the fit step failed
            PersistenceError: the log or weights could not be written
            ModelUnavailableError: the task model is Failed
        """
        task = ModelTask.parse(task)
        features = self.extractor.extract(text, task)
        target = self.encode_label(label, task)
        log = self._load_log(task)

        example = TrainingExample(
            features=features,
            label=int(label) if isinstance(label, bool) else label,
            text=text,
            timestamp=int(time.time() * 1000),
        )

        with self.registry.training(task) as model:
            snapshot = model.snapshot()
            xs = model.as_input([features])
            ys = target.to(model.device)
            try:
                history = model.fit(
                    xs, ys,
                    epochs=self.config.epochs,
                    batch_size=self.config.batch_size,
                    shuffle=self.config.shuffle,
                )
            except Exception as e:
                model.restore(snapshot)
                logger.warning(f"↩️ {task.value} fit failed, weights restored: {e}")
                raise TrainingError(f"fit step failed: {e}", task=task.value) from e
            finally:
                del xs, ys

            log.append(example)
            try:
                self.registry.persist(task, extra={task.training_key: self._serialize_log(log)})
            except PersistenceError:
                log.pop()
                model.restore(snapshot)
                logger.warning(f"↩️ {task.value} step rolled back, store write failed")
                raise

        final = history[-1]
        logger.info(
            f"🎯 Trained {task.value} on example #{len(log)}: "
            f"loss={final['loss']:.4f}, accuracy={final['acc']:.2f}"
        )
        return TrainResult(accuracy=final["acc"], loss=final["loss"])

    def needs_more_training(self, task: Optional[Union[ModelTask, str]] = None) -> bool:
        """
        Whether confidence claims should be gated.

        With a task: that task's log is below the per-task threshold.
        Without: any task's log is below the any-task threshold.
        """
        if task is not None:
            return len(self._load_log(ModelTask.parse(task))) < self.config.min_task_training_samples
        return any(len(self._load_log(t)) < self.config.min_training_samples for t in ModelTask)

    def clear(self) -> None:
        """Forget cached logs; the store is the source of truth"""
        self._logs.clear()
