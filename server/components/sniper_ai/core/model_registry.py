"""
Model Registry

Owns exactly one live TaskModel per task and its lifecycle:

    Uninitialized -> Loading -> Ready <-> Training
                        |
                        v
                      Failed  (next get() retries Loading)

Loading tries the persisted artifact first; a missing or unusable artifact
is replaced by a freshly built model that is persisted immediately. Every
model handed out has been compiled in this process.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, Optional, Union

import torch
from loguru import logger

from components.sniper_ai.config import SniperAIConfig
from components.sniper_ai.core.artifact_store import ArtifactStore, Value
from components.sniper_ai.core.task_model import TaskModel
from components.sniper_ai.core.tasks import ModelTask
from components.sniper_ai.errors import ModelUnavailableError, PersistenceError


class ModelState(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    TRAINING = "training"
    FAILED = "failed"


@dataclass
class RegistryEntry:
    task: ModelTask
    state: ModelState = ModelState.UNINITIALIZED
    model: Optional[TaskModel] = None
    error: Optional[str] = None


class ModelRegistry:
    """
    Load-or-create registry for the four task models.

    Callers borrow models for one call only; reset_all() replaces them
    wholesale.
    """

    def __init__(self, store: ArtifactStore, config: Optional[SniperAIConfig] = None):
        self.store = store
        self.config = config or SniperAIConfig(db_path=store.db_path)
        self._entries: Dict[ModelTask, RegistryEntry] = {task: RegistryEntry(task) for task in ModelTask}
        self._condition = threading.Condition(threading.RLock())

    def state(self, task: Union[ModelTask, str]) -> ModelState:
        return self._entries[ModelTask.parse(task)].state

    def states(self) -> Dict[str, str]:
        return {task.value: entry.state.value for task, entry in self._entries.items()}

    def last_error(self, task: Union[ModelTask, str]) -> Optional[str]:
        return self._entries[ModelTask.parse(task)].error

    def get(self, task: Union[ModelTask, str]) -> TaskModel:
        """Return the Ready model for a task, loading or creating it first"""
        task = ModelTask.parse(task)
        entry = self._entries[task]

        with self._condition:
            while entry.state in (ModelState.LOADING, ModelState.TRAINING):
                self._condition.wait()
            if entry.state is ModelState.READY:
                return entry.model
            entry.state = ModelState.LOADING

        try:
            model = self._load_or_create(task)
        except PersistenceError as e:
            with self._condition:
                entry.state = ModelState.FAILED
                entry.model = None
                entry.error = str(e)
                self._condition.notify_all()
            logger.error(f"❌ {task.value} model unavailable: {e}")
            raise ModelUnavailableError(f"model failed to load: {e.message}", task=task.value) from e

        with self._condition:
            entry.model = model
            entry.error = None
            entry.state = ModelState.READY
            self._condition.notify_all()
        return model

    def _load_or_create(self, task: ModelTask) -> TaskModel:
        try:
            data = self.store.get(task.model_key)
        except PersistenceError as e:
            logger.warning(f"Could not read {task.model_key}, building a fresh model: {e}")
            data = None

        if data is not None:
            try:
                model = TaskModel.from_bytes(
                    task, bytes(data), learning_rate=self.config.learning_rate, device=self.config.device
                )
                model.compile()
                logger.info(f"📦 Loaded existing {task.value} model")
                return model
            except PersistenceError as e:
                logger.warning(f"Discarding unusable {task.value} artifact: {e}")

        if self.config.seed is not None:
            torch.manual_seed(self.config.seed)
        model = TaskModel(task, learning_rate=self.config.learning_rate, device=self.config.device).compile()
        self.store.put(task.model_key, model.to_bytes())
        logger.info(f"✨ Created new {task.value} model")
        return model

    @contextmanager
    def training(self, task: Union[ModelTask, str]) -> Iterator[TaskModel]:
        """Hold a task in the Training state for the duration of one fit"""
        task = ModelTask.parse(task)
        entry = self._entries[task]

        with self._condition:
            model = self.get(task)
            entry.state = ModelState.TRAINING

        try:
            if not model.compiled:
                model.compile()
            yield model
        finally:
            with self._condition:
                if entry.state is ModelState.TRAINING:
                    entry.state = ModelState.READY
                self._condition.notify_all()

    def persist(self, task: Union[ModelTask, str], extra: Optional[Dict[str, Value]] = None) -> None:
        """Write the task's current weights, plus any extra artifacts, atomically"""
        task = ModelTask.parse(task)
        entry = self._entries[task]
        if entry.model is None:
            raise ModelUnavailableError("no live model to persist", task=task.value)

        items: Dict[str, Value] = {task.model_key: entry.model.to_bytes()}
        if extra:
            items.update(extra)
        self.store.put_many(items)

    def reset_all(self) -> None:
        """Delete every persisted artifact and drop the live models"""
        with self._condition:
            keys = [key for task in ModelTask for key in (task.model_key, task.training_key)]
            self.store.delete(*keys)
            self._drop_models()
        logger.info("🧹 Model registry reset; all artifacts removed")

    def dispose(self) -> None:
        with self._condition:
            self._drop_models()

    def _drop_models(self) -> None:
        for entry in self._entries.values():
            if entry.model is not None:
                entry.model.dispose()
            entry.model = None
            entry.error = None
            entry.state = ModelState.UNINITIALIZED
        self._condition.notify_all()
