"""
SniperAI Worker

The worker side of the execution boundary. It owns the artifact store, the
model registry, the inference engine and the online trainer, and answers
``WorkerRequest`` messages with ``WorkerResponse`` messages. It is only ever
driven from the client's single worker thread.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from loguru import logger

from components.sniper_ai.config import SniperAIConfig
from components.sniper_ai.core.artifact_store import ArtifactStore
from components.sniper_ai.core.model_registry import ModelRegistry
from components.sniper_ai.core.tasks import ModelTask
from components.sniper_ai.errors import SniperAIError
from components.sniper_ai.extraction.feature_extractor import FeatureExtractor
from components.sniper_ai.inference.engine import InferenceEngine
from components.sniper_ai.training.online_trainer import OnlineTrainer


class WorkerOp(Enum):
    INITIALIZE = "initialize"
    INFER = "infer"
    CLASSIFY_INTENT = "classify_intent"
    TRAIN = "train"
    NEEDS_TRAINING = "needs_training"
    RESET = "reset"
    STATUS = "status"
    DISPOSE = "dispose"


@dataclass
class WorkerRequest:
    op: WorkerOp
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WorkerResponse:
    op: WorkerOp
    ok: bool
    result: Any = None
    error: Optional[str] = None
    error_type: Optional[str] = None


class SniperAIWorker:
    """Message handler around one model registry"""

    def __init__(self, config: SniperAIConfig):
        self.config = config
        self.store = ArtifactStore(config.db_path)
        self.extractor = FeatureExtractor()
        self.registry = ModelRegistry(self.store, config)
        self.engine = InferenceEngine(self.registry, self.extractor)
        self.trainer = OnlineTrainer(self.registry, self.store, config, self.extractor)

        self._handlers: Dict[WorkerOp, Callable[[Dict[str, Any]], Any]] = {
            WorkerOp.INITIALIZE: self._initialize,
            WorkerOp.INFER: self._infer,
            WorkerOp.CLASSIFY_INTENT: self._classify_intent,
            WorkerOp.TRAIN: self._train,
            WorkerOp.NEEDS_TRAINING: self._needs_training,
            WorkerOp.RESET: self._reset,
            WorkerOp.STATUS: self._status,
            WorkerOp.DISPOSE: self._dispose,
        }
        logger.info("🤖 SniperAI worker started")
        config.log_configuration()

    def handle(self, request: WorkerRequest) -> WorkerResponse:
        """Run one request to completion and tag its outcome"""
        handler = self._handlers[request.op]
        try:
            return WorkerResponse(op=request.op, ok=True, result=handler(request.payload))
        except SniperAIError as e:
            logger.warning(f"SniperAI {request.op.value} failed: {e}")
            return WorkerResponse(op=request.op, ok=False, error=str(e), error_type=type(e).__name__)
        except Exception as e:
            logger.exception(f"Unexpected SniperAI {request.op.value} failure")
            return WorkerResponse(op=request.op, ok=False, error=str(e), error_type=type(e).__name__)

    def _initialize(self, payload: Dict[str, Any]) -> Dict[str, Optional[str]]:
        """Bring every task to Ready; failures are reported per task"""
        errors: Dict[str, Optional[str]] = {}
        for task in ModelTask:
            try:
                self.registry.get(task)
                errors[task.value] = None
            except SniperAIError as e:
                errors[task.value] = str(e)
        return errors

    def _infer(self, payload: Dict[str, Any]):
        return self.engine.infer(payload["text"], payload["task"])

    def _classify_intent(self, payload: Dict[str, Any]):
        return self.engine.classify_intent(payload["text"])

    def _train(self, payload: Dict[str, Any]):
        return self.trainer.train_one(payload["text"], payload["label"], payload["task"])

    def _needs_training(self, payload: Dict[str, Any]) -> bool:
        return self.trainer.needs_more_training(payload.get("task"))

    def _reset(self, payload: Dict[str, Any]) -> Dict[str, Optional[str]]:
        self.registry.reset_all()
        self.trainer.clear()
        return self._initialize(payload)

    def _status(self, payload: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        states = self.registry.states()
        return {
            task.value: {
                "state": states[task.value],
                "examples": len(self.trainer.training_log(task)),
                "needs_training": self.trainer.needs_more_training(task),
                "error": self.registry.last_error(task),
            }
            for task in ModelTask
        }

    def _dispose(self, payload: Dict[str, Any]) -> None:
        self.registry.dispose()
        self.trainer.clear()
        self.store.close()
        logger.info("🤖 SniperAI worker stopped")
