"""
SniperAI Client

Asynchronous proxy in front of the worker. Every call becomes a
``WorkerRequest`` queued on a single-thread executor, so:
- the caller's event loop never runs tensor math
- requests are handled one at a time, in submission order
- a submitted request always runs to completion

Worker failures come back as ``success: False`` results rather than
exceptions.
"""

import asyncio
import concurrent.futures
from typing import Any, Callable, Dict, Mapping, Optional, Union

from loguru import logger

from components.sniper_ai.config import SniperAIConfig, configure_logging, create_config
from components.sniper_ai.core.interfaces import (
    AnalysisResult,
    ChatAnalysis,
    InferResult,
    Label,
    OperationResult,
    SniperAIInterface,
    TrainingOutcome,
)
from components.sniper_ai.core.tasks import CHAT_INTENTS, ModelTask
from components.sniper_ai.errors import ConfigurationError, SniperAIError
from components.sniper_ai.integration.worker import SniperAIWorker, WorkerOp, WorkerRequest, WorkerResponse


class SniperAIClient(SniperAIInterface):
    """
    Session handle for the SniperAI subsystem.

    Constructed once by the composition root and passed to whatever needs it;
    terminate() disposes the models and stops the worker thread.
    """

    def __init__(self, config: Optional[SniperAIConfig] = None,
                 worker_factory: Callable[[SniperAIConfig], SniperAIWorker] = SniperAIWorker):
        self.config = config or create_config()
        configure_logging(self.config)

        self._worker_factory = worker_factory
        self._worker: Optional[SniperAIWorker] = None
        self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="sniper-ai")
        self._init_lock = asyncio.Lock()

        self.initialized = False
        self.terminated = False

    # -- worker thread side -------------------------------------------------

    def _dispatch(self, request: WorkerRequest) -> WorkerResponse:
        """Runs on the worker thread; builds the worker on first use"""
        if self._worker is None:
            try:
                self._worker = self._worker_factory(self.config)
            except SniperAIError as e:
                logger.error(f"SniperAI worker could not start: {e}")
                return WorkerResponse(op=request.op, ok=False, error=str(e), error_type=type(e).__name__)
        return self._worker.handle(request)

    def _shutdown_worker(self) -> None:
        if self._worker is not None:
            self._worker.handle(WorkerRequest(WorkerOp.DISPOSE))
            self._worker = None

    # -- caller side ----------------------------------------------------------

    async def _send(self, op: WorkerOp, **payload: Any) -> WorkerResponse:
        if self.terminated:
            raise RuntimeError("SniperAI client has been terminated")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._dispatch, WorkerRequest(op, payload))

    async def initialize(self) -> None:
        """Load or create all four task models; safe to call repeatedly"""
        async with self._init_lock:
            if self.initialized:
                return

            response = await self._send(WorkerOp.INITIALIZE)
            if not response.ok:
                logger.error(f"SniperAI initialization error: {response.error}")
                return

            for task, error in response.result.items():
                if error:
                    logger.warning(f"⚠️ {task} model degraded: {error}")
            self.initialized = True
            logger.info("✅ SniperAI initialized")

    async def _ensure_initialized(self) -> None:
        if not self.initialized:
            await self.initialize()

    async def analyze(self, text: str) -> AnalysisResult:
        """
        Run all four task models over a text.

        A task whose model fails contributes a zero-confidence slot carrying
        the error; the call as a whole still succeeds.
        """
        await self._ensure_initialized()

        slots: Dict[str, InferResult] = {}
        for task in ModelTask:
            response = await self._send(WorkerOp.INFER, text=text, task=task)
            if response.ok:
                slots[task.value] = response.result
            else:
                logger.warning(f"⚠️ {task.value} analysis degraded: {response.error}")
                slots[task.value] = InferResult.degraded(task.value, response.error)

        needs = await self._send(WorkerOp.NEEDS_TRAINING)
        return AnalysisResult(
            success=True,
            confidence=min(result.confidence for result in slots.values()),
            needs_training=needs.result if needs.ok else True,
            **slots,
        )

    async def train(self, text: str, labels: Mapping[Union[ModelTask, str], Label]) -> TrainingOutcome:
        """One online step per labeled task, in the order given; stops at the first failure"""
        await self._ensure_initialized()

        outcome = TrainingOutcome(success=True)
        for name, label in labels.items():
            try:
                task = ModelTask.parse(name)
            except ConfigurationError as e:
                return TrainingOutcome(success=False, results=outcome.results, error=str(e))

            response = await self._send(WorkerOp.TRAIN, text=text, label=label, task=task)
            if not response.ok:
                logger.error(f"Training error: {response.error}")
                return TrainingOutcome(success=False, results=outcome.results, error=response.error)
            outcome.results[task.value] = response.result
        return outcome

    async def analyze_chat(self, text: str) -> ChatAnalysis:
        """Intent-only analysis of a chat message"""
        await self._ensure_initialized()

        response = await self._send(WorkerOp.CLASSIFY_INTENT, text=text)
        if not response.ok:
            return ChatAnalysis(success=False, error=response.error)

        intent, result = response.result
        needs = await self._send(WorkerOp.NEEDS_TRAINING, task=ModelTask.INTENT)
        return ChatAnalysis(
            success=True,
            intent=intent,
            confidence=result.confidence,
            explanation=result.explanation,
            needs_training=needs.result if needs.ok else True,
        )

    async def train_chat(self, text: str, intent: Union[int, str]) -> OperationResult:
        """Train the intent model on one message; intent is an index or a label name"""
        if isinstance(intent, str):
            if intent not in CHAT_INTENTS:
                return OperationResult(success=False, error=f"Unknown intent: {intent}")
            intent = CHAT_INTENTS.index(intent)

        outcome = await self.train(text, {ModelTask.INTENT: intent})
        if not outcome.success:
            return OperationResult(success=False, error=outcome.error)
        result = outcome.results[ModelTask.INTENT.value]
        return OperationResult(success=True, accuracy=result.accuracy, loss=result.loss)

    async def needs_more_training(self, task: Optional[Union[ModelTask, str]] = None) -> bool:
        response = await self._send(WorkerOp.NEEDS_TRAINING, task=task)
        return response.result if response.ok else True

    async def status(self) -> Dict[str, Dict[str, Any]]:
        response = await self._send(WorkerOp.STATUS)
        if not response.ok:
            return {"error": {"message": response.error}}
        return response.result

    async def reset(self) -> OperationResult:
        """Wipe every persisted model and training log, then reinitialize"""
        response = await self._send(WorkerOp.RESET)
        if not response.ok:
            logger.error(f"Reset error: {response.error}")
            return OperationResult(success=False, error=response.error)

        for task, error in response.result.items():
            if error:
                logger.warning(f"⚠️ {task} model degraded after reset: {error}")
        self.initialized = True
        return OperationResult(success=True)

    def terminate(self) -> None:
        """Dispose all models and stop the worker thread; waits for queued work"""
        if self.terminated:
            return
        self.terminated = True
        self.initialized = False
        self._executor.submit(self._shutdown_worker)
        self._executor.shutdown(wait=True)
        logger.info("SniperAI session terminated")

    async def __aenter__(self) -> "SniperAIClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.terminate()
