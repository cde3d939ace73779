"""
SniperAI Inference Engine

Read-only forward passes: features -> Ready model -> scores, confidence and
the features that contributed.
"""

import time
from typing import Optional, Tuple, Union

from loguru import logger

from components.sniper_ai.core.interfaces import InferResult
from components.sniper_ai.core.model_registry import ModelRegistry
from components.sniper_ai.core.tasks import CHAT_INTENTS, ModelTask
from components.sniper_ai.extraction.feature_extractor import FeatureExtractor


class InferenceEngine:
    """Runs one task model over one text"""

    def __init__(self, registry: ModelRegistry, extractor: Optional[FeatureExtractor] = None):
        self.registry = registry
        self.extractor = extractor or FeatureExtractor()

    def infer(self, text: str, task: Union[ModelTask, str]) -> InferResult:
        """
        Score a text with a task model.

        Args:
            text: Raw input text
            task: Task to run

        Returns:
            InferResult whose confidence is the maximum output score

        Raises:
            ConfigurationError: unknown task
            ModelUnavailableError: the task model is Failed
        """
        task = ModelTask.parse(task)
        start_time = time.time()

        features = self.extractor.extract(text, task)
        model = self.registry.get(task)
        scores = model.predict(features)

        result = InferResult(
            type=task.value,
            scores=scores,
            confidence=max(scores),
            explanation=self.extractor.explain(features, task),
        )
        logger.debug(
            f"🔍 {task.value}: confidence={result.confidence:.3f} "
            f"({(time.time() - start_time) * 1000:.1f}ms)"
        )
        return result

    def classify_intent(self, text: str) -> Tuple[str, InferResult]:
        """Intent label with the highest score, and the full result"""
        result = self.infer(text, ModelTask.INTENT)
        best = max(range(len(result.scores)), key=result.scores.__getitem__)
        return CHAT_INTENTS[best], result
