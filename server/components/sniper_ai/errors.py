"""
SniperAI error types.

Raised inside the worker, turned into tagged responses at the worker
boundary and into ``{"success": False, "error": ...}`` results by the client.
"""

from typing import Optional


class SniperAIError(Exception):
    """Base class for all SniperAI failures"""

    retryable = True

    def __init__(self, message: str, task: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.task = task

    def __str__(self) -> str:
        if self.task:
            return f"[{self.task}] {self.message}"
        return self.message


class ConfigurationError(SniperAIError):
    """Unknown task name or malformed vocabulary/architecture table"""

    retryable = False


class PersistenceError(SniperAIError):
    """Weight or training-log store unreadable or unwritable"""


class ModelUnavailableError(SniperAIError):
    """Task model is in the Failed state"""


class TrainingError(SniperAIError):
    """A fit step failed; nothing from that step was kept"""
