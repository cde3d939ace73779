"""
SniperAI Integration Module

Worker boundary: message-handling worker plus the async client that feeds it.
"""

from .worker import SniperAIWorker, WorkerOp, WorkerRequest, WorkerResponse
from .client import SniperAIClient

__all__ = [
    "SniperAIWorker",
    "WorkerOp",
    "WorkerRequest",
    "WorkerResponse",
    "SniperAIClient",
]
