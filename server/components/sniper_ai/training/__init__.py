"""
SniperAI Training Module

Online, per-example training with durable training logs.
"""

from .online_trainer import OnlineTrainer

__all__ = ["OnlineTrainer"]
