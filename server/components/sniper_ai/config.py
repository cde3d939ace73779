"""
Configuration: SniperAI Settings
================================

Environment-driven settings for the on-device classifier ensemble:
- Artifact store location
- Optimizer and fit-loop parameters
- Training-sample gates
- Logging sinks
"""

import os
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from loguru import logger

from components.sniper_ai.errors import ConfigurationError

_TRUTHY = ("1", "true", "yes")
_LOG_SINK_ADDED = False


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUTHY


def _env_seed() -> Optional[int]:
    raw = os.getenv("SNIPER_AI_SEED")
    return int(raw) if raw not in (None, "") else None


@dataclass
class SniperAIConfig:
    """Complete configuration for the SniperAI subsystem"""
    # Storage
    db_path: str = field(default_factory=lambda: os.getenv("SNIPER_AI_DB_PATH", "sniper_ai.db"))

    # Optimizer / fit loop
    learning_rate: float = field(default_factory=lambda: float(os.getenv("SNIPER_AI_LEARNING_RATE", "0.001")))
    epochs: int = field(default_factory=lambda: int(os.getenv("SNIPER_AI_EPOCHS", "5")))
    batch_size: int = field(default_factory=lambda: int(os.getenv("SNIPER_AI_BATCH_SIZE", "1")))
    shuffle: bool = field(default_factory=lambda: _env_bool("SNIPER_AI_SHUFFLE", "true"))

    # Training gates
    min_training_samples: int = field(default_factory=lambda: int(os.getenv("SNIPER_AI_MIN_TRAINING_SAMPLES", "10")))
    min_task_training_samples: int = field(
        default_factory=lambda: int(os.getenv("SNIPER_AI_MIN_TASK_TRAINING_SAMPLES", "50"))
    )

    # Runtime
    device: str = field(default_factory=lambda: os.getenv("SNIPER_AI_DEVICE", "cpu"))
    seed: Optional[int] = field(default_factory=_env_seed)

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("SNIPER_AI_LOG_LEVEL", "INFO").upper())
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("SNIPER_AI_LOG_FILE") or None)

    def __post_init__(self):
        self._validate_config()
        self._setup_paths()

    def _validate_config(self):
        """Validate configuration settings"""
        if self.learning_rate <= 0:
            raise ConfigurationError("learning_rate must be positive")

        if self.epochs <= 0:
            raise ConfigurationError("epochs must be positive")

        if self.batch_size <= 0:
            raise ConfigurationError("batch_size must be positive")

        if self.min_training_samples < 0 or self.min_task_training_samples < 0:
            raise ConfigurationError("training sample thresholds must not be negative")

        if self.log_level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"unknown log level: {self.log_level}")

    def _setup_paths(self):
        """Resolve the database path unless it is an in-memory database"""
        if self.db_path != ":memory:" and not os.path.isabs(self.db_path):
            self.db_path = os.path.abspath(self.db_path)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def log_configuration(self):
        """Log current configuration"""
        logger.info("🔧 SniperAI Configuration:")
        logger.info(f"  🗃️ Artifact store: {self.db_path}")
        logger.info(
            f"  🎯 Fit loop: lr={self.learning_rate}, epochs={self.epochs}, "
            f"batch_size={self.batch_size}, shuffle={self.shuffle}"
        )
        logger.info(
            f"  📊 Training gates: any-task={self.min_training_samples}, "
            f"per-task={self.min_task_training_samples}"
        )
        logger.info(f"  ⚡ Device: {self.device}")


def create_config(**overrides: Any) -> SniperAIConfig:
    """Create SniperAI configuration, environment defaults with explicit overrides"""
    return SniperAIConfig(**overrides)


def configure_logging(config: SniperAIConfig) -> None:
    """Add the optional file sink once per process"""
    global _LOG_SINK_ADDED
    if _LOG_SINK_ADDED or not config.log_file:
        return

    try:
        log_dir = os.path.dirname(config.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        logger.add(
            config.log_file,
            rotation="10 MB",
            retention="10 days",
            enqueue=True,
            level=config.log_level,
            backtrace=False,
            diagnose=False,
        )
        _LOG_SINK_ADDED = True
    except OSError as e:
        logger.warning(f"SniperAI file logging not enabled: {e}")
