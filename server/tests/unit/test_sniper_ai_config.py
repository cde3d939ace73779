"""
Unit tests for SniperAIConfig
"""

import os

import pytest

from components.sniper_ai.config import SniperAIConfig, create_config
from components.sniper_ai.core.tasks import ModelTask
from components.sniper_ai.errors import ConfigurationError, SniperAIError


class TestSniperAIConfig:
    """Test cases for environment-driven configuration"""

    def test_defaults(self, monkeypatch):
        for name in list(os.environ):
            if name.startswith("SNIPER_AI_"):
                monkeypatch.delenv(name)

        config = SniperAIConfig(db_path=":memory:")

        assert config.learning_rate == 0.001
        assert config.epochs == 5
        assert config.batch_size == 1
        assert config.shuffle is True
        assert config.device == "cpu"
        assert config.seed is None
        assert config.log_file is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SNIPER_AI_EPOCHS", "2")
        monkeypatch.setenv("SNIPER_AI_SHUFFLE", "false")
        monkeypatch.setenv("SNIPER_AI_SEED", "42")
        monkeypatch.setenv("SNIPER_AI_LOG_LEVEL", "debug")

        config = create_config(db_path=":memory:")

        assert config.epochs == 2
        assert config.shuffle is False
        assert config.seed == 42
        assert config.log_level == "DEBUG"

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("SNIPER_AI_EPOCHS", "2")

        assert create_config(db_path=":memory:", epochs=9).epochs == 9

    def test_relative_db_path_is_resolved(self):
        config = SniperAIConfig(db_path="relative/sniper.db")

        assert os.path.isabs(config.db_path)
        assert config.db_path.endswith(os.path.join("relative", "sniper.db"))

    def test_memory_db_path_is_kept(self):
        assert SniperAIConfig(db_path=":memory:").db_path == ":memory:"

    @pytest.mark.parametrize("field,value", [
        ("learning_rate", 0.0),
        ("epochs", 0),
        ("batch_size", -1),
        ("min_training_samples", -1),
        ("log_level", "LOUD"),
    ])
    def test_invalid_values_are_rejected(self, field, value):
        with pytest.raises(ConfigurationError):
            SniperAIConfig(db_path=":memory:", **{field: value})

    def test_to_dict(self, test_config):
        data = test_config.to_dict()

        assert data["db_path"] == test_config.db_path
        assert data["min_task_training_samples"] == 3


class TestErrors:
    """Test cases for the error hierarchy"""

    def test_unknown_task_error_message(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ModelTask.parse("spam")

        assert str(exc_info.value) == "Unknown model type: spam"
        assert exc_info.value.retryable is False

    def test_task_tag_in_message(self):
        error = SniperAIError("boom", task="intent")

        assert str(error) == "[intent] boom"
        assert error.retryable is True

    def test_task_keys(self):
        assert ModelTask.SAFETY.model_key == "sniper-ai-safety-model"
        assert ModelTask.SAFETY.training_key == "sniper-ai-safety-training"
