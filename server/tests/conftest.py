"""
Test configuration and utilities for SniperAI tests
"""

import pytest
import tempfile
import shutil
from pathlib import Path

from components.sniper_ai.config import SniperAIConfig
from components.sniper_ai.core.artifact_store import ArtifactStore
from components.sniper_ai.core.model_registry import ModelRegistry
from components.sniper_ai.extraction.feature_extractor import FeatureExtractor
from components.sniper_ai.inference.engine import InferenceEngine
from components.sniper_ai.integration.client import SniperAIClient
from components.sniper_ai.training.online_trainer import OnlineTrainer


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests"""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def test_config(temp_dir):
    """Create test configuration with small training gates"""
    return SniperAIConfig(
        db_path=str(temp_dir / "test_sniper_ai.db"),
        epochs=3,
        min_training_samples=2,
        min_task_training_samples=3,
        seed=1234,
        log_level="DEBUG",
        log_file=None,
    )


@pytest.fixture
def store(test_config):
    """Create artifact store for tests"""
    store = ArtifactStore(test_config.db_path)
    yield store
    store.close()


@pytest.fixture
def extractor():
    return FeatureExtractor()


@pytest.fixture
def registry(store, test_config):
    registry = ModelRegistry(store, test_config)
    yield registry
    registry.dispose()


@pytest.fixture
def engine(registry, extractor):
    return InferenceEngine(registry, extractor)


@pytest.fixture
def trainer(registry, store, test_config, extractor):
    return OnlineTrainer(registry, store, test_config, extractor)


@pytest.fixture
def client(test_config):
    """Create a SniperAI client; terminated after the test"""
    client = SniperAIClient(test_config)
    yield client
    client.terminate()


@pytest.fixture
def risky_text():
    return "URGENT: your bank account password was hacked, pay now or you will be arrested"


@pytest.fixture
def safe_text():
    return "Thanks for the update, see you tomorrow"


@pytest.fixture
def chat_text():
    return "hello how are you"
