"""
Unit tests for FeatureExtractor
"""

import pytest

from components.sniper_ai.core.interfaces import SignalExplanation, TokenExplanation
from components.sniper_ai.core.tasks import FEATURE_NAMES, MAX_SEQUENCE_LENGTH, ModelTask
from components.sniper_ai.errors import ConfigurationError
from components.sniper_ai.extraction.feature_extractor import FeatureExtractor, extract_features


class TestIndicatorFeatures:
    """Test cases for the keyword-signal vector"""

    def test_risky_text_fires_expected_signals(self, extractor, risky_text):
        features = extractor.extract(risky_text, ModelTask.SAFETY)

        assert features == [1, 1, 1, 0, 0, 0, 0, 1, 0, 0]

    def test_credential_phishing_text(self, extractor):
        text = "URGENT: verify your bank account password now or it will be suspended"
        features = extractor.extract(text, ModelTask.GENERAL)

        assert features[FEATURE_NAMES.index("Urgency")] == 1
        assert features[FEATURE_NAMES.index("Financial Terms")] == 1
        assert features[FEATURE_NAMES.index("Security/Login")] == 1
        assert features[FEATURE_NAMES.index("Threats/Legal")] == 1

    def test_general_and_safety_share_the_encoding(self, extractor, risky_text):
        assert extractor.extract(risky_text, "general") == extractor.extract(risky_text, "safety")

    def test_benign_text_is_all_zeros(self, extractor, safe_text):
        assert extractor.extract(safe_text, ModelTask.GENERAL) == [0] * 10

    def test_empty_text_is_all_zeros(self, extractor):
        assert extractor.extract("", ModelTask.GENERAL) == [0] * 10

    def test_none_text_does_not_raise(self, extractor):
        assert extractor.extract(None, ModelTask.SAFETY) == [0] * 10

    def test_matching_is_case_insensitive(self, extractor):
        features = extractor.extract("Please Verify your Bitcoin wallet", ModelTask.SAFETY)

        assert features[FEATURE_NAMES.index("Security/Login")] == 1
        assert features[FEATURE_NAMES.index("Payment Methods")] == 1

    def test_all_caps_counts_as_text_style(self, extractor):
        features = extractor.extract("CALL ME BACK", ModelTask.SAFETY)

        assert features[FEATURE_NAMES.index("Text Style")] == 1

    def test_repeated_punctuation_counts_as_text_style(self, extractor):
        features = extractor.extract("what?! really?! no way!", ModelTask.SAFETY)

        assert features[FEATURE_NAMES.index("Text Style")] == 1

    @pytest.mark.parametrize("text", ["100%", "$$$ 1000 000", "   "])
    def test_text_without_letters_counts_as_text_style(self, extractor, text):
        features = extractor.extract(text, ModelTask.SAFETY)

        assert features[FEATURE_NAMES.index("Text Style")] == 1

    def test_mixed_case_is_not_text_style(self, extractor):
        features = extractor.extract("Call me back", ModelTask.SAFETY)

        assert features[FEATURE_NAMES.index("Text Style")] == 0

    def test_informal_words_need_word_boundaries(self, extractor):
        informal = FEATURE_NAMES.index("Informal Language")

        assert extractor.extract("plz send it", ModelTask.SAFETY)[informal] == 1
        assert extractor.extract("your order shipped", ModelTask.SAFETY)[informal] == 0

    def test_vector_values_are_binary(self, extractor):
        features = extractor.extract("URGENT!!! WIN A PRIZE, DEAR FRIEND!!!", ModelTask.GENERAL)

        assert len(features) == 10
        assert set(features) <= {0, 1}


class TestSequenceFeatures:
    """Test cases for the token-id sequence"""

    def test_known_and_unknown_tokens(self, extractor, chat_text):
        features = extractor.extract(chat_text, ModelTask.INTENT)

        assert len(features) == MAX_SEQUENCE_LENGTH
        assert features[:4] == [2, 1, 1, 1]
        assert features[4:] == [0] * (MAX_SEQUENCE_LENGTH - 4)

    def test_tokens_are_lowercased(self, extractor):
        assert extractor.extract("HELLO Bye", ModelTask.SENTIMENT)[:2] == [2, 5]

    def test_long_text_is_truncated(self, extractor):
        features = extractor.extract(" ".join(["help"] * 80), ModelTask.SENTIMENT)

        assert features == [7] * MAX_SEQUENCE_LENGTH

    def test_empty_text_is_all_padding(self, extractor):
        assert extractor.extract("   ", ModelTask.INTENT) == [0] * MAX_SEQUENCE_LENGTH

    def test_extraction_is_deterministic(self, extractor, risky_text):
        assert extractor.extract(risky_text, ModelTask.INTENT) == extractor.extract(risky_text, ModelTask.INTENT)

    def test_module_function_uses_default_vocabulary(self, chat_text):
        assert extract_features(chat_text, "intent")[:4] == [2, 1, 1, 1]


class TestExplanations:
    """Test cases for feature explanations"""

    def test_indicator_explanation_lists_fired_signals(self, extractor, risky_text):
        features = extractor.extract(risky_text, ModelTask.SAFETY)
        explanation = extractor.explain(features, ModelTask.SAFETY)

        assert all(isinstance(item, SignalExplanation) for item in explanation)
        assert [item.feature for item in explanation] == [
            "Urgency", "Financial Terms", "Security/Login", "Threats/Legal",
        ]
        assert all(item.importance == 1.0 for item in explanation)

    def test_sequence_explanation_skips_padding(self, extractor):
        features = extractor.extract("hello stranger", ModelTask.INTENT)
        explanation = extractor.explain(features, ModelTask.INTENT)

        assert explanation == [
            TokenExplanation(token="hello", position=0, value=2),
            TokenExplanation(token="<UNK>", position=1, value=1),
        ]

    def test_empty_text_has_empty_explanation(self, extractor):
        features = extractor.extract("", ModelTask.GENERAL)

        assert extractor.explain(features, ModelTask.GENERAL) == []


class TestConfiguration:
    """Test cases for task and vocabulary validation"""

    def test_unknown_task_is_rejected(self, extractor):
        with pytest.raises(ConfigurationError, match="Unknown model type: spam"):
            extractor.extract("hello", "spam")

    def test_vocabulary_must_reserve_padding_zero(self):
        with pytest.raises(ConfigurationError):
            FeatureExtractor(vocabulary={"<PAD>": 3, "<UNK>": 1})

    def test_vocabulary_ids_must_fit_embedding(self):
        with pytest.raises(ConfigurationError):
            FeatureExtractor(vocabulary={"<PAD>": 0, "<UNK>": 1, "huge": 10000})

    def test_custom_vocabulary(self):
        extractor = FeatureExtractor(vocabulary={"<PAD>": 0, "<UNK>": 1, "refund": 2})

        assert extractor.extract("refund please", ModelTask.INTENT)[:3] == [2, 1, 0]
