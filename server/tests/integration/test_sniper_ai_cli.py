"""
Integration tests for the SniperAI command line
"""

import json

import pytest

from components.sniper_ai.__main__ import main, parse_labels


@pytest.fixture
def db_args(temp_dir, monkeypatch):
    monkeypatch.chdir(temp_dir)
    return ["--db", str(temp_dir / "cli.db")]


def read_output(capsys):
    return json.loads(capsys.readouterr().out)


class TestCommandLine:
    """Test cases for python -m components.sniper_ai"""

    def test_analyze(self, db_args, capsys, risky_text):
        assert main(db_args + ["analyze", risky_text]) == 0

        output = read_output(capsys)
        assert output["success"] is True
        assert set(output) >= {"general", "sentiment", "intent", "safety", "confidence"}

    def test_analyze_chat(self, db_args, capsys, chat_text):
        assert main(db_args + ["analyze", "--chat", chat_text]) == 0

        assert read_output(capsys)["intent"] is not None

    def test_train_then_status(self, db_args, capsys, safe_text):
        assert main(db_args + ["train", safe_text, "--label", "safety=1", "--label", "sentiment=[0, 0, 1]"]) == 0
        trained = read_output(capsys)

        assert main(db_args + ["status"]) == 0
        status = read_output(capsys)

        assert set(trained["results"]) == {"safety", "sentiment"}
        assert status["tasks"]["safety"]["examples"] == 1
        assert status["tasks"]["sentiment"]["examples"] == 1

    def test_train_chat_intent(self, db_args, capsys, chat_text):
        assert main(db_args + ["train", chat_text, "--intent", "greeting"]) == 0

        output = read_output(capsys)
        assert output["success"] is True
        assert "loss" in output

    def test_failed_training_exit_code(self, db_args, capsys, safe_text):
        assert main(db_args + ["train", safe_text, "--label", "intent=12"]) == 1

        assert read_output(capsys)["success"] is False

    def test_train_without_labels(self, db_args, capsys, safe_text):
        assert main(db_args + ["train", safe_text]) == 2

    def test_reset(self, db_args, capsys, safe_text):
        main(db_args + ["train", safe_text, "--label", "general=1"])
        capsys.readouterr()

        assert main(db_args + ["reset"]) == 0
        assert read_output(capsys) == {"success": True}

    def test_malformed_label(self, db_args, capsys, safe_text):
        assert main(db_args + ["train", safe_text, "--label", "general"]) == 2

        assert "task=value" in read_output(capsys)["error"]


class TestParseLabels:
    """Test cases for --label parsing"""

    def test_numbers_and_lists(self):
        assert parse_labels(["safety=1", "general=0.5", "intent=[0,1,0,0,0,0,0]"]) == {
            "safety": 1,
            "general": 0.5,
            "intent": [0, 1, 0, 0, 0, 0, 0],
        }

    def test_bad_value(self):
        with pytest.raises(ValueError):
            parse_labels(["safety=yes"])
