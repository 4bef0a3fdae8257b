"""Tests for the gesture-keypad CLI."""

import yaml
from typer.testing import CliRunner

from gesture_keypad.cli import app

runner = CliRunner()


class TestCli:
    def test_patterns(self):
        result = runner.invoke(app, ["patterns"])
        assert result.exit_code == 0
        assert "DR" in result.stdout
        assert "separator" in result.stdout

    def test_type_address(self):
        result = runner.invoke(app, ["type", "10.0.0.1", "--quiet"])
        assert result.exit_code == 0
        assert "Address complete: 10.0.0.1" in result.stdout

    def test_type_patterns_shows_feedback(self):
        result = runner.invoke(app, ["type", "UL", "DR", "U", "DR", "UR", "DR", "LU", "DR"])
        assert result.exit_code == 0
        assert "1.2.3.4" in result.stdout
        assert "♪ up" in result.stdout

    def test_incomplete_address_fails(self):
        result = runner.invoke(app, ["type", "R", "--quiet"])
        assert result.exit_code == 1

    def test_bad_address(self):
        result = runner.invoke(app, ["type", "300.1.1.1"])
        assert result.exit_code == 1

    def test_bad_pattern_letter(self):
        result = runner.invoke(app, ["type", "UX"])
        assert result.exit_code == 1

    def test_record_and_replay(self, tmp_path):
        path = tmp_path / "rec.json"
        result = runner.invoke(app, ["record", str(path), "8.8.4.4"])
        assert result.exit_code == 0
        assert path.exists()

        result = runner.invoke(app, ["replay", str(path), "--quiet"])
        assert result.exit_code == 0
        assert "Address complete: 8.8.4.4" in result.stdout

    def test_record_compact(self, tmp_path):
        result = runner.invoke(app, ["record", str(tmp_path / "rec"), "1.1.1.1", "--compact"])
        assert result.exit_code == 0
        assert (tmp_path / "rec.npz").exists()

    def test_replay_missing_file(self, tmp_path):
        result = runner.invoke(app, ["replay", str(tmp_path / "nope.json")])
        assert result.exit_code == 1

    def test_config_option(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"patterns": {"U": "1", "D": "separator"}}))
        result = runner.invoke(app, ["--config", str(path), "type", "1.1.1.1", "--quiet"])
        assert result.exit_code == 0
        assert "Gestures: U D U D U D U D" in result.stdout

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "none.yml"), "patterns"])
        assert result.exit_code == 1

    def test_config_yaml_syntax_error(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("threshold: [0.05\n")
        result = runner.invoke(app, ["--config", str(path), "patterns"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_config_patterns_list(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("patterns: [UL, DR]\n")
        result = runner.invoke(app, ["--config", str(path), "patterns"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)

    def test_config_non_string_prompt(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("prompt: 42\n")
        result = runner.invoke(app, ["--config", str(path), "type", "1.1.1.1", "--quiet"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
