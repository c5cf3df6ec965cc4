"""Tests for the snake-coach CLI."""

import json

from snake_coach.cli import _build_parser, main
from snake_coach.config import GameConfig


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.config is None
        assert args.seed is None
        assert args.max_ticks == 500
        assert args.turn_prob == 0.2

    def test_simulate_with_flags(self):
        args = _build_parser().parse_args([
            "simulate", "--seed", "4", "--max-ticks", "50", "--turn-prob", "0.5",
        ])
        assert args.seed == 4
        assert args.max_ticks == 50
        assert args.turn_prob == 0.5


class TestCLISimulate:
    def test_simulate_prints_summary(self, capsys):
        assert main(["simulate", "--seed", "1", "--max-ticks", "100"]) == 0
        out = capsys.readouterr().out
        assert "score=" in out
        assert "Let's go! Stay alert!" in out

    def test_simulate_is_reproducible(self, capsys):
        main(["simulate", "--seed", "9", "--max-ticks", "200"])
        first = capsys.readouterr().out
        main(["simulate", "--seed", "9", "--max-ticks", "200"])
        assert capsys.readouterr().out == first

    def test_simulate_reads_high_score_file(self, tmp_path, capsys):
        path = tmp_path / "hs.json"
        path.write_text(json.dumps({"high_score": 5000}))
        cfg_path = tmp_path / "cfg.json"
        GameConfig(grid_width=6, grid_height=6).save(cfg_path)
        main([
            "simulate", "--seed", "2", "--config", str(cfg_path),
            "--high-score-file", str(path), "--turn-prob", "0",
        ])
        out = capsys.readouterr().out
        assert "high_score=5000" in out
        assert "end=wall" in out


class TestCLIInitConfig:
    def test_writes_default_config(self, tmp_path):
        out = tmp_path / "config.json"
        assert main(["init-config", str(out)]) == 0
        assert GameConfig.load(out) == GameConfig()
