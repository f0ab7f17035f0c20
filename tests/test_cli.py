"""
Tests for the procrate command-line entry point.
"""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from procrate.cli import main_cli
from procrate.collectors import AbstractProcessLister
from procrate.models import ProcessObservation


class SteadyLister(AbstractProcessLister):
    """Every role is one process using a quarter of a CPU."""

    def __init__(self, roles):
        super().__init__(roles)
        self.started = datetime.now(timezone.utc)

    def list_processes(self):
        now = datetime.now(timezone.utc)
        cpu = (now - self.started).total_seconds() * 0.25
        return [
            ProcessObservation(role=role.name, pid=777, timestamp=now, cpu_time=cpu)
            for role in self.roles
        ]


@pytest.mark.unit
class TestMainCli:

    @patch("procrate.cli.orchestrator.PsutilProcessLister", SteadyLister)
    def test_runs_for_duration_and_prints_json(self, config_file, capsys):
        main_cli(["--config", str(config_file), "--duration", "0.4"])

        lines = [line for line in capsys.readouterr().out.splitlines() if line]
        assert lines
        snapshot = json.loads(lines[-1])
        assert snapshot[0]["role"] == "alpha"
        assert snapshot[0]["pid"] == 777

    @patch("procrate.cli.orchestrator.PsutilProcessLister", SteadyLister)
    def test_format_override(self, config_file, capsys):
        main_cli(["--config", str(config_file), "--format", "text", "--duration", "0.3"])

        assert 'testrate_pid{role="alpha"} 777' in capsys.readouterr().out

    def test_missing_config_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(tmp_path / "missing.toml"), "--duration", "0"])

        assert exc_info.value.code == 1

    def test_malformed_config_exits(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[monitor\n", encoding="utf-8")

        with pytest.raises(SystemExit):
            main_cli(["--config", str(path), "--duration", "0"])

    def test_report_interval_override_shorter_than_sampling(self, config_file):
        with pytest.raises(SystemExit):
            main_cli(["--config", str(config_file), "--report-interval", "0.01", "--duration", "0"])

    def test_non_positive_sampling_override(self, config_file):
        with pytest.raises(SystemExit):
            main_cli(["--config", str(config_file), "--sampling-interval", "-1", "--duration", "0"])

    def test_unknown_format_rejected_by_parser(self, config_file):
        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config_file), "--format", "xml"])

        assert exc_info.value.code == 2
