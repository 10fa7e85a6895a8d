"""Tests for runner_telemetry/locator.py"""

import os

from runner_telemetry.config import Config
from runner_telemetry.locator import candidate_dirs, locate_log_dir


class TestCandidateDirs:
    def test_order(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.setenv("USERPROFILE", str(tmp_path / "home"))
        monkeypatch.chdir(tmp_path)
        cfg = Config(
            log_dir="/explicit",
            runner_root="/runner",
            install_dir="/opt/actions-runner",
        )
        assert candidate_dirs(cfg) == [
            "/explicit",
            os.path.join("/runner", "_diag"),
            os.path.join("/opt/actions-runner", "_diag"),
            os.path.join(str(tmp_path / "home"), "actions-runner", "_diag"),
            os.path.join(str(tmp_path), "_diag"),
        ]

    def test_without_override_or_root(self):
        cfg = Config(install_dir="/opt/actions-runner")
        candidates = candidate_dirs(cfg)
        assert len(candidates) == 3
        assert candidates[0] == os.path.join("/opt/actions-runner", "_diag")


class TestLocateLogDir:
    def test_first_existing_wins(self, tmp_path):
        second = tmp_path / "second"
        third = tmp_path / "third"
        second.mkdir()
        third.mkdir()
        found = locate_log_dir([str(tmp_path / "missing"), str(second), str(third)])
        assert found == str(second)

    def test_files_are_not_directories(self, tmp_path):
        f = tmp_path / "file"
        f.write_text("x")
        assert locate_log_dir([str(f)]) is None

    def test_none_exist(self, tmp_path):
        assert locate_log_dir([str(tmp_path / "a"), str(tmp_path / "b")]) is None

    def test_empty_candidates(self):
        assert locate_log_dir([]) is None
