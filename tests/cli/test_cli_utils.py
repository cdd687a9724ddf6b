"""Tests for CLI utility functions."""

import argparse
from pathlib import Path

import pytest

from katalonkit.cli.utils import build_step_config, print_error, print_warning
from katalonkit.config.step import ConfigError


def make_args(**kwargs):
    values = {
        "config": None,
        "version": None,
        "location": None,
        "project_path": None,
        "execute_args": None,
        "x11_display": None,
        "xvfb_configuration": None,
    }
    values.update(kwargs)
    return argparse.Namespace(**values)


class TestBuildStepConfig:
    def test_flags_only(self):
        config = build_step_config(make_args(version="7.0.0", project_path="/p"))

        assert config.version == "7.0.0"
        assert config.project_path == "/p"
        assert config.execute_args == ""

    def test_project_path_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = build_step_config(make_args(version="7.0.0"))

        assert Path(config.project_path) == Path.cwd()

    def test_flags_override_file(self, tmp_path):
        config_file = tmp_path / "katalon.yaml"
        config_file.write_text(
            'katalon:\n  version: "6.3.3"\n  projectPath: /from/file\n  executeArgs: -retry=1\n'
        )

        config = build_step_config(make_args(config=config_file, version="7.0.0"))

        assert config.version == "7.0.0"
        assert config.project_path == "/from/file"
        assert config.execute_args == "-retry=1"

    def test_requires_version_or_location(self):
        with pytest.raises(ConfigError):
            build_step_config(make_args(project_path="/p"))

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigError):
            build_step_config(make_args(config=tmp_path / "missing.yaml"))


class TestMessages:
    def test_print_error(self, capsys):
        print_error("Something failed", details="more info")

        err = capsys.readouterr().err
        assert "ERROR: Something failed" in err
        assert "  more info" in err

    def test_print_warning(self, capsys):
        print_warning("Careful")

        assert "WARNING: Careful" in capsys.readouterr().err
