import logging
import sys
from pathlib import Path

import pytest

from envtree import cli


@pytest.fixture(autouse=True)
def reset_envtree_logger():
    yield
    logging.getLogger("envtree").setLevel(logging.NOTSET)


def write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def build_workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    write(ws / "package-lock.json", "{}")
    write(ws / ".env", "X=1\nNAME='two words'\n")
    write(ws / "pkg" / ".env", "X=2\n")
    return ws


def test_summary_is_printed(tmp_path, capsys):
    ws = build_workspace(tmp_path)

    code = cli.main([str(ws / "pkg")])

    assert code == 0
    assert "Loaded 2 environment variables from 2 files" in capsys.readouterr().out


def test_verbose_lists_files_and_keys(tmp_path, capsys):
    ws = build_workspace(tmp_path)

    cli.main([str(ws / "pkg"), "--verbose"])

    out = capsys.readouterr().out
    assert f"Workspace root:     {ws.resolve()}" in out
    assert "Detection method:   lockfile" in out
    assert f"1. {(ws / '.env').resolve()}" in out
    assert "  X=2" in out


def test_export_prints_shell_statements(tmp_path, capsys):
    ws = build_workspace(tmp_path)

    cli.main([str(ws / "pkg"), "--export"])

    out = capsys.readouterr().out.splitlines()
    assert out == ["export NAME='two words'", "export X=2"]


def test_missing_workspace_exits_non_zero(tmp_path, capsys):
    start = tmp_path / "lonely"
    start.mkdir()
    config_file = write(tmp_path / "envtree.yaml", f"ceiling_dir: {tmp_path}\n")

    code = cli.main([str(start), "--config", str(config_file)])

    assert code == 1
    assert "No workspace root found" in capsys.readouterr().err


def test_invalid_config_exits_non_zero(tmp_path, capsys):
    config_file = write(tmp_path / "envtree.yaml", "unknown_key: 1\n")

    code = cli.main([str(tmp_path), "--config", str(config_file)])

    assert code == 1
    assert "Unknown configuration keys" in capsys.readouterr().err


def test_command_after_separator_receives_environment(tmp_path, monkeypatch):
    ws = build_workspace(tmp_path)
    captured = {}

    def fake_run(command, env_vars):
        captured["command"] = command
        captured["env_vars"] = env_vars
        return 7

    monkeypatch.setattr("envtree.cli.run_command", fake_run)

    code = cli.main([str(ws / "pkg"), "--env", "production", "--", "npm", "run", "--", "build"])

    assert code == 7
    assert captured["command"] == ["npm", "run", "--", "build"]
    assert captured["env_vars"] == {"X": "2", "NAME": "two words"}


def test_child_exit_code_is_propagated(tmp_path):
    ws = build_workspace(tmp_path)
    script = "import os, sys; sys.exit(int(os.environ['X']) + 40)"

    code = cli.main([str(ws / "pkg"), "--", sys.executable, "-c", script])

    assert code == 42


def test_spawn_failure_exits_non_zero(tmp_path, capsys):
    ws = build_workspace(tmp_path)

    code = cli.main([str(ws / "pkg"), "--", str(tmp_path / "missing-binary")])

    assert code == 1
    assert "Failed to execute command" in capsys.readouterr().err


def test_info_compares_methods(tmp_path, capsys):
    ws = build_workspace(tmp_path)
    (ws / ".git").mkdir()

    code = cli.main(["info", str(ws / "pkg")])

    out = capsys.readouterr().out
    assert code == 0
    assert "Lock file method:" in out
    assert "Workspace indicator method:" in out
    assert "Recommendation: Both methods found the same workspace root" in out


def test_verbose_from_config_file_enables_loader_traces(tmp_path, caplog):
    ws = build_workspace(tmp_path)
    config_file = write(tmp_path / "envtree.yaml", "verbose: true\n")

    code = cli.main([str(ws / "pkg"), "--config", str(config_file)])

    assert code == 0
    assert logging.getLogger("envtree").level == logging.INFO
    messages = [record.getMessage() for record in caplog.records if record.name == "envtree.loader"]
    assert f"Workspace root: {ws.resolve()} (lockfile)" in messages
    assert f"Loaded {(ws / 'pkg' / '.env').resolve()} (1 keys)" in messages


def test_loader_traces_stay_quiet_without_verbose(tmp_path, caplog):
    ws = build_workspace(tmp_path)

    cli.main([str(ws / "pkg")])

    assert logging.getLogger("envtree").level == logging.WARNING
    assert not [record for record in caplog.records if record.name == "envtree.loader"]


def test_info_after_options_is_rejected(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)

    code = cli.main(["--verbose", "info"])

    assert code == 2
    assert "'info' must be the first argument" in capsys.readouterr().err
