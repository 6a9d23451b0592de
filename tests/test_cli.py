"""Tests for the changeenv command line interface."""

from __future__ import annotations

import json
import logging
import os

import pytest

from changeenv import __version__, cli


@pytest.fixture()
def env_tree(tmp_path, monkeypatch):
    workdir = tmp_path / "envs" / "dev" / "eu-west6" / "infra"
    workdir.mkdir(parents=True)
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("PWD", raising=False)
    return workdir


def _expected(target: str) -> str:
    return os.getcwd().replace(os.sep + "dev" + os.sep, os.sep + target + os.sep, 1)


def test_switch_prints_target_path(env_tree, capsys) -> None:
    exit_code = cli.main(["prod"])

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out == _expected("prod") + "\n"
    assert captured.err == ""


def test_switch_trims_target_argument(env_tree, capsys) -> None:
    assert cli.main(["  test "]) == 0
    assert capsys.readouterr().out == _expected("test") + "\n"


def test_missing_target_is_usage_error(env_tree, capsys) -> None:
    exit_code = cli.main([])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert captured.out == ""
    assert "target environment argument is required" in captured.err
    assert "usage: changeenv" in captured.err


def test_blank_target_is_usage_error(env_tree, capsys) -> None:
    assert cli.main(["   "]) == 2
    assert "target environment must not be empty" in capsys.readouterr().err


def test_outside_environment_fails(tmp_path, monkeypatch, capsys) -> None:
    workdir = tmp_path / "misc" / "eu-west6"
    workdir.mkdir(parents=True)
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("PWD", raising=False)

    exit_code = cli.main(["prod"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert captured.err.startswith("changeenv: path ")
    assert "not inside a known environment" in captured.err


def test_custom_environment_from_variable(tmp_path, monkeypatch, capsys) -> None:
    workdir = tmp_path / "prod-us-east-1" / "services" / "app"
    workdir.mkdir(parents=True)
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("PWD", raising=False)
    monkeypatch.setenv("CENV_ENVIRONMENTS", "prod-us-east-1 test-eu-central-1")

    assert cli.main(["test-eu-central-1"]) == 0
    expected = os.getcwd().replace("prod-us-east-1", "test-eu-central-1")
    assert capsys.readouterr().out == expected + "\n"


def test_custom_environment_from_dotenv(tmp_path, monkeypatch, capsys) -> None:
    workdir = tmp_path / "qa" / "app"
    workdir.mkdir(parents=True)
    dotenv_file = tmp_path / "cenv.env"
    dotenv_file.write_text("CENV_ENVIRONMENTS=qa\n", encoding="utf-8")
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("PWD", raising=False)
    monkeypatch.setenv("CHANGEENV_DOTENV", str(dotenv_file))

    assert cli.main(["prod"]) == 0
    expected = os.getcwd().replace(os.sep + "qa" + os.sep, os.sep + "prod" + os.sep)
    assert capsys.readouterr().out == expected + "\n"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_switch_keeps_logical_working_directory(tmp_path, monkeypatch, capsys) -> None:
    real = tmp_path / "storage" / "dev" / "app"
    real.mkdir(parents=True)
    link = tmp_path / "link"
    link.mkdir()
    logical_dev = link / "dev"
    try:
        os.symlink(str(real.parent), str(logical_dev))
    except OSError:
        pytest.skip("symlink creation not permitted")
    logical = logical_dev / "app"
    monkeypatch.chdir(logical)
    monkeypatch.setenv("PWD", str(logical))

    assert cli.main(["prod"]) == 0
    assert capsys.readouterr().out == str(link / "prod" / "app") + "\n"


def test_switch_records_history(env_tree, tmp_path, monkeypatch, capsys) -> None:
    history = tmp_path / "logs" / "history.jsonl"
    monkeypatch.setenv("CHANGEENV_HISTORY_PATH", str(history))

    assert cli.main(["prod"]) == 0
    capsys.readouterr()

    records = [json.loads(line) for line in history.read_text(encoding="utf-8").splitlines()]
    assert len(records) == 1
    assert records[0]["target_env"] == "prod"
    assert records[0]["to"] == _expected("prod")
    assert "timestamp" in records[0]


def test_failure_is_logged_at_info(tmp_path, monkeypatch, caplog, capsys) -> None:
    workdir = tmp_path / "misc"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("PWD", raising=False)

    with caplog.at_level(logging.INFO, logger="changeenv.cli"):
        assert cli.main(["prod"]) == 1

    assert any("failed" in message for message in caplog.messages)
    capsys.readouterr()


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])

    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_configure_rejects_positional_arguments(capsys) -> None:
    assert cli.main(["configure", "extra"]) == 2
    captured = capsys.readouterr()
    assert "configure does not accept positional arguments" in captured.err
    assert "usage: changeenv configure" in captured.err


def test_configure_prints_snippet(user_home, monkeypatch, capsys) -> None:
    monkeypatch.setenv("SHELL", "/bin/bash")

    assert cli.main(["configure"]) == 0

    output = capsys.readouterr().out
    assert "Detected shell: bash" in output
    assert 'cenv() { cd "$(changeenv "$1")"; }' in output
    assert not (user_home / ".bashrc").exists()


def test_configure_create_writes_shell_config(user_home, monkeypatch, capsys) -> None:
    monkeypatch.setenv("SHELL", "/usr/bin/zsh")

    assert cli.main(["configure", "--create"]) == 0

    assert 'cenv() { cd "$(changeenv "$1")"; }' in (user_home / ".zshrc").read_text(encoding="utf-8")
    assert "Added helper function to" in capsys.readouterr().out


def test_dotenv_in_project_tree_cannot_redirect_history(tmp_path, user_home, monkeypatch, capsys) -> None:
    rc_file = user_home / ".bashrc"
    rc_file.write_text("# user rc\n", encoding="utf-8")
    repo = tmp_path / "cloned-repo"
    workdir = repo / "dev" / "app"
    workdir.mkdir(parents=True)
    (repo / ".env").write_text(f"CHANGEENV_HISTORY_PATH={rc_file}\n", encoding="utf-8")
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("PWD", raising=False)
    monkeypatch.delenv("CHANGEENV_DOTENV")

    assert cli.main(["prod"]) == 0

    assert capsys.readouterr().out == _expected("prod") + "\n"
    assert rc_file.read_text(encoding="utf-8") == "# user rc\n"
    assert "CHANGEENV_HISTORY_PATH" not in os.environ


def test_extra_positional_arguments_are_ignored(env_tree, capsys) -> None:
    assert cli.main(["prod", "extra", "args"]) == 0
    assert capsys.readouterr().out == _expected("prod") + "\n"
