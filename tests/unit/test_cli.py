"""Unit tests for mkdist CLI commands."""

from __future__ import annotations

import functools

import pytest
from click.testing import CliRunner

from mkdist.cli.main import main
from tests.helpers.fakes import FakeDeclarations, FakeSass, FakeTransformer


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_tools(monkeypatch):
    """Route the build command through in-process fakes."""
    import mkdist.build.runner as runner_module
    from mkdist.build.chain import Toolchain

    toolchain = Toolchain(
        transformer=FakeTransformer(),
        declarations=FakeDeclarations(),
        stylesheets=FakeSass(),
    )
    monkeypatch.setattr(
        runner_module, "make", functools.partial(runner_module.make, toolchain=toolchain)
    )
    return toolchain


def test_build_command_exists(runner):
    """mkdist build --help succeeds."""
    result = runner.invoke(main, ["build", "--help"])
    assert result.exit_code == 0
    assert "DIR" in result.output
    assert "--declaration" in result.output


def test_loaders_command(runner, monkeypatch):
    monkeypatch.setattr("mkdist.build.tools.shutil.which", lambda name: None)
    result = runner.invoke(main, ["loaders"])
    assert result.exit_code == 0
    for name in ("js", "vue", "sass", "css", "passthrough"):
        assert name in result.output
    assert "missing" in result.output


def test_build_writes_dist(runner, project, fake_tools):
    result = runner.invoke(main, ["build", str(project)])

    assert result.exit_code == 0, result.output
    dist = project / "dist"
    assert (dist / "index.mjs").exists()
    assert (dist / "foo.mjs").exists()
    assert (dist / "README.md").exists()
    assert "index.mjs" in result.output


def test_build_with_declarations(runner, project, fake_tools):
    result = runner.invoke(main, ["build", str(project), "-d"])
    assert result.exit_code == 0, result.output
    assert (project / "dist" / "index.d.ts").exists()


def test_build_cwd_option(runner, project, fake_tools):
    result = runner.invoke(main, ["build", "--cwd", str(project), "--format", "cjs"])
    assert result.exit_code == 0, result.output
    assert (project / "dist" / "index.js").exists()


def test_build_missing_src_dir(runner, tmp_path, fake_tools):
    result = runner.invoke(main, ["build", str(tmp_path)])
    assert result.exit_code == 1
    assert "Build failed" in result.output


def test_build_bad_alias(runner, project):
    result = runner.invoke(main, ["build", str(project), "--alias", "[1, 2]"])
    assert result.exit_code != 0
    assert "JSON object" in result.output


def test_build_unknown_dialect(runner, project):
    result = runner.invoke(main, ["build", str(project), "--declaration-dialect", "coffee"])
    assert result.exit_code == 1
    assert "Invalid options" in result.output


def test_build_reports_failures(runner, project, fake_tools):
    (project / "src" / "bad.ts").write_text("SYNTAX ERROR")

    result = runner.invoke(main, ["build", str(project)])

    assert result.exit_code == 1
    assert "Failed files" in result.output
    assert "bad.ts" in result.output
    assert (project / "dist" / "index.mjs").exists()


def test_build_log_dir(runner, project, fake_tools, tmp_path):
    logs = tmp_path / "logs"
    result = runner.invoke(main, ["build", str(project), "--log-dir", str(logs)])
    assert result.exit_code == 0, result.output
    assert len(list(logs.glob("*.jsonl"))) == 1
