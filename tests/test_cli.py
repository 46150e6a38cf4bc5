from pathlib import Path

import pytest
from click.testing import CliRunner

from zikojsx.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test_compile_prints_output(runner: CliRunner, tmp_path: Path) -> None:
    source = tmp_path / "App.jsx"
    source.write_text("const App = () => <div>hi</div>;\n")

    result = runner.invoke(cli, ["compile", str(source)])

    assert result.exit_code == 0, result.output
    assert 'import { tags } from "ziko/ui";' in result.output
    assert 'return div("hi");' in result.output


def test_compile_with_overrides(runner: CliRunner, tmp_path: Path) -> None:
    source = tmp_path / "App.jsx"
    source.write_text("const x = <div />;\n")

    result = runner.invoke(
        cli, ["compile", str(source), "--binding", "ui", "--module", "@app/ui"]
    )

    assert result.exit_code == 0, result.output
    assert 'import { ui } from "@app/ui";' in result.output
    assert "const { div } = ui;" in result.output


def test_compile_to_file(runner: CliRunner, tmp_path: Path) -> None:
    source = tmp_path / "App.jsx"
    source.write_text("const x = <div />;\n")
    target = tmp_path / "out" / "App.js"

    result = runner.invoke(cli, ["compile", str(source), "--out", str(target)])

    assert result.exit_code == 0, result.output
    assert "div()" in target.read_text()


def test_compile_error_exits_nonzero(runner: CliRunner, tmp_path: Path) -> None:
    source = tmp_path / "Bad.jsx"
    source.write_text("const x = <div>;\n")

    result = runner.invoke(cli, ["compile", str(source)])
    assert result.exit_code == 1


def test_build(runner: CliRunner, tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.jsx").write_text("export default () => <main />;\n")
    out = tmp_path / "dist"

    result = runner.invoke(cli, ["build", str(src), "--out-dir", str(out)])

    assert result.exit_code == 0, result.output
    assert "Build complete" in result.output
    assert "main()" in (out / "App.js").read_text()


def test_build_failure(runner: CliRunner, tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "App.jsx").write_text("<ui.Button />;\n")

    result = runner.invoke(cli, ["build", str(src), "--out-dir", str(tmp_path / "dist")])
    assert result.exit_code == 1


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
