"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdxdoc.cli import _build_parser, main

FIXTURE = Path(__file__).parent / "_fixtures" / "typedoc_project.json"


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "render", "project.json"])
    assert args.verbose is True
    assert args.command == "render"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["render", "project.json", "--verbose"])
    assert args.verbose is True
    assert args.project == "project.json"


def test_cli_render_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(["render", "p.json", "--output", "site", "--config", "cfg", "--no-navigation"])
    assert args.output == "site"
    assert args.config == "cfg"
    assert args.no_navigation is True


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve"])
    assert args.host == "127.0.0.1"
    assert args.port == 8000


def test_render_command_writes_pages(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = tmp_path / "docs"

    main(["render", str(FIXTURE), "--config", str(tmp_path), "--output", str(output)])

    assert (output / "api" / "functions" / "fetchuser.mdx").exists()
    assert (output / "mint.json").exists()
    assert "Rendered 5 page(s)" in capsys.readouterr().out


def test_render_command_respects_no_navigation(tmp_path: Path) -> None:
    output = tmp_path / "docs"
    main(["render", str(FIXTURE), "--config", str(tmp_path), "--output", str(output), "--no-navigation"])
    assert not (output / "mint.json").exists()


def test_render_command_reports_missing_project(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["render", str(tmp_path / "missing.json"), "--config", str(tmp_path)])

    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err
