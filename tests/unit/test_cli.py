"""Tests for CLI commands using Click's CliRunner."""

from __future__ import annotations

from click.testing import CliRunner

from guardscan.cli import main


def test_main_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    for command in ("scan", "check", "watch", "rules"):
        assert command in result.output


def test_main_version():
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_watch_help():
    runner = CliRunner()
    result = runner.invoke(main, ["watch", "--help"])
    assert result.exit_code == 0
    assert "ROOTS" in result.output


def test_scan_clean_workspace(tmp_path):
    (tmp_path / "ok.py").write_text("def add(a, b):\n    return a + b\n")
    runner = CliRunner()
    result = runner.invoke(main, ["scan", str(tmp_path)])
    assert result.exit_code == 0
    assert "No findings." in result.output


def test_scan_vulnerable_workspace_fails(workspace):
    runner = CliRunner()
    result = runner.invoke(main, ["scan", str(workspace)])
    assert result.exit_code == 1
    assert "Files with findings: 1" in result.output


def test_scan_exclude_option(workspace):
    runner = CliRunner()
    result = runner.invoke(main, ["scan", str(workspace), "--exclude", "**/vuln.js"])
    assert result.exit_code == 0
    assert "No findings." in result.output


def test_scan_missing_root(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, ["scan", str(tmp_path / "missing")])
    assert result.exit_code == 2


def test_check_critical_exits_nonzero(tmp_path):
    target = tmp_path / "app.js"
    target.write_text("const r = eval(userInput);\n")
    runner = CliRunner()
    result = runner.invoke(main, ["check", str(target)])
    assert result.exit_code == 1
    assert "Critical finding(s) detected" in result.output


def test_check_clean_file(tmp_path):
    target = tmp_path / "app.py"
    target.write_text("def add(a, b):\n    return a + b\n")
    runner = CliRunner()
    result = runner.invoke(main, ["check", str(target), "--domain", "secrets"])
    assert result.exit_code == 0
    assert "No findings." in result.output


def test_check_quality_prints_metrics(tmp_path):
    target = tmp_path / "app.js"
    target.write_text("// TODO tidy\nlet x = 1;\n")
    runner = CliRunner()
    result = runner.invoke(main, ["check", str(target), "-d", "quality"])
    assert result.exit_code == 0
    assert "Maintainability: 95/100" in result.output
    assert "Technical debt: 5" in result.output


def test_check_context_filters_rules(tmp_path):
    target = tmp_path / "init.js"
    target.write_text("db.eval('return 1')\n")
    runner = CliRunner()
    mongo = runner.invoke(main, ["check", str(target), "-d", "database", "-x", "mongodb"])
    mysql = runner.invoke(main, ["check", str(target), "-d", "database", "-x", "mysql"])
    assert "No findings." not in mongo.output
    assert "No findings." in mysql.output


def test_check_unknown_domain(tmp_path):
    target = tmp_path / "app.py"
    target.write_text("x = 1\n")
    runner = CliRunner()
    result = runner.invoke(main, ["check", str(target), "-d", "kernel"])
    assert result.exit_code == 2


def test_rules_lists_catalog():
    runner = CliRunner()
    result = runner.invoke(main, ["rules", "-d", "quality"])
    assert result.exit_code == 0
    assert "4 rule(s)" in result.output


def test_rules_include_custom(tmp_path):
    settings = tmp_path / "settings.yaml"
    (tmp_path / "extra.yaml").write_text(
        "rules:\n  - domain: quality\n    id: no-print\n    pattern: 'print\\('\n"
        "    message: Stray print\n"
    )
    settings.write_text("rules_files:\n  - extra.yaml\n")
    runner = CliRunner()
    result = runner.invoke(main, ["--config", str(settings), "rules", "-d", "quality"])
    assert result.exit_code == 0
    assert "5 rule(s)" in result.output


def test_bad_settings_file(tmp_path):
    settings = tmp_path / "settings.yaml"
    settings.write_text("- not\n- a mapping\n")
    runner = CliRunner()
    result = runner.invoke(main, ["--config", str(settings), "rules"])
    assert result.exit_code == 1
    assert "must be a mapping" in result.output
