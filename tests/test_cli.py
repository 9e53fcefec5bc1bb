"""Tests for the command line entry point."""

from equation_citator.cli import main, parse_args


def test_parse_args_defaults():
    args = parse_args(["--input-dir", "vault"])
    assert args.config == "configs/config.yaml"
    assert args.input_dir == "vault"
    assert not args.no_recursive
    assert not args.dry_run
    assert args.log_level == "INFO"


def test_main_renumbers_vault(config_file, sample_note, tmp_path, capsys):
    vault = tmp_path / "vault"
    vault.mkdir()
    note = vault / "note.md"
    note.write_text(sample_note, encoding="utf-8")

    code = main(["--input-dir", str(vault), "--config", config_file(), "--log-level", "WARNING"])

    assert code == 0
    assert "\\tag{1.1.1}" in note.read_text(encoding="utf-8")
    assert "Notes changed: 1" in capsys.readouterr().out


def test_main_reports_failures(config_file, tmp_path):
    vault = tmp_path / "vault"
    vault.mkdir()
    (vault / "bad.md").write_bytes(b"\xff\xfe\xfa")

    assert main(["--input-dir", str(vault), "--config", config_file(), "--dry-run"]) == 1
