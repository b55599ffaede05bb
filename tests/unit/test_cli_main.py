from __future__ import annotations

import json
from pathlib import Path

from ctn_summary.cli import main as cli_main


def test_cli_missing_config_is_fatal(temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_cli_missing_source_directory_is_fatal(temp_workdir: Path, write_config: Path, capsys):
    (temp_workdir / "data").rmdir()
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR processing: Directory not found" in out


def test_cli_empty_directory_succeeds(temp_workdir: Path, write_config: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY files=0/0 success=0 failed=0 ctn=0" in out


def test_cli_explicit_files_and_json(temp_workdir: Path, write_config: Path, shipment_xlsx: bytes, capsys):
    src = temp_workdir / "upload.xlsx"
    src.write_bytes(shipment_xlsx)
    code = cli_main([str(src), "--json"])
    out = capsys.readouterr().out
    assert code == 0
    json_lines = [line for line in out.splitlines() if line.startswith("{")]
    assert len(json_lines) == 1
    data = json.loads(json_lines[0])
    assert data["containerNumber"] == "OOCU8186130"
    assert data["total"] == 38
    assert "SUMMARY files=1/1 success=1 failed=0 ctn=38" in out
    outputs = list((temp_workdir / "processed").glob("processed_*_upload.xlsx"))
    assert len(outputs) == 1


def test_cli_config_from_env_file(temp_workdir: Path, sample_config_yaml: str, monkeypatch, capsys):
    alt = temp_workdir / "alt.yml"
    alt.write_text(sample_config_yaml, encoding="utf-8")
    (temp_workdir / ".env").write_text(f"CTN_SUMMARY_CONFIG={alt}\n", encoding="utf-8")
    code = cli_main([])
    monkeypatch.delenv("CTN_SUMMARY_CONFIG", raising=False)
    assert code == 0
    assert "SUMMARY files=0/0" in capsys.readouterr().out


def test_cli_debug_mode_emits_debug_lines(temp_workdir: Path, write_config: Path, shipment_xlsx: bytes, capsys):
    (temp_workdir / "data" / "shipment.xlsx").write_bytes(shipment_xlsx)
    code = cli_main(["--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG sheet=装箱单 container=OOCU8186130" in out


def test_cli_json_output_is_capped_by_recent_limit(
    temp_workdir: Path, write_config: Path, sample_config_yaml: str, shipment_xlsx: bytes, capsys
):
    write_config.write_text(sample_config_yaml.replace("recent_limit: 10", "recent_limit: 2"), encoding="utf-8")
    for name in ("a.xlsx", "b.xlsx", "c.xlsx"):
        (temp_workdir / "data" / name).write_bytes(shipment_xlsx)
    code = cli_main(["--json"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY files=3/3 success=3 failed=0" in out
    json_lines = [line for line in out.splitlines() if line.startswith("{")]
    assert len(json_lines) == 2
    assert all(json.loads(line)["containerNumber"] == "OOCU8186130" for line in json_lines)
