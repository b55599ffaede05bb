from __future__ import annotations

import json
from pathlib import Path

import pytest

from ctn_summary.config.loader import load_config
from ctn_summary.models.processed_file import FileStatus
from ctn_summary.models.processing_result import ProcessingResult
from ctn_summary.services.orchestrator import ProcessingError, process_all, scan_excel_files
from ctn_summary.services.storage import ProcessedFileStore

"""Batch run over a source directory with one good and one broken workbook."""


def test_scan_excel_files_sorted_and_filtered(temp_workdir: Path, data_dir_with_files):
    files = scan_excel_files(temp_workdir / "data")
    assert [f.name for f in files] == ["broken.xlsx", "shipment.xlsx"]


def test_scan_excel_files_errors(temp_workdir: Path):
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_excel_files(temp_workdir / "missing")
    f = temp_workdir / "file.txt"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_excel_files(f)


def test_process_all_empty_directory(temp_workdir: Path, write_config: Path):
    result = process_all(load_config(write_config))
    assert isinstance(result, ProcessingResult)
    assert (result.success_files, result.failed_files, result.total_ctn) == (0, 0, 0)
    assert result.file_stats == []
    assert result.elapsed_seconds >= 0


def test_process_all_partial_failure(temp_workdir: Path, write_config: Path, data_dir_with_files):
    store = ProcessedFileStore()
    result = process_all(load_config(write_config), store=store)

    assert result.success_files == 1
    assert result.failed_files == 1
    assert result.total_ctn == 38

    stats = {s.file_name: s for s in result.file_stats or []}
    assert stats["shipment.xlsx"].status == "completed"
    assert stats["shipment.xlsx"].processed_filename is not None
    assert (temp_workdir / "processed" / stats["shipment.xlsx"].processed_filename).exists()
    assert stats["broken.xlsx"].status == "failed"
    assert "unreadable workbook" in (stats["broken.xlsx"].error or "")

    statuses = sorted(r.status.value for r in store.recent(10))
    assert statuses == [FileStatus.COMPLETED.value, FileStatus.FAILED.value]

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entries = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [e["file"] for e in entries] == ["broken.xlsx"]
    assert entries[0]["error_type"] == "SPREADSHEET_READ_ERROR"


def test_process_all_rejects_oversized_file(temp_workdir: Path, write_config: Path, shipment_xlsx: bytes):
    write_config.write_text(
        write_config.read_text(encoding="utf-8").replace("10485760", "100"), encoding="utf-8"
    )
    (temp_workdir / "data" / "big.xlsx").write_bytes(shipment_xlsx)
    store = ProcessedFileStore()
    result = process_all(load_config(write_config), store=store)
    assert result.failed_files == 1
    assert len(store) == 0
    assert "too large" in (result.file_stats or [])[0].error


def test_process_all_explicit_files(temp_workdir: Path, write_config: Path, shipment_xlsx: bytes):
    f = temp_workdir / "elsewhere.xlsx"
    f.write_bytes(shipment_xlsx)
    result = process_all(load_config(write_config), files=[f])
    assert result.success_files == 1
    assert result.total_ctn == 38
