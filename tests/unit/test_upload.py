from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from ctn_summary.logging.error_log import ErrorLogBuffer
from ctn_summary.models.processed_file import FileStatus
from ctn_summary.services.storage import ProcessedFileStore
from ctn_summary.services.upload import (
    UploadValidationError,
    load_summary,
    make_processed_filename,
    output_path,
    process_upload,
    safe_filename,
    validate_upload,
)


def test_validate_upload_rules():
    validate_upload("ok.xlsx", 10)
    with pytest.raises(UploadValidationError, match="Only .xlsx"):
        validate_upload("data.xls", 10)
    with pytest.raises(UploadValidationError):
        validate_upload("", 10)
    with pytest.raises(UploadValidationError, match="empty"):
        validate_upload("ok.xlsx", 0)
    with pytest.raises(UploadValidationError, match="too large"):
        validate_upload("ok.xlsx", 11, max_file_size=10)


def test_safe_filename_replaces_unsafe_chars():
    assert safe_filename("装箱单 (1).xlsx") == "___ _1_.xlsx"
    assert safe_filename("a-b_c.d e.xlsx") == "a-b_c.d e.xlsx"


def test_make_processed_filename():
    assert make_processed_filename("in/put.xlsx", 1700000000000) == "processed_1700000000000_in_put.xlsx"
    assert make_processed_filename("x.xlsx").startswith("processed_")


def test_process_upload_success(tmp_path: Path, shipment_xlsx: bytes):
    store = ProcessedFileStore()
    record = process_upload("shipment.xlsx", shipment_xlsx, store=store, output_dir=tmp_path / "out")
    assert record.status is FileStatus.COMPLETED
    assert record.file_size == len(shipment_xlsx)
    assert record.total_records == 38
    assert record.error_message is None
    written = tmp_path / "out" / record.processed_filename
    assert written.exists() and written.stat().st_size > 0
    assert store.get(record.id) == record

    summary = load_summary(store, record.id)
    assert summary.container_number == "OOCU8186130"
    assert output_path(store, record.id, tmp_path / "out") == written


def test_process_upload_rejection_creates_no_record(tmp_path: Path):
    store = ProcessedFileStore()
    with pytest.raises(UploadValidationError):
        process_upload("notes.txt", b"abc", store=store, output_dir=tmp_path)
    assert len(store) == 0


def test_process_upload_malformed_workbook_fails(tmp_path: Path):
    store = ProcessedFileStore()
    error_log = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    record = process_upload("broken.xlsx", b"garbage", store=store, output_dir=tmp_path / "out", error_log=error_log)
    assert record.status is FileStatus.FAILED
    assert "unreadable workbook" in (record.error_message or "")
    assert not (tmp_path / "out").exists() or not any((tmp_path / "out").iterdir())

    assert len(error_log.records) == 1
    rec = error_log.records[0]
    assert rec.error_type == "SPREADSHEET_READ_ERROR"
    assert rec.row == -1
    path = error_log.flush()
    assert path is not None
    assert json.loads(path.read_text(encoding="utf-8").splitlines()[0])["file"] == "broken.xlsx"

    with pytest.raises(LookupError):
        load_summary(store, record.id)
    with pytest.raises(LookupError):
        output_path(store, record.id, tmp_path / "out")


def test_process_upload_render_failure_fails(tmp_path: Path, shipment_xlsx: bytes):
    from ctn_summary.excel.writer import WorkbookRenderError

    store = ProcessedFileStore()
    error_log = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    with patch("ctn_summary.services.upload.render_summary", side_effect=WorkbookRenderError("bad style")):
        record = process_upload(
            "shipment.xlsx", shipment_xlsx, store=store, output_dir=tmp_path / "out", error_log=error_log
        )
    assert record.status is FileStatus.FAILED
    assert record.error_message == "bad style"
    assert error_log.records[0].error_type == "WORKBOOK_RENDER_ERROR"


def test_load_summary_unknown_id():
    with pytest.raises(LookupError):
        load_summary(ProcessedFileStore(), 1)
