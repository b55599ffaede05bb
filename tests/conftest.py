# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterable
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from ctn_summary.logging.init import reset_logging

SHEET_WIDTH = 14  # A..N

HEADER_ROW = [
    "分货号", "唛头", "参考号", "箱数CTN", "重量", "体积", "品名",
    "材质", "用途", "品牌", "型号", "件数", "目的仓库", "备注",
]
TITLE_ROW = ["Container No: OOCU8186130"] + [None] * (SHEET_WIDTH - 1)


def line(
    ref1: Any = None,
    ref2: Any = None,
    ctn: Any = None,
    warehouse: Any = None,
    note: Any = None,
) -> list[Any]:
    """One shipment row in the source column layout."""
    row: list[Any] = [None] * SHEET_WIDTH
    row[0] = ref1
    row[2] = ref2
    row[3] = ctn
    row[12] = warehouse
    row[13] = note
    return row


def build_xlsx(rows: Iterable[list[Any]], merges: Iterable[str] = (), title: str = "Sheet1") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for r, row in enumerate(rows, start=1):
        for c, value in enumerate(row, start=1):
            if value is not None:
                ws.cell(row=r, column=c, value=value)
    for rng in merges:
        ws.merge_cells(rng)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CTN_SUMMARY_CONFIG", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _reset_app_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./processed
max_file_size_bytes: 10485760
recent_limit: 10
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "summary.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_xlsx() -> Callable[..., bytes]:
    return build_xlsx


@pytest.fixture()
def line_row() -> Callable[..., list[Any]]:
    return line


@pytest.fixture()
def shipment_rows() -> list[list[Any]]:
    """Title, header and a representative mix of delivery types."""
    return [
        TITLE_ROW,
        HEADER_ROW,
        line("A100", "REF-1", 10, "YYZ3", "卡车派送"),
        line("A101", "REF-2", 5, "YYZ3", None),
        line("A102", "REF-3", 8, "ANY5", "UPS Express"),
        line("A103", "REF-4", 4, None, "自提"),
        line("A104", "REF-5", 3, "123 Main Street Toronto", "卡车派送"),
        line("A105", "REF-6", 6, "YVR2", None),
        line("A106", "REF-7", 2, "AMAZONX", None),  # unmatched
        line(None, None, "=SUM(D3:D9)", None, None),
        line("TOTAL", None, "Total", None, None),
    ]


@pytest.fixture()
def shipment_xlsx(shipment_rows: list[list[Any]]) -> bytes:
    return build_xlsx(shipment_rows, title="装箱单")


@pytest.fixture()
def data_dir_with_files(temp_workdir: Path, shipment_xlsx: bytes) -> list[Path]:
    files = []
    good = temp_workdir / "data" / "shipment.xlsx"
    good.write_bytes(shipment_xlsx)
    files.append(good)
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"not a workbook")
    files.append(bad)
    (temp_workdir / "data" / "readme.txt").write_text("ignore this", encoding="utf-8")
    return files


@pytest.fixture()
def header_row() -> list[Any]:
    return list(HEADER_ROW)


@pytest.fixture()
def title_row() -> list[Any]:
    return list(TITLE_ROW)
