from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""ProcessedSummary: the result contract of one pipeline run.

Serialized with camelCase keys (``containerNumber``, ``warehouseSummary`` ...)
for callers that exchange it as JSON.
"""

__all__ = [
    "UPS_CODE",
    "WarehouseEntry",
    "ReferenceDetail",
    "ProcessedSummary",
    "warehouse_sort_key",
]

UPS_CODE = "UPS"


def warehouse_sort_key(code: str) -> tuple[bool, str]:
    # UPS は常に末尾
    return (code == UPS_CODE, code)


@dataclass(frozen=True)
class WarehouseEntry:
    warehouse: str
    ctn: int
    skid: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"warehouse": self.warehouse, "ctn": self.ctn, "skid": self.skid}


@dataclass(frozen=True)
class ReferenceDetail:
    type: str  # "Self" | "PD"
    reference1: str
    reference2: str
    ctn: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "reference1": self.reference1,
            "reference2": self.reference2,
            "ctn": self.ctn,
        }


@dataclass(frozen=True)
class ProcessedSummary:
    """Aggregated CTN summary of one shipment sheet.

    ``total`` is the running total accumulated while scanning; the rendered
    workbook uses ``grand_total`` (sum of both sections) instead.
    """
    container_number: str
    total: int
    warehouse_summary: tuple[WarehouseEntry, ...] = field(default_factory=tuple)
    reference_details: tuple[ReferenceDetail, ...] = field(default_factory=tuple)

    @property
    def warehouse_subtotal(self) -> int:
        return sum(e.ctn for e in self.warehouse_summary)

    @property
    def reference_subtotal(self) -> int:
        return sum(d.ctn for d in self.reference_details)

    @property
    def grand_total(self) -> int:
        return self.warehouse_subtotal + self.reference_subtotal

    def to_dict(self) -> dict[str, Any]:
        return {
            "containerNumber": self.container_number,
            "total": self.total,
            "warehouseSummary": [e.to_dict() for e in self.warehouse_summary],
            "referenceDetails": [d.to_dict() for d in self.reference_details],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ProcessedSummary:
        return ProcessedSummary(
            container_number=str(data.get("containerNumber", "")),
            total=int(data.get("total", 0)),
            warehouse_summary=tuple(
                WarehouseEntry(
                    warehouse=str(e["warehouse"]),
                    ctn=int(e["ctn"]),
                    skid=str(e.get("skid", "")),
                )
                for e in data.get("warehouseSummary", [])
            ),
            reference_details=tuple(
                ReferenceDetail(
                    type=str(d["type"]),
                    reference1=str(d["reference1"]),
                    reference2=str(d["reference2"]),
                    ctn=int(d["ctn"]),
                )
                for d in data.get("referenceDetails", [])
            ),
        )
