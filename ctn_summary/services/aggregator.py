from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.grid import SheetGrid
from ..models.line_item import extract_line_item
from ..models.summary import ProcessedSummary, ReferenceDetail, WarehouseEntry, warehouse_sort_key
from .classifier import (
    CLASSIFICATION_RULES,
    Bucket,
    ClassificationRule,
    DestinationBucket,
    DetailBucket,
    classify,
)

"""Row scan: classify each data row and accumulate CTN per bucket."""

__all__ = [
    "EMPTY_ROW_LIMIT",
    "AggregationState",
    "aggregate",
]

logger = logging.getLogger(__name__)

# 連続空行がこの数に達したらデータ領域の終端とみなす
EMPTY_ROW_LIMIT = 10


@dataclass
class AggregationState:
    """Accumulators for one scan. Additions only; dicts keep insertion order."""
    destinations: dict[str, int] = field(default_factory=dict)
    details: dict[DetailBucket, int] = field(default_factory=dict)
    total: int = 0
    dropped_rows: list[int] = field(default_factory=list)

    def add(self, bucket: Bucket, ctn: int) -> None:
        if isinstance(bucket, DestinationBucket):
            self.destinations[bucket.warehouse] = self.destinations.get(bucket.warehouse, 0) + ctn
        else:
            self.details[bucket] = self.details.get(bucket, 0) + ctn

    def warehouse_summary(self) -> tuple[WarehouseEntry, ...]:
        return tuple(
            WarehouseEntry(warehouse=code, ctn=ctn)
            for code, ctn in sorted(self.destinations.items(), key=lambda kv: warehouse_sort_key(kv[0]))
        )

    def reference_details(self) -> tuple[ReferenceDetail, ...]:
        return tuple(
            ReferenceDetail(type=b.category, reference1=b.reference1, reference2=b.reference2, ctn=ctn)
            for b, ctn in self.details.items()
        )

    def to_summary(self, container_number: str) -> ProcessedSummary:
        return ProcessedSummary(
            container_number=container_number,
            total=self.total,
            warehouse_summary=self.warehouse_summary(),
            reference_details=self.reference_details(),
        )


def aggregate(
    grid: SheetGrid,
    data_start_row: int,
    rules: Sequence[ClassificationRule] = CLASSIFICATION_RULES,
) -> AggregationState:
    """Scan rows from ``data_start_row`` and accumulate their CTN.

    A row's CTN enters the running total once it passes the skip policy, before
    classification; rows the rules then drop still count towards ``total``.
    """
    state = AggregationState()
    consecutive_empty = 0
    for row in range(data_start_row, grid.row_count):
        if grid.is_row_empty(row):
            consecutive_empty += 1
            if consecutive_empty >= EMPTY_ROW_LIMIT:
                logger.debug(f"{EMPTY_ROW_LIMIT} consecutive empty rows at row {row + 1} -> stop")
                break
            continue
        consecutive_empty = 0

        item = extract_line_item(grid, row)
        if item is None:
            continue

        state.total += item.ctn
        result = classify(item, rules)
        if result.bucket is None:
            state.dropped_rows.append(item.row_number)
            logger.debug(
                f"row {item.row_number}: unmatched rule={result.rule} "
                f"note={item.note!r} warehouse={item.warehouse_code!r} ctn={item.ctn}"
            )
            continue
        state.add(result.bucket, item.ctn)
        logger.debug(f"row {item.row_number}: {result.rule} -> {result.bucket} ctn={item.ctn}")

    return state
