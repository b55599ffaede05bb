from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..models.line_item import LineItem
from ..models.summary import UPS_CODE

"""Delivery classification rules.

Rules are evaluated top to bottom and the first rule whose ``applies``
predicate matches decides the row. A matched rule may still place the row
nowhere (``place`` returns None), e.g. a self-pickup row without both
reference numbers; such rows are dropped.

    1. ups                 note contains "UPS"                -> UPS destination
    2. self_pickup         note contains 自提                  -> Self detail
    3. truck_long_address  note contains 卡车派送, code len > 4 -> PD detail
    4. warehouse_code      code non-empty, len <= 4            -> code destination
    5. fallback            note contains 卡车派送               -> PD detail
"""

__all__ = [
    "SELF_PICKUP_MARKER",
    "TRUCK_DELIVERY_MARKER",
    "MAX_WAREHOUSE_CODE_LENGTH",
    "SELF_CATEGORY",
    "PD_CATEGORY",
    "DestinationBucket",
    "DetailBucket",
    "Bucket",
    "ClassificationRule",
    "Classification",
    "CLASSIFICATION_RULES",
    "classify",
]

SELF_PICKUP_MARKER = "自提"
TRUCK_DELIVERY_MARKER = "卡车派送"
MAX_WAREHOUSE_CODE_LENGTH = 4

SELF_CATEGORY = "Self"
PD_CATEGORY = "PD"


@dataclass(frozen=True)
class DestinationBucket:
    warehouse: str


@dataclass(frozen=True)
class DetailBucket:
    category: str
    reference1: str
    reference2: str


Bucket = DestinationBucket | DetailBucket


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    applies: Callable[[LineItem], bool]
    place: Callable[[LineItem], Bucket | None]


@dataclass(frozen=True)
class Classification:
    rule: str
    bucket: Bucket | None

    @property
    def dropped(self) -> bool:
        return self.bucket is None


def _detail(category: str) -> Callable[[LineItem], Bucket | None]:
    def place(item: LineItem) -> Bucket | None:
        if not item.has_references:
            return None
        return DetailBucket(category, item.reference1, item.reference2)
    return place


def _is_short_code(item: LineItem) -> bool:
    return 0 < len(item.warehouse_code) <= MAX_WAREHOUSE_CODE_LENGTH


CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="ups",
        applies=lambda item: UPS_CODE in item.note,
        place=lambda item: DestinationBucket(UPS_CODE),
    ),
    ClassificationRule(
        name="self_pickup",
        applies=lambda item: SELF_PICKUP_MARKER in item.note,
        place=_detail(SELF_CATEGORY),
    ),
    ClassificationRule(
        name="truck_long_address",
        applies=lambda item: (
            TRUCK_DELIVERY_MARKER in item.note
            and len(item.warehouse_code) > MAX_WAREHOUSE_CODE_LENGTH
        ),
        place=_detail(PD_CATEGORY),
    ),
    ClassificationRule(
        name="warehouse_code",
        applies=_is_short_code,
        place=lambda item: DestinationBucket(item.warehouse_code),
    ),
    # 3 と条件が一部重複するが、倉庫コード長の制約なしで PD として拾う
    ClassificationRule(
        name="fallback",
        applies=lambda item: True,
        place=lambda item: (
            _detail(PD_CATEGORY)(item) if TRUCK_DELIVERY_MARKER in item.note else None
        ),
    ),
)


def classify(item: LineItem, rules: Sequence[ClassificationRule] = CLASSIFICATION_RULES) -> Classification:
    for rule in rules:
        if rule.applies(item):
            return Classification(rule=rule.name, bucket=rule.place(item))
    return Classification(rule="", bucket=None)
