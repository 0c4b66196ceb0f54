from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from core.errors import ValidationError


RECORD_FIELDS = ("id", "product", "amount", "region", "date", "category")


@dataclass(frozen=True)
class SaleRecord:
    id: int
    product: str
    amount: float
    region: str
    date: str
    category: str

    @property
    def month(self) -> str:
        return self.date[:7]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def parse_iso_date(value: object) -> Optional[date]:
    """Parse a strict `YYYY-MM-DD` calendar date, returning None when malformed."""
    if not isinstance(value, str) or len(value) != 10:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def validate_record(record: SaleRecord) -> None:
    rid = record.id
    if isinstance(rid, bool) or not isinstance(rid, int) or rid <= 0:
        raise ValidationError(f"record id must be a positive integer, got {rid!r}", field="id")
    amount = record.amount
    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"record {rid}: amount must be > 0, got {amount!r}", field="amount", record_id=rid)
    if parse_iso_date(record.date) is None:
        raise ValidationError(f"record {rid}: malformed date {record.date!r}", field="date", record_id=rid)
    for name in ("product", "region", "category"):
        value = getattr(record, name)
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"record {rid}: {name} must be a non-empty string", field=name, record_id=rid)


def validate_records(records: Iterable[SaleRecord]) -> Tuple[SaleRecord, ...]:
    out: List[SaleRecord] = []
    seen_ids = set()
    for record in records:
        if not isinstance(record, SaleRecord):
            raise ValidationError(f"expected SaleRecord, got {type(record).__name__}")
        validate_record(record)
        if record.id in seen_ids:
            raise ValidationError(f"duplicate record id {record.id}", field="id", record_id=record.id)
        seen_ids.add(record.id)
        out.append(record)
    return tuple(out)


def _coerce_amount(value: object, rid: object) -> float:
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"record {rid}: amount {value!r} is not a number", field="amount") from None
    return amount


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> List[SaleRecord]:
    """Build records from dict rows (provider output, JSON bodies).

    Values are coerced to their field types; anything that cannot be coerced
    raises ValidationError. Range checks happen later in `RecordStore.load`.
    """
    out: List[SaleRecord] = []
    for idx, row in enumerate(rows):
        missing = [f for f in RECORD_FIELDS if f not in row or row[f] is None]
        if missing:
            raise ValidationError(f"row {idx}: missing field(s) {', '.join(missing)}", field=missing[0])
        raw_id = row["id"]
        if isinstance(raw_id, bool):
            raise ValidationError(f"row {idx}: id {raw_id!r} is not an integer", field="id")
        try:
            rid = int(raw_id)
        except (TypeError, ValueError):
            raise ValidationError(f"row {idx}: id {raw_id!r} is not an integer", field="id") from None
        if isinstance(raw_id, float) and raw_id != rid:
            raise ValidationError(f"row {idx}: id {raw_id!r} is not an integer", field="id")
        out.append(
            SaleRecord(
                id=rid,
                product=str(row["product"]),
                amount=_coerce_amount(row["amount"], rid),
                region=str(row["region"]),
                date=str(row["date"]),
                category=str(row["category"]),
            )
        )
    return out


def records_to_frame(records: Sequence[SaleRecord]) -> pd.DataFrame:
    """Tabular copy of the records for grouping, rows in input order."""
    if not records:
        return pd.DataFrame(columns=list(RECORD_FIELDS) + ["month"])
    df = pd.DataFrame([r.to_dict() for r in records], columns=list(RECORD_FIELDS))
    df["month"] = df["date"].str.slice(0, 7)
    return df


class RecordStore:
    """Holds the immutable full dataset and the currently active (filtered) view.

    The full dataset is replaced only by `load`; the view is replaced wholesale
    by `set_active_view`/`reset`. Accessors return the stored tuples, not copies.
    """

    def __init__(self) -> None:
        self._full: Tuple[SaleRecord, ...] = ()
        self._view: Tuple[SaleRecord, ...] = ()
        self._member_ids: frozenset = frozenset()

    def load(self, records: Iterable[SaleRecord]) -> None:
        validated = validate_records(records)
        self._full = validated
        self._view = validated
        self._member_ids = frozenset(id(r) for r in validated)

    @property
    def full_dataset(self) -> Tuple[SaleRecord, ...]:
        return self._full

    @property
    def active_view(self) -> Tuple[SaleRecord, ...]:
        return self._view

    def get_full_dataset(self) -> Tuple[SaleRecord, ...]:
        return self._full

    def get_active_view(self) -> Tuple[SaleRecord, ...]:
        return self._view

    def set_active_view(self, records: Iterable[SaleRecord]) -> None:
        view = tuple(records)
        for record in view:
            if id(record) not in self._member_ids:
                rid = getattr(record, "id", None)
                raise ValidationError(f"record {rid!r} is not part of the loaded dataset", field="id", record_id=rid)
        self._view = view

    def reset(self) -> None:
        self._view = self._full

    def __len__(self) -> int:
        return len(self._full)
