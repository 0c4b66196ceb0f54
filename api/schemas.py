from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class FilterCriteriaModel(BaseModel):
    region: str = "all"
    product: str = "all"
    # Kept loose so that unparseable input reaches normalize_filters and fails there.
    min_amount: Optional[Union[float, str]] = None


class SortModel(BaseModel):
    key: Literal["amount", "date"] = "amount"


class SaleRecordModel(BaseModel):
    id: int
    product: str
    amount: float
    region: str
    date: str
    category: str


class LoadRequest(BaseModel):
    records: List[SaleRecordModel] = Field(default_factory=list)


class ViewResponse(BaseModel):
    total: int
    filtered: int
    records: List[SaleRecordModel]


class MetaListResponse(BaseModel):
    values: List[str]
