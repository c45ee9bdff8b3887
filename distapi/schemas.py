from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class FilterStateModel(BaseModel):
    search_query: str = ""
    supplier_ids: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    license_nos: List[str] = Field(default_factory=list)
    model_ids: List[str] = Field(default_factory=list)
    customer_ids: List[str] = Field(default_factory=list)
    lot_query: str = ""
    serial_query: str = ""
    time_zone_range: Tuple[int, int] = (-12, 12)


class RecordModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=(), coerce_numbers_to_str=True)

    supplier_id: str = Field(default="", alias="SupplierID")
    category: str = Field(default="", alias="Category")
    license_no: str = Field(default="", alias="LicenseNo")
    model: str = Field(default="", alias="Model")
    lot_no: str = Field(default="", alias="LotNO")
    serial_no: str = Field(default="", alias="SerialNo")
    customer_id: str = Field(default="", alias="CustomerID")
    deliver_date: str = Field(default="", alias="DeliverDate")
    quantity: int = Field(default=0, alias="Quantity")


class DistributionRequest(BaseModel):
    filters: FilterStateModel = Field(default_factory=FilterStateModel)
    records: Optional[List[RecordModel]] = None
    comparison_records: Optional[List[RecordModel]] = None
    comparison_mode: Literal["full", "reduced"] = "full"


class IngestRequest(BaseModel):
    text: str = ""
