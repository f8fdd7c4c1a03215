"""Data models for sale records."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SaleRecord(BaseModel):
    """A single product sale as persisted in the record store."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Optional[int] = Field(default=None, description="Store row id (insertion order)")
    title: str = Field(..., description="Product name, also the category key")
    description: str
    image: str = Field(..., description="Opaque image reference")
    price: float
    sold: bool
    date_of_sale: datetime = Field(..., alias="dateOfSale")
