"""Response models for search and reporting."""
from pydantic import BaseModel, ConfigDict, Field

from salesreport.parse.models import SaleRecord


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SearchPage(_Payload):
    """One page of search results plus pagination metadata."""

    records: list[SaleRecord] = Field(default_factory=list)
    total: int
    page: int
    per_page: int = Field(..., alias="perPage")
    total_pages: int = Field(..., alias="totalPages")


class Statistics(_Payload):
    """Sales totals for a month window."""

    total_sales: float = Field(0, alias="totalSales")
    sold_count: int = Field(0, alias="soldCount")
    not_sold_count: int = Field(0, alias="notSoldCount")


class HistogramBucket(_Payload):
    """Record count for one price range."""

    range_label: str = Field(..., alias="rangeLabel")
    count: int = 0


class CategoryCount(_Payload):
    """Record count for one distinct title."""

    category: str
    count: int


class CombinedReport(_Payload):
    """Statistics, histogram and categories for the same window."""

    statistics: Statistics
    histogram: list[HistogramBucket]
    categories: list[CategoryCount]


class ImportResponse(_Payload):
    """Result of a bulk import."""

    message: str
    count: int
