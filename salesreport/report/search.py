"""Free-text search with pagination over the whole record store."""
import logging
import math
from typing import Any, Optional

from salesreport.config import config
from salesreport.errors import InvalidInput
from salesreport.report.models import SearchPage
from salesreport.store.filters import RecordFilter
from salesreport.store.records import RecordStore

logger = logging.getLogger(__name__)

# Price is numeric and never substring-matched
SEARCH_FIELDS = ("title", "description")

# Largest OFFSET/LIMIT SQLite can bind
MAX_SQL_OFFSET = 2**63 - 1


def _parse_positive(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer", error=repr(value))
    try:
        number = int(str(value).strip()) if not isinstance(value, int) else value
    except ValueError:
        raise InvalidInput(f"{name} must be an integer", error=repr(value)) from None
    if number < 1:
        raise InvalidInput(f"{name} must be >= 1", error=str(number))
    return number


class SearchEngine:
    """Case-insensitive title/description search returning one page."""

    def __init__(self, store: RecordStore, max_per_page: Optional[int] = None):
        self.store = store
        # 0 disables the page size ceiling
        self.max_per_page = config.MAX_PER_PAGE if max_per_page is None else max_per_page

    async def search(
        self, query: Optional[str] = "", page: Any = 1, per_page: Any = None
    ) -> SearchPage:
        """Return page ``page`` of records matching ``query``.

        Pages are 1-based. A page past the end is empty, not an error.
        """
        page_int = _parse_positive(page, "page")
        per_page_int = _parse_positive(
            config.DEFAULT_PER_PAGE if per_page is None else per_page, "perPage"
        )
        if self.max_per_page and per_page_int > self.max_per_page:
            raise InvalidInput(
                f"perPage must be <= {self.max_per_page}", error=str(per_page_int)
            )

        flt = RecordFilter(text=query or "", text_fields=SEARCH_FIELDS)
        skip = (page_int - 1) * per_page_int

        async with self.store.snapshot() as reader:
            if skip > MAX_SQL_OFFSET:
                records = []
            else:
                records = await reader.find(
                    flt, skip=skip, limit=min(per_page_int, MAX_SQL_OFFSET)
                )
            total = await reader.count(flt)

        logger.debug(f"Search {query!r} page {page_int}: {len(records)}/{total}")
        return SearchPage(
            records=records,
            total=total,
            page=page_int,
            per_page=per_page_int,
            total_pages=math.ceil(total / per_page_int),
        )
