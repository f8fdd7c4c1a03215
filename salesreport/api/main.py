"""FastAPI main application."""
import asyncio
import logging
from datetime import datetime
from typing import Optional

import httpx
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salesreport.config import config, Config
from salesreport.errors import (
    InvalidInput,
    InvalidWindow,
    ReportError,
    StoreUnavailable,
)
from salesreport.jobs.importer import import_records
from salesreport.report.aggregates import (
    CategoryAggregator,
    HistogramAggregator,
    StatisticsAggregator,
)
from salesreport.report.composer import ReportComposer
from salesreport.report.models import (
    CategoryCount,
    CombinedReport,
    HistogramBucket,
    ImportResponse,
    SearchPage,
    Statistics,
)
from salesreport.report.search import SearchEngine
from salesreport.report.window import resolve_window
from salesreport.store.records import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _store(request: Request) -> RecordStore:
    return request.app.state.store


@router.get("/import", response_model=ImportResponse)
async def import_transactions(request: Request, replace: bool = False):
    """Import the configured feed (FEED_URL) into the store."""
    result = await import_records(
        _store(request), replace=replace, transport=request.app.state.feed_transport
    )
    return ImportResponse(message="Transactions imported successfully!", count=result.count)


@router.get("/search", response_model=SearchPage)
async def search(
    request: Request,
    search: str = "",
    page: Optional[str] = "1",
    per_page: Optional[str] = Query(None, alias="perPage"),
):
    """Search title/description with pagination."""
    return await request.app.state.search_engine.search(search, page, per_page)


@router.get("/statistics", response_model=Statistics)
async def statistics(request: Request, month: Optional[str] = None, year: Optional[str] = None):
    window = resolve_window(month, year)
    return await StatisticsAggregator(_store(request)).statistics(window)


@router.get("/barchart", response_model=list[HistogramBucket])
async def barchart(request: Request, month: Optional[str] = None, year: Optional[str] = None):
    window = resolve_window(month, year)
    return await HistogramAggregator(_store(request)).histogram(window)


@router.get("/piechart", response_model=list[CategoryCount])
async def piechart(request: Request, month: Optional[str] = None, year: Optional[str] = None):
    window = resolve_window(month, year)
    return await CategoryAggregator(_store(request)).categories(window)


@router.get("/combined", response_model=CombinedReport)
async def combined(request: Request, month: Optional[str] = None, year: Optional[str] = None):
    """Statistics, bar chart and pie chart data for one month."""
    composer: ReportComposer = request.app.state.composer
    try:
        return await asyncio.wait_for(
            composer.combined_report(month, year), timeout=config.REPORT_TIMEOUT
        )
    except asyncio.TimeoutError:
        raise StoreUnavailable(
            "Timed out building combined report",
            error=f"exceeded {config.REPORT_TIMEOUT}s",
        ) from None


async def report_error_handler(request: Request, exc: ReportError) -> JSONResponse:
    """Map engine errors to 400/500 JSON payloads."""
    if isinstance(exc, (InvalidWindow, InvalidInput)):
        return JSONResponse(status_code=400, content=exc.to_payload())

    logger.error(f"{request.url.path} failed: {exc.message} ({exc.error})", exc_info=exc)
    payload = exc.to_payload()
    payload.setdefault("error", type(exc).__name__)
    return JSONResponse(status_code=500, content=payload)


def create_app(
    store: Optional[RecordStore] = None,
    feed_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    app = FastAPI(title="Sales Report API", version="0.1.0")
    app.state.store = store or RecordStore()
    app.state.feed_transport = feed_transport
    app.state.search_engine = SearchEngine(app.state.store)
    app.state.composer = ReportComposer(app.state.store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ReportError, report_error_handler)
    app.include_router(router, prefix=config.API_PREFIX)

    @app.on_event("startup")
    async def startup():
        """Initialize on startup."""
        await app.state.store.initialize()

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.utcnow().isoformat(),
            "store_connected": await app.state.store.test_connection(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from salesreport.logging_conf import setup_logging

    setup_logging()
    Config.validate()
    uvicorn.run(app, host=config.HOST, port=config.PORT)
