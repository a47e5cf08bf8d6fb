"""
FastAPI route handlers for the main API endpoints.
Exposes single-day and date-range price lookups.
"""

from datetime import date, datetime

import pytz
from fastapi import APIRouter, HTTPException, Query

from src.config import settings
from src.database.service import db_service
from src.exceptions import PriceAPIException
from src.logging_config import get_logger
from src.models.price import DailyPriceResponse, HealthResponse, PriceRangeResponse
from src.services.price_service import price_service
from src.utils.date_utils import range_length_days, today_in_market_timezone

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.
    Reports database reachability and when the last price was cached.
    """
    try:
        db_healthy = await db_service.health_check()
        last_cached = await db_service.get_latest_record_timestamp() if db_healthy else None

        last_cached_local = None
        if last_cached:
            # CURRENT_TIMESTAMP is stored without a zone; treat it as UTC
            market_tz = pytz.timezone(settings.market_timezone)
            if last_cached.tzinfo is None:
                last_cached = last_cached.replace(tzinfo=pytz.UTC)
            last_cached_local = last_cached.astimezone(market_tz)

        details = {
            "service": "electricity-price-api",
            "database": "ok" if db_healthy else "unavailable",
            "last_cached": last_cached_local.isoformat() if last_cached_local else None,
        }

        return HealthResponse(
            status="healthy" if db_healthy else "unhealthy",
            timestamp=datetime.now(),
            details=details
        )

    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return HealthResponse(
            status="unhealthy",
            timestamp=datetime.now(),
            details={"service": "electricity-price-api", "error": str(e)}
        )


@router.get("/prices", response_model=PriceRangeResponse)
async def get_prices_for_range(
    start_date: date = Query(description="First day of the range (YYYY-MM-DD)"),
    end_date: date = Query(description="Last day of the range, inclusive (YYYY-MM-DD)"),
):
    """
    Get the daily price for every day in an inclusive date range.

    Days not yet cached are fetched from the price source and cached.
    Days whose fetch failed are reported with price 0. A range whose
    start is after its end returns no prices.

    Raises:
        HTTPException: 400 if the range is too long, 500 for server errors.
    """
    try:
        if range_length_days(start_date, end_date) > settings.max_range_days:
            raise HTTPException(
                status_code=400,
                detail=f"Date range cannot be longer than {settings.max_range_days} days"
            )

        prices = await price_service.get_prices_for_range(start_date, end_date)
        return PriceRangeResponse(start_date=start_date, end_date=end_date, prices=prices)

    except HTTPException:
        raise
    except PriceAPIException as e:
        logger.error("Price API error", error=str(e), start_date=start_date.isoformat(), end_date=end_date.isoformat())
        raise HTTPException(status_code=500, detail="Internal server error")
    except Exception as e:
        logger.error("Unexpected error", error=str(e), start_date=start_date.isoformat(), end_date=end_date.isoformat())
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/prices/today", response_model=DailyPriceResponse)
async def get_price_for_today():
    """
    Get the daily price for today in the market timezone.
    """
    return await _daily_price(today_in_market_timezone())


@router.get("/prices/{price_date}", response_model=DailyPriceResponse)
async def get_price_for_date(price_date: date):
    """
    Get the daily price for one day.

    Returns price 0 when no price could be obtained for the day.
    """
    return await _daily_price(price_date)


async def _daily_price(price_date: date) -> DailyPriceResponse:
    try:
        price = await price_service.get_price(price_date)
        return DailyPriceResponse(date=price_date, price=price)

    except PriceAPIException as e:
        logger.error("Price API error", error=str(e), date=price_date.isoformat())
        raise HTTPException(status_code=500, detail="Internal server error")
    except Exception as e:
        logger.error("Unexpected error", error=str(e), date=price_date.isoformat())
        raise HTTPException(status_code=500, detail="Internal server error")
