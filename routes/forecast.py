from fastapi import APIRouter, Query
from datetime import date
from typing import Optional

import config
from services.projection_service import build_forecast, build_balance
from services.forecast_dto import BalanceMonthDTO, ForecastResponseDTO
from utils.dates import parse_iso_date

router = APIRouter()


def _reference_date(as_of_date: Optional[str]):
    if as_of_date:
        return parse_iso_date(as_of_date)
    return date.today()


@router.get("/forecast")
def get_forecast(
    months_ahead: int = Query(config.FORECAST_MONTHS_AHEAD, ge=0, le=120),
    as_of_date: Optional[str] = Query(None),
):
    """
    Return the recurring-transaction forecast grouped by month.

    Query Parameters:
        months_ahead: Size of the window in calendar months.
        as_of_date (optional): Reference date in ISO format (YYYY-MM-DD).
                              Defaults to today if not provided.
    """
    try:
        as_of = _reference_date(as_of_date)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    _, months = build_forecast(months_ahead, reference_date=as_of)
    dto = ForecastResponseDTO.from_forecast(as_of, months_ahead, months)

    return {
        "reference_date": dto.reference_date,
        "months_ahead": dto.months_ahead,
        "total_income": dto.total_income,
        "total_expense": dto.total_expense,
        "months": [month.__dict__ for month in dto.months],
    }


@router.get("/balance/{year}")
def get_balance(
    year: int,
    include_forecast: bool = Query(True),
    as_of_date: Optional[str] = Query(None),
):
    """
    Return the January..December balance series for ``year``.

    The running balance starts from the previous year's net result.
    """
    try:
        as_of = _reference_date(as_of_date)
    except ValueError:
        return {"error": "Invalid date format. Use YYYY-MM-DD."}

    if year < 1 or year > 9999:
        return {"error": "Year must be between 1 and 9999."}

    buckets = build_balance(year, include_forecast=include_forecast, reference_date=as_of)
    return {
        "year": year,
        "months": [BalanceMonthDTO.from_bucket(b).__dict__ for b in buckets],
    }
