"""
Report Endpoints

Management report data and its PDF rendition.
"""

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from typing import Optional, Tuple

from autofix.models.schemas import ReportSummary
from autofix.services.analytics import parse_range_bound
from autofix.services.pdf_reports import management_report_filename, render_management_report
from autofix.services.shop_data import get_shop_data

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_report_range(start: Optional[str], end: Optional[str]) -> Tuple[Optional[datetime], Optional[datetime]]:
    """
    Raises:
        ValueError on an unparseable bound or start after end
    """
    start_dt = parse_range_bound(start)
    end_dt = parse_range_bound(end, end_of_day=True)
    if start_dt and end_dt and start_dt > end_dt:
        raise ValueError("start must not be after end")
    return start_dt, end_dt


@router.get("/summary", response_model=ReportSummary)
async def get_report_summary(
    start: Optional[str] = Query(None, description="Start date (YYYY-MM-DD or ISO 8601)"),
    end: Optional[str] = Query(None, description="End date (YYYY-MM-DD or ISO 8601), inclusive")
):
    """
    Financial, status and inventory summary

    - **start**: Only budgets created on/after this date
    - **end**: Only budgets created on/before this date

    Inventory figures always cover the whole stock.
    """
    try:
        start_dt, end_dt = parse_report_range(start, end)
        return await get_shop_data().get_report_summary(start_dt, end_dt)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/management.pdf")
async def download_management_report(
    start: Optional[str] = Query(None, description="Start date (YYYY-MM-DD or ISO 8601)"),
    end: Optional[str] = Query(None, description="End date (YYYY-MM-DD or ISO 8601), inclusive")
):
    """
    Management report PDF (financial summary, stock summary, reorder list)
    """
    shop = get_shop_data()
    try:
        start_dt, end_dt = parse_report_range(start, end)
        summary = await shop.get_report_summary(start_dt, end_dt)
        settings = await shop.get_company_settings()
        generated_at = datetime.now()
        content = render_management_report(summary, settings, generated_at)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"[Reports] Management report failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    filename = management_report_filename(generated_at)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
