"""Dashboard and sales reports over a reporting period."""
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from affiliate_ops.api.deps import get_period
from affiliate_ops.core.database import get_db
from affiliate_ops.engine import PeriodSpec
from affiliate_ops.schemas.report import DashboardMetrics, SalesReport
from affiliate_ops.services.exports import sales_report_csv, sales_report_filename
from affiliate_ops.services.reports import ReportService

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/dashboard", response_model=DashboardMetrics)
def dashboard(period: PeriodSpec = Depends(get_period), db: Session = Depends(get_db)):
    return ReportService(db).dashboard(period)


@router.get("/sales", response_model=SalesReport)
def sales_report(
    account_id: Optional[str] = None,
    period: PeriodSpec = Depends(get_period),
    db: Session = Depends(get_db),
):
    return ReportService(db).sales_report(period, account_id)


@router.get("/sales/export")
def export_sales_report(
    account_id: Optional[str] = None,
    period: PeriodSpec = Depends(get_period),
    db: Session = Depends(get_db),
):
    rows = ReportService(db).sales_rows(period, account_id)
    return Response(
        content=sales_report_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{sales_report_filename()}"'},
    )
