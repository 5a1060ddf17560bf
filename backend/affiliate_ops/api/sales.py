from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form
from sqlalchemy.orm import Session
from affiliate_ops.api.deps import get_period
from affiliate_ops.core.config import settings
from affiliate_ops.core.database import get_db
from affiliate_ops.engine import PeriodSpec
from affiliate_ops.schemas.sales import (
    AccountDateRange,
    SalesData as SalesDataSchema,
    SalesDeleteResult,
    SalesUploadResult,
)
from affiliate_ops.services.exceptions import NotFoundError, SalesImportError
from affiliate_ops.services.reports import ReportService
from affiliate_ops.services.sales_import import SalesImportService

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.get("/", response_model=List[SalesDataSchema])
def list_sales(
    account_id: Optional[str] = None,
    period: PeriodSpec = Depends(get_period),
    db: Session = Depends(get_db),
):
    """Daily sales rows, newest first."""
    return ReportService(db).sales_rows(period, account_id)


@router.post("/upload", response_model=SalesUploadResult)
async def upload_sales(
    account_id: str = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Upload an account's daily sales CSV. Existing days are replaced."""
    if file.filename and not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only CSV files are supported")

    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File too large")

    try:
        return SalesImportService(db).import_csv(account_id, content)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except SalesImportError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{account_id}", response_model=SalesDeleteResult)
def delete_sales(
    account_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """Delete an account's sales rows; with both dates only that inclusive range."""
    if (start_date is None) != (end_date is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide both start_date and end_date")
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_date is before start_date")
    try:
        deleted = SalesImportService(db).delete_sales_data(account_id, start_date, end_date)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"account_id": account_id, "deleted": deleted}


@router.get("/date-ranges", response_model=List[AccountDateRange])
def sales_date_ranges(db: Session = Depends(get_db)):
    """First and last uploaded day per account."""
    return SalesImportService(db).account_date_ranges()
