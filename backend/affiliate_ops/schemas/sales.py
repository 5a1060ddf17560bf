from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal


class SalesDataBase(BaseModel):
    date: date
    clicks: int = Field(default=0, ge=0)
    orders: int = Field(default=0, ge=0)
    gross_commission: Decimal = Field(default=Decimal("0"), ge=0)
    products_sold: int = Field(default=0, ge=0)
    total_purchases: Decimal = Field(default=Decimal("0"), ge=0)
    new_buyers: int = Field(default=0, ge=0)


class SalesData(SalesDataBase):
    id: str
    account_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SalesUploadResult(BaseModel):
    account_id: str
    rows_parsed: int
    rows_skipped: int
    inserted: int
    updated: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class SalesDeleteResult(BaseModel):
    account_id: str
    deleted: int


class AccountDateRange(BaseModel):
    account_id: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    record_count: int = 0
